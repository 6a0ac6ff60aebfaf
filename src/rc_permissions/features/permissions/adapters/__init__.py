"""Permission adapters."""

from .redis_cache import RedisAccessLevelCache, groups_digest

__all__ = ["RedisAccessLevelCache", "groups_digest"]
