"""Redis cache for effective access levels."""

import hashlib
import logging
from typing import Optional, Sequence

import redis.asyncio as redis
from redis.exceptions import RedisError

from ....config.constants import AccessLevel, CacheKeys, CacheTTL
from ....config.settings import PermissionSettings
from ....core.exceptions import CacheError, ConfigurationError


logger = logging.getLogger(__name__)


def groups_digest(group_memberships: Sequence[str]) -> str:
    """Stable digest of a membership set, independent of order and duplicates."""
    joined = "\n".join(sorted(set(group_memberships or ())))
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()[:16]


class RedisAccessLevelCache:
    """AccessLevelCache implementation on redis.asyncio.

    Keys embed the RC id and its generation. The generation counter lives
    outside the RC's key pattern, so the pattern scan after a grant mutation
    never deletes it.
    """

    def __init__(self, redis_client: redis.Redis, ttl: int = CacheTTL.EFFECTIVE_ACCESS):
        if redis_client is None:
            raise ValueError("Redis client is required")
        self._redis = redis_client
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: PermissionSettings) -> "RedisAccessLevelCache":
        if not settings.is_cache_enabled:
            raise ConfigurationError("RC_PERMISSIONS_REDIS_URL is not set")
        client = redis.from_url(settings.redis_url, decode_responses=True)
        logger.info("Redis access-level cache configured")
        return cls(client, ttl=settings.cache_ttl_access)

    @staticmethod
    def make_key(
        rc_id: int, identifier: str, group_memberships: Sequence[str], generation: int = 0
    ) -> str:
        return CacheKeys.EFFECTIVE_ACCESS.format(
            rc_id=rc_id,
            generation=generation,
            identifier=identifier,
            groups_digest=groups_digest(group_memberships),
        )

    async def generation(self, rc_id: int) -> int:
        key = CacheKeys.RC_GENERATION.format(rc_id=rc_id)
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        try:
            return int(value or 0)
        except ValueError as e:
            raise CacheError(f"Unreadable cache generation {key}={value!r}") from e

    async def get(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Sequence[str],
        generation: int,
    ) -> Optional[AccessLevel]:
        key = self.make_key(rc_id, identifier, group_memberships, generation)
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}") from e

        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        try:
            return AccessLevel(value)
        except ValueError:
            logger.warning(f"Discarding unreadable cache entry {key}={value!r}")
            return None

    async def set(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Sequence[str],
        level: AccessLevel,
        generation: int,
    ) -> None:
        key = self.make_key(rc_id, identifier, group_memberships, generation)
        try:
            await self._redis.set(key, level.value, ex=self._ttl if self._ttl > 0 else None)
        except RedisError as e:
            raise CacheError(f"Redis set error for key {key}: {e}") from e

    async def invalidate_resource(self, rc_id: int) -> None:
        """Bump the RC's generation, then delete its entries.

        The bump comes first so a reader that computed its level before the
        mutation committed writes under a generation nobody reads.
        """
        generation_key = CacheKeys.RC_GENERATION.format(rc_id=rc_id)
        pattern = CacheKeys.RC_PATTERN.format(rc_id=rc_id)
        try:
            generation = await self._redis.incr(generation_key)
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
        except RedisError as e:
            raise CacheError(f"Redis invalidation error for RC {rc_id}: {e}") from e
        logger.debug(
            f"Invalidated {len(keys)} cached access entries for RC {rc_id} "
            f"(generation {generation})"
        )

    async def close(self) -> None:
        await self._redis.aclose()
