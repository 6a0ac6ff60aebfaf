"""Resource utilities."""

from .queries import RC_GET_BY_ID

__all__ = ["RC_GET_BY_ID"]
