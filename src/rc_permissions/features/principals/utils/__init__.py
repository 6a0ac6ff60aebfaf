"""Principal utilities."""

from .queries import USER_GET_BY_USERNAME, USER_GET_BY_ID

__all__ = [
    "USER_GET_BY_USERNAME",
    "USER_GET_BY_ID",
]
