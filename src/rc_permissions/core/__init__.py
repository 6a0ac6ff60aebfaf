"""Core building blocks shared by every rc-permissions feature."""

from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__ as _exception_names

__all__ = list(_exception_names)
