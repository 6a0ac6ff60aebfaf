"""
FastAPI integration for rc-permissions.
"""

from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers

__all__ = [
    "ExceptionHandlerRegistry",
    "register_exception_handlers",
]
