"""Error handling utilities for access grant storage.

Repository methods are wrapped so that driver errors never leak past the
repository boundary: library exceptions pass through untouched and asyncpg
errors become DatabaseError with the operation named in the log.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional

import asyncpg

from ....core.exceptions import DatabaseError, RCPermissionsError

logger = logging.getLogger(__name__)


def grant_storage_error_handler(
    operation_name: str,
    log_level: int = logging.ERROR,
    context_fields: Optional[Dict[str, str]] = None,
):
    """Decorator translating asyncpg failures into DatabaseError.

    Usage:
        @grant_storage_error_handler("load grant")
        async def find_by_id(self, grant_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)

            except RCPermissionsError:
                raise

            except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
                operation_context = {"operation": operation_name, "function": func.__name__}
                if context_fields:
                    operation_context.update(context_fields)
                # Positional args after self are ids or identifiers worth logging
                if len(args) > 1:
                    operation_context["target"] = repr(args[1])
                context_str = ", ".join(f"{k}={v}" for k, v in operation_context.items())
                logger.log(log_level, f"Failed to {operation_name}: {e} | Context: {context_str}")
                raise DatabaseError(
                    f"Failed to {operation_name}: {e}",
                    details={"operation": operation_name},
                ) from e

        return wrapper
    return decorator
