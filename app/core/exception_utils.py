# app/core/exception_utils.py
"""
Helpers for raising and translating application exceptions.
"""

import functools
import logging
from typing import Any, Callable, Optional, Type

from app.core.exceptions import BaseAppException, InternalServerError

logger = logging.getLogger(__name__)


def raise_for_status(
    condition: bool,
    exception: Type[BaseAppException],
    detail: Optional[str] = None,
    resource_type: Optional[str] = None,
) -> None:
    """Raise `exception` when `condition` holds."""
    if condition:
        raise exception(detail=detail, resource_type=resource_type)


def handle_exceptions(
    default_exception: Type[BaseAppException] = InternalServerError,
    message: str = "An unexpected error occurred.",
) -> Callable:
    """
    Decorator for async repository methods.

    Application exceptions pass through untouched so callers can react to
    them. Anything else (driver or SQLAlchemy errors) is logged with its
    traceback and re-raised as `default_exception`.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any):
            try:
                return await func(*args, **kwargs)
            except BaseAppException:
                raise
            except Exception as e:
                logger.error(
                    f"{message} ({func.__qualname__})",
                    exc_info=True,
                    extra={"operation": func.__name__},
                )
                raise default_exception(detail=message) from e

        return wrapper

    return decorator
