"""
Monitoring Decorators

Provides decorators for automatic error capture.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from .sentry.setup import add_breadcrumb, capture_exception

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def capture_errors(
    step_name: Optional[str] = None,
    reraise: bool = True,
    tags: Optional[Dict[str, str]] = None,
) -> Callable[[F], F]:
    """
    Decorator to capture exceptions and send to Sentry.

    Args:
        step_name: Optional name for context (defaults to the function name)
        reraise: Whether to reraise the exception after capture
        tags: Additional tags to include

    Usage:
        @capture_errors(step_name="clock_tick", reraise=False)
        def on_tick():
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            name = step_name or func.__name__

            add_breadcrumb(
                message=f"Running {name}",
                category="game",
                level="debug",
            )

            try:
                return func(*args, **kwargs)

            except Exception as e:
                error_tags = {"step": name}
                if tags:
                    error_tags.update(tags)

                capture_exception(
                    exception=e,
                    tags=error_tags,
                    extra={
                        "function": func.__name__,
                        "args_count": len(args),
                        "kwargs_keys": list(kwargs.keys()),
                    },
                )

                if reraise:
                    raise

                logger.exception("%s failed", name)
                return None

        return cast(F, wrapper)

    return decorator
