"""
Sentry Setup and Context Management

Initializes Sentry SDK and provides context enrichment helpers. Every helper
is a no-op until init_sentry() succeeded, so the scorebook runs the same
with or without a DSN.
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from ..config import MonitoringConfig

logger = logging.getLogger(__name__)

# Track initialization state
_sentry_initialized = False


def init_sentry(config: Optional[MonitoringConfig] = None) -> bool:
    """
    Initialize Sentry SDK.

    Args:
        config: MonitoringConfig with DSN

    Returns:
        True if initialized successfully
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    config = config or MonitoringConfig.from_env()

    if not config.sentry_enabled:
        logger.debug("Sentry not configured, skipping initialization")
        return False

    try:
        logging_integration = LoggingIntegration(
            level=logging.INFO,  # INFO and above as breadcrumbs
            event_level=logging.ERROR,  # ERROR and above as events
        )

        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.sentry_environment,
            traces_sample_rate=config.sentry_traces_sample_rate,
            integrations=[logging_integration],
            send_default_pii=False,
            attach_stacktrace=True,
        )

        sentry_sdk.set_tag("scorer", config.scorer_name)

        _sentry_initialized = True
        logger.debug("Sentry initialized successfully")
        return True

    except Exception as e:
        logger.error("Failed to initialize Sentry: %s", e)
        return False


def set_game_context(
    game_id: str,
    phase: Optional[str] = None,
    period: Optional[int] = None,
    score: Optional[str] = None,
) -> None:
    """
    Attach the game being scored to subsequent Sentry events.

    Args:
        game_id: Game identifier
        phase: Current game phase value
        period: Current period number
        score: Display score, e.g. "54-50"
    """
    if not _sentry_initialized:
        return

    try:
        sentry_sdk.set_context("game", {
            "game_id": game_id,
            "phase": phase,
            "period": period,
            "score": score,
        })
        sentry_sdk.set_tag("game_id", game_id)

    except Exception as e:
        logger.debug("Failed to set game context: %s", e)


def add_breadcrumb(
    message: str,
    category: str = "game",
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Add a breadcrumb to the current Sentry scope.

    Args:
        message: Breadcrumb message
        category: Category (game, clock, cli, db)
        level: Level (debug, info, warning, error)
        data: Additional data
    """
    if not _sentry_initialized:
        return

    try:
        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data,
        )

    except Exception as e:
        logger.debug("Failed to add breadcrumb: %s", e)


def capture_exception(
    exception: Exception,
    level: str = "error",
    tags: Optional[Dict[str, str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Capture an exception and send to Sentry.

    Args:
        exception: The exception to capture
        level: Severity level (error, warning, info)
        tags: Additional tags
        extra: Additional context data

    Returns:
        Sentry event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        return None

    try:
        with sentry_sdk.new_scope() as scope:
            scope.set_level(level)

            if tags:
                for key, value in tags.items():
                    scope.set_tag(key, value)

            if extra:
                for key, value in extra.items():
                    scope.set_extra(key, value)

            return sentry_sdk.capture_exception(exception)

    except Exception as e:
        logger.debug("Failed to capture exception: %s", e)
        return None


def capture_message(
    message: str,
    level: str = "info",
    tags: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Capture a message and send to Sentry.

    Used for notable game events that are not errors (a foul-out, a clock
    catch-up after a long suspension).

    Returns:
        Sentry event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        return None

    try:
        with sentry_sdk.new_scope() as scope:
            scope.set_level(level)

            if tags:
                for key, value in tags.items():
                    scope.set_tag(key, value)

            return sentry_sdk.capture_message(message)

    except Exception as e:
        logger.debug("Failed to capture message: %s", e)
        return None
