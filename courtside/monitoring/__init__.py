"""
Error monitoring for the scorebook

Provides:
- Sentry error tracking with game context
- capture_errors decorator for CLI commands and the clock ticker
"""

from .config import MonitoringConfig
from .decorators import capture_errors
from .sentry import (
    init_sentry,
    set_game_context,
    add_breadcrumb,
    capture_exception,
    capture_message,
)

__all__ = [
    # Config
    'MonitoringConfig',
    # Decorators
    'capture_errors',
    # Sentry
    'init_sentry',
    'set_game_context',
    'add_breadcrumb',
    'capture_exception',
    'capture_message',
]
