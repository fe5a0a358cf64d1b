"""
Monitoring Configuration

Loads monitoring settings from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class MonitoringConfig:
    """Configuration for error tracking."""

    sentry_dsn: Optional[str] = field(default=None)
    sentry_environment: str = "production"
    sentry_traces_sample_rate: float = 0.0

    # Identifies the scorer's machine in reports
    scorer_name: str = "courtside"

    @classmethod
    def from_env(cls) -> "MonitoringConfig":
        """Create config from environment variables."""
        return cls(
            sentry_dsn=os.getenv("SENTRY_DSN"),
            sentry_environment=os.getenv("SENTRY_ENVIRONMENT", "production"),
            sentry_traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
            scorer_name=os.getenv("COURTSIDE_SCORER", "courtside"),
        )

    @property
    def sentry_enabled(self) -> bool:
        """Check if Sentry tracking is configured."""
        return bool(self.sentry_dsn)
