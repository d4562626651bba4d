"""
=============================================================================
GATEKEEPER CONFIGURATION
=============================================================================

Centralized configuration for the reference authorization chain.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m authchain --limit 5                             │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── AUTHCHAIN_REQUESTS_PER_MINUTE=5 python -m authchain       │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Tuple

from .checkers.role import DEFAULT_PRIVILEGED


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class GatekeeperConfig:
    """
    Configuration for a gatekeeper and its reference chain.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    THROTTLE
    - requests_per_minute, window_seconds, throttle_per_identity

    ROLES
    - privileged_identities

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # THROTTLE
    # ─────────────────────────────────────────────────────────────────────

    requests_per_minute: int = 2
    """
    Attempts allowed per window before RATE_LIMITED.
    Every attempt counts, including rejected ones.
    """

    window_seconds: float = 60.0
    """
    Length of one throttle window. One minute unless overridden,
    mostly useful for tests and demos.
    """

    throttle_per_identity: bool = False
    """
    False - one window shared by every caller (global limiter)
    True  - each identity gets its own window
    """

    # ─────────────────────────────────────────────────────────────────────
    # ROLES
    # ─────────────────────────────────────────────────────────────────────

    privileged_identities: Tuple[str, ...] = DEFAULT_PRIVILEGED
    """Identities the role checker greets as admin."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Decision log format: 'json' or 'text'.
    JSON is better for log aggregators, text for humans.
    """

    @classmethod
    def from_env(cls) -> "GatekeeperConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        AUTHCHAIN_REQUESTS_PER_MINUTE   Throttle limit (default: 2)
        AUTHCHAIN_WINDOW_SECONDS        Window length (default: 60)
        AUTHCHAIN_THROTTLE_PER_IDENTITY Per-identity windows (default: false)
        AUTHCHAIN_PRIVILEGED            Comma-separated admin identities
        AUTHCHAIN_LOG_LEVEL             Logging level (default: INFO)
        AUTHCHAIN_LOG_FORMAT            text or json (default: text)

        =====================================================================
        """
        privileged = os.getenv("AUTHCHAIN_PRIVILEGED")

        return cls(
            requests_per_minute=int(os.getenv("AUTHCHAIN_REQUESTS_PER_MINUTE", "2")),
            window_seconds=float(os.getenv("AUTHCHAIN_WINDOW_SECONDS", "60")),
            throttle_per_identity=_parse_bool(
                os.getenv("AUTHCHAIN_THROTTLE_PER_IDENTITY", "false")
            ),
            privileged_identities=(
                _parse_list(privileged) if privileged is not None else DEFAULT_PRIVILEGED
            ),
            log_level=os.getenv("AUTHCHAIN_LOG_LEVEL", "INFO"),
            log_format=os.getenv("AUTHCHAIN_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called before the chain is built so bad values fail at startup,
        not on the first login attempt.
        """
        if self.requests_per_minute < 1:
            raise ValueError(
                f"requests_per_minute must be >= 1, got {self.requests_per_minute}"
            )

        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {self.window_seconds}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format}")
