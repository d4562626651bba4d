"""
=============================================================================
DECISION LOGGING
=============================================================================

Structured audit records for every authentication decision, plus the
logging setup used by the CLI.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT FORMAT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ [19/Oct/2026:10:55:36 +0000] 3f2a9c1d admin@example.com DENIED     │
    │     invalid_secret by ExistenceChecker (Wrong secret!) 0.04ms       │
    └─────────────────────────────────────────────────────────────────────┘

    JSON FORMAT (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"decision_id": "3f2a9c1d", "identity": "admin@example.com",       │
    │  "allowed": false, "reason": "invalid_secret", ...}                 │
    └─────────────────────────────────────────────────────────────────────┘

The secret is never part of a decision record.

=============================================================================
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from .config import GatekeeperConfig


# Namespaced logger so decisions can be routed separately:
#   logging.getLogger("authchain.audit").addHandler(file_handler)
logger = logging.getLogger("authchain.audit")


@dataclass
class DecisionLog:
    """
    Structured log entry for one authentication decision.

    decision_id: Short random ID to correlate with caller logs
    identity:    Identity that was claimed
    allowed:     Final pipeline result
    reason:      Rejection kind value, None when allowed
    checker:     Name of the rejecting checker, None when allowed
    message:     Human-readable rejection message
    duration_ms: Time spent in the chain
    timestamp:   When the decision was made
    """

    decision_id: str
    identity: str
    allowed: bool
    reason: Optional[str]
    checker: Optional[str]
    message: str
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "decision_id": self.decision_id,
            "identity": self.identity,
            "allowed": self.allowed,
            "reason": self.reason,
            "checker": self.checker,
            "message": self.message,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Format as a single human-readable line."""
        if self.allowed:
            return (
                f"[{self.timestamp}] {self.decision_id} {self.identity} ALLOWED "
                f"{self.duration_ms:.2f}ms"
            )
        return (
            f"[{self.timestamp}] {self.decision_id} {self.identity} DENIED "
            f"{self.reason} by {self.checker} ({self.message}) "
            f"{self.duration_ms:.2f}ms"
        )


def emit(entry: DecisionLog, log_format: str = "text", level: int = logging.INFO):
    """Write a decision record to the audit logger."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def configure_logging(config: GatekeeperConfig):
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("authchain").setLevel(level)
