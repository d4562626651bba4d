"""
=============================================================================
BUILT-IN CHECKERS
=============================================================================

ThrottleChecker:
    Fixed-window attempt counter. Rejects with RATE_LIMITED once more than
    `limit` attempts arrive within one window. Global or per-key.

ExistenceChecker:
    Store-backed. Rejects with UNKNOWN_IDENTITY or INVALID_SECRET.

RoleChecker:
    Never rejects. Logs whether the caller is an admin or a regular user.

The reference chain is Throttle → Existence → Role.

=============================================================================
"""

from .credentials import ExistenceChecker
from .role import RoleChecker
from .throttle import FixedWindow, ThrottleChecker

__all__ = [
    "ExistenceChecker",
    "FixedWindow",
    "RoleChecker",
    "ThrottleChecker",
]
