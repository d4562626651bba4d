"""
=============================================================================
PIPELINE DATA MODEL
=============================================================================

The small value types that flow through a checker chain.

=============================================================================
WHAT FLOWS THROUGH THE CHAIN
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Credential ──► [Throttle] ──► [Existence] ──► [Role] ──► Outcome │
    │   (identity,                                                         │
    │    secret)        each stage either returns a rejected Outcome      │
    │                   or passes the SAME credential to its successor    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Credential - one login attempt. Built by the caller, immutable, thrown away
             once the pipeline returns.

Outcome    - the result of one evaluation. Truthy when the attempt was
             admitted, so `if checker.check(cred):` reads naturally.

Rejection  - WHY an attempt was refused. Lets a UI tell "try again later"
             apart from "wrong password" without parsing log text.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Credential:
    """
    One login attempt's identity claim.

    The secret is excluded from repr() so credentials can be logged
    without leaking passwords.
    """

    identity: str
    secret: str = field(repr=False)


class Rejection(Enum):
    """
    Reasons a checker can refuse an attempt.

    =========================================================================
    REJECTION KINDS
    =========================================================================

        ┌──────────────────┬────────────────────────────┬───────────────┐
        │ Kind             │ Raised by                  │ Retry?        │
        ├──────────────────┼────────────────────────────┼───────────────┤
        │ RATE_LIMITED     │ ThrottleChecker            │ later, same   │
        │                  │                            │ credentials   │
        ├──────────────────┼────────────────────────────┼───────────────┤
        │ UNKNOWN_IDENTITY │ ExistenceChecker           │ different     │
        │                  │                            │ identity      │
        ├──────────────────┼────────────────────────────┼───────────────┤
        │ INVALID_SECRET   │ ExistenceChecker           │ different     │
        │                  │                            │ secret        │
        └──────────────────┴────────────────────────────┴───────────────┘

    The role checker never rejects, so it has no kind here.

    =========================================================================
    """

    RATE_LIMITED = "rate_limited"
    UNKNOWN_IDENTITY = "unknown_identity"
    INVALID_SECRET = "invalid_secret"

    @property
    def description(self) -> str:
        """Human-readable summary of the rejection kind."""
        return _DESCRIPTIONS[self]

    @property
    def is_temporary(self) -> bool:
        """True if the same credentials may succeed after waiting."""
        return self is Rejection.RATE_LIMITED


_DESCRIPTIONS = {
    Rejection.RATE_LIMITED: "Request limit exceeded",
    Rejection.UNKNOWN_IDENTITY: "This identity is not registered",
    Rejection.INVALID_SECRET: "Wrong secret",
}


@dataclass(frozen=True)
class Outcome:
    """
    Result of evaluating a credential against a chain (or part of one).

    =========================================================================
    BOOLEAN CONTRACT
    =========================================================================

    An Outcome behaves like the plain bool a checker conceptually returns:

        outcome = head.check(credential)
        if outcome:                  # admitted
            ...
        else:                        # rejected
            print(outcome.reason)    # Rejection.INVALID_SECRET, ...

    `reason`, `checker` and `message` are only set on rejections.

    =========================================================================
    """

    allowed: bool
    reason: Optional[Rejection] = None
    checker: Optional[str] = None
    message: str = ""

    @classmethod
    def accept(cls) -> "Outcome":
        """The outcome of a chain that ran to its tail without a rejection."""
        return cls(allowed=True)

    @classmethod
    def reject(
        cls,
        reason: Rejection,
        checker: str,
        message: Optional[str] = None,
    ) -> "Outcome":
        """
        Build a rejected outcome.

        Args:
            reason: Why the attempt was refused
            checker: Name of the rejecting checker
            message: Human-readable explanation (defaults to the
                     rejection kind's description)
        """
        return cls(
            allowed=False,
            reason=reason,
            checker=checker,
            message=message or reason.description,
        )

    def __bool__(self) -> bool:
        return self.allowed
