"""
=============================================================================
CHECKER CHAIN FRAMEWORK
=============================================================================

A checker is one stage of a login pipeline. Checkers are linked into a
singly-linked chain; the gatekeeper hands each credential to the head.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    AUTHORIZATION PIPELINE                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Credential                                                │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────┐                                               │
    │   │ ThrottleChecker │ ──► May reject if too many attempts           │
    │   └────────┬────────┘                                               │
    │            ▼                                                         │
    │   ┌─────────────────┐                                               │
    │   │ExistenceChecker │ ──► May reject unknown identity / bad secret  │
    │   └────────┬────────┘                                               │
    │            ▼                                                         │
    │   ┌─────────────────┐                                               │
    │   │   RoleChecker   │ ──► Never rejects, reports admin vs user      │
    │   └────────┬────────┘                                               │
    │            ▼                                                         │
    │        ACCEPTED                                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import (
    Checker,
    CheckerChain,
    FunctionChecker,
    chain_of,
    forward,
    function_checker,
    iter_chain,
)

__all__ = [
    # Base classes
    "Checker",
    "CheckerChain",
    "FunctionChecker",

    # Helpers
    "chain_of",
    "forward",
    "function_checker",
    "iter_chain",
]
