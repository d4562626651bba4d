"""
=============================================================================
AUTHCHAIN - Composable Login Authorization Pipeline
=============================================================================

A gatekeeper runs every login attempt through an ordered chain of
independent checkers. Each checker can reject the attempt or pass it on;
the first rejection wins.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    authchain/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m authchain)
    ├── gatekeeper.py        # Gatekeeper: store + chain head
    ├── config.py            # GatekeeperConfig dataclass
    ├── models.py            # Credential, Outcome, Rejection
    ├── store.py             # Thread-safe credential store
    ├── audit.py             # Structured decision logging
    ├── errors.py            # Exception hierarchy
    ├── chain/               # Chain framework
    │   └── base.py          # Checker, CheckerChain, FunctionChecker
    └── checkers/            # Built-in checkers
        ├── throttle.py      # Fixed-window rate limit
        ├── credentials.py   # Identity exists + secret matches
        └── role.py          # Admin vs user greeting

=============================================================================
QUICK START
=============================================================================

    from authchain import Gatekeeper
    from authchain.checkers import ThrottleChecker, ExistenceChecker, RoleChecker

    gatekeeper = Gatekeeper()
    gatekeeper.register("admin@example.com", "admin_pass")
    gatekeeper.register("user@example.com", "user_pass")

    # All checkers are chained. Different chains can reuse the same pieces.
    head = ThrottleChecker(limit=2)
    head.link(ExistenceChecker(gatekeeper.store)).link(RoleChecker())

    gatekeeper.set_chain(head)

    gatekeeper.authenticate("admin@example.com", "admin_pass")   # True

=============================================================================
"""

__version__ = "1.0.0"

from .config import GatekeeperConfig
from .errors import (
    AuthChainError,
    ChainConfigurationError,
    ChainCycleError,
    ChainNotConfiguredError,
)
from .gatekeeper import Gatekeeper
from .models import Credential, Outcome, Rejection
from .store import CredentialStore

__all__ = [
    "AuthChainError",
    "ChainConfigurationError",
    "ChainCycleError",
    "ChainNotConfiguredError",
    "Credential",
    "CredentialStore",
    "Gatekeeper",
    "GatekeeperConfig",
    "Outcome",
    "Rejection",
    "__version__",
]
