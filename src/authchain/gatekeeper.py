"""
=============================================================================
GATEKEEPER
=============================================================================

The application-facing entry point. Owns the credential store and the
head of the checker chain.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   caller ──► authenticate(identity, secret)                         │
    │                    │                                                 │
    │                    ▼                                                 │
    │              Credential(identity, secret)                           │
    │                    │                                                 │
    │                    ▼                                                 │
    │              chain head .check() ──► ... ──► Outcome                │
    │                    │                                                 │
    │                    ▼                                                 │
    │              audit log (DecisionLog)                                 │
    │                    │                                                 │
    │                    ▼                                                 │
    │   caller ◄── bool  (authenticate)                                    │
    │          ◄── Outcome (evaluate)                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

authenticate() keeps the simple yes/no contract. evaluate() returns the
full Outcome so callers can tell RATE_LIMITED from INVALID_SECRET without
reading logs.

=============================================================================
"""

import logging
import time
import uuid
from typing import Optional

from . import audit
from .chain.base import Checker, CheckerChain, iter_chain
from .checkers import ExistenceChecker, RoleChecker, ThrottleChecker
from .config import GatekeeperConfig
from .errors import ChainConfigurationError, ChainNotConfiguredError
from .models import Credential, Outcome
from .store import CredentialStore


logger = logging.getLogger(__name__)


class Gatekeeper:
    """
    Runs login attempts through a checker chain.

    =========================================================================
    USAGE
    =========================================================================

        gatekeeper = Gatekeeper()
        gatekeeper.register("admin@example.com", "admin_pass")

        head = ThrottleChecker(limit=2)
        head.link(ExistenceChecker(gatekeeper.store)).link(RoleChecker())
        gatekeeper.set_chain(head)

        gatekeeper.authenticate("admin@example.com", "admin_pass")  # True

    Or, with the reference chain built from configuration:

        gatekeeper = Gatekeeper.from_config(GatekeeperConfig())

    =========================================================================
    """

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        log_format: str = "text",
    ):
        """
        Args:
            store: Credential store to own. A fresh empty one by default.
            log_format: Decision log format ("text" or "json").
        """
        self.store = store if store is not None else CredentialStore()
        self.log_format = log_format
        self._chain: Optional[Checker] = None

    @classmethod
    def from_config(
        cls,
        config: GatekeeperConfig,
        store: Optional[CredentialStore] = None,
    ) -> "Gatekeeper":
        """
        Build a gatekeeper with the reference chain:

            ThrottleChecker → ExistenceChecker → RoleChecker
        """
        config.validate()

        gatekeeper = cls(store=store, log_format=config.log_format)

        key_func = (lambda c: c.identity) if config.throttle_per_identity else None

        head = (CheckerChain()
            .add(ThrottleChecker(
                limit=config.requests_per_minute,
                window_seconds=config.window_seconds,
                key_func=key_func,
            ))
            .add(ExistenceChecker(gatekeeper.store))
            .add(RoleChecker(privileged=config.privileged_identities))
            .build())

        gatekeeper.set_chain(head)
        return gatekeeper

    # ─────────────────────────────────────────────────────────────────────
    # CONFIGURATION
    # ─────────────────────────────────────────────────────────────────────

    def set_chain(self, head: Checker) -> None:
        """
        Install the chain head. May be called only once.

        Raises:
            ChainConfigurationError: If a chain is already installed
        """
        if self._chain is not None:
            raise ChainConfigurationError("Gatekeeper already has a checker chain")

        self._chain = head
        logger.info(
            "Checker chain configured: "
            + " -> ".join(checker.name for checker in iter_chain(head))
        )

    @property
    def chain(self) -> Optional[Checker]:
        """The installed chain head, or None before set_chain()."""
        return self._chain

    # ─────────────────────────────────────────────────────────────────────
    # CREDENTIALS
    # ─────────────────────────────────────────────────────────────────────

    def register(self, identity: str, secret: str) -> None:
        """Insert or overwrite an identity in the store."""
        self.store.register(identity, secret)

    def has_identity(self, identity: str) -> bool:
        return self.store.has_identity(identity)

    def is_valid_secret(self, identity: str, secret: str) -> bool:
        return self.store.is_valid_secret(identity, secret)

    # ─────────────────────────────────────────────────────────────────────
    # AUTHENTICATION
    # ─────────────────────────────────────────────────────────────────────

    def authenticate(self, identity: str, secret: str) -> bool:
        """
        Run one login attempt through the chain.

        Returns:
            True if every checker accepted the attempt
        """
        return self.evaluate(Credential(identity, secret)).allowed

    def evaluate(self, credential: Credential) -> Outcome:
        """
        Run a credential through the chain and return the full Outcome.

        Raises:
            ChainNotConfiguredError: If set_chain() was never called
        """
        if self._chain is None:
            raise ChainNotConfiguredError(
                "No checker chain configured; call set_chain() first"
            )

        decision_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        outcome = self._chain.check(credential)

        duration_ms = (time.time() - start_time) * 1000

        audit.emit(
            audit.DecisionLog(
                decision_id=decision_id,
                identity=credential.identity,
                allowed=outcome.allowed,
                reason=outcome.reason.value if outcome.reason else None,
                checker=outcome.checker,
                message=outcome.message,
                duration_ms=duration_ms,
                timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            ),
            log_format=self.log_format,
        )

        if outcome:
            logger.info("Gatekeeper: Authorization has been successful!")

        return outcome
