"""
=============================================================================
CREDENTIAL STORE
=============================================================================

In-memory registry of identity → secret pairs.

The gatekeeper owns the store and is the only thing that writes to it
(via register). Checkers get read access to look credentials up.

=============================================================================
THREAD SAFETY
=============================================================================

If the gatekeeper sits inside a multi-threaded server, lookups and
registrations can overlap. Every access goes through one lock, so a
reader never observes a half-finished registration:

    Thread A: register("bob", "new")     Thread B: is_valid_secret("bob", ...)
         │                                     │
         ├── acquire lock                      ├── wait...
         ├── write                             │
         ├── release lock ─────────────────────┼── acquire lock
                                               ├── read "new"
                                               └── release lock

Nothing here is persisted: the store lives and dies with the process.

=============================================================================
"""

import hmac
import logging
import threading
from typing import Dict, List


logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Thread-safe mapping of registered identities to their secrets.

    Usage:
        store = CredentialStore()
        store.register("admin@example.com", "admin_pass")

        store.has_identity("admin@example.com")                  # True
        store.is_valid_secret("admin@example.com", "admin_pass") # True
    """

    def __init__(self):
        self._secrets: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, identity: str, secret: str) -> None:
        """
        Insert or overwrite an identity.

        No validation is done on the identity. Re-registering replaces the
        old secret immediately.
        """
        with self._lock:
            replaced = identity in self._secrets
            self._secrets[identity] = secret

        if replaced:
            logger.debug(f"Replaced secret for identity: {identity}")
        else:
            logger.debug(f"Registered identity: {identity}")

    def has_identity(self, identity: str) -> bool:
        """Check whether an identity is registered."""
        with self._lock:
            return identity in self._secrets

    def is_valid_secret(self, identity: str, secret: str) -> bool:
        """
        Check a secret against the stored one.

        Unknown identities are never valid, whatever the secret.
        """
        with self._lock:
            stored = self._secrets.get(identity)

        if stored is None:
            return False

        # surrogatepass: secrets decoded from argv may hold lone surrogates
        return hmac.compare_digest(
            stored.encode("utf-8", "surrogatepass"),
            secret.encode("utf-8", "surrogatepass"),
        )

    def identities(self) -> List[str]:
        """Snapshot of the registered identities, sorted."""
        with self._lock:
            return sorted(self._secrets)

    def __contains__(self, identity: str) -> bool:
        return self.has_identity(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._secrets)
