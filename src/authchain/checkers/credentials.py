"""
Existence + secret checker.

Rejects attempts whose identity is not registered, or whose secret does
not match the registered one. Everything else is passed down the chain.
"""

from ..chain.base import Checker
from ..models import Credential, Outcome, Rejection
from ..store import CredentialStore


class ExistenceChecker(Checker):
    """
    Looks the credential up in a CredentialStore.

    The checker only reads the store. Registration goes through the
    gatekeeper that owns it:

        gatekeeper = Gatekeeper()
        checker = ExistenceChecker(gatekeeper.store)
    """

    def __init__(self, store: CredentialStore):
        super().__init__()
        self._store = store

    def check(self, credential: Credential) -> Outcome:
        if not self._store.has_identity(credential.identity):
            return self.reject(
                Rejection.UNKNOWN_IDENTITY,
                "This identity is not registered",
            )

        if not self._store.is_valid_secret(credential.identity, credential.secret):
            return self.reject(Rejection.INVALID_SECRET, "Wrong secret!")

        return self.check_next(credential)
