"""
Unit tests for the credential store and the store-backed and role checkers.
"""

import threading

from authchain import Credential, CredentialStore, Gatekeeper, Rejection
from authchain.checkers import ExistenceChecker, RoleChecker

from conftest import ADMIN, ADMIN_PASS, USER, USER_PASS, RecordingChecker


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_register_and_lookup(self, store):
        """Registered identities are found with their secret."""
        assert store.has_identity(ADMIN)
        assert ADMIN in store
        assert store.is_valid_secret(ADMIN, ADMIN_PASS)
        assert not store.is_valid_secret(ADMIN, USER_PASS)
        assert len(store) == 2

    def test_unknown_identity_never_valid(self, store):
        """An unregistered identity has no valid secret."""
        assert not store.has_identity("ghost@example.com")
        assert not store.is_valid_secret("ghost@example.com", "")
        assert not store.is_valid_secret("ghost@example.com", ADMIN_PASS)

    def test_reregister_overwrites(self, store):
        """Re-registering replaces the old secret."""
        store.register(ADMIN, "new_pass")

        assert store.is_valid_secret(ADMIN, "new_pass")
        assert not store.is_valid_secret(ADMIN, ADMIN_PASS)
        assert len(store) == 2

    def test_non_ascii_secret(self):
        """Non-ASCII secrets compare by value."""
        store = CredentialStore()
        store.register("bob", "pässwörd")

        assert store.is_valid_secret("bob", "pässwörd")
        assert not store.is_valid_secret("bob", "passwort")

    def test_surrogate_secret(self):
        """Lone surrogates (undecodable argv bytes) compare without raising."""
        store = CredentialStore()
        store.register("bob", "\udcff")

        assert store.is_valid_secret("bob", "\udcff")
        assert not store.is_valid_secret("bob", "\udcfe")
        assert not store.is_valid_secret("bob", "pw")

        store.register("carol", "pw")
        assert not store.is_valid_secret("carol", "\udcff")

    def test_surrogate_secret_through_gatekeeper(self):
        """authenticate() still answers with a bool."""
        gatekeeper = Gatekeeper()
        gatekeeper.register("bob", "pw")
        gatekeeper.set_chain(ExistenceChecker(gatekeeper.store))

        assert gatekeeper.authenticate("bob", "\udcff") is False

    def test_identities_sorted(self, store):
        """identities() returns a sorted snapshot."""
        assert store.identities() == [ADMIN, USER]

    def test_concurrent_registration(self):
        """Parallel registrations all land."""
        store = CredentialStore()

        def register_many(prefix):
            for i in range(100):
                store.register(f"{prefix}-{i}", "pw")

        threads = [threading.Thread(target=register_many, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 400


class TestExistenceChecker:
    """Tests for ExistenceChecker."""

    def test_valid_credential_forwards(self, store):
        """A registered identity with the right secret reaches the successor."""
        checker = ExistenceChecker(store)
        after = RecordingChecker("after")
        checker.link(after)

        assert checker.check(Credential(USER, USER_PASS))
        assert after.calls == 1

    def test_unknown_identity_rejected(self, store):
        """Unknown identities are rejected whatever the secret."""
        checker = ExistenceChecker(store)

        for secret in ("", ADMIN_PASS, "anything"):
            outcome = checker.check(Credential("ghost@example.com", secret))
            assert outcome.reason is Rejection.UNKNOWN_IDENTITY

    def test_wrong_secret_rejected(self, store):
        """A known identity with a wrong secret is rejected."""
        checker = ExistenceChecker(store)
        after = RecordingChecker("after")
        checker.link(after)

        outcome = checker.check(Credential(ADMIN, "wrong"))

        assert outcome.reason is Rejection.INVALID_SECRET
        assert outcome.checker == "ExistenceChecker"
        assert after.calls == 0

    def test_reregistration_invalidates_old_secret(self, store):
        """After re-registering, the old secret stops working at once."""
        checker = ExistenceChecker(store)
        assert checker.check(Credential(ADMIN, ADMIN_PASS))

        store.register(ADMIN, "rotated")

        assert checker.check(Credential(ADMIN, ADMIN_PASS)).reason is Rejection.INVALID_SECRET
        assert checker.check(Credential(ADMIN, "rotated"))


class TestRoleChecker:
    """Tests for RoleChecker."""

    def test_never_rejects(self):
        """Admins and users alike are passed on."""
        checker = RoleChecker()
        after = RecordingChecker("after")
        checker.link(after)

        assert checker.check(Credential(ADMIN, "x"))
        assert checker.check(Credential("nobody", ""))
        assert after.calls == 2

    def test_role_of(self):
        """Privileged identities are admins, everyone else is a user."""
        checker = RoleChecker(privileged=["root"])

        assert checker.role_of("root") == "admin"
        assert checker.role_of(ADMIN) == "user"

    def test_on_role_callback(self):
        """on_role receives the credential and the role."""
        seen = []
        checker = RoleChecker(on_role=lambda cred, role: seen.append((cred.identity, role)))

        checker.check(Credential(ADMIN, ADMIN_PASS))
        checker.check(Credential(USER, USER_PASS))

        assert seen == [(ADMIN, "admin"), (USER, "user")]

    def test_greeting_logged(self, caplog):
        """The greeting is logged at INFO."""
        with caplog.at_level("INFO", logger="authchain"):
            RoleChecker().check(Credential(ADMIN, ADMIN_PASS))

        assert "Hello, admin!" in caplog.text
