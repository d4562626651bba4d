"""
pytest configuration and fixtures.
"""

from typing import List, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from authchain import Credential, CredentialStore, Gatekeeper, Outcome, Rejection
from authchain.chain import Checker
from authchain.checkers import ExistenceChecker, RoleChecker, ThrottleChecker


ADMIN = "admin@example.com"
ADMIN_PASS = "admin_pass"
USER = "user@example.com"
USER_PASS = "user_pass"


class FakeClock:
    """Manually advanced time source for throttle tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class RecordingChecker(Checker):
    """Counts how often it runs, then passes the credential on."""

    def __init__(self, label: str = "recorder", trail: Optional[List[str]] = None):
        super().__init__()
        self.label = label
        self.calls = 0
        self.trail = trail

    def check(self, credential: Credential) -> Outcome:
        self.calls += 1
        if self.trail is not None:
            self.trail.append(self.label)
        return self.check_next(credential)


class RejectingChecker(Checker):
    """Always rejects with the given reason."""

    def __init__(self, reason: Rejection = Rejection.INVALID_SECRET):
        super().__init__()
        self.reason = reason
        self.calls = 0

    def check(self, credential: Credential) -> Outcome:
        self.calls += 1
        return self.reject(self.reason)


@pytest.fixture
def clock() -> FakeClock:
    """Fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def credential() -> Credential:
    """Valid admin credential."""
    return Credential(ADMIN, ADMIN_PASS)


@pytest.fixture
def store() -> CredentialStore:
    """Store with one admin and one regular user."""
    store = CredentialStore()
    store.register(ADMIN, ADMIN_PASS)
    store.register(USER, USER_PASS)
    return store


@pytest.fixture
def gatekeeper(clock: FakeClock) -> Gatekeeper:
    """
    Gatekeeper with the reference chain:
    throttle(limit=2) → existence/secret → role.
    """
    gatekeeper = Gatekeeper()
    gatekeeper.register(ADMIN, ADMIN_PASS)

    head = ThrottleChecker(limit=2, clock=clock)
    head.link(ExistenceChecker(gatekeeper.store)).link(RoleChecker())
    gatekeeper.set_chain(head)

    return gatekeeper
