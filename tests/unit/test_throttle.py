"""
Unit tests for the fixed-window throttle.
"""

import threading

import pytest

from authchain import Credential, Rejection
from authchain.checkers import FixedWindow, ThrottleChecker

from conftest import RecordingChecker


class TestFixedWindow:
    """Tests for the FixedWindow counter."""

    def test_allows_up_to_limit(self):
        """The limit-th hit is allowed, the next is not."""
        window = FixedWindow(limit=2, window_seconds=60.0, window_start=0.0)

        assert window.hit(1.0) is True
        assert window.hit(2.0) is True
        assert window.hit(3.0) is False
        assert window.count == 3

    def test_resets_after_window(self):
        """A hit more than one window after the start resets the count."""
        window = FixedWindow(limit=1, window_seconds=60.0, window_start=0.0)
        window.hit(0.0)

        assert window.hit(61.0) is True
        assert window.count == 1
        assert window.window_start == 61.0

    def test_boundary_is_exclusive(self):
        """Exactly one window later is still the same window."""
        window = FixedWindow(limit=1, window_seconds=60.0, window_start=0.0)
        window.hit(0.0)

        assert window.hit(60.0) is False

    def test_remaining_and_retry_after(self):
        """remaining() and retry_after() describe the current window."""
        window = FixedWindow(limit=2, window_seconds=60.0, window_start=0.0)
        assert window.remaining(0.0) == 2
        assert window.retry_after(0.0) == 0.0

        window.hit(0.0)
        window.hit(10.0)

        assert window.remaining(10.0) == 0
        assert window.retry_after(10.0) == pytest.approx(50.0)
        assert window.remaining(61.0) == 2


class TestThrottleChecker:
    """Tests for ThrottleChecker."""

    def test_nth_plus_one_call_rejected(self, clock, credential):
        """With limit N, call N+1 in the same window is rejected."""
        throttle = ThrottleChecker(limit=3, clock=clock)

        results = [throttle.check(credential).allowed for _ in range(4)]

        assert results == [True, True, True, False]

    def test_rejection_carries_reason(self, clock, credential):
        """The rejection says RATE_LIMITED and when to retry."""
        throttle = ThrottleChecker(limit=1, clock=clock)
        throttle.check(credential)
        clock.advance(15)

        outcome = throttle.check(credential)

        assert outcome.reason is Rejection.RATE_LIMITED
        assert outcome.checker == "ThrottleChecker"
        assert "45 seconds" in outcome.message

    def test_rejection_at_window_end_waits_at_least_one_second(self, clock, credential):
        """At exactly the window end the attempt is still rejected, so never say 0."""
        throttle = ThrottleChecker(limit=1, clock=clock)
        throttle.check(credential)
        clock.advance(60)

        outcome = throttle.check(credential)

        assert outcome.reason is Rejection.RATE_LIMITED
        assert "Try again in 1 seconds." in outcome.message
        assert "0 seconds" not in outcome.message

    def test_concurrent_checks_respect_limit(self, credential):
        """Parallel attempts never admit more than the limit."""
        throttle = ThrottleChecker(limit=50)
        results = [[] for _ in range(8)]
        start = threading.Barrier(8)

        def hammer(index):
            start.wait()
            for _ in range(100):
                results[index].append(throttle.check(credential).allowed)

        threads = [threading.Thread(target=hammer, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        allowed = [a for per_thread in results for a in per_thread]
        assert len(allowed) == 800
        assert sum(allowed) == 50
        assert throttle.count() == 800

    def test_rejected_calls_still_count(self, clock, credential):
        """A rejected attempt is not refunded."""
        throttle = ThrottleChecker(limit=1, clock=clock)

        throttle.check(credential)
        throttle.check(credential)
        throttle.check(credential)

        assert throttle.count() == 3
        assert throttle.remaining() == 0
        assert not throttle.check(credential)

    def test_allowed_again_after_window(self, clock, credential):
        """Once more than 60 seconds pass, the counter resets."""
        throttle = ThrottleChecker(limit=2, clock=clock)
        for _ in range(3):
            throttle.check(credential)

        clock.advance(61)

        assert throttle.check(credential).allowed is True
        assert throttle.count() == 1

    def test_full_burst_after_reset(self, clock, credential):
        """The boundary is a hard cutoff: a full burst fits right after it."""
        throttle = ThrottleChecker(limit=3, clock=clock)
        for _ in range(3):
            throttle.check(credential)

        clock.advance(60.5)

        assert all(throttle.check(credential) for _ in range(3))
        assert not throttle.check(credential)

    def test_rejection_does_not_reach_successor(self, clock, credential):
        """Over the limit, the successor is never called."""
        throttle = ThrottleChecker(limit=1, clock=clock)
        after = RecordingChecker("after")
        throttle.link(after)

        throttle.check(credential)
        throttle.check(credential)

        assert after.calls == 1

    def test_global_window_shared_by_identities(self, clock):
        """Without key_func, every caller spends the same budget."""
        throttle = ThrottleChecker(limit=1, clock=clock)

        assert throttle.check(Credential("alice", "a"))
        assert not throttle.check(Credential("bob", "b"))

    def test_per_identity_windows(self, clock):
        """With key_func, each identity has its own budget."""
        throttle = ThrottleChecker(limit=1, key_func=lambda c: c.identity, clock=clock)
        alice, bob = Credential("alice", "a"), Credential("bob", "b")

        assert throttle.check(alice)
        assert throttle.check(bob)
        assert not throttle.check(alice)
        assert throttle.count(alice) == 2
        assert throttle.count(bob) == 1

    def test_idle_windows_cleaned_up(self, clock):
        """Windows idle longer than window_ttl are dropped."""
        throttle = ThrottleChecker(
            limit=1,
            key_func=lambda c: c.identity,
            clock=clock,
            cleanup_interval=10.0,
            window_ttl=120.0,
        )
        throttle.check(Credential("alice", "a"))

        clock.advance(200)
        throttle.check(Credential("bob", "b"))

        assert throttle.count(Credential("alice", "a")) == 0
        assert throttle.count(Credential("bob", "b")) == 1

    def test_reset(self, clock, credential):
        """reset() forgets recorded attempts."""
        throttle = ThrottleChecker(limit=1, clock=clock)
        throttle.check(credential)
        throttle.check(credential)

        throttle.reset()

        assert throttle.count() == 0
        assert throttle.check(credential)

    def test_retry_after(self, clock, credential):
        """retry_after() counts down to the window end."""
        throttle = ThrottleChecker(limit=1, clock=clock)
        assert throttle.retry_after() == 0.0

        throttle.check(credential)
        clock.advance(20)

        assert throttle.retry_after() == pytest.approx(40.0)

    @pytest.mark.parametrize("kwargs", [
        {"limit": 0},
        {"limit": 1, "window_seconds": 0},
        {"limit": 1, "window_seconds": 60, "window_ttl": 30},
    ])
    def test_invalid_parameters(self, kwargs):
        """Nonsensical limits are refused at construction."""
        with pytest.raises(ValueError):
            ThrottleChecker(**kwargs)
