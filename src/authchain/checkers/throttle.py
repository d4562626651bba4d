"""
=============================================================================
THROTTLE CHECKER
=============================================================================

Limits how many login attempts are evaluated per window using a FIXED
WINDOW counter. This is the only checker that keeps mutable state.

=============================================================================
WHY THROTTLE LOGINS?
=============================================================================

Without a limit, an attacker can try passwords as fast as the server
answers. Capping attempts per minute makes online guessing slow enough to
be useless, and gives monitoring a clear signal (RATE_LIMITED outcomes).

=============================================================================
FIXED WINDOW ALGORITHM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │               FIXED WINDOW (limit = 2, window = 60s)                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   t=0s    attempt → count=1  ✓                                      │
    │   t=5s    attempt → count=2  ✓                                      │
    │   t=9s    attempt → count=3  ✗ RATE_LIMITED                         │
    │   t=30s   attempt → count=4  ✗ RATE_LIMITED  (still counts!)        │
    │                                                                      │
    │   ─────────── more than 60s after window start ───────────          │
    │                                                                      │
    │   t=61s   reset: count=0, window_start=61                           │
    │           attempt → count=1  ✓                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    KEY PROPERTIES:

    1. The boundary is a hard cutoff. There is no gradual decay: a full
       burst is allowed straight after a reset.

    2. Rejected attempts are NOT refunded. Hammering the door while
       locked out keeps you locked out until the window rolls over.

    3. The counter is bumped BEFORE anything downstream runs, so with
       the throttle at the head of the chain even attempts with bad
       credentials spend budget.

=============================================================================
GLOBAL VS PER-CALLER
=============================================================================

By default one window is shared by every caller (a global limiter). Pass a
key_func to give each key its own window instead:

    ThrottleChecker(limit=5)                                  # global
    ThrottleChecker(limit=5, key_func=lambda c: c.identity)   # per identity

Per-caller windows stop one noisy client from locking everybody out.

=============================================================================
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..chain.base import Checker
from ..models import Credential, Outcome, Rejection


logger = logging.getLogger(__name__)

# Window key used when no key_func is given
GLOBAL_KEY = "*"


@dataclass
class FixedWindow:
    """
    Request counter for one fixed window.

    =========================================================================
    HOW IT WORKS
    =========================================================================

    hit(now):
    1. If more than window_seconds have passed since window_start,
       start a new window: count = 0, window_start = now
    2. count += 1
    3. Allowed iff count <= limit

    Not thread-safe on its own: ThrottleChecker calls it under its lock.

    =========================================================================
    """

    limit: int                  # Attempts allowed per window
    window_seconds: float       # Window length
    window_start: float         # When the current window opened
    count: int = 0              # Attempts seen in the current window
    last_hit: float = 0.0       # For idle-window cleanup

    def hit(self, now: float) -> bool:
        """
        Record one attempt.

        Returns:
            True if the attempt is within the limit, False otherwise
        """
        if self.expired(now):
            self.count = 0
            self.window_start = now

        self.count += 1
        self.last_hit = now

        return self.count <= self.limit

    def expired(self, now: float) -> bool:
        """True once the window has run out and the next hit will reset it."""
        return now - self.window_start > self.window_seconds

    def remaining(self, now: float) -> int:
        """Attempts still allowed in the current window."""
        if self.expired(now):
            return self.limit
        return max(0, self.limit - self.count)

    def retry_after(self, now: float) -> float:
        """
        Seconds until an attempt would be allowed again.

        0 if one is allowed right now.
        """
        if self.remaining(now) > 0:
            return 0.0
        return max(0.0, self.window_start + self.window_seconds - now)


class ThrottleChecker(Checker):
    """
    Rejects attempts beyond `limit` per window with RATE_LIMITED.

    =========================================================================
    USAGE EXAMPLES
    =========================================================================

    # 2 attempts per minute for everybody together
    head = ThrottleChecker(limit=2)

    # 5 attempts per minute per identity
    head = ThrottleChecker(limit=5, key_func=lambda c: c.identity)

    # Tests: drive time by hand
    clock = FakeClock()
    head = ThrottleChecker(limit=2, clock=clock)

    =========================================================================
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float = 60.0,
        key_func: Optional[Callable[[Credential], str]] = None,
        clock: Callable[[], float] = time.monotonic,
        cleanup_interval: float = 60.0,
        window_ttl: float = 300.0,
    ):
        """
        Initialize the throttle.

        Args:
            limit: Maximum attempts per window (must be >= 1).

            window_seconds: Window length. One minute by default.

            key_func: Function mapping a credential to a throttle key.
                     None means one global window for all callers.

            clock: Monotonic time source in seconds. Injected by tests.

            cleanup_interval: How often idle per-key windows are purged.

            window_ttl: How long a key may stay idle before its window
                       is dropped. Must be at least window_seconds.
        """
        super().__init__()

        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {window_seconds}")
        if window_ttl < window_seconds:
            raise ValueError("window_ttl must be >= window_seconds")

        self.limit = limit
        self.window_seconds = window_seconds
        self.key_func = key_func
        self.cleanup_interval = cleanup_interval
        self.window_ttl = window_ttl
        self._clock = clock

        # Thread lock: reset + increment + compare is one critical section
        self._lock = threading.Lock()

        now = self._clock()
        self._windows: Dict[str, FixedWindow] = {}
        self._last_cleanup = now

        if key_func is None:
            # The global window opens when the throttle is created
            self._windows[GLOBAL_KEY] = self._new_window(now)

    def check(self, credential: Credential) -> Outcome:
        """
        Count the attempt, then reject or pass it on.

        Flow:
        1. Work out the throttle key
        2. Under the lock: roll the window if it expired, bump the count
        3. Over the limit: reject, successor is NOT called
        4. Otherwise: continue down the chain
        """
        key = self._key(credential)

        with self._lock:
            now = self._clock()
            window = self._get_window(key, now)
            allowed = window.hit(now)
            retry_after = window.retry_after(now)

        if not allowed:
            # At exactly the window end the next attempt still lands in this window
            wait = max(1, math.ceil(retry_after))
            return self.reject(
                Rejection.RATE_LIMITED,
                f"Request limit exceeded! Try again in {wait} seconds.",
            )

        return self.check_next(credential)

    # ─────────────────────────────────────────────────────────────────────
    # INSPECTION
    # ─────────────────────────────────────────────────────────────────────

    def count(self, credential: Optional[Credential] = None) -> int:
        """Attempts recorded in the current window (0 if none yet)."""
        with self._lock:
            window = self._windows.get(self._key(credential))
            return window.count if window else 0

    def remaining(self, credential: Optional[Credential] = None) -> int:
        """Attempts still allowed right now."""
        with self._lock:
            window = self._windows.get(self._key(credential))
            return window.remaining(self._clock()) if window else self.limit

    def retry_after(self, credential: Optional[Credential] = None) -> float:
        """Seconds until the next attempt would be allowed."""
        with self._lock:
            window = self._windows.get(self._key(credential))
            return window.retry_after(self._clock()) if window else 0.0

    def reset(self, key: Optional[str] = None):
        """
        Forget recorded attempts.

        Useful for:
        - Testing (reset between test cases)
        - Admin intervention (unlock a user)

        Args:
            key: Specific key to reset, or None to reset all.
        """
        with self._lock:
            now = self._clock()
            if key is None:
                self._windows.clear()
                if self.key_func is None:
                    self._windows[GLOBAL_KEY] = self._new_window(now)
            elif key in self._windows:
                self._windows[key] = self._new_window(now)

    # ─────────────────────────────────────────────────────────────────────
    # INTERNALS (call with the lock held)
    # ─────────────────────────────────────────────────────────────────────

    def _key(self, credential: Optional[Credential]) -> str:
        if self.key_func is None or credential is None:
            return GLOBAL_KEY
        return self.key_func(credential)

    def _new_window(self, now: float) -> FixedWindow:
        return FixedWindow(
            limit=self.limit,
            window_seconds=self.window_seconds,
            window_start=now,
            last_hit=now,
        )

    def _get_window(self, key: str, now: float) -> FixedWindow:
        """Get or create the window for a key, purging idle ones first."""
        if now - self._last_cleanup > self.cleanup_interval:
            self._cleanup(now)

        window = self._windows.get(key)
        if window is None:
            window = self._new_window(now)
            self._windows[key] = window

        return window

    def _cleanup(self, now: float):
        """Drop windows idle for longer than window_ttl."""
        expired_keys = [
            key for key, window in self._windows.items()
            if now - window.last_hit > self.window_ttl
        ]

        for key in expired_keys:
            del self._windows[key]

        if expired_keys:
            logger.debug(f"Dropped {len(expired_keys)} idle throttle windows")

        self._last_cleanup = now
