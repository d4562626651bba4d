"""
=============================================================================
BASE CHECKER INTERFACE
=============================================================================

Defines the checker protocol and the builder for linking checkers into a
chain. Implements the Chain of Responsibility design pattern.

=============================================================================
CHAIN OF RESPONSIBILITY PATTERN
=============================================================================

Each checker holds a reference to ONE successor. When asked to check a
credential, it:

1. Makes a local decision (rate budget, password, role, ...)
2. On rejection: returns a rejected Outcome right away. The successor is
   never called, so nothing downstream runs (short-circuit).
3. On acceptance: hands the credential to its successor and returns
   whatever the successor returns.

The tail of the chain has no successor. Reaching it without a rejection
means the attempt is admitted.

    ┌─────────────────────────────────────────────────────────────────────┐
    │              CHAIN OF RESPONSIBILITY - LOGIN FLOW                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Credential ───────────────────────────────────────────►           │
    │                                                                      │
    │   ┌──────────┐    ┌──────────┐    ┌──────────┐                     │
    │   │ Throttle │───►│ Existence│───►│   Role   │───► (tail) ACCEPT   │
    │   │          │    │ + Secret │    │          │                     │
    │   └────┬─────┘    └────┬─────┘    └──────────┘                     │
    │        │               │                                            │
    │        ▼               ▼                                            │
    │   RATE_LIMITED    UNKNOWN_IDENTITY                                  │
    │                   INVALID_SECRET                                    │
    │                                                                      │
    │   The whole chain is a short-circuit AND, evaluated left-to-right. │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ORDER MATTERS
=============================================================================

With throttle first, EVERY attempt (even one with a bogus identity) spends
rate budget before it is rejected for bad credentials. Put the throttle
after the existence check and only well-formed attempts count. Reordering
changes which failure "wins" and what a rejected attempt costs.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional, Union
import logging

from ..errors import ChainConfigurationError, ChainCycleError
from ..models import Credential, Outcome, Rejection


logger = logging.getLogger(__name__)


def forward(successor: Optional["Checker"], credential: Credential) -> Outcome:
    """
    The shared fall-through step of every checker.

    No successor means we are at the tail: the attempt is admitted.
    Otherwise the successor's result is returned unchanged.
    """
    if successor is None:
        return Outcome.accept()

    return successor.check(credential)


class Checker(ABC):
    """
    Abstract base class for one stage of an authorization chain.

    =========================================================================
    THE CHECKER CONTRACT
    =========================================================================

    Every checker implements check():

        def check(self, credential: Credential) -> Outcome

    and finishes its accept path with `return self.check_next(credential)`.

    =========================================================================
    CHECKER ANATOMY
    =========================================================================

        class BannedChecker(Checker):
            def __init__(self, banned):
                super().__init__()
                self.banned = set(banned)

            def check(self, credential: Credential) -> Outcome:
                # Local decision
                if credential.identity in self.banned:
                    return self.reject(Rejection.UNKNOWN_IDENTITY)  # Stop here

                # Continue down the chain
                return self.check_next(credential)

    =========================================================================
    LINKING
    =========================================================================

    link() returns the node it just appended, NOT the receiver, so calls
    compose left-to-right:

        head.link(a).link(b)      # head → a → b

    Calling link() twice on the same node replaces its successor:

        head.link(a)
        head.link(b)              # head → b   (a is no longer reachable)

    This is the builder convention the rest of the package relies on.

    =========================================================================
    """

    def __init__(self):
        self._next: Optional["Checker"] = None

    @abstractmethod
    def check(self, credential: Credential) -> Outcome:
        """
        Evaluate the credential.

        Args:
            credential: The login attempt

        Returns:
            A rejected Outcome if this checker refuses the attempt,
            otherwise the result of check_next()
        """
        pass

    def link(self, next: "Checker") -> "Checker":
        """
        Make `next` the direct successor of this checker.

        Args:
            next: Checker to append after this one

        Returns:
            `next`, so that further link() calls append after it

        Raises:
            ChainCycleError: If `next` already leads back to this checker
        """
        for node in iter_chain(next):
            if node is self:
                raise ChainCycleError(
                    f"Linking {next.name} after {self.name} would create a cycle",
                    checker_name=self.name,
                )

        self._next = next
        logger.debug(f"Linked checker: {self.name} -> {next.name}")
        return next

    def check_next(self, credential: Credential) -> Outcome:
        """Pass the credential on to the successor (or accept at the tail)."""
        return forward(self._next, credential)

    def reject(self, reason: Rejection, message: Optional[str] = None) -> Outcome:
        """
        Build a rejection attributed to this checker and log it.

        The log line is an advisory diagnostic. Callers should rely on the
        returned Outcome, not on log text.
        """
        outcome = Outcome.reject(reason, self.name, message)
        logger.info(f"{self.name}: {outcome.message}")
        return outcome

    @property
    def successor(self) -> Optional["Checker"]:
        """The next checker in the chain, or None at the tail."""
        return self._next

    @property
    def name(self) -> str:
        """Get the checker name for logging."""
        return self.__class__.__name__


def iter_chain(head: Optional[Checker]) -> Iterator[Checker]:
    """Yield the checkers of a chain in traversal order, starting at head."""
    node = head
    while node is not None:
        yield node
        node = node.successor


class CheckerChain:
    """
    Collects checkers in order and links them into a chain.

    =========================================================================
    USAGE
    =========================================================================

        head = (CheckerChain()
            .add(ThrottleChecker(limit=2))
            .add(ExistenceChecker(store))
            .add(RoleChecker())
            .build())

        gatekeeper.set_chain(head)

    build() is equivalent to writing the links by hand:

        head = ThrottleChecker(limit=2)
        head.link(ExistenceChecker(store)).link(RoleChecker())

    =========================================================================
    """

    def __init__(self):
        """Initialize an empty chain builder."""
        self._checkers: List[Checker] = []

    def add(self, checker: Checker) -> "CheckerChain":
        """
        Append a checker. First added runs first.

        Returns:
            Self for method chaining
        """
        self._checkers.append(checker)
        logger.debug(f"Added checker: {checker.name}")
        return self

    def use(self, *checkers: Checker) -> "CheckerChain":
        """Append several checkers at once."""
        for checker in checkers:
            self.add(checker)
        return self

    def build(self) -> Checker:
        """
        Link the collected checkers and return the head.

        Raises:
            ChainConfigurationError: If no checkers were added
            ChainCycleError: If the same checker was added twice
        """
        if not self._checkers:
            raise ChainConfigurationError("Cannot build an empty checker chain")

        head = self._checkers[0]
        tail = head
        for checker in self._checkers[1:]:
            tail = tail.link(checker)

        return head

    def __len__(self) -> int:
        """Get the number of checkers collected."""
        return len(self._checkers)

    def __iter__(self):
        """Iterate over collected checkers."""
        return iter(self._checkers)


def chain_of(*checkers: Checker) -> Checker:
    """Link the given checkers in order and return the head."""
    return CheckerChain().use(*checkers).build()


# =============================================================================
# FUNCTION CHECKER
# =============================================================================
#
# For a quick one-off stage, wrap a plain function instead of writing a
# class. The function returns None to accept, or a Rejection (or a full
# Outcome) to refuse.
#
# =============================================================================

CheckFunc = Callable[[Credential], Union[None, Rejection, Outcome]]


class FunctionChecker(Checker):
    """
    Wraps a simple function as a checker.

    Usage:
        @function_checker
        def no_empty_secret(credential):
            if not credential.secret:
                return Rejection.INVALID_SECRET
            return None

        head.link(no_empty_secret)
    """

    def __init__(self, func: CheckFunc, name: Optional[str] = None):
        """
        Create a checker from a function.

        Args:
            func: Function with signature (credential) → None | Rejection | Outcome
            name: Optional name for logging (defaults to function name)
        """
        super().__init__()
        self._func = func
        self._name = name or func.__name__

    def check(self, credential: Credential) -> Outcome:
        """Run the wrapped function and forward unless it refused."""
        result = self._func(credential)

        if isinstance(result, Rejection):
            return self.reject(result)

        if isinstance(result, Outcome) and not result:
            return result

        return self.check_next(credential)

    @property
    def name(self) -> str:
        """Return the checker name."""
        return self._name


def function_checker(func: CheckFunc) -> FunctionChecker:
    """Decorator to create a checker from a function."""
    return FunctionChecker(func)
