"""
=============================================================================
AUTHCHAIN EXCEPTIONS
=============================================================================

Exceptions raised for configuration and programming mistakes.

=============================================================================
REJECTIONS ARE NOT EXCEPTIONS
=============================================================================

A rejected login (bad password, unknown user, rate limit hit) is a normal,
expected result of running the pipeline. It comes back as an Outcome, never
as an exception:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    TWO KINDS OF "FAILURE"                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   REJECTION (Outcome.allowed == False)                              │
    │   └── Caller sent bad credentials or sent them too often           │
    │       Returned as a value, caller decides what to do               │
    │                                                                      │
    │   ERROR (raised AuthChainError)                                     │
    │   └── The pipeline itself is wired incorrectly                      │
    │       No chain configured, chain would loop forever, ...           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""


class AuthChainError(Exception):
    """Base class for all authchain errors."""


class ChainConfigurationError(AuthChainError):
    """
    Raised when a checker chain is assembled or installed incorrectly.

    Examples: building an empty chain, installing a second chain on a
    gatekeeper that already has one.
    """


class ChainNotConfiguredError(ChainConfigurationError):
    """Raised when a gatekeeper is asked to authenticate before set_chain()."""


class ChainCycleError(ChainConfigurationError):
    """
    Raised when linking a checker would make the chain loop back on itself.

    A cyclic chain never reaches its tail, so traversal would recurse until
    the interpreter gives up. We refuse to build it instead.
    """

    def __init__(self, message: str, checker_name: str = ""):
        super().__init__(message)
        self.checker_name = checker_name  # Node whose link was refused
