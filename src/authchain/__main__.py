"""
=============================================================================
AUTHCHAIN CLI ENTRY POINT
=============================================================================

Replays a batch of login attempts through the reference chain.

=============================================================================
USAGE
=============================================================================

    # Register two users, try three logins with the default limit (2/min)
    python -m authchain \\
        --user admin@example.com:admin_pass \\
        --user user@example.com:user_pass \\
        --attempt admin@example.com:admin_pass \\
        --attempt user@example.com:wrong \\
        --attempt user@example.com:user_pass

    # Per-identity throttling, JSON decision logs
    python -m authchain --per-identity --log-format json -u a:1 -a a:1

Each attempt prints one line. The exit status is 0 if the LAST attempt
was accepted, 1 if it was rejected, and 2 for usage or configuration
errors.

Settings not given on the command line fall back to AUTHCHAIN_*
environment variables (see GatekeeperConfig.from_env).

=============================================================================
"""

import argparse
import sys
from typing import List, Optional, Tuple

from . import __version__
from .audit import configure_logging
from .config import GatekeeperConfig, LOG_FORMATS, LOG_LEVELS
from .errors import AuthChainError
from .gatekeeper import Gatekeeper
from .models import Credential


def credential_pair(value: str) -> Tuple[str, str]:
    """Parse "identity:secret". Only the first colon separates the two."""
    identity, sep, secret = value.partition(":")
    if not sep or not identity:
        raise argparse.ArgumentTypeError(
            f"expected identity:secret, got {value!r}"
        )
    return identity, secret


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="authchain",
        description="Replay login attempts through a throttle → credentials → role chain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m authchain -u admin@example.com:admin_pass -a admin@example.com:admin_pass
  python -m authchain --limit 5 --per-identity -u bob:pw -a bob:pw -a bob:nope
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # CREDENTIALS AND ATTEMPTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--user", "-u",
        type=credential_pair,
        action="append",
        default=[],
        metavar="IDENTITY:SECRET",
        help="Register an identity before replaying attempts (repeatable)"
    )

    parser.add_argument(
        "--attempt", "-a",
        type=credential_pair,
        action="append",
        default=[],
        metavar="IDENTITY:SECRET",
        help="Login attempt to replay, in order (repeatable)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CHAIN ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Attempts allowed per window (default: 2)"
    )

    parser.add_argument(
        "--window",
        type=float,
        default=None,
        help="Throttle window length in seconds (default: 60)"
    )

    parser.add_argument(
        "--per-identity",
        action="store_true",
        default=None,
        help="Throttle each identity separately instead of globally"
    )

    parser.add_argument(
        "--admin",
        action="append",
        default=None,
        metavar="IDENTITY",
        help="Identity to treat as privileged (repeatable)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Decision log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"authchain {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> GatekeeperConfig:
    """Environment first, then whatever was given on the command line."""
    config = GatekeeperConfig.from_env()

    if args.limit is not None:
        config.requests_per_minute = args.limit
    if args.window is not None:
        config.window_seconds = args.window
    if args.per_identity is not None:
        config.throttle_per_identity = args.per_identity
    if args.admin is not None:
        config.privileged_identities = tuple(args.admin)
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.attempt:
        parser.error("at least one --attempt is required")

    try:
        config = config_from_args(args)
        config.validate()
        configure_logging(config)
        gatekeeper = Gatekeeper.from_config(config)
    except (AuthChainError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    for identity, secret in args.user:
        gatekeeper.register(identity, secret)

    allowed = False
    for identity, secret in args.attempt:
        outcome = gatekeeper.evaluate(Credential(identity, secret))
        allowed = outcome.allowed

        if allowed:
            print(f"{identity}: ALLOWED")
        else:
            print(f"{identity}: DENIED ({outcome.reason.value}: {outcome.message})")

    return 0 if allowed else 1


if __name__ == "__main__":
    sys.exit(main())
