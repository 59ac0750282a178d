from __future__ import annotations

import argparse

from rich.console import Console
from rich.text import Text

from auth import AuthError, AuthHealthStatus, CredentialManager, check
from cli.common import dispatch_subparser_help
from env import ConfigError, get_env
from logger import get_logger


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_auth_parser(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser(
        "auth",
        help="Check OAuth health or obtain a new refresh token",
    )
    asub = auth.add_subparsers(dest="auth_cmd", required=True)

    help_p = asub.add_parser("help", help="Show help for auth")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. check, setup)")
    help_p.set_defaults(action="help", _help_parser=auth)

    check_p = asub.add_parser("check", help="Exchange the refresh token once")
    check_p.add_argument("--verbose", action="store_true", help="Verbose console output")
    check_p.add_argument("--quiet", action="store_true", help="Suppress console output")
    check_p.set_defaults(action="check")

    setup_p = asub.add_parser("setup", help="Run the browser consent flow")
    setup_p.add_argument(
        "--port", type=int, default=0, help="Local redirect port (default: any free port)"
    )
    setup_p.set_defaults(action="setup")


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_auth(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "check":
        return _handle_check(args)

    if args.action == "setup":
        return _handle_setup(args)

    raise RuntimeError(f"Unknown auth action: {args.action}")


def _handle_check(args: argparse.Namespace) -> int:
    console = Console()
    quiet = bool(getattr(args, "quiet", False))
    verbose = bool(getattr(args, "verbose", False))
    env = get_env()

    try:
        oauth = env.oauth_credentials()
    except ConfigError as e:
        if not quiet:
            console.print(Text(str(e), style="red"))
        return 2

    credentials = CredentialManager(
        oauth.client_id,
        oauth.client_secret,
        oauth.refresh_token,
        timeout=env.request_timeout,
    )
    result = check(credentials)

    if result.status == AuthHealthStatus.OK:
        if not quiet:
            msg = Text("OAuth OK", style="green")
            if verbose:
                msg.append(" (token valid and usable)", style="dim")
            console.print(msg)
        return 0

    if result.status == AuthHealthStatus.AUTH_INVALID:
        if not quiet:
            console.print(Text("OAuth INVALID - reauthentication required", style="red"))
            if verbose:
                console.print(Text(result.message, style="dim"))
        return 12

    if not quiet:
        console.print(Text("OAuth check failed (unexpected error)", style="red"))
        if verbose:
            console.print(Text(result.message, style="dim"))
    return 20


def _handle_setup(args: argparse.Namespace) -> int:
    from auth.consent import run_setup_flow

    console = Console()
    logger = get_logger("auth")
    env = get_env()

    if not env.client_id or not env.client_secret:
        console.print(
            Text(
                "Set YOUTUBE_OAUTH_CLIENT_ID and YOUTUBE_OAUTH_CLIENT_SECRET first.",
                style="red",
            )
        )
        return 2

    console.print("Opening browser for Google consent...")
    try:
        refresh_token = run_setup_flow(env.client_id, env.client_secret, port=args.port)
    except AuthError as e:
        logger.error(f"OAuth setup failed: {e}")
        console.print(Text(str(e), style="red"))
        return 12

    console.print(Text("Authentication successful.", style="green"))
    console.print("Add this line to config/.env:\n")
    console.print(f"YOUTUBE_OAUTH_REFRESH_TOKEN={refresh_token}", markup=False)
    return 0
