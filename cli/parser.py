# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import os


def _add_credential_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--creds-file", default=None,
        help="Google service-account key file (default: google-service-account.json)",
    )
    p.add_argument(
        "--spreadsheet", default=None,
        help="Spreadsheet ID holding the passwords; protection is off when unset",
    )
    p.add_argument(
        "--worksheet", default=None,
        help="Worksheet (tab) in the spreadsheet holding the passwords",
    )
    p.add_argument("--pass-col", default=None, help="Password column (default: A)")
    p.add_argument("--expire-col", default=None, help="Expiry column (default: B)")
    p.add_argument(
        "--config", default=None, metavar="PATH",
        help="config.json to read (default: <data-dir>/config.json)",
    )


def build_parser() -> argparse.ArgumentParser:
    from core.version import __version__

    parser = argparse.ArgumentParser(
        prog="revealgate",
        description="revealgate - serve reveal.js slides behind a password gate",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override runtime data directory (default: ~/.revealgate or REVEALGATE_DATA_DIR)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Log level (default: REVEALGATE_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── Serve ─────────────────────────────────────────────
    p_serve = sub.add_parser("serve", help="Serve markdown slides")
    p_serve.add_argument("files", nargs="+", metavar="FILE", help="Markdown slide file(s)")
    p_serve.add_argument("--host", default=None, help="Bind address (default: 0.0.0.0)")
    p_serve.add_argument("-p", "--port", type=int, default=None, help="TCP port (default: 3000)")
    p_serve.add_argument(
        "--root", default=None,
        help="Document root for slide files and local themes (default: current directory)",
    )
    p_serve.add_argument(
        "--theme", default=None,
        help=(
            "Slide theme or a local css file. Packaged themes: beige, black, blood, "
            "league, moon, night, serif, simple, sky, solarized, white (default: cloudops.css)"
        ),
    )
    p_serve.add_argument(
        "--transition", default=None,
        choices=["default", "cube", "page", "concave", "zoom", "linear", "fade", "none"],
        help="Slide transition (default: linear)",
    )
    p_serve.add_argument("-w", "--watermark", action="store_true", help="Watermark print-pdf output")
    p_serve.add_argument("--disable-print", action="store_true", help="Remove the print-pdf link")
    _add_credential_args(p_serve)
    p_serve.set_defaults(func=_lazy_serve)

    # ── Check credentials ─────────────────────────────────
    p_check = sub.add_parser(
        "check-credentials",
        help="Read the password sheet once and report how many passwords are valid",
    )
    _add_credential_args(p_check)
    p_check.set_defaults(func=_lazy_check_credentials)

    return parser


def cli_main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    # Apply --data-dir override before any command
    if args.data_dir:
        os.environ["REVEALGATE_DATA_DIR"] = args.data_dir

    from core.logging_config import setup_logging
    from core.paths import get_log_dir

    setup_logging(
        level=args.log_level or os.environ.get("REVEALGATE_LOG_LEVEL", "INFO"),
        log_dir=get_log_dir(),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


# ── Lazy import wrappers ──────────────────────────────────


def _lazy_serve(args: argparse.Namespace) -> None:
    from cli.commands.server import cmd_serve

    cmd_serve(args)


def _lazy_check_credentials(args: argparse.Namespace) -> None:
    from cli.commands.credentials import cmd_check_credentials

    cmd_check_credentials(args)
