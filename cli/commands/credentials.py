# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import sys

from cli.commands.server import build_credentials_config, load_base_config
from core.auth.cache import CredentialCache
from core.auth.source import GoogleSheetsSource
from core.exceptions import SourceUnavailableError


def cmd_check_credentials(args: argparse.Namespace) -> None:
    """Refresh once from the credential source and report the result."""
    credentials = build_credentials_config(args, load_base_config(args))
    if not credentials.configured:
        print("Error: --spreadsheet, --worksheet and --creds-file are all required.")
        sys.exit(2)

    cache = CredentialCache(
        GoogleSheetsSource.from_config(credentials),
        pass_column=credentials.pass_column,
        expire_column=credentials.expire_column,
        timeout_s=credentials.timeout_s,
    )
    try:
        current = cache.refresh_blocking()
    except SourceUnavailableError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(
        f"{len(current)} valid password(s) in "
        f"{credentials.worksheet}!{credentials.pass_column}:{credentials.pass_column}"
    )
