from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Credential sources: where the password allow-list is read from.

A source returns one column of a worksheet as a list of raw cell values,
one entry per row (``None`` for an empty cell).  Rows from two columns are
aligned by position.  Sources are blocking; the credential cache calls
them from a worker thread.
"""

import logging
from typing import Any, Protocol

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.config.models import CredentialSourceConfig
from core.exceptions import SourceUnavailableError

logger = logging.getLogger("revealgate.auth.source")

# Sheets API scope (read access is all the allow-list needs)
SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class CredentialSource(Protocol):
    def fetch_rows(self, column: str) -> list[str | None]:
        """Return every cell of *column*, top to bottom.

        Raises:
            SourceUnavailableError: the source could not be read.
        """
        ...


def column_range(worksheet: str, column: str) -> str:
    """A1 notation for a whole column, e.g. ``'passwords!A:A'``."""
    return f"{worksheet}!{column}:{column}"


def _first_cell(row: list[Any]) -> str | None:
    if not row or row[0] is None:
        return None
    return str(row[0])


class GoogleSheetsSource:
    """Reads password and expiry columns from a Google Sheets worksheet.

    Authenticates with a service-account key file.  The underlying HTTP
    client enforces *timeout_s* on every request.
    """

    def __init__(
        self,
        spreadsheet: str,
        worksheet: str,
        creds_file: str,
        *,
        timeout_s: float = 30.0,
    ):
        self.spreadsheet = spreadsheet
        self.worksheet = worksheet
        self.creds_file = creds_file
        self.timeout_s = timeout_s
        self._service = None

    @classmethod
    def from_config(cls, config: CredentialSourceConfig) -> GoogleSheetsSource:
        return cls(
            spreadsheet=config.spreadsheet,
            worksheet=config.worksheet,
            creds_file=config.creds_file,
            timeout_s=config.timeout_s,
        )

    def _get_service(self):  # noqa: ANN202
        if self._service is not None:
            return self._service
        try:
            creds = service_account.Credentials.from_service_account_file(
                self.creds_file, scopes=SCOPES,
            )
        except (OSError, ValueError) as exc:
            raise SourceUnavailableError(
                f"Unable to load service account credentials from {self.creds_file}: {exc}"
            ) from exc

        http = AuthorizedHttp(creds, http=httplib2.Http(timeout=self.timeout_s))
        self._service = build("sheets", "v4", http=http, cache_discovery=False)
        logger.info("Google Sheets client ready (spreadsheet=%s)", self.spreadsheet)
        return self._service

    def fetch_rows(self, column: str) -> list[str | None]:
        range_ = column_range(self.worksheet, column)
        service = self._get_service()
        try:
            resp = (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet, range=range_)
                .execute()
            )
        except HttpError as exc:
            raise SourceUnavailableError(
                f"Sheets API error reading {range_}: {exc}", column=column,
            ) from exc
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as exc:
            raise SourceUnavailableError(
                f"Unable to reach Sheets API reading {range_}: {exc}", column=column,
            ) from exc

        values = resp.get("values", [])
        logger.debug("Fetched %d row(s) from %s", len(values), range_)
        return [_first_cell(row) for row in values]
