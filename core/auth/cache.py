from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""In-memory cache of the valid-password allow-list.

The cache pulls the password and expiry columns from a
:class:`~core.auth.source.CredentialSource`, drops header and expired rows,
and publishes the result as a new immutable :class:`CredentialSet` with a
single reference swap.  Readers call :meth:`CredentialCache.current` and
keep the returned snapshot for the rest of their operation, so a refresh
running concurrently can never produce a torn read.

A failed refresh leaves the previous set in place.  The server runs
:meth:`CredentialCache.refresh_safely` every
:data:`REFRESH_INTERVAL_MINUTES` minutes, so failures heal on the next run.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, time, timedelta

from core.auth.models import CredentialRow, CredentialSet
from core.auth.source import CredentialSource
from core.exceptions import SourceUnavailableError

logger = logging.getLogger("revealgate.auth.cache")

# Rows 0 and 1 of every column are labels, never passwords.
HEADER_ROWS = 2

REFRESH_INTERVAL_MINUTES = 5

EXPIRY_FORMAT = "%Y-%m-%d"

DEFAULT_FETCH_TIMEOUT_S = 30.0


# ── Row filtering ────────────────────────────────────────────


def parse_expiry(value: str | None) -> date | None:
    """Parse an expiry cell; missing or malformed values mean "never expires"."""
    if not value or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), EXPIRY_FORMAT).date()
    except ValueError:
        logger.debug("Ignoring malformed expiry value %r", value)
        return None


def is_expired(expires_on: date | None, now: datetime) -> bool:
    """A row stays valid through its whole expiry day and one day beyond.

    Expired iff ``expires_on + 1 day < now`` (midnight at the start of the
    day after expiry is the cutoff).
    """
    if expires_on is None:
        return False
    cutoff = datetime.combine(expires_on + timedelta(days=1), time.min)
    return cutoff < now


def build_rows(
    passwords: Sequence[str | None],
    expiries: Sequence[str | None],
    header_rows: int = HEADER_ROWS,
) -> list[CredentialRow]:
    """Zip the two columns by position, skipping headers and blank passwords."""
    rows: list[CredentialRow] = []
    for index, cell in enumerate(passwords):
        if index < header_rows:
            continue
        password = (cell or "").strip()
        if not password:
            continue
        expiry_cell = expiries[index] if index < len(expiries) else None
        rows.append(CredentialRow(password=password, expires_on=parse_expiry(expiry_cell)))
    return rows


def build_credential_set(rows: Sequence[CredentialRow], now: datetime) -> CredentialSet:
    return CredentialSet.of(
        (row.password for row in rows if not is_expired(row.expires_on, now)),
        built_at=now,
    )


# ── Cache ────────────────────────────────────────────────────


class CredentialCache:
    """Owns the current :class:`CredentialSet` and refreshes it from a source."""

    def __init__(
        self,
        source: CredentialSource,
        *,
        pass_column: str = "A",
        expire_column: str = "B",
        header_rows: int = HEADER_ROWS,
        timeout_s: float = DEFAULT_FETCH_TIMEOUT_S,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._source = source
        self.pass_column = pass_column
        self.expire_column = expire_column
        self.header_rows = header_rows
        self.timeout_s = timeout_s
        self._clock = clock
        self._current = CredentialSet()
        # Serializes producers only; current() never waits on it.
        self._refresh_lock = asyncio.Lock()

    def current(self) -> CredentialSet:
        return self._current

    def _fetch(self) -> tuple[list[str | None], list[str | None]]:
        passwords = self._source.fetch_rows(self.pass_column)
        expiries = self._source.fetch_rows(self.expire_column)
        return passwords, expiries

    def _publish(
        self,
        passwords: Sequence[str | None],
        expiries: Sequence[str | None],
    ) -> CredentialSet:
        rows = build_rows(passwords, expiries, self.header_rows)
        new_set = build_credential_set(rows, self._clock())
        previous = self._current
        self._current = new_set
        logger.info(
            "Credential cache refreshed: %d valid password(s) (%d row(s), was %d)",
            len(new_set), len(rows), len(previous),
        )
        return new_set

    def refresh_blocking(self) -> CredentialSet:
        """Refresh from the calling thread (CLI use, no event loop).

        Raises:
            SourceUnavailableError: the source failed; the current set is kept.
        """
        passwords, expiries = self._fetch()
        return self._publish(passwords, expiries)

    async def refresh(self) -> CredentialSet:
        """Fetch both columns off the event loop and swap in the new set.

        Raises:
            SourceUnavailableError: the source failed or exceeded
                ``timeout_s``; the current set is kept.
        """
        async with self._refresh_lock:
            try:
                passwords, expiries = await asyncio.wait_for(
                    asyncio.to_thread(self._fetch), timeout=self.timeout_s,
                )
            except asyncio.TimeoutError as exc:
                raise SourceUnavailableError(
                    f"Credential source timed out after {self.timeout_s:g}s",
                ) from exc
            return self._publish(passwords, expiries)

    async def refresh_safely(self) -> bool:
        """Scheduled refresh: log failures instead of raising them."""
        try:
            await self.refresh()
        except SourceUnavailableError as exc:
            logger.warning(
                "Credential refresh failed; keeping %d cached password(s): %s",
                len(self._current), exc,
            )
            return False
        except Exception:
            logger.exception("Unexpected error during credential refresh")
            return False
        return True
