from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Authentication data types for revealgate."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


@dataclass(frozen=True)
class CredentialRow:
    """One password row read from the credential source."""

    password: str
    expires_on: date | None = None


@dataclass(frozen=True)
class CredentialSet:
    """Immutable set of currently-valid passwords.

    Replaced wholesale on every successful refresh; never mutated.
    """

    passwords: frozenset[str] = frozenset()
    built_at: datetime | None = None

    @classmethod
    def of(cls, passwords: Iterable[str], built_at: datetime | None = None) -> CredentialSet:
        return cls(passwords=frozenset(passwords), built_at=built_at)

    def __contains__(self, password: object) -> bool:
        return password in self.passwords

    def __iter__(self) -> Iterator[str]:
        return iter(self.passwords)

    def __len__(self) -> int:
        return len(self.passwords)


@dataclass(frozen=True)
class SessionEvidence:
    """Client-held proof of a session: the two cookie values."""

    created: str
    signature: str = field(repr=False)


class GateDecision(str, Enum):
    ALLOW = "allow"
    CHALLENGE = "challenge"


class LoginError(str, Enum):
    INVALID_PASS = "invalid_pass"
    INVALID_METHOD = "invalid_method"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login submission.

    Exactly one of ``evidence`` (accepted) or ``error`` (rejected) is set.
    """

    evidence: SessionEvidence | None = None
    error: LoginError | None = None

    @property
    def accepted(self) -> bool:
        return self.evidence is not None
