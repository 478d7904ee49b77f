from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Access gate: decides whether a content request must log in first.

The gate is either unprotected (no credential source configured, every
request allowed) or protected for the whole process lifetime.  It knows
nothing about paths; the HTTP layer applies it to content responses only,
which is what keeps the login endpoint reachable.
"""

import logging

from core.auth.models import GateDecision, LoginError, LoginResult, SessionEvidence
from core.auth.session import SESSION_MAX_AGE, SessionAuthenticator

logger = logging.getLogger("revealgate.auth.gate")

CREATED_COOKIE = "created"
SESSION_COOKIE = "session"

_LOGIN_METHODS = frozenset({"GET", "POST"})


class AccessGate:
    def __init__(self, authenticator: SessionAuthenticator | None = None) -> None:
        self._authenticator = authenticator

    @property
    def protected(self) -> bool:
        return self._authenticator is not None

    def decide(self, evidence: SessionEvidence | None) -> GateDecision:
        if self._authenticator is None:
            return GateDecision.ALLOW
        if self._authenticator.verify_evidence(evidence):
            return GateDecision.ALLOW
        return GateDecision.CHALLENGE

    def login(self, method: str, password: str | None) -> LoginResult:
        """Handle a password submission.

        Only POST submits; GET merely shows the form, so it is rejected
        here as a missing password.  Any other method is malformed.
        """
        if method.upper() not in _LOGIN_METHODS:
            return LoginResult(error=LoginError.INVALID_METHOD)
        if self._authenticator is None:
            # No allow-list to check against.
            logger.debug("Login submitted while protection is disabled")
            return LoginResult(error=LoginError.INVALID_PASS)
        if method.upper() != "POST" or not password or not self._authenticator.check_password(password):
            logger.info("Login rejected: invalid password")
            return LoginResult(error=LoginError.INVALID_PASS)
        evidence = self._authenticator.issue(password)
        logger.info("Login accepted; session issued (created=%s)", evidence.created)
        return LoginResult(evidence=evidence)

    @staticmethod
    def evidence_from_cookies(cookies: dict[str, str]) -> SessionEvidence | None:
        created = cookies.get(CREATED_COOKIE)
        signature = cookies.get(SESSION_COOKIE)
        if not created or not signature:
            return None
        return SessionEvidence(created=created, signature=signature)

    @staticmethod
    def session_cookies(evidence: SessionEvidence) -> list[dict[str, object]]:
        """Cookie parameters to set on the login response."""
        common = {"max_age": SESSION_MAX_AGE, "path": "/", "httponly": True}
        return [
            {"key": CREATED_COOKIE, "value": evidence.created, **common},
            {"key": SESSION_COOKIE, "value": evidence.signature, **common},
        ]
