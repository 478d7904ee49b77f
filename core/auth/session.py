from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Stateless session signing and verification.

No session table is kept.  A session is the pair ``(created, signature)``
held by the client, where::

    signature = sha1(f"{password}:{instance_salt}:{created}")

and it is valid iff some password in the *current* credential set
reproduces the signature.  Removing a password from the source therefore
revokes every session issued for it at the next refresh, and a restart
(new instance salt) revokes everything.

Verification scans the whole credential set, O(n) per request.  That is
fine for a handful of passwords; it does not scale to large allow-lists.
"""

import hashlib
import hmac
import logging
import time

from core.auth.cache import CredentialCache
from core.auth.identity import InstanceIdentity
from core.auth.models import SessionEvidence

logger = logging.getLogger("revealgate.auth.session")

# Cookie lifetime (seconds)
SESSION_MAX_AGE = 60 * 60 * 24


class SessionAuthenticator:
    def __init__(self, cache: CredentialCache, identity: InstanceIdentity) -> None:
        self._cache = cache
        self._identity = identity

    def sign(self, password: str, created: str) -> str:
        payload = f"{password}:{self._identity.salt}:{created}"
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()

    def check_password(self, candidate: str) -> bool:
        """Exact, case-sensitive match of the trimmed *candidate*."""
        return candidate.strip() in self._cache.current()

    def issue(self, password: str, now_ns: int | None = None) -> SessionEvidence:
        """Sign a new session for an already-checked *password*."""
        created = str(time.time_ns() if now_ns is None else now_ns)
        return SessionEvidence(created=created, signature=self.sign(password.strip(), created))

    def verify(self, created: str | None, signature: str | None) -> bool:
        if not created or not signature:
            return False
        presented = signature.encode("utf-8")
        credentials = self._cache.current()
        for password in credentials:
            if hmac.compare_digest(self.sign(password, created).encode("utf-8"), presented):
                return True
        logger.debug("Session signature matched none of %d password(s)", len(credentials))
        return False

    def verify_evidence(self, evidence: SessionEvidence | None) -> bool:
        if evidence is None:
            return False
        return self.verify(evidence.created, evidence.signature)
