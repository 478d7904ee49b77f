# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

"""Password gate: credential cache, session signing and the access gate."""

from __future__ import annotations

from core.auth.cache import CredentialCache
from core.auth.gate import AccessGate
from core.auth.identity import InstanceIdentity
from core.auth.models import CredentialSet, GateDecision, LoginError, LoginResult, SessionEvidence
from core.auth.session import SessionAuthenticator
