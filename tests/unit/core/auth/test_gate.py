"""Unit tests for core/auth/gate.py: access decisions and login handling."""
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from core.auth.cache import CredentialCache
from core.auth.gate import CREATED_COOKIE, SESSION_COOKIE, AccessGate
from core.auth.identity import InstanceIdentity
from core.auth.models import GateDecision, LoginError, SessionEvidence
from core.auth.session import SessionAuthenticator


@pytest.fixture
def cache(fake_source) -> CredentialCache:
    c = CredentialCache(fake_source)
    c.refresh_blocking()
    return c


@pytest.fixture
def gate(cache) -> AccessGate:
    return AccessGate(SessionAuthenticator(cache, InstanceIdentity.generate()))


# ── Unprotected ──────────────────────────────────────────


class TestUnprotectedGate:
    def test_not_protected(self):
        assert AccessGate().protected is False

    def test_always_allows(self):
        gate = AccessGate()
        assert gate.decide(None) is GateDecision.ALLOW
        assert gate.decide(SessionEvidence("1", "bogus")) is GateDecision.ALLOW

    def test_login_has_nothing_to_check(self):
        result = AccessGate().login("POST", "abc123")
        assert result.accepted is False
        assert result.error is LoginError.INVALID_PASS


# ── Protected ────────────────────────────────────────────


class TestDecide:
    def test_protected(self, gate):
        assert gate.protected is True

    def test_no_evidence_challenges(self, gate):
        assert gate.decide(None) is GateDecision.CHALLENGE

    def test_bogus_evidence_challenges(self, gate):
        assert gate.decide(SessionEvidence("123", "deadbeef")) is GateDecision.CHALLENGE

    def test_login_evidence_allows(self, gate):
        result = gate.login("POST", "abc123")
        assert gate.decide(result.evidence) is GateDecision.ALLOW

    def test_revoked_password_challenges(self, gate, cache, fake_source):
        result = gate.login("POST", "abc123")
        fake_source.set_rows([("new-password", "2099-01-01")])
        cache.refresh_blocking()
        assert gate.decide(result.evidence) is GateDecision.CHALLENGE


class TestLogin:
    def test_valid_password_accepted(self, gate):
        result = gate.login("POST", "abc123")
        assert result.accepted is True
        assert result.error is None
        assert result.evidence is not None

    def test_method_is_case_insensitive(self, gate):
        assert gate.login("post", "abc123").accepted is True

    def test_wrong_password(self, gate):
        result = gate.login("POST", "nope")
        assert result.accepted is False
        assert result.error is LoginError.INVALID_PASS

    def test_expired_password(self, gate):
        assert gate.login("POST", "old").error is LoginError.INVALID_PASS

    def test_missing_password(self, gate):
        assert gate.login("POST", None).error is LoginError.INVALID_PASS
        assert gate.login("POST", "").error is LoginError.INVALID_PASS

    def test_get_does_not_submit(self, gate):
        assert gate.login("GET", "abc123").error is LoginError.INVALID_PASS

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS"])
    def test_other_methods_are_malformed(self, gate, method):
        result = gate.login(method, "abc123")
        assert result.accepted is False
        assert result.error is LoginError.INVALID_METHOD


# ── Cookie helpers ───────────────────────────────────────


class TestCookies:
    def test_evidence_from_cookies(self):
        evidence = AccessGate.evidence_from_cookies({CREATED_COOKIE: "1", SESSION_COOKIE: "abc"})
        assert evidence == SessionEvidence("1", "abc")

    @pytest.mark.parametrize("cookies", [
        {},
        {CREATED_COOKIE: "1"},
        {SESSION_COOKIE: "abc"},
        {CREATED_COOKIE: "", SESSION_COOKIE: "abc"},
    ])
    def test_incomplete_cookies(self, cookies):
        assert AccessGate.evidence_from_cookies(cookies) is None

    def test_session_cookie_parameters(self):
        cookies = AccessGate.session_cookies(SessionEvidence("1", "sig"))
        assert [c["key"] for c in cookies] == ["created", "session"]
        assert [c["value"] for c in cookies] == ["1", "sig"]
        for c in cookies:
            assert c["max_age"] == 86400
            assert c["path"] == "/"
            assert c["httponly"] is True
