"""Unit tests for server/routes/deck.py."""
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.auth.gate import AccessGate
from core.config.models import DeckConfig
from server.routes.deck import (
    create_deck_router,
    detect_content_type,
    render_slides,
    resolve_document,
)


# ── detect_content_type ──────────────────────────────────


class TestDetectContentType:
    @pytest.mark.parametrize("name,expected", [
        ("theme.css", "text/css"),
        ("app.js", "application/javascript"),
        ("logo.SVG", "image/svg+xml"),
        ("slides.md", "text/markdown; charset=utf-8"),
    ])
    def test_fixed_types(self, name, expected):
        assert detect_content_type(Path(name)) == expected

    def test_falls_back_to_mimetypes(self):
        assert detect_content_type(Path("photo.png")) == "image/png"

    def test_unknown_extension(self):
        assert detect_content_type(Path("blob.zzz-unknown")) == "application/octet-stream"


# ── resolve_document ─────────────────────────────────────


class TestResolveDocument:
    def test_existing_file(self, deck_dir):
        assert resolve_document(deck_dir, "slides.md") == (deck_dir / "slides.md").resolve()

    def test_nested_file(self, deck_dir):
        assert resolve_document(deck_dir, "/images/logo.svg") is not None

    def test_missing_file(self, deck_dir):
        assert resolve_document(deck_dir, "nope.md") is None

    def test_directory_is_not_a_document(self, deck_dir):
        assert resolve_document(deck_dir, "images") is None

    def test_root_is_not_a_document(self, deck_dir):
        assert resolve_document(deck_dir, "") is None

    def test_traversal_is_rejected(self, deck_dir, tmp_path):
        (tmp_path / "secret.txt").write_text("nope", encoding="utf-8")
        assert resolve_document(deck_dir, "../secret.txt") is None


# ── render_slides ────────────────────────────────────────


class TestRenderSlides:
    def test_one_section_per_file(self):
        out = render_slides(DeckConfig(files=["intro.md", "/part2.md"]))
        assert '<section data-markdown="/intro.md"></section>' in out
        assert '<section data-markdown="/part2.md"></section>' in out
        assert out.index("intro.md") < out.index("part2.md")

    def test_packaged_theme(self):
        out = render_slides(DeckConfig(files=["a.md"], theme="black"))
        assert 'href="/revealjs/css/theme/black.css"' in out

    def test_local_theme(self, deck_dir):
        deck = DeckConfig.from_files(["slides.md"], root=str(deck_dir), theme="custom")
        assert deck.original_theme is True
        assert 'href="/custom.css"' in render_slides(deck)

    def test_transition(self):
        out = render_slides(DeckConfig(files=["a.md"], transition="zoom"))
        assert 'transition: "zoom"' in out

    def test_watermark_and_print(self):
        out = render_slides(DeckConfig(files=["a.md"], watermark=True))
        assert 'class="watermark"' in out
        assert "?print-pdf" in out

    def test_disable_print(self):
        out = render_slides(DeckConfig(files=["a.md"], disable_print=True))
        assert 'class="no-print"' in out
        assert "?print-pdf" not in out

    def test_file_names_are_escaped(self):
        out = render_slides(DeckConfig(files=['x"><script>.md']))
        assert "<script>.md" not in out


# ── Router ───────────────────────────────────────────────


class _AlwaysChallenge:
    """Authenticator stub that never verifies a session."""

    def verify_evidence(self, evidence):
        return False


@pytest.fixture
def make_client(deck_dir):
    def _make(gate: AccessGate) -> TestClient:
        app = FastAPI()
        app.state.gate = gate
        app.state.config = SimpleNamespace(
            deck=DeckConfig.from_files(["slides.md"], root=str(deck_dir), theme="custom"),
        )
        app.include_router(create_deck_router())
        return TestClient(app, follow_redirects=False)
    return _make


class TestDeckRouter:
    def test_unknown_path_serves_slide_shell(self, make_client):
        resp = make_client(AccessGate()).get("/anything/here")
        assert resp.status_code == 200
        assert 'data-markdown="/slides.md"' in resp.text

    def test_svg_content_type(self, make_client):
        resp = make_client(AccessGate()).get("/images/logo.svg")
        assert resp.headers["content-type"] == "image/svg+xml"

    def test_local_theme_file_served(self, make_client):
        resp = make_client(AccessGate()).get("/custom.css")
        assert resp.headers["content-type"].startswith("text/css")
        assert "color: red" in resp.text

    def test_challenge_stops_before_content(self, make_client):
        client = make_client(AccessGate(_AlwaysChallenge()))
        for path in ("/", "/slides.md", "/custom.css"):
            resp = client.get(path)
            assert resp.status_code == 302
            assert resp.headers["location"] == "/login"

    def test_head_is_gated(self, make_client):
        client = make_client(AccessGate(_AlwaysChallenge()))
        resp = client.head("/slides.md")
        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"

    def test_head_allowed_reports_content_type(self, make_client):
        resp = make_client(AccessGate()).head("/slides.md")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        assert resp.content == b""
