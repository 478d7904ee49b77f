"""Unit tests for core/paths.py: path resolution and HTML templates."""
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pathlib import Path

import pytest

from core.paths import (
    TEMPLATES_DIR,
    _template_cache,
    get_data_dir,
    get_log_dir,
    load_template,
)


class TestDataDir:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REVEALGATE_DATA_DIR", str(tmp_path / "rg"))
        assert get_data_dir() == (tmp_path / "rg").resolve()
        assert get_log_dir() == (tmp_path / "rg").resolve() / "logs"

    def test_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("REVEALGATE_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".revealgate"


class TestLoadTemplate:
    @pytest.fixture(autouse=True)
    def _clear_cache(self):
        _template_cache.clear()
        yield
        _template_cache.clear()

    def test_templates_shipped(self):
        assert (TEMPLATES_DIR / "login.html").is_file()
        assert (TEMPLATES_DIR / "slide.html").is_file()

    def test_substitutes_and_unescapes_braces(self):
        page = load_template("login", error_message="Bad", error_hidden="")
        assert "Bad" in page
        assert "body { font-family" in page
        assert "{{" not in page

    def test_unknown_placeholders_left_intact(self):
        page = load_template("login")
        assert "{error_message}" in page

    def test_cached(self):
        load_template("login")
        assert "login" in _template_cache
