# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
"""Global test fixtures for revealgate.

Provides filesystem isolation, config/template cache management and
fake credential sources for all test modules.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers.filesystem import create_deck_dir, create_test_data_dir
from tests.helpers.mocks import FakeCredentialSource


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated revealgate runtime data directory.

    - Redirects ``REVEALGATE_DATA_DIR`` to a temp directory
    - Invalidates config and template caches before and after the test
    """
    from core.config import invalidate_cache
    from core.paths import _template_cache

    d = create_test_data_dir(tmp_path)
    monkeypatch.setenv("REVEALGATE_DATA_DIR", str(d))

    invalidate_cache()
    _template_cache.clear()

    yield d

    invalidate_cache()
    _template_cache.clear()


@pytest.fixture
def deck_dir(tmp_path: Path) -> Path:
    return create_deck_dir(tmp_path, theme_css="body { color: red; }")


@pytest.fixture
def fake_source() -> FakeCredentialSource:
    """Worksheet from the end-to-end scenario: one live and one stale password."""
    return FakeCredentialSource.with_rows([
        ("abc123", "2099-01-01"),
        ("old", "2000-01-01"),
    ])
