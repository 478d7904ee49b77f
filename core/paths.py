# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized path resolution for revealgate.

All modules import directory paths from here instead of computing them ad-hoc.
Runtime data directory can be overridden via REVEALGATE_DATA_DIR environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: where the code lives (immutable, git-tracked)
PROJECT_DIR = Path(__file__).resolve().parent.parent

# HTML templates shipped with the project
TEMPLATES_DIR = PROJECT_DIR / "server" / "templates"

# Packaged reveal.js distribution (css/, js/, plugin/)
REVEALJS_DIR = PROJECT_DIR / "server" / "static" / "revealjs"

# Default runtime data directory
_DEFAULT_DATA_DIR = Path.home() / ".revealgate"


def get_data_dir() -> Path:
    """Return the runtime data directory, respecting REVEALGATE_DATA_DIR env var."""
    env_val = os.environ.get("REVEALGATE_DATA_DIR")
    if env_val:
        return Path(env_val).expanduser().resolve()
    return _DEFAULT_DATA_DIR


def get_log_dir() -> Path:
    return get_data_dir() / "logs"


# --- HTML templates ---

# Cache loaded templates to avoid repeated disk reads
_template_cache: dict[str, str] = {}


class _SafeFormatDict(dict):
    """Dict that returns ``{key}`` for missing keys during format_map.

    This ensures ``{{`` always resolves to ``{`` (double-brace escaping)
    even when no kwargs are passed, while leaving unknown ``{placeholder}``
    patterns intact in the output.
    """

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def load_template(name: str, **kwargs: object) -> str:
    """Load an HTML template from server/templates/{name}.html and format it.

    Templates use Python str.format_map() placeholders like {theme_href}.
    Literal braces in templates (CSS, inline JS) must be doubled: {{ and }}.

    Args:
        name: Template file name without extension (e.g. ``"login"``).
        **kwargs: Values to substitute into the template placeholders.
    """
    if name not in _template_cache:
        path = TEMPLATES_DIR / f"{name}.html"
        _template_cache[name] = path.read_text(encoding="utf-8")
    template = _template_cache[name]
    return template.format_map(_SafeFormatDict(kwargs))
