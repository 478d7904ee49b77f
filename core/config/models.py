# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Central configuration module for revealgate.

Defines Pydantic models for the optional config.json and provides
load helpers with a module-level singleton cache.  CLI flags are
layered on top of the file values by ``cli.commands``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from core.exceptions import ConfigValidationError

logger = logging.getLogger("revealgate.config")

_COLUMN_RE = re.compile(r"^[A-Za-z]{1,3}$")

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class CredentialSourceConfig(BaseModel):
    """Where the password allow-list lives (a Google Sheets worksheet).

    Protection is enabled only when the spreadsheet, worksheet and
    credentials file are all set.
    """

    creds_file: str = "google-service-account.json"
    spreadsheet: str = ""
    worksheet: str = ""
    pass_column: str = "A"
    expire_column: str = "B"
    timeout_s: float = 30.0

    @field_validator("pass_column", "expire_column")
    @classmethod
    def validate_column(cls, v: str) -> str:
        if not _COLUMN_RE.match(v):
            raise ValueError(f"Invalid column identifier: {v!r} (expected a letter like 'A')")
        return v.upper()

    @property
    def configured(self) -> bool:
        return bool(self.spreadsheet and self.worksheet and self.creds_file)


class DeckConfig(BaseModel):
    """What is being served: slide files, theme and presentation options."""

    files: list[str] = []
    root: str = "."
    theme: str = "cloudops.css"
    original_theme: bool = False  # theme is a local css file, not a packaged one
    transition: str = "linear"
    watermark: bool = False
    disable_print: bool = False

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v: str) -> str:
        return add_extension(v, "css")

    @classmethod
    def from_files(cls, files: list[str], **kwargs: Any) -> DeckConfig:
        """Build a deck, detecting whether *theme* names a local css file.

        The check is made on the name as it will be linked (with the ``.css``
        suffix) under *root*. An explicit ``original_theme`` is left alone.
        """
        root = Path(kwargs.get("root", "."))
        theme = kwargs.get("theme")
        if theme and "original_theme" not in kwargs:
            kwargs["original_theme"] = (root / add_extension(theme, "css")).is_file()
        return cls(files=list(files), **kwargs)


class RevealGateConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    deck: DeckConfig = DeckConfig()
    credentials: CredentialSourceConfig = CredentialSourceConfig()


def add_extension(name: str, ext: str) -> str:
    """Append ``.{ext}`` to *name* unless it already ends with it."""
    suffix = f".{ext}"
    if name.endswith(suffix):
        return name
    return name + suffix


# ---------------------------------------------------------------------------
# Singleton cache
# ---------------------------------------------------------------------------

_config: RevealGateConfig | None = None
_config_path: Path | None = None
_config_mtime: float = 0.0


def invalidate_cache() -> None:
    """Reset the module-level singleton cache."""
    global _config, _config_path, _config_mtime
    _config = None
    _config_path = None
    _config_mtime = 0.0


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def get_config_path(data_dir: Path | None = None) -> Path:
    """Return the path to config.json inside *data_dir*.

    If *data_dir* is not given, it is resolved via ``core.paths.get_data_dir``.
    """
    if data_dir is None:
        from core.paths import get_data_dir

        data_dir = get_data_dir()
    return data_dir / "config.json"


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> RevealGateConfig:
    """Load configuration from disk, returning cached instance when possible.

    If *path* is ``None``, :func:`get_config_path` determines the location.
    When the file does not exist the default configuration is returned.
    The cache is invalidated when the file's mtime changes.

    Raises:
        ConfigValidationError: the file exists but is not valid JSON or
            does not match the schema.
    """
    global _config, _config_path, _config_mtime

    if path is None:
        path = get_config_path()

    if _config is not None and _config_path == path:
        try:
            disk_mtime = path.stat().st_mtime
        except OSError:
            disk_mtime = 0.0
        if disk_mtime == _config_mtime:
            return _config
        logger.debug("Config file changed on disk (mtime %.3f -> %.3f); reloading", _config_mtime, disk_mtime)

    if path.is_file():
        logger.debug("Loading config from %s", path)
        try:
            data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
            config = RevealGateConfig.model_validate(data)
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse %s: %s", path, exc)
            raise ConfigValidationError(f"{path}: invalid JSON ({exc})") from exc
        except ValidationError as exc:
            logger.error("Invalid config in %s: %s", path, exc)
            raise ConfigValidationError(f"{path}: {exc}") from exc
    else:
        logger.info("Config file not found at %s; using defaults", path)
        config = RevealGateConfig()

    _config = config
    _config_path = path
    try:
        _config_mtime = path.stat().st_mtime
    except OSError:
        _config_mtime = 0.0
    return config
