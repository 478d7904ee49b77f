# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from core.config.models import (
    CredentialSourceConfig,
    DeckConfig,
    RevealGateConfig,
    add_extension,
    get_config_path,
    invalidate_cache,
    load_config,
)
