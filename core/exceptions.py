from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Unified exception hierarchy for revealgate.

All domain-specific exceptions derive from :class:`RevealGateError`,
enabling callers to catch the entire family with a single clause::

    try:
        ...
    except RevealGateError as e:
        logger.error("Domain error: %s", e)
"""


class RevealGateError(Exception):
    """Base exception for all revealgate errors."""


# ── Credential source ────────────────────────────────────────


class CredentialSourceError(RevealGateError):
    """Credential source errors."""


class SourceUnavailableError(CredentialSourceError):
    """Credential source could not be reached (network, auth, timeout).

    Non-fatal once serving has started: the credential cache keeps its
    previous set and retries on the next scheduled refresh.
    """

    def __init__(self, message: str, *, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


# ── Configuration ────────────────────────────────────────────


class ConfigError(RevealGateError):
    """Configuration errors."""


class ConfigValidationError(ConfigError):
    """Configuration validation failure."""


# ── Startup ──────────────────────────────────────────────────


class StartupError(RevealGateError):
    """Server cannot start safely (e.g. protection configured but broken)."""
