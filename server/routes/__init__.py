from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from server.routes.deck import create_deck_router
from server.routes.login import create_login_router
