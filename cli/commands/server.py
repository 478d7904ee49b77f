# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from core.config.models import (
    CredentialSourceConfig,
    DeckConfig,
    RevealGateConfig,
    load_config,
)

logger = logging.getLogger("revealgate")


# ── Config assembly ───────────────────────────────────────


def _overrides(values: dict[str, object]) -> dict[str, object]:
    return {k: v for k, v in values.items() if v is not None}


def build_credentials_config(
    args: argparse.Namespace,
    base: RevealGateConfig,
) -> CredentialSourceConfig:
    """CLI flags layered over the config-file credential settings."""
    merged = base.credentials.model_dump()
    merged.update(_overrides({
        "creds_file": args.creds_file,
        "spreadsheet": args.spreadsheet,
        "worksheet": args.worksheet,
        "pass_column": args.pass_col,
        "expire_column": args.expire_col,
    }))
    return CredentialSourceConfig.model_validate(merged)


def load_base_config(args: argparse.Namespace) -> RevealGateConfig:
    return load_config(Path(args.config) if args.config else None)


def build_config(args: argparse.Namespace) -> RevealGateConfig:
    base = load_base_config(args)
    deck_kwargs = _overrides({
        "root": args.root,
        "theme": args.theme,
        "transition": args.transition,
    })
    deck_kwargs.setdefault("root", base.deck.root)
    deck_kwargs.setdefault("theme", base.deck.theme)
    deck_kwargs.setdefault("transition", base.deck.transition)
    # An explicit original_theme in config.json wins unless --theme overrides the theme.
    if args.theme is None and "original_theme" in base.deck.model_fields_set:
        deck_kwargs["original_theme"] = base.deck.original_theme
    deck = DeckConfig.from_files(
        args.files,
        watermark=args.watermark or base.deck.watermark,
        disable_print=args.disable_print or base.deck.disable_print,
        **deck_kwargs,
    )
    return RevealGateConfig(
        host=args.host or base.host,
        port=args.port or base.port,
        log_level=base.log_level,
        deck=deck,
        credentials=build_credentials_config(args, base),
    )


# ── Commands ──────────────────────────────────────────────


def cmd_serve(args: argparse.Namespace) -> None:
    """Serve the slide deck (blocks until shutdown)."""
    import uvicorn

    from server.app import create_app

    config = build_config(args)
    if config.credentials.configured:
        logger.info(
            "Password protection requested (spreadsheet=%s, worksheet=%s)",
            config.credentials.spreadsheet, config.credentials.worksheet,
        )

    print(f"accepting connections at http://*:{config.port}/")
    app = create_app(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_keep_alive=65,
    )
