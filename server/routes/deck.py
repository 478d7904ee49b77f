from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

"""Gated content: files under the document root and the slide shell."""

import html
import logging
import mimetypes
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse

from core.auth.gate import AccessGate
from core.auth.models import GateDecision
from core.config.models import DeckConfig
from core.paths import load_template

logger = logging.getLogger("revealgate.routes.deck")

_CONTENT_TYPES = {
    ".css": "text/css",
    ".js": "application/javascript",
    ".svg": "image/svg+xml",
    ".md": "text/markdown; charset=utf-8",
}


def detect_content_type(path: Path) -> str:
    content_type = _CONTENT_TYPES.get(path.suffix.lower())
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def resolve_document(root: Path, url_path: str) -> Path | None:
    """Map *url_path* to a regular file inside *root*, or ``None``."""
    base = root.resolve()
    candidate = (base / url_path.lstrip("/")).resolve()
    if not candidate.is_relative_to(base):
        logger.warning("Rejected path outside document root: %s", url_path)
        return None
    if not candidate.is_file():
        return None
    return candidate


def render_slides(deck: DeckConfig) -> str:
    if deck.original_theme:
        theme_href = f"/{deck.theme}"
    else:
        theme_href = f"/revealjs/css/theme/{deck.theme}"

    sections = "\n".join(
        f'      <section data-markdown="/{html.escape(f.lstrip("/"), quote=True)}"></section>'
        for f in deck.files
    )
    body_classes = []
    if deck.watermark:
        body_classes.append("watermark")
    if deck.disable_print:
        body_classes.append("no-print")

    return load_template(
        "slide",
        theme_href=html.escape(theme_href, quote=True),
        transition=html.escape(deck.transition, quote=True),
        sections=sections,
        body_class=" ".join(body_classes),
        print_link="" if deck.disable_print else '<a class="print-pdf" href="?print-pdf">Print</a>',
    )


def create_deck_router() -> APIRouter:
    router = APIRouter(tags=["deck"])

    @router.api_route("/{path:path}", methods=["GET", "HEAD"])
    async def content(path: str, request: Request):
        gate: AccessGate = request.app.state.gate
        evidence = AccessGate.evidence_from_cookies(request.cookies)
        if gate.decide(evidence) is GateDecision.CHALLENGE:
            return RedirectResponse("/login", status_code=302)

        deck: DeckConfig = request.app.state.config.deck
        document = resolve_document(Path(deck.root), path)
        if document is not None:
            return FileResponse(document, media_type=detect_content_type(document))
        return HTMLResponse(render_slides(deck))

    return router
