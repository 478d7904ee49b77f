from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

"""Login form and password submission.

Registered only when password protection is enabled.  Never gated.
"""

import html
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from core.auth.gate import AccessGate
from core.auth.models import LoginError, LoginResult
from core.paths import load_template

logger = logging.getLogger("revealgate.routes.login")

_ERROR_MESSAGES = {
    LoginError.INVALID_PASS.value: "Invalid password, please try again.",
    LoginError.INVALID_METHOD.value: "Unsupported request, please use the form.",
}


def _rejected(result: LoginResult) -> RedirectResponse:
    error = result.error or LoginError.INVALID_PASS
    return RedirectResponse(f"/login?error={error.value}", status_code=302)


def create_login_router() -> APIRouter:
    router = APIRouter(tags=["auth"])

    @router.get("/login")
    async def login_form(error: str | None = None):
        message = _ERROR_MESSAGES.get(error or "", "")
        return HTMLResponse(load_template(
            "login",
            error_message=html.escape(message),
            error_hidden="" if message else "hidden",
        ))

    @router.post("/login")
    async def login_submit(request: Request):
        gate: AccessGate = request.app.state.gate
        form = await request.form()
        password = form.get("password")
        result = gate.login("POST", password if isinstance(password, str) else None)
        if not result.accepted:
            return _rejected(result)

        response = RedirectResponse("/", status_code=302)
        for cookie in AccessGate.session_cookies(result.evidence):
            response.set_cookie(**cookie)
        return response

    @router.api_route("/login", methods=["PUT", "PATCH", "DELETE"])
    async def login_invalid_method(request: Request):
        gate: AccessGate = request.app.state.gate
        logger.info("Login rejected: method %s", request.method)
        return _rejected(gate.login(request.method, None))

    return router
