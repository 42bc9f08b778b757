"""
kelasguru.api.routes.auth — Student login, logout and session check
====================================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from kelasguru.api.deps import (
    ApiClients,
    encode_session_cookie,
    get_clients,
    get_config,
    get_session_lookup,
    result_response,
)
from kelasguru.client.accessors import student_login
from kelasguru.config import KelasGuruConfig
from kelasguru.constants import SESSION_KEY
from kelasguru.services.session_service import SessionLookup

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    nis: str
    password: str


def login_redirect(lookup: SessionLookup) -> RedirectResponse:
    """Send the browser to the login view; drop the slot if it was corrupt."""
    response = RedirectResponse(lookup.redirect_to, status_code=303)
    if lookup.corrupted:
        response.delete_cookie(SESSION_KEY)
    return response


@router.post("/login")
async def login(
    body: LoginRequest,
    clients: ApiClients = Depends(get_clients),
    cfg: KelasGuruConfig = Depends(get_config),
):
    """Check NIS + password against the backend and open a session."""
    result = await student_login(clients.student_api, body.nis, body.password)
    if not result.success:
        return result_response(result)
    if not isinstance(result.data, dict):
        logger.warning("studentLogin for NIS %s returned no student object", body.nis)
        return JSONResponse(
            {"success": False, "error": "Login response carried no student data"},
            status_code=502,
        )

    response = result_response(result)
    response.set_cookie(
        SESSION_KEY,
        encode_session_cookie(result.data, cfg.session_hours),
        max_age=cfg.session_hours * 3600,
        httponly=True,
        samesite="lax",
    )
    logger.info("Student %s logged in", body.nis)
    return response


@router.post("/logout")
def logout(cfg: KelasGuruConfig = Depends(get_config)):
    response = RedirectResponse(cfg.login_view, status_code=303)
    response.delete_cookie(SESSION_KEY)
    return response


@router.get("/me")
def me(lookup: SessionLookup = Depends(get_session_lookup)):
    """Return the session payload, or redirect to the login view."""
    if not lookup.logged_in:
        return login_redirect(lookup)
    return {"success": True, "data": lookup.session}
