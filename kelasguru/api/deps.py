"""
kelasguru.api.deps — FastAPI dependency injection
==================================================
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from jwt.exceptions import InvalidTokenError

from kelasguru.client.transport import ApiResult, ApiTransport
from kelasguru.config import KelasGuruConfig
from kelasguru.constants import SESSION_KEY
from kelasguru.engine.cache import BadgeCache
from kelasguru.engine.gamification import GamificationAggregator
from kelasguru.services.session_service import (
    SessionLookup,
    parse_session,
    serialize_session,
)

logger = logging.getLogger(__name__)

_WEAK_SECRETS = frozenset({
    "kelasguru-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


# ---------------------------------------------------------------------------
# Backend clients (one set per app, built in the lifespan)
# ---------------------------------------------------------------------------
@dataclass
class ApiClients:
    teacher_api: ApiTransport
    student_api: ApiTransport
    aggregator: GamificationAggregator

    @classmethod
    def from_config(cls, cfg: KelasGuruConfig) -> ApiClients:
        teacher_api = ApiTransport(cfg.teacher_api_url)
        if cfg.student_api_url == cfg.teacher_api_url:
            student_api = teacher_api
        else:
            student_api = ApiTransport(cfg.student_api_url)
        aggregator = GamificationAggregator(
            student_api, teacher_api, BadgeCache(ttl=cfg.badge_cache_ttl)
        )
        return cls(teacher_api=teacher_api, student_api=student_api, aggregator=aggregator)

    async def aclose(self) -> None:
        await self.teacher_api.aclose()
        if self.student_api is not self.teacher_api:
            await self.student_api.aclose()


def get_config(request: Request) -> KelasGuruConfig:
    return request.app.state.config


def get_clients(request: Request) -> ApiClients:
    return request.app.state.clients


# ---------------------------------------------------------------------------
# Session cookie: the session slot, signed
# ---------------------------------------------------------------------------
def encode_session_cookie(session: dict[str, Any], hours: int) -> str:
    """Sign the session slot's JSON text into a cookie value."""
    payload = {
        "siswa": serialize_session(session),
        "exp": datetime.now(UTC) + timedelta(hours=hours),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def get_session_lookup(
    request: Request,
    cfg: KelasGuruConfig = Depends(get_config),
) -> SessionLookup:
    """Read the session cookie.  A bad signature or expiry counts as corrupt."""
    token = request.cookies.get(SESSION_KEY)
    if not token:
        return parse_session(None, cfg.login_view)
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        logger.info("Rejected session cookie (invalid or expired token)")
        return SessionLookup(redirect_to=cfg.login_view, corrupted=True)
    return parse_session(claims.get("siswa"), cfg.login_view)


# ---------------------------------------------------------------------------
# Response helper
# ---------------------------------------------------------------------------
def result_response(result: ApiResult) -> JSONResponse:
    """Result body as JSON; 502 only when the backend could not be reached.

    A backend that answered ``success: false`` (wrong password, unknown
    student) is a 200 carrying the failure envelope.
    """
    return JSONResponse(result.to_dict(), status_code=502 if result.unreachable else 200)
