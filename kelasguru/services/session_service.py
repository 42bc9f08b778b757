"""
kelasguru.services.session_service — Student Session Slot
==========================================================

The logged-in student's session lives in one named slot
(``kelasguru_siswa``) as JSON text.  Reading the slot is a pure lookup:
it reports the session (or its absence) together with where the caller
should navigate.  Clearing a corrupt slot and performing the redirect are
left to the caller (see :mod:`kelasguru.api.routes.auth`).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from kelasguru.constants import DEFAULT_LOGIN_VIEW, SESSION_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionLookup:
    """Result of reading the session slot.

    ``redirect_to`` is set whenever there is no usable session;
    ``corrupted`` marks a slot that held unparseable text and should be
    cleared by the caller.
    """

    session: dict[str, Any] | None = None
    redirect_to: str | None = None
    corrupted: bool = False

    @property
    def logged_in(self) -> bool:
        return self.session is not None


def parse_session(raw: str | None, login_view: str = DEFAULT_LOGIN_VIEW) -> SessionLookup:
    """Interpret the slot's JSON text."""
    if not raw:
        return SessionLookup(redirect_to=login_view)
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Session slot '%s' holds invalid JSON", SESSION_KEY)
        return SessionLookup(redirect_to=login_view, corrupted=True)
    if not isinstance(payload, dict):
        logger.warning("Session slot '%s' is not a JSON object", SESSION_KEY)
        return SessionLookup(redirect_to=login_view, corrupted=True)
    return SessionLookup(session=payload)


def serialize_session(session: Mapping[str, Any]) -> str:
    return json.dumps(dict(session), separators=(",", ":"), default=str)


def session_student_id(session: Mapping[str, Any]) -> Any:
    """The student identifier carried by a login payload (``id`` or ``siswa_id``)."""
    return session.get("id") or session.get("siswa_id")
