"""
kelasguru.client.accessors — One Coroutine per Backend Action
==============================================================

Pure parameter shaping: each function forwards to
:meth:`ApiTransport.request` with a fixed action name.  Optional
identifiers that are empty are omitted rather than sent blank.

Student-side actions (login, grades, raw gamification) go to the student
endpoint; roster, class, XP and badge actions go to the teacher endpoint.
Callers pass the matching transport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from kelasguru.constants import (
    ACTION_CREATE_STUDENT,
    ACTION_DEBUG_STUDENT_DATA,
    ACTION_DELETE_STUDENT,
    ACTION_GET_BADGE_AWARDS,
    ACTION_GET_BADGE_CATALOG,
    ACTION_GET_CLASSES,
    ACTION_GET_STUDENT_GAMIFICATION,
    ACTION_GET_STUDENT_GRADES,
    ACTION_GET_STUDENTS,
    ACTION_GET_XP_RECORDS,
    ACTION_STUDENT_LOGIN,
    ACTION_UPDATE_STUDENT,
    STUDENT_ID_ALIASES,
)

if TYPE_CHECKING:
    from kelasguru.client.transport import ApiResult, ApiTransport

logger = logging.getLogger(__name__)


def student_id_params(student_id: Any) -> dict[str, str]:
    """The same identifier under every wire alias the backend accepts."""
    value = str(student_id)
    return {alias: value for alias in STUDENT_ID_ALIASES}


# ---------------------------------------------------------------------------
# Student endpoint
# ---------------------------------------------------------------------------
async def student_login(api: ApiTransport, nis: str, password: str) -> ApiResult:
    """Log a student in by NIS + password.

    A ``debugSiswaData`` probe goes out first; its outcome is only logged
    and never blocks the login call.
    """
    probe = await api.request(ACTION_DEBUG_STUDENT_DATA, {})
    logger.debug("debugSiswaData probe: success=%s error=%s", probe.success, probe.error)
    return await api.request(ACTION_STUDENT_LOGIN, {"nis": nis, "password": password})


async def get_student_grades(api: ApiTransport, student_id: Any) -> ApiResult:
    return await api.request(ACTION_GET_STUDENT_GRADES, {"siswa_id": student_id})


async def get_raw_gamification(api: ApiTransport, student_id: Any) -> ApiResult:
    """Server-side XP/level record for one student (level not yet normalised)."""
    return await api.request(ACTION_GET_STUDENT_GAMIFICATION, {"siswa_id": student_id})


# ---------------------------------------------------------------------------
# Teacher endpoint: roster CRUD
# ---------------------------------------------------------------------------
async def get_students(
    api: ApiTransport, student_id: Any = None, class_id: Any = None
) -> ApiResult:
    params: dict[str, Any] = {}
    if student_id:
        params["id"] = student_id
    if class_id:
        params["kelas_id"] = class_id
    return await api.request(ACTION_GET_STUDENTS, params)


async def get_paginated_students(
    api: ApiTransport,
    page: int = 1,
    page_size: int = 20,
    filters: Mapping[str, Any] | None = None,
) -> ApiResult:
    """One page of the roster; pagination fields come back in ``result.extra``."""
    params: dict[str, Any] = {"page": page, "pageSize": page_size}
    params.update(filters or {})
    params["paginated"] = True
    return await api.request(ACTION_GET_STUDENTS, params)


async def create_student(api: ApiTransport, data: Mapping[str, Any]) -> ApiResult:
    return await api.request(ACTION_CREATE_STUDENT, dict(data))


async def update_student(
    api: ApiTransport, student_id: Any, data: Mapping[str, Any]
) -> ApiResult:
    params = {**data, **student_id_params(student_id)}
    return await api.request(ACTION_UPDATE_STUDENT, params)


async def delete_student(api: ApiTransport, student_id: Any) -> ApiResult:
    return await api.request(ACTION_DELETE_STUDENT, student_id_params(student_id))


# ---------------------------------------------------------------------------
# Teacher endpoint: classes
# ---------------------------------------------------------------------------
async def get_classes(api: ApiTransport, class_id: Any = None) -> ApiResult:
    params: dict[str, Any] = {}
    if class_id:
        params["id"] = class_id
    return await api.request(ACTION_GET_CLASSES, params)


async def fetch_class_options(api: ApiTransport) -> list[dict]:
    """All classes for a dropdown; an empty list when the fetch fails."""
    result = await get_classes(api)
    if result.success and isinstance(result.data, list):
        return result.data
    logger.error("Error fetching classes: %s", result.error or "Unknown error")
    return []


# ---------------------------------------------------------------------------
# Teacher endpoint: gamification sources
# ---------------------------------------------------------------------------
async def get_xp_records(api: ApiTransport) -> ApiResult:
    """Every XP award row: ``{siswa_id, jumlah_xp, ...}``."""
    return await api.request(ACTION_GET_XP_RECORDS)


async def get_badge_catalog(api: ApiTransport) -> ApiResult:
    return await api.request(ACTION_GET_BADGE_CATALOG)


async def get_badge_awards(api: ApiTransport) -> ApiResult:
    """Every badge award row for every student."""
    return await api.request(ACTION_GET_BADGE_AWARDS)
