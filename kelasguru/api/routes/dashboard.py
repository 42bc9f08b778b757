"""
kelasguru.api.routes.dashboard — Student dashboard: XP, badges, grades, leaderboard
=====================================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from kelasguru.api.deps import ApiClients, get_clients, get_session_lookup, result_response
from kelasguru.api.routes.auth import login_redirect
from kelasguru.client.accessors import get_student_grades
from kelasguru.client.transport import ApiResult
from kelasguru.engine.leaderboard import build_leaderboard, rank_leaderboard
from kelasguru.services.session_service import SessionLookup, session_student_id

router = APIRouter(tags=["dashboard"])


# ---------------------------------------------------------------------------
# Logged-in student
# ---------------------------------------------------------------------------
@router.get("/me/gamification")
async def my_gamification(
    lookup: SessionLookup = Depends(get_session_lookup),
    clients: ApiClients = Depends(get_clients),
):
    if not lookup.logged_in:
        return login_redirect(lookup)
    student_id = session_student_id(lookup.session)
    if not student_id:
        return result_response(ApiResult.fail("Session has no student id"))
    result = await clients.aggregator.get_student_gamification(student_id)
    return result_response(result)


@router.get("/me/grades")
async def my_grades(
    lookup: SessionLookup = Depends(get_session_lookup),
    clients: ApiClients = Depends(get_clients),
):
    if not lookup.logged_in:
        return login_redirect(lookup)
    student_id = session_student_id(lookup.session)
    if not student_id:
        return result_response(ApiResult.fail("Session has no student id"))
    return result_response(await get_student_grades(clients.student_api, student_id))


# ---------------------------------------------------------------------------
# Any student / whole school
# ---------------------------------------------------------------------------
@router.get("/students/{student_id}/gamification")
async def student_gamification(
    student_id: str,
    clients: ApiClients = Depends(get_clients),
):
    result = await clients.aggregator.get_student_gamification(student_id)
    return result_response(result)


@router.get("/leaderboard")
async def leaderboard(
    limit: int | None = Query(None, ge=1, le=500),
    clients: ApiClients = Depends(get_clients),
):
    """XP leaderboard, highest first, numbered from 1."""
    result = await build_leaderboard(clients.teacher_api)
    if result.success:
        result = ApiResult.ok(rank_leaderboard(result.data, limit=limit))
    return result_response(result)
