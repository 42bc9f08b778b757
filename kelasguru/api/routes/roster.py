"""
kelasguru.api.routes.roster — Student & class pass-through endpoints
=====================================================================

Thin proxies over the teacher backend's roster actions.  Pagination
fields returned by ``getSiswa`` are passed through untouched.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict

from kelasguru.api.deps import ApiClients, get_clients, result_response
from kelasguru.client.accessors import (
    create_student,
    delete_student,
    fetch_class_options,
    get_classes,
    get_paginated_students,
    get_students,
    update_student,
)

router = APIRouter(tags=["roster"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class StudentWrite(BaseModel):
    """Roster columns; unknown sheet columns are forwarded as-is."""

    model_config = ConfigDict(extra="allow")

    nis: str | None = None
    nama: str | None = None
    kelas_id: str | None = None
    jenis_kelamin: str | None = None
    password: str | None = None


def _form_fields(body: StudentWrite) -> dict[str, Any]:
    return body.model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------
@router.get("/students")
async def list_students(
    id: str | None = None,
    kelas_id: str | None = None,
    clients: ApiClients = Depends(get_clients),
):
    return result_response(await get_students(clients.teacher_api, id, kelas_id))


@router.get("/students/paginated")
async def list_students_paginated(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    kelas_id: str | None = None,
    search: str | None = None,
    clients: ApiClients = Depends(get_clients),
):
    filters = {k: v for k, v in {"kelas_id": kelas_id, "search": search}.items() if v}
    result = await get_paginated_students(clients.teacher_api, page, page_size, filters)
    return result_response(result)


@router.post("/students")
async def add_student(body: StudentWrite, clients: ApiClients = Depends(get_clients)):
    return result_response(await create_student(clients.teacher_api, _form_fields(body)))


@router.put("/students/{student_id}")
async def edit_student(
    student_id: str,
    body: StudentWrite,
    clients: ApiClients = Depends(get_clients),
):
    result = await update_student(clients.teacher_api, student_id, _form_fields(body))
    return result_response(result)


@router.delete("/students/{student_id}")
async def remove_student(student_id: str, clients: ApiClients = Depends(get_clients)):
    return result_response(await delete_student(clients.teacher_api, student_id))


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------
@router.get("/classes")
async def list_classes(id: str | None = None, clients: ApiClients = Depends(get_clients)):
    return result_response(await get_classes(clients.teacher_api, id))


@router.get("/classes/options")
async def class_options(clients: ApiClients = Depends(get_clients)):
    """Dropdown source; always 200, empty when the backend is unreachable."""
    return {"data": await fetch_class_options(clients.teacher_api)}
