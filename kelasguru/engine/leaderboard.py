"""
kelasguru.engine.leaderboard — XP Leaderboard Builder
======================================================

Folds the raw XP award table into per-student totals, then enriches each
total with the student's name and class.

Only the XP fetch is fatal.  A failed student fetch leaves summaries
without ``nama``/``kelas_nama`` (class resolution is not attempted); a
failed class fetch leaves them without ``kelas_nama``.  The builder does
not sort; :func:`rank_leaderboard` is the caller-side ordering.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kelasguru.client.accessors import get_classes, get_students, get_xp_records
from kelasguru.client.transport import DEFAULT_ERROR, ApiResult
from kelasguru.constants import (
    CLASS_LABEL_FALLBACK,
    NO_CLASS_LABEL,
    level_for_xp,
    parse_int,
)

if TYPE_CHECKING:
    from kelasguru.client.transport import ApiTransport

logger = logging.getLogger(__name__)

__all__ = [
    "StudentSummary",
    "aggregate_xp",
    "build_leaderboard",
    "class_labels",
    "rank_leaderboard",
]


@dataclass(slots=True)
class StudentSummary:
    """Per-student accumulator; optional fields stay None until enriched."""

    id: Any
    xp: int = 0
    level: int = 1
    name: str | None = None
    class_id: Any = None
    class_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "xp": self.xp, "level": self.level}
        if self.name is not None:
            out["nama"] = self.name
        if self.class_id is not None:
            out["kelas_id"] = self.class_id
        if self.class_name is not None:
            out["kelas_nama"] = self.class_name
        return out


# ---------------------------------------------------------------------------
# Pure stages
# ---------------------------------------------------------------------------
def aggregate_xp(records: Iterable[Mapping[str, Any]]) -> dict[str, StudentSummary]:
    """Sum ``jumlah_xp`` per ``siswa_id``, keyed by the id's text form."""
    summaries: dict[str, StudentSummary] = {}
    for record in records:
        student_id = record.get("siswa_id")
        if student_id is None or student_id == "":
            logger.debug("XP record without siswa_id skipped: %s", record)
            continue
        key = str(student_id)
        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = StudentSummary(id=student_id)
        summary.xp += parse_int(record.get("jumlah_xp"))
    return summaries


def class_labels(classes: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """class id → display label (``nama_kelas``, then ``nama``, then ``Kelas <id>``)."""
    labels: dict[str, str] = {}
    for cls in classes:
        class_id = cls.get("id")
        labels[str(class_id)] = (
            cls.get("nama_kelas")
            or cls.get("nama")
            or CLASS_LABEL_FALLBACK.format(id=class_id)
        )
    return labels


def _attach_students(
    summaries: Mapping[str, StudentSummary], students: Iterable[Mapping[str, Any]]
) -> None:
    by_id: dict[str, Mapping[str, Any]] = {}
    for student in students:
        by_id.setdefault(str(student.get("id")), student)
    for key, summary in summaries.items():
        student = by_id.get(key)
        if student is not None:
            summary.name = student.get("nama")
            summary.class_id = student.get("kelas_id")


def _attach_classes(
    summaries: Mapping[str, StudentSummary], labels: Mapping[str, str]
) -> None:
    for summary in summaries.values():
        label = labels.get(str(summary.class_id)) if summary.class_id else None
        summary.class_name = label or NO_CLASS_LABEL


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
async def build_leaderboard(api: ApiTransport) -> ApiResult:
    """Per-student XP totals with level, name and class, in first-seen order."""
    xp_result = await get_xp_records(api)
    if not xp_result.success:
        error = xp_result.error
        if error in (None, DEFAULT_ERROR):
            error = "Failed to fetch leaderboard data"
        return ApiResult.fail(error, unreachable=xp_result.unreachable)

    summaries = aggregate_xp(xp_result.rows())

    student_result = await get_students(api)
    if student_result.success and isinstance(student_result.data, list):
        _attach_students(summaries, student_result.rows())

        class_result = await get_classes(api)
        if class_result.success and isinstance(class_result.data, list):
            _attach_classes(summaries, class_labels(class_result.rows()))
        else:
            logger.info("Class names unavailable: %s", class_result.error)
    else:
        logger.info("Student names unavailable: %s", student_result.error)

    for summary in summaries.values():
        summary.level = level_for_xp(summary.xp)

    return ApiResult.ok([s.to_dict() for s in summaries.values()])


def rank_leaderboard(
    entries: Iterable[Mapping[str, Any]], limit: int | None = None
) -> list[dict[str, Any]]:
    """Sort by XP descending (stable on ties) and number from 1."""
    ordered = sorted(entries, key=lambda e: e.get("xp", 0), reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [{**entry, "rank": position} for position, entry in enumerate(ordered, start=1)]

