"""
kelasguru.constants — Shared Constants & Helpers
=================================================

Single source of truth for backend action names, wire aliases, display
labels and the leveling formula.  Import from here instead of duplicating
in the engine, the accessors and the API.
"""

from __future__ import annotations

import math
import re
from typing import Any

# ---------------------------------------------------------------------------
# Backend actions (the ``action`` form field)
# ---------------------------------------------------------------------------
ACTION_STUDENT_LOGIN = "studentLogin"
ACTION_DEBUG_STUDENT_DATA = "debugSiswaData"
ACTION_GET_STUDENT_GRADES = "getSiswaNilai"
ACTION_GET_STUDENT_GAMIFICATION = "getSiswaGamification"

ACTION_GET_STUDENTS = "getSiswa"
ACTION_CREATE_STUDENT = "createSiswa"
ACTION_UPDATE_STUDENT = "updateSiswa"
ACTION_DELETE_STUDENT = "deleteSiswa"
ACTION_GET_CLASSES = "getKelas"

ACTION_GET_XP_RECORDS = "getGamifikasiXP"
ACTION_GET_BADGE_CATALOG = "getGamifikasiBadge"
ACTION_GET_BADGE_AWARDS = "getSiswaBadge"

# The backend accepts a student identifier under either name; update and
# delete send both, carrying the same value.
STUDENT_ID_ALIASES: tuple[str, ...] = ("id", "siswa_id")

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
NO_CLASS_LABEL = "Tanpa Kelas"
CLASS_LABEL_FALLBACK = "Kelas {id}"

SESSION_KEY = "kelasguru_siswa"
DEFAULT_LOGIN_VIEW = "siswa-login.html"


# ---------------------------------------------------------------------------
# Leveling formula: THE single canonical implementation
# ---------------------------------------------------------------------------
MAX_LEVEL = 5

# (minimum xp, level), highest band first
LEVEL_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (1500, MAX_LEVEL),
    (700, 4),
    (300, 3),
    (100, 2),
)


def level_for_xp(xp: int | float) -> int:
    """Level (1–5) for a total of *xp*.  Lower bounds are inclusive."""
    for minimum, level in LEVEL_THRESHOLDS:
        if xp >= minimum:
            return level
    return 1


# ---------------------------------------------------------------------------
# Wire value helpers
# ---------------------------------------------------------------------------
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int:
    """Parse the integer prefix of a wire value, 0 when there is none.

    ``"50"`` → 50, ``"50xp"`` → 50, ``"12.9"`` → 12, ``None``/``"abc"`` → 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else 0


def same_id(a: Any, b: Any) -> bool:
    """Compare two backend identifiers as text (the sheet mixes str and int)."""
    if a is None or b is None:
        return False
    return str(a) == str(b)
