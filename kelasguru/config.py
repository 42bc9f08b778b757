"""
kelasguru.config — YAML Configuration Loader
=============================================

Reads ``config.yaml`` for the backend endpoints and dashboard tuning.
Secrets (``JWT_SECRET``) are never read from here; they come from the
environment (``.env`` via python-dotenv at the entry points).

Usage::

    from kelasguru.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.teacher_api_url)
    print(cfg.badge_cache_ttl)       # 60.0
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from kelasguru.constants import DEFAULT_LOGIN_VIEW


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class KelasGuruConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Backend (Apps Script web apps)
    teacher_api_url: str
    student_api_url: str

    # Identity
    dashboard_name: str = "KelasGuru"

    # Gamification
    badge_cache_ttl: float = 60.0  # seconds

    # Session / navigation
    login_view: str = DEFAULT_LOGIN_VIEW
    session_hours: int = 12

    # Dashboard
    dashboard_port: int = 8000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> KelasGuruConfig:
    """Read *path* and return a :class:`KelasGuruConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If ``teacher_api_url`` is missing.
    ValueError
        If ``badge_cache_ttl`` or ``session_hours`` is not positive.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    teacher_url = str(raw["teacher_api_url"]).strip()
    student_url = str(raw.get("student_api_url") or teacher_url).strip()

    ttl = float(raw.get("badge_cache_ttl", 60))
    if ttl <= 0:
        raise ValueError(f"badge_cache_ttl must be positive, got {ttl}")

    session_hours = int(raw.get("session_hours", 12))
    if session_hours <= 0:
        raise ValueError(f"session_hours must be positive, got {session_hours}")

    return KelasGuruConfig(
        teacher_api_url=teacher_url,
        student_api_url=student_url,
        dashboard_name=raw.get("dashboard_name", "KelasGuru"),
        badge_cache_ttl=ttl,
        login_view=raw.get("login_view") or DEFAULT_LOGIN_VIEW,
        session_hours=session_hours,
        dashboard_port=int(raw.get("dashboard_port", 8000)),
    )
