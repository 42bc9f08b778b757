"""
KelasGuru — Student Dashboard Client & Gamification Pipeline
=============================================================
Talks to the KelasGuru Apps Script backend over form-encoded POSTs,
reshapes its JSON into dashboard-ready payloads (badges, leaderboard,
paginated rosters) and serves them to the student dashboard.

Package layout::

    kelasguru/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Action names, level formula, labels
    ├── client/
    │   ├── transport.py   # ApiResult + ApiTransport (httpx)
    │   └── accessors.py   # One coroutine per backend action
    ├── engine/
    │   ├── cache.py       # Badge catalog TTL cache
    │   ├── gamification.py # Per-student XP/level/badge aggregation
    │   └── leaderboard.py # XP totals + name/class enrichment
    ├── services/
    │   └── session_service.py  # Student session slot lookup
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Dependency injection, session cookie
        └── routes/        # Student, leaderboard, CRUD endpoints
"""

__version__ = "0.1.0"
