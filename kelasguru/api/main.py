"""
kelasguru.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn kelasguru.api.main:app --reload --port 8000

or ``python -m kelasguru``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from kelasguru.api.deps import ApiClients  # noqa: E402
from kelasguru.api.routes.auth import router as auth_router  # noqa: E402
from kelasguru.api.routes.dashboard import router as dashboard_router  # noqa: E402
from kelasguru.api.routes.roster import router as roster_router  # noqa: E402
from kelasguru.config import KelasGuruConfig, load_config  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


def create_app(
    config: KelasGuruConfig | None = None,
    clients: ApiClients | None = None,
) -> FastAPI:
    """Build the dashboard API.

    Without arguments the config is read from ``$KELASGURU_CONFIG``
    (default ``config.yaml``) at startup and backend clients are built
    from it.  Injected *clients* are left open on shutdown; their owner
    closes them.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config or load_config(os.getenv("KELASGURU_CONFIG", "config.yaml"))
        app.state.config = cfg
        owned = clients is None
        app.state.clients = ApiClients.from_config(cfg) if owned else clients
        logger.info(
            "%s API started — backend %s", cfg.dashboard_name, cfg.teacher_api_url,
        )
        yield
        if owned:
            await app.state.clients.aclose()
        logger.info("%s API shutting down", cfg.dashboard_name)

    app = FastAPI(
        title="KelasGuru Dashboard API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")
    app.include_router(roster_router, prefix="/api")

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
