"""
kelasguru.__main__ — Entry point for ``python -m kelasguru``
=============================================================

Wiring:
1. Load .env (JWT_SECRET).
2. Load config.yaml (endpoints, cache TTL, port).
3. Serve the dashboard API with uvicorn.
"""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

from kelasguru.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("kelasguru")


def main() -> None:
    """Bootstrap and run the dashboard API."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Configuration.
    cfg = load_config(os.getenv("KELASGURU_CONFIG", "config.yaml"))
    logger.info("Config loaded — %s on port %d", cfg.dashboard_name, cfg.dashboard_port)

    # 3. Serve (blocks until Ctrl+C or SIGTERM).
    from kelasguru.api.main import create_app

    uvicorn.run(create_app(cfg), host="0.0.0.0", port=cfg.dashboard_port, log_config=None)


if __name__ == "__main__":
    main()
