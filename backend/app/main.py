"""FastAPI entry point for the Redmine time report service."""
from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from app.logging_config import configure_logging
from interfaces import deps, report_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Redmine Time Report Service")

app.include_router(report_router)


@app.get("/health", tags=["health"])
def health_check() -> dict:
    """Expose a minimal health endpoint to help dev tooling."""
    return {
        "status": "ok",
        "configVersion": deps.settings.version,
        "backend": deps.settings.backend_kind,
    }


@app.on_event("startup")
async def _startup() -> None:  # pragma: no cover - runtime wiring
    configure_logging(deps.settings.log_level)
    deps.check_backend(deps.settings)
    logger.info("[main] Report backend: %s", deps.settings.backend_kind)


def run() -> None:  # pragma: no cover - runtime wiring
    """Console entry point: serve the app on the configured address."""
    configure_logging(deps.settings.log_level)
    host, port = deps.settings.listen_address
    logger.info("[main] Listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    run()
