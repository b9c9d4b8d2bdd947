"""Shared settings and per-request backend wiring.

The backend implementation is picked from ``backend.kind`` in app_config.yaml
(or ``REPORT_BACKEND``). Each request gets its own backend instance, closed
once the response is produced. The memory backend is rebuilt from its
seed file for every request.
"""
from __future__ import annotations

from typing import AsyncIterator

from app.config import AppConfig, get_settings
from infrastructure.memory_store import InMemoryActivityBackend
from infrastructure.redmine_client import RedmineClient
from infrastructure.repository import ActivityBackend

settings = get_settings()

SUPPORTED_BACKENDS = ("redmine", "memory")


def check_backend(config: AppConfig) -> None:
    """Fail fast on a misconfigured backend (unknown kind, missing credentials)."""
    kind = config.backend_kind
    if kind not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unknown report backend: {kind}. Supported: {', '.join(SUPPORTED_BACKENDS)}")
    if kind == "redmine":
        config.redmine_settings()
    seed = config.memory_seed_path
    if kind == "memory" and seed is not None and not seed.is_file():
        raise RuntimeError(f"memory seed file {seed} does not exist")


def create_backend(config: AppConfig) -> ActivityBackend:
    """Create the backend selected by the configuration."""
    check_backend(config)
    if config.backend_kind == "memory":
        seed = config.memory_seed_path
        return InMemoryActivityBackend.from_seed_file(seed) if seed else InMemoryActivityBackend()
    return RedmineClient(config.redmine_settings())


async def get_backend() -> AsyncIterator[ActivityBackend]:
    backend = create_backend(settings)
    try:
        yield backend
    finally:
        await backend.aclose()
