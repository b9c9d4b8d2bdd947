"""Configuration loader that keeps all runtime constants centralized.

Values come from ``app_config.yaml``; the environment variables listed in
``ENV_OVERRIDES`` take precedence so deployments can inject the Redmine
endpoint and credential without editing the file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import find_dotenv, load_dotenv


CONFIG_PATH = Path(__file__).resolve().parent / "app_config.yaml"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_TIMEOUT_SECONDS = 30.0

ENV_OVERRIDES = {
    "REPORT_BACKEND": "backend kind (redmine | memory)",
    "REDMINE_URL": "Redmine site, e.g. https://redmine.example.com",
    "REDMINE_API_KEY": "Redmine REST API key",
    "LISTEN_ADDR": "host:port the HTTP server binds to",
    "LOG_LEVEL": "logging level name",
    "MEMORY_SEED_FILE": "YAML seed data for the memory backend",
}


@dataclass(frozen=True)
class RedmineSettings:
    """Connection values handed to the Redmine client; built once, never mutated."""

    url: str
    api_key: str = field(repr=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class AppConfig:
    """Strongly-typed wrapper over the raw YAML document plus environment overrides."""

    raw: Dict[str, Any]
    env: Mapping[str, str] = field(default_factory=dict, repr=False)
    source: Optional[Path] = None

    @property
    def version(self) -> str:
        return str(self.raw.get("version", "v1"))

    @property
    def redmine(self) -> Dict[str, Any]:
        return self.raw.get("redmine") or {}

    @property
    def server(self) -> Dict[str, Any]:
        return self.raw.get("server") or {}

    @property
    def backend_kind(self) -> str:
        value = self.env.get("REPORT_BACKEND") or (self.raw.get("backend") or {}).get("kind", "redmine")
        return str(value).strip().lower()

    @property
    def memory_seed_path(self) -> Optional[Path]:
        """Seed file for the memory backend; relative paths resolve next to the config file."""
        value = self.env.get("MEMORY_SEED_FILE") or (self.raw.get("memory") or {}).get("seed_file")
        if not value:
            return None
        path = Path(str(value))
        if not path.is_absolute() and self.source is not None:
            path = self.source.parent / path
        return path

    @property
    def log_level(self) -> str:
        value = self.env.get("LOG_LEVEL") or (self.raw.get("logging") or {}).get("level", "INFO")
        return str(value).strip().upper()

    @property
    def listen_address(self) -> Tuple[str, int]:
        addr = self.env.get("LISTEN_ADDR")
        if addr:
            host, sep, port = addr.rpartition(":")
            if not sep or not host or not port.isdigit():
                raise ValueError(f"LISTEN_ADDR must look like host:port, got {addr!r}")
            return host, int(port)
        return str(self.server.get("host", DEFAULT_HOST)), int(self.server.get("port", DEFAULT_PORT))

    def redmine_settings(self) -> RedmineSettings:
        """Resolve the Redmine connection; both URL and API key are mandatory."""
        url = self.env.get("REDMINE_URL") or self.redmine.get("url")
        if not url:
            raise RuntimeError("env REDMINE_URL was not found, please export it")
        api_key = self.env.get("REDMINE_API_KEY") or self.redmine.get("api_key")
        if not api_key:
            raise RuntimeError("env REDMINE_API_KEY was not found, please export it")
        timeout = float(self.redmine.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
        return RedmineSettings(url=str(url).rstrip("/"), api_key=str(api_key), timeout_seconds=timeout)


def load_config(
    path: Path,
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> AppConfig:
    """Read the YAML file and pick up overrides.

    Without an explicit ``env`` mapping, a `.env` file (``dotenv_path`` or the
    first one found from the working directory upwards) is loaded into the
    process environment first; variables already set in the shell win.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Configuration file must define a mapping at the top level.")
    if env is None:
        dotenv_file = dotenv_path or find_dotenv(usecwd=True)
        if dotenv_file:
            load_dotenv(dotenv_file, override=False)
        env = os.environ
    return AppConfig(
        raw=data,
        env={key: env[key] for key in ENV_OVERRIDES if env.get(key)},
        source=path,
    )


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> AppConfig:
    """Load configuration once per process."""

    return load_config(path or CONFIG_PATH)
