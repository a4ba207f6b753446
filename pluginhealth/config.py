from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_UPDATE_CENTER_URL = "https://updates.jenkins.io/current/update-center.actual.json"
DEFAULT_DATABASE_URL = "sqlite:///data/pluginhealth.db"
DEFAULT_WORKFLOWS_DIR = ".github/workflows"


class ConfigError(Exception):
    """Raised when required configuration is missing or blank."""


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    update_center_url: str = DEFAULT_UPDATE_CENTER_URL
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            # Default only when unset; a blank value is left for require_source to reject.
            update_center_url=os.getenv("PLUGINHEALTH_UPDATE_CENTER_URL", DEFAULT_UPDATE_CENTER_URL),
            database_url=_env("PLUGINHEALTH_DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=_env("PLUGINHEALTH_LOG_LEVEL", "INFO").upper(),
            workflows_dir=_env("PLUGINHEALTH_WORKFLOWS_DIR", DEFAULT_WORKFLOWS_DIR),
        )

    def with_overrides(self, **overrides: str | None) -> Settings:
        """Return a copy with every non-None override applied (CLI flags win over env)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def require_source(source: str | None) -> str:
    if source is None or not source.strip():
        raise ConfigError("Update center location is not configured")
    return source.strip()
