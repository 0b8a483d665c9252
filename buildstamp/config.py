"""Load generation settings from a TOML file and merge environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from buildstamp.artifact.base import (
    DEFAULT_FILE_NAME,
    DEFAULT_RESOURCE_NAME,
    FreshnessPolicy,
    validate_file_name,
    validate_resource_name,
)
from buildstamp.artifact.writer import DEFAULT_DAY_WINDOW_SECONDS


_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "settings.toml"


def _load_toml(path: Path) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _env_bool(key: str, default: bool) -> bool:
    val = os.environ.get(key, "").lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    return default


@dataclass(frozen=True)
class GenerateOptions:
    """Everything one invocation may override.  Defaults give values/build-time.xml."""

    resource_name: str = DEFAULT_RESOURCE_NAME
    file_name: str = DEFAULT_FILE_NAME
    explicit_date: date | None = None
    freshness_policy: FreshnessPolicy = FreshnessPolicy.SKIP_IF_FRESH_TODAY
    day_window_seconds: int = DEFAULT_DAY_WINDOW_SECONDS

    def __post_init__(self) -> None:
        validate_resource_name(self.resource_name)
        validate_file_name(self.file_name)
        object.__setattr__(self, "freshness_policy", FreshnessPolicy(self.freshness_policy))
        if self.day_window_seconds < 0:
            raise ValueError(f"day_window_seconds must be >= 0, got {self.day_window_seconds}")


class Config:
    """Generation configuration.  Reads settings.toml then overlays env vars.

    The bundled default file is optional; an explicitly chosen file must exist.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        env_path = os.environ.get("BUILDSTAMP_CONFIG")
        path = config_path or (Path(env_path) if env_path else _DEFAULT_CONFIG_PATH)
        if path == _DEFAULT_CONFIG_PATH and not path.exists():
            raw: dict = {}
        else:
            raw = _load_toml(path)

        # ── Artifact ──────────────────────────────────────────────────────────
        art = raw.get("artifact", {})
        self.resource_name: str = os.environ.get(
            "BUILDSTAMP_RESOURCE_NAME", art.get("resource_name", DEFAULT_RESOURCE_NAME)
        )
        self.file_name: str = art.get("file_name", DEFAULT_FILE_NAME)

        # ── Freshness ─────────────────────────────────────────────────────────
        fr = raw.get("freshness", {})
        self.freshness_policy = FreshnessPolicy(fr.get("policy", FreshnessPolicy.SKIP_IF_FRESH_TODAY.value))
        self.day_window_seconds: int = int(fr.get("day_window_seconds", DEFAULT_DAY_WINDOW_SECONDS))

        # ── Logging ───────────────────────────────────────────────────────────
        log = raw.get("logging", {})
        self.log_level: str = os.environ.get("LOG_LEVEL", log.get("level", "INFO")).upper()

        # ── Env-var overlays ──────────────────────────────────────────────────
        raw_date = os.environ.get("BUILDSTAMP_DATE", "").strip()
        self.explicit_date: date | None = date.fromisoformat(raw_date) if raw_date else None

        if _env_bool("BUILDSTAMP_ALWAYS_WRITE", False):
            self.freshness_policy = FreshnessPolicy.ALWAYS_WRITE

    def to_options(self) -> GenerateOptions:
        return GenerateOptions(
            resource_name=self.resource_name,
            file_name=self.file_name,
            explicit_date=self.explicit_date,
            freshness_policy=self.freshness_policy,
            day_window_seconds=self.day_window_seconds,
        )


_instance: Config | None = None


def get_config(config_path: Path | None = None) -> Config:
    """Return the singleton Config, creating it on first call."""
    global _instance
    if _instance is None:
        _instance = Config(config_path)
    return _instance


def reset_config() -> None:
    """Reset the singleton (useful in tests)."""
    global _instance
    _instance = None
