"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from buildstamp.config import reset_config

_ENV_KEYS = (
    "BUILDSTAMP_CONFIG",
    "BUILDSTAMP_RESOURCE_NAME",
    "BUILDSTAMP_DATE",
    "BUILDSTAMP_ALWAYS_WRITE",
    "LOG_LEVEL",
)


def set_mtime(path: Path, epoch_seconds: int) -> None:
    os.utime(path, (epoch_seconds, epoch_seconds))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate every test from the caller's BUILDSTAMP_* variables and the Config singleton."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def output_root(tmp_path: Path) -> Path:
    """Not-yet-existing generated-resources root."""
    return tmp_path / "build" / "generated" / "res" / "debug"


@pytest.fixture()
def blocked_root(tmp_path: Path) -> Path:
    """Output root whose parent is a regular file, so mkdir always fails."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    return blocker / "out"
