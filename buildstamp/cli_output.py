"""Pretty-print generation results to stdout."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from buildstamp.orchestrator import GenerateResult


def _utc_day(epoch_seconds: int) -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date().isoformat()


def print_result(result: GenerateResult, variant: str | None = None) -> None:
    """Print one line per invocation, e.g. ``written  1705276800 (2024-01-15)  out/values/build-time.xml``."""
    prefix = f"{variant:<12}  " if variant else ""
    print(f"{prefix}{result.outcome.value:<8} {result.timestamp} ({_utc_day(result.timestamp)})  {result.path}")


def print_artifact_status(path: Path, timestamp: int) -> None:
    """Print what an existing artifact holds and when it was last written."""
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    print(f"Artifact         : {path}")
    print(f"Epoch seconds    : {timestamp}")
    print(f"Build day (UTC)  : {_utc_day(timestamp)}")
    print(f"Last written     : {mtime.isoformat(timespec='seconds')}")
