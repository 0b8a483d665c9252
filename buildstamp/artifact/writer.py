"""Up-to-date check and whole-file write of the build-time artifact."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from buildstamp.artifact.base import (
    DEFAULT_FILE_NAME,
    DEFAULT_RESOURCE_NAME,
    ArtifactLocation,
    DirectoryCreationFailed,
    FreshnessPolicy,
    WriteFailed,
    WriteOutcome,
    validate_file_name,
    validate_resource_name,
)
from buildstamp.artifact.resource_xml import render_resource
from buildstamp.timestamp import SECONDS_PER_DAY, today_epoch_seconds
from buildstamp.utils.logging import get_logger

log = get_logger(__name__)

# One day of slack either side of today's midnight.  5_184_000 (60*60*60*24)
# gives the legacy window of about 60 days.
DEFAULT_DAY_WINDOW_SECONDS = SECONDS_PER_DAY


def artifact_location(output_root: Path | str, file_name: str = DEFAULT_FILE_NAME) -> ArtifactLocation:
    return ArtifactLocation(Path(output_root), validate_file_name(file_name))


def is_fresh(path: Path, reference_epoch: int, day_window_seconds: int = DEFAULT_DAY_WINDOW_SECONDS) -> bool:
    """True if *path* is a regular file modified within the window around *reference_epoch*.

    Both window edges are inclusive.  The mtime is truncated to whole seconds.
    A path that cannot be inspected counts as stale so the write reports it.
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        return False
    except OSError as exc:
        log.warning("artifact_stat_failed", path=str(path), error=str(exc))
        return False
    if not stat.S_ISREG(st.st_mode):
        return False
    mtime = int(st.st_mtime)
    return reference_epoch - day_window_seconds <= mtime <= reference_epoch + day_window_seconds


def _make_dirs(location: ArtifactLocation) -> None:
    try:
        location.values_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log.error("directory_creation_failed", path=str(location.values_dir), error=str(exc))
        raise DirectoryCreationFailed(location.values_dir, exc) from exc


def _replace_file(path: Path, content: str) -> None:
    """Write *content* to a sibling temp file, then rename it over *path*."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def ensure_artifact(
    output_root: Path | str,
    timestamp: int,
    policy: FreshnessPolicy = FreshnessPolicy.SKIP_IF_FRESH_TODAY,
    *,
    resource_name: str = DEFAULT_RESOURCE_NAME,
    file_name: str = DEFAULT_FILE_NAME,
    day_window_seconds: int = DEFAULT_DAY_WINDOW_SECONDS,
    reference_epoch: int | None = None,
) -> WriteOutcome:
    """Make sure ``<output_root>/values/<file_name>.xml`` holds *timestamp*.

    Args:
        output_root:        Generated-resources root for one build target.
        timestamp:          Resolved BuildTimestamp (epoch seconds, UTC midnight).
        policy:             ``SKIP_IF_FRESH_TODAY`` leaves a recently written
                            file alone; ``ALWAYS_WRITE`` rewrites every time.
        resource_name:      ``name`` attribute of the ``<string>`` element.
        file_name:          Base name of the XML file inside ``values/``.
        day_window_seconds: Slack either side of the freshness anchor.
        reference_epoch:    Freshness anchor.  Defaults to today's UTC midnight.

    Returns:
        WriteOutcome.WRITTEN or WriteOutcome.SKIPPED.

    Raises:
        DirectoryCreationFailed: If ``values/`` could not be created.
        WriteFailed:             If the file could not be written.
        ClockUnavailable:        If the anchor is needed and the clock fails.
    """
    validate_resource_name(resource_name)
    policy = FreshnessPolicy(policy)
    location = artifact_location(output_root, file_name)
    path = location.path

    _make_dirs(location)

    if policy is FreshnessPolicy.SKIP_IF_FRESH_TODAY:
        anchor = reference_epoch if reference_epoch is not None else today_epoch_seconds()
        if is_fresh(path, anchor, day_window_seconds):
            log.info("artifact_fresh_skipping", path=str(path))
            return WriteOutcome.SKIPPED

    content = render_resource(resource_name, timestamp)
    try:
        _replace_file(path, content)
    except OSError as exc:
        log.error("artifact_write_failed", path=str(path), error=str(exc))
        raise WriteFailed(path, exc) from exc

    log.info("artifact_written", path=str(path), epoch_seconds=timestamp, resource_name=resource_name)
    return WriteOutcome.WRITTEN
