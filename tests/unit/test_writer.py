"""Unit tests for buildstamp.artifact.writer — freshness window and whole-file writes."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from buildstamp.artifact.base import (
    DirectoryCreationFailed,
    FreshnessPolicy,
    WriteFailed,
    WriteOutcome,
)
from buildstamp.artifact.resource_xml import read_resource
from buildstamp.artifact.writer import (
    DEFAULT_DAY_WINDOW_SECONDS,
    artifact_location,
    ensure_artifact,
    is_fresh,
)
from tests.conftest import set_mtime

ANCHOR = 1705276800  # 2024-01-15T00:00:00Z
DAY = DEFAULT_DAY_WINDOW_SECONDS


class TestArtifactLocation:
    def test_default_path(self, tmp_path: Path) -> None:
        loc = artifact_location(tmp_path)
        assert loc.path == tmp_path / "values" / "build-time.xml"

    def test_custom_file_name(self, tmp_path: Path) -> None:
        loc = artifact_location(tmp_path, "stamp")
        assert loc.path == tmp_path / "values" / "stamp.xml"

    @pytest.mark.parametrize("name", ["", "..", "a/b", "a\\b"])
    def test_rejects_path_like_file_names(self, tmp_path: Path, name: str) -> None:
        with pytest.raises(ValueError):
            artifact_location(tmp_path, name)


class TestFreshnessWindow:
    def _file(self, tmp_path: Path, mtime: int) -> Path:
        path = tmp_path / "build-time.xml"
        path.write_text("x")
        set_mtime(path, mtime)
        return path

    def test_missing_file_is_stale(self, tmp_path: Path) -> None:
        assert not is_fresh(tmp_path / "nope.xml", ANCHOR, DAY)

    def test_upper_edge_inclusive(self, tmp_path: Path) -> None:
        assert is_fresh(self._file(tmp_path, ANCHOR + DAY), ANCHOR, DAY)

    def test_one_second_past_upper_edge(self, tmp_path: Path) -> None:
        assert not is_fresh(self._file(tmp_path, ANCHOR + DAY + 1), ANCHOR, DAY)

    def test_lower_edge_inclusive(self, tmp_path: Path) -> None:
        assert is_fresh(self._file(tmp_path, ANCHOR - DAY), ANCHOR, DAY)

    def test_one_second_before_lower_edge(self, tmp_path: Path) -> None:
        assert not is_fresh(self._file(tmp_path, ANCHOR - DAY - 1), ANCHOR, DAY)

    def test_wider_window(self, tmp_path: Path) -> None:
        legacy = 60 * 60 * 60 * 24
        path = self._file(tmp_path, ANCHOR - 30 * DAY)
        assert not is_fresh(path, ANCHOR, DAY)
        assert is_fresh(path, ANCHOR, legacy)

    def test_recent_directory_is_not_fresh(self, tmp_path: Path) -> None:
        path = tmp_path / "build-time.xml"
        path.mkdir()
        set_mtime(path, ANCHOR)
        assert not is_fresh(path, ANCHOR, DAY)

    def test_unreadable_metadata_counts_as_stale(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = self._file(tmp_path, ANCHOR)
        real_stat = Path.stat

        def _denied(self: Path, *args: object, **kwargs: object) -> os.stat_result:
            if self == path:
                raise PermissionError(13, "Permission denied")
            return real_stat(self, *args, **kwargs)  # type: ignore[arg-type]

        monkeypatch.setattr(Path, "stat", _denied)
        assert not is_fresh(path, ANCHOR, DAY)


class TestEnsureArtifact:
    def test_writes_into_fresh_tree(self, output_root: Path) -> None:
        outcome = ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        path = output_root / "values" / "build-time.xml"
        assert outcome is WriteOutcome.WRITTEN
        assert read_resource(path, "build_time_epoc_seconds") == ANCHOR

    def test_skip_at_window_edge(self, output_root: Path) -> None:
        ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        path = output_root / "values" / "build-time.xml"
        set_mtime(path, ANCHOR + DAY)
        assert ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR) is WriteOutcome.SKIPPED

    def test_rewrite_just_outside_window(self, output_root: Path) -> None:
        ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        path = output_root / "values" / "build-time.xml"
        set_mtime(path, ANCHOR - DAY - 1)
        outcome = ensure_artifact(output_root, ANCHOR + DAY, reference_epoch=ANCHOR)
        assert outcome is WriteOutcome.WRITTEN
        assert read_resource(path, "build_time_epoc_seconds") == ANCHOR + DAY

    def test_always_write_ignores_freshness(self, output_root: Path) -> None:
        ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        outcome = ensure_artifact(
            output_root, ANCHOR + DAY, FreshnessPolicy.ALWAYS_WRITE, reference_epoch=ANCHOR
        )
        assert outcome is WriteOutcome.WRITTEN

    def test_policy_accepts_string_value(self, output_root: Path) -> None:
        ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        assert ensure_artifact(output_root, ANCHOR, "always_write") is WriteOutcome.WRITTEN

    def test_custom_names(self, output_root: Path) -> None:
        ensure_artifact(
            output_root,
            ANCHOR,
            resource_name="build_day",
            file_name="stamp",
            reference_epoch=ANCHOR,
        )
        assert read_resource(output_root / "values" / "stamp.xml", "build_day") == ANCHOR

    def test_directory_creation_failure(self, blocked_root: Path) -> None:
        with pytest.raises(DirectoryCreationFailed) as excinfo:
            ensure_artifact(blocked_root, ANCHOR, reference_epoch=ANCHOR)
        assert excinfo.value.path == blocked_root / "values"
        assert isinstance(excinfo.value.cause, OSError)
        assert not blocked_root.exists()

    def test_write_failure_when_target_is_directory(self, output_root: Path) -> None:
        target = output_root / "values" / "build-time.xml"
        target.mkdir(parents=True)
        with pytest.raises(WriteFailed) as excinfo:
            ensure_artifact(output_root, ANCHOR, FreshnessPolicy.ALWAYS_WRITE)
        assert excinfo.value.path == target
        # No temp files left behind
        assert [p.name for p in (output_root / "values").iterdir()] == ["build-time.xml"]

    def test_directory_at_target_is_not_skipped(self, output_root: Path) -> None:
        target = output_root / "values" / "build-time.xml"
        target.mkdir(parents=True)
        set_mtime(target, ANCHOR)
        with pytest.raises(WriteFailed):
            ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)

    def test_failed_replace_keeps_previous_artifact(
        self, output_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        ensure_artifact(output_root, ANCHOR, reference_epoch=ANCHOR)
        path = output_root / "values" / "build-time.xml"
        before = path.read_text(encoding="utf-8")

        def _boom(src: str, dst: str) -> None:
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(os, "replace", _boom)
        with pytest.raises(WriteFailed):
            ensure_artifact(output_root, ANCHOR + DAY, FreshnessPolicy.ALWAYS_WRITE)

        assert path.read_text(encoding="utf-8") == before
        assert sorted(p.name for p in path.parent.iterdir()) == ["build-time.xml"]

    def test_invalid_resource_name_touches_nothing(self, output_root: Path) -> None:
        with pytest.raises(ValueError):
            ensure_artifact(output_root, ANCHOR, resource_name="bad name")
        assert not output_root.exists()
