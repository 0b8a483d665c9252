"""Types shared by the artifact writer: location, policy, outcome, errors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

VALUES_DIR = "values"
FILE_EXTENSION = ".xml"
DEFAULT_FILE_NAME = "build-time"
DEFAULT_RESOURCE_NAME = "build_time_epoc_seconds"

_RESOURCE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


class FreshnessPolicy(str, Enum):
    """Whether an existing artifact written recently may be left untouched."""

    ALWAYS_WRITE = "always_write"
    SKIP_IF_FRESH_TODAY = "skip_if_fresh_today"


class WriteOutcome(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ArtifactLocation:
    """Where one invocation's artifact lives: ``<output_root>/values/<file_name>.xml``."""

    output_root: Path
    file_name: str = DEFAULT_FILE_NAME

    @property
    def values_dir(self) -> Path:
        return self.output_root / VALUES_DIR

    @property
    def path(self) -> Path:
        return self.values_dir / f"{self.file_name}{FILE_EXTENSION}"


def validate_resource_name(name: str) -> str:
    """Return *name* unchanged if it is a legal resource name, else raise ValueError."""
    if not _RESOURCE_NAME_RE.match(name or ""):
        raise ValueError(f"Invalid resource name: {name!r}")
    return name


def validate_file_name(name: str) -> str:
    """Return *name* unchanged if it is a bare file base name, else raise ValueError."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid artifact file name: {name!r}")
    return name


class ArtifactError(Exception):
    """Base error for artifact I/O.  Carries the offending path and the cause."""

    reason = "artifact error"

    def __init__(self, path: Path | str, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.reason}: {self.path}: {cause}")


class DirectoryCreationFailed(ArtifactError):
    """The directory tree for the artifact could not be created."""

    reason = "could not create directory"


class WriteFailed(ArtifactError):
    """The artifact file could not be written once its directory existed."""

    reason = "could not write artifact"


class MalformedArtifact(ArtifactError):
    """An existing artifact could not be parsed back into a timestamp."""

    reason = "malformed artifact"
