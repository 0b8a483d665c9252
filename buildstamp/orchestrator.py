"""Generation coordinator: resolve the timestamp, then ensure the artifact."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable

from buildstamp.artifact.base import DEFAULT_FILE_NAME, DEFAULT_RESOURCE_NAME, FreshnessPolicy, WriteOutcome
from buildstamp.artifact.writer import DEFAULT_DAY_WINDOW_SECONDS, artifact_location, ensure_artifact
from buildstamp.config import GenerateOptions
from buildstamp.timestamp import Clock, epoch_seconds_of, read_clock, resolve
from buildstamp.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    outcome: WriteOutcome
    path: Path
    timestamp: int

    @property
    def written(self) -> bool:
        return self.outcome is WriteOutcome.WRITTEN


def generate_with_options(
    output_root: Path | str,
    options: GenerateOptions,
    clock: Clock | None = None,
) -> GenerateResult:
    """Run one invocation for *output_root* using *options*.

    The clock is read at most once; the written day and the freshness anchor
    both come from that reading.
    """
    needs_anchor = options.freshness_policy is FreshnessPolicy.SKIP_IF_FRESH_TODAY
    today = read_clock(clock) if options.explicit_date is None or needs_anchor else None

    timestamp = resolve(options.explicit_date, clock=lambda: today)
    anchor = epoch_seconds_of(today) if needs_anchor and today is not None else None

    outcome = ensure_artifact(
        output_root,
        timestamp,
        options.freshness_policy,
        resource_name=options.resource_name,
        file_name=options.file_name,
        day_window_seconds=options.day_window_seconds,
        reference_epoch=anchor,
    )
    result = GenerateResult(
        outcome=outcome,
        path=artifact_location(output_root, options.file_name).path,
        timestamp=timestamp,
    )
    log.info(
        "generate_complete",
        path=str(result.path),
        outcome=outcome.value,
        epoch_seconds=timestamp,
        policy=options.freshness_policy.value,
    )
    return result


def generate(
    output_root: Path | str,
    resource_name: str = DEFAULT_RESOURCE_NAME,
    explicit_date: date | None = None,
    freshness_policy: FreshnessPolicy = FreshnessPolicy.SKIP_IF_FRESH_TODAY,
    *,
    file_name: str = DEFAULT_FILE_NAME,
    day_window_seconds: int = DEFAULT_DAY_WINDOW_SECONDS,
    clock: Clock | None = None,
) -> GenerateResult:
    """Generate ``<output_root>/values/<file_name>.xml`` for one build target.

    Raises:
        ClockUnavailable:        If no date was given and the clock fails.
        DirectoryCreationFailed: If the ``values`` directory cannot be created.
        WriteFailed:             If the artifact cannot be written.
    """
    options = GenerateOptions(
        resource_name=resource_name,
        file_name=file_name,
        explicit_date=explicit_date,
        freshness_policy=freshness_policy,
        day_window_seconds=day_window_seconds,
    )
    return generate_with_options(output_root, options, clock)


def variant_output_root(build_dir: Path | str, variant: str) -> Path:
    """Isolated generated-resources root for *variant* under *build_dir*."""
    return Path(build_dir) / "generated" / "res" / "buildTime" / variant


def generate_for_variants(
    build_dir: Path | str,
    variants: Iterable[str],
    options: GenerateOptions | None = None,
    clock: Clock | None = None,
) -> dict[str, GenerateResult]:
    """Generate one artifact per variant, sequentially.

    Stops at the first failure; artifacts already produced stay in place.
    """
    names = [v.strip() for v in variants]
    if any(not n or "/" in n or "\\" in n for n in names):
        raise ValueError(f"Invalid variant name in {names!r}")
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate variant names in {names!r}")

    options = options or GenerateOptions()
    results: dict[str, GenerateResult] = {}
    for name in names:
        results[name] = generate_with_options(variant_output_root(build_dir, name), options, clock)
        log.info("variant_generated", variant=name, outcome=results[name].outcome.value)
    return results
