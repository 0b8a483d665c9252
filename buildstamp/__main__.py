"""CLI entry point: python -m buildstamp <command>

Commands:
  generate  Write <output_root>/values/build-time.xml for one build target.
  variants  Same, once per variant under <build_dir>/generated/res/buildTime/.
  show      Print the timestamp held by an existing artifact.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import NoReturn

from buildstamp.artifact.base import ArtifactError, FreshnessPolicy
from buildstamp.config import Config, GenerateOptions, get_config
from buildstamp.timestamp import ClockUnavailable
from buildstamp.utils.logging import configure_logging, get_logger


def _load_config(args: argparse.Namespace) -> Config:
    config = get_config(Path(args.config) if args.config else None)
    configure_logging(config.log_level)
    return config


def _options_from(args: argparse.Namespace, config: Config) -> GenerateOptions:
    """Command-line flags win over settings.toml and env overlays."""
    options = config.to_options()
    overrides: dict = {}
    if args.resource_name:
        overrides["resource_name"] = args.resource_name
    if args.file_name:
        overrides["file_name"] = args.file_name
    if args.date:
        overrides["explicit_date"] = args.date
    if args.always_write:
        overrides["freshness_policy"] = FreshnessPolicy.ALWAYS_WRITE
    return replace(options, **overrides) if overrides else options


# Errors that end a CLI run with status 1.
_CLI_ERRORS = (ArtifactError, ClockUnavailable, ValueError, OSError)


def _fail(exc: Exception) -> NoReturn:
    get_logger().error("generate_failed", error=str(exc), error_type=type(exc).__name__)
    print(f"error: {exc}", file=sys.stderr)
    sys.exit(1)


def _cmd_generate(args: argparse.Namespace) -> None:
    from buildstamp.cli_output import print_result
    from buildstamp.orchestrator import generate_with_options

    try:
        config = _load_config(args)
        options = _options_from(args, config)
        result = generate_with_options(args.output_root, options)
    except _CLI_ERRORS as exc:
        _fail(exc)
    print_result(result)


def _cmd_variants(args: argparse.Namespace) -> None:
    from buildstamp.cli_output import print_result
    from buildstamp.orchestrator import generate_for_variants

    try:
        config = _load_config(args)
        options = _options_from(args, config)
        results = generate_for_variants(args.build_dir, args.variants, options)
    except _CLI_ERRORS as exc:
        _fail(exc)
    for name, result in results.items():
        print_result(result, variant=name)


def _cmd_show(args: argparse.Namespace) -> None:
    from buildstamp.artifact.resource_xml import read_resource
    from buildstamp.artifact.writer import artifact_location
    from buildstamp.cli_output import print_artifact_status

    try:
        config = _load_config(args)
        resource_name = args.resource_name or config.resource_name
        path = artifact_location(args.output_root, args.file_name or config.file_name).path
        if not path.is_file():
            print(f"No artifact at {path}. Run 'generate' first.")
            sys.exit(1)
        timestamp = read_resource(path, resource_name)
    except _CLI_ERRORS as exc:
        _fail(exc)
    print_artifact_status(path, timestamp)


def _add_common(p: argparse.ArgumentParser, generating: bool = True) -> None:
    p.add_argument("--config", help="Path to settings.toml", default=None)
    p.add_argument("--resource-name", help="name attribute of the <string> element", default=None)
    p.add_argument("--file-name", help="Base name of the XML file inside values/", default=None)
    if generating:
        p.add_argument("--date", type=date.fromisoformat, help="Override build day (YYYY-MM-DD)", default=None)
        p.add_argument(
            "--always-write",
            action="store_true",
            help="Rewrite the artifact even if it was written today",
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="buildstamp",
        description="Generate the build-day timestamp resource",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # generate
    p_gen = sub.add_parser("generate", help="Generate the artifact for one output root")
    p_gen.add_argument("output_root", help="Generated-resources root directory")
    _add_common(p_gen)

    # variants
    p_var = sub.add_parser("variants", help="Generate one artifact per build variant")
    p_var.add_argument("build_dir", help="Build directory holding generated/res/buildTime/")
    p_var.add_argument("variants", nargs="+", help="Variant names, e.g. debug release")
    _add_common(p_var)

    # show
    p_show = sub.add_parser("show", help="Print the timestamp stored in an artifact")
    p_show.add_argument("output_root", help="Generated-resources root directory")
    _add_common(p_show, generating=False)

    args = parser.parse_args(argv)

    dispatch = {
        "generate": _cmd_generate,
        "variants": _cmd_variants,
        "show": _cmd_show,
    }
    dispatch[args.command](args)


if __name__ == "__main__":
    main()
