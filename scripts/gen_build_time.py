#!/usr/bin/env python3
"""Build hook: write <output_root>/values/build-time.xml, skipping if written today."""

import sys
from pathlib import Path

# Allow running as a standalone script from the repo root
sys.path.insert(0, str(Path(__file__).parent.parent))

from buildstamp.config import get_config
from buildstamp.orchestrator import generate_with_options
from buildstamp.utils.logging import configure_logging

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: gen_build_time.py OUTPUT_ROOT", file=sys.stderr)
        sys.exit(2)
    config = get_config()
    configure_logging(config.log_level)
    result = generate_with_options(sys.argv[1], config.to_options())
    print(f"Build time {result.outcome.value}: {result.path}")
