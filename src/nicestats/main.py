from __future__ import annotations

import argparse
import os
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from nicestats.common.settings import (
    DEFAULT_SCHEMA_PATH,
    DISPLAY_MODES,
    Settings,
    default_settings,
    load_settings,
)
from nicestats.ingest.transport import TransportSetupError
from nicestats.orchestrator.service import Collector


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Live statsd metrics table on UDP 8125",
        epilog="All options are optional; with none the collector runs with built-in defaults.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings.yaml (default: $NICESTATS_CONFIG, else built-in defaults)",
    )
    parser.add_argument(
        "--schema",
        default=str(DEFAULT_SCHEMA_PATH),
        help="Path to schema.json used to validate --config",
    )
    parser.add_argument(
        "--display",
        choices=DISPLAY_MODES,
        default=None,
        help="Display surface (overrides config)",
    )
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> Settings:
    config = args.config or os.environ.get("NICESTATS_CONFIG")
    if config:
        settings = load_settings(Path(config), Path(args.schema))
    else:
        settings = default_settings()
    if args.display is not None:
        settings = replace(settings, display=args.display)
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()
    settings = resolve_settings(args)
    try:
        Collector(settings=settings).run()
    except TransportSetupError as exc:
        raise SystemExit(f"nicestats: {exc}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
