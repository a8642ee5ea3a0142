"""CLI entry point for the Sportsdata API client generator."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, get_settings, load_registry, load_run_config
from .logging import LOG_LEVELS, configure_logging
from .models import EndpointResult
from .service import GeneratorService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sportsdata-generator",
        description="Generate a Sportsdata.io API consumer client from merged OpenAPI schemas.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to configuration file (default: bundled config.default.json)",
    )
    parser.add_argument(
        "-e",
        "--endpoints-config",
        default=None,
        help="Path to endpoint registry file (default: bundled endpoints.json)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: GENERATOR_LOG_LEVEL or INFO)",
    )
    return parser


async def _run(args: argparse.Namespace) -> List[EndpointResult]:
    settings = get_settings()
    configure_logging(args.log_level or settings.generator_log_level)

    endpoints_path = args.endpoints_config or settings.generator_endpoints_path
    config_path = args.config or settings.generator_config_path
    registry = load_registry(Path(endpoints_path) if endpoints_path else None)
    run_config = load_run_config(registry, Path(config_path) if config_path else None)

    service = GeneratorService.from_settings(settings, run_config, registry)
    return await service.run()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        results = asyncio.run(_run(args))
    except ConfigError as exc:
        parser.exit(2, f"error: {exc}\n")

    if results and not any(result.success for result in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
