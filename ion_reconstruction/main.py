#!/usr/bin/env python3
"""
Command line entry point for the ion reconstruction uploader.

Creates an asset, uploads the source file, signals completion and waits until
every produced asset has finished tiling. Settings come from environment
variables (see ``ion_reconstruction.utils.env_config``); the input path, name
and description can be overridden on the command line.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from ion_reconstruction.core.workflow import ReconstructionWorkflow
from ion_reconstruction.models.asset_model import WorkflowResult
from ion_reconstruction.utils.env_config import AppSettings, get_settings

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure stdlib logging and structlog."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    renderer = structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload data to ion and wait for tiling to finish")
    parser.add_argument("input", nargs="?", default=None, help="Path to the file to upload (ION_INPUT_PATH)")
    parser.add_argument("--name", default=None, help="Display name of the new asset (ION_ASSET_NAME)")
    parser.add_argument("--description", default=None, help="Asset description (ION_ASSET_DESCRIPTION)")
    return parser.parse_args(argv)


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    if args.input:
        settings.input_path = str(Path(args.input))
    if args.name:
        settings.asset_name = args.name
    if args.description is not None:
        settings.asset_description = args.description
    return settings


async def run_workflow(settings: AppSettings) -> WorkflowResult:
    """Run the workflow described by ``settings``."""
    workflow = ReconstructionWorkflow(settings.get_workflow_config())
    return await workflow.run()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the uploader."""
    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.log_level, settings.log_json_format)

    try:
        result = asyncio.run(run_workflow(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return
    except Exception as e:
        logger.error(str(e), error_type=type(e).__name__)
        sys.exit(1)

    # Remote DATA_ERROR / ERROR outcomes are reported, not treated as failures
    if result.creation is not None:
        for asset in result.assets:
            status = getattr(asset.status, "value", asset.status)
            logger.info("Final asset status", asset_id=asset.asset_id, status=status, checks=asset.checks)


if __name__ == "__main__":
    main()
