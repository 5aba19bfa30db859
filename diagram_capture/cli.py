#!/usr/bin/env python3
"""
Diagram Capture CLI
===================

Captures every configured diagram into a PNG image.

Usage:
    diagram-capture [--source-dir DIR] [--output-dir DIR] [--jobs FILE] [--strict]
    python -m diagram_capture
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from diagram_capture import __version__
from diagram_capture.config.logging import get_logger, setup_logging
from diagram_capture.config.settings import CaptureSettings, get_settings
from diagram_capture.core.batch.driver import generate_diagram_images
from diagram_capture.core.batch.jobs import DEFAULT_JOBS, load_jobs

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diagram-capture",
        description="Capture locally rendered diagrams as PNG images",
        epilog=(
            "Source files are resolved against the current working directory unless "
            "--source-dir or DIAGRAM_CAPTURE_SOURCE_DIR is set."
        ),
    )
    parser.add_argument(
        "--source-dir",
        type=Path,
        help="Directory holding the diagram HTML files (default: current working directory)",
    )
    parser.add_argument(
        "--output-dir", type=Path, help="Image output directory (default: <source-dir>/images)"
    )
    parser.add_argument("--jobs", type=Path, help="YAML or JSON job table")
    parser.add_argument("--selector", help="Selector that marks a rendered diagram")
    parser.add_argument("--render-timeout", type=int, help="Render-wait timeout in milliseconds")
    parser.add_argument("--settle-delay", type=int, help="Extra delay after render in milliseconds")
    parser.add_argument(
        "--strict", action="store_true", default=None, help="Exit with status 1 if any job failed"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_arguments(settings: CaptureSettings, args: argparse.Namespace) -> CaptureSettings:
    """Return a copy of ``settings`` with command-line overrides applied."""
    overrides: Dict[str, Any] = {
        "source_dir": args.source_dir,
        "output_dir": args.output_dir,
        "jobs_file": args.jobs,
        "ready_selector": args.selector,
        "render_timeout_ms": args.render_timeout,
        "settle_delay_ms": args.settle_delay,
        "strict_exit": args.strict,
    }
    update = {key: value for key, value in overrides.items() if value is not None}
    if args.verbose:
        update["log_level"] = "DEBUG"

    return CaptureSettings.model_validate({**settings.model_dump(), **update})


async def run(settings: CaptureSettings) -> int:
    """Run one batch and return the process exit status."""
    jobs = load_jobs(settings.jobs_file) if settings.jobs_file else DEFAULT_JOBS
    summary = await generate_diagram_images(jobs, settings)
    return summary.exit_code(strict=settings.strict_exit)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = apply_arguments(get_settings(), args)
        setup_logging(settings)
        return asyncio.run(run(settings))
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted", file=sys.stderr)
        return 130
    except Exception as e:
        logger.error("Diagram image generation failed", error=str(e), error_type=type(e).__name__)
        print(f"❌ Diagram image generation failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
