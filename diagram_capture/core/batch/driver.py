"""
Capture Driver
==============

Sequential capture of every job in a table into one PNG each.

Jobs run strictly in declaration order on a single shared rendering
session. A failing job is recorded and the batch moves on; only errors
before the loop starts (bad job table, output directory, browser launch)
abort the run.
"""

from typing import Any, AsyncContextManager, Callable, Iterable, Optional
from pathlib import Path
import time

from diagram_capture.config.logging import get_logger
from diagram_capture.config.settings import CaptureSettings, get_settings
from diagram_capture.core.batch.jobs import validate_jobs
from diagram_capture.core.batch.reporter import ConsoleReporter
from diagram_capture.core.rendering.image_writer import optimize_png, validate_png, write_png
from diagram_capture.core.rendering.session import RenderingSession
from diagram_capture.models.schemas import (
    BatchSummary,
    CaptureOutcome,
    DiagramJob,
    JobStatus,
)

logger = get_logger(__name__)

SessionFactory = Callable[[CaptureSettings], AsyncContextManager[Any]]


class SourceNotFoundError(Exception):
    """Raised when a job's source file does not exist."""

    pass


async def capture_job(
    session: Any,
    job: DiagramJob,
    source_dir: Path,
    output_dir: Path,
    settings: CaptureSettings,
) -> CaptureOutcome:
    """
    Capture one job into ``<output_dir>/<stem>.png``.

    Every error is caught and returned as a failed outcome; nothing is
    written for a failed job.
    """
    job_logger = logger.bind(job=job.source_file_name)
    started = time.perf_counter()

    try:
        source_path = (source_dir / job.source_file_name).resolve()
        if not source_path.is_file():
            raise SourceNotFoundError(f"Source file not found: {source_path}")

        png_bytes = await session.capture(
            source_path.as_uri(), job.viewport_width, job.viewport_height
        )
        validate_png(
            png_bytes, job.viewport_width, job.viewport_height, settings.device_scale_factor
        )
        if settings.optimize_png:
            png_bytes = optimize_png(png_bytes)

        output_path = write_png(png_bytes, output_dir / job.output_file_name)

    except Exception as e:
        job_logger.error("Diagram capture failed", error=str(e), error_type=type(e).__name__)
        return CaptureOutcome(
            job=job,
            status=JobStatus.FAILED,
            error=str(e),
            elapsed=time.perf_counter() - started,
        )

    elapsed = time.perf_counter() - started
    job_logger.info("Diagram captured", output=str(output_path), elapsed=round(elapsed, 3))
    return CaptureOutcome(
        job=job,
        status=JobStatus.SUCCEEDED,
        output_path=output_path,
        elapsed=elapsed,
    )


async def generate_diagram_images(
    jobs: Iterable[DiagramJob],
    settings: Optional[CaptureSettings] = None,
    session_factory: Optional[SessionFactory] = None,
    reporter: Optional[ConsoleReporter] = None,
) -> BatchSummary:
    """
    Capture every job and return the batch summary.

    Args:
        jobs: Job table, processed in order
        settings: Capture settings (global settings if omitted)
        session_factory: Builds the rendering session from settings
        reporter: Progress output (stdout if omitted)

    Returns:
        BatchSummary with one outcome per job

    Raises:
        JobConfigurationError: If the job table is invalid
        OSError: If the output directory cannot be created
        BrowserLaunchError: If the browser cannot be started
    """
    settings = settings or get_settings()
    session_factory = session_factory or RenderingSession
    reporter = reporter or ConsoleReporter()

    jobs = validate_jobs(jobs)
    source_dir = Path(settings.source_dir)
    output_dir = Path(settings.resolved_output_dir)

    reporter.batch_started(len(jobs))
    started = time.perf_counter()

    if not output_dir.is_dir():
        output_dir.mkdir(parents=True, exist_ok=True)
        reporter.directory_created(output_dir)

    summary = BatchSummary(output_dir=output_dir)

    async with session_factory(settings) as session:
        for job in jobs:
            reporter.job_started(job)
            outcome = await capture_job(session, job, source_dir, output_dir, settings)
            summary.outcomes.append(outcome)

            if outcome.succeeded:
                reporter.job_succeeded(job, outcome.output_path)
            else:
                reporter.job_failed(job, outcome.error or "unknown error")

    summary.elapsed = time.perf_counter() - started
    logger.info(
        "Diagram batch completed",
        succeeded=summary.success_count,
        failed=summary.error_count,
        output_dir=str(output_dir),
        elapsed=round(summary.elapsed, 3),
    )
    reporter.summary(summary)
    return summary
