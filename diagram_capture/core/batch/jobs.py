"""
Job Table
=========

The built-in diagram table, job file loading and table validation.
"""

from typing import Any, Dict, Iterable, List, Tuple, Union
from pathlib import Path

import yaml
from pydantic import ValidationError

from diagram_capture.config.logging import get_logger
from diagram_capture.models.schemas import DiagramJob

logger = get_logger(__name__)


class JobConfigurationError(Exception):
    """Raised when a job table is empty, ambiguous or malformed."""

    pass


DEFAULT_JOBS: Tuple[DiagramJob, ...] = (
    DiagramJob(
        source_file_name="system-architecture.html",
        viewport_width=1400,
        viewport_height=1000,
        description="PathFindR System Architecture",
    ),
    DiagramJob(
        source_file_name="agent-systems.html",
        viewport_width=1400,
        viewport_height=1200,
        description="Development vs Production Agent Systems",
    ),
    DiagramJob(
        source_file_name="rag-pipeline.html",
        viewport_width=1600,
        viewport_height=900,
        description="RAG Document Processing Pipeline",
    ),
    DiagramJob(
        source_file_name="context-optimization.html",
        viewport_width=1600,
        viewport_height=800,
        description="Context Optimization Comparison",
    ),
)


def validate_jobs(jobs: Iterable[DiagramJob]) -> Tuple[DiagramJob, ...]:
    """
    Validate a job table and return it as a tuple in declaration order.

    Raises:
        JobConfigurationError: If the table is empty, a source file name
            repeats, or two jobs would write the same output image
    """
    jobs = tuple(jobs)
    if not jobs:
        raise JobConfigurationError("Job table is empty")

    seen_sources: Dict[str, DiagramJob] = {}
    seen_outputs: Dict[str, DiagramJob] = {}
    for job in jobs:
        if job.source_file_name in seen_sources:
            raise JobConfigurationError(f"Duplicate job: {job.source_file_name}")
        seen_sources[job.source_file_name] = job

        other = seen_outputs.get(job.output_file_name)
        if other is not None:
            raise JobConfigurationError(
                f"Jobs {other.source_file_name} and {job.source_file_name} "
                f"both write {job.output_file_name}"
            )
        seen_outputs[job.output_file_name] = job

    return jobs


def _job_from_record(name: str, record: Dict[str, Any]) -> DiagramJob:
    return DiagramJob(
        source_file_name=name,
        viewport_width=record.get("width"),
        viewport_height=record.get("height"),
        description=record.get("description") or "",
    )


def parse_jobs(data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> Tuple[DiagramJob, ...]:
    """
    Build jobs from a decoded job table.

    Two shapes are accepted::

        {"diagram.html": {"width": 1400, "height": 1000, "description": "..."}}

        [{"file": "diagram.html", "width": 1400, "height": 1000, "description": "..."}]
    """
    if isinstance(data, dict):
        items = []
        for name, record in data.items():
            if not isinstance(record, dict):
                raise JobConfigurationError(f"Job {name} must be a mapping")
            items.append((str(name), record))
    elif isinstance(data, list):
        items = []
        for index, record in enumerate(data):
            if not isinstance(record, dict) or "file" not in record:
                raise JobConfigurationError(f"Job #{index + 1} must be a mapping with a 'file' key")
            items.append((str(record["file"]), record))
    else:
        raise JobConfigurationError("Job table must be a mapping or a list")

    jobs = []
    for name, record in items:
        try:
            jobs.append(_job_from_record(name, record))
        except ValidationError as e:
            raise JobConfigurationError(f"Invalid job {name}: {e}") from e

    return validate_jobs(jobs)


def load_jobs(path: Union[str, Path]) -> Tuple[DiagramJob, ...]:
    """Load and validate a job table from a YAML or JSON file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise JobConfigurationError(f"Cannot read job file {path}: {e}") from e

    try:
        jobs = parse_jobs(data)
    except JobConfigurationError as e:
        raise JobConfigurationError(f"{path}: {e}") from e

    logger.info("Loaded job table", path=str(path), jobs=len(jobs))
    return jobs
