"""
Pydantic Models and Schemas
===========================

Core data models for diagram jobs, capture outcomes and batch summaries.
"""

from typing import Optional, List
from enum import Enum
from pathlib import Path, PurePosixPath, PureWindowsPath

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    """Outcome of a single capture job."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DiagramJob(BaseModel):
    """One configured diagram: a source file, a viewport and a label."""

    model_config = ConfigDict(frozen=True)

    source_file_name: str = Field(..., min_length=1, description="HTML file, relative to the source directory")
    viewport_width: int = Field(..., gt=0, le=10000, description="Viewport width in pixels")
    viewport_height: int = Field(..., gt=0, le=10000, description="Viewport height in pixels")
    description: str = Field("", description="Human-readable label")

    @field_validator("source_file_name")
    @classmethod
    def validate_source_file_name(cls, v: str) -> str:
        """Keep source files inside the source directory."""
        v = v.strip()
        if not v:
            raise ValueError("Source file name must not be empty")
        for flavour in (PurePosixPath, PureWindowsPath):
            path = flavour(v)
            if path.is_absolute() or path.anchor:
                raise ValueError(f"Source file name must be relative: {v}")
            if ".." in path.parts:
                raise ValueError(f"Source file name must not leave the source directory: {v}")
        if not PureWindowsPath(v).stem:
            raise ValueError(f"Source file name has no stem: {v}")
        return v

    @property
    def output_file_name(self) -> str:
        """Output image name: the source stem with a ``.png`` extension."""
        return f"{PureWindowsPath(self.source_file_name).stem}.png"

    @property
    def label(self) -> str:
        return self.description or self.source_file_name


class CaptureOutcome(BaseModel):
    """Result of attempting one job."""

    job: DiagramJob
    status: JobStatus
    output_path: Optional[Path] = Field(None, description="Written image (success only)")
    error: Optional[str] = Field(None, description="Error message (failure only)")
    elapsed: float = Field(0.0, ge=0, description="Time spent on the job in seconds")

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED


class BatchSummary(BaseModel):
    """Aggregated result of one batch run."""

    output_dir: Path = Field(..., description="Directory images were written to")
    outcomes: List[CaptureOutcome] = Field(default_factory=list, description="Outcomes in job order")
    elapsed: float = Field(0.0, ge=0, description="Total batch time in seconds")

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def error_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def failed_jobs(self) -> List[DiagramJob]:
        return [outcome.job for outcome in self.outcomes if not outcome.succeeded]

    def exit_code(self, strict: bool = False) -> int:
        """
        Process exit status for this batch.

        A completed batch exits 0 even when jobs failed, unless ``strict``
        is set, in which case any failed job yields 1.
        """
        if strict and self.error_count > 0:
            return 1
        return 0
