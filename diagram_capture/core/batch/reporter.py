"""
Console Reporter
================

Human-readable progress and summary text for a capture batch.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from diagram_capture.models.schemas import BatchSummary, DiagramJob

NEXT_STEPS = (
    "Review generated images for quality",
    "Update presentation to use static images",
    "Test mobile compatibility",
)


class ConsoleReporter:
    """Writes batch progress to stdout and job failures to stderr by default."""

    def __init__(self, stream: Optional[TextIO] = None, error_stream: Optional[TextIO] = None):
        self.stream = stream
        self.error_stream = error_stream

    def _print(self, message: str = "") -> None:
        print(message, file=self.stream or sys.stdout, flush=True)

    def _print_error(self, message: str) -> None:
        print(message, file=self.error_stream or sys.stderr, flush=True)

    def batch_started(self, job_count: int) -> None:
        self._print(f"🚀 Starting diagram image generation ({job_count} diagrams)...\n")

    def directory_created(self, path: Path) -> None:
        self._print(f"📁 Created images directory: {path}")

    def job_started(self, job: DiagramJob) -> None:
        self._print(f"📸 Capturing {job.label}...")

    def job_succeeded(self, job: DiagramJob, output_path: Path) -> None:
        self._print(f"   ✅ Saved: {output_path.parent.name}/{output_path.name}")

    def job_failed(self, job: DiagramJob, error: str) -> None:
        self._print_error(f"   ❌ Error capturing {job.source_file_name}: {error}")

    def summary(self, summary: BatchSummary) -> None:
        self._print("\n📊 Summary:")
        self._print(f"   ✅ Successfully generated: {summary.success_count} images")
        self._print(f"   ❌ Errors: {summary.error_count}")

        if summary.success_count > 0:
            self._print(f"\n📁 Images saved to: {summary.output_dir}")
            self._print("\n💡 Next steps:")
            for number, step in enumerate(NEXT_STEPS, start=1):
                self._print(f"   {number}. {step}")
