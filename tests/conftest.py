"""
Test Configuration
==================

Pytest configuration with fixtures for settings, source trees and fake
rendering sessions.
"""

import io
import os
from pathlib import Path
from typing import Tuple

import pytest

from diagram_capture.config.settings import CaptureSettings
from diagram_capture.core.batch.reporter import ConsoleReporter
from diagram_capture.models.schemas import DiagramJob

from tests.utils.mocks import FakeSessionFactory


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep DIAGRAM_CAPTURE_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("DIAGRAM_CAPTURE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "diagrams"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(source_dir: Path) -> CaptureSettings:
    """Test settings fixture."""
    return CaptureSettings(
        environment="testing",
        log_level="DEBUG",
        source_dir=source_dir,
        render_timeout_ms=10000,
    )


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def report_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def error_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(report_stream: io.StringIO, error_stream: io.StringIO) -> ConsoleReporter:
    return ConsoleReporter(stream=report_stream, error_stream=error_stream)


@pytest.fixture
def sample_jobs() -> Tuple[DiagramJob, ...]:
    """Four jobs with distinct viewports."""
    return (
        DiagramJob(source_file_name="alpha.html", viewport_width=400, viewport_height=300, description="Alpha"),
        DiagramJob(source_file_name="beta.html", viewport_width=320, viewport_height=240, description="Beta"),
        DiagramJob(source_file_name="gamma.html", viewport_width=200, viewport_height=150, description="Gamma"),
        DiagramJob(source_file_name="delta.html", viewport_width=160, viewport_height=120, description="Delta"),
    )
