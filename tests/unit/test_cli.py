"""
Unit Tests for the Command Line Interface
=========================================
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from diagram_capture import cli
from diagram_capture.config.settings import CaptureSettings
from diagram_capture.core.batch import driver
from diagram_capture.core.batch.jobs import DEFAULT_JOBS
from diagram_capture.core.rendering.session import BrowserLaunchError
from diagram_capture.models.schemas import BatchSummary, CaptureOutcome, DiagramJob, JobStatus

from tests.utils.helpers import list_pngs, write_diagram
from tests.utils.mocks import FakeSessionFactory


def _summary(tmp_path: Path, failures: int) -> BatchSummary:
    job = DiagramJob(source_file_name="a.html", viewport_width=10, viewport_height=10)
    outcomes = [CaptureOutcome(job=job, status=JobStatus.FAILED, error="x") for _ in range(failures)]
    return BatchSummary(output_dir=tmp_path, outcomes=outcomes)


@pytest.fixture
def no_logging_setup():
    with patch.object(cli, "setup_logging"):
        yield


@pytest.fixture
def base_settings(tmp_path):
    return CaptureSettings(environment="testing", source_dir=tmp_path)


class TestApplyArguments:
    """Test command-line overrides."""

    def test_help_documents_source_directory_default(self):
        parser = cli.build_parser()
        source_action = next(action for action in parser._actions if action.dest == "source_dir")

        assert "current working directory" in source_action.help
        assert "current working directory" in parser.epilog

    def test_no_arguments_keeps_settings(self, base_settings):
        args = cli.build_parser().parse_args([])
        settings = cli.apply_arguments(base_settings, args)

        assert settings.model_dump() == base_settings.model_dump()

    def test_overrides(self, base_settings, tmp_path):
        args = cli.build_parser().parse_args(
            [
                "--source-dir", str(tmp_path / "in"),
                "--output-dir", str(tmp_path / "out"),
                "--selector", "#graph svg",
                "--render-timeout", "5000",
                "--settle-delay", "200",
                "--strict",
                "--verbose",
            ]
        )
        settings = cli.apply_arguments(base_settings, args)

        assert settings.source_dir == tmp_path / "in"
        assert settings.resolved_output_dir == tmp_path / "out"
        assert settings.ready_selector == "#graph svg"
        assert settings.render_timeout_ms == 5000
        assert settings.settle_delay_ms == 200
        assert settings.strict_exit is True
        assert settings.log_level == "DEBUG"

    def test_invalid_override_rejected(self, base_settings):
        args = cli.build_parser().parse_args(["--render-timeout", "0"])
        with pytest.raises(ValidationError):
            cli.apply_arguments(base_settings, args)


class TestMain:
    """Test the entry point and its exit status."""

    def test_uses_default_jobs(self, base_settings, no_logging_setup, tmp_path):
        mock_generate = AsyncMock(return_value=_summary(tmp_path, failures=0))

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(cli, "generate_diagram_images", mock_generate):
            assert cli.main([]) == 0

        assert mock_generate.call_args.args[0] == DEFAULT_JOBS

    def test_job_failures_exit_zero_by_default(self, base_settings, no_logging_setup, tmp_path):
        mock_generate = AsyncMock(return_value=_summary(tmp_path, failures=2))

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(cli, "generate_diagram_images", mock_generate):
            assert cli.main([]) == 0

    def test_job_failures_exit_one_when_strict(self, base_settings, no_logging_setup, tmp_path):
        mock_generate = AsyncMock(return_value=_summary(tmp_path, failures=1))

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(cli, "generate_diagram_images", mock_generate):
            assert cli.main(["--strict"]) == 1

    def test_jobs_file(self, base_settings, no_logging_setup, tmp_path):
        jobs_file = tmp_path / "jobs.yaml"
        jobs_file.write_text("only.html:\n  width: 640\n  height: 480\n", encoding="utf-8")
        mock_generate = AsyncMock(return_value=_summary(tmp_path, failures=0))

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(cli, "generate_diagram_images", mock_generate):
            assert cli.main(["--jobs", str(jobs_file)]) == 0

        jobs = mock_generate.call_args.args[0]
        assert [job.source_file_name for job in jobs] == ["only.html"]

    def test_batch_level_error_is_reported(self, base_settings, no_logging_setup, capsys):
        mock_generate = AsyncMock(side_effect=BrowserLaunchError("Browser launch failed: no chromium"))

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(cli, "generate_diagram_images", mock_generate):
            assert cli.main([]) == 1

        assert "Diagram image generation failed: Browser launch failed: no chromium" in capsys.readouterr().err

    def test_end_to_end_with_fake_session(self, base_settings, no_logging_setup, tmp_path, capsys):
        """Test a full run over the built-in table with only one source present."""
        write_diagram(tmp_path, "rag-pipeline.html")
        factory = FakeSessionFactory()

        with patch.object(cli, "get_settings", return_value=base_settings), \
             patch.object(driver, "RenderingSession", factory):
            assert cli.main([]) == 0

        assert list_pngs(tmp_path / "images") == ["rag-pipeline.png"]
        output = capsys.readouterr().out
        assert "✅ Successfully generated: 1 images" in output
        assert "❌ Errors: 3" in output
