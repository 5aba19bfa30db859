"""
Application Settings
===================

Capture settings and environment configuration using Pydantic Settings.
Every option can be set through a ``DIAGRAM_CAPTURE_``-prefixed environment
variable or a ``.env`` file; command-line flags override both.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class CaptureSettings(BaseSettings):
    """Capture settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Diagram Capture", description="Application name")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    # Input / Output Configuration
    source_dir: Path = Field(
        default_factory=Path.cwd, description="Directory holding the diagram HTML files"
    )
    output_dir: Optional[Path] = Field(
        default=None, description="Image output directory (defaults to <source_dir>/images)"
    )
    jobs_file: Optional[Path] = Field(
        default=None, description="YAML or JSON job table replacing the built-in one"
    )

    # Rendering Configuration
    ready_selector: str = Field(
        default=".mermaid svg", description="Selector that appears once the diagram is rendered"
    )
    render_timeout_ms: int = Field(
        default=10000, gt=0, description="Render-wait timeout in milliseconds"
    )
    navigation_timeout_ms: int = Field(
        default=30000, gt=0, description="Navigation and load-state timeout in milliseconds"
    )
    settle_delay_ms: int = Field(
        default=0, ge=0, description="Extra delay after the diagram is ready, in milliseconds"
    )
    device_scale_factor: float = Field(
        default=1.0, gt=0, le=3.0, description="Device pixel ratio of the page"
    )
    optimize_png: bool = Field(default=False, description="Re-encode PNGs with optimization")

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    browser_args: List[str] = Field(
        default=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
        ],
        description="Extra Chromium launch arguments",
    )

    # Exit Behaviour
    strict_exit: bool = Field(
        default=False, description="Exit with status 1 when any job failed"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("browser_args", mode="before")
    @classmethod
    def parse_browser_args(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse browser arguments from a JSON list or a comma-separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [arg.strip() for arg in v.split(",") if arg.strip()]
        return v

    @property
    def resolved_output_dir(self) -> Path:
        """Output directory, defaulting to ``images`` under the source directory."""
        if self.output_dir is not None:
            return self.output_dir
        return self.source_dir / "images"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="DIAGRAM_CAPTURE_",
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> CaptureSettings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = CaptureSettings()
    return settings


def reload_settings() -> CaptureSettings:
    """Reload settings from environment."""
    global settings
    settings = CaptureSettings()
    return settings
