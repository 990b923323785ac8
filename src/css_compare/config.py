"""Configuration settings for the CSS comparison tool."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Default pages
    left_url: str = Field(default="http://localhost:3000", description="Expected (left) page URL")
    right_url: str = Field(default="http://localhost:3001", description="Actual (right) page URL")

    # Playwright/Browser settings
    headless: bool = Field(default=True, description="Run Chromium without a visible window")
    viewport_width: int = Field(default=1280, description="Viewport width for both pages")
    viewport_height: int = Field(default=800, description="Viewport height for both pages")
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User agent string (realistic browser UA)",
    )
    page_load_timeout: int = Field(
        default=30000,
        description="Page load timeout in milliseconds",
    )
    js_wait_timeout: int = Field(
        default=1000,
        description="Additional wait time for JavaScript rendering (ms)",
    )
    wait_for_selector: str | None = Field(
        default=None,
        description="Optional CSS selector to wait for before considering page loaded",
    )

    # Storage settings
    output_dir: Path = Field(default=Path("./data"), description="Output directory for scan data")
    reports_dir: Path = Field(default=Path("./reports"), description="Reports directory")
    snapshot_dir: Path = Field(default=Path("./snapshots"), description="Screenshot comparison directory")

    # Screenshot / pixel comparison settings
    screenshot_full_page: bool = Field(default=True, description="Capture full page screenshot")
    matching_threshold: float = Field(
        default=0.0, ge=0, le=1, description="Per-pixel color matching threshold"
    )
    threshold_rate: float = Field(
        default=0.0, ge=0, le=1, description="Allowed rate of changed pixels"
    )
    reg_cli_command: str = Field(
        default="npx reg-cli",
        description="Command used to launch the reg-cli pixel comparator",
    )

    model_config = {"env_prefix": "CSS_COMPARE_", "env_file": ".env"}


settings = Settings()
