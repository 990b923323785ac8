"""Storage manager for scan results and reports."""

import json
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

import aiofiles
import structlog

from ..config import settings
from ..models import CssScanResult
from .html_report import generate_report

logger = structlog.get_logger()

SCAN_JSON_NAME = "css-scan-report.json"
SCAN_REPORT_NAME = "css-scan-report.html"


class StorageManager:
    """Manages storage of scan data and reports."""

    def __init__(self, base_url: str, output_dir: Path | None = None):
        self.base_url = base_url
        self.domain = urlparse(base_url).netloc

        # Create a unique folder for each scan
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        folder_name = f"{self._sanitize_domain(self.domain)}_{timestamp}"

        self.output_dir = (output_dir or settings.output_dir) / folder_name
        self.reports_dir = (output_dir / "reports" if output_dir else settings.reports_dir) / folder_name

        self._setup_directories()

    def _sanitize_domain(self, domain: str) -> str:
        """Convert domain to safe folder name."""
        return domain.replace(":", "_").replace("/", "_").replace(".", "_") or "local"

    def _setup_directories(self) -> None:
        """Create necessary directory structure."""
        for directory in (self.output_dir, self.reports_dir):
            directory.mkdir(parents=True, exist_ok=True)

        logger.info("Storage directories created", output_dir=str(self.output_dir))

    def get_output_dir(self) -> Path:
        """Get the output directory path."""
        return self.output_dir

    def get_reports_dir(self) -> Path:
        """Get the reports directory path."""
        return self.reports_dir

    def get_report_path(self) -> Path:
        return self.reports_dir / SCAN_REPORT_NAME

    def get_json_path(self) -> Path:
        return self.output_dir / SCAN_JSON_NAME

    async def _write_text(self, filepath: Path, content: str) -> Path:
        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(content)
        return filepath

    async def save_scan_json(self, result: CssScanResult, filepath: Path | None = None) -> Path:
        """Export the raw scan result as JSON."""
        filepath = filepath or self.get_json_path()
        await self._write_text(filepath, json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        logger.info("Saved scan JSON", path=str(filepath))
        return filepath

    async def save_scan_report(self, result: CssScanResult) -> Path:
        """Render and save the interactive HTML report."""
        filepath = await self._write_text(self.get_report_path(), generate_report(result))
        logger.info("Saved HTML report", path=str(filepath))
        return filepath
