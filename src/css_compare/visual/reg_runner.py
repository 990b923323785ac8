"""Pixel comparison of screenshot directories via reg-cli."""

import asyncio
import json
import shlex
from pathlib import Path

import structlog

from ..config import settings
from ..errors import PixelCompareError
from ..models import PixelCompareResult

logger = structlog.get_logger()


def _check_threshold(name: str, value: float | None) -> None:
    if value is not None and not 0 <= value <= 1:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")


def parse_reg_json(json_path: Path, report_path: Path) -> PixelCompareResult:
    """Read the JSON summary written by reg-cli."""
    raw = json.loads(json_path.read_text(encoding="utf-8"))
    return PixelCompareResult(
        passed=len(raw["passedItems"]),
        failed=len(raw["failedItems"]),
        new=len(raw["newItems"]),
        deleted=len(raw["deletedItems"]),
        report_path=report_path,
        json_path=json_path,
        raw=raw,
    )


class RegCliComparator:
    """Runs reg-cli as a subprocess and collects its JSON summary."""

    def __init__(self, command: str | None = None):
        self.command = shlex.split(command or settings.reg_cli_command)

    def build_args(
        self,
        actual_dir: Path,
        expected_dir: Path,
        diff_dir: Path,
        report_path: Path,
        json_path: Path,
        matching_threshold: float | None = None,
        threshold_rate: float | None = None,
    ) -> list[str]:
        args = [
            *self.command,
            str(actual_dir),
            str(expected_dir),
            str(diff_dir),
            "-R", str(report_path),
            "-J", str(json_path),
            "-I",  # Exit zero even when differences are found
        ]
        if matching_threshold is not None:
            args += ["-M", str(matching_threshold)]
        if threshold_rate is not None:
            args += ["-T", str(threshold_rate)]
        return args

    async def compare(
        self,
        actual_dir: Path,
        expected_dir: Path,
        diff_dir: Path,
        matching_threshold: float | None = None,
        threshold_rate: float | None = None,
        report_path: Path | None = None,
        json_path: Path | None = None,
    ) -> PixelCompareResult:
        """
        Compare two screenshot directories.

        Raises:
            PixelCompareError: If reg-cli did not produce a readable JSON summary.
        """
        _check_threshold("matching_threshold", matching_threshold)
        _check_threshold("threshold_rate", threshold_rate)

        base = Path(actual_dir).parent
        report_path = report_path or base / "report.html"
        json_path = json_path or base / "reg.json"

        args = self.build_args(
            actual_dir, expected_dir, diff_dir, report_path, json_path,
            matching_threshold, threshold_rate,
        )
        logger.debug("Running reg-cli", args=args)

        returncode: int | None = None
        stderr = b""
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
            returncode = process.returncode
        except OSError as e:
            stderr = str(e).encode()

        try:
            result = parse_reg_json(Path(json_path), Path(report_path))
        except (OSError, ValueError, KeyError, TypeError) as e:
            parts = [f"reg-cli output parse failed: {e}"]
            if returncode:
                parts.append(f"exit status: {returncode}")
            if stderr:
                parts.append(f"stderr: {stderr.decode(errors='replace').strip()}")
            raise PixelCompareError("\n".join(parts)) from e

        logger.info(
            "Pixel comparison complete",
            passed=result.passed,
            failed=result.failed,
            new=result.new,
            deleted=result.deleted,
        )
        return result

    async def compare_snapshot_dir(self, snapshot_dir: Path) -> PixelCompareResult:
        """Compare ``actual/`` against ``expected/`` using the configured thresholds."""
        return await self.compare(
            snapshot_dir / "actual",
            snapshot_dir / "expected",
            snapshot_dir / "diff",
            matching_threshold=settings.matching_threshold,
            threshold_rate=settings.threshold_rate,
            report_path=snapshot_dir / "report.html",
            json_path=snapshot_dir / "reg.json",
        )
