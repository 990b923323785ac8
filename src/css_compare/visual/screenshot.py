"""Capture both views into the expected/actual snapshot directories."""

import asyncio
import time
from pathlib import Path

import aiofiles
import structlog

from ..browser import RenderedView

logger = structlog.get_logger()


async def _write_bytes(path: Path, data: bytes) -> None:
    async with aiofiles.open(path, "wb") as f:
        await f.write(data)


async def capture_screenshots(
    left_view: RenderedView,
    right_view: RenderedView,
    snapshot_dir: Path,
    page_name: str,
) -> str:
    """
    Capture both views at the same time and save them as PNG files.

    The left view is written to ``expected/`` and the right view to
    ``actual/`` under ``snapshot_dir``.

    Returns:
        The file name shared by both screenshots, e.g. ``home_1700000000000.png``.
    """
    file_name = f"{page_name}_{int(time.time() * 1000)}.png"
    expected_dir = snapshot_dir / "expected"
    actual_dir = snapshot_dir / "actual"
    expected_dir.mkdir(parents=True, exist_ok=True)
    actual_dir.mkdir(parents=True, exist_ok=True)

    left_image, right_image = await asyncio.gather(
        left_view.capture_page_pixels(),
        right_view.capture_page_pixels(),
    )

    await asyncio.gather(
        _write_bytes(expected_dir / file_name, left_image),
        _write_bytes(actual_dir / file_name, right_image),
    )

    logger.info("Captured screenshots", file_name=file_name, snapshot_dir=str(snapshot_dir))
    return file_name
