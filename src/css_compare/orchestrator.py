"""Full-document CSS scan and the end-to-end comparison workflow."""

import asyncio
from pathlib import Path

import structlog

from .browser import BrowserManager, PageView, RenderedView, SmartPageLoader
from .compare import compare_styles, match_elements
from .config import settings
from .errors import ViewUnavailableError
from .models import (
    ChangedElement,
    CssScanResult,
    ElementChange,
    ElementSummary,
    PixelCompareResult,
    ScanSummary,
    ScrapedElement,
)
from .scripts import CSS_COLLECTION_SCRIPT
from .storage import StorageManager
from .utils import validate_page_name, validate_url
from .visual import RegCliComparator, capture_screenshots

logger = structlog.get_logger()


def _check_view(view: RenderedView | None, side: str) -> None:
    if view is None or not view.is_available():
        raise ViewUnavailableError(f"{side} view is not available")


async def run_full_scan(
    left_view: RenderedView | None,
    right_view: RenderedView | None,
) -> CssScanResult:
    """
    Compare the computed style of every visible element in two views.

    Both views are scraped concurrently. Script failures propagate with
    their original message; nothing is retried.

    Raises:
        ViewUnavailableError: If either view is missing or closed.
    """
    _check_view(left_view, "Left")
    _check_view(right_view, "Right")

    raw_left, raw_right = await asyncio.gather(
        left_view.run_script(CSS_COLLECTION_SCRIPT),
        right_view.run_script(CSS_COLLECTION_SCRIPT),
    )

    left_elements = [ScrapedElement.from_dict(item) for item in raw_left or []]
    right_elements = [ScrapedElement.from_dict(item) for item in raw_right or []]

    match = match_elements(left_elements, right_elements)

    changed: list[ChangedElement] = []
    for left, right in match.matched:
        diffs = compare_styles(left.styles, right.styles)
        if diffs:
            changed.append(ChangedElement(tag=left.tag, key=left.key, method=left.method, diffs=diffs))

    # Stable sort keeps encounter order for equal counts
    changed.sort(key=lambda c: c.diff_count, reverse=True)

    result = CssScanResult(
        left_count=len(left_elements),
        right_count=len(right_elements),
        changed=changed,
        added=[ElementSummary.from_element(el, ElementChange.ADDED) for el in match.added],
        deleted=[ElementSummary.from_element(el, ElementChange.DELETED) for el in match.deleted],
        summary=ScanSummary(
            changed_elements=len(changed),
            added_elements=len(match.added),
            deleted_elements=len(match.deleted),
            total_diff_properties=sum(c.diff_count for c in changed),
        ),
    )

    logger.info(
        "CSS scan complete",
        left=result.left_count,
        right=result.right_count,
        changed=result.summary.changed_elements,
        added=result.summary.added_elements,
        deleted=result.summary.deleted_elements,
        duplicate_keys=len(match.duplicate_keys),
    )
    return result


class ScanOrchestrator:
    """Loads two pages side by side and runs the CSS comparison workflow.

    Optionally captures screenshots of both pages and runs the pixel
    comparator over the snapshot directory.
    """

    def __init__(
        self,
        left_url: str,
        right_url: str,
        output_dir: Path | None = None,
        capture_screenshots: bool = False,
        page_name: str = "page",
        snapshot_dir: Path | None = None,
        comparator: RegCliComparator | None = None,
    ):
        self.left_url = validate_url(left_url)
        self.right_url = validate_url(right_url)
        self.capture_screenshots = capture_screenshots
        self.page_name = validate_page_name(page_name)
        self.snapshot_dir = snapshot_dir or settings.snapshot_dir

        self.storage = StorageManager(left_url, output_dir)
        self.comparator = comparator or RegCliComparator()
        self.browser = BrowserManager()

        # Results
        self.scan_result: CssScanResult | None = None
        self.pixel_result: PixelCompareResult | None = None

    async def open_views(self) -> tuple[PageView, PageView]:
        """Open and load both pages concurrently."""
        left_page = await self.browser.open_page()
        right_page = await self.browser.open_page()

        await asyncio.gather(
            SmartPageLoader(left_page).goto(self.left_url),
            SmartPageLoader(right_page).goto(self.right_url),
        )
        return PageView(left_page, "left"), PageView(right_page, "right")

    async def run(self) -> CssScanResult:
        """Run the complete comparison workflow."""
        logger.info("Starting comparison", left=self.left_url, right=self.right_url)

        try:
            await self.browser.start()
            left_view, right_view = await self.open_views()

            logger.info("Phase 1: Scanning computed styles")
            self.scan_result = await run_full_scan(left_view, right_view)
            self.scan_result.left_url = self.left_url
            self.scan_result.right_url = self.right_url

            await self.storage.save_scan_json(self.scan_result)
            report_path = await self.storage.save_scan_report(self.scan_result)

            if self.capture_screenshots:
                logger.info("Phase 2: Capturing screenshots for pixel comparison")
                await self._run_pixel_comparison(left_view, right_view)

            logger.info("Comparison completed", report_path=str(report_path))
            return self.scan_result

        except Exception as e:
            logger.error("Comparison failed", error=str(e))
            raise

        finally:
            await self.browser.stop()

    async def run_capture(self) -> PixelCompareResult:
        """Capture both pages and run only the pixel comparison."""
        logger.info("Starting capture", left=self.left_url, right=self.right_url)

        try:
            await self.browser.start()
            left_view, right_view = await self.open_views()
            await self._run_pixel_comparison(left_view, right_view)
            return self.pixel_result

        finally:
            await self.browser.stop()

    async def _run_pixel_comparison(self, left_view: PageView, right_view: PageView) -> None:
        await capture_screenshots(left_view, right_view, self.snapshot_dir, self.page_name)
        self.pixel_result = await self.comparator.compare_snapshot_dir(self.snapshot_dir)
