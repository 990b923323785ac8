"""Browser manager and rendered-view adapters for Playwright."""

from typing import Any, Protocol, runtime_checkable

import structlog
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeout,
)

from .config import settings
from .errors import PageLoadError

logger = structlog.get_logger()


@runtime_checkable
class RenderedView(Protocol):
    """A rendered page that scripts can be run in."""

    def is_available(self) -> bool:
        ...

    async def run_script(self, script: str) -> Any:
        ...

    async def capture_page_pixels(self) -> bytes:
        ...


class PageView:
    """RenderedView backed by a Playwright page."""

    def __init__(self, page: Page, name: str = "view", full_page: bool | None = None):
        self.page = page
        self.name = name
        self.full_page = settings.screenshot_full_page if full_page is None else full_page

    def is_available(self) -> bool:
        return not self.page.is_closed()

    async def run_script(self, script: str) -> Any:
        """Evaluate a script expression; errors propagate unchanged."""
        return await self.page.evaluate(script)

    async def capture_page_pixels(self) -> bytes:
        return await self.page.screenshot(
            full_page=self.full_page,
            animations="disabled",  # Disable animations for consistent screenshots
        )

    @property
    def url(self) -> str:
        return self.page.url


class BrowserManager:
    """Manages Playwright browser lifecycle and provides page contexts."""

    def __init__(self, headless: bool | None = None):
        self.headless = settings.headless if headless is None else headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> None:
        """Initialize the browser."""
        if self._browser is not None:
            return

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=[
                "--no-sandbox",
                "--disable-setuid-sandbox",
                "--disable-dev-shm-usage",
                "--disable-gpu",
            ],
        )

        # Both sides share one context so they render with identical settings
        self._context = await self._browser.new_context(
            viewport={
                "width": settings.viewport_width,
                "height": settings.viewport_height,
            },
            user_agent=settings.user_agent,
            ignore_https_errors=True,
            java_script_enabled=True,
            bypass_csp=True,  # Injected scripts must run on pages with strict CSP
        )

        logger.info(
            "Browser started",
            headless=self.headless,
            viewport=f"{settings.viewport_width}x{settings.viewport_height}",
        )

    async def stop(self) -> None:
        """Close the browser and cleanup resources."""
        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Browser stopped")

    async def open_page(self) -> Page:
        """Open a page that stays alive until the browser stops."""
        if self._context is None:
            await self.start()
        return await self._context.new_page()


class SmartPageLoader:
    """Handles page loading with waiting for JavaScript-rendered content."""

    def __init__(
        self,
        page: Page,
        wait_for_timeout: int | None = None,
        wait_for_selector: str | None = None,
    ):
        self.page = page
        self.wait_for_timeout = settings.js_wait_timeout if wait_for_timeout is None else wait_for_timeout
        self.wait_for_selector = wait_for_selector or settings.wait_for_selector

    async def goto(
        self,
        url: str,
        timeout: int | None = None,
        wait_until: str = "networkidle",
    ) -> None:
        """
        Navigate to URL and wait for dynamic content.

        Args:
            url: The URL to navigate to
            timeout: Maximum time to wait in milliseconds
            wait_until: When to consider navigation complete
                       Options: 'load', 'domcontentloaded', 'networkidle', 'commit'

        Raises:
            PageLoadError: If the page did not load or returned an HTTP error.
        """
        timeout = timeout or settings.page_load_timeout
        try:
            response = await self.page.goto(url, wait_until=wait_until, timeout=timeout)
        except PlaywrightTimeout as e:
            logger.warning("Page load timeout", url=url, timeout=timeout)
            raise PageLoadError(f"Timed out loading {url}") from e

        if response is not None and response.status >= 400:
            logger.warning("HTTP error response", url=url, status=response.status)
            raise PageLoadError(f"{url} returned HTTP {response.status}")

        await self._wait_for_dynamic_content()
        logger.debug("Page loaded", url=url)

    async def _wait_for_dynamic_content(self) -> None:
        """Wait for dynamic JavaScript content to render."""
        if self.wait_for_selector:
            try:
                await self.page.wait_for_selector(
                    self.wait_for_selector,
                    timeout=self.wait_for_timeout,
                )
            except PlaywrightTimeout:
                logger.debug("Selector not found", selector=self.wait_for_selector)

        # Additional wait for animations and late layout
        if self.wait_for_timeout:
            await self.page.wait_for_timeout(self.wait_for_timeout)
