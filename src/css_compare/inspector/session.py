"""Inspect mode state machine.

An ``InspectSession`` owns the single live instance of inspect behaviour for
a pair of views. ``activate()`` injects the hover/click script into the left
view, clicks arrive as console messages, and each click is compared against
the element with the same identity key in the right view. ``deactivate()``
removes the injected listeners and overlays and clears the right-view
highlight. Both transitions are idempotent.
"""

import asyncio
from typing import Any, Callable

import structlog

from ..browser import RenderedView
from ..compare import compare_styles
from ..errors import ViewUnavailableError
from ..models import InspectResult, ScrapedElement
from ..scripts import CSS_INSPECT_CLEANUP_SCRIPT, CSS_INSPECT_SCRIPT
from .channel import InspectChannel
from .lookup import clear_highlight, find_element_styles, highlight_element

logger = structlog.get_logger()

ResultCallback = Callable[[InspectResult], Any]


class InspectSession:
    """Live single-element comparison between a left and right view."""

    def __init__(
        self,
        left_view: RenderedView | None,
        right_view: RenderedView | None,
        on_result: ResultCallback | None = None,
        on_clear: Callable[[], Any] | None = None,
        channel: InspectChannel | None = None,
    ):
        self.left_view = left_view
        self.right_view = right_view
        self.on_result = on_result
        self.on_clear = on_clear
        self.channel = channel or InspectChannel()

        self.last_result: InspectResult | None = None
        self._active = False
        self._issued = 0  # Sequence number of the latest click
        self._shown = 0  # Sequence number of the result currently shown
        self._tasks: set[asyncio.Task] = set()
        self._closed = asyncio.Event()

    @property
    def active(self) -> bool:
        return self._active

    async def activate(self) -> None:
        """Inject the inspect script into the left view."""
        if self._active:
            return
        if self.left_view is None or not self.left_view.is_available():
            raise ViewUnavailableError("Left view is not available")

        await self.left_view.run_script(CSS_INSPECT_SCRIPT)
        self._active = True
        self._closed.clear()
        logger.info("Inspect mode enabled")

    async def deactivate(self) -> None:
        """Remove inspect listeners and overlays and clear the displayed result."""
        if not self._active:
            return
        self._active = False

        await self._remove_page_state()

        self.last_result = None
        if self.on_clear:
            self.on_clear()
        self._closed.set()
        logger.info("Inspect mode disabled")

    async def handle_navigation(self) -> None:
        """Leave inspect mode after the left view navigated away."""
        if not self._active:
            return
        self._active = False
        self.last_result = None

        # Same-document navigations keep the injected listeners alive
        await self._remove_page_state()

        if self.on_result:
            self.on_result(InspectResult(mode_disabled=True))
        self._closed.set()
        logger.info("Inspect mode disabled by navigation")

    def handle_console_message(self, text: str) -> None:
        """Console listener for the left view; ignores everything but inspect messages."""
        if not self._active:
            return

        message = self.channel.decode(text)
        if message is None:
            return

        if message.type == InspectChannel.CANCEL:
            self._spawn(self.deactivate())
        elif message.type == InspectChannel.CLICK:
            element = self.channel.decode_click(message)
            if element is None:
                return
            self._issued += 1
            self._spawn(self._run_click(self._issued, element))

    async def inspect(self, left: ScrapedElement) -> InspectResult:
        """Compare a left-view element with its counterpart in the right view."""
        if self.right_view is None or not self.right_view.is_available():
            return InspectResult(left=left, error="Right view is not available")

        if not await highlight_element(self.right_view, left.key, left.method):
            return InspectResult(left=left, error="Matching element not found in right panel")

        right = await find_element_styles(self.right_view, left.key, left.method)
        if right is None:
            return InspectResult(left=left, error="Could not retrieve styles from right panel")

        return InspectResult(left=left, right=right, diffs=compare_styles(left.styles, right.styles))

    async def wait_closed(self) -> None:
        """Block until inspect mode is turned off."""
        await self._closed.wait()

    async def wait_idle(self) -> None:
        """Wait for all in-flight click comparisons to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _remove_page_state(self) -> None:
        """Best-effort removal of the left listeners and the right highlight."""
        if self.left_view is not None and self.left_view.is_available():
            try:
                await self.left_view.run_script(CSS_INSPECT_CLEANUP_SCRIPT)
            except Exception as e:
                logger.warning("Inspect cleanup failed", error=str(e))

        if self.right_view is not None and self.right_view.is_available():
            try:
                await clear_highlight(self.right_view)
            except Exception as e:
                logger.warning("Clear highlight failed", error=str(e))

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_click(self, seq: int, left: ScrapedElement) -> None:
        try:
            result = await self.inspect(left)
        except Exception as e:
            logger.warning("Inspect failed", key=left.key, error=str(e))
            result = InspectResult(left=left, error=f"Inspect failed: {e}")

        if not self._active or seq < self._shown:
            # Mode was turned off, or a newer click is already displayed
            return

        self._shown = seq
        self.last_result = result
        logger.debug("Inspect result", key=left.key, diffs=len(result.diffs), error=result.error)
        if self.on_result:
            self.on_result(result)
