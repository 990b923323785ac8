"""Tests for the inspect channel and session."""

import asyncio

import pytest

from conftest import FakeView, console_line, raw_element, script_params
from css_compare.errors import ViewUnavailableError
from css_compare.inspector import InspectChannel, InspectSession
from css_compare.models import DiffType, IdentityMethod
from css_compare.scripts import (
    CLEAR_HIGHLIGHT_SCRIPT,
    CSS_INSPECT_CLEANUP_SCRIPT,
    CSS_INSPECT_PREFIX,
    CSS_INSPECT_SCRIPT,
)


def right_page(elements, styles_missing=False):
    """Responder that answers highlight and lookup scripts from ``elements``."""
    by_key = {e["key"]: e for e in elements}

    def respond(script):
        if script == CLEAR_HIGHLIGHT_SCRIPT:
            return None
        params = script_params(script)
        element = by_key.get(params["key"])
        if "highlightId" in params:
            return element is not None
        if element is None or styles_missing:
            return None
        return {"tag": element["tag"], "styles": dict(element["styles"])}

    return respond


class SlowKeyView(FakeView):
    """FakeView whose answers for some keys take longer."""

    def __init__(self, delays, **kwargs):
        super().__init__(**kwargs)
        self.delays = delays

    async def run_script(self, script):
        if script != CLEAR_HIGHLIGHT_SCRIPT:
            await asyncio.sleep(self.delays.get(script_params(script)["key"], 0))
        return await super().run_script(script)


def click(element):
    return console_line(InspectChannel.CLICK, element)


class TestInspectChannel:
    """Test cases for console message decoding."""

    def test_ignores_page_output(self):
        channel = InspectChannel()
        assert channel.decode("hello from the page") is None
        assert channel.decode("") is None
        assert channel.decode(None) is None

    @pytest.mark.parametrize("suffix", ["{not json", "[1, 2]", '"text"', '{"data": {}}', '{"type": 3}'])
    def test_drops_malformed_messages(self, suffix):
        assert InspectChannel().decode(CSS_INSPECT_PREFIX + suffix) is None

    def test_decodes_click_message(self):
        channel = InspectChannel()
        element = raw_element("#title", {"color": "red"}, tag="h1")

        message = channel.decode(console_line(InspectChannel.CLICK, element))

        assert message.type == "inspect-click"
        assert message.data == element

    def test_missing_data_defaults_to_empty(self):
        message = InspectChannel().decode(CSS_INSPECT_PREFIX + '{"type": "inspect-cancel"}')
        assert message.type == InspectChannel.CANCEL
        assert message.data == {}

    def test_decode_click(self):
        channel = InspectChannel()
        message = channel.decode(click(raw_element(".card", {"width": "10px"}, method="unique-class")))

        element = channel.decode_click(message)

        assert element.key == ".card"
        assert element.method == IdentityMethod.UNIQUE_CLASS
        assert element.styles == {"width": "10px"}

    def test_decode_click_rejects_invalid_element(self):
        channel = InspectChannel()
        message = channel.decode(console_line(InspectChannel.CLICK, {"tag": "div"}))
        assert channel.decode_click(message) is None

    def test_decode_click_ignores_other_types(self):
        channel = InspectChannel()
        message = channel.decode(console_line(InspectChannel.CANCEL))
        assert channel.decode_click(message) is None


class TestInspectSessionLifecycle:
    """Test cases for activating and deactivating inspect mode."""

    @pytest.mark.asyncio
    async def test_activate_injects_script_once(self):
        left = FakeView()
        session = InspectSession(left, FakeView())

        await session.activate()
        await session.activate()

        assert session.active is True
        assert left.scripts == [CSS_INSPECT_SCRIPT]

    @pytest.mark.asyncio
    async def test_activate_requires_left_view(self):
        with pytest.raises(ViewUnavailableError, match="Left view is not available"):
            await InspectSession(None, FakeView()).activate()

        session = InspectSession(FakeView(available=False), FakeView())
        with pytest.raises(ViewUnavailableError, match="Left view is not available"):
            await session.activate()
        assert session.active is False

    @pytest.mark.asyncio
    async def test_deactivate_cleans_up_both_views(self):
        left, right = FakeView(), FakeView()
        cleared = []
        session = InspectSession(left, right, on_clear=lambda: cleared.append(True))

        await session.activate()
        await session.deactivate()
        await session.deactivate()

        assert session.active is False
        assert left.scripts == [CSS_INSPECT_SCRIPT, CSS_INSPECT_CLEANUP_SCRIPT]
        assert right.scripts == [CLEAR_HIGHLIGHT_SCRIPT]
        assert cleared == [True]

    @pytest.mark.asyncio
    async def test_deactivate_without_activate_is_noop(self):
        left = FakeView()
        await InspectSession(left, FakeView()).deactivate()
        assert left.scripts == []

    @pytest.mark.asyncio
    async def test_deactivate_survives_closed_left_view(self):
        left, right = FakeView(), FakeView()
        session = InspectSession(left, right)
        await session.activate()
        left.available = False

        await session.deactivate()

        assert session.active is False
        assert left.scripts == [CSS_INSPECT_SCRIPT]

    @pytest.mark.asyncio
    async def test_deactivate_tolerates_cleanup_errors(self):
        left = FakeView()
        session = InspectSession(left, FakeView(error=RuntimeError("gone")))
        await session.activate()

        await session.deactivate()

        assert session.active is False
        await asyncio.wait_for(session.wait_closed(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_escape_cancels_inspect_mode(self):
        cleared = []
        session = InspectSession(FakeView(), FakeView(), on_clear=lambda: cleared.append(True))
        await session.activate()

        session.handle_console_message(console_line(InspectChannel.CANCEL))
        await session.wait_idle()

        assert session.active is False
        assert cleared == [True]

    @pytest.mark.asyncio
    async def test_navigation_disables_mode(self):
        results = []
        session = InspectSession(FakeView(), FakeView(), on_result=results.append)
        await session.activate()

        await session.handle_navigation()

        assert session.active is False
        assert len(results) == 1
        assert results[0].mode_disabled is True
        assert results[0].to_dict()["modeDisabled"] is True

    @pytest.mark.asyncio
    async def test_navigation_removes_page_listeners(self):
        left, right = FakeView(), FakeView()
        session = InspectSession(left, right)
        await session.activate()

        await session.handle_navigation()

        assert left.scripts == [CSS_INSPECT_SCRIPT, CSS_INSPECT_CLEANUP_SCRIPT]
        assert right.scripts == [CLEAR_HIGHLIGHT_SCRIPT]

    @pytest.mark.asyncio
    async def test_navigation_tolerates_destroyed_context(self):
        results = []
        left = FakeView()
        session = InspectSession(left, FakeView(), on_result=results.append)
        await session.activate()
        left.error = RuntimeError("Execution context was destroyed")

        await session.handle_navigation()

        assert session.active is False
        assert results[0].mode_disabled is True

    @pytest.mark.asyncio
    async def test_navigation_while_inactive_is_ignored(self):
        results = []
        session = InspectSession(FakeView(), FakeView(), on_result=results.append)
        await session.handle_navigation()
        assert results == []


class TestInspectSessionClicks:
    """Test cases for comparing clicked elements."""

    @pytest.mark.asyncio
    async def test_click_produces_diffs(self):
        right_elements = [raw_element("#title", {"color": "blue", "width": "10px"}, tag="h1")]
        right = FakeView(responder=right_page(right_elements))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#title", {"color": "red", "width": "10px"}, tag="h1")))
        await session.wait_idle()

        assert len(results) == 1
        result = results[0]
        assert result.error is None
        assert result.right.tag == "h1"
        assert [(d.property, d.expected, d.actual, d.type) for d in result.diffs] == [
            ("color", "red", "blue", DiffType.CHANGED),
        ]
        assert session.last_result is result

    @pytest.mark.asyncio
    async def test_click_passes_identity_to_right_view(self):
        right = FakeView(responder=right_page([raw_element(".card", method="unique-class")]))
        session = InspectSession(FakeView(), right)
        await session.activate()

        session.handle_console_message(click(raw_element(".card", method="unique-class")))
        await session.wait_idle()

        params = [script_params(s) for s in right.scripts]
        assert all(p["key"] == ".card" for p in params)
        assert all(p["method"] == "unique-class" for p in params)

    @pytest.mark.asyncio
    async def test_missing_counterpart(self):
        right = FakeView(responder=right_page([]))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#gone")))
        await session.wait_idle()

        assert results[0].error == "Matching element not found in right panel"
        assert results[0].diffs == []

    @pytest.mark.asyncio
    async def test_styles_unavailable(self):
        right = FakeView(responder=right_page([raw_element("#a")], styles_missing=True))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#a")))
        await session.wait_idle()

        assert results[0].error == "Could not retrieve styles from right panel"

    @pytest.mark.asyncio
    async def test_right_view_unavailable(self):
        results = []
        session = InspectSession(FakeView(), None, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#a")))
        await session.wait_idle()

        assert results[0].error == "Right view is not available"

    @pytest.mark.asyncio
    async def test_script_failure_becomes_error_result(self):
        results = []
        session = InspectSession(FakeView(), FakeView(error=RuntimeError("boom")), on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#a")))
        await session.wait_idle()

        assert results[0].error == "Inspect failed: boom"

    @pytest.mark.asyncio
    async def test_ignores_page_console_output(self):
        right = FakeView(responder=right_page([]))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message("regular log line")
        session.handle_console_message(CSS_INSPECT_PREFIX + "{broken")
        await session.wait_idle()

        assert results == []
        assert right.scripts == []

    @pytest.mark.asyncio
    async def test_clicks_ignored_while_inactive(self):
        right = FakeView(responder=right_page([raw_element("#a")]))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)

        session.handle_console_message(click(raw_element("#a")))
        await session.wait_idle()

        assert results == []
        assert right.scripts == []

    @pytest.mark.asyncio
    async def test_latest_click_wins(self):
        elements = [raw_element("#slow", {"color": "blue"}), raw_element("#fast", {"color": "blue"})]
        right = SlowKeyView({"#slow": 0.05}, responder=right_page(elements))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#slow", {"color": "red"})))
        session.handle_console_message(click(raw_element("#fast", {"color": "red"})))
        await session.wait_idle()

        assert [r.left.key for r in results] == ["#fast"]
        assert session.last_result.left.key == "#fast"

    @pytest.mark.asyncio
    async def test_result_dropped_after_deactivate(self):
        right = SlowKeyView({"#a": 0.05}, responder=right_page([raw_element("#a", {"color": "blue"})]))
        results = []
        session = InspectSession(FakeView(), right, on_result=results.append)
        await session.activate()

        session.handle_console_message(click(raw_element("#a", {"color": "red"})))
        await session.deactivate()
        await session.wait_idle()

        assert results == []
        assert session.last_result is None
