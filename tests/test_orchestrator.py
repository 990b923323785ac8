"""Tests for the full-scan orchestrator."""

import asyncio

import pytest

from conftest import FakeView
from css_compare.errors import ViewUnavailableError
from css_compare.models import ElementChange, IdentityMethod
from css_compare.orchestrator import ScanOrchestrator, run_full_scan
from css_compare.scripts import CSS_COLLECTION_SCRIPT


class WaitingView(FakeView):
    """Refuses to answer until another view has started its script."""

    def __init__(self, other, **kwargs):
        super().__init__(**kwargs)
        self.other = other

    async def run_script(self, script):
        await asyncio.wait_for(self.other.started.wait(), timeout=1.0)
        return await super().run_script(script)


class TestRunFullScan:
    """Test cases for run_full_scan."""

    @pytest.mark.asyncio
    async def test_identical_pages(self, make_view, make_raw):
        elements = [make_raw("#a", {"color": "red"}), make_raw(".b", {"width": "10px"}, method="unique-class")]

        result = await run_full_scan(make_view(elements), make_view(elements))

        assert result.summary.changed_elements == 0
        assert result.summary.added_elements == 0
        assert result.summary.deleted_elements == 0
        assert result.changed == []
        assert result.has_differences is False

    @pytest.mark.asyncio
    async def test_sorted_by_diff_count_descending(self, make_view, make_raw):
        left = [
            make_raw("#a", {"color": "red", "width": "1px", "opacity": "1"}),
            make_raw("#b", {"color": "red", "width": "1px", "opacity": "1"}),
        ]
        right = [
            make_raw("#a", {"color": "blue", "width": "1px", "opacity": "1"}),
            make_raw("#b", {"color": "blue", "width": "2px", "opacity": "0"}),
        ]

        result = await run_full_scan(make_view(left), make_view(right))

        assert [c.key for c in result.changed] == ["#b", "#a"]
        assert result.changed[0].diff_count == 3
        assert result.changed[1].diff_count == 1
        assert result.summary.total_diff_properties == 4

    @pytest.mark.asyncio
    async def test_equal_counts_keep_encounter_order(self, make_view, make_raw):
        left = [make_raw(k, {"color": "red"}) for k in ("#x", "#y", "#z")]
        right = [make_raw(k, {"color": "blue"}) for k in ("#x", "#y", "#z")]

        result = await run_full_scan(make_view(left), make_view(right))

        assert [c.key for c in result.changed] == ["#x", "#y", "#z"]

    @pytest.mark.asyncio
    async def test_added_and_deleted_elements(self, make_view, make_raw):
        left = [make_raw("#keep"), make_raw("body > p", tag="p", method="dom-path")]
        right = [make_raw("#keep"), make_raw("#new", tag="span")]

        result = await run_full_scan(make_view(left), make_view(right))

        assert result.scanned_elements == 4
        assert result.left_count == 2
        assert result.right_count == 2
        assert [(a.key, a.type) for a in result.added] == [("#new", ElementChange.ADDED)]
        assert [(d.key, d.type) for d in result.deleted] == [("body > p", ElementChange.DELETED)]
        assert result.deleted[0].method == IdentityMethod.DOM_PATH
        assert result.summary.added_elements == 1
        assert result.summary.deleted_elements == 1

    @pytest.mark.asyncio
    async def test_runs_collection_script_in_both_views(self, make_view):
        left, right = make_view(), make_view()

        await run_full_scan(left, right)

        assert left.scripts == [CSS_COLLECTION_SCRIPT]
        assert right.scripts == [CSS_COLLECTION_SCRIPT]

    @pytest.mark.asyncio
    async def test_dispatches_both_views_concurrently(self, make_raw):
        right = FakeView([make_raw("#a")])
        left = WaitingView(right, elements=[make_raw("#a")])

        result = await run_full_scan(left, right)

        assert result.summary.changed_elements == 0

    @pytest.mark.asyncio
    async def test_missing_left_view(self, make_view):
        with pytest.raises(ViewUnavailableError, match="Left view is not available"):
            await run_full_scan(None, make_view())

    @pytest.mark.asyncio
    async def test_closed_left_view(self, make_view):
        with pytest.raises(ViewUnavailableError, match="Left view is not available"):
            await run_full_scan(make_view(available=False), make_view())

    @pytest.mark.asyncio
    async def test_missing_right_view(self, make_view):
        with pytest.raises(ViewUnavailableError, match="Right view is not available"):
            await run_full_scan(make_view(), None)

    @pytest.mark.asyncio
    async def test_closed_right_view(self, make_view):
        with pytest.raises(ViewUnavailableError, match="Right view is not available"):
            await run_full_scan(make_view(), make_view(available=False))

    @pytest.mark.asyncio
    async def test_precondition_runs_no_scripts(self, make_view):
        left = make_view()
        with pytest.raises(ViewUnavailableError):
            await run_full_scan(left, None)
        assert left.scripts == []

    @pytest.mark.asyncio
    async def test_script_error_propagates(self, make_view):
        failing = make_view(error=RuntimeError("ReferenceError: foo is not defined"))

        with pytest.raises(RuntimeError, match="ReferenceError: foo is not defined"):
            await run_full_scan(make_view(), failing)


class TestScanOrchestrator:
    """Test cases for ScanOrchestrator input validation."""

    def test_rejects_non_http_urls(self, tmp_path):
        with pytest.raises(ValueError, match="Only http"):
            ScanOrchestrator("file:///etc/passwd", "http://localhost:3001", output_dir=tmp_path)

    def test_rejects_invalid_page_name(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid page name"):
            ScanOrchestrator(
                "http://localhost:3000",
                "http://localhost:3001",
                output_dir=tmp_path,
                page_name="../escape",
            )

    def test_creates_output_directories(self, tmp_path):
        orchestrator = ScanOrchestrator("http://localhost:3000", "http://localhost:3001", output_dir=tmp_path)

        assert orchestrator.storage.get_output_dir().exists()
        assert orchestrator.storage.get_reports_dir().exists()
