"""Tests for the self-contained HTML report."""

import json
import re
from datetime import datetime

from css_compare.models import (
    ChangedElement,
    CssDiff,
    CssScanResult,
    DiffType,
    ElementChange,
    ElementSummary,
    IdentityMethod,
    ScanSummary,
    StyleCategory,
)
from css_compare.storage import generate_report, write_report
from css_compare.storage.html_report import NO_DIFFERENCES_TEXT, NO_FILTER_MATCH_TEXT


def sample_result(key="#hero"):
    changed = ChangedElement(
        tag="section",
        key=key,
        method=IdentityMethod.ID,
        diffs=[CssDiff("color", "red", "blue", StyleCategory.TEXT, DiffType.CHANGED)],
    )
    return CssScanResult(
        left_count=3,
        right_count=3,
        changed=[changed],
        added=[ElementSummary("span", ".badge", IdentityMethod.UNIQUE_CLASS, ElementChange.ADDED)],
        summary=ScanSummary(changed_elements=1, added_elements=1, total_diff_properties=1),
        left_url="http://localhost:3000",
        right_url="http://localhost:3001",
        scanned_at=datetime(2024, 5, 1, 12, 30, 0),
    )


def embedded_data(report):
    match = re.search(r"^var data = (.*);$", report, re.MULTILINE)
    return json.loads(match.group(1).replace("<\\/", "</").replace("<\\!--", "<!--"))


class TestGenerateReport:
    """Test cases for generate_report."""

    def test_empty_scan_shows_no_differences(self):
        report = generate_report(CssScanResult())

        assert NO_DIFFERENCES_TEXT in report
        assert '<div class="empty-state">' in report

    def test_report_embeds_scan_data(self):
        report = generate_report(sample_result())
        data = embedded_data(report)

        assert data["summary"] == {
            "changedElements": 1,
            "addedElements": 1,
            "deletedElements": 0,
            "totalDiffProperties": 1,
        }
        assert data["changed"][0]["key"] == "#hero"
        assert data["changed"][0]["diffs"][0]["property"] == "color"
        assert data["added"][0]["key"] == ".badge"
        assert data["scannedElements"] == 6

    def test_report_with_differences_has_no_empty_state(self):
        report = generate_report(sample_result())
        assert '<div class="empty-state">' not in report
        assert NO_FILTER_MATCH_TEXT in report

    def test_report_shows_scan_meta(self):
        report = generate_report(sample_result())

        assert "2024-05-01 12:30:00" in report
        assert "http://localhost:3000" in report
        assert "http://localhost:3001" in report

    def test_keys_cannot_close_script_block(self):
        key = '[data-testid="</script><script>alert(1)</script>"]'
        report = generate_report(sample_result(key))

        assert report.count("</script>") == 1
        assert embedded_data(report)["changed"][0]["key"] == key

    def test_report_is_self_contained(self):
        report = generate_report(sample_result())

        assert 'http-equiv="Content-Security-Policy"' in report
        assert "default-src 'none'" in report
        assert not re.search(r"<(script|link|img)[^>]+(src|href)=", report)

    def test_report_has_interactive_controls(self):
        report = generate_report(sample_result())

        for feature in ("navigator.clipboard", "Blob", "search"):
            assert feature in report

    def test_write_report(self, tmp_path):
        path = write_report(sample_result(), tmp_path / "report.html")

        assert path.exists()
        assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
