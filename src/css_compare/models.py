"""Data models for the CSS comparison tool."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class StyleCategory(Enum):
    """Semantic group of a CSS property."""

    LAYOUT = "layout"
    TEXT = "text"
    VISUAL = "visual"
    OTHER = "other"


class IdentityMethod(Enum):
    """How an element's identity key was derived, in priority order."""

    ID = "id"
    DATA_TESTID = "data-testid"
    UNIQUE_CLASS = "unique-class"
    DOM_PATH = "dom-path"


class DiffType(Enum):
    """Kind of property-level difference."""

    CHANGED = "changed"
    ADDED = "added"  # Only on the right
    DELETED = "deleted"  # Only on the left


class ElementChange(Enum):
    """Kind of element-level difference shown in reports."""

    CHANGED = "changed"
    ADDED = "added"
    DELETED = "deleted"


@dataclass
class ScrapedElement:
    """A visible element captured from one rendered page."""

    tag: str
    key: str
    method: IdentityMethod
    styles: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "ScrapedElement":
        """Build an element from raw script output, rejecting malformed payloads."""
        if not isinstance(data, dict):
            raise ValueError(f"Element payload must be an object, got {type(data).__name__}")

        tag = data.get("tag")
        key = data.get("key")
        if not isinstance(tag, str) or not isinstance(key, str) or not key:
            raise ValueError("Element payload requires string 'tag' and 'key'")

        method = IdentityMethod(data.get("method"))

        styles = data.get("styles") or {}
        if not isinstance(styles, dict):
            raise ValueError("Element 'styles' must be an object")
        for prop, value in styles.items():
            if not isinstance(value, str):
                raise ValueError(f"Style value for {prop!r} must be a string")

        return cls(tag=tag, key=key, method=method, styles=dict(styles))

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "key": self.key,
            "method": self.method.value,
            "styles": dict(self.styles),
        }


@dataclass
class CssDiff:
    """A single property that differs between a matched element pair."""

    property: str
    expected: str  # Left value, '' when absent
    actual: str  # Right value, '' when absent
    category: StyleCategory
    type: DiffType

    def to_dict(self) -> dict:
        return {
            "property": self.property,
            "expected": self.expected,
            "actual": self.actual,
            "category": self.category.value,
            "type": self.type.value,
        }


@dataclass
class MatchResult:
    """Outcome of pairing left and right elements by identity key."""

    matched: list[tuple[ScrapedElement, ScrapedElement]] = field(default_factory=list)
    added: list[ScrapedElement] = field(default_factory=list)  # Right only
    deleted: list[ScrapedElement] = field(default_factory=list)  # Left only
    duplicate_keys: list[str] = field(default_factory=list)  # Keys repeated on the right


@dataclass
class ChangedElement:
    """A matched pair with at least one property difference."""

    tag: str
    key: str
    method: IdentityMethod
    diffs: list[CssDiff] = field(default_factory=list)
    type: ElementChange = ElementChange.CHANGED

    @property
    def diff_count(self) -> int:
        return len(self.diffs)

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "key": self.key,
            "method": self.method.value,
            "type": self.type.value,
            "diffCount": self.diff_count,
            "diffs": [d.to_dict() for d in self.diffs],
        }


@dataclass
class ElementSummary:
    """An element present on only one side."""

    tag: str
    key: str
    method: IdentityMethod
    type: ElementChange

    @classmethod
    def from_element(cls, element: ScrapedElement, change: ElementChange) -> "ElementSummary":
        return cls(tag=element.tag, key=element.key, method=element.method, type=change)

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "key": self.key,
            "method": self.method.value,
            "type": self.type.value,
        }


@dataclass
class ScanSummary:
    """Aggregate counts for a full scan."""

    changed_elements: int = 0
    added_elements: int = 0
    deleted_elements: int = 0
    total_diff_properties: int = 0

    def to_dict(self) -> dict:
        return {
            "changedElements": self.changed_elements,
            "addedElements": self.added_elements,
            "deletedElements": self.deleted_elements,
            "totalDiffProperties": self.total_diff_properties,
        }


@dataclass
class CssScanResult:
    """Complete result of comparing every visible element across two pages."""

    left_count: int = 0
    right_count: int = 0
    changed: list[ChangedElement] = field(default_factory=list)
    added: list[ElementSummary] = field(default_factory=list)
    deleted: list[ElementSummary] = field(default_factory=list)
    summary: ScanSummary = field(default_factory=ScanSummary)
    left_url: str | None = None
    right_url: str | None = None
    scanned_at: datetime = field(default_factory=datetime.now)

    @property
    def scanned_elements(self) -> int:
        return self.left_count + self.right_count

    @property
    def has_differences(self) -> bool:
        return bool(self.changed or self.added or self.deleted)

    def to_dict(self) -> dict:
        data = {
            "scannedElements": self.scanned_elements,
            "leftCount": self.left_count,
            "rightCount": self.right_count,
            "changed": [c.to_dict() for c in self.changed],
            "added": [a.to_dict() for a in self.added],
            "deleted": [d.to_dict() for d in self.deleted],
            "summary": self.summary.to_dict(),
            "scannedAt": self.scanned_at.isoformat(),
        }
        if self.left_url:
            data["leftUrl"] = self.left_url
        if self.right_url:
            data["rightUrl"] = self.right_url
        return data


@dataclass
class InspectResult:
    """Single-element comparison produced by one click in inspect mode."""

    left: ScrapedElement | None = None
    right: ScrapedElement | None = None
    diffs: list[CssDiff] = field(default_factory=list)
    error: str | None = None
    mode_disabled: bool = False

    def to_dict(self) -> dict:
        data = {
            "left": self.left.to_dict() if self.left else None,
            "right": self.right.to_dict() if self.right else None,
            "diffs": [d.to_dict() for d in self.diffs],
            "error": self.error,
        }
        if self.mode_disabled:
            data["modeDisabled"] = True
        return data


@dataclass
class PixelCompareResult:
    """Summary of a screenshot directory comparison."""

    passed: int
    failed: int
    new: int
    deleted: int
    report_path: Path
    json_path: Path
    raw: dict = field(default_factory=dict)
