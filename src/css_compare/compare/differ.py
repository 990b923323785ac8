"""Property-level diff of two computed style maps."""

from ..models import CssDiff, DiffType
from .classifier import classify_property


def compare_styles(left: dict[str, str], right: dict[str, str]) -> list[CssDiff]:
    """
    Return the properties whose values differ between two style maps.

    Properties are visited in left insertion order, followed by right-only
    properties in right insertion order. An absent property is distinct
    from an empty string value.
    """
    diffs: list[CssDiff] = []
    props = list(left) + [p for p in right if p not in left]

    for prop in props:
        left_value = left.get(prop)
        right_value = right.get(prop)
        if left_value == right_value:
            continue

        if left_value is None:
            diff_type = DiffType.ADDED
        elif right_value is None:
            diff_type = DiffType.DELETED
        else:
            diff_type = DiffType.CHANGED

        diffs.append(CssDiff(
            property=prop,
            expected=left_value if left_value is not None else "",
            actual=right_value if right_value is not None else "",
            category=classify_property(prop),
            type=diff_type,
        ))

    return diffs
