"""Comparison engine for matching elements and diffing computed styles."""

from .classifier import LAYOUT_PROPS, TEXT_PROPS, VISUAL_PROPS, classify_property
from .differ import compare_styles
from .matcher import match_elements

__all__ = [
    "LAYOUT_PROPS",
    "TEXT_PROPS",
    "VISUAL_PROPS",
    "classify_property",
    "compare_styles",
    "match_elements",
]
