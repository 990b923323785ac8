"""Semantic categories for CSS properties.

The membership sets are an explicit allow-list. New properties are not
inferred from their names and fall into ``other`` until listed here.
"""

from ..models import StyleCategory

LAYOUT_PROPS: frozenset[str] = frozenset({
    "display",
    "position",
    "top",
    "right",
    "bottom",
    "left",
    "float",
    "clear",
    "z-index",
    "overflow",
    "overflow-x",
    "overflow-y",
    "width",
    "height",
    "min-width",
    "min-height",
    "max-width",
    "max-height",
    "margin",
    "margin-top",
    "margin-right",
    "margin-bottom",
    "margin-left",
    "padding",
    "padding-top",
    "padding-right",
    "padding-bottom",
    "padding-left",
    "border-width",
    "border-top-width",
    "border-right-width",
    "border-bottom-width",
    "border-left-width",
    "flex",
    "flex-grow",
    "flex-shrink",
    "flex-basis",
    "flex-direction",
    "flex-wrap",
    "justify-content",
    "align-items",
    "align-self",
    "align-content",
    "grid-template-columns",
    "grid-template-rows",
    "grid-column",
    "grid-row",
    "gap",
    "row-gap",
    "column-gap",
    "box-sizing",
    "vertical-align",
})

TEXT_PROPS: frozenset[str] = frozenset({
    "font-family",
    "font-size",
    "font-weight",
    "font-style",
    "font-variant",
    "line-height",
    "letter-spacing",
    "word-spacing",
    "text-align",
    "text-decoration",
    "text-transform",
    "text-indent",
    "text-shadow",
    "white-space",
    "word-break",
    "word-wrap",
    "overflow-wrap",
    "color",
    "direction",
    "unicode-bidi",
    "writing-mode",
})

VISUAL_PROPS: frozenset[str] = frozenset({
    "background",
    "background-color",
    "background-image",
    "background-position",
    "background-size",
    "background-repeat",
    "border-color",
    "border-top-color",
    "border-right-color",
    "border-bottom-color",
    "border-left-color",
    "border-style",
    "border-top-style",
    "border-right-style",
    "border-bottom-style",
    "border-left-style",
    "border-radius",
    "border-top-left-radius",
    "border-top-right-radius",
    "border-bottom-left-radius",
    "border-bottom-right-radius",
    "box-shadow",
    "opacity",
    "visibility",
    "outline",
    "outline-color",
    "outline-style",
    "outline-width",
    "transform",
    "transition",
    "animation",
    "cursor",
    "filter",
    "backdrop-filter",
})


def classify_property(prop: str) -> StyleCategory:
    """Map a CSS property name to its category, defaulting to ``other``."""
    if prop in LAYOUT_PROPS:
        return StyleCategory.LAYOUT
    if prop in TEXT_PROPS:
        return StyleCategory.TEXT
    if prop in VISUAL_PROPS:
        return StyleCategory.VISUAL
    return StyleCategory.OTHER
