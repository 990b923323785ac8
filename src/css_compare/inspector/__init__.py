"""Live single-element inspect mode."""

from .channel import InspectChannel, InspectMessage
from .lookup import clear_highlight, find_element_styles, highlight_element
from .session import InspectSession

__all__ = [
    "InspectChannel",
    "InspectMessage",
    "InspectSession",
    "clear_highlight",
    "find_element_styles",
    "highlight_element",
]
