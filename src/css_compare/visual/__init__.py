"""Screenshot capture and pixel comparison."""

from .reg_runner import RegCliComparator
from .screenshot import capture_screenshots

__all__ = ["RegCliComparator", "capture_screenshots"]
