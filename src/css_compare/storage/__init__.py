"""Storage of scan results and reports."""

from .html_report import generate_report, write_report
from .manager import StorageManager

__all__ = ["StorageManager", "generate_report", "write_report"]
