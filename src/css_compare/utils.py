"""Shared helpers: logging setup and input validation."""

import logging
import re
from urllib.parse import urlparse

import structlog

ALLOWED_URL_SCHEMES = ("http", "https")
PAGE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,100}$")


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog for console output."""
    level = logging.DEBUG if verbose else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def is_allowed_url(url: str) -> bool:
    """Check that a URL uses http or https."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


def validate_url(url: str) -> str:
    """Return the URL unchanged, or raise ValueError if it cannot be loaded."""
    if not is_allowed_url(url):
        raise ValueError(f"Only http: and https: URLs are allowed: {url}")
    return url


def validate_page_name(name: str) -> str:
    """Return the page name unchanged, or raise ValueError if unusable in a filename."""
    if not name or not PAGE_NAME_PATTERN.match(name):
        raise ValueError(
            "Invalid page name: only alphanumeric, underscore, and hyphen allowed (max 100 chars)"
        )
    return name
