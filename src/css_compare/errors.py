"""Exceptions raised by the comparison workflow."""


class CssCompareError(RuntimeError):
    """Base class for comparison failures."""


class ViewUnavailableError(CssCompareError):
    """Raised when a rendered view is missing or already closed."""


class PageLoadError(CssCompareError):
    """Raised when a page cannot be loaded into a rendered view."""


class PixelCompareError(CssCompareError):
    """Raised when the pixel comparator produced no readable result."""
