"""CSS comparison tool for two side-by-side rendered web pages."""

__version__ = "0.1.0"
