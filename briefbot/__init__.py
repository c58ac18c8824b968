"""Multi-format digest rendering for article summaries."""

__version__ = "0.1.0"
