"""hop - jump to directories by fuzzy path patterns."""

__version__ = "0.3.0"
