"""Steam library discovery and title normalization."""

__version__ = "0.3.0"
