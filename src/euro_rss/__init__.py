"""Euro RSS - RSS feeds for European institutional websites."""

__version__ = "1.0.0"
