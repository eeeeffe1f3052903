"""Issues to RSS: republishes GitHub issues and pull requests as RSS feeds."""

__version__ = "1.0.0"
