"""AutoBrief: daily work briefs from connected developer tools."""

__version__ = "1.0.0"
