"""ccstats — Claude Code session statistics."""

__version__ = "1.0.0"
