"""Personal activity time log with daily and weekly summaries."""

__version__ = "0.1.0"
