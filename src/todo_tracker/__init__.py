"""Personal task tracker with a reactive view-state core."""

__version__ = "0.1.0"
