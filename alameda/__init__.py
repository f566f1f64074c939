"""Scoped logging and small helpers: key renaming and service addresses."""

__version__ = "0.1.0"