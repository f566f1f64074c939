"""Scoped logging with per-scope output, stack-trace and caller settings."""

__all__ = ["config", "default", "levels", "options", "scope"]