"""Logging through the default scope."""

from __future__ import annotations

from typing import Any

from .config import DEFAULT_SCOPE as _scope
from .levels import Level
from .scope import _sprint, _sprintf

# Each function calls _emit itself so the caller's frame sits where the
# scope expects it.


def fatal(msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at fatal level."""
    if _scope.output_level >= Level.FATAL:
        _scope._emit(Level.FATAL, _scope.stack_trace_level >= Level.FATAL, msg, kwargs)


def fatala(*args: Any) -> None:
    """Log the operands, joined, at fatal level."""
    if _scope.output_level >= Level.FATAL:
        _scope._emit(Level.FATAL, _scope.stack_trace_level >= Level.FATAL, _sprint(args), None)


def fatalf(template: str, *args: Any) -> None:
    """Log the formatted template at fatal level."""
    if _scope.output_level >= Level.FATAL:
        _scope._emit(
            Level.FATAL, _scope.stack_trace_level >= Level.FATAL, _sprintf(template, args), None
        )


def fatal_enabled() -> bool:
    """Return whether fatal-level output is enabled."""
    return _scope.output_level >= Level.FATAL


def error(msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at error level."""
    if _scope.output_level >= Level.ERROR:
        _scope._emit(Level.ERROR, _scope.stack_trace_level >= Level.ERROR, msg, kwargs)


def errora(*args: Any) -> None:
    """Log the operands, joined, at error level."""
    if _scope.output_level >= Level.ERROR:
        _scope._emit(Level.ERROR, _scope.stack_trace_level >= Level.ERROR, _sprint(args), None)


def errorf(template: str, *args: Any) -> None:
    """Log the formatted template at error level."""
    if _scope.output_level >= Level.ERROR:
        _scope._emit(
            Level.ERROR, _scope.stack_trace_level >= Level.ERROR, _sprintf(template, args), None
        )


def error_enabled() -> bool:
    """Return whether error-level output is enabled."""
    return _scope.output_level >= Level.ERROR


def warn(msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at warn level."""
    if _scope.output_level >= Level.WARN:
        _scope._emit(Level.WARN, _scope.stack_trace_level >= Level.WARN, msg, kwargs)


def warna(*args: Any) -> None:
    """Log the operands, joined, at warn level."""
    if _scope.output_level >= Level.WARN:
        _scope._emit(Level.WARN, _scope.stack_trace_level >= Level.WARN, _sprint(args), None)


def warnf(template: str, *args: Any) -> None:
    """Log the formatted template at warn level."""
    if _scope.output_level >= Level.WARN:
        _scope._emit(
            Level.WARN, _scope.stack_trace_level >= Level.WARN, _sprintf(template, args), None
        )


def warn_enabled() -> bool:
    """Return whether warn-level output is enabled."""
    return _scope.output_level >= Level.WARN


def info(msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at info level."""
    if _scope.output_level >= Level.INFO:
        _scope._emit(Level.INFO, _scope.stack_trace_level >= Level.INFO, msg, kwargs)


def infoa(*args: Any) -> None:
    """Log the operands, joined, at info level."""
    if _scope.output_level >= Level.INFO:
        _scope._emit(Level.INFO, _scope.stack_trace_level >= Level.INFO, _sprint(args), None)


def infof(template: str, *args: Any) -> None:
    """Log the formatted template at info level."""
    if _scope.output_level >= Level.INFO:
        _scope._emit(
            Level.INFO, _scope.stack_trace_level >= Level.INFO, _sprintf(template, args), None
        )


def info_enabled() -> bool:
    """Return whether info-level output is enabled."""
    return _scope.output_level >= Level.INFO


def debug(msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at debug level."""
    if _scope.output_level >= Level.DEBUG:
        _scope._emit(Level.DEBUG, _scope.stack_trace_level >= Level.DEBUG, msg, kwargs)


def debuga(*args: Any) -> None:
    """Log the operands, joined, at debug level."""
    if _scope.output_level >= Level.DEBUG:
        _scope._emit(Level.DEBUG, _scope.stack_trace_level >= Level.DEBUG, _sprint(args), None)


def debugf(template: str, *args: Any) -> None:
    """Log the formatted template at debug level."""
    if _scope.output_level >= Level.DEBUG:
        _scope._emit(
            Level.DEBUG, _scope.stack_trace_level >= Level.DEBUG, _sprintf(template, args), None
        )


def debug_enabled() -> bool:
    """Return whether debug-level output is enabled."""
    return _scope.output_level >= Level.DEBUG