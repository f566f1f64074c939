"""Named logging scopes with individually adjustable levels."""

from __future__ import annotations

import os
import sys
import threading
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import IO, Any

from .levels import DEFAULT_SCOPE_NAME, Level

# Frames between Scope._emit and the code that called a logging method.
_CALLER_SKIP_OFFSET = 2

WriteFn = Callable[[dict[str, Any]], Any]
SyncFn = Callable[[], Any]


@dataclass(frozen=True)
class _Writer:
    write: WriteFn | None = None
    sync: SyncFn | None = None
    error_sink: IO[str] | None = None


_writer = _Writer()
_scopes: dict[str, Scope] = {}
_lock = threading.Lock()


def install_writer(
    write: WriteFn | None, sync: SyncFn | None, error_sink: IO[str] | None
) -> None:
    """Set where every scope sends its entries and where write failures go.

    ``write`` receives one dict per entry with the keys ``time``, ``level``,
    ``scope``, ``caller``, ``msg``, ``stack`` and ``fields``.
    """
    global _writer
    _writer = _Writer(write, sync, error_sink)


def _sprint(args: tuple[Any, ...]) -> str:
    """Join operands, spacing two adjacent ones when neither is a string."""
    parts: list[str] = []
    previous: Any = ""
    for position, arg in enumerate(args):
        if position and not isinstance(arg, str) and not isinstance(previous, str):
            parts.append(" ")
        parts.append(str(arg))
        previous = arg
    return "".join(parts)


def _sprintf(template: str, args: tuple[Any, ...]) -> str:
    return template % args if args else template


def _short_caller(frame: Any) -> str:
    path = frame.f_code.co_filename
    directory = os.path.basename(os.path.dirname(path))
    name = os.path.basename(path)
    location = f"{directory}/{name}" if directory else name
    return f"{location}:{frame.f_lineno}"


class Scope:
    """A named area of code whose output can be tuned on its own."""

    def __init__(self, name: str, description: str = "", caller_skip: int = 0) -> None:
        self._name = name
        self._description = description
        self._caller_skip = caller_skip
        self._name_to_emit = "" if name == DEFAULT_SCOPE_NAME else name
        self.output_level = Level.INFO
        self.stack_trace_level = Level.NONE
        self.log_callers = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"Scope({self._name!r}, output_level={self.output_level!s})"

    def fatal(self, msg: str, **kwargs: Any) -> None:
        if self.output_level >= Level.FATAL:
            self._emit(Level.FATAL, self.stack_trace_level >= Level.FATAL, msg, kwargs)

    def fatala(self, *args: Any) -> None:
        if self.output_level >= Level.FATAL:
            self._emit(Level.FATAL, self.stack_trace_level >= Level.FATAL, _sprint(args), None)

    def fatalf(self, template: str, *args: Any) -> None:
        if self.output_level >= Level.FATAL:
            self._emit(
                Level.FATAL, self.stack_trace_level >= Level.FATAL, _sprintf(template, args), None
            )

    def fatal_enabled(self) -> bool:
        return self.output_level >= Level.FATAL

    def error(self, msg: str, **kwargs: Any) -> None:
        if self.output_level >= Level.ERROR:
            self._emit(Level.ERROR, self.stack_trace_level >= Level.ERROR, msg, kwargs)

    def errora(self, *args: Any) -> None:
        if self.output_level >= Level.ERROR:
            self._emit(Level.ERROR, self.stack_trace_level >= Level.ERROR, _sprint(args), None)

    def errorf(self, template: str, *args: Any) -> None:
        if self.output_level >= Level.ERROR:
            self._emit(
                Level.ERROR, self.stack_trace_level >= Level.ERROR, _sprintf(template, args), None
            )

    def error_enabled(self) -> bool:
        return self.output_level >= Level.ERROR

    def warn(self, msg: str, **kwargs: Any) -> None:
        if self.output_level >= Level.WARN:
            self._emit(Level.WARN, self.stack_trace_level >= Level.ERROR, msg, kwargs)

    def warna(self, *args: Any) -> None:
        if self.output_level >= Level.WARN:
            self._emit(Level.WARN, self.stack_trace_level >= Level.ERROR, _sprint(args), None)

    def warnf(self, template: str, *args: Any) -> None:
        if self.output_level >= Level.WARN:
            self._emit(
                Level.WARN, self.stack_trace_level >= Level.ERROR, _sprintf(template, args), None
            )

    def warn_enabled(self) -> bool:
        return self.output_level >= Level.WARN

    def info(self, msg: str, **kwargs: Any) -> None:
        if self.output_level >= Level.INFO:
            self._emit(Level.INFO, self.stack_trace_level >= Level.ERROR, msg, kwargs)

    def infoa(self, *args: Any) -> None:
        if self.output_level >= Level.INFO:
            self._emit(Level.INFO, self.stack_trace_level >= Level.ERROR, _sprint(args), None)

    def infof(self, template: str, *args: Any) -> None:
        if self.output_level >= Level.INFO:
            self._emit(
                Level.INFO, self.stack_trace_level >= Level.ERROR, _sprintf(template, args), None
            )

    def info_enabled(self) -> bool:
        return self.output_level >= Level.INFO

    def debug(self, msg: str, **kwargs: Any) -> None:
        if self.output_level >= Level.DEBUG:
            self._emit(Level.DEBUG, self.stack_trace_level >= Level.ERROR, msg, kwargs)

    def debuga(self, *args: Any) -> None:
        if self.output_level >= Level.DEBUG:
            self._emit(Level.DEBUG, self.stack_trace_level >= Level.ERROR, _sprint(args), None)

    def debugf(self, template: str, *args: Any) -> None:
        if self.output_level >= Level.DEBUG:
            self._emit(
                Level.DEBUG, self.stack_trace_level >= Level.ERROR, _sprintf(template, args), None
            )

    def debug_enabled(self) -> bool:
        return self.output_level >= Level.DEBUG

    def _emit(
        self, level: Level, dump_stack: bool, msg: str, fields: dict[str, Any] | None
    ) -> None:
        """Build an entry and hand it to the installed writer.

        Must be called directly from the logging method the user called.
        """
        writer = _writer
        entry: dict[str, Any] = {
            "time": datetime.now(timezone.utc),
            "level": level,
            "scope": self._name_to_emit,
            "caller": None,
            "msg": msg,
            "stack": None,
            "fields": dict(fields or {}),
        }

        frame = None
        if self.log_callers or dump_stack:
            try:
                frame = sys._getframe(self._caller_skip + _CALLER_SKIP_OFFSET)
            except ValueError:
                frame = None
        if self.log_callers and frame is not None:
            entry["caller"] = _short_caller(frame)
        if dump_stack:
            stack = traceback.format_stack(frame) if frame is not None else traceback.format_stack()
            entry["stack"] = "".join(stack)

        if writer.write is None:
            return
        try:
            writer.write(entry)
        except Exception as err:  # a failing sink must never break the caller
            if writer.error_sink is not None:
                print(f"{datetime.now()} log write error: {err}", file=writer.error_sink)
                writer.error_sink.flush()


def register_scope(name: str, description: str = "", caller_skip: int = 0) -> Scope:
    """Register a scope, or return the one already registered under ``name``.

    Names may not contain colons, commas or periods.
    """
    if any(ch in name for ch in ":,."):
        raise ValueError(f"invalid scope name '{name}': colons, commas and periods are not allowed")
    with _lock:
        scope = _scopes.get(name)
        if scope is None:
            scope = Scope(name, description, caller_skip)
            _scopes[name] = scope
        return scope


def find_scope(name: str) -> Scope | None:
    """Return the scope registered under ``name``, or None."""
    with _lock:
        return _scopes.get(name)


def scopes() -> dict[str, Scope]:
    """Return a snapshot of all registered scopes by name."""
    with _lock:
        return dict(_scopes)