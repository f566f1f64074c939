"""Set-up of the logging subsystem: encoders, sinks and scope levels."""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
import time
import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .levels import DEFAULT_SCOPE_NAME, Level
from .options import Options, convert_scoped_level, default_options
from .scope import Scope, install_writer, register_scope, scopes

DEFAULT_SCOPE = register_scope(DEFAULT_SCOPE_NAME, "Unscoped logging messages.", 0)

_MEGABYTE = 1024 * 1024
_DAY_SECONDS = 24 * 60 * 60


@dataclass
class Config:
    """Logging settings as read from a configuration file."""

    set_log_callers: bool = True
    stack_trace_level: str = "none"
    output_level: str = "none"


def format_date(t: datetime) -> str:
    """Render ``t`` in UTC as ``YYYY-MM-DDTHH:MM:SS.ffffffZ``.

    A naive datetime is taken to be in UTC already.
    """
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    return (
        f"{t.year % 10000:04d}-{t.month:02d}-{t.day:02d}"
        f"T{t.hour:02d}:{t.minute:02d}:{t.second:02d}.{t.microsecond:06d}Z"
    )


class _StandardStream:
    """Writes to sys.stdout or sys.stderr as they are at the time of writing."""

    def __init__(self, name: str) -> None:
        self._use_stdout = name == "stdout"

    def _stream(self) -> Any:
        return sys.stdout if self._use_stdout else sys.stderr

    def write(self, text: str) -> None:
        self._stream().write(text)

    def flush(self) -> None:
        self._stream().flush()

    def close(self) -> None:
        """Flush what is pending; the standard stream itself stays open."""
        self._stream().flush()


class _FileSink:
    def __init__(self, path: str) -> None:
        self._file = open(path, "a", encoding="utf-8")

    def write(self, text: str) -> None:
        self._file.write(text)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()


class _RotatingFile:
    """A log file renamed to a timestamped backup once it grows too large."""

    def __init__(self, path: str, max_size_mb: int, max_backups: int, max_age_days: int) -> None:
        self._path = path
        self._max_bytes = max_size_mb * _MEGABYTE
        self._max_backups = max_backups
        self._max_age_days = max_age_days
        self._file: Any = None
        self._size = 0
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        data = text.encode("utf-8")
        with self._lock:
            if self._file is None:
                self._open()
            if self._max_bytes > 0 and self._size > 0 and self._size + len(data) > self._max_bytes:
                self._rotate()
            self._file.write(data)
            self._size += len(data)

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def _open(self) -> None:
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._file = open(self._path, "ab")
        self._size = os.path.getsize(self._path)

    def _rotate(self) -> None:
        self._file.close()
        self._file = None
        stem, ext = os.path.splitext(self._path)
        stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S.%f")
        backup = f"{stem}-{stamp}{ext}"
        counter = 1
        while os.path.exists(backup):
            backup = f"{stem}-{stamp}.{counter}{ext}"
            counter += 1
        os.replace(self._path, backup)
        self._prune()
        self._open()

    def _prune(self) -> None:
        directory = os.path.dirname(self._path) or "."
        base = os.path.basename(self._path)
        stem, ext = os.path.splitext(base)
        prefix = f"{stem}-"
        backups = []
        for name in os.listdir(directory):
            if name != base and name.startswith(prefix) and name.endswith(ext):
                path = os.path.join(directory, name)
                backups.append((os.path.getmtime(path), name, path))
        backups.sort(reverse=True)

        doomed = set()
        if self._max_backups > 0:
            doomed.update(path for _, _, path in backups[self._max_backups:])
        if self._max_age_days > 0:
            cutoff = time.time() - self._max_age_days * _DAY_SECONDS
            doomed.update(path for mtime, _, path in backups if mtime < cutoff)
        for path in doomed:
            try:
                os.remove(path)
            except FileNotFoundError:
                pass


class _Fanout:
    """Sends every write to each of several sinks."""

    def __init__(self, sinks: Iterable[Any]) -> None:
        self._sinks = list(sinks)

    def write(self, text: str) -> None:
        for sink in self._sinks:
            sink.write(text)

    def flush(self) -> None:
        for sink in self._sinks:
            sink.flush()

    def close(self) -> None:
        for sink in self._sinks:
            sink.close()


def _open_sink(path: str) -> Any:
    if path in ("stdout", "stderr"):
        return _StandardStream(path)
    return _FileSink(path)


def _open_all(paths: Iterable[str], opened: list[Any]) -> list[Any]:
    sinks = []
    for path in paths:
        sink = _open_sink(path)
        opened.append(sink)
        sinks.append(sink)
    return sinks


def _encode_console(entry: dict[str, Any]) -> str:
    parts = [format_date(entry["time"]), str(entry["level"])]
    if entry["scope"]:
        parts.append(entry["scope"])
    if entry["caller"]:
        parts.append(entry["caller"])
    parts.append(entry["msg"])
    if entry["fields"]:
        parts.append(json.dumps(entry["fields"], default=str))
    line = "\t".join(parts)
    if entry["stack"]:
        line += "\n" + entry["stack"].rstrip("\n")
    return line + "\n"


def _encode_json(entry: dict[str, Any]) -> str:
    record: dict[str, Any] = {
        "level": str(entry["level"]),
        "time": format_date(entry["time"]),
    }
    if entry["scope"]:
        record["scope"] = entry["scope"]
    if entry["caller"]:
        record["caller"] = entry["caller"]
    record["msg"] = entry["msg"]
    for key, value in entry["fields"].items():
        record.setdefault(key, value)
    if entry["stack"]:
        record["stack"] = entry["stack"]
    return json.dumps(record, separators=(",", ":"), default=str) + "\n"


_LOGGING_TO_LEVEL = (
    (logging.CRITICAL, Level.FATAL),
    (logging.ERROR, Level.ERROR),
    (logging.WARNING, Level.WARN),
    (logging.INFO, Level.INFO),
)


def _level_of_record(levelno: int) -> Level:
    for threshold, level in _LOGGING_TO_LEVEL:
        if levelno >= threshold:
            return level
    return Level.DEBUG


def _capture_enabled(level: Level) -> bool:
    if level is Level.ERROR:
        return DEFAULT_SCOPE.error_enabled()
    if level is Level.WARN:
        return DEFAULT_SCOPE.warn_enabled()
    if level is Level.INFO:
        return DEFAULT_SCOPE.info_enabled()
    return DEFAULT_SCOPE.debug_enabled()


class _CaptureHandler(logging.Handler):
    """Routes records of the standard logging module through our output."""

    def __init__(
        self, write: Callable[[dict[str, Any]], None], log_callers: bool, stack_level: Level
    ) -> None:
        super().__init__(logging.DEBUG)
        self._write = write
        self._log_callers = log_callers
        self._stack_level = stack_level

    def emit(self, record: logging.LogRecord) -> None:
        level = _level_of_record(record.levelno)
        if not _capture_enabled(level):
            return
        caller = None
        if self._log_callers:
            directory = os.path.basename(os.path.dirname(record.pathname))
            name = os.path.basename(record.pathname)
            location = f"{directory}/{name}" if directory else name
            caller = f"{location}:{record.lineno}"
        stack = None
        if self._stack_level is not Level.NONE and level <= self._stack_level:
            stack = "".join(traceback.format_stack())
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc),
            "level": level,
            "scope": "",
            "caller": caller,
            "msg": record.getMessage(),
            "stack": stack,
            "fields": {},
        }
        try:
            self._write(entry)
        except Exception:
            self.handleError(record)


def _resolve_levels(text: str, known: dict[str, Scope]) -> list[tuple[Scope, Level]]:
    resolved = []
    for item in text.split(","):
        name, level = convert_scoped_level(item)
        scope = known.get(name)
        if scope is None:
            raise ValueError(f"unknown scope '{name}' specified")
        resolved.append((scope, level))
    return resolved


_state_lock = threading.Lock()
_owned: list[Any] = []
_sync_fn: Callable[[], None] | None = None


def configure(options: Options) -> None:
    """Set up the logging subsystem from ``options``.

    Raises OSError when an output cannot be opened and ValueError when a
    level or scope in the options is invalid; the previous set-up then
    stays in force.
    """
    global _owned, _sync_fn

    opened: list[Any] = []
    try:
        error_sink = _Fanout(_open_all(options.error_output_paths, opened))
        outputs = _open_all(options.output_paths, opened)
        if options.rotate_output_path:
            rotater = _RotatingFile(
                options.rotate_output_path,
                options.rotation_max_size,
                options.rotation_max_backups,
                options.rotation_max_age,
            )
            opened.append(rotater)
            outputs.append(rotater)

        known = scopes()
        output_levels = _resolve_levels(options.output_levels, known)
        stack_levels = _resolve_levels(options.stack_trace_levels, known)
        callers = []
        for name in options.log_callers.split(","):
            if not name:
                continue
            scope = known.get(name)
            if scope is None:
                raise ValueError(f"unknown scope '{name}' specified")
            callers.append(scope)
    except Exception:
        for sink in opened:
            sink.close()
        raise

    sink = _Fanout(outputs) if outputs else None
    encode = _encode_json if options.json_encoding else _encode_console

    def write(entry: dict[str, Any]) -> None:
        if sink is not None:
            sink.write(encode(entry))

    def flush() -> None:
        if sink is not None:
            sink.flush()

    with _state_lock:
        install_writer(write, flush, error_sink)
        for scope, level in output_levels:
            scope.output_level = level
        for scope, level in stack_levels:
            scope.stack_trace_level = level
        for scope in callers:
            scope.log_callers = True

        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, _CaptureHandler):
                root.removeHandler(handler)
        root.addHandler(
            _CaptureHandler(write, DEFAULT_SCOPE.log_callers, DEFAULT_SCOPE.stack_trace_level)
        )
        root.setLevel(logging.DEBUG)

        previous, _owned = _owned, opened
        _sync_fn = flush

    for old in previous:
        old.close()


def sync() -> None:
    """Flush any buffered log entries."""
    flush = _sync_fn
    if flush is not None:
        flush()


configure(default_options())