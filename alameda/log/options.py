"""Options that control how the logging subsystem is set up."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from .levels import DEFAULT_SCOPE_NAME, Level
from .scope import scopes

DEFAULT_OUTPUT_LEVEL = Level.INFO
DEFAULT_STACK_TRACE_LEVEL = Level.NONE
DEFAULT_OUTPUT_PATH = "stdout"
DEFAULT_ERROR_OUTPUT_PATH = "stderr"
DEFAULT_ROTATION_MAX_AGE = 30
DEFAULT_ROTATION_MAX_SIZE = 100 * 1024 * 1024
DEFAULT_ROTATION_MAX_BACKUPS = 1000

# Exact, case-sensitive names accepted inside scoped level strings.
_LEVEL_BY_NAME = {str(level): level for level in Level}

_LEVEL_LIST = "[{}]".format(
    ", ".join(
        str(level)
        for level in (
            Level.DEBUG,
            Level.INFO,
            Level.WARN,
            Level.ERROR,
            Level.FATAL,
            Level.NONE,
        )
    )
)


def convert_scoped_level(scoped_level: str) -> tuple[str, Level]:
    """Split ``scope:level`` (or a bare ``level``) into its scope and level.

    A bare level belongs to the default scope. Raises ValueError when the
    text is malformed or names an unknown level.
    """
    pieces = scoped_level.split(":")
    if len(pieces) == 1:
        scope, name = DEFAULT_SCOPE_NAME, pieces[0]
    elif len(pieces) == 2:
        scope, name = pieces
    else:
        raise ValueError(f"invalid output level format '{scoped_level}'")
    try:
        return scope, _LEVEL_BY_NAME[name]
    except KeyError:
        raise ValueError(f"invalid output level '{scoped_level}'") from None


def _set_scoped_level(levels_text: str, scope: str, level: Level) -> str:
    entry = f"{scope}:{level}"
    levels = levels_text.split(",")

    if scope == DEFAULT_SCOPE_NAME:
        # An entry without a scope prefix stands for the default scope.
        for position, item in enumerate(levels):
            if ":" not in item:
                levels[position] = entry
                return ",".join(levels)

    prefix = f"{scope}:"
    for position, item in enumerate(levels):
        if item.startswith(prefix):
            levels[position] = entry
            return ",".join(levels)

    levels.append(entry)
    return ",".join(levels)


def _get_scoped_level(levels_text: str, scope: str) -> Level:
    levels = levels_text.split(",")

    if scope == DEFAULT_SCOPE_NAME:
        for item in levels:
            if ":" not in item:
                return convert_scoped_level(item)[1]

    prefix = f"{scope}:"
    for item in levels:
        if item.startswith(prefix):
            return convert_scoped_level(item)[1]

    raise ValueError(f"no level defined for scope '{scope}'")


@dataclass
class Options:
    """Settings for the logging subsystem.

    ``output_levels`` and ``stack_trace_levels`` are comma-separated
    ``scope:level`` lists; ``log_callers`` is a comma-separated list of
    scope names whose entries carry the caller's location.
    """

    output_paths: list[str] = field(default_factory=lambda: [DEFAULT_OUTPUT_PATH])
    error_output_paths: list[str] = field(
        default_factory=lambda: [DEFAULT_ERROR_OUTPUT_PATH]
    )
    rotate_output_path: str = ""
    rotation_max_size: int = DEFAULT_ROTATION_MAX_SIZE
    rotation_max_age: int = DEFAULT_ROTATION_MAX_AGE
    rotation_max_backups: int = DEFAULT_ROTATION_MAX_BACKUPS
    json_encoding: bool = False
    log_grpc: bool = True
    output_levels: str = f"{DEFAULT_SCOPE_NAME}:{DEFAULT_OUTPUT_LEVEL}"
    log_callers: str = ""
    stack_trace_levels: str = f"{DEFAULT_SCOPE_NAME}:{DEFAULT_STACK_TRACE_LEVEL}"

    def set_output_level(self, scope: str, level: Level) -> None:
        """Set the minimum output level for ``scope``."""
        self.output_levels = _set_scoped_level(self.output_levels, scope, level)

    def get_output_level(self, scope: str) -> Level:
        """Return the minimum output level for ``scope``; ValueError if none."""
        return _get_scoped_level(self.output_levels, scope)

    def set_stack_trace_level(self, scope: str, level: Level) -> None:
        """Set the minimum stack tracing level for ``scope``."""
        self.stack_trace_levels = _set_scoped_level(self.stack_trace_levels, scope, level)

    def get_stack_trace_level(self, scope: str) -> Level:
        """Return the minimum stack tracing level for ``scope``; ValueError if none."""
        return _get_scoped_level(self.stack_trace_levels, scope)

    def set_log_callers(self, scope: str, include: bool) -> None:
        """Choose whether entries of ``scope`` carry the caller's location."""
        names = ["" if name == scope else name for name in self.log_callers.split(",")]
        if include:
            try:
                names[names.index("")] = scope
            except ValueError:
                names.append(scope)
        self.log_callers = ",".join(names)

    def get_log_callers(self, scope: str) -> bool:
        """Return whether entries of ``scope`` carry the caller's location."""
        return scope in self.log_callers.split(",")

    def attach_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add the logging command-line arguments to ``parser``.

        Arguments left off the command line come back as None; pass the
        parsed namespace to :meth:`update_from_namespace` to apply them.
        """
        parser.add_argument(
            "--log_target",
            action="append",
            default=None,
            help="The set of paths where to output the log. This can be any path "
            "as well as the special values stdout and stderr",
        )
        parser.add_argument(
            "--log_rotate",
            default=None,
            help="The path for the optional rotating log file",
        )
        parser.add_argument(
            "--log_rotate_max_age",
            type=int,
            default=None,
            help="The maximum age in days of a log file beyond which the file is "
            "rotated (0 indicates no limit)",
        )
        parser.add_argument(
            "--log_rotate_max_size",
            type=int,
            default=None,
            help="The maximum size in megabytes of a log file beyond which the "
            "file is rotated",
        )
        parser.add_argument(
            "--log_rotate_max_backups",
            type=int,
            default=None,
            help="The maximum number of log file backups to keep before older "
            "files are deleted (0 indicates no limit)",
        )
        parser.add_argument(
            "--log_as_json",
            action="store_true",
            default=None,
            help="Whether to format output as JSON or in plain console-friendly format",
        )

        all_scopes = scopes()
        if len(all_scopes) > 1:
            names = ", ".join(sorted(all_scopes))
            output_help = (
                "Comma-separated minimum per-scope logging level of messages to "
                "output, in the form of <scope>:<level>,<scope>:<level>,... where "
                f"scope can be one of [{names}] and level can be one of {_LEVEL_LIST}"
            )
            stack_help = (
                "Comma-separated minimum per-scope logging level at which stack "
                "traces are captured, in the form of <scope>:<level>,<scope:level>,"
                f"... where scope can be one of [{names}] and level can be one of "
                f"{_LEVEL_LIST}"
            )
            caller_help = (
                "Comma-separated list of scopes for which to include caller "
                f"information, scopes can be any of [{names}]"
            )
        else:
            output_help = (
                "The minimum logging level of messages to output,  can be one of "
                f"{_LEVEL_LIST}"
            )
            stack_help = (
                "The minimum logging level at which stack traces are captured, can "
                f"be one of {_LEVEL_LIST}"
            )
            caller_help = (
                "Comma-separated list of scopes for which to include called "
                "information, scopes can be any of [default]"
            )

        parser.add_argument("--log_output_level", default=None, help=output_help)
        parser.add_argument("--log_stacktrace_level", default=None, help=stack_help)
        parser.add_argument("--log_caller", default=None, help=caller_help)

    def update_from_namespace(self, namespace: argparse.Namespace) -> None:
        """Apply the arguments that were given on the command line."""
        targets = {
            "log_target": "output_paths",
            "log_rotate": "rotate_output_path",
            "log_rotate_max_age": "rotation_max_age",
            "log_rotate_max_size": "rotation_max_size",
            "log_rotate_max_backups": "rotation_max_backups",
            "log_as_json": "json_encoding",
            "log_output_level": "output_levels",
            "log_stacktrace_level": "stack_trace_levels",
            "log_caller": "log_callers",
        }
        for argument, attribute in targets.items():
            value = getattr(namespace, argument, None)
            if value is not None:
                setattr(self, attribute, list(value) if isinstance(value, list) else value)


def default_options() -> Options:
    """Return a fresh set of options holding the defaults."""
    return Options()