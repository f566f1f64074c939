"""Log levels and their textual names."""

from __future__ import annotations

from enum import IntEnum

DEFAULT_SCOPE_NAME = "default"


class Level(IntEnum):
    """Supported log levels; a larger value lets more messages through."""

    NONE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5

    def __str__(self) -> str:
        return self.name.lower()


_BY_NAME = {str(level): level for level in Level}


def string_to_level(level: str) -> Level:
    """Return the level named ``level``, ignoring case.

    Raises ValueError for an unknown name.
    """
    try:
        return _BY_NAME[level.lower()]
    except KeyError:
        raise ValueError(f"unknown log level '{level}'") from None