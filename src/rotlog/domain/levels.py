from __future__ import annotations

"""
Severity Levels and Level Rendering.

Defines the ordered severity scale used to filter messages, the verbose
names used by the text formatters, and the ANSI escape helpers used to
colorize those names on terminals.
"""

from enum import IntEnum
from typing import Dict, Union

# -----------------------------------------------------------------------------
# ANSI ESCAPE CODES
# -----------------------------------------------------------------------------
OFF = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"


def ansi_escape(*parts: str) -> str:
    """
    Concatenate escape codes and text into a single terminal string.

    Example:
        ansi_escape(RED, BOLD, "CRITIC", OFF)

    Args:
        parts: Escape codes and text fragments, in output order.

    Returns:
        str: The joined string.
    """
    return "".join(parts)


# -----------------------------------------------------------------------------
# LEVEL SCALE
# -----------------------------------------------------------------------------
class Level(IntEnum):
    """
    Ordered severity scale. Lower values are more verbose.

    Being an IntEnum, members compare directly with plain integers, so
    callers may pass custom numeric levels anywhere a Level is expected.
    """
    TRACE = 0
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


LevelLike = Union[Level, int]

# Fixed-width names keep columns aligned in plain text logs
_LEVEL_NAMES: Dict[int, str] = {
    Level.TRACE: "TRACE",
    Level.DEBUG: "DEBUG",
    Level.INFO: "INFO ",
    Level.WARNING: "WARN ",
    Level.ERROR: "ERROR",
    Level.CRITICAL: "CRITIC",
}

_COLORED_LEVEL_NAMES: Dict[int, str] = {
    Level.TRACE: _LEVEL_NAMES[Level.TRACE],
    Level.DEBUG: _LEVEL_NAMES[Level.DEBUG],
    Level.INFO: ansi_escape(MAGENTA, _LEVEL_NAMES[Level.INFO], OFF),
    Level.WARNING: ansi_escape(YELLOW, _LEVEL_NAMES[Level.WARNING], OFF),
    Level.ERROR: ansi_escape(RED, _LEVEL_NAMES[Level.ERROR], OFF),
    Level.CRITICAL: ansi_escape(RED, BOLD, _LEVEL_NAMES[Level.CRITICAL], OFF),
}


def level_name(level: LevelLike, colored: bool = False) -> str:
    """
    Render the verbose name of a level.

    Unknown numeric levels are rendered as their decimal value.

    Args:
        level: The level to render.
        colored: Whether to wrap the name in ANSI color codes.

    Returns:
        str: Display name of the level.
    """
    names = _COLORED_LEVEL_NAMES if colored else _LEVEL_NAMES
    name = names.get(int(level))
    if name is None:
        return str(int(level))
    return name


def string_to_level(name: str) -> Level:
    """
    Resolve a level from its (possibly abbreviated) name.

    Matching is case-insensitive and prefix based, so "warn", "WARNING"
    and "W" all resolve to Level.WARNING.

    Args:
        name: Level name or prefix.

    Returns:
        Level: The matching level.

    Raises:
        ValueError: If the name is empty or matches no level.
    """
    key = (name or "").strip().upper()
    if not key:
        raise ValueError("level is empty")

    for level in Level:
        if level.name.startswith(key) or _LEVEL_NAMES[level].strip().startswith(key):
            return level
    raise ValueError(f"Wrong log level {name}")
