from __future__ import annotations

"""
Logger Configuration Models.

Defines the immutable configuration consumed by the logger factory and a
tolerant loader that builds it from a plain dictionary (e.g. a section of
an application's JSON settings).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from rotlog.core.rotfile import DEFAULT_MAX_BACKUPS, DEFAULT_MAX_BYTES
from rotlog.domain.levels import Level, LevelLike, string_to_level

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable settings for building a Logger.

    Attributes:
        level: Minimum level for every sink, as a name or a number.
        console: Flag to enable stderr output.
        colored: Use ANSI colored level names on the console.
        prefix: Text written before every message.
        flags: Header flags for the standard formatter (L* constants).
        log_file: Optional path of a rotating log file.
        truncate: Empty the log file on open instead of appending.
        max_bytes: Maximum size of the log file before rotation.
        backup_count: Number of rotated files to preserve.
    """
    level: str = "INFO"
    console: bool = True
    colored: bool = False
    prefix: str = ""
    flags: int = 0

    log_file: Optional[str] = None
    truncate: bool = False
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = DEFAULT_MAX_BACKUPS


def parse_level(value: Any) -> LevelLike:
    """
    Convert a level name or number to a level, defaulting to INFO.

    Non-negative integers are kept as custom levels when they match no
    named Level.

    Args:
        value: Level name (any case, prefixes allowed) or integer.

    Returns:
        LevelLike: The resolved level; INFO when the value is empty or invalid.
    """
    if value is None or value == "":
        return Level.INFO
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            logger.warning(f"Config: Negative level {value}; using INFO")
            return Level.INFO
        try:
            return Level(value)
        except ValueError:
            return int(value)
    text = str(value).strip()
    if text.isdigit():
        return parse_level(int(text))
    try:
        return string_to_level(text)
    except ValueError:
        logger.warning(f"Config: Unknown level {value!r}; using INFO")
        return Level.INFO


def build_config_from_dict(d: Dict[str, Any]) -> LoggerConfig:
    """
    Build a LoggerConfig from a dictionary.

    Accepted keys (tolerant):
      - level / log_level
      - console
      - colored / color
      - prefix
      - flags
      - log_file / file
      - truncate
      - max_bytes
      - backup_count / max_backups

    Args:
        d: Raw configuration mapping. Unknown keys are ignored.

    Returns:
        LoggerConfig: The resulting configuration.
    """
    defaults = LoggerConfig()
    backups = d.get("backup_count", d.get("max_backups", defaults.backup_count))

    return LoggerConfig(
        level=str(d.get("level") or d.get("log_level") or defaults.level),
        console=bool(d.get("console", defaults.console)),
        colored=bool(d.get("colored", d.get("color", defaults.colored))),
        prefix=str(d.get("prefix") or ""),
        flags=int(d.get("flags") or 0),
        log_file=d.get("log_file") or d.get("file") or None,
        truncate=bool(d.get("truncate", defaults.truncate)),
        max_bytes=int(d.get("max_bytes", defaults.max_bytes)),
        backup_count=int(backups),
    )
