from __future__ import annotations

from .formatters import (
    LDATE,
    LLONGFILE,
    LMICROSECONDS,
    LSHORTFILE,
    LSTDFLAGS,
    LTIME,
    Formatter,
    SimpleFormatter,
    StdFormatter,
    TimeFormatter,
)
from .logger import Logger, render_format_line, render_line
from .registry import WriterLockRegistry, default_registry
from .rotfile import RotFile, find_backups, rotate_backups
from .writers import StreamWriter

__all__ = [
    "LDATE",
    "LLONGFILE",
    "LMICROSECONDS",
    "LSHORTFILE",
    "LSTDFLAGS",
    "LTIME",
    "Formatter",
    "Logger",
    "RotFile",
    "SimpleFormatter",
    "StdFormatter",
    "StreamWriter",
    "TimeFormatter",
    "WriterLockRegistry",
    "default_registry",
    "find_backups",
    "render_format_line",
    "render_line",
    "rotate_backups",
]
