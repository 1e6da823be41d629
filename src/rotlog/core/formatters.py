from __future__ import annotations

"""
Text Formatters.

A formatter turns a level and an already rendered message into the bytes
a sink receives. Formatters hold no mutable state, so one instance can be
shared by any number of bindings and threads.
"""

import os
import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List

from rotlog.domain.levels import LevelLike, level_name

# -----------------------------------------------------------------------------
# HEADER FLAGS
# -----------------------------------------------------------------------------
LDATE = 1 << 0           # 2009-01-23
LTIME = 1 << 1           # 01:23:23
LMICROSECONDS = 1 << 2   # 01:23:23.123123, implies LTIME
LLONGFILE = 1 << 3       # /a/b/c/d.py:23
LSHORTFILE = 1 << 4      # d.py:23, overrides LLONGFILE
LSTDFLAGS = LDATE | LTIME

# Frames from files under this directory are never reported as the caller
_PACKAGE_DIR = os.path.normcase(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Formatter(ABC):
    """
    Abstract interface consumed by Logger bindings.
    """

    @abstractmethod
    def format(self, level: LevelLike, message: str) -> bytes:
        """
        Render one log entry.

        Args:
            level: Severity of the message.
            message: Message text, already rendered by the Logger.

        Returns:
            bytes: The exact bytes to hand to the sink.
        """
        pass


class SimpleFormatter(Formatter):
    """Emit the message as is."""

    def format(self, level: LevelLike, message: str) -> bytes:
        return message.encode("utf-8")


class StdFormatter(Formatter):
    """
    Header-style formatter: optional timestamp, level name, optional caller
    location, prefix and message, separated by single spaces.
    """

    def __init__(self, prefix: str = "", flags: int = 0, colored: bool = False) -> None:
        """
        Args:
            prefix: Text written before every message.
            flags: Bitwise OR of the L* header flags.
            colored: Render level names with ANSI colors.
        """
        self.prefix = prefix
        self.flags = flags
        self.colored = colored

    def format(self, level: LevelLike, message: str) -> bytes:
        out: List[str] = []

        if self.flags & (LDATE | LTIME | LMICROSECONDS):
            now = datetime.now()
            if self.flags & LDATE:
                out.append(now.strftime("%Y-%m-%d"))
            if self.flags & LMICROSECONDS:
                out.append(now.strftime("%H:%M:%S.%f"))
            elif self.flags & LTIME:
                out.append(now.strftime("%H:%M:%S"))

        out.append(level_name(level, self.colored))

        # Walking the stack is comparatively expensive
        if self.flags & (LSHORTFILE | LLONGFILE):
            out.append(_caller_location(short=bool(self.flags & LSHORTFILE)))

        out.append(self.prefix)
        out.append(message)
        return " ".join(out).encode("utf-8")


class TimeFormatter(Formatter):
    """UTC timestamp, prefix and message."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def format(self, level: LevelLike, message: str) -> bytes:
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f UTC")
        return " ".join([stamp, self.prefix, message]).encode("utf-8")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _caller_location(short: bool) -> str:
    """Return `file:line` of the first frame outside this package."""
    frame = sys._getframe(1)
    while frame is not None:
        filename = frame.f_code.co_filename
        if not os.path.normcase(os.path.abspath(filename)).startswith(_PACKAGE_DIR + os.sep):
            if short:
                filename = os.path.basename(filename)
            return f"{filename}:{frame.f_lineno}"
        frame = frame.f_back
    return "???"
