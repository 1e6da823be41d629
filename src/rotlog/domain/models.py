from __future__ import annotations

"""
Dispatch Domain Data Models.

Defines the value objects exchanged between the Logger and its callers:
the immutable writer binding and the per-sink failure record returned
by a dispatch.
"""

from dataclasses import dataclass
from typing import Any

from rotlog.domain.levels import LevelLike

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Binding:
    """
    Association of one sink with a minimum level and a formatter.

    Attributes:
        writer: Sink exposing `write(bytes)`.
        min_level: Lowest level this binding accepts.
        formatter: Object exposing `format(level, message) -> bytes`.
    """
    writer: Any
    min_level: LevelLike
    formatter: Any

    def accepts(self, level: LevelLike) -> bool:
        """Return True if a message at `level` should reach this sink."""
        return self.min_level <= level


@dataclass(frozen=True)
class DispatchFailure:
    """
    A sink failure observed while dispatching one message.

    Attributes:
        binding: The binding whose write failed.
        error: The exception raised by the formatter or the writer.
    """
    binding: Binding
    error: BaseException
