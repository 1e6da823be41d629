from __future__ import annotations

from .errors import (
    CloseFailedError,
    OpenFailedError,
    ReopenFailedError,
    RotationFailedError,
    RotLogError,
    SyncFailedError,
    WriteFailedError,
)
from .levels import Level, LevelLike, level_name, string_to_level
from .models import Binding, DispatchFailure

__all__ = [
    "Binding",
    "CloseFailedError",
    "DispatchFailure",
    "Level",
    "LevelLike",
    "OpenFailedError",
    "ReopenFailedError",
    "RotLogError",
    "RotationFailedError",
    "SyncFailedError",
    "WriteFailedError",
    "level_name",
    "string_to_level",
]
