from __future__ import annotations

"""
rotlog: leveled logging with shared, size-rotated file sinks.
"""

import logging

from rotlog.core import (
    LDATE,
    LLONGFILE,
    LMICROSECONDS,
    LSHORTFILE,
    LSTDFLAGS,
    LTIME,
    Formatter,
    Logger,
    RotFile,
    SimpleFormatter,
    StdFormatter,
    StreamWriter,
    TimeFormatter,
    WriterLockRegistry,
    default_registry,
)
from rotlog.domain import (
    CloseFailedError,
    DispatchFailure,
    Level,
    OpenFailedError,
    ReopenFailedError,
    RotationFailedError,
    RotLogError,
    SyncFailedError,
    WriteFailedError,
    level_name,
    string_to_level,
)
from rotlog.infra import LoggerConfig, build_config_from_dict, configure_logger, new_std

# Diagnostics stay silent unless the host application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "CloseFailedError",
    "DispatchFailure",
    "Formatter",
    "LDATE",
    "LLONGFILE",
    "LMICROSECONDS",
    "LSHORTFILE",
    "LSTDFLAGS",
    "LTIME",
    "Level",
    "Logger",
    "LoggerConfig",
    "OpenFailedError",
    "ReopenFailedError",
    "RotFile",
    "RotLogError",
    "RotationFailedError",
    "SimpleFormatter",
    "StdFormatter",
    "StreamWriter",
    "SyncFailedError",
    "TimeFormatter",
    "WriteFailedError",
    "WriterLockRegistry",
    "build_config_from_dict",
    "configure_logger",
    "default_registry",
    "level_name",
    "new_std",
    "string_to_level",
]
