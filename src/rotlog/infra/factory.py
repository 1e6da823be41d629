from __future__ import annotations

"""
Logger Factories.

Builds ready-to-use Loggers from a LoggerConfig. Sink construction is
fail-safe: if the rotating file cannot be opened the Logger falls back to
console output and the failure is reported, so application startup never
breaks because of logging.
"""

import logging
import os
from typing import Any, List, Optional

from rotlog.core.formatters import StdFormatter
from rotlog.core.logger import Logger
from rotlog.core.registry import WriterLockRegistry
from rotlog.core.rotfile import RotFile
from rotlog.core.writers import StreamWriter
from rotlog.domain.errors import OpenFailedError
from rotlog.domain.levels import LevelLike
from rotlog.infra.config import LoggerConfig, parse_level

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logger(
        cfg: LoggerConfig,
        *,
        registry: Optional[WriterLockRegistry] = None,
) -> Logger:
    """
    Build a Logger with the console and file sinks described by `cfg`.

    Args:
        cfg: Structural configuration for the sinks.
        registry: Lock registry to share with other Loggers.

    Returns:
        Logger: The configured Logger. It may have no bindings at all if the
        console is disabled and the file sink could not be opened.
    """
    level = parse_level(cfg.level)
    result = Logger(registry=registry)

    sinks: List[Any] = []
    if cfg.log_file:
        rotfile = _create_rotating_file(cfg, result.registry)
        if rotfile is not None:
            sinks.append(rotfile)
        elif not cfg.console:
            logger.warning("Factory: File sink unavailable; falling back to console output.")
            sinks.append(StreamWriter())

    if cfg.console:
        sinks.insert(0, StreamWriter())

    # Colors only make sense on a terminal
    for sink in sinks:
        colored = cfg.colored and isinstance(sink, StreamWriter)
        result.add_binding(sink, level, StdFormatter(cfg.prefix, cfg.flags, colored))

    return result


def new_std(
        writer: Any,
        level: LevelLike,
        flags: int = 0,
        colored: bool = False,
        *,
        registry: Optional[WriterLockRegistry] = None,
) -> Logger:
    """
    Build a single-sink Logger with a StdFormatter.

    Args:
        writer: The sink.
        level: Minimum level for the sink.
        flags: Header flags for the formatter.
        colored: Use ANSI colored level names.
        registry: Lock registry to share with other Loggers.

    Returns:
        Logger: The configured Logger.
    """
    result = Logger(registry=registry)
    result.add_binding(writer, level, StdFormatter("", flags, colored))
    return result


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _create_rotating_file(cfg: LoggerConfig, registry: WriterLockRegistry) -> Optional[RotFile]:
    """
    Open the configured rotating file, returning None if it cannot be opened.
    """
    try:
        _ensure_parent_dir(cfg.log_file)
        return RotFile(
            cfg.log_file,
            truncate=cfg.truncate,
            max_bytes=int(cfg.max_bytes),
            max_backups=int(cfg.backup_count),
            registry=registry,
        )
    except (OSError, OpenFailedError, ValueError) as e:
        logger.warning(f"Factory: Log file persistence failure at '{cfg.log_file}': {e}")
        return None


def _ensure_parent_dir(path: str) -> None:
    """Create the parent directory hierarchy of a target file."""
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)
