from __future__ import annotations

from .config import LoggerConfig, build_config_from_dict, parse_level
from .factory import configure_logger, new_std

__all__ = [
    "LoggerConfig",
    "build_config_from_dict",
    "configure_logger",
    "new_std",
    "parse_level",
]
