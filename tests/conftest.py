from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: an isolated lock registry and file reading helpers.
"""

import os
import sys
from pathlib import Path
from typing import Callable

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from rotlog.core.logger import Logger  # noqa: E402
from rotlog.core.registry import WriterLockRegistry  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def registry() -> WriterLockRegistry:
    """
    Return a fresh lock registry so no lock leaks between tests.
    """
    return WriterLockRegistry()


@pytest.fixture
def make_logger(registry: WriterLockRegistry) -> Callable[[], Logger]:
    """
    Return a factory of Loggers that render arguments without separators
    or line endings, so file contents can be asserted byte for byte.
    """

    def _make() -> Logger:
        return Logger(
            render=lambda *args: "".join(str(a) for a in args),
            render_format=lambda fmt, *args: fmt % args if args else fmt,
            registry=registry,
        )

    return _make


@pytest.fixture
def read_text() -> Callable[[Path], str]:
    """Return a helper reading a file as UTF-8 text."""

    def _read(path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    return _read
