from __future__ import annotations

"""
Sink Error Taxonomy.

Every failure surfaced by a sink derives from RotLogError. Errors that
aggregate several underlying failures (a rotation with multiple failed
renames, a close where both sync and close failed) keep the individual
causes in the `errors` attribute.
"""

from typing import List, Optional, Sequence


class RotLogError(Exception):
    """
    Base class for all sink failures.

    Attributes:
        errors: Underlying causes, in the order they occurred.
    """

    def __init__(self, message: str, errors: Optional[Sequence[BaseException]] = None) -> None:
        super().__init__(message)
        self.errors: List[BaseException] = list(errors or [])


class OpenFailedError(RotLogError):
    """The base file could not be opened, created or truncated."""


class WriteFailedError(RotLogError):
    """The payload could not be written to the current file."""


class SyncFailedError(RotLogError):
    """Buffered data could not be flushed to disk."""


class CloseFailedError(RotLogError):
    """The file handle could not be closed."""


class RotationFailedError(RotLogError):
    """
    One or more backup steps failed during rotation.

    The triggering payload was still written to the reopened base file.

    Attributes:
        written: Number of payload bytes written after the rotation.
    """

    def __init__(
            self,
            message: str,
            errors: Optional[Sequence[BaseException]] = None,
            written: int = 0,
    ) -> None:
        super().__init__(message, errors)
        self.written = written


class ReopenFailedError(RotLogError):
    """
    The base file could not be reopened after rotation.

    The sink stays degraded and keeps raising this error on every write
    until it is successfully reopened.
    """
