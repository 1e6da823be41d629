from __future__ import annotations

"""
Size-Based Rotating File Sink.

RotFile appends log bytes to a base file and counts them. When a write
would push the count past the byte budget, the current file is retired
into a numbered backup chain (`<base>.1` is the newest backup, higher
numbers are older) and the payload goes whole to a fresh base file.

Every write, close and reopen runs under the sink's registry lock, so
rotation is atomic with respect to all Loggers sharing the sink.
"""

import logging
import os
import re
import threading
from typing import Dict, List, Optional, Union

from rotlog.core.registry import WriterLockRegistry, default_registry
from rotlog.domain.errors import (
    CloseFailedError,
    OpenFailedError,
    ReopenFailedError,
    RotationFailedError,
    SyncFailedError,
    WriteFailedError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 2 * 1024 * 1024  # 2 MB
DEFAULT_MAX_BACKUPS = 3

PathLike = Union[str, "os.PathLike[str]"]


# -----------------------------------------------------------------------------
# BACKUP CHAIN
# -----------------------------------------------------------------------------

def backup_path(path: str, number: int) -> str:
    """Return the path of backup `number` for base file `path`."""
    return f"{path}.{number}"


def find_backups(path: str) -> Dict[int, str]:
    """
    Discover the numbered backups of a base file.

    Only exact `<base>.<N>` names with a positive integer suffix and no
    leading zeros are considered; anything else in the directory is left
    alone.

    Args:
        path: Base file path.

    Returns:
        Dict[int, str]: Map of backup number to absolute backup path.

    Raises:
        OSError: If the directory cannot be listed.
    """
    directory = os.path.dirname(os.path.abspath(path))
    pattern = re.compile(re.escape(os.path.basename(path)) + r"\.([1-9]\d*)$")

    found: Dict[int, str] = {}
    with os.scandir(directory) as entries:
        for entry in entries:
            match = pattern.match(entry.name)
            if match and entry.is_file():
                found[int(match.group(1))] = entry.path
    return found


def rotate_backups(path: str, max_backups: int) -> List[OSError]:
    """
    Shift the backup chain one slot and retire the base file into `.1`.

    Backups numbered `max_backups` or higher are deleted; the rest are
    renamed N -> N+1 from the highest number down so no file is
    overwritten before it has been moved. With `max_backups == 0` the base
    file is left in place for the caller to truncate.

    A failing step does not stop the remaining ones.

    Args:
        path: Base file path.
        max_backups: Number of numbered backups to retain.

    Returns:
        List[OSError]: Failures of individual steps, in order of occurrence.
    """
    errors: List[OSError] = []

    try:
        backups = find_backups(path)
    except OSError as e:
        errors.append(e)
        backups = {}

    for number in sorted(backups, reverse=True):
        source = backups[number]
        try:
            if number >= max_backups:
                os.remove(source)
            else:
                os.replace(source, backup_path(path, number + 1))
        except OSError as e:
            errors.append(e)

    if max_backups > 0 and os.path.exists(path):
        try:
            os.replace(path, backup_path(path, 1))
        except OSError as e:
            errors.append(e)

    return errors


# -----------------------------------------------------------------------------
# ROTATING SINK
# -----------------------------------------------------------------------------

class RotFile:
    """
    Rotating file sink with a byte budget and bounded backup retention.

    The byte counter approximates the on-disk size of the base file. It is
    exact as long as this instance is the only process appending to `path`.
    """

    def __init__(
            self,
            path: PathLike,
            truncate: bool = False,
            max_bytes: int = DEFAULT_MAX_BYTES,
            max_backups: int = DEFAULT_MAX_BACKUPS,
            registry: Optional[WriterLockRegistry] = None,
    ) -> None:
        """
        Open the base file and bind the sink to its registry lock.

        Args:
            path: Base file path. Created if missing.
            truncate: Empty the file on open instead of appending. When appending,
                the byte counter starts at the current file size, so an existing
                file rotates once its on-disk size would exceed `max_bytes`.
            max_bytes: Byte budget before rotation. 0 rotates before every write.
            max_backups: Numbered backups to retain. 0 keeps none.
            registry: Lock registry shared with the Loggers using this sink.

        Raises:
            ValueError: If a size parameter is negative.
            OpenFailedError: If the file cannot be opened.
        """
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be >= 0, got {max_bytes}")
        if max_backups < 0:
            raise ValueError(f"max_backups must be >= 0, got {max_backups}")

        self._path = os.path.abspath(os.fspath(path))
        self._max_bytes = int(max_bytes)
        self._max_backups = int(max_backups)
        self._degraded = False
        self._fault: Optional[BaseException] = None

        try:
            self._handle = open(self._path, "wb" if truncate else "ab")
            # Appended files count their existing content against the budget
            self._bytes_written = 0 if truncate else os.fstat(self._handle.fileno()).st_size
        except OSError as e:
            raise OpenFailedError(
                f"Error opening file '{self._path}' for logging: {e}", errors=[e]
            ) from e

        self._lock: threading.RLock = (registry or default_registry()).lock_for(self)
        logger.debug(
            f"RotFile: Opened '{self._path}' "
            f"(max_bytes={self._max_bytes}, max_backups={self._max_backups})"
        )

    @classmethod
    def open(
            cls,
            path: PathLike,
            truncate: bool = False,
            max_bytes: int = DEFAULT_MAX_BYTES,
            max_backups: int = DEFAULT_MAX_BACKUPS,
            registry: Optional[WriterLockRegistry] = None,
    ) -> RotFile:
        """Open a rotating sink. Equivalent to calling the constructor."""
        return cls(path, truncate, max_bytes, max_backups, registry)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    @property
    def max_backups(self) -> int:
        return self._max_backups

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    @property
    def closed(self) -> bool:
        return self._handle is None and not self._degraded

    @property
    def degraded(self) -> bool:
        return self._degraded

    def backup_paths(self) -> List[str]:
        """Return the existing numbered backups, newest first."""
        backups = find_backups(self._path)
        return [backups[n] for n in sorted(backups)]

    # -------------------------------------------------------------------------
    # Writer interface
    # -------------------------------------------------------------------------

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """
        Write a payload, rotating first if it would exceed the byte budget.

        The payload is never split: after a rotation it is written whole to
        the fresh base file, even if it is larger than `max_bytes` on its own.

        Args:
            data: Bytes to append. `str` is encoded as UTF-8.

        Returns:
            int: Number of bytes written.

        Raises:
            ReopenFailedError: The sink is degraded; nothing was written.
            WriteFailedError: The payload write failed.
            RotationFailedError: A backup step failed; the payload was written.
        """
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)

        with self._lock:
            if self._degraded:
                raise ReopenFailedError(
                    f"Log file '{self._path}' is unavailable since a failed reopen",
                    errors=[self._fault] if self._fault else None,
                )
            if self._handle is None:
                raise WriteFailedError(f"Log file '{self._path}' is closed")

            step_errors: List[BaseException] = []
            if self._bytes_written + len(payload) > self._max_bytes:
                step_errors = self._rotate()

            try:
                written = self._write_payload(payload)
            except WriteFailedError as e:
                e.errors.extend(step_errors)
                raise

            if step_errors:
                raise RotationFailedError(
                    f"Error backing up log file '{self._path}': "
                    + "; ".join(str(e) for e in step_errors),
                    errors=step_errors,
                    written=written,
                )
            return written

    def close(self) -> None:
        """
        Flush anything buffered to disk and close the file.

        Closing an already closed sink is a no-op. Closing a degraded sink
        clears the degraded state and leaves it closed.

        Raises:
            SyncFailedError: Flushing failed; the handle was still closed.
            CloseFailedError: Closing failed, or both flushing and closing failed.
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                self._degraded = False
                self._fault = None
                return
            self._handle = None

            sync_error = _sync(handle)
            close_error: Optional[OSError] = None
            try:
                handle.close()
            except OSError as e:
                close_error = e

        if sync_error and close_error:
            raise CloseFailedError(
                f"Could not sync log file: {sync_error} | Could not close log file: {close_error}",
                errors=[sync_error, close_error],
            )
        if sync_error:
            raise SyncFailedError(
                f"Could not sync log file: {sync_error}", errors=[sync_error]
            ) from sync_error
        if close_error:
            raise CloseFailedError(
                f"Could not close log file: {close_error}", errors=[close_error]
            ) from close_error

    def reopen(self) -> None:
        """
        Reopen the base file for appending, clearing a degraded state.

        A sink that is already open is left untouched.

        Raises:
            ReopenFailedError: If the base file still cannot be opened.
        """
        with self._lock:
            if self._handle is not None:
                return
            self._handle = self._open_base("ab")
            self._bytes_written = os.fstat(self._handle.fileno()).st_size
            self._degraded = False
            self._fault = None
            logger.info(f"RotFile: Reopened '{self._path}'")

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _rotate(self) -> List[BaseException]:
        """
        Retire the current file and start a fresh one. Caller holds the lock.

        Returns:
            List[BaseException]: Non-fatal step failures.

        Raises:
            ReopenFailedError: If the fresh base file cannot be opened.
        """
        errors: List[BaseException] = []
        handle = self._handle
        self._handle = None

        if handle is not None:
            sync_error = _sync(handle)
            if sync_error:
                errors.append(SyncFailedError(f"Could not sync log file: {sync_error}", [sync_error]))
            try:
                handle.close()
            except OSError as e:
                errors.append(CloseFailedError(f"Could not close log file: {e}", [e]))

        errors.extend(rotate_backups(self._path, self._max_backups))

        # Without backups the retired content is discarded
        self._handle = self._open_base("ab" if self._max_backups > 0 else "wb", errors)
        self._bytes_written = 0

        logger.debug(f"RotFile: Rotated '{self._path}' ({len(errors)} step failures)")
        return errors

    def _open_base(self, mode: str, prior: Optional[List[BaseException]] = None):
        """Open the base file or mark the sink degraded. Caller holds the lock."""
        try:
            return open(self._path, mode)
        except OSError as e:
            self._degraded = True
            self._fault = e
            logger.critical(f"RotFile: Cannot reopen '{self._path}'; sink disabled: {e}")
            raise ReopenFailedError(
                f"Can't open file '{self._path}' for logging: {e}",
                errors=[e, *(prior or [])],
            ) from e

    def _write_payload(self, payload: bytes) -> int:
        """Append the payload and advance the counter. Caller holds the lock."""
        try:
            self._handle.write(payload)
            self._handle.flush()
        except OSError as e:
            raise WriteFailedError(
                f"Could not write to log file '{self._path}': {e}", errors=[e]
            ) from e
        self._bytes_written += len(payload)
        return len(payload)

    def __enter__(self) -> RotFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"RotFile(path={self._path!r}, bytes_written={self._bytes_written}, "
            f"max_bytes={self._max_bytes}, max_backups={self._max_backups})"
        )


def _sync(handle) -> Optional[OSError]:
    """Flush and fsync a handle, returning the failure instead of raising."""
    try:
        handle.flush()
        os.fsync(handle.fileno())
    except OSError as e:
        return e
    return None
