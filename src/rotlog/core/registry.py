from __future__ import annotations

"""
Writer Lock Registry.

Maps each sink instance to the single lock that serializes every write to
it. A Logger's own lock only protects its binding list; the sink itself may
be shared by other Loggers that know nothing about each other, so all of
them must agree on one lock per sink. Registries are explicit objects:
pass one to the Loggers and RotFiles that must cooperate, or rely on the
lazily created process-wide default.
"""

import logging
import threading
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class WriterLockRegistry:
    """
    Thread-safe, insert-only mapping from writer identity to lock.

    Writers are keyed by identity, never by equality, so two distinct sinks
    that compare equal still get separate locks. The registry keeps a
    reference to every writer it has seen; this pins the identity key for
    the registry's lifetime. Entries are never evicted.
    """

    def __init__(self) -> None:
        """Initialize an empty registry with its guard lock."""
        self._entries: Dict[int, Tuple[Any, threading.RLock]] = {}
        self._lock = threading.Lock()

    def lock_for(self, writer: Any) -> threading.RLock:
        """
        Return the lock serializing writes to `writer`, creating it once.

        The returned lock is re-entrant for its holder so a sink may take it
        again inside a dispatch that already holds it.

        Args:
            writer: The sink instance.

        Returns:
            threading.RLock: The same lock object for every call with this writer.
        """
        key = id(writer)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = (writer, threading.RLock())
                self._entries[key] = entry
                logger.debug(f"Registry: Lock created for {type(writer).__name__} at 0x{key:x}")
            return entry[1]

    def __contains__(self, writer: Any) -> bool:
        with self._lock:
            return id(writer) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# -----------------------------------------------------------------------------
# PROCESS-WIDE DEFAULT
# -----------------------------------------------------------------------------
_DEFAULT_REGISTRY: Optional[WriterLockRegistry] = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def default_registry() -> WriterLockRegistry:
    """
    Return the process-wide registry, creating it on first use.

    Returns:
        WriterLockRegistry: The shared default instance.
    """
    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = WriterLockRegistry()
        return _DEFAULT_REGISTRY
