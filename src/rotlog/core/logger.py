from __future__ import annotations

"""
Leveled Message Dispatcher.

A Logger holds an ordered list of bindings (sink, minimum level,
formatter). Each call renders the message at most once, formats it per
accepting binding and writes it while holding that sink's registry lock.
A failing sink never prevents delivery to the others and never makes the
call itself raise; failures are reported on this module's diagnostic
logger and returned to the caller.
"""

import logging
import sys
import threading
from typing import Any, Callable, List, Optional, Tuple

from rotlog.core.formatters import Formatter
from rotlog.core.registry import WriterLockRegistry, default_registry
from rotlog.domain.levels import Level, LevelLike
from rotlog.domain.models import Binding, DispatchFailure

logger = logging.getLogger(__name__)

Render = Callable[..., str]
RenderFormat = Callable[..., str]


def render_line(*args: Any) -> str:
    """Join the string form of every argument with spaces and end the line."""
    return " ".join(str(a) for a in args) + "\n"


def render_format_line(fmt: str, *args: Any) -> str:
    """Apply %-style formatting when arguments are given and end the line."""
    msg = fmt % args if args else fmt
    return msg + "\n"


class Logger:
    """
    Dispatcher of leveled messages to independently filtered sinks.

    Adding bindings and logging are both thread safe. The same sink may be
    bound in several Loggers; as long as they share a registry, writes to
    that sink are serialized across all of them.
    """

    def __init__(
            self,
            render: Optional[Render] = None,
            render_format: Optional[RenderFormat] = None,
            registry: Optional[WriterLockRegistry] = None,
    ) -> None:
        """
        Args:
            render: Builds a message from positional arguments.
            render_format: Builds a message from a format string and arguments.
            registry: Lock registry shared with other users of the same sinks.
        """
        self._render = render or render_line
        self._render_format = render_format or render_format_line
        self._registry = registry or default_registry()
        self._lock = threading.Lock()
        # Replaced, never mutated, so dispatch can read it without the lock
        self._bindings: Tuple[Binding, ...] = ()

    @property
    def registry(self) -> WriterLockRegistry:
        return self._registry

    @property
    def bindings(self) -> Tuple[Binding, ...]:
        return self._bindings

    def add_binding(self, writer: Any, min_level: LevelLike, formatter: Formatter) -> Binding:
        """
        Route messages at `min_level` or above to `writer` through `formatter`.

        For instance, binding at Level.WARNING delivers WARNING, ERROR and
        CRITICAL messages to the writer.

        Args:
            writer: Sink exposing `write(bytes)`.
            min_level: Lowest accepted level.
            formatter: Formatter used for this sink.

        Returns:
            Binding: The binding that was appended.
        """
        binding = Binding(writer, min_level, formatter)
        with self._lock:
            self._registry.lock_for(writer)
            self._bindings = self._bindings + (binding,)
        return binding

    def is_enabled_for(self, level: LevelLike) -> bool:
        """Return True if at least one binding accepts `level`."""
        return any(b.accepts(level) for b in self._bindings)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def log(self, level: LevelLike, *args: Any) -> List[DispatchFailure]:
        """
        Log a message built from `args` at `level`.

        The arguments are only rendered if some binding accepts the level.

        Returns:
            List[DispatchFailure]: One entry per sink that failed; empty on success.
        """
        return self._dispatch(level, lambda: self._render(*args))

    def logf(self, level: LevelLike, fmt: str, *args: Any) -> List[DispatchFailure]:
        """
        Log a message built from a format string at `level`.

        The format is only applied if some binding accepts the level.

        Returns:
            List[DispatchFailure]: One entry per sink that failed; empty on success.
        """
        return self._dispatch(level, lambda: self._render_format(fmt, *args))

    def write(self, data: Any) -> int:
        """Writer interface, so a Logger can be bound inside another Logger."""
        text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
        self.log(Level.TRACE, text)
        return len(data)

    def _dispatch(self, level: LevelLike, build: Callable[[], str]) -> List[DispatchFailure]:
        bindings = self._bindings
        accepting = [b for b in bindings if b.accepts(level)]
        if not accepting:
            return []

        message = build()
        failures: List[DispatchFailure] = []

        for binding in accepting:
            try:
                out = binding.formatter.format(level, message)
                with self._registry.lock_for(binding.writer):
                    binding.writer.write(out)
            except Exception as e:
                failures.append(DispatchFailure(binding, e))
                logger.error(f"Logger: Sink {binding.writer!r} failed: {e}")

        return failures

    # -------------------------------------------------------------------------
    # Convenience
    # -------------------------------------------------------------------------

    def trace(self, *args: Any) -> List[DispatchFailure]:
        return self.log(Level.TRACE, *args)

    def tracef(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        return self.logf(Level.TRACE, fmt, *args)

    def debug(self, *args: Any) -> List[DispatchFailure]:
        return self.log(Level.DEBUG, *args)

    def debugf(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        return self.logf(Level.DEBUG, fmt, *args)

    def info(self, *args: Any) -> List[DispatchFailure]:
        return self.log(Level.INFO, *args)

    def infof(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        return self.logf(Level.INFO, fmt, *args)

    def warning(self, *args: Any) -> List[DispatchFailure]:
        return self.log(Level.WARNING, *args)

    def warningf(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        return self.logf(Level.WARNING, fmt, *args)

    warn = warning
    warnf = warningf

    def error(self, *args: Any) -> List[DispatchFailure]:
        return self.log(Level.ERROR, *args)

    def errorf(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        return self.logf(Level.ERROR, fmt, *args)

    def critical(self, *args: Any) -> List[DispatchFailure]:
        """Log at CRITICAL without terminating the program."""
        return self.log(Level.CRITICAL, *args)

    def criticalf(self, fmt: str, *args: Any) -> List[DispatchFailure]:
        """Log at CRITICAL without terminating the program."""
        return self.logf(Level.CRITICAL, fmt, *args)

    def fatal(self, *args: Any) -> None:
        """Log at CRITICAL, then terminate the program with exit status 1."""
        self.log(Level.CRITICAL, *args)
        sys.exit(1)

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log at CRITICAL, then terminate the program with exit status 1."""
        self.logf(Level.CRITICAL, fmt, *args)
        sys.exit(1)
