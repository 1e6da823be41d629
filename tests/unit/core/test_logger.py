from __future__ import annotations

"""
Unit tests for the Logger Dispatcher.

Verifies:
1. Level filtering per binding and insertion-order delivery.
2. Lazy rendering: nothing is stringified when no binding accepts the level.
3. Writes happen under the writer's registry lock.
4. Sink failures are isolated, reported and returned, never raised.
5. Convenience wrappers and the terminating fatal variants.
"""

import logging
import threading
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

from rotlog.core.formatters import Formatter, SimpleFormatter
from rotlog.core.logger import Logger, render_format_line, render_line
from rotlog.core.registry import WriterLockRegistry
from rotlog.domain.levels import Level


class RecordingWriter:
    """In-memory sink that remembers every payload."""

    def __init__(self, name: str = "sink", journal: Optional[List[str]] = None) -> None:
        self.name = name
        self.payloads: List[bytes] = []
        self.journal = journal if journal is not None else []

    def write(self, data: bytes) -> int:
        self.payloads.append(data)
        self.journal.append(self.name)
        return len(data)


class BrokenWriter:
    def write(self, data: bytes) -> int:
        raise OSError("sink is broken")


class TaggingFormatter(Formatter):
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def format(self, level, message: str) -> bytes:
        return f"{self.tag}:{int(level)}:{message}".encode("utf-8")


# -----------------------------------------------------------------------------
# Filtering & ordering
# -----------------------------------------------------------------------------

def test_binding_filters_lower_levels(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    warnings = RecordingWriter()
    logger.add_binding(warnings, Level.WARNING, SimpleFormatter())

    logger.log(Level.TRACE, "trace")
    logger.log(Level.INFO, "info")
    logger.log(Level.WARNING, "warning")
    logger.log(Level.CRITICAL, "critical")

    assert warnings.payloads == [b"warning", b"critical"]


def test_each_binding_uses_its_own_formatter_and_level(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    verbose, quiet = RecordingWriter(), RecordingWriter()
    logger.add_binding(verbose, Level.DEBUG, TaggingFormatter("v"))
    logger.add_binding(quiet, Level.ERROR, TaggingFormatter("q"))

    logger.log(Level.INFO, "hello")
    logger.log(Level.ERROR, "boom")

    assert verbose.payloads == [b"v:20:hello", b"v:40:boom"]
    assert quiet.payloads == [b"q:40:boom"]


def test_bindings_are_visited_in_insertion_order(make_logger: Callable[[], Logger]) -> None:
    journal: List[str] = []
    logger = make_logger()
    for name in ("first", "second", "third"):
        logger.add_binding(RecordingWriter(name, journal), Level.TRACE, SimpleFormatter())

    logger.log(Level.INFO, "x")

    assert journal == ["first", "second", "third"]


def test_same_writer_may_be_bound_twice(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    writer = RecordingWriter()
    logger.add_binding(writer, Level.DEBUG, TaggingFormatter("a"))
    logger.add_binding(writer, Level.DEBUG, TaggingFormatter("b"))

    logger.log(Level.INFO, "m")

    assert writer.payloads == [b"a:20:m", b"b:20:m"]
    assert len(logger.bindings) == 2


def test_add_binding_registers_writer(registry: WriterLockRegistry, make_logger: Callable[[], Logger]) -> None:
    writer = RecordingWriter()
    make_logger().add_binding(writer, Level.INFO, SimpleFormatter())
    assert writer in registry


def test_is_enabled_for(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    assert not logger.is_enabled_for(Level.CRITICAL)

    logger.add_binding(RecordingWriter(), Level.WARNING, SimpleFormatter())
    assert logger.is_enabled_for(Level.WARNING)
    assert logger.is_enabled_for(45)
    assert not logger.is_enabled_for(Level.INFO)


# -----------------------------------------------------------------------------
# Lazy rendering
# -----------------------------------------------------------------------------

def test_message_is_not_rendered_when_no_binding_accepts(registry: WriterLockRegistry) -> None:
    render = MagicMock(return_value="rendered")
    render_format = MagicMock(return_value="rendered")
    logger = Logger(render=render, render_format=render_format, registry=registry)
    logger.add_binding(RecordingWriter(), Level.WARNING, SimpleFormatter())

    logger.info("expensive", object())
    logger.infof("%s", "expensive")

    render.assert_not_called()
    render_format.assert_not_called()


def test_arguments_are_not_stringified_when_filtered(registry: WriterLockRegistry) -> None:
    class Explosive:
        def __str__(self) -> str:
            raise AssertionError("argument was stringified")

    logger = Logger(registry=registry)
    logger.add_binding(RecordingWriter(), Level.ERROR, SimpleFormatter())

    assert logger.debug(Explosive()) == []


def test_message_is_rendered_once_for_all_bindings(registry: WriterLockRegistry) -> None:
    render = MagicMock(return_value="once")
    logger = Logger(render=render, registry=registry)
    a, b = RecordingWriter(), RecordingWriter()
    logger.add_binding(a, Level.DEBUG, SimpleFormatter())
    logger.add_binding(b, Level.DEBUG, SimpleFormatter())

    logger.warning("x", 1)

    render.assert_called_once_with("x", 1)
    assert a.payloads == b.payloads == [b"once"]


def test_default_renderers_end_the_line() -> None:
    assert render_line("pi is", 3.14) == "pi is 3.14\n"
    assert render_format_line("pi is %.1f", 3.14159) == "pi is 3.1\n"
    # A lone format string is never %-interpolated
    assert render_format_line("100% done") == "100% done\n"


def test_logf_formats_message(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    writer = RecordingWriter()
    logger.add_binding(writer, Level.TRACE, SimpleFormatter())

    logger.logf(Level.INFO, "%s=%d", "answer", 42)

    assert writer.payloads == [b"answer=42"]


# -----------------------------------------------------------------------------
# Synchronization
# -----------------------------------------------------------------------------

def test_write_happens_under_writer_lock(registry: WriterLockRegistry, make_logger: Callable[[], Logger]) -> None:
    """While a write runs, no other thread can take that writer's lock."""
    observed: List[bool] = []

    class ProbingWriter:
        def write(self, data: bytes) -> int:
            lock = registry.lock_for(self)
            probe = threading.Thread(target=lambda: observed.append(lock.acquire(blocking=False)))
            probe.start()
            probe.join()
            return len(data)

    logger = make_logger()
    logger.add_binding(ProbingWriter(), Level.DEBUG, SimpleFormatter())
    logger.info("x")

    assert observed == [False]


def test_loggers_sharing_a_registry_share_writer_locks(registry: WriterLockRegistry) -> None:
    writer = RecordingWriter()
    first, second = Logger(registry=registry), Logger(registry=registry)
    first.add_binding(writer, Level.DEBUG, SimpleFormatter())
    second.add_binding(writer, Level.DEBUG, SimpleFormatter())

    assert len(registry) == 1
    assert first.registry is second.registry


def test_concurrent_add_binding_keeps_every_binding(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    barrier = threading.Barrier(8)

    def add() -> None:
        barrier.wait()
        for _ in range(50):
            logger.add_binding(RecordingWriter(), Level.DEBUG, SimpleFormatter())
            logger.debug("tick")

    threads = [threading.Thread(target=add) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(logger.bindings) == 400


# -----------------------------------------------------------------------------
# Failure isolation
# -----------------------------------------------------------------------------

def test_failing_sink_does_not_block_healthy_sinks(
        make_logger: Callable[[], Logger],
        caplog: pytest.LogCaptureFixture,
) -> None:
    logger = make_logger()
    before, after = RecordingWriter(), RecordingWriter()
    logger.add_binding(before, Level.DEBUG, SimpleFormatter())
    broken_binding = logger.add_binding(BrokenWriter(), Level.DEBUG, SimpleFormatter())
    logger.add_binding(after, Level.DEBUG, SimpleFormatter())

    with caplog.at_level(logging.ERROR, logger="rotlog.core.logger"):
        failures = logger.error("still delivered")

    assert before.payloads == after.payloads == [b"still delivered"]
    assert len(failures) == 1
    assert failures[0].binding is broken_binding
    assert isinstance(failures[0].error, OSError)
    assert "sink is broken" in caplog.text


def test_failing_formatter_is_isolated(make_logger: Callable[[], Logger]) -> None:
    class BrokenFormatter(Formatter):
        def format(self, level, message: str) -> bytes:
            raise ValueError("cannot format")

    logger = make_logger()
    healthy = RecordingWriter()
    logger.add_binding(RecordingWriter(), Level.DEBUG, BrokenFormatter())
    logger.add_binding(healthy, Level.DEBUG, SimpleFormatter())

    failures = logger.info("m")

    assert healthy.payloads == [b"m"]
    assert [type(f.error) for f in failures] == [ValueError]


# -----------------------------------------------------------------------------
# Convenience wrappers
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "method, level",
    [
        ("trace", Level.TRACE),
        ("debug", Level.DEBUG),
        ("info", Level.INFO),
        ("warning", Level.WARNING),
        ("warn", Level.WARNING),
        ("error", Level.ERROR),
        ("critical", Level.CRITICAL),
    ],
)
def test_convenience_methods_log_at_their_level(
        make_logger: Callable[[], Logger],
        method: str,
        level: Level,
) -> None:
    logger = make_logger()
    writer = RecordingWriter()
    logger.add_binding(writer, Level.TRACE, TaggingFormatter("t"))

    getattr(logger, method)("plain")
    getattr(logger, method + "f")("%s", "formatted")

    assert writer.payloads == [
        f"t:{int(level)}:plain".encode(),
        f"t:{int(level)}:formatted".encode(),
    ]


def test_fatal_dispatches_then_exits(make_logger: Callable[[], Logger]) -> None:
    logger = make_logger()
    writer = RecordingWriter()
    logger.add_binding(BrokenWriter(), Level.DEBUG, SimpleFormatter())
    logger.add_binding(writer, Level.DEBUG, SimpleFormatter())

    with pytest.raises(SystemExit) as exc_info:
        logger.fatal("bye")
    assert exc_info.value.code == 1

    with pytest.raises(SystemExit):
        logger.fatalf("bye %d", 2)

    assert writer.payloads == [b"bye", b"bye 2"]


def test_logger_is_itself_a_writer(make_logger: Callable[[], Logger]) -> None:
    inner = make_logger()
    sink = RecordingWriter()
    inner.add_binding(sink, Level.TRACE, SimpleFormatter())

    outer = make_logger()
    outer.add_binding(inner, Level.INFO, TaggingFormatter("outer"))
    outer.info("nested")

    assert sink.payloads == [b"outer:20:nested"]
    assert inner.write(b"raw") == 3
    assert sink.payloads[-1] == b"raw"
