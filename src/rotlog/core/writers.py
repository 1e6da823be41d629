from __future__ import annotations

"""
Stream Writer Adapter.

Bindings write bytes; standard streams expect text. StreamWriter bridges
the two so stderr/stdout can be bound to a Logger next to file sinks.
"""

import sys
from typing import Optional, TextIO, Union


class StreamWriter:
    """
    Bytes-to-text adapter around a text stream, flushed after every write.

    The target stream is resolved lazily when none is given, so output
    follows later reassignments of `sys.stderr` (e.g. pytest capture).
    """

    def __init__(self, stream: Optional[TextIO] = None, encoding: str = "utf-8") -> None:
        self._stream = stream
        self.encoding = encoding

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        text = data if isinstance(data, str) else bytes(data).decode(self.encoding, errors="replace")
        stream = self.stream
        stream.write(text)
        stream.flush()
        return len(data)

    def __repr__(self) -> str:
        return f"StreamWriter({self.stream!r})"
