"""
Byte I/O for the executor.

The executor never touches the console directly. It writes through an
OutputSink and reads through an InputSource, both thin wrappers around
injected binary streams, so tests can use in-memory buffers.
"""

import io
from typing import BinaryIO, Optional


def _reject_text(stream, role):
    if isinstance(stream, io.TextIOBase):
        raise TypeError(f"{role} must be a binary stream, got text stream {stream!r}")


class OutputSink:
    """Writes raw cell values to a binary writer."""

    def __init__(self, stream: BinaryIO, flush: bool = False, capture: bool = False):
        _reject_text(stream, "output")
        self.stream = stream
        self.flush = flush
        self.capture = capture
        self.writes = 0
        self._run_output = bytearray()

    def begin_run(self):
        self._run_output.clear()

    def captured(self) -> bytes:
        """Bytes written since the last begin_run (capture mode only)."""
        return bytes(self._run_output)

    def write_byte(self, value: int):
        self.stream.write(bytes((value,)))
        self.writes += 1
        if self.capture:
            self._run_output.append(value)
        if self.flush:
            self.stream.flush()


class InputSource:
    """Reads single bytes from a binary reader; None means end of input."""

    def __init__(self, stream: Optional[BinaryIO] = None):
        if stream is None:
            stream = io.BytesIO()
        _reject_text(stream, "input")
        self.stream = stream
        self.reads = 0
        self.exhausted = False

    @classmethod
    def from_bytes(cls, data=b"") -> "InputSource":
        if isinstance(data, str):
            data = data.encode("latin-1")
        return cls(io.BytesIO(bytes(data)))

    def read_byte(self) -> Optional[int]:
        if self.exhausted:
            return None
        chunk = self.stream.read(1)
        if not chunk:
            self.exhausted = True
            return None
        self.reads += 1
        return chunk[0]
