"""In-memory transports: one that only counts bytes written, one that reads
from a buffer."""

from __future__ import annotations

MAX_UINT64 = (1 << 64) - 1


class CalcTransport:
    """A transport that counts how many bytes would be written."""

    def __init__(self) -> None:
        self.count = 0
        self.closed = False

    def __enter__(self) -> CalcTransport:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reset_count(self) -> None:
        """Reset the byte count to zero."""
        self.count = 0

    def write(self, data: bytes) -> int:
        """Count ``data`` as written and return its length."""
        self.count += len(data)
        return len(data)

    def write_byte(self, value: int) -> None:
        """Count a single byte as written."""
        self.count += 1

    def write_string(self, s: str) -> int:
        """Count the UTF-8 encoding of ``s`` as written and return its length."""
        size = len(s.encode("utf-8"))
        self.count += size
        return size

    def read(self, size: int) -> bytes:
        """Reading is not supported; returns no bytes.

        Raises ``ValueError`` for a negative ``size``.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        return bytes(0)

    def read_byte(self) -> int:
        """Reading is not supported; always returns zero."""
        return 0

    def remaining_bytes(self) -> int:
        """The amount left is unknown, so report the maximum."""
        return MAX_UINT64

    def is_open(self) -> bool:
        """No connection is kept, so the transport is always usable."""
        return True

    def open(self) -> None:
        """Mark the transport as in use."""
        self.closed = False

    def close(self) -> None:
        """Mark the transport as finished with; counting still works."""
        self.closed = True

    def flush(self) -> int:
        """Nothing is buffered; return the number of bytes counted so far."""
        return self.count


class BufferedReadTransport:
    """A transport that reads from an in-memory buffer."""

    def __init__(self, buffer: bytes = b"") -> None:
        self._buffer = bytes(buffer)
        self._pos = 0
        self.closed = False

    def __enter__(self) -> BufferedReadTransport:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes.

        Raises ``EOFError`` when bytes are requested and none remain.
        """
        if size <= 0:
            return b""
        if self._pos >= len(self._buffer):
            raise EOFError("end of buffer")
        chunk = self._buffer[self._pos:self._pos + size]
        self._pos += len(chunk)
        return chunk

    def remaining_bytes(self) -> int:
        """Return the number of bytes left to read."""
        return len(self._buffer) - self._pos

    def write(self, data: bytes) -> int:
        """Replace the read buffer with ``data`` and return its length."""
        self._buffer = bytes(data)
        self._pos = 0
        return len(data)

    def is_open(self) -> bool:
        """No connection is kept, so the transport is always usable."""
        return True

    def open(self) -> None:
        """Mark the transport as in use."""
        self.closed = False

    def close(self) -> None:
        """Mark the transport as finished with; the buffer stays readable."""
        self.closed = True

    def flush(self) -> None:
        """Nothing is written back; drop the bytes already read."""
        self._buffer = self._buffer[self._pos:]
        self._pos = 0