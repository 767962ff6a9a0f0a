"""
Byte sources for the Bencode decoder.

The grammar needs exactly one byte of lookahead: every production is
decided by its first byte. ByteSource reads from any binary stream and
can push the last byte back once.
"""
import io
from typing import BinaryIO, Optional, Tuple, Union

from .constants import READ_CHUNK_SIZE


class ByteSource:
    """
    Cursor over a readable binary stream with single-byte pushback.
    position counts the bytes consumed so far.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._last: Optional[int] = None
        self._pushed_back = False
        self.position = 0

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> "ByteSource":
        return cls(io.BytesIO(bytes(data)))

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _read_raw(self, n: int) -> bytes:
        """Reads up to n bytes from the stream, tolerating short reads."""
        chunks = []
        remaining = n
        while remaining > 0:
            chunk = self._stream.read(min(remaining, READ_CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_byte(self) -> Optional[int]:
        """Returns the next byte as an int, or None at end of input."""
        if self._pushed_back:
            self._pushed_back = False
            self.position += 1
            return self._last

        b = self._read_raw(1)
        if not b:
            return None
        self._last = b[0]
        self.position += 1
        return self._last

    def unread_byte(self) -> None:
        """Pushes the last byte read back onto the source."""
        if self._pushed_back or self._last is None:
            raise RuntimeError("unread_byte: nothing to push back")
        self._pushed_back = True
        self.position -= 1

    def read_until(self, delim: int, limit: Optional[int] = None) -> Tuple[bytes, bool]:
        """
        Reads up to and including delim.
        Returns (bytes before delim, found). found is False if input ended first,
        or if limit bytes were read without seeing delim.
        """
        out = bytearray()
        while True:
            b = self.read_byte()
            if b is None:
                return bytes(out), False
            if b == delim:
                return bytes(out), True
            out.append(b)
            if limit is not None and len(out) >= limit:
                return bytes(out), False

    def read_exact(self, n: int) -> bytes:
        """Reads n bytes; the result is shorter only if input ended."""
        if n <= 0:
            return b""

        head = b""
        if self._pushed_back:
            head = bytes([self.read_byte()])
            n -= 1

        body = self._read_raw(n)
        if body:
            self._last = body[-1]
        self.position += len(body)
        return head + body


def as_source(source) -> ByteSource:
    """Wraps bytes-like objects and binary streams into a ByteSource."""
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return ByteSource.from_bytes(source)
    if hasattr(source, "read"):
        return ByteSource(source)
    raise TypeError(f"Cannot read Bencode from {type(source).__name__}")
