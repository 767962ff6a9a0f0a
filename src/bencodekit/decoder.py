"""
Bencode decoder for BitTorrent metainfo and tracker responses.

Decoding is permissive about dictionary key order (real-world files are not
always canonical) but strict about integer and length framing.
"""
import re
from typing import Iterator, Tuple, Union

from .constants import (
    DEFAULT_MAX_DEPTH,
    DICT_START,
    DIGITS,
    END,
    INT64_MAX,
    INT64_MIN,
    INT_START,
    LENGTH_DELIM,
    LIST_START,
    MAX_INT_LITERAL_LEN,
    MAX_LENGTH_DIGITS,
    MINUS,
    ZERO,
)
from .errors import (
    DuplicateKeyError,
    EmptyIntegerLiteralError,
    EmptyLengthError,
    InvalidLengthError,
    InvalidTokenError,
    LeadingZeroError,
    MalformedIntegerError,
    MissingLengthDelimiterError,
    NegativeZeroError,
    NestingTooDeepError,
    NonStringKeyError,
    TruncatedStringError,
    UnexpectedEndOfInputError,
    UnterminatedDictionaryError,
    UnterminatedIntegerError,
    UnterminatedListError,
)
from .source import ByteSource, as_source
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType

_INT_LITERAL = re.compile(rb"-?[0-9]+")
_LENGTH_LITERAL = re.compile(rb"[0-9]+")


class BencodeDecoder:
    """
    Decodes Bencoded bytes from a ByteSource into BencodeType values.

    max_depth bounds list/dict nesting; strict=True rejects duplicate
    dictionary keys instead of keeping the last one.
    """
    def __init__(self, source: ByteSource, max_depth: int = DEFAULT_MAX_DEPTH,
                 strict: bool = False):
        self.source = source
        self.max_depth = max_depth
        self.strict = strict

    def decode(self) -> BencodeType:
        """Decodes one complete value starting at the current position."""
        return self._parse_value(0)

    def at_end(self) -> bool:
        """True if the source is exhausted at a value boundary."""
        if self.source.read_byte() is None:
            return True
        self.source.unread_byte()
        return False

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self, depth: int) -> BencodeType:
        pos = self.source.position
        ch = self.source.read_byte()

        if ch is None:
            raise UnexpectedEndOfInputError("Unexpected end of input, expected a value", pos)

        if ch == INT_START:
            return self._parse_int(pos)

        if ch in DIGITS:  # Bencode strings start with length, which is a digit
            self.source.unread_byte()
            return self._parse_string()

        if ch == LIST_START:
            return self._parse_list(pos, depth + 1)

        if ch == DICT_START:
            return self._parse_dict(pos, depth + 1)

        raise InvalidTokenError(f"Invalid token {bytes([ch])!r}", pos, ch)

    def _parse_int(self, start: int) -> BencodeInt:
        """Parses i<literal>e; the 'i' is already consumed."""
        literal, found = self.source.read_until(END)
        if not found:
            raise UnterminatedIntegerError("Integer not terminated by 'e'", start, literal)

        if not literal.strip():
            raise EmptyIntegerLiteralError("Empty integer literal", start, literal)

        if literal[0] == MINUS and literal[1:2] == b"0":
            raise NegativeZeroError(f"Invalid negative integer {literal!r}", start, literal)

        if literal[0] == ZERO and len(literal) > 1:
            raise LeadingZeroError(f"Integer has leading zero {literal!r}", start, literal)

        if not _INT_LITERAL.fullmatch(literal):
            raise MalformedIntegerError(f"Invalid integer format {literal!r}", start, literal)

        if len(literal) > MAX_INT_LITERAL_LEN:
            raise MalformedIntegerError("Integer out of 64-bit range", start, literal[:MAX_INT_LITERAL_LEN])

        num = int(literal)
        if not INT64_MIN <= num <= INT64_MAX:
            raise MalformedIntegerError(f"Integer out of 64-bit range {literal!r}", start, literal)

        return BencodeInt(num)

    def _parse_string(self) -> BencodeString:
        """Parses <length>:<bytes> from the current position."""
        start = self.source.position

        # read length until ':'
        length_bytes, found = self.source.read_until(LENGTH_DELIM, limit=MAX_LENGTH_DIGITS + 1)
        if not found and len(length_bytes) > MAX_LENGTH_DIGITS:
            raise InvalidLengthError(
                f"String length prefix longer than {MAX_LENGTH_DIGITS} digits", start, length_bytes
            )
        if not found:
            raise MissingLengthDelimiterError(
                "String length delimiter ':' not found", start, length_bytes
            )

        # only reachable when called directly; dispatch guarantees a leading digit
        if not length_bytes:
            raise EmptyLengthError("Empty string length", start)

        if not _LENGTH_LITERAL.fullmatch(length_bytes):
            raise InvalidLengthError(f"Invalid string length {length_bytes!r}", start, length_bytes)

        length = int(length_bytes)
        if length > INT64_MAX:
            raise InvalidLengthError(f"String length out of range {length_bytes!r}", start, length_bytes)

        payload_start = self.source.position
        string_bytes = self.source.read_exact(length)

        if len(string_bytes) < length:
            raise TruncatedStringError(
                f"Unexpected end of input in string data, expected {length} bytes, "
                f"got {len(string_bytes)}",
                payload_start,
                length_bytes,
                expected=length,
                available=len(string_bytes),
            )

        return BencodeString(string_bytes)

    def _check_depth(self, start: int, depth: int):
        if depth > self.max_depth:
            raise NestingTooDeepError(f"Nesting deeper than {self.max_depth} levels", start)

    def _parse_list(self, start: int, depth: int) -> BencodeList:
        """Parses l<values>e; the 'l' is already consumed."""
        self._check_depth(start, depth)
        items = []

        while True:
            ch = self.source.read_byte()
            if ch is None:
                raise UnterminatedListError("List not terminated by 'e'", start)
            if ch == END:
                return BencodeList(items)

            self.source.unread_byte()
            items.append(self._parse_value(depth))

    def _parse_dict(self, start: int, depth: int) -> BencodeDict:
        """Parses d<key><value>...e; the 'd' is already consumed."""
        self._check_depth(start, depth)
        obj = {}
        duplicates = []

        while True:
            pos = self.source.position
            ch = self.source.read_byte()
            if ch is None:
                raise UnterminatedDictionaryError("Dictionary not terminated by 'e'", start)
            if ch == END:
                return BencodeDict(obj, duplicate_keys=duplicates)

            # keys MUST be strings
            if ch not in DIGITS:
                raise NonStringKeyError(
                    f"Dictionary key must be a string, got {bytes([ch])!r}", pos, ch
                )
            self.source.unread_byte()
            key = self._parse_string().value

            if key in obj:
                if self.strict:
                    raise DuplicateKeyError(f"Duplicate dictionary key {key!r}", pos, key)
                if key not in duplicates:
                    duplicates.append(key)

            # last occurrence wins
            obj[key] = self._parse_value(depth)


def decode(source, *, max_depth: int = DEFAULT_MAX_DEPTH,
           strict: bool = False) -> Tuple[BencodeType, int]:
    """
    Decodes one value from source and returns (value, bytes_consumed).

    source may be a ByteSource, a bytes-like object or a readable binary stream.
    bytes_consumed is measured from the source's position on entry.
    """
    src = as_source(source)
    start = src.position
    value = BencodeDecoder(src, max_depth=max_depth, strict=strict).decode()
    return value, src.position - start


def parse(data: Union[bytes, str], *, max_depth: int = DEFAULT_MAX_DEPTH,
          strict: bool = False) -> BencodeType:
    """
    Convenience function to decode Bencoded data held in memory.
    str input is encoded as UTF-8. Bytes after the first value are ignored.
    """
    if isinstance(data, str):
        data = data.encode()
    value, _ = decode(ByteSource.from_bytes(data), max_depth=max_depth, strict=strict)
    return value


def iter_decode(source, *, max_depth: int = DEFAULT_MAX_DEPTH,
                strict: bool = False) -> Iterator[BencodeType]:
    """
    Yields consecutive top-level values until the input ends cleanly
    between two values.
    """
    decoder = BencodeDecoder(as_source(source), max_depth=max_depth, strict=strict)
    while not decoder.at_end():
        yield decoder.decode()
