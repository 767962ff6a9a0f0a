"""
Data structures for representing Bencoded values.

A decoded value is always one of the four BencodeType subclasses below.
Payloads are immutable: lists hold a tuple and dictionaries expose a
read-only mapping, so a tree can be handed between components freely.
"""
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Protocol, Tuple, Union, runtime_checkable

from .constants import INT64_MAX, INT64_MIN
from .errors import UnsupportedValueError

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "Bencodable",
    "Value",
    "to_python",
    "from_python",
    "key_to_bytes",
]


@runtime_checkable
class Bencodable(Protocol):
    """
    Anything that knows how to render itself as Bencode.
    The encoder calls __bencode__ instead of its own rules when the value's
    type defines it; see encoder._render_custom.
    """
    def __bencode__(self) -> bytes: ...


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ()


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ("value",)

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"BencodeInt out of 64-bit range: {value}")
        self.value = value

    def __eq__(self, other):
        if isinstance(other, BencodeInt):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((BencodeInt, self.value))

    def __repr__(self):
        return f"BencodeInt({self.value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ("value",)

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self.value = bytes(value)

    def __eq__(self, other):
        if isinstance(other, BencodeString):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((BencodeString, self.value))

    def __len__(self):
        return len(self.value)

    def __repr__(self):
        return f"BencodeString({self.value!r})"


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ("value",)

    def __init__(self, value: Iterable["BencodeType"] = ()):
        items = tuple(value)
        for item in items:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode values.")
        self.value: Tuple[BencodeType, ...] = items

    def __eq__(self, other):
        if isinstance(other, BencodeList):
            return self.value == other.value
        return NotImplemented

    __hash__ = None

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __getitem__(self, index):
        return self.value[index]

    def __repr__(self):
        return f"BencodeList({list(self.value)!r})"


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    Keys keep the order they were given in (for decoded data, the order they
    appeared on the wire). duplicate_keys lists keys the decoder saw more
    than once; the last occurrence is the one stored.
    """
    __slots__ = ("value", "duplicate_keys")

    def __init__(self, value: Mapping[bytes, "BencodeType"] = None,
                 duplicate_keys: Iterable[bytes] = ()):
        items = dict(value or {})
        # keys must be bytes (bencode requirement)
        for k, v in items.items():
            if not isinstance(k, bytes):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode values.")
        self.value: Mapping[bytes, BencodeType] = MappingProxyType(items)
        self.duplicate_keys: Tuple[bytes, ...] = tuple(duplicate_keys)

    def __eq__(self, other):
        if isinstance(other, BencodeDict):
            return dict(self.value) == dict(other.value)
        return NotImplemented

    __hash__ = None

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __contains__(self, key):
        return key in self.value

    def __getitem__(self, key):
        return self.value[key]

    def get(self, key, default=None):
        return self.value.get(key, default)

    def __repr__(self):
        return f"BencodeDict({dict(self.value)!r})"


Value = Union[BencodeInt, BencodeString, BencodeList, BencodeDict]


def to_python(value: BencodeType) -> Any:
    """Unwraps a Bencode value tree into plain int / bytes / list / dict."""
    if isinstance(value, (BencodeInt, BencodeString)):
        return value.value
    if isinstance(value, BencodeList):
        return [to_python(item) for item in value.value]
    if isinstance(value, BencodeDict):
        return {k: to_python(v) for k, v in value.value.items()}
    raise TypeError(f"Not a Bencode value: {type(value).__name__}")


def key_to_bytes(key) -> bytes:
    """Normalises a dictionary key (bytes, str or BencodeString) to raw bytes."""
    if isinstance(key, bytes):
        return key
    if isinstance(key, str):
        return key.encode()
    if isinstance(key, BencodeString):
        return key.value
    raise UnsupportedValueError(f"Dictionary key must be a string, got {type(key).__name__}")


def from_python(obj: Any) -> BencodeType:
    """
    Wraps plain Python data into a Bencode value tree.
    str is stored as its UTF-8 bytes; bool and float are rejected.
    """
    if isinstance(obj, BencodeType):
        return obj

    if isinstance(obj, bool):
        raise UnsupportedValueError("Cannot bencode a bool")

    if isinstance(obj, int):
        if not INT64_MIN <= obj <= INT64_MAX:
            raise UnsupportedValueError(f"Integer out of 64-bit range: {obj}")
        return BencodeInt(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(obj)

    if isinstance(obj, str):
        return BencodeString(obj.encode())

    if isinstance(obj, (list, tuple)):
        return BencodeList(from_python(x) for x in obj)

    if isinstance(obj, dict):
        items = {}
        for k, v in obj.items():
            key = key_to_bytes(k)
            if key in items:
                raise UnsupportedValueError(f"Duplicate dictionary key: {key!r}")
            items[key] = from_python(v)
        return BencodeDict(items)

    raise UnsupportedValueError(f"Cannot bencode object of type {type(obj).__name__}")
