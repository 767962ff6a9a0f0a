"""
Bencode encoder for BitTorrent metainfo and tracker responses.

Output is always canonical: dictionary keys are emitted in ascending
raw-byte order regardless of insertion order.
"""
from typing import Any, List

from .constants import DEFAULT_MAX_DEPTH, INT64_MAX, INT64_MIN
from .errors import (
    CustomRenderError,
    EncodeNestingTooDeepError,
    UnsupportedValueError,
)
from .structure import (
    Bencodable,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    key_to_bytes,
)


def encode(obj: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encodes a BencodeType tree or plain Python data into bencoded bytes."""
    out: List[bytes] = []
    _encode_into(obj, out, 0, max_depth)
    return b"".join(out)


def _encode_into(obj: Any, out: List[bytes], depth: int, max_depth: int) -> None:
    # Custom types render themselves
    render = getattr(type(obj), "__bencode__", None)
    if render is not None:
        out.append(_render_custom(obj, render))
        return

    if isinstance(obj, BencodeInt):
        out.append(encode_int(obj.value))
        return

    if isinstance(obj, bool):
        raise UnsupportedValueError("Cannot bencode a bool")

    if isinstance(obj, int):
        out.append(encode_int(obj))
        return

    if isinstance(obj, BencodeString):
        out.append(encode_bytes(obj.value))
        return

    if isinstance(obj, (bytes, bytearray, memoryview)):
        out.append(encode_bytes(bytes(obj)))
        return

    if isinstance(obj, str):
        out.append(encode_str(obj))
        return

    if isinstance(obj, (list, tuple, BencodeList)):
        items = obj.value if isinstance(obj, BencodeList) else obj
        _check_depth(depth + 1, max_depth)
        out.append(b"l")
        for item in items:
            _encode_into(item, out, depth + 1, max_depth)
        out.append(b"e")
        return

    if isinstance(obj, (dict, BencodeDict)):
        d = obj.value if isinstance(obj, BencodeDict) else obj
        _check_depth(depth + 1, max_depth)
        out.append(b"d")
        for key_bytes, value in _sorted_items(d):
            out.append(encode_bytes(key_bytes))
            _encode_into(value, out, depth + 1, max_depth)
        out.append(b"e")
        return

    raise UnsupportedValueError(f"Cannot bencode object of type {type(obj).__name__}")


def _render_custom(obj: Bencodable, render) -> bytes:
    try:
        rendered = render(obj)
    except Exception as exc:
        raise CustomRenderError(
            f"{type(obj).__name__}.__bencode__ failed: {exc}"
        ) from exc

    if not isinstance(rendered, (bytes, bytearray)):
        raise CustomRenderError(
            f"{type(obj).__name__}.__bencode__ returned {type(rendered).__name__}, expected bytes"
        )
    return bytes(rendered)


def _check_depth(depth: int, max_depth: int):
    if depth > max_depth:
        raise EncodeNestingTooDeepError(f"Nesting deeper than {max_depth} levels")


def _sorted_items(d) -> list:
    """Returns (key_bytes, value) pairs in ascending raw-byte key order."""
    items = {}
    for k, v in d.items():
        key_bytes = key_to_bytes(k)
        if key_bytes in items:
            raise UnsupportedValueError(f"Duplicate dictionary key: {key_bytes!r}")
        items[key_bytes] = v
    return sorted(items.items(), key=lambda kv: kv[0])


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    if not INT64_MIN <= n <= INT64_MAX:
        raise UnsupportedValueError(f"Integer out of 64-bit range: {n}")
    return f"i{n}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes (e.g., 4:spam)."""
    return encode_bytes(s.encode())
