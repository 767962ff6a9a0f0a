from collections import OrderedDict

import pytest

from bencodekit.encoder import encode, encode_bytes, encode_int, encode_str
from bencodekit.errors import (
    BencodeEncodeError,
    CustomRenderError,
    EncodeNestingTooDeepError,
    UnsupportedValueError,
)
from bencodekit.structure import Bencodable, BencodeDict, BencodeInt, BencodeList, BencodeString


class InfoHash:
    """Renders itself as a 20-byte string."""
    def __init__(self, digest: bytes):
        self.digest = digest

    def __bencode__(self) -> bytes:
        return encode_bytes(self.digest)


class Broken:
    def __bencode__(self) -> bytes:
        raise RuntimeError("cannot render")


class WrongType:
    def __bencode__(self):
        return "4:spam"


def test_primitives():
    assert encode_int(0) == b"i0e"
    assert encode_int(-42) == b"i-42e"
    assert encode_bytes(b"spam") == b"4:spam"
    assert encode_str("") == b"0:"


def test_encode_plain_python_values():
    assert encode(3) == b"i3e"
    assert encode(b"spam") == b"4:spam"
    assert encode("spam") == b"4:spam"
    assert encode(["spam", "eggs"]) == b"l4:spam4:eggse"
    assert encode((1, 2, 3)) == b"li1ei2ei3ee"
    assert encode([]) == b"le"
    assert encode({}) == b"de"
    assert encode({"cow": "moo", "spam": "eggs"}) == b"d3:cow3:moo4:spam4:eggse"


def test_encode_utf8_length_counts_bytes():
    assert encode("é") == b"2:\xc3\xa9"


def test_key_order_independence():
    first = OrderedDict([(b"a", 1), (b"zz", 2), (b"b", [3])])
    second = OrderedDict([(b"b", [3]), (b"a", 1), (b"zz", 2)])
    assert encode(first) == encode(second) == b"d1:ai1e1:bli3ee2:zzi2ee"


def test_keys_sort_by_raw_bytes():
    # raw-byte order puts uppercase before lowercase and b"\xff" last
    d = {b"\xff": 0, b"a": 0, b"B": 0, b"ab": 0}
    assert encode(d) == b"d1:Bi0e1:ai0e2:abi0e1:\xffi0ee"


def test_mixed_key_types():
    d = {"b": 1, b"a": 2, BencodeString(b"c"): 3}
    assert encode(d) == b"d1:ai2e1:bi1e1:ci3ee"


def test_value_tree_encoding():
    value = BencodeList([
        BencodeInt(10),
        BencodeString(b"spam"),
        BencodeDict({b"k": BencodeList([])}),
    ])
    assert encode(value) == b"li10e4:spamd1:klee"


def test_custom_render_capability():
    digest = b"\x01" * 20
    assert encode(InfoHash(digest)) == b"20:" + digest
    assert encode({"info_hash": InfoHash(digest)}) == b"d9:info_hash20:" + digest + b"e"


def test_custom_render_failure_is_chained():
    with pytest.raises(CustomRenderError) as exc_info:
        encode([Broken()])
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_custom_render_must_return_bytes():
    with pytest.raises(CustomRenderError):
        encode(WrongType())


@pytest.mark.parametrize("obj", [
    1.5,
    None,
    True,
    {1, 2, 3},
    object(),
    2 ** 63,
    -(2 ** 63) - 1,
    {1: "numeric key"},
    {"a": 1, b"a": 2},
    [1, [2, {"x": 3.0}]],
])
def test_unsupported_values(obj):
    with pytest.raises(UnsupportedValueError) as exc_info:
        encode(obj)
    assert isinstance(exc_info.value, BencodeEncodeError)
    assert isinstance(exc_info.value, TypeError)


def test_nesting_limit():
    deep = []
    for _ in range(300):
        deep = [deep]
    with pytest.raises(EncodeNestingTooDeepError):
        encode(deep)
    assert encode([[[]]], max_depth=3) == b"llleee"
    with pytest.raises(EncodeNestingTooDeepError):
        encode({"a": [[]]}, max_depth=2)


def test_bencodable_values_render_themselves_inside_containers():
    digest = b"\x02" * 20
    assert isinstance(InfoHash(digest), Bencodable)
    assert encode([InfoHash(digest), 1]) == b"l20:" + digest + b"i1ee"
