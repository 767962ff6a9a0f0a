import aiohttp
import pytest

from bencodekit.errors import BencodeDecodeError, NonStringKeyError
from bencodekit.fetch import fetch, fetch_many
from bencodekit.structure import BencodeDict, BencodeInt, BencodeString

RESPONSES = {
    "http://fake/announce": b"d8:intervali1800e5:peers6:\x01\x02\x03\x04\x1A\xe1e",
    "http://fake/scrape": b"d5:filesdee",
    "http://fake/broken": b"di1ei2ee",
    "http://fake/dup": b"d1:ai1e1:ai2ee",
}


class FakeResp:
    def __init__(self, body):
        self.body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc, val, tb):
        pass

    def raise_for_status(self):
        pass

    async def read(self):
        return self.body


class FakeSession:
    def __init__(self):
        self.requested = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc, val, tb):
        pass

    def get(self, url, **kwargs):
        self.requested.append(url)
        if url not in RESPONSES:
            raise aiohttp.ClientConnectionError(f"cannot connect to {url}")
        return FakeResp(RESPONSES[url])


@pytest.fixture
def fake_session(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(aiohttp, "ClientSession", lambda: session)
    return session


@pytest.mark.asyncio
async def test_fetch_decodes_body(fake_session):
    value = await fetch("http://fake/announce")

    assert isinstance(value, BencodeDict)
    assert value[b"interval"] == BencodeInt(1800)
    assert value[b"peers"] == BencodeString(b"\x01\x02\x03\x04\x1A\xe1")
    assert fake_session.requested == ["http://fake/announce"]


@pytest.mark.asyncio
async def test_fetch_uses_given_session():
    session = FakeSession()
    value = await fetch("http://fake/scrape", session=session)
    assert value == BencodeDict({b"files": BencodeDict({})})
    assert session.requested == ["http://fake/scrape"]


@pytest.mark.asyncio
async def test_fetch_propagates_decode_errors(fake_session):
    with pytest.raises(NonStringKeyError):
        await fetch("http://fake/broken")


@pytest.mark.asyncio
async def test_fetch_strict_mode(fake_session):
    value = await fetch("http://fake/dup")
    assert value.duplicate_keys == (b"a",)
    with pytest.raises(BencodeDecodeError):
        await fetch("http://fake/dup", strict=True)


@pytest.mark.asyncio
async def test_fetch_many_collects_results_and_errors(fake_session):
    urls = ["http://fake/announce", "http://fake/broken", "http://fake/missing"]
    results = await fetch_many(urls)

    assert isinstance(results[0], BencodeDict)
    assert isinstance(results[1], NonStringKeyError)
    assert isinstance(results[2], aiohttp.ClientConnectionError)
    assert sorted(fake_session.requested) == sorted(urls)


@pytest.mark.asyncio
async def test_fetch_many_uses_given_session():
    session = FakeSession()
    results = await fetch_many(["http://fake/scrape", "http://fake/dup"], session=session, strict=True)

    assert results[0] == BencodeDict({b"files": BencodeDict({})})
    assert isinstance(results[1], BencodeDecodeError)
    assert sorted(session.requested) == ["http://fake/dup", "http://fake/scrape"]
