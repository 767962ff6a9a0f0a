"""
Helpers for fetching bencoded payloads (tracker responses, .torrent files) over HTTP.
"""
import asyncio
import logging
from typing import List, Optional, Sequence

import aiohttp

from .constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_DEPTH
from .decoder import parse
from .structure import BencodeType

logger = logging.getLogger(__name__)


async def fetch(url: str, *, session: Optional[aiohttp.ClientSession] = None,
                timeout: float = DEFAULT_FETCH_TIMEOUT,
                max_depth: int = DEFAULT_MAX_DEPTH,
                strict: bool = False) -> BencodeType:
    """
    GETs url and decodes the response body as a single Bencode value.
    Raises aiohttp.ClientResponseError on a non-2xx status.
    """
    if session is None:
        async with aiohttp.ClientSession() as own_session:
            data = await _read_body(own_session, url, timeout)
    else:
        data = await _read_body(session, url, timeout)

    return parse(data, max_depth=max_depth, strict=strict)


async def _read_body(session, url: str, timeout: float) -> bytes:
    logger.debug("GET %s", url)
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with session.get(url, timeout=client_timeout) as resp:
        resp.raise_for_status()
        data = await resp.read()
    logger.debug("Received %d bytes from %s", len(data), url)
    return data


async def fetch_many(urls: Sequence[str], *,
                     session: Optional[aiohttp.ClientSession] = None,
                     **kwargs) -> List[object]:
    """
    Fetches and decodes several URLs concurrently over one session
    (the caller's, if given). Each result is either the decoded value
    or the exception that URL raised.
    """
    if session is None:
        async with aiohttp.ClientSession() as own_session:
            results = await _gather(urls, own_session, kwargs)
    else:
        results = await _gather(urls, session, kwargs)

    for url, result in zip(urls, results):
        if isinstance(result, BaseException):
            logger.warning("Fetching %s failed: %s", url, result)
    return results


async def _gather(urls, session, kwargs) -> List[object]:
    tasks = [fetch(url, session=session, **kwargs) for url in urls]
    return await asyncio.gather(*tasks, return_exceptions=True)
