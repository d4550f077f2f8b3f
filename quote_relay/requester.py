import json
import logging
from typing import Any, Sequence

import aiohttp
from pydantic import ValidationError

from quote_relay.deadline import Deadline
from quote_relay.errors import DecodeError, TransportError, UnexpectedStatus
from quote_relay.schemas import Quote

log = logging.getLogger("requester")

async def fetch_quote(deadline: Deadline, url: str, path: Sequence[str]) -> Quote:
    """
    GET `url` and pull the bid found at `path` out of the JSON body.

    The whole exchange (connect, status, body read, decode) runs inside the
    deadline scope. Raises DeadlineExceeded / ScopeCancelled from the scope,
    or a FetchError subclass for anything the source did wrong. Never retries.
    """
    return await deadline.run(_fetch(url, path))

async def _fetch(url: str, path: Sequence[str]) -> Quote:
    try:
        async with aiohttp.ClientSession() as s:
            async with s.get(url) as r:
                if r.status != 200:
                    raise UnexpectedStatus(r.status)
                body = await r.read()
    except aiohttp.ClientError as e:
        raise TransportError(url, e) from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise DecodeError(str(e)) from e

    log.debug(f"data received from {url}: {data}")
    return extract_quote(data, path)

def extract_quote(data: Any, path: Sequence[str]) -> Quote:
    node = data
    for key in path:
        if not isinstance(node, dict) or key not in node:
            raise DecodeError(f"missing field {'.'.join(path)}")
        node = node[key]
    if not isinstance(node, str):
        raise DecodeError(f"field {'.'.join(path)} is not a string")
    try:
        return Quote(bid=node)
    except ValidationError as e:
        raise DecodeError(e.errors()[0]["msg"]) from e
