"""HTTP transport for the VATSIM JSON endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from traffic_replay._constants import USER_AGENT
from traffic_replay.exceptions import FeedTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`FeedClient`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str) -> Any:
        ...


class HttpTransport:
    """GET JSON documents over a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> Any:
        """Fetch *url* and decode the body as JSON.

        Raises
        ------
        FeedTransportError
            On network failure, a non-200 status or a body that is not
            decodable JSON.
        """
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                text = body.decode(resp.charset or "utf-8")
                if resp.status != 200:
                    raise FeedTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FeedTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FeedTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc
        except (UnicodeDecodeError, LookupError) as exc:
            raise FeedTransportError(f"Undecodable body from {url}: {exc}", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FeedTransportError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
