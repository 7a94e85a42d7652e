"""Async client for the VATSIM v3 datafeed."""

from __future__ import annotations

import logging
import random
from typing import Any

import aiohttp
from pydantic import ValidationError

from traffic_replay._constants import STATUS_URL
from traffic_replay._transport import HttpTransport, Transport
from traffic_replay.exceptions import FeedPayloadError, FeedTransportError, ReplayError
from traffic_replay.models.feed import DataFeed

_logger = logging.getLogger(__name__)


def _datafeed_urls(status: Any) -> list[str]:
    """Extract the ``data.v3`` URL list from a status document."""
    data = status.get("data") if isinstance(status, dict) else None
    urls = data.get("v3") if isinstance(data, dict) else None
    if not isinstance(urls, list):
        return []
    return [url for url in urls if isinstance(url, str) and url]


class FeedClient:
    """Async client returning full datafeed snapshots.

    Usage::

        async with FeedClient() as client:
            feed = await client.get_datafeed()

    Parameters
    ----------
    status_url : str
        Status document listing the available v3 datafeed URLs.
    datafeed_url : str or None
        Use this URL directly and skip discovery.
    session : aiohttp.ClientSession or None
        Externally owned HTTP session; the client opens (and closes) its own
        when omitted.
    transport : Transport or None
        Transport override, mainly for tests.
    request_timeout : float
        Total timeout per HTTP request in seconds.
    """

    def __init__(
        self,
        *,
        status_url: str = STATUS_URL,
        datafeed_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        request_timeout: float = 30.0,
    ) -> None:
        self._status_url = status_url
        self._datafeed_url = datafeed_url
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._request_timeout = request_timeout

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FeedClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._request_timeout)
        if self._datafeed_url is None:
            self._datafeed_url = await self.discover_datafeed_url()
        _logger.info("Using datafeed %s", self._datafeed_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise ReplayError("Client not initialized. Use 'async with FeedClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    @property
    def datafeed_url(self) -> str | None:
        return self._datafeed_url

    async def discover_datafeed_url(self) -> str:
        """Pick one of the v3 datafeed URLs advertised by the status document.

        Raises
        ------
        FeedTransportError
            If the status document is unavailable or lists no v3 URL.
        """
        status = await self._require_transport().get_json(self._status_url)
        urls = _datafeed_urls(status)
        if not urls:
            raise FeedTransportError(f"No v3 datafeed URL listed in {self._status_url}", url=self._status_url)
        return random.choice(urls)

    async def get_datafeed(self) -> DataFeed:
        """Fetch and validate the current datafeed.

        Raises
        ------
        FeedTransportError
            On network or HTTP failure.
        FeedPayloadError
            If the JSON does not validate as a datafeed.
        """
        transport = self._require_transport()
        if self._datafeed_url is None:
            self._datafeed_url = await self.discover_datafeed_url()
        payload = await transport.get_json(self._datafeed_url)
        try:
            return DataFeed.model_validate(payload)
        except ValidationError as exc:
            raise FeedPayloadError(f"Malformed datafeed from {self._datafeed_url}: {exc}") from exc
