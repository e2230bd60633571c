"""Raw metadata retrieval for arxiv-linker.

The engine never talks to the network directly: it asks an injected
transport (any awaitable ``transport(url) -> TransportResponse``) for a URL
chosen from the identifier and the source. `HttpxTransport` is the default
transport used by the CLI and the synchronous client.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import FetchError
from .models import Source, TransportResponse
from .reference import abs_url, feed_url

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def __call__(self, url: str) -> TransportResponse: ...


class HttpxTransport:
    """httpx-backed transport with retry/backoff on network errors.

    Non-2xx responses are returned as-is (``ok=False``); only transport
    exceptions are retried.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0, attempts: int = 3) -> None:
        self._client = client
        self._close_client = client is None
        self.timeout = timeout
        self.attempts = attempts

    async def __call__(self, url: str) -> TransportResponse:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                resp = await self._client.get(url, follow_redirects=True)

        return TransportResponse(ok=resp.is_success, status=resp.status_code, body=resp.text)

    async def aclose(self) -> None:
        if self._client is not None and self._close_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def source_url(identifier: str, source: Union[Source, str], reference: Optional[str] = None) -> str:
    """URL requested for `identifier` from `source`.

    The rendered page is requested at the caller's original reference when
    one is given, not at the templated abstract URL.
    """
    if Source(source) is Source.FEED:
        return feed_url(identifier)
    return reference or abs_url(identifier)


async def fetch_document(
    identifier: str,
    source: Union[Source, str],
    transport: Transport,
    reference: Optional[str] = None,
) -> str:
    """Fetch the raw feed XML or abstract-page HTML for `identifier`.

    Raises `FetchError` on a non-ok status or when the transport itself fails.
    """
    url = source_url(identifier, source, reference)
    logger.debug("fetching %s source for %s: %s", Source(source).value, identifier, url)
    try:
        resp = await transport(url)
    except FetchError:
        raise
    except Exception as exc:
        raise FetchError(url, network_failure=True, detail=str(exc)) from exc

    if not resp.ok:
        raise FetchError(url, status=resp.status)
    return resp.body
