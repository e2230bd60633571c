import httpx
import pytest

from arxiv_linker.errors import FetchError
from arxiv_linker.fetcher import HttpxTransport, fetch_document, source_url
from arxiv_linker.models import Source, TransportResponse


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def is_success(self):
        return 200 <= self.status_code < 300


class DummyClient:
    def __init__(self, text: str, status_code: int = 200):
        self._text = text
        self._status = status_code
        self.urls = []
        self.closed = False

    async def get(self, url, follow_redirects=True):
        self.urls.append(url)
        return FakeResponse(self._text, self._status)

    async def aclose(self):
        self.closed = True


def recording_transport(body="<feed/>", ok=True, status=200):
    calls = []

    async def transport(url):
        calls.append(url)
        return TransportResponse(ok=ok, status=status, body=body)

    return transport, calls


@pytest.mark.asyncio
async def test_feed_source_uses_templated_url():
    transport, calls = recording_transport(body="<feed>xml</feed>")
    body = await fetch_document("2506.14767", Source.FEED, transport, reference="https://arxiv.org/abs/2506.14767v2")
    assert body == "<feed>xml</feed>"
    assert calls == ["https://export.arxiv.org/api/query?id_list=2506.14767"]


@pytest.mark.asyncio
async def test_rendered_source_uses_original_reference():
    transport, calls = recording_transport(body="<html></html>")
    await fetch_document("2506.14767", "rendered", transport, reference="https://arxiv.org/abs/2506.14767v2")
    assert calls == ["https://arxiv.org/abs/2506.14767v2"]


def test_rendered_source_without_reference():
    assert source_url("2506.14767", Source.RENDERED) == "https://arxiv.org/abs/2506.14767"


@pytest.mark.asyncio
async def test_non_ok_status_raises_fetch_error():
    transport, _ = recording_transport(ok=False, status=503)
    with pytest.raises(FetchError) as info:
        await fetch_document("2506.14767", Source.FEED, transport)
    assert info.value.status == 503
    assert not info.value.network_failure


@pytest.mark.asyncio
async def test_transport_exception_is_network_failure():
    async def broken(url):
        raise ConnectionError("connection refused")

    with pytest.raises(FetchError) as info:
        await fetch_document("2506.14767", Source.FEED, broken)
    assert info.value.network_failure
    assert info.value.status is None
    assert "connection refused" in str(info.value)


@pytest.mark.asyncio
async def test_every_call_is_a_fresh_fetch():
    transport, calls = recording_transport()
    await fetch_document("2506.14767", Source.FEED, transport)
    await fetch_document("2506.14767", Source.FEED, transport)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_httpx_transport_wraps_response():
    client = DummyClient("<feed/>", status_code=404)
    transport = HttpxTransport(client=client)
    resp = await transport("https://export.arxiv.org/api/query?id_list=2506.14767")
    assert resp.ok is False
    assert resp.status == 404
    assert resp.body == "<feed/>"
    # injected clients are left open for their owner
    await transport.aclose()
    assert client.closed is False


@pytest.mark.asyncio
async def test_httpx_transport_retries_network_errors():
    class FlakyClient(DummyClient):
        def __init__(self, text: str):
            super().__init__(text)
            self.calls = 0

        async def get(self, url, follow_redirects=True):
            self.calls += 1
            if self.calls == 1:
                raise httpx.ConnectError("transient network error")
            return FakeResponse(self._text)

    client = FlakyClient("<feed/>")
    transport = HttpxTransport(client=client, attempts=3)
    resp = await transport("https://export.arxiv.org/api/query?id_list=2506.14767")
    assert resp.ok
    assert client.calls == 2


@pytest.mark.asyncio
async def test_httpx_transport_gives_up_after_attempts():
    class DeadClient(DummyClient):
        async def get(self, url, follow_redirects=True):
            raise httpx.ConnectError("down")

    transport = HttpxTransport(client=DeadClient(""), attempts=1)
    with pytest.raises(FetchError) as info:
        await fetch_document("2506.14767", Source.FEED, transport)
    assert info.value.network_failure
