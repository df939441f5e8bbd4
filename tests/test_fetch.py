"""Tests for the bounded-time fetcher."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from sora.config import DEFAULT_USER_AGENT, FetchSettings
from sora.errors import FetchFailed, Timeout
from sora.fetch import fetch_page

PROXY_VARS = (
    "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY",
    "http_proxy", "https_proxy", "all_proxy",
)


@pytest.fixture
def no_proxy(monkeypatch):
    """Keep local-socket tests off any proxy configured in the environment."""
    for var in PROXY_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.asyncio
async def test_fetch_returns_body_and_metadata(make_transport):
    """Successful GET returns the body, media type and charset."""
    transport = make_transport(
        "<html><body>hi</body></html>",
        content_type="text/html; charset=ISO-8859-1",
    )

    result = await fetch_page("https://example.com/a", transport=transport)

    assert result.status_code == 200
    assert result.body == b"<html><body>hi</body></html>"
    assert result.content_type == "text/html"
    assert result.encoding.lower() == "iso-8859-1"
    assert result.truncated is False
    assert result.final_url == "https://example.com/a"


@pytest.mark.asyncio
async def test_fetch_sends_crawler_user_agent(make_transport):
    """Exactly one request is made, identifying the crawler."""
    transport = make_transport("<html></html>")

    await fetch_page("https://example.com/a", transport=transport)

    assert len(transport.requests) == 1
    assert transport.requests[0].method == "GET"
    assert transport.requests[0].headers["user-agent"] == DEFAULT_USER_AGENT


@pytest.mark.asyncio
async def test_fetch_uses_configured_user_agent(make_transport):
    transport = make_transport("<html></html>")
    settings = FetchSettings(user_agent="CustomBot/2.0 (+https://example.org)")

    await fetch_page("https://example.com/a", settings, transport=transport)

    assert transport.requests[0].headers["user-agent"] == (
        "CustomBot/2.0 (+https://example.org)"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("status,text", [(404, "Not Found"), (503, "Service Unavailable")])
async def test_fetch_non_2xx_is_fetch_failed(make_transport, status, text):
    """Non-2xx responses fail with the status code and reason."""
    transport = make_transport("nope", status=status)

    with pytest.raises(FetchFailed) as exc_info:
        await fetch_page("https://example.com/missing", transport=transport)

    assert exc_info.value.status == status
    assert exc_info.value.status_text == text
    assert exc_info.value.url == "https://example.com/missing"
    assert str(status) in str(exc_info.value)
    # No retries
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_fetch_transport_error_is_fetch_failed():
    """DNS/connection failures carry the transport exception as cause."""

    def handler(request):
        raise httpx.ConnectError("Name or service not known", request=request)

    with pytest.raises(FetchFailed) as exc_info:
        await fetch_page(
            "https://no-such-host.invalid/", transport=httpx.MockTransport(handler),
        )

    assert exc_info.value.status is None
    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert not isinstance(exc_info.value, Timeout)


@pytest.mark.asyncio
async def test_fetch_url_without_scheme_is_fetch_failed(no_proxy):
    with pytest.raises(FetchFailed) as exc_info:
        await fetch_page("example.com/article")

    assert exc_info.value.cause is not None


@pytest.mark.asyncio
async def test_fetch_deadline_raises_timeout():
    """A response slower than the deadline is cancelled and reported as Timeout."""

    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, text="too late")

    settings = FetchSettings(timeout_seconds=0.05)
    with pytest.raises(Timeout) as exc_info:
        await fetch_page(
            "https://slow.example.com/", settings,
            transport=httpx.MockTransport(handler),
        )

    assert exc_info.value.deadline == 0.05
    assert exc_info.value.url == "https://slow.example.com/"


@pytest.mark.asyncio
async def test_fetch_transport_timeout_is_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(Timeout):
        await fetch_page("https://example.com/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_caps_response_size(make_transport):
    """Bodies over max_bytes are cut at the cap and flagged."""
    transport = make_transport(b"x" * 1000)
    settings = FetchSettings(max_bytes=100)

    result = await fetch_page("https://example.com/big", settings, transport=transport)

    assert len(result.body) == 100
    assert result.truncated is True


@pytest.mark.asyncio
async def test_fetch_body_at_cap_is_not_truncated(make_transport):
    transport = make_transport(b"x" * 100)
    settings = FetchSettings(max_bytes=100)

    result = await fetch_page("https://example.com/big", settings, transport=transport)

    assert len(result.body) == 100
    assert result.truncated is False


@pytest.mark.asyncio
async def test_fetch_refused_connection_is_fetch_failed(no_proxy):
    """A host that refuses connections fails fast, not by timing out."""
    with pytest.raises(FetchFailed) as exc_info:
        await fetch_page("http://127.0.0.1:9/", FetchSettings(timeout_seconds=5))

    assert not isinstance(exc_info.value, Timeout)
    assert isinstance(exc_info.value.cause, httpx.TransportError)


@pytest.mark.asyncio
async def test_fetch_timeout_closes_connection(no_proxy):
    """On deadline expiry the client closes its socket to the server."""
    closed = asyncio.Event()

    async def handle(reader, writer):
        try:
            await reader.readuntil(b"\r\n\r\n")
            # Never respond; wait for the client to hang up
            await reader.read()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            closed.set()
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    async with server:
        with pytest.raises(Timeout):
            await fetch_page(
                f"http://127.0.0.1:{port}/slow",
                FetchSettings(timeout_seconds=0.3),
            )
        await asyncio.wait_for(closed.wait(), timeout=2)

    assert closed.is_set()
