"""Bounded-time page fetch with httpx."""

from __future__ import annotations

import asyncio
import logging

import httpx

from sora.config import FetchSettings
from sora.errors import FetchFailed, Timeout
from sora.models import FetchResult

logger = logging.getLogger(__name__)


async def fetch_page(
    url: str,
    settings: FetchSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Issue one GET for ``url`` and return the (capped) response body.

    The deadline is enforced by cancelling the request task, which tears
    down the streaming response and closes its connection. No retries.
    """
    settings = settings or FetchSettings()
    deadline = settings.timeout_seconds
    try:
        return await asyncio.wait_for(
            _fetch(url, settings, transport), timeout=deadline,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("Fetch of %s cancelled after %.1fs", url, deadline)
        raise Timeout(url, deadline, exc) from exc


async def _fetch(
    url: str,
    settings: FetchSettings,
    transport: httpx.AsyncBaseTransport | None,
) -> FetchResult:
    headers = {"User-Agent": settings.user_agent}
    try:
        async with httpx.AsyncClient(
            transport=transport,
            headers=headers,
            timeout=settings.timeout_seconds,
            follow_redirects=True,
        ) as client:
            async with client.stream("GET", url) as resp:
                if not resp.is_success:
                    raise FetchFailed(url, resp.status_code, resp.reason_phrase)
                body, truncated = await _read_capped(resp, settings.max_bytes)
                content_type = resp.headers.get("content-type", "")
                result = FetchResult(
                    url=url,
                    final_url=str(resp.url),
                    status_code=resp.status_code,
                    content_type=content_type.split(";")[0].strip().lower(),
                    encoding=resp.charset_encoding,
                    body=body,
                    truncated=truncated,
                )
    except httpx.TimeoutException as exc:
        raise Timeout(url, settings.timeout_seconds, exc) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("Transport failure for %s: %s", url, exc)
        raise FetchFailed(url, cause=exc) from exc

    if result.truncated:
        logger.warning(
            "Response for %s exceeded %d bytes, body truncated",
            url, settings.max_bytes,
        )
    logger.debug(
        "Fetched %s: HTTP %d, %d bytes, %s",
        url, result.status_code, len(result.body), result.content_type or "?",
    )
    return result


async def _read_capped(
    resp: httpx.Response, max_bytes: int,
) -> tuple[bytes, bool]:
    """Read the streamed body, stopping once ``max_bytes`` is reached."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in resp.aiter_bytes():
        if size + len(chunk) > max_bytes:
            chunks.append(chunk[: max_bytes - size])
            return b"".join(chunks), True
        chunks.append(chunk)
        size += len(chunk)
    return b"".join(chunks), False
