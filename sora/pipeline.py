"""Extraction orchestrator: fetch, parse, extract fields, normalize."""

from __future__ import annotations

import asyncio
import enum
import logging

import httpx

from sora.config import get_extract_settings, get_fetch_settings
from sora.document import parse_document
from sora.errors import ExtractionError, ExtractionFailed, FetchFailed, ParseFailed
from sora.fetch import fetch_page
from sora.fields import extract_fields
from sora.models import ExtractionRequest, ParsedArticle
from sora.normalize import (
    make_excerpt,
    normalize_author,
    normalize_content,
    normalize_title,
)

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    FETCHING = "fetching"
    PARSING = "parsing"
    EXTRACTING = "extracting"
    NORMALIZING = "normalizing"
    DONE = "done"
    FAILED = "failed"


async def extract_article(
    url: str,
    config: dict | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ParsedArticle:
    """Fetch ``url`` and build a :class:`ParsedArticle` from it.

    Fails atomically: any stage error is raised as a single
    :class:`ExtractionError` and no partial record is returned.
    """
    request = ExtractionRequest(url)
    stage = Stage.FETCHING
    try:
        logger.debug("%s: %s", request.url, stage.value)
        fetched = await fetch_page(
            request.url, get_fetch_settings(config), transport=transport,
        )

        stage = Stage.PARSING
        logger.debug("%s: %s", request.url, stage.value)
        doc = parse_document(fetched)

        stage = Stage.EXTRACTING
        logger.debug("%s: %s", request.url, stage.value)
        fields = extract_fields(doc, config)

        stage = Stage.NORMALIZING
        logger.debug("%s: %s", request.url, stage.value)
        article = _assemble(fields, config)
    except ExtractionError:
        logger.warning("%s: failed while %s", request.url, stage.value)
        raise
    except Exception as exc:
        logger.exception("%s: unexpected error while %s", request.url, stage.value)
        raise _wrap(stage, request.url, exc) from exc

    logger.info(
        "Extracted %s: %r (%d chars)",
        request.url, article.title, len(article.content),
    )
    return article


def _assemble(fields: dict, config: dict | None) -> ParsedArticle:
    settings = get_extract_settings(config)
    content = normalize_content(fields["content"], settings.max_content_length)
    return ParsedArticle(
        title=normalize_title(fields["title"], settings.max_title_length),
        content=content,
        excerpt=make_excerpt(content, settings.excerpt_length),
        image_url=fields["image_url"],
        author=normalize_author(fields["author"]),
        published_at=fields["published_at"],
    )


def _wrap(stage: Stage, url: str, exc: Exception) -> ExtractionError:
    if stage is Stage.FETCHING:
        return FetchFailed(url, cause=exc)
    if stage is Stage.PARSING:
        return ParseFailed(url, str(exc) or type(exc).__name__, cause=exc)
    return ExtractionFailed(url, exc)


def extract_article_sync(url: str, config: dict | None = None) -> ParsedArticle:
    """Blocking wrapper for callers running on plain worker threads."""
    return asyncio.run(extract_article(url, config))


async def extract_articles(
    urls: list[str],
    config: dict | None = None,
    *,
    concurrency: int = 4,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ParsedArticle | ExtractionError]:
    """Run independent extractions concurrently, results in input order."""
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _one(url: str) -> ParsedArticle | ExtractionError:
        async with semaphore:
            try:
                return await extract_article(url, config, transport=transport)
            except ExtractionError as exc:
                return exc

    return list(await asyncio.gather(*[_one(u) for u in urls]))
