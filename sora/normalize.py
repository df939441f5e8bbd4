"""Whitespace collapsing and length caps for extracted text fields."""

from __future__ import annotations

import re

UNTITLED = "Untitled"
ELLIPSIS = "..."

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    """Collapse every whitespace run, newlines included, to one space and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_title(text: str | None, limit: int = 200) -> str:
    title = collapse_whitespace(text)
    if not title:
        return UNTITLED
    return title[:limit].strip() or UNTITLED


def normalize_content(text: str | None, limit: int = 100_000) -> str:
    """Collapse whitespace; cut to ``limit`` with a marker only when cut."""
    content = collapse_whitespace(text)
    if len(content) > limit:
        return content[:limit] + ELLIPSIS
    return content


def make_excerpt(content: str, length: int = 300) -> str:
    # Marker is appended even when nothing was cut; stored records rely on it.
    return content[:length] + ELLIPSIS


def normalize_author(text: str | None) -> str | None:
    return collapse_whitespace(text) or None
