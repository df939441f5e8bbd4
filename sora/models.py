"""Core data models for the article extractor."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExtractionRequest:
    """A single URL to extract. Lives for one call only."""

    url: str

    def __post_init__(self):
        self.url = (self.url or "").strip()


@dataclass
class FetchResult:
    """Raw response handed from the fetcher to the document builder."""

    url: str
    final_url: str
    status_code: int
    content_type: str  # bare media type, lower-cased, "" when missing
    encoding: str | None
    body: bytes
    truncated: bool = False


@dataclass
class ParsedArticle:
    """Normalized article record produced by one extraction call."""

    title: str
    content: str
    excerpt: str
    image_url: str | None = None
    author: str | None = None
    published_at: int | None = None  # epoch milliseconds

    def to_dict(self) -> dict:
        """Record shape stored by the persistence layer; absent fields omitted."""
        record = {
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
        }
        if self.image_url is not None:
            record["imageUrl"] = self.image_url
        if self.author is not None:
            record["author"] = self.author
        if self.published_at is not None:
            record["publishedAt"] = self.published_at
        return record
