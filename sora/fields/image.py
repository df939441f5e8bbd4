"""Hero image from social meta tags or the first in-article image."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

from sora.document import Document
from sora.fields import register_field
from sora.fields.base import Field, attr_source, meta_source


def is_absolute_url(value: str) -> bool:
    """True for a syntactically valid absolute http(s) URL."""
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises on a malformed port
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


@register_field("image_url")
class ImageField(Field):
    sources = (
        meta_source("og:image"),
        meta_source("twitter:image", attr="name"),
        attr_source(
            "article/main img", "(//article//img[@src] | //main//img[@src])[1]",
            "src",
        ),
    )

    @property
    def name(self) -> str:
        return "image_url"

    def accept(self, candidate: str, doc: Document) -> str | None:
        if self.settings.resolve_relative_images and doc.url:
            try:
                candidate = urljoin(doc.url, candidate)
            except ValueError:
                return None
        return candidate if is_absolute_url(candidate) else None
