"""Main body text from the first content container."""

from __future__ import annotations

from sora.document import Document, has_class
from sora.fields import register_field
from sora.fields.base import Field, text_source

NOISE = (
    "//script",
    "//style",
    "//nav",
    "//header",
    "//footer",
    "//aside",
    f"//*[{has_class('ad')}]",
    f"//*[{has_class('advertisement')}]",
)


@register_field("content")
class ContentField(Field):
    """Text of ``article``, ``main``, ``[role=main]`` or ``body``, noise removed."""

    sources = (
        text_source("article", "//article"),
        text_source("main", "//main"),
        text_source("role=main", "//*[@role='main']"),
        text_source("body", "//body"),
    )

    @property
    def name(self) -> str:
        return "content"

    def prepare(self, doc: Document) -> Document:
        return doc.without(NOISE)

    def default(self) -> str:
        return ""
