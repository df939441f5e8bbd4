"""Title: social meta tags, then the first heading, then <title>."""

from __future__ import annotations

from sora.fields import register_field
from sora.fields.base import Field, meta_source, text_source
from sora.normalize import UNTITLED


@register_field("title")
class TitleField(Field):
    sources = (
        meta_source("og:title"),
        meta_source("twitter:title", attr="name"),
        text_source("h1", "//h1"),
        text_source("title", "//title"),
    )

    @property
    def name(self) -> str:
        return "title"

    def default(self) -> str:
        return UNTITLED
