"""Byline from author meta tags or a rel=author link."""

from __future__ import annotations

from sora.fields import register_field
from sora.fields.base import Field, meta_source, text_source


@register_field("author")
class AuthorField(Field):
    sources = (
        meta_source("author", attr="name"),
        meta_source("article:author"),
        meta_source("twitter:creator", attr="name"),
        text_source("rel=author", "//*[@rel='author']"),
    )

    @property
    def name(self) -> str:
        return "author"
