"""Field extractor registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sora.document import Document
    from sora.fields.base import Field

FIELDS: dict[str, type[Field]] = {}


def register_field(name: str):
    """Decorator to register a field extractor."""

    def decorator(cls):
        FIELDS[name] = cls
        return cls

    return decorator


def extract_fields(doc: Document, config: dict | None = None) -> dict:
    """Run every registered field extractor over ``doc``."""
    return {name: cls(config).extract(doc) for name, cls in FIELDS.items()}


# Import implementations to trigger registration (order is record order)
from sora.fields.title import TitleField  # noqa: E402, F401
from sora.fields.content import ContentField  # noqa: E402, F401
from sora.fields.image import ImageField  # noqa: E402, F401
from sora.fields.author import AuthorField  # noqa: E402, F401
from sora.fields.published import PublishedAtField  # noqa: E402, F401
