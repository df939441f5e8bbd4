"""Ordered fallback chains for field extraction."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from sora.config import get_extract_settings
from sora.document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Source:
    """One entry in a field's fallback chain."""

    name: str
    candidate: Callable[[Document], str | None]


def meta_source(value: str, attr: str = "property") -> Source:
    return Source(f"meta[{attr}={value}]", lambda doc: doc.meta(value, attr))


def text_source(name: str, xpath: str) -> Source:
    return Source(name, lambda doc: doc.first_text(xpath))


def attr_source(name: str, xpath: str, attr: str) -> Source:
    return Source(name, lambda doc: doc.first_attr(xpath, attr))


class Field(ABC):
    """Base class for a single field extractor.

    Sources are tried lazily in order; the first candidate that is
    non-blank and survives :meth:`accept` wins. Nothing else is compared.
    """

    sources: tuple[Source, ...] = ()

    def __init__(self, config: dict | None = None):
        self.config = config or {}
        self.settings = get_extract_settings(config)

    @property
    @abstractmethod
    def name(self) -> str:
        """Key of the field in the extracted record."""
        ...

    def prepare(self, doc: Document) -> Document:
        """Document the sources run against."""
        return doc

    def accept(self, candidate: str, doc: Document) -> Any:
        """Convert a candidate, or return None to move on to the next source."""
        return candidate

    def default(self) -> Any:
        return None

    def extract(self, doc: Document) -> Any:
        doc = self.prepare(doc)
        for source in self.sources:
            raw = source.candidate(doc)
            if raw is None or not raw.strip():
                continue
            value = self.accept(raw.strip(), doc)
            if value is None:
                logger.debug(
                    "%s: rejected candidate from %s: %.80r",
                    self.name, source.name, raw,
                )
                continue
            logger.debug("%s: using %s", self.name, source.name)
            return value
        logger.debug("%s: no candidate, using default", self.name)
        return self.default()
