"""Tolerant HTML document model built on lxml."""

from __future__ import annotations

import codecs
import copy
import logging
import re

from lxml import etree, html

from sora.errors import ParseFailed
from sora.models import FetchResult

logger = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_META_CHARSET = re.compile(
    rb"""<meta[^>]+charset\s*=\s*["']?\s*([A-Za-z0-9_.:-]+)""", re.IGNORECASE,
)
_EMPTY_DOCUMENT = "<html><head></head><body></body></html>"


def has_class(name: str) -> str:
    """XPath predicate matching elements whose class list contains ``name``."""
    return (
        f"contains(concat(' ', normalize-space(@class), ' '), ' {name} ')"
    )


class Document:
    """Parsed page owned by a single extraction call.

    Lookups are XPath-based and always return the first match.
    """

    def __init__(self, root: html.HtmlElement, url: str = ""):
        self.root = root
        self.url = url

    def meta(self, value: str, attr: str = "property") -> str | None:
        """``content`` of the first ``<meta>`` whose ``attr`` equals ``value``."""
        found = self.root.xpath(f"//meta[@{attr}=$value]/@content", value=value)
        return str(found[0]) if found else None

    def first(self, xpath: str):
        found = self.root.xpath(xpath)
        return found[0] if found else None

    def first_text(self, xpath: str) -> str | None:
        el = self.first(xpath)
        if el is None:
            return None
        return el.text_content()

    def first_attr(self, xpath: str, attr: str) -> str | None:
        el = self.first(xpath)
        if el is None:
            return None
        return el.get(attr)

    def text(self) -> str:
        return self.root.text_content()

    def without(self, xpaths: list[str] | tuple[str, ...]) -> Document:
        """Working copy with every element matching ``xpaths`` removed.

        Text following a removed element (its tail) is kept.
        """
        root = copy.deepcopy(self.root)
        doomed = root.xpath(" | ".join(xpaths)) if xpaths else []
        for el in doomed:
            if el.getparent() is not None:
                el.drop_tree()
        return Document(root, self.url)


def parse_document(fetched: FetchResult) -> Document:
    """Decode the fetched body and build a :class:`Document`.

    Malformed markup never fails; only bodies that are not text at all
    raise :class:`ParseFailed`.
    """
    if not _is_textual(fetched.content_type):
        raise ParseFailed(
            fetched.url, f"unsupported content type {fetched.content_type!r}",
        )

    text = decode_body(fetched.body, fetched.encoding)
    if "\x00" in text:
        raise ParseFailed(fetched.url, "binary content")

    text = _XML_DECLARATION.sub("", text, count=1)
    if not text.strip():
        text = _EMPTY_DOCUMENT

    try:
        root = html.document_fromstring(text)
    except (etree.ParserError, ValueError) as exc:
        # Comment-only or otherwise contentless input
        logger.debug("Empty parse for %s: %s", fetched.url, exc)
        root = html.document_fromstring(_EMPTY_DOCUMENT)

    return Document(root, fetched.final_url or fetched.url)


def decode_body(body: bytes, encoding: str | None) -> str:
    """Decode with the declared charset, then a ``<meta charset>``, then UTF-8."""
    for candidate in (encoding, _sniff_charset(body), "utf-8"):
        if not candidate:
            continue
        try:
            codecs.lookup(candidate)
        except LookupError:
            logger.debug("Unknown charset %r", candidate)
            continue
        return body.decode(candidate, errors="replace")
    return body.decode("utf-8", errors="replace")


def _sniff_charset(body: bytes) -> str | None:
    match = _META_CHARSET.search(body[:4096])
    if match:
        return match.group(1).decode("ascii", errors="ignore")
    return None


def _is_textual(content_type: str) -> bool:
    if not content_type:
        return True
    return (
        content_type.startswith("text/")
        or "html" in content_type
        or "xml" in content_type
    )
