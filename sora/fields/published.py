"""Publication time from article meta tags or a <time datetime> element."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil import parser as date_parser

from sora.document import Document
from sora.fields import register_field
from sora.fields.base import Field, attr_source, meta_source

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Two fixed fill-ins that differ in year, month and day. A free-form value
# names a complete date only if both parses land on the same day.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_datetime(value: str) -> datetime | None:
    try:
        return date_parser.isoparse(value)
    except ValueError:
        pass
    first, second = (date_parser.parse(value, default=d) for d in _FILL_DEFAULTS)
    if first.date() != second.date():
        return None
    return first


def parse_timestamp(value: str) -> int | None:
    """Parse a date string to epoch milliseconds; naive values are UTC.

    Values missing a year, month or day (``"10"``, ``"Monday"``, ``"5pm"``)
    are rejected, as are offsets of a day or more.
    """
    try:
        parsed = _parse_datetime(value)
        if parsed is None:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return (parsed - _EPOCH) // timedelta(milliseconds=1)
    except (ValueError, OverflowError):
        return None


@register_field("published_at")
class PublishedAtField(Field):
    sources = (
        meta_source("article:published_time"),
        meta_source("publish-date", attr="name"),
        attr_source("time[datetime]", "//time[@datetime]", "datetime"),
    )

    @property
    def name(self) -> str:
        return "published_at"

    def accept(self, candidate: str, doc: Document) -> int | None:
        return parse_timestamp(candidate)
