"""Reading-time estimate computed from extracted content."""

from __future__ import annotations

import math

WORDS_PER_MINUTE = 200


def estimate_reading_time(content: str | None) -> int:
    """Minutes to read ``content`` at 200 wpm, rounded up, at least 1."""
    if not content or not content.strip():
        return 1
    words = len(content.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
