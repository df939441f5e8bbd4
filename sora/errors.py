"""Error taxonomy for article extraction.

Every failure of an extraction call surfaces as exactly one
:class:`ExtractionError` subclass carrying the URL that was requested.
None of them are retried by the extractor.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for all terminal extraction failures."""

    def __init__(
        self, url: str, message: str, cause: BaseException | None = None,
    ):
        self.url = url
        self.message = message
        self.cause = cause
        super().__init__(f"{message} ({url})")


class Timeout(ExtractionError):
    """The fetch did not complete within the deadline."""

    def __init__(
        self, url: str, deadline: float, cause: BaseException | None = None,
    ):
        self.deadline = deadline
        super().__init__(
            url, f"Request timeout: took longer than {deadline:g}s", cause,
        )


class FetchFailed(ExtractionError):
    """Non-2xx response or transport-level failure."""

    def __init__(
        self,
        url: str,
        status: int | None = None,
        status_text: str | None = None,
        cause: BaseException | None = None,
    ):
        self.status = status
        self.status_text = status_text
        if status is not None:
            message = f"Failed to fetch: {status} {status_text or ''}".rstrip()
        elif cause is not None:
            message = f"Failed to fetch: {type(cause).__name__}: {cause}"
        else:
            message = "Failed to fetch"
        super().__init__(url, message, cause)


class ParseFailed(ExtractionError):
    """The response body could not be treated as text markup."""

    def __init__(
        self, url: str, reason: str, cause: BaseException | None = None,
    ):
        self.reason = reason
        super().__init__(url, f"Failed to parse document: {reason}", cause)


class ExtractionFailed(ExtractionError):
    """Unexpected internal failure while extracting or normalizing fields."""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(
            url, f"Failed to extract article: {type(cause).__name__}: {cause}",
            cause,
        )
