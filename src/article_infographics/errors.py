"""Exception types raised by the article pipeline.

The HTTP layer maps these to status codes: everything except
``UpstreamError`` is a client-side problem and becomes a 400.
"""

from __future__ import annotations


class ArticleProcessingError(Exception):
    """Base class for pipeline failures."""


class InvalidRequest(ArticleProcessingError, ValueError):
    """Neither a URL nor pasted text was supplied."""

    def __init__(self, message: str = "URL or text content is required") -> None:
        super().__init__(message)


class ScrapeError(ArticleProcessingError):
    """The article could not be retrieved or parsed from its URL."""


class FetchError(ScrapeError):
    """Network failure or non-2xx status while downloading the page."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(ScrapeError):
    """No readable main-content block was found in the HTML."""

    def __init__(self, message: str = "Could not parse article content") -> None:
        super().__init__(message)


class ContentTooShort(ArticleProcessingError, ValueError):
    def __init__(self, message: str = "Article content is too short or empty") -> None:
        super().__init__(message)


class UpstreamError(ArticleProcessingError, RuntimeError):
    """The completion API answered with an error or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
