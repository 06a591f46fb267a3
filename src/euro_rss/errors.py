"""Exceptions raised while generating feeds."""

from typing import Optional


class FetchError(Exception):
    """Base class for failures to retrieve a source page."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class FetchTimeout(FetchError):
    """The source did not answer within the request timeout."""


class NetworkError(FetchError):
    """Connection level failure (DNS, refused connection, TLS...)."""


class DecodeError(FetchError):
    """The body could not be decompressed or decoded."""


class TooManyRedirects(FetchError):
    """The source redirected more often than allowed."""


class BodyTooLarge(FetchError):
    """The body exceeded the configured maximum size."""


class HttpStatusError(FetchError):
    """The source answered with a non-2xx status."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(f"HTTP status {status_code}", url=url)
        self.status_code = status_code


class ExtractionEmpty(Exception):
    """No items could be extracted from any source page. Triggers fallback content."""


class RenderError(Exception):
    """Invalid input reached the renderer."""
