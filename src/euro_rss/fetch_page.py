import logging
from typing import Dict, Optional
from urllib.parse import urlparse

import requests
from urllib3.exceptions import ReadTimeoutError

from euro_rss.errors import (
    BodyTooLarge,
    DecodeError,
    FetchTimeout,
    HttpStatusError,
    NetworkError,
    TooManyRedirects,
)
from euro_rss.models import BROWSER_LIKE_PROFILE, GENERIC_BOT_PROFILE, HeaderProfile

HEADER_PROFILES: Dict[HeaderProfile, Dict[str, str]] = {
    GENERIC_BOT_PROFILE: {
        "User-Agent": "Euro RSS Generator/1.0 (RSS aggregator compatible)",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
    },
    BROWSER_LIKE_PROFILE: {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    },
}

# Hosts rejecting clients that do not look like a browser.
BROWSER_ONLY_HOSTS = (
    "consilium.europa.eu",
    "nato.int",
)

CHUNK_SIZE = 64 * 1024

def is_read_timeout(error: requests.exceptions.ConnectionError) -> bool:
    """
    Whether a connection error raised while streaming the body is a read timeout.
    """
    causes = list(error.args) + [error.__cause__, error.__context__]
    return any(isinstance(cause, ReadTimeoutError) for cause in causes)

def profile_for_url(url: str) -> HeaderProfile:
    """
    Select the header profile for a URL based on its hostname.
    """
    host = (urlparse(url).hostname or "").lower()
    for browser_only_host in BROWSER_ONLY_HOSTS:
        if host == browser_only_host or host.endswith(f".{browser_only_host}"):
            return BROWSER_LIKE_PROFILE
    return GENERIC_BOT_PROFILE

class PageFetcher:
    """
    Fetches source pages with a single GET request.
    """
    def __init__(
            self,
            timeout: float = 15, # Request timeout in seconds.
            max_redirects: int = 5, # Maximum number of redirects to follow.
            max_body_bytes: int = 5 * 1024 * 1024, # Maximum accepted body size.
            *,
            session: Optional[requests.Session] = None # if provided, it is used for every request
        ):
        self.timeout = timeout
        self.max_body_bytes = max_body_bytes
        self.session = session or requests.Session()
        self.session.max_redirects = max_redirects

    def fetch(
            self,
            url: str, # Absolute URL of the page.
            header_profile: Optional[HeaderProfile] = None, # Selected from the hostname if None.
        ) -> str:
        """
        Fetch a page and return its body as text.

        Raises:
            FetchError: One of its subclasses describing why the page could not be retrieved.
        """
        profile = header_profile or profile_for_url(url)
        headers = HEADER_PROFILES.get(profile)
        if headers is None:
            raise ValueError(f"Unknown header profile: {profile}")

        logging.info(f"Fetching {url} with the \"{profile}\" header profile.")
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=self.timeout,
                stream=True,
            )
        except requests.exceptions.Timeout as e:
            raise FetchTimeout(f"Request to {url} timed out after {self.timeout}s", url=url) from e
        except requests.exceptions.TooManyRedirects as e:
            raise TooManyRedirects(f"Too many redirects while fetching {url}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Failed to fetch {url}: {e}", url=url) from e

        try:
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(response.status_code, url=url)
            body = self._read_body(response, url)
            text = self._decode_body(body, response)
        finally:
            response.close()

        logging.info(f"Downloaded {len(text)} characters from {url}.")
        return text

    def _read_body(
            self,
            response: requests.Response,
            url: str,
        ) -> bytes:
        """
        Read the decompressed body, aborting once it grows past the size limit.
        """
        declared_length = response.headers.get("Content-Length")
        if declared_length and declared_length.isdigit() and int(declared_length) > self.max_body_bytes:
            raise BodyTooLarge(f"{url} declares {declared_length} bytes, limit is {self.max_body_bytes}", url=url)

        chunks = []
        size = 0
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                size += len(chunk)
                if size > self.max_body_bytes:
                    raise BodyTooLarge(f"{url} body exceeds {self.max_body_bytes} bytes", url=url)
                chunks.append(chunk)
        except requests.exceptions.ContentDecodingError as e:
            raise DecodeError(f"Failed to decompress the body of {url}: {e}", url=url) from e
        except requests.exceptions.ConnectionError as e:
            # A stalled body surfaces as a ConnectionError wrapping urllib3's ReadTimeoutError.
            if is_read_timeout(e):
                raise FetchTimeout(f"Reading {url} timed out after {self.timeout}s", url=url) from e
            raise NetworkError(f"Failed to read {url}: {e}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Failed to read {url}: {e}", url=url) from e
        return b"".join(chunks)

    @staticmethod
    def _decode_body(
            body: bytes,
            response: requests.Response,
        ) -> str:
        """
        Decode the body with the declared charset, UTF-8 if none is declared.
        """
        content_type = response.headers.get("Content-Type", "")
        encoding = response.encoding if "charset" in content_type.lower() and response.encoding else "utf-8"
        try:
            return body.decode(encoding, errors="replace")
        except LookupError:
            logging.warning(f"Unknown charset \"{encoding}\", decoding as UTF-8.")
            return body.decode("utf-8", errors="replace")
