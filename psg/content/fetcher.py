"""
External link content fetcher.

Downloads the document behind a URL activity so its dominant tag can be
classified. Any failure (connection, timeout, HTTP error) is reported as
``None`` and the module falls back to an unknown tag.

Hardening:
- Whole-download deadline and body size cap from configuration
- Retry with backoff on transient server errors
- Only text responses are decoded
"""

from __future__ import annotations

import time

import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ProtocolError, ReadTimeoutError
from urllib3.util.retry import Retry

from config import get_settings

CHUNK_SIZE = 16_384
DEFAULT_BACKOFF_FACTOR = 0.5
RETRY_STATUS_CODES = [500, 502, 503, 504]
USER_AGENT = "psg-engine/1.0 (+learning style classification)"


class ContentFetcher:
    """Best-effort HTTP GET for linked learning resources."""

    def __init__(
        self,
        timeout: float | None = None,
        retries: int | None = None,
        max_bytes: int | None = None,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize fetcher with retry logic.

        Args:
            timeout: Request timeout in seconds (default from config)
            retries: Number of retry attempts (default from config)
            max_bytes: Largest body read before giving up (default from config)
            backoff_factor: Exponential backoff factor between retries
            session: Preconfigured session, mainly for tests
        """
        settings = get_settings()
        self.timeout = timeout if timeout is not None else settings.content_fetch_timeout
        self.max_bytes = max_bytes if max_bytes is not None else settings.content_fetch_max_bytes
        retries = retries if retries is not None else settings.content_fetch_retries

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=retries,
                backoff_factor=backoff_factor,
                status_forcelist=RETRY_STATUS_CODES,
                allowed_methods=["GET"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            session.headers["User-Agent"] = USER_AGENT
        self.session = session

        logger.debug("Initialized content fetcher: timeout={}s, retries={}", self.timeout, retries)

    def fetch(self, url: str | None) -> str | None:
        """
        Fetch a document body.

        The body is streamed so the whole download stays within ``timeout``
        seconds and ``max_bytes`` bytes.

        Args:
            url: Absolute http(s) URL

        Returns:
            Response text, or None when the document could not be retrieved
        """
        if not url or not url.lower().startswith(("http://", "https://")):
            logger.debug("Skipping non-http link: {!r}", url)
            return None

        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            try:
                response.raise_for_status()

                content_type = response.headers.get("Content-Type", "")
                if content_type and "text" not in content_type and "xml" not in content_type:
                    logger.debug("Ignoring non-text content at {} ({})", url, content_type)
                    return None

                body = self._read_body(url, response, deadline)
            finally:
                response.close()
        except requests.RequestException as e:
            logger.warning("Could not fetch {}: {}", url, e)
            return None

        if body is None:
            return None
        return body.decode(response.encoding or "utf-8", errors="replace")

    def _read_body(self, url: str, response: requests.Response, deadline: float) -> bytes | None:
        # read1 returns whatever has arrived instead of waiting for a full chunk
        chunks: list[bytes] = []
        size = 0
        while True:
            try:
                chunk = response.raw.read1(CHUNK_SIZE, decode_content=True)
            except (ProtocolError, ReadTimeoutError) as e:
                logger.warning("Could not fetch {}: {}", url, e)
                return None
            if not chunk:
                break
            size += len(chunk)
            if size > self.max_bytes:
                logger.warning("Gave up on {}: body larger than {} bytes", url, self.max_bytes)
                return None
            if time.monotonic() > deadline:
                logger.warning("Gave up on {}: download exceeded {}s", url, self.timeout)
                return None
            chunks.append(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        self.session.close()
