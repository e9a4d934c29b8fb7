# ============================================================================
# src/referral_summarizer/extractors/url_extractor.py
# ============================================================================
"""
Remote page extraction.

Bounded HTTP GET (aiohttp), markup stripped to visible text with
BeautifulSoup. Pages with too little readable text (JS-rendered shells,
error pages, login walls) are rejected before any model call.
"""

import asyncio
import logging
import re
from http import HTTPStatus
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup

from .base import FetchResponse, Fetcher
from ..core.context import ExtractedContent, SourceMethod
from ..utils.exceptions import FetchFailedError, InsufficientContentError

logger = logging.getLogger(__name__)

USER_AGENT = "referral-summarizer/0.1 (+clinical referral summarization)"
CHUNK_SIZE = 64 * 1024

# Never rendered as visible text
INVISIBLE_TAGS = ["head", "title", "script", "style", "noscript", "template"]

_WHITESPACE_RE = re.compile(r"\s+")


async def fetch_url(url: str, timeout: float, max_bytes: int) -> FetchResponse:
    """
    Default fetcher: GET with a total timeout, body read capped at max_bytes.

    Raises:
        aiohttp.ClientError, asyncio.TimeoutError
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(
        timeout=client_timeout,
        headers={"User-Agent": USER_AGENT},
    ) as session:
        async with session.get(url, allow_redirects=True) as response:
            chunks = []
            total = 0
            async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                remaining = max_bytes - total
                chunks.append(chunk[:remaining])
                total += len(chunks[-1])
                if total >= max_bytes:
                    logger.warning(f"Response body truncated at {max_bytes} bytes: {url}")
                    break

            return FetchResponse(
                status=response.status,
                body=b"".join(chunks),
                content_type=response.headers.get("Content-Type"),
            )


def html_to_text(body: bytes) -> str:
    """Visible body text with whitespace collapsed."""
    soup = BeautifulSoup(body, "html.parser")

    for tag in soup(INVISIBLE_TAGS):
        tag.decompose()

    root = soup.body or soup
    text = root.get_text(" ", strip=True)
    return _WHITESPACE_RE.sub(" ", text).strip()


class UrlExtractor:
    """
    Args:
        min_content_chars: Pages with less visible text fail with InsufficientContentError
        fetch_timeout: Total fetch timeout (seconds)
        max_bytes: Response body cap
        fetcher: Replaces the aiohttp fetcher (tests, proxies)
    """

    def __init__(
        self,
        min_content_chars: int = 50,
        fetch_timeout: float = 15.0,
        max_bytes: int = 5 * 1024 * 1024,
        fetcher: Optional[Fetcher] = None,
    ):
        self.min_content_chars = min_content_chars
        self.fetch_timeout = fetch_timeout
        self.max_bytes = max_bytes
        self.fetcher = fetcher or fetch_url
        self.logger = logging.getLogger(__name__)

    async def extract(self, url: str) -> ExtractedContent:
        """
        Raises:
            FetchFailedError: transport error, timeout or non-2xx status
            InsufficientContentError: visible text below min_content_chars
        """
        try:
            response = await self.fetcher(url, self.fetch_timeout, self.max_bytes)
        except asyncio.TimeoutError as e:
            raise FetchFailedError(url, reason=f"timed out after {self.fetch_timeout:g}s") from e
        except aiohttp.ClientError as e:
            raise FetchFailedError(url, reason=str(e) or e.__class__.__name__) from e

        if not 200 <= response.status < 300:
            try:
                reason = HTTPStatus(response.status).phrase
            except ValueError:
                reason = None
            raise FetchFailedError(url, status_code=response.status, reason=reason)

        text = html_to_text(response.body)
        self.logger.info(f"Fetched {len(response.body)} bytes, {len(text)} visible chars from {url}")

        if len(text) < self.min_content_chars:
            raise InsufficientContentError(len(text), self.min_content_chars)

        return ExtractedContent(text=text, source_method=SourceMethod.WEB_SCRAPE)
