# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------
import asyncio
import logging
import re
from typing import Optional, Union
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from ..config import settings
from ..models.scrape import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 8000
MIN_CONTENT_LENGTH = 100
TRUNCATION_MARKER = "..."

NON_CONTENT_SELECTOR = "script, style, nav, footer, header, aside, .nav, .footer, .header, .sidebar"
MAIN_CONTENT_SELECTOR = "main, .main, .content, .main-content, article, .article"
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ExtractionError(Exception):
    """Base class for every way a single extraction can fail."""

    retryable = False


class InvalidUrl(ExtractionError):
    pass


class ExtractionTimeout(ExtractionError):
    retryable = True


class FetchFailed(ExtractionError):
    retryable = True

    def __init__(self, status_code: Optional[int], status_text: str):
        self.status_code = status_code
        self.status_text = status_text
        if status_code is None:
            super().__init__(f"Failed to fetch webpage: {status_text}")
        else:
            super().__init__(f"Failed to fetch webpage: {status_code} {status_text}".rstrip())


class InsufficientContent(ExtractionError):
    pass


# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------

def validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise InvalidUrl("URL is required")

    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise InvalidUrl(f"Invalid URL format: {exc}") from exc

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidUrl("Invalid URL format")
    if any(ch.isspace() for ch in url):
        raise InvalidUrl("Invalid URL format")

    return url


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------

async def _fetch_html(url: str) -> str:
    headers = {"User-Agent": settings.scrape_user_agent}
    timeout = settings.scrape_timeout_seconds

    async def _get() -> httpx.Response:
        async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
            return await client.get(url, headers=headers)

    # httpx applies its timeout per phase; wait_for caps the whole exchange
    try:
        response = await asyncio.wait_for(_get(), timeout=timeout)
    except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
        raise ExtractionTimeout("Request timeout - website took too long to respond") from exc
    except httpx.InvalidURL as exc:
        raise InvalidUrl(f"Invalid URL format: {exc}") from exc
    except httpx.RequestError as exc:
        raise FetchFailed(None, str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        raise FetchFailed(response.status_code, response.reason_phrase)

    return response.text


# ---------------------------------------------------------------------------
# HTML parsing
# ---------------------------------------------------------------------------

def _strip_non_content(soup: BeautifulSoup) -> None:
    # extract() rather than decompose(): a nested match may already be detached
    for element in soup.select(NON_CONTENT_SELECTOR):
        element.extract()


def _main_content(soup: BeautifulSoup) -> str:
    main = soup.select_one(MAIN_CONTENT_SELECTOR)
    text = main.get_text() if main is not None else ""
    if text:
        return text

    body = soup.body
    return body.get_text() if body is not None else soup.get_text()


def _meta_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is None:
        return ""
    return meta.get("content") or ""


def _joined_text(soup: BeautifulSoup, tags: Union[str, list[str]]) -> str:
    return " ".join(el.get_text().strip() for el in soup.find_all(tags))


def extract_text(html: str) -> tuple[str, str]:
    """Pull the salient text out of an HTML document.

    Returns (title, combined_text). The combined text is the non-empty values of
    title, meta description, headings, paragraphs and main content joined by
    single spaces, not yet normalized or truncated.
    """
    soup = BeautifulSoup(html, "lxml")
    _strip_non_content(soup)

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag is not None else ""

    parts = [
        title,
        _meta_description(soup),
        _joined_text(soup, HEADING_TAGS),
        _joined_text(soup, "p"),
        _main_content(soup),
    ]
    return title, " ".join(part for part in parts if part)


# ---------------------------------------------------------------------------
# Text normalization
# ---------------------------------------------------------------------------

def normalize_content(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def truncate_content(text: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


def count_words(content: str) -> int:
    # Single-space split; the "..." marker stays attached to the last token.
    return len(content.split(" "))


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------

async def extract(request: ExtractionRequest) -> ExtractionResult:
    url = validate_url(request.url)

    html = await _fetch_html(url)
    title, raw = extract_text(html)
    content = truncate_content(normalize_content(raw))

    if not content or len(content) < MIN_CONTENT_LENGTH:
        raise InsufficientContent("Unable to extract meaningful content from the webpage")

    logger.info("Extracted %d characters from %s", len(content), url)
    return ExtractionResult(
        content=content,
        title=title,
        source_url=url,
        word_count=count_words(content),
    )


async def extract_many(
    urls: list[str], concurrency: int = 4
) -> list[Union[ExtractionResult, ExtractionError]]:
    """Run several extractions at once, at most `concurrency` in flight.

    Results come back in input order; a failed URL yields its ExtractionError
    instead of a result.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    semaphore = asyncio.Semaphore(concurrency)

    async def _one(url: str) -> Union[ExtractionResult, ExtractionError]:
        async with semaphore:
            try:
                return await extract(ExtractionRequest(url=url))
            except ExtractionError as exc:
                return exc

    return await asyncio.gather(*(_one(url) for url in urls))


# ---------------------------------------------------------------------------
# Local testing
# ---------------------------------------------------------------------------

async def _main():
    import sys
    import json

    if len(sys.argv) < 2:
        print("Usage: python -m bizquiz.services.scraper_service <url>")
        return

    try:
        result = await extract(ExtractionRequest(url=sys.argv[1]))
    except ExtractionError as exc:
        print(f"{type(exc).__name__}: {exc}")
        sys.exit(1)

    print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(_main())
