"""Download article pages and reduce them to readable plain text."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from lxml import etree
from lxml import html as lxml_html
from readability import Document
from readability.readability import Unparseable

from .config import Settings, get_settings
from .errors import ExtractionError, FetchError
from .models import ExtractedArticle

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Article Analysis"

# Elements whose text should start on its own paragraph.
_BLOCK_TAGS = (
    "p",
    "div",
    "section",
    "article",
    "blockquote",
    "pre",
    "li",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "br",
    "tr",
)


def fetch_html(
    url: str,
    settings: Optional[Settings] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> str:
    """
    GET the page at ``url`` with a browser user agent and return its HTML.

    The request is bounded by ``settings.fetch_timeout``; on expiry httpx
    aborts the connection and a FetchError is raised. A caller-supplied client
    is used as-is (tests pass one with a mock transport).
    """
    settings = settings or get_settings()
    headers = {"User-Agent": settings.user_agent}
    owns_client = client is None
    active = client or httpx.Client(
        follow_redirects=True, timeout=settings.fetch_timeout
    )
    try:
        response = active.get(url, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        raise FetchError(f"Request failed: {exc}") from exc
    finally:
        if owns_client:
            active.close()

    if not response.is_success:
        logger.warning("Fetching %s returned HTTP %s", url, response.status_code)
        raise FetchError(
            f"HTTP error! status: {response.status_code}",
            status_code=response.status_code,
        )
    logger.debug("Fetched %s (%d bytes)", url, len(response.content))
    return response.text


def html_to_text(fragment: str) -> str:
    """Flatten an HTML fragment to text, one paragraph per block element."""
    tree = lxml_html.fromstring(fragment)
    for element in tree.iter(*_BLOCK_TAGS):
        element.tail = "\n" + (element.tail or "")
    text = tree.text_content()
    lines = [" ".join(line.split()) for line in text.splitlines()]
    return "\n\n".join(line for line in lines if line)


def _clean_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title or title == "[no-title]":
        return DEFAULT_TITLE
    return title


def extract_article(html: str, url: str = "") -> ExtractedArticle:
    """
    Pick the main content block with readability and return it as plain text.

    Raises ExtractionError when readability cannot find a candidate node or
    the candidate holds no text.
    """
    if not html or not html.strip():
        raise ExtractionError()
    try:
        doc = Document(html, url=url or None)
        summary_html = doc.summary(html_partial=True)
        title = doc.short_title()
    except Unparseable as exc:
        raise ExtractionError(f"Could not parse article content: {exc}") from exc

    try:
        content = html_to_text(summary_html) if summary_html.strip() else ""
    except etree.ParserError as exc:
        raise ExtractionError(f"Could not parse article content: {exc}") from exc
    if not content:
        raise ExtractionError()
    logger.debug("Extracted %d characters from %s", len(content), url or "<html>")
    return ExtractedArticle(title=_clean_title(title), content=content, source_url=url)
