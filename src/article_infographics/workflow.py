"""Article-to-infographic pipeline.

Steps run strictly in order:
- normalize (URL or pasted text)
- fetch + extract (URL path only)
- validate length
- generate (chat completion)
- parse, falling back to text statistics when the model output is unusable
- annotate metadata

The network steps are injected callables so tests can run offline; defaults
use httpx/readability for pages and the OpenAI SDK for completions.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .config import Settings, get_settings
from .errors import ContentTooShort, InvalidRequest
from .fallback import build_fallback_content
from .generator import Message, build_messages, complete_chat
from .models import ArticleRequest, ContentMetadata, ExtractedArticle
from .schema import has_valid_slides
from .scraper import DEFAULT_TITLE, extract_article, fetch_html

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], str]
ExtractFn = Callable[[str, str], ExtractedArticle]
CompleteFn = Callable[[List[Message]], str]


# --- Data containers -------------------------------------------------------

@dataclass
class ParsedOutput:
    content: Dict[str, Any]
    used_fallback: bool


@dataclass
class PipelineResult:
    content: Dict[str, Any]
    article: ExtractedArticle
    used_fallback: bool


# --- Steps ----------------------------------------------------------------

def normalize_request(payload: Union[ArticleRequest, Mapping[str, Any]]) -> ArticleRequest:
    """Coerce the payload and reject it when neither url nor text is set."""
    request = (
        payload
        if isinstance(payload, ArticleRequest)
        else ArticleRequest.model_validate(dict(payload))
    )
    if not request.url and not request.text:
        raise InvalidRequest()
    return request


def ensure_min_length(article: ExtractedArticle, min_length: int = 100) -> ExtractedArticle:
    if not article.content or len(article.content) < min_length:
        raise ContentTooShort()
    return article


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _fallback(article: ExtractedArticle, reason: str) -> ParsedOutput:
    logger.warning("%s; using fallback content", reason)
    return ParsedOutput(
        content=build_fallback_content(article.title, article.content),
        used_fallback=True,
    )


def parse_model_output(raw: str | None, article: ExtractedArticle) -> ParsedOutput:
    """
    Use the model's JSON when it parses strictly and carries a non-empty slides
    array; otherwise build fallback content from the article text.

    NaN/Infinity literals are rejected since they cannot be re-serialized.
    """
    try:
        parsed = json.loads(raw or "", parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return _fallback(article, "Model output is not valid JSON")

    try:
        usable = has_valid_slides(parsed)
    except RecursionError:
        usable = False
    if not usable:
        return _fallback(article, "Model output has no usable slides")
    return ParsedOutput(content=parsed, used_fallback=False)


def annotate_metadata(
    content: Dict[str, Any],
    article: ExtractedArticle,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Attach source, title, timestamp and word count; replaces any existing metadata."""
    processed_at = now or datetime.now(timezone.utc)
    metadata = ContentMetadata(
        original_url=article.source_url,
        title=article.title,
        processed_at=processed_at.isoformat(),
        word_count=len(article.content.split()),
    )
    content["metadata"] = metadata.model_dump(by_alias=True)
    return content


# --- Coordinator ----------------------------------------------------------

class ArticlePipeline:
    """Run one request through every step; holds no per-request state."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        fetch_fn: FetchFn | None = None,
        extract_fn: ExtractFn | None = None,
        complete_fn: CompleteFn | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.fetch_fn = fetch_fn or partial(fetch_html, settings=self.settings)
        self.extract_fn = extract_fn or extract_article
        self.complete_fn = complete_fn or partial(complete_chat, settings=self.settings)

    def resolve_article(self, request: ArticleRequest) -> ExtractedArticle:
        """Pasted text wins over the URL; otherwise scrape the URL."""
        source_url = request.url or ""
        if request.text:
            return ExtractedArticle(
                title=DEFAULT_TITLE, content=request.text, source_url=source_url
            )
        logger.info("Scraping article from %s", source_url)
        page = self.fetch_fn(source_url)
        return self.extract_fn(page, source_url)

    def run(self, payload: Union[ArticleRequest, Mapping[str, Any]]) -> PipelineResult:
        """
        Process one request end to end.

        Raises InvalidRequest, ScrapeError or ContentTooShort for bad input and
        UpstreamError when the completion call fails. Unusable model output is
        replaced by fallback content and never raises.
        """
        request = normalize_request(payload)
        article = self.resolve_article(request)
        ensure_min_length(article, self.settings.min_content_length)

        messages = build_messages(article, char_limit=self.settings.content_char_limit)
        raw_output = self.complete_fn(messages)
        parsed = parse_model_output(raw_output, article)

        content = annotate_metadata(parsed.content, article)
        logger.info(
            "Processed %r: %d slide(s)%s",
            article.title,
            len(content["slides"]),
            " (fallback)" if parsed.used_fallback else "",
        )
        return PipelineResult(content=content, article=article, used_fallback=parsed.used_fallback)


def process_article(
    payload: Union[ArticleRequest, Mapping[str, Any]],
    settings: Optional[Settings] = None,
    **overrides: Any,
) -> PipelineResult:
    """Convenience wrapper: build a pipeline and run a single request."""
    return ArticlePipeline(settings, **overrides).run(payload)
