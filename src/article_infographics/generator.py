"""Chat-completion call that turns an article into slides and social posts.

The model is asked for a JSON object matching the same structure the fallback
generator emits; parsing and validation of its answer live in the workflow.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, APIStatusError, OpenAI

from .config import Settings, get_settings
from .errors import UpstreamError
from .models import ExtractedArticle

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"
SYSTEM_PROMPT_FILE = "system_prompt.txt"

Message = Dict[str, Any]


def _load_prompt_file(filename: str) -> str:
    path = PROMPTS_DIR / filename
    return path.read_text(encoding="utf-8")


def build_client(settings: Settings) -> OpenAI:
    """Create an OpenAI client with the configured timeout and no retries."""
    return OpenAI(
        api_key=_require_api_key(settings),
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout,
        max_retries=0,
    )


def _require_api_key(settings: Settings) -> str:
    if not settings.openai_api_key:
        raise RuntimeError(
            "OPENAI_API_KEY is required. Set it in the environment or .env file."
        )
    return settings.openai_api_key


def build_messages(
    article: ExtractedArticle, *, char_limit: int = 8000
) -> List[Message]:
    """Return the system + user messages for one article."""
    user_message = (
        "Analyze this article and create professional infographics and social "
        "media content:\n\n"
        f"Title: {article.title}\n"
        f"URL: {article.source_url}\n\n"
        "Content:\n"
        f"{article.content[:char_limit]}..."
    )
    return [
        {"role": "system", "content": _load_prompt_file(SYSTEM_PROMPT_FILE)},
        {"role": "user", "content": user_message},
    ]


def complete_chat(
    messages: List[Message],
    settings: Optional[Settings] = None,
    *,
    client: Optional[OpenAI] = None,
) -> str:
    """
    Send ``messages`` to the chat-completion API and return the reply text.

    Raises UpstreamError when the API answers with an error status (status and
    body are kept on the exception) or cannot be reached within the timeout.
    """
    settings = settings or get_settings()
    client = client or build_client(settings)
    logger.info("Requesting completion from %s", settings.llm_model)
    try:
        response = client.chat.completions.create(
            model=settings.llm_model,
            messages=messages,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
    except APIStatusError as exc:
        body = exc.response.text
        raise UpstreamError(
            f"OpenAI API error: {exc.status_code} - {body}",
            status_code=exc.status_code,
            body=body,
        ) from exc
    except APIConnectionError as exc:
        raise UpstreamError(f"OpenAI API unreachable: {exc}") from exc

    if not response.choices:
        return ""
    return response.choices[0].message.content or ""
