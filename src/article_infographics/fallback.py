"""Deterministic slides and posts derived from raw text statistics.

Used whenever the model's answer cannot be trusted. Every function here is
total over strings: no input makes it raise.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List

from .models import (
    ChartData,
    ChartPoint,
    InfographicSlide,
    ProcessedContent,
    Statistic,
    StructuredPost,
)

HEADLINE_LIMIT = 60
KEY_POINT_LIMIT = 80
MAX_KEY_POINTS = 4
MIN_SENTENCE_LENGTH = 20
WORDS_PER_MINUTE = 200
WORD_COUNT_CHART_CAP = 2000


def split_words(content: str) -> List[str]:
    return content.split()


def split_sentences(content: str) -> List[str]:
    """
    Return trimmed ``.``-terminated fragments longer than 20 characters.

    Text after the final period is not a finished sentence and is dropped.
    """
    fragments = content.split(".")[:-1]
    trimmed = (fragment.strip() for fragment in fragments)
    return [sentence for sentence in trimmed if len(sentence) > MIN_SENTENCE_LENGTH]


def count_paragraphs(content: str) -> int:
    return len(content.split("\n\n"))


def read_minutes(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_MINUTE)


def _summary_slide(title: str, content: str) -> InfographicSlide:
    word_count = len(split_words(content))
    sentences = split_sentences(content)
    return InfographicSlide(
        headline=title[:HEADLINE_LIMIT],
        subtitle="Executive Summary",
        key_points=[s[:KEY_POINT_LIMIT] for s in sentences[:MAX_KEY_POINTS]],
        statistics=[
            Statistic(value=str(word_count), label="Words"),
            Statistic(value=str(read_minutes(word_count)), label="Min Read"),
        ],
        chart_data=ChartData(
            type="bar",
            title="Content Analysis",
            data=[
                ChartPoint(name="Word Count", value=min(word_count, WORD_COUNT_CHART_CAP)),
                ChartPoint(name="Sentences", value=len(sentences)),
                ChartPoint(name="Paragraphs", value=count_paragraphs(content)),
            ],
        ),
    )


def _social_posts(title: str, content: str) -> Dict[str, Any]:
    sentences = split_sentences(content)
    first_sentence = sentences[0] if sentences else ""
    minutes = read_minutes(len(split_words(content)))
    return {
        "twitter": (
            f"\U0001F4CA Just analyzed: {title}\n\n"
            f"Key insights from this {minutes}-minute read.\n\n"
            "#BusinessIntelligence #DataAnalysis"
        ),
        "linkedin": StructuredPost(
            hook=f"\U0001F4A1 Insights from: {title}",
            content=f"{first_sentence}...",
            call_to_action="What are your thoughts on this analysis?",
            hashtags=["#BusinessStrategy", "#ExecutiveInsights", "#ProfessionalDevelopment"],
        ),
        "instagram": StructuredPost(
            hook="\U0001F4C8 Business insights drop:",
            content=f"{title} - Key takeaways in our latest analysis",
            call_to_action="Save this post and share it with your team.",
            hashtags=["#business", "#insights", "#strategy", "#consulting"],
        ),
        "youtube": (
            f"Video script: Analyzing {title}\n\n"
            "Intro: Today we're breaking down...\n"
            f"Main points: {' '.join(sentences[:3])}\n"
            "Conclusion: These insights show..."
        ),
        "facebook": (
            f"{title}\n\n{first_sentence}\n\n"
            "Read our full analysis and share your thoughts!"
        ),
    }


def build_fallback_content(title: str, content: str) -> Dict[str, Any]:
    """Return a one-slide ProcessedContent payload (without metadata)."""
    processed = ProcessedContent(
        slides=[_summary_slide(title, content)],
        social_posts=_social_posts(title, content),
    )
    return processed.model_dump(by_alias=True, exclude={"metadata"})
