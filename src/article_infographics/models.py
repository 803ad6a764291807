"""Data models for the article-to-infographic pipeline."""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serialize with camelCase keys, the shape the browser client consumes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleRequest(BaseModel):
    """Incoming request: a URL to scrape or pasted article text."""

    url: Optional[str] = None
    text: Optional[str] = None


class ExtractedArticle(_CamelModel):
    """Readable article recovered from a page or from pasted text."""

    title: str
    content: str = Field(..., description="Plain text body, no markup.")
    source_url: str = ""


class Statistic(_CamelModel):
    value: str
    label: str


class ChartPoint(_CamelModel):
    name: str
    value: Union[int, float]


class ChartData(_CamelModel):
    type: Literal["bar", "pie", "line"]
    title: str
    data: List[ChartPoint]


class InfographicSlide(_CamelModel):
    """One infographic slide; headline and key points are kept short by convention."""

    headline: str
    subtitle: str
    key_points: List[str]
    statistics: List[Statistic]
    chart_data: ChartData


class StructuredPost(_CamelModel):
    hook: str
    content: str
    call_to_action: str
    hashtags: List[str]


SocialPost = Union[str, StructuredPost]


class ContentMetadata(_CamelModel):
    original_url: str
    title: str
    processed_at: str
    word_count: int


class ProcessedContent(_CamelModel):
    """Slides, social posts and metadata returned to the client."""

    slides: List[InfographicSlide] = Field(..., min_length=1, max_length=7)
    social_posts: Dict[str, SocialPost]
    metadata: Optional[ContentMetadata] = None
