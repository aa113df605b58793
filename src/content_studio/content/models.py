"""Data models for generation requests and results.

All models are frozen value objects: built once per call and owned by the
calling operation. Binary payloads travel as base64 strings so every result
stays JSON-serializable for the UI layer.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Tone(str, Enum):
    """Writing tone of a post."""

    DEFAULT = "default"
    AUTHORITY = "authority"
    STORYTELLING = "storytelling"
    ANALYTICAL = "analytical"
    CONVERSATIONAL = "conversational"
    INSPIRATIONAL = "inspirational"


class PostFormat(str, Enum):
    """Structural format of a post."""

    DEFAULT = "default"
    ANNOUNCEMENT = "announcement"
    LISTICLE = "listicle"
    HOW_TO = "how_to"
    QUESTION = "question"
    QUICK_TIP = "quick_tip"
    SUPPORT_STATEMENT = "support_statement"


class Source(_Frozen):
    """A citation attached to grounded results."""

    uri: str
    title: str


class FilePart(_Frozen):
    """Inline file sent with a request."""

    mime_type: str
    data: str  # base64 encoded


class BrandVoiceProfile(_Frozen):
    """Custom brand voice that overrides tone instructions."""

    tone_and_style: str = ""
    target_audience: str = ""
    key_topics: str = ""
    topics_to_avoid: str = ""

    @property
    def is_empty(self) -> bool:
        return not (
            self.tone_and_style or self.target_audience or self.key_topics or self.topics_to_avoid
        )


class GenerationRequest(_Frozen):
    """Input of a text or thread generation call."""

    prompt: str
    source: Source | None = None
    audience: str | None = None
    tone: Tone | str | None = None
    format: PostFormat | str | None = None
    keywords: str | None = None
    brand_voice: BrandVoiceProfile | None = None
    file: FilePart | None = None
    use_web_search: bool = False


# =============================================================================
# Results
# =============================================================================


class TextResult(_Frozen):
    """A single post or summary."""

    kind: Literal["text"] = "text"
    text: str
    sources: list[Source] = Field(default_factory=list)


class ThreadResult(_Frozen):
    """An ordered thread of posts."""

    kind: Literal["thread"] = "thread"
    posts: list[str]
    sources: list[Source] = Field(default_factory=list)


class ImageResult(_Frozen):
    """Generated images as base64 payloads."""

    kind: Literal["image"] = "image"
    images: list[str]
    mime_type: str = "image/jpeg"


class EditedImage(_Frozen):
    """Inline image returned by the editing model."""

    data: str  # base64 encoded
    mime_type: str


class EditResult(_Frozen):
    """Outcome of an image edit."""

    kind: Literal["edit"] = "edit"
    text: str = ""
    image: EditedImage | None = None


class VideoResult(_Frozen):
    """Locally resolvable handle to a downloaded video."""

    kind: Literal["video"] = "video"
    media_url: str
    path: Path
    mime_type: str = "video/mp4"


class SearchItem(_Frozen):
    """One grounded web search hit."""

    title: str
    uri: str
    summary: str


class SearchResult(_Frozen):
    """Ordered web search hits."""

    kind: Literal["search"] = "search"
    items: list[SearchItem]


class TrendingTopic(_Frozen):
    """A trending topic with a one-line explanation."""

    topic: str
    description: str


class TrendResult(_Frozen):
    """Trending topics plus the grounding sources used."""

    kind: Literal["trends"] = "trends"
    trends: list[TrendingTopic]
    sources: list[Source] = Field(default_factory=list)


class PostAuthor(_Frozen):
    """Author block of a synthesized post."""

    name: str
    handle: str
    avatar_url: str
    verified: bool = False


class PostStats(_Frozen):
    """Engagement counters of a synthesized post."""

    likes: int = 0
    retweets: int = 0
    impressions: int = 0
    replies: int = 0


class PostMedia(_Frozen):
    """Media attached to a synthesized post."""

    type: Literal["image", "video"]
    url: str


class SynthesizedPost(_Frozen):
    """A post-like record synthesized from web search results."""

    id: str
    content: str
    author: PostAuthor
    stats: PostStats = Field(default_factory=PostStats)
    media: PostMedia | None = None
    posted_at: datetime = Field(default_factory=datetime.now)


class PostSearchResult(_Frozen):
    """Synthesized posts plus the grounding sources used."""

    kind: Literal["posts"] = "posts"
    posts: list[SynthesizedPost]
    sources: list[Source] = Field(default_factory=list)
