"""Content models and prompt builders."""

from .models import (
    BrandVoiceProfile,
    EditedImage,
    EditResult,
    FilePart,
    GenerationRequest,
    ImageResult,
    PostAuthor,
    PostFormat,
    PostMedia,
    PostSearchResult,
    PostStats,
    SearchItem,
    SearchResult,
    Source,
    SynthesizedPost,
    TextResult,
    ThreadResult,
    Tone,
    TrendingTopic,
    TrendResult,
    VideoResult,
)
from .responses import ProofreadResponse, ThreadResponse

__all__ = [
    "BrandVoiceProfile",
    "EditedImage",
    "EditResult",
    "FilePart",
    "GenerationRequest",
    "ImageResult",
    "PostAuthor",
    "PostFormat",
    "PostMedia",
    "PostSearchResult",
    "PostStats",
    "SearchItem",
    "SearchResult",
    "Source",
    "SynthesizedPost",
    "TextResult",
    "ThreadResult",
    "Tone",
    "TrendingTopic",
    "TrendResult",
    "VideoResult",
    "ProofreadResponse",
    "ThreadResponse",
]
