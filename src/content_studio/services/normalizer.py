"""Response normalizer - turns free-form model text into typed results.

The model is asked for JSON or delimited text but does not reliably comply:
answers arrive wrapped in Markdown fences, with extra keys, flattened fields
or as a polite refusal with HTTP 200. The helpers here are pure functions
over the raw text (or the provider response for grounding sources) and raise
instead of guessing, except for ``parse_thread_lenient`` which is the single
best-effort fallback used by chat refinement.

Usage:
    posts = parse_json_thread(response.text)
    posts = parse_delimited_thread("first ||| second ||| ")  # ["first", "second"]
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from ..constants import SEARCH_MAX_RESULTS, THREAD_DELIMITER
from ..content.models import (
    PostAuthor,
    PostMedia,
    PostStats,
    SearchItem,
    Source,
    SynthesizedPost,
    TrendingTopic,
)
from ..content.responses import ThreadResponse
from . import field_repair
from .errors import MalformedResponseError, RefusalError

_logger = logging.getLogger("ai_calls")

REFUSAL_PHRASES: tuple[str, ...] = (
    "i cannot",
    "i am unable",
    "i'm unable",
    "no puedo",
    "soy incapaz",
    "unable to access",
    "no se encontraron",
)

DEFAULT_REFUSAL_MESSAGE = (
    "La IA no pudo procesar esta solicitud. Esto puede ocurrir con temas sensibles o si no "
    "se encuentran resultados relevantes. Por favor, prueba con una consulta diferente."
)


# =============================================================================
# Text cleanup
# =============================================================================


def strip_code_fences(text: str | None) -> str:
    """Remove a Markdown code-fence wrapper and surrounding whitespace.

    Handles ```` ```json ... ``` ```` anywhere in the text (the fenced block
    wins over any chatter around it) and a bare ```` ``` ... ``` ```` wrapper.
    Text without fences is only trimmed.
    """
    cleaned = (text or "").strip()
    if "```json" in cleaned:
        inner = cleaned.split("```json", 1)[1]
        return inner.split("```", 1)[0].strip()
    if cleaned.startswith("```") and cleaned.endswith("```") and len(cleaned) >= 6:
        return cleaned[3:-3].strip()
    return cleaned


def parse_plain(text: str | None) -> str:
    """Use the output verbatim as a single unit."""
    return text or ""


def is_refusal(text: str | None) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in REFUSAL_PHRASES)


def ensure_not_refusal(text: str | None, message: str = DEFAULT_REFUSAL_MESSAGE) -> str:
    """Return ``text`` unchanged unless it is empty or a model refusal.

    Raises:
        RefusalError: If the text is blank or contains a refusal phrase.
    """
    if not text or not text.strip() or is_refusal(text):
        _logger.info(f"AI_REFUSAL | text:{(text or '')[:120]!r}")
        raise RefusalError(message)
    return text


# =============================================================================
# JSON
# =============================================================================


def load_json_object(text: str | None) -> dict[str, Any]:
    """Parse fenced or bare JSON that must be an object.

    Raises:
        json.JSONDecodeError: On invalid JSON.
        MalformedResponseError: If the JSON is valid but not an object.
    """
    data = json.loads(strip_code_fences(text))
    if not isinstance(data, dict):
        raise MalformedResponseError(
            "Error de API (Gemini): La IA devolvió una respuesta inválida o incompleta. "
            "Esto puede ocurrir bajo alta demanda. Por favor, inténtalo de nuevo."
        )
    return data


def parse_model(text: str | None, model: type[BaseModel]) -> BaseModel:
    """Parse cleaned JSON into ``model``; validation errors propagate."""
    return model.model_validate(load_json_object(text))


def parse_json_thread(text: str | None, key: str = "thread") -> list[str]:
    """Parse a JSON object holding one array-of-strings field.

    Args:
        text: Raw model output, possibly fenced.
        key: Name of the array field.

    Returns:
        The posts in order. A missing key yields an empty list.

    Raises:
        json.JSONDecodeError: On invalid JSON.
        pydantic.ValidationError: If the field is not a list of strings.
    """
    value = load_json_object(text).get(key)
    if value is None:
        return []
    return list(ThreadResponse.model_validate({"thread": value}).thread)


def parse_thread_lenient(text: str | None) -> list[str]:
    """Best-effort thread parse for chat refinement.

    A JSON object yields its ``thread`` value: list items are coerced to
    strings (nulls and blanks dropped), a bare string becomes one post and a
    missing key yields no posts. Anything that is not a JSON object, or a
    ``thread`` of another type, is split on newlines with empty lines dropped.
    """
    try:
        data = load_json_object(text)
    except (json.JSONDecodeError, MalformedResponseError):
        data = None

    value = data.get("thread") if data is not None else None
    if data is not None and value is None:
        return []
    if isinstance(value, list):
        posts = [str(post) for post in value if post is not None]
        return [post for post in posts if post.strip()]
    if isinstance(value, str):
        return [value] if value.strip() else []

    _logger.info("AI_PARSE_FALLBACK | refinement answer is not a JSON thread, splitting lines")
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def parse_delimited_thread(text: str | None, delimiter: str = THREAD_DELIMITER) -> list[str]:
    """Split on the thread delimiter, trim each segment, drop empties."""
    return [segment.strip() for segment in (text or "").split(delimiter) if segment.strip()]


# =============================================================================
# Structured lists with field repair
# =============================================================================


def _items(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_search_items(text: str | None, limit: int = SEARCH_MAX_RESULTS) -> list[SearchItem]:
    """Parse ``{"results": [...]}`` into at most ``limit`` search hits.

    A non-JSON answer that reads as a refusal raises RefusalError; any other
    invalid JSON propagates as a decode error.
    """
    try:
        data = load_json_object(text)
    except json.JSONDecodeError:
        if is_refusal(text):
            raise RefusalError(
                "La IA no pudo procesar esta búsqueda. Esto puede ocurrir con temas sensibles "
                "o si no se encuentran resultados relevantes. Por favor, prueba con una "
                "consulta diferente."
            )
        raise

    items: list[SearchItem] = []
    for item in _items(data, "results"):
        uri = field_repair.search_uri(item)
        if not uri:
            continue
        items.append(
            SearchItem(
                title=field_repair.search_title(item),
                uri=uri,
                summary=field_repair.search_summary(item),
            )
        )
        if len(items) >= limit:
            break
    return items


def parse_trending_topics(text: str | None) -> list[TrendingTopic]:
    """Parse ``{"trends": [...]}``; entries without a topic are dropped."""
    data = load_json_object(text)
    trends = []
    for item in _items(data, "trends"):
        topic = field_repair.trend_topic(item)
        if topic:
            trends.append(
                TrendingTopic(topic=topic, description=field_repair.trend_description(item))
            )
    return trends


def repair_post(item: dict[str, Any], index: int, posted_at: datetime | None = None) -> SynthesizedPost:
    """Build a well-formed post from one loosely shaped element."""
    media = field_repair.media(item)
    return SynthesizedPost(
        id=field_repair.post_id(item, index),
        content=field_repair.post_content(item),
        author=PostAuthor(
            name=field_repair.author_name(item),
            handle=field_repair.author_handle(item),
            avatar_url=field_repair.avatar_url(item),
            verified=field_repair.verified(item),
        ),
        stats=PostStats(**field_repair.stats(item)),
        media=PostMedia(**media) if media else None,
        posted_at=posted_at or datetime.now(),
    )


def parse_synthesized_posts(text: str | None) -> list[SynthesizedPost]:
    """Parse ``{"tweets": [...]}`` into repaired post records."""
    data = load_json_object(text)
    posted_at = datetime.now()
    return [
        repair_post(item, index, posted_at)
        for index, item in enumerate(_items(data, "tweets"))
    ]


# =============================================================================
# Grounding sources
# =============================================================================


def extract_sources(response: Any) -> list[Source]:
    """Collect web sources from the first candidate's grounding metadata.

    Chunks without a URI are dropped; a missing title gets a default.
    Order is preserved and duplicates are kept.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None) if web is not None else None
        if not uri:
            continue
        title = getattr(web, "title", None) or field_repair.DEFAULT_SOURCE_TITLE
        sources.append(Source(uri=uri, title=title))
    return sources
