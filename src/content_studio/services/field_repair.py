"""Named fallback accessors for loosely shaped model JSON.

Grounded search answers come back as free-form JSON: fields may be nested
under ``author`` or flattened onto the item, camelCase or snake_case, or
missing entirely. Each accessor below resolves one field and falls back to a
documented default, so a partially malformed element still yields a
well-formed record.
"""

from __future__ import annotations

import math
from typing import Any

# Generic person silhouette used when a synthesized post has no avatar
DEFAULT_AVATAR_URL = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 24 24' "
    "fill='%23657786'%3E%3Cpath d='M16 7a4 4 0 11-8 0 4 4 0 018 0zM12 14a7 7 0 00-7 "
    "7h14a7 7 0 00-7-7z'/%3E%3C/svg%3E"
)

DEFAULT_AUTHOR_NAME = "Usuario Desconocido"
DEFAULT_AUTHOR_HANDLE = "@unknown"
DEFAULT_POST_CONTENT = "[Sin contenido]"
DEFAULT_SOURCE_TITLE = "Fuente Desconocida"
POST_ID_PREFIX = "search-tweet-"

STAT_FIELDS: dict[str, tuple[str, ...]] = {
    "likes": ("likes", "like_count", "likeCount"),
    "retweets": ("retweets", "retweet_count", "retweetCount", "reposts"),
    "impressions": ("impressions", "views", "view_count", "viewCount"),
    "replies": ("replies", "reply_count", "replyCount"),
}


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def first_present(data: dict[str, Any], *keys: str) -> Any:
    """First truthy value among ``keys``, or None."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def _author(item: dict[str, Any]) -> dict[str, Any]:
    return _as_dict(item.get("author"))


# =============================================================================
# Synthesized posts
# =============================================================================


def post_id(item: dict[str, Any], index: int) -> str:
    value = item.get("id")
    return str(value) if value else f"{POST_ID_PREFIX}{index}"


def post_content(item: dict[str, Any]) -> str:
    value = first_present(item, "content", "text")
    return str(value) if value else DEFAULT_POST_CONTENT


def author_name(item: dict[str, Any]) -> str:
    value = first_present(_author(item), "name") or first_present(item, "name")
    return str(value) if value else DEFAULT_AUTHOR_NAME


def author_handle(item: dict[str, Any]) -> str:
    value = first_present(_author(item), "handle") or first_present(item, "handle")
    return str(value) if value else DEFAULT_AUTHOR_HANDLE


def avatar_url(item: dict[str, Any]) -> str:
    keys = ("avatarUrl", "avatar_url")
    value = first_present(_author(item), *keys) or first_present(item, *keys)
    return str(value) if value else DEFAULT_AVATAR_URL


def verified(item: dict[str, Any]) -> bool:
    """Only a real boolean counts; strings like "true" are ignored."""
    author_value = _author(item).get("verified")
    if isinstance(author_value, bool):
        return author_value
    flat_value = item.get("verified")
    if isinstance(flat_value, bool):
        return flat_value
    return False


# Abbreviated counts such as "1.2K" or "3M"
_COUNT_SUFFIXES = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0) if math.isfinite(value) else 0
    if not isinstance(value, str):
        return 0

    text = value.strip().lower().replace(",", "").replace(" ", "")
    multiplier = 1
    if text[-1:] in _COUNT_SUFFIXES:
        multiplier = _COUNT_SUFFIXES[text[-1]]
        text = text[:-1]
    if text.count(".") > 1:
        # "1.234.567" uses dots as thousands separators
        text = text.replace(".", "")
    try:
        number = float(text)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    if multiplier > 1:
        return max(round(number * multiplier), 0)
    return max(int(number), 0)


def stat(item: dict[str, Any], name: str) -> int:
    """Engagement counter ``name`` from ``stats`` or the item itself, default 0."""
    keys = STAT_FIELDS[name]
    stats = _as_dict(item.get("stats"))
    for container in (stats, item):
        for key in keys:
            if key in container:
                return _count(container[key])
    return 0


def stats(item: dict[str, Any]) -> dict[str, int]:
    return {name: stat(item, name) for name in STAT_FIELDS}


def media(item: dict[str, Any]) -> dict[str, str] | None:
    """Attached media only when it has a known type and a URL."""
    value = _as_dict(item.get("media"))
    media_type = value.get("type")
    url = value.get("url")
    if media_type in ("image", "video") and isinstance(url, str) and url:
        return {"type": media_type, "url": url}
    return None


# =============================================================================
# Search results and trends
# =============================================================================


def search_uri(item: dict[str, Any]) -> str:
    value = first_present(item, "uri", "url", "link")
    return str(value).strip() if value else ""


def search_title(item: dict[str, Any]) -> str:
    value = first_present(item, "title", "name")
    return str(value) if value else search_uri(item)


def search_summary(item: dict[str, Any]) -> str:
    value = first_present(item, "summary", "description", "snippet")
    return str(value) if value else ""


def trend_topic(item: dict[str, Any]) -> str:
    value = first_present(item, "topic", "name", "hashtag", "title")
    return str(value) if value else ""


def trend_description(item: dict[str, Any]) -> str:
    value = first_present(item, "description", "summary", "reason")
    return str(value) if value else ""
