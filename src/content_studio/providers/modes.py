"""Request modes for text generation.

Structured-schema output and the web search tool are mutually exclusive in
the Gemini API, so a request picks exactly one mode. Each mode is an
immutable value and ``build_content_config`` is the only place a
``GenerateContentConfig`` is assembled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from google.genai import types
from pydantic import BaseModel


@dataclass(frozen=True)
class SchemaMode:
    """JSON output constrained to a pydantic schema."""

    schema: type[BaseModel]
    mime_type: str = "application/json"


@dataclass(frozen=True)
class ToolMode:
    """Free text grounded with Google Search."""

    tools: tuple[str, ...] = field(default=("google_search",))


@dataclass(frozen=True)
class PlainMode:
    """Free text, no schema and no tools."""

    response_modalities: tuple[str, ...] = ()


RequestMode = Union[SchemaMode, ToolMode, PlainMode]

_TOOL_FACTORIES = {
    "google_search": lambda: types.Tool(google_search=types.GoogleSearch()),
}


def build_content_config(
    mode: RequestMode,
    system_instruction: str | None = None,
) -> types.GenerateContentConfig:
    """Build the provider config for one request.

    Args:
        mode: Which output mode the request uses.
        system_instruction: Optional system prompt.

    Returns:
        A config with either a response schema or tools, never both.
    """
    kwargs: dict = {}
    if system_instruction:
        kwargs["system_instruction"] = system_instruction

    if isinstance(mode, SchemaMode):
        kwargs["response_mime_type"] = mode.mime_type
        kwargs["response_schema"] = mode.schema
    elif isinstance(mode, ToolMode):
        kwargs["tools"] = [_TOOL_FACTORIES[name]() for name in mode.tools]
    elif isinstance(mode, PlainMode):
        if mode.response_modalities:
            kwargs["response_modalities"] = list(mode.response_modalities)
    else:
        raise TypeError(f"Unknown request mode: {mode!r}")

    return types.GenerateContentConfig(**kwargs)


def mode_name(mode: RequestMode) -> str:
    """Short name for log lines."""
    if isinstance(mode, SchemaMode):
        return f"schema:{mode.schema.__name__}"
    if isinstance(mode, ToolMode):
        return "tools:" + ",".join(mode.tools)
    return "plain"
