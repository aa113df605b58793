"""Pydantic response models for schema-constrained generation.

These models are passed to Gemini as ``response_schema`` and re-used to
validate the returned JSON, so a schema violation surfaces as a pydantic
ValidationError (classified as a malformed response).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ThreadResponse(BaseModel):
    """Thread generation and chat refinement output."""

    thread: list[str] = Field(description="Ordered posts of the thread")


class ProofreadResponse(BaseModel):
    """Proofreading output - same length and order as the input thread."""

    corrected_thread: list[str] | None = Field(
        default=None, description="Corrected posts, unchanged ones returned as-is"
    )
