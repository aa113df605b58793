"""Shared test fixtures and configuration.

Provides fake Gemini responses, a fake google-genai client and a recording
async sleep so retry backoff and video polling run instantly while the
requested delays stay observable.
"""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from content_studio.providers.config import StudioConfig, VideoSettings
from content_studio.providers.gemini import GenerationClient


# =============================================================================
# Response builders
# =============================================================================

def make_response(
    text: str | None = "",
    sources: list[tuple[str | None, str | None]] | None = None,
    parts: list[Any] | None = None,
) -> SimpleNamespace:
    """Build a fake generate_content response.

    Args:
        text: Value of ``response.text``.
        sources: (uri, title) pairs exposed as grounding chunks.
        parts: Content parts of the first candidate.
    """
    chunks = [
        SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))
        for uri, title in (sources or [])
    ]
    candidate = SimpleNamespace(
        grounding_metadata=SimpleNamespace(grounding_chunks=chunks),
        content=SimpleNamespace(parts=parts or []),
    )
    return SimpleNamespace(text=text, candidates=[candidate])


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data: bytes, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def make_operation(
    done: bool = False,
    error: Any = None,
    uri: str | None = None,
) -> SimpleNamespace:
    """Build a fake long-running video operation."""
    response = None
    if done and uri is not None:
        response = SimpleNamespace(
            generated_videos=[SimpleNamespace(video=SimpleNamespace(uri=uri))]
        )
    elif done:
        response = SimpleNamespace(generated_videos=[])
    return SimpleNamespace(done=done, error=error, response=response)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sleep_calls() -> list[float]:
    """Seconds requested from the fake sleep, in order."""
    return []


@pytest.fixture
def fake_sleep(sleep_calls: list[float]):
    """Async sleep that records the delay and returns immediately."""
    async def _sleep(seconds: float) -> None:
        sleep_calls.append(seconds)

    return _sleep


@pytest.fixture
def fake_genai() -> MagicMock:
    """Fake google-genai Client exposing the ``aio`` surface."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=make_response("ok"))
    client.aio.models.generate_images = AsyncMock()
    client.aio.models.generate_videos = AsyncMock()
    client.aio.operations.get = AsyncMock()
    return client


@pytest.fixture
def studio_config(tmp_path: Path) -> StudioConfig:
    """Config with a test key and videos written under tmp_path."""
    return StudioConfig(
        api_key="test-key",
        video=VideoSettings(output_dir=tmp_path / "videos"),
    )


@pytest.fixture
def client(studio_config: StudioConfig, fake_genai: MagicMock, fake_sleep) -> GenerationClient:
    """GenerationClient wired to the fake provider and fake sleep."""
    return GenerationClient(studio_config, genai_client=fake_genai, sleep=fake_sleep)


def last_call_kwargs(mock: AsyncMock) -> dict[str, Any]:
    """Keyword arguments of the most recent call to ``mock``."""
    assert mock.await_count > 0
    return mock.call_args.kwargs
