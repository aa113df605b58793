"""Tests for the async video job poller.

Tests cover:
- Happy path with progress messages and the download
- Stopping at the first error payload
- Completed jobs without a download URI
- Wall-clock timeout
- Download failures and the key query parameter
- Retry of status fetches
"""

import base64
from pathlib import Path

import httpx
import pytest

from conftest import make_operation
from content_studio.constants import VIDEO_PROGRESS_MESSAGES, VideoJobState
from content_studio.content.models import FilePart
from content_studio.providers.config import VideoSettings
from content_studio.providers.video import VideoJobPoller
from content_studio.services.errors import (
    EmptyResultError,
    ErrorKind,
    JobTimeoutError,
    QuotaExceededError,
    TransportError,
    UnknownError,
)

VIDEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/abc:download?alt=media"


class DownloadRecorder:
    """MockTransport handler that records requests and serves a fixed reply."""

    def __init__(self, status_code: int = 200, content: bytes = b"mp4-bytes"):
        self.status_code = status_code
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)


@pytest.fixture
def download():
    return DownloadRecorder()


@pytest.fixture
def make_poller(fake_genai, fake_sleep, tmp_path: Path):
    """Build a poller wired to the fake client, fake sleep and a mock transport."""
    def _make(handler, poll_interval: float = 10, max_wait: float = 600) -> VideoJobPoller:
        settings = VideoSettings(
            poll_interval_seconds=poll_interval,
            max_wait_seconds=max_wait,
            output_dir=tmp_path / "videos",
        )
        return VideoJobPoller(
            fake_genai,
            api_key="test-key",
            model="veo-2.0-generate-001",
            settings=settings,
            sleep=fake_sleep,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

    return _make


# =============================================================================
# Happy Path
# =============================================================================

class TestHappyPath:
    """Test a job that completes and downloads."""

    @pytest.mark.asyncio
    async def test_progress_and_result(self, make_poller, fake_genai, download, sleep_calls):
        fake_genai.aio.models.generate_videos.return_value = make_operation()
        fake_genai.aio.operations.get.side_effect = [
            make_operation(),
            make_operation(done=True, uri=VIDEO_URI),
        ]
        poller = make_poller(download)
        progress: list[str] = []

        result = await poller.run("Un amanecer en el Malecón", on_progress=progress.append)

        assert progress == [
            VIDEO_PROGRESS_MESSAGES[VideoJobState.SUBMITTING],
            VIDEO_PROGRESS_MESSAGES[VideoJobState.PROCESSING],
            VIDEO_PROGRESS_MESSAGES[VideoJobState.POLLING],
            VIDEO_PROGRESS_MESSAGES[VideoJobState.POLLING],
            VIDEO_PROGRESS_MESSAGES[VideoJobState.COMPLETING],
            VIDEO_PROGRESS_MESSAGES[VideoJobState.DONE],
        ]
        assert sleep_calls == [10, 10]
        assert poller.poll_count == 2
        assert poller.state == VideoJobState.DONE

        assert result.kind == "video"
        assert result.media_url.startswith("file://")
        assert result.path.read_bytes() == b"mp4-bytes"
        assert result.path.suffix == ".mp4"

    @pytest.mark.asyncio
    async def test_download_sends_key_param(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True, uri=VIDEO_URI)

        await make_poller(download).run("x")

        assert len(download.requests) == 1
        url = download.requests[0].url
        assert url.params["key"] == "test-key"
        assert url.params["alt"] == "media"
        assert fake_genai.aio.operations.get.await_count == 0

    @pytest.mark.asyncio
    async def test_style_and_reference_image(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True, uri=VIDEO_URI)
        image = FilePart(mime_type="image/png", data=base64.b64encode(b"frame").decode())

        await make_poller(download).run("Olas", style="cinematográfico", reference_image=image)

        kwargs = fake_genai.aio.models.generate_videos.call_args.kwargs
        assert kwargs["prompt"] == "Olas. Estilo visual: cinematográfico."
        assert kwargs["model"] == "veo-2.0-generate-001"
        assert kwargs["image"].image_bytes == b"frame"
        assert kwargs["image"].mime_type == "image/png"
        assert kwargs["config"].number_of_videos == 1

    @pytest.mark.asyncio
    async def test_no_reference_image(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True, uri=VIDEO_URI)

        await make_poller(download).run("Olas")

        kwargs = fake_genai.aio.models.generate_videos.call_args.kwargs
        assert "image" not in kwargs
        assert kwargs["prompt"] == "Olas"


# =============================================================================
# Failures
# =============================================================================

class TestFailures:
    """Test failed, empty and timed-out jobs."""

    @pytest.mark.asyncio
    async def test_stops_at_first_error_payload(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.return_value = make_operation()
        fake_genai.aio.operations.get.side_effect = [
            make_operation(error={"message": "modelo sobrecargado"}),
            make_operation(done=True, uri=VIDEO_URI),
        ]
        poller = make_poller(download)
        progress: list[str] = []

        with pytest.raises(UnknownError) as exc_info:
            await poller.run("x", on_progress=progress.append)

        assert "modelo sobrecargado" in exc_info.value.message
        assert exc_info.value.context == "video"
        assert fake_genai.aio.operations.get.await_count == 1
        assert progress[-1] == f"Error: {exc_info.value.message}"
        assert poller.state == VideoJobState.FAILED
        assert download.requests == []

    @pytest.mark.asyncio
    async def test_completed_without_uri(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True)

        with pytest.raises(EmptyResultError, match="no se encontró ningún enlace"):
            await make_poller(download).run("x")
        assert download.requests == []

    @pytest.mark.asyncio
    async def test_timeout(self, make_poller, fake_genai, download, sleep_calls):
        fake_genai.aio.models.generate_videos.return_value = make_operation()
        fake_genai.aio.operations.get.return_value = make_operation()
        poller = make_poller(download, poll_interval=10, max_wait=30)

        with pytest.raises(JobTimeoutError) as exc_info:
            await poller.run("x")

        assert exc_info.value.kind == ErrorKind.JOB_TIMEOUT
        assert sleep_calls == [10, 10, 10]
        assert poller.poll_count == 3

    @pytest.mark.asyncio
    async def test_download_failure(self, make_poller, fake_genai):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True, uri=VIDEO_URI)
        download = DownloadRecorder(status_code=404)
        progress: list[str] = []

        with pytest.raises(TransportError) as exc_info:
            await make_poller(download).run("x", on_progress=progress.append)

        assert "No se pudo descargar el video: 404" in exc_info.value.message
        assert len(download.requests) == 1
        assert progress[-1].startswith("Error: ")

    @pytest.mark.asyncio
    async def test_unfollowed_redirect_is_not_a_video(self, make_poller, fake_genai, tmp_path):
        fake_genai.aio.models.generate_videos.return_value = make_operation(done=True, uri=VIDEO_URI)
        download = DownloadRecorder(status_code=302, content=b"")
        poller = make_poller(download)

        with pytest.raises(TransportError, match="302"):
            await poller.run("x")

        assert poller.state == VideoJobState.FAILED
        assert not list((tmp_path / "videos").glob("*.mp4"))

    @pytest.mark.asyncio
    async def test_quota_on_submit(self, make_poller, fake_genai, download):
        fake_genai.aio.models.generate_videos.side_effect = Exception("429 quota exceeded")

        with pytest.raises(QuotaExceededError):
            await make_poller(download).run("x")

        assert fake_genai.aio.models.generate_videos.await_count == 3


# =============================================================================
# Retries
# =============================================================================

class TestPollRetry:
    """Test that status fetches go through the retry executor."""

    @pytest.mark.asyncio
    async def test_transient_status_fetch_is_retried(
        self, make_poller, fake_genai, download, sleep_calls
    ):
        fake_genai.aio.models.generate_videos.return_value = make_operation()
        fake_genai.aio.operations.get.side_effect = [
            Exception("503 rpc failed"),
            make_operation(done=True, uri=VIDEO_URI),
        ]

        result = await make_poller(download).run("x")

        assert result.path.exists()
        assert fake_genai.aio.operations.get.await_count == 2
        # one poll interval, then one backoff delay
        assert sleep_calls == [10, 1.0]
