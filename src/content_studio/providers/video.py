"""Video job poller - drives a Veo generation job to a local file.

Lifecycle (see ``VideoJobState``):

    SUBMITTING -> PROCESSING -> POLLING (repeated) -> COMPLETING -> DONE
         \\____________\\______________\\______________________-> FAILED

Submission and every status fetch go through the retry executor. The final
download is a single GET and is never retried. Any failure is classified
into the same AppError taxonomy as the other operations; the progress
callback additionally receives ``"Error: <message>"``.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import uuid
from pathlib import Path
from typing import Any, Callable

import httpx
from google.genai import types

from ..constants import (
    VIDEO_NUMBER_OF_VIDEOS,
    VIDEO_PROGRESS_ERROR_PREFIX,
    VIDEO_PROGRESS_MESSAGES,
    VideoJobState,
)
from ..content.models import FilePart, VideoResult
from ..content.prompts import video_prompt
from ..services.classifier import classify
from ..services.errors import EmptyResultError, JobTimeoutError, TransportError
from ..services.retry import RetryPolicy, SleepFunc, with_retry
from .config import VideoSettings

_logger = logging.getLogger("video_jobs")

# Receives human-readable status strings; purely observational
ProgressCallback = Callable[[str], None] | None


class VideoJobError(Exception):
    """The provider reported a failed video job."""


def _operation_error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(getattr(error, "message", None) or error)


def _video_uri(operation: Any) -> str | None:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None) or None


class VideoJobPoller:
    """Submits a video job, polls it to completion and downloads the asset.

    Usage:
        poller = VideoJobPoller(genai_client, api_key, model="veo-2.0-generate-001")
        result = await poller.run("Un amanecer sobre La Habana", on_progress=print)
    """

    def __init__(
        self,
        genai_client: Any,
        api_key: str,
        model: str,
        settings: VideoSettings | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the poller.

        Args:
            genai_client: google-genai Client (its ``aio`` surface is used).
            api_key: Key appended to the signed download URI.
            model: Video model id.
            settings: Poll interval, wall-clock budget and output directory.
            retry_policy: Backoff for submission and status fetches.
            sleep: Async sleep used between polls and retries.
            http_client: Client for the final download. A short-lived one is
                created per job when omitted.
        """
        self._client = genai_client
        self._api_key = api_key
        self._model = model
        self.settings = settings or VideoSettings()
        self._retry_policy = retry_policy
        self._sleep = sleep or asyncio.sleep
        self._http_client = http_client
        self.state = VideoJobState.SUBMITTING
        self.poll_count = 0

    def _transition(self, state: VideoJobState, on_progress: ProgressCallback) -> None:
        self.state = state
        _logger.info(f"VIDEO_JOB | state:{state.value} | polls:{self.poll_count}")
        message = VIDEO_PROGRESS_MESSAGES.get(state)
        if on_progress and message:
            on_progress(message)

    async def run(
        self,
        prompt: str,
        style: str | None = None,
        on_progress: ProgressCallback = None,
        reference_image: FilePart | None = None,
    ) -> VideoResult:
        """Generate a video and return a local handle to it.

        Args:
            prompt: What the video should show.
            style: Optional visual style folded into the prompt.
            on_progress: Optional status callback.
            reference_image: Optional starting frame (base64 + mime type).

        Returns:
            VideoResult with a ``file://`` URI and the local path.

        Raises:
            AppError: Classified failure (JobTimeoutError when the polling
                budget is exhausted).
        """
        try:
            operation = await self._submit(prompt, style, reference_image, on_progress)
            operation = await self._poll(operation, on_progress)

            uri = _video_uri(operation)
            if not uri:
                raise EmptyResultError(
                    "La generación de video se completó, pero no se encontró ningún enlace "
                    "de descarga."
                )

            self._transition(VideoJobState.COMPLETING, on_progress)
            path = await self._download(uri)

            self._transition(VideoJobState.DONE, on_progress)
            return VideoResult(media_url=path.resolve().as_uri(), path=path)

        except Exception as e:
            self.state = VideoJobState.FAILED
            error = classify(e, "video")
            _logger.warning(
                f"VIDEO_JOB | state:failed | kind:{error.kind.value} | polls:{self.poll_count} "
                f"| error:{e}"
            )
            if on_progress:
                on_progress(f"{VIDEO_PROGRESS_ERROR_PREFIX}{error.message}")
            if error is e:
                raise
            raise error from e

    async def _submit(
        self,
        prompt: str,
        style: str | None,
        reference_image: FilePart | None,
        on_progress: ProgressCallback,
    ) -> Any:
        self._transition(VideoJobState.SUBMITTING, on_progress)

        kwargs: dict[str, Any] = {
            "model": self._model,
            "prompt": video_prompt(prompt, style),
            "config": types.GenerateVideosConfig(number_of_videos=VIDEO_NUMBER_OF_VIDEOS),
        }
        if reference_image and reference_image.data and reference_image.mime_type:
            kwargs["image"] = types.Image(
                image_bytes=base64.b64decode(reference_image.data),
                mime_type=reference_image.mime_type,
            )

        _logger.info(
            f"VIDEO_JOB | submit | model:{self._model} | "
            f"reference_image:{'image' in kwargs} | prompt:{kwargs['prompt'][:200]}"
        )
        operation = await with_retry(
            lambda: self._client.aio.models.generate_videos(**kwargs),
            self._retry_policy,
            sleep=self._sleep,
            label="video_submit",
        )
        self._transition(VideoJobState.PROCESSING, on_progress)
        return operation

    async def _poll(self, operation: Any, on_progress: ProgressCallback) -> Any:
        """Re-fetch the job until done, failing on the first error payload."""
        interval = self.settings.poll_interval_seconds
        waited = 0.0

        while True:
            error = getattr(operation, "error", None)
            if error:
                raise VideoJobError(
                    f"La generación de video falló: {_operation_error_message(error)}"
                )
            if getattr(operation, "done", False):
                return operation

            if waited + interval > self.settings.max_wait_seconds:
                raise JobTimeoutError(
                    "La generación de video superó el tiempo máximo de espera "
                    f"({self.settings.max_wait_seconds:.0f} s). Por favor, inténtalo de nuevo."
                )

            self._transition(VideoJobState.POLLING, on_progress)
            await self._sleep(interval)
            waited += interval

            current = operation
            operation = await with_retry(
                lambda: self._client.aio.operations.get(current),
                self._retry_policy,
                sleep=self._sleep,
                label="video_poll",
            )
            self.poll_count += 1

    async def _download(self, uri: str) -> Path:
        """Single GET of the signed URI, written to the output directory.

        The key is merged into the URI's existing query (``alt=media`` must
        survive). Anything other than a 2xx reply is a failed download.
        """
        url = httpx.URL(uri).copy_merge_params({"key": self._api_key})
        if self._http_client is not None:
            response = await self._http_client.get(url)
        else:
            async with httpx.AsyncClient(
                timeout=self.settings.download_timeout_seconds,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)

        if not response.is_success:
            raise TransportError(
                f"No se pudo descargar el video: {response.status_code} {response.reason_phrase}"
            )

        output_dir = Path(self.settings.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"video-{uuid.uuid4().hex[:12]}.mp4"
        path.write_bytes(response.content)
        _logger.info(f"VIDEO_JOB | downloaded | bytes:{len(response.content)} | path:{path}")
        return path
