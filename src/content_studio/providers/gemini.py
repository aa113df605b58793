"""Gemini generation client.

Every operation follows the same skeleton:

    build request -> with_retry(provider call) -> normalize -> result
                              \\-> on any failure: classify() -> AppError

Usage:
    client = create_generation_client()
    thread = await client.generate_thread(GenerationRequest(prompt="IA en contabilidad"))
    print(thread.posts)
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator

import httpx
from google import genai
from google.genai import types

from ..constants import (
    IMAGE_DEFAULT_ASPECT_RATIO,
    IMAGE_OUTPUT_MIME_TYPE,
    PROMPT_LOG_PREVIEW_CHARS,
    GenerationState,
)
from ..content import prompts
from ..content.models import (
    EditedImage,
    EditResult,
    FilePart,
    GenerationRequest,
    ImageResult,
    PostSearchResult,
    SearchResult,
    TextResult,
    ThreadResult,
    TrendResult,
    VideoResult,
)
from ..content.responses import ProofreadResponse, ThreadResponse
from ..services.classifier import classify
from ..services.errors import EmptyResultError, MalformedResponseError
from ..services.normalizer import (
    ensure_not_refusal,
    extract_sources,
    parse_delimited_thread,
    parse_json_thread,
    parse_model,
    parse_plain,
    parse_search_items,
    parse_synthesized_posts,
    parse_trending_topics,
)
from ..services.retry import SleepFunc, with_retry
from .chat import RefinementSession
from .config import StudioConfig, load_studio_config
from .modes import PlainMode, RequestMode, SchemaMode, ToolMode, build_content_config, mode_name
from .video import ProgressCallback, VideoJobPoller

_logger = logging.getLogger("ai_calls")

URL_REFUSAL_MESSAGE = (
    "El modelo de IA informó que no pudo acceder al contenido de la URL proporcionada. "
    "Asegúrate de que sea un enlace público y directo, y vuelve a intentarlo."
)
EMPTY_SUMMARY_MESSAGE = (
    "La IA devolvió un resumen vacío. Esto podría deberse a la falta de resultados de "
    "búsqueda para el tema."
)
EMPTY_RESPONSE_MESSAGE = "La IA devolvió una respuesta vacía."
NO_IMAGE_MESSAGE = "La IA no devolvió ninguna imagen."
NO_EDITED_IMAGE_MESSAGE = (
    "La IA no devolvió una imagen editada. Esto puede ocurrir si la solicitud infringe las "
    "políticas de seguridad o si la instrucción no es clara."
)


def file_part(file: FilePart) -> types.Part:
    """Inline base64 file as a request part."""
    return types.Part.from_bytes(data=base64.b64decode(file.data), mime_type=file.mime_type)


def _encode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    return base64.b64encode(data).decode("ascii")


class GenerationClient:
    """Async Gemini client for posts, threads, summaries, images and videos.

    The client owns no mutable state besides an optional concurrency
    limiter; every call has its own retry counter and result.

    Usage:
        client = GenerationClient(load_studio_config())
        result = await client.generate_image("Oficina moderna en La Habana", "16:9")
    """

    def __init__(
        self,
        config: StudioConfig,
        genai_client: Any | None = None,
        sleep: SleepFunc | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            config: Studio configuration. Must carry an API key.
            genai_client: Pre-built google-genai Client (tests inject fakes).
            sleep: Async sleep used for backoff and video polling.
            http_client: HTTP client used for the video download.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        self.config = config
        self._api_key = config.require_api_key()
        self._client = genai_client or genai.Client(api_key=self._api_key)
        self._sleep = sleep or asyncio.sleep
        self._http_client = http_client
        self._retry_policy = config.retry.to_policy()
        self._limiter = (
            asyncio.Semaphore(config.max_concurrency) if config.max_concurrency else None
        )

    # =========================================================================
    # Call plumbing
    # =========================================================================

    @asynccontextmanager
    async def _slot(self) -> AsyncIterator[None]:
        if self._limiter is None:
            yield
            return
        async with self._limiter:
            yield

    @contextmanager
    def _classified(self, task: str) -> Iterator[None]:
        """Translate any failure inside the block into a classified AppError."""
        try:
            yield
        except Exception as e:
            error = classify(e, task)
            _logger.warning(
                f"AI_FAILED | task:{task} | state:{GenerationState.FAILED.value} | "
                f"kind:{error.kind.value} | error:{e}"
            )
            if error is e:
                raise
            raise error from e

    async def _retrying(self, task: str, call: Any) -> Any:
        async with self._slot():
            return await with_retry(call, self._retry_policy, sleep=self._sleep, label=task)

    async def generate_content(
        self,
        task: str,
        contents: Any,
        mode: RequestMode,
        system_instruction: str | None = None,
        model: str | None = None,
    ) -> Any:
        """Send one generate_content request through the retry executor.

        Args:
            task: Operation label used in logs and retry lines.
            contents: Prompt text, parts or full conversation history.
            mode: Schema, tool or plain mode.
            system_instruction: Optional system prompt.
            model: Model id override (defaults to the text model).

        Returns:
            The raw provider response.
        """
        model = model or self.config.models.text
        config = build_content_config(mode, system_instruction)
        preview = contents if isinstance(contents, str) else repr(contents)

        _logger.info(
            f"AI_REQUEST | provider:gemini | model:{model} | task:{task} | "
            f"mode:{mode_name(mode)} | state:{GenerationState.PENDING.value}\n"
            f"--- PROMPT ---\n{preview[:PROMPT_LOG_PREVIEW_CHARS]}\n"
            f"--- END REQUEST ---"
        )
        start_time = time.time()

        response = await self._retrying(
            task,
            lambda: self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            ),
        )

        duration = time.time() - start_time
        text = getattr(response, "text", None) or ""
        _logger.info(
            f"AI_RESPONSE | provider:gemini | model:{model} | task:{task} | "
            f"duration:{duration:.2f}s | state:{GenerationState.NORMALIZING.value}\n"
            f"--- RESPONSE ---\n{text[:PROMPT_LOG_PREVIEW_CHARS]}\n"
            f"--- END RESPONSE ---"
        )
        return response

    def _done(self, task: str, result: Any) -> Any:
        _logger.debug(f"AI_DONE | task:{task} | state:{GenerationState.DONE.value}")
        return result

    def _request_contents(self, request: GenerationRequest) -> list[types.Part]:
        parts = [types.Part.from_text(text=prompts.grounded_prompt(request.prompt, request.source))]
        if request.file is not None:
            parts.append(file_part(request.file))
        return parts

    # =========================================================================
    # Posts and threads
    # =========================================================================

    async def generate_text(self, request: GenerationRequest) -> TextResult:
        """Generate a single post.

        The prompt is grounded on ``request.source`` when given. With
        ``use_web_search`` the Google Search tool is enabled.
        """
        task = "tweet"
        with self._classified(task):
            mode: RequestMode = ToolMode() if request.use_web_search else PlainMode()
            system = prompts.tweet_system_instruction(
                request.audience, request.tone, request.format, request.keywords, request.brand_voice
            )
            response = await self.generate_content(
                task, self._request_contents(request), mode, system
            )
            text = parse_plain(response.text)
            if not text.strip():
                raise EmptyResultError(EMPTY_RESPONSE_MESSAGE)
            return self._done(task, TextResult(text=text, sources=extract_sources(response)))

    async def generate_thread(self, request: GenerationRequest) -> ThreadResult:
        """Generate an ordered thread.

        Schema-constrained JSON without web search; ``|||``-delimited text
        with the search tool, since the two modes cannot be combined.

        Raises:
            EmptyResultError: If the thread has no posts.
        """
        task = "thread"
        with self._classified(task):
            system = prompts.thread_system_instruction(
                request.audience,
                request.tone,
                request.format,
                request.keywords,
                request.brand_voice,
                request.use_web_search,
            )
            if request.use_web_search:
                response = await self.generate_content(
                    task, self._request_contents(request), ToolMode(), system
                )
                posts = parse_delimited_thread(response.text)
            else:
                response = await self.generate_content(
                    task, self._request_contents(request), SchemaMode(ThreadResponse), system
                )
                posts = parse_json_thread(response.text)

            if not posts:
                raise EmptyResultError(EMPTY_RESPONSE_MESSAGE)
            return self._done(
                task, ThreadResult(posts=posts, sources=extract_sources(response))
            )

    async def proofread(self, posts: list[str]) -> ThreadResult:
        """Fix spelling and grammar, keeping length and order.

        Unchanged posts come back as-is; a missing list returns the input.
        """
        task = "proofread"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.proofread_prompt(posts), SchemaMode(ProofreadResponse)
            )
            parsed = parse_model(response.text, ProofreadResponse)
            corrected = parsed.corrected_thread
            if corrected is None:
                corrected = list(posts)
            if len(corrected) != len(posts):
                raise MalformedResponseError(
                    "Error de API (Gemini): La IA devolvió una respuesta inválida o incompleta. "
                    f"Se esperaban {len(posts)} tuits y se recibieron {len(corrected)}."
                )
            return self._done(task, ThreadResult(posts=corrected))

    async def regenerate(self, original_post: str) -> TextResult:
        """Rewrite a post with a different angle, same core message."""
        task = "regeneration"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.regenerate_prompt(original_post), PlainMode()
            )
            text = parse_plain(response.text)
            if not text.strip():
                raise EmptyResultError(EMPTY_RESPONSE_MESSAGE)
            return self._done(task, TextResult(text=text))

    def start_refinement(
        self,
        request: GenerationRequest,
        posts: list[str],
        is_thread: bool | None = None,
    ) -> RefinementSession:
        """Open a refinement conversation seeded with a generated result.

        Args:
            request: The request that produced ``posts``.
            posts: The generated post (one item) or thread.
            is_thread: Defaults to ``len(posts) > 1``.

        Returns:
            A session whose ``refine()`` sends follow-up instructions.
        """
        if is_thread is None:
            is_thread = len(posts) > 1
        if is_thread:
            system = prompts.thread_system_instruction(
                request.audience, request.tone, request.format, None, request.brand_voice
            )
        else:
            system = prompts.tweet_system_instruction(
                request.audience, request.tone, request.format, None, request.brand_voice
            )
        return RefinementSession(
            self,
            system_instruction=system,
            is_thread=is_thread,
            prompt=request.prompt,
            posts=posts,
        )

    # =========================================================================
    # Summaries
    # =========================================================================

    async def summarize_url(self, uri: str) -> TextResult:
        """Summarize a public page through grounded search."""
        task = "URL summary"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.url_summary_prompt(uri), ToolMode()
            )
            text = ensure_not_refusal(response.text, URL_REFUSAL_MESSAGE)
            return self._done(task, TextResult(text=text, sources=extract_sources(response)))

    async def summarize_file(self, mime_type: str, base64_data: str) -> TextResult:
        """Summarize an uploaded document."""
        task = "summary"
        with self._classified(task):
            contents = [
                types.Part.from_text(text=prompts.FILE_SUMMARY_PROMPT),
                file_part(FilePart(mime_type=mime_type, data=base64_data)),
            ]
            response = await self.generate_content(task, contents, PlainMode())
            text = ensure_not_refusal(response.text)
            return self._done(task, TextResult(text=text))

    async def summarize_web_search(self, query: str) -> TextResult:
        """Summarize a topic from Google Search results, with sources."""
        task = "web search summary"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.web_search_summary_prompt(query), ToolMode()
            )
            if not (response.text or "").strip():
                raise EmptyResultError(EMPTY_SUMMARY_MESSAGE)
            text = ensure_not_refusal(response.text)
            return self._done(task, TextResult(text=text, sources=extract_sources(response)))

    # =========================================================================
    # Grounded search
    # =========================================================================

    async def search_web(self, query: str) -> SearchResult:
        """Up to 10 relevant pages for ``query``."""
        task = "web search"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.search_web_prompt(query), ToolMode()
            )
            return self._done(task, SearchResult(items=parse_search_items(response.text)))

    async def search_posts(self, query: str) -> PostSearchResult:
        """Synthesize recent X posts about ``query`` from search results."""
        task = "X post search"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.search_posts_prompt(query), ToolMode()
            )
            return self._done(
                task,
                PostSearchResult(
                    posts=parse_synthesized_posts(response.text),
                    sources=extract_sources(response),
                ),
            )

    async def get_trending_topics(self) -> TrendResult:
        """Current trending topics on X with one-line explanations."""
        task = "trending topics"
        with self._classified(task):
            response = await self.generate_content(
                task, prompts.TRENDING_TOPICS_PROMPT, ToolMode()
            )
            return self._done(
                task,
                TrendResult(
                    trends=parse_trending_topics(response.text),
                    sources=extract_sources(response),
                ),
            )

    # =========================================================================
    # Images
    # =========================================================================

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = IMAGE_DEFAULT_ASPECT_RATIO,
    ) -> ImageResult:
        """Generate one image; ``aspect_ratio`` is passed through unchanged.

        Raises:
            EmptyResultError: If the provider returns no image.
        """
        task = "image"
        with self._classified(task):
            model = self.config.models.image
            config = types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type=IMAGE_OUTPUT_MIME_TYPE,
                aspect_ratio=aspect_ratio,
            )
            _logger.info(
                f"AI_REQUEST | provider:gemini | model:{model} | task:{task} | "
                f"aspect_ratio:{aspect_ratio} | prompt:{prompt[:PROMPT_LOG_PREVIEW_CHARS]}"
            )
            response = await self._retrying(
                task,
                lambda: self._client.aio.models.generate_images(
                    model=model,
                    prompt=prompt,
                    config=config,
                ),
            )

            images = []
            for generated in getattr(response, "generated_images", None) or []:
                image = getattr(generated, "image", None)
                data = getattr(image, "image_bytes", None) if image is not None else None
                if data:
                    images.append(_encode(data))
            if not images:
                raise EmptyResultError(NO_IMAGE_MESSAGE)

            _logger.info(
                f"AI_RESPONSE | provider:gemini | model:{model} | task:{task} | "
                f"images:{len(images)}"
            )
            return self._done(task, ImageResult(images=images, mime_type=IMAGE_OUTPUT_MIME_TYPE))

    async def edit_image(self, base64_image: str, mime_type: str, instruction: str) -> EditResult:
        """Edit an image following a natural-language instruction.

        Raises:
            EmptyResultError: If the model answers without an image. The
                message carries any text the model returned.
        """
        task = "image edit"
        with self._classified(task):
            contents = [
                file_part(FilePart(mime_type=mime_type, data=base64_image)),
                types.Part.from_text(text=prompts.image_edit_prompt(instruction)),
            ]
            response = await self.generate_content(
                task,
                contents,
                PlainMode(response_modalities=("IMAGE", "TEXT")),
                model=self.config.models.image_edit,
            )

            edited_text = ""
            edited_image: EditedImage | None = None
            candidates = getattr(response, "candidates", None) or []
            content = getattr(candidates[0], "content", None) if candidates else None
            for part in getattr(content, "parts", None) or []:
                if getattr(part, "text", None):
                    edited_text = part.text
                elif getattr(part, "inline_data", None) is not None and part.inline_data.data:
                    edited_image = EditedImage(
                        data=_encode(part.inline_data.data),
                        mime_type=part.inline_data.mime_type or mime_type,
                    )

            if edited_image is None:
                if edited_text:
                    raise EmptyResultError(
                        "La IA no devolvió una imagen y respondió con el siguiente texto: "
                        f"\"{edited_text}\""
                    )
                raise EmptyResultError(NO_EDITED_IMAGE_MESSAGE)
            return self._done(task, EditResult(text=edited_text, image=edited_image))

    # =========================================================================
    # Video
    # =========================================================================

    async def generate_video(
        self,
        prompt: str,
        style: str | None = None,
        on_progress: ProgressCallback = None,
        reference_image: FilePart | None = None,
    ) -> VideoResult:
        """Generate a video and download it to the output directory.

        See VideoJobPoller for the lifecycle and progress messages.
        """
        poller = VideoJobPoller(
            self._client,
            api_key=self._api_key,
            model=self.config.models.video,
            settings=self.config.video,
            retry_policy=self._retry_policy,
            sleep=self._sleep,
            http_client=self._http_client,
        )
        async with self._slot():
            return await poller.run(prompt, style, on_progress, reference_image)


def create_generation_client(
    config: StudioConfig | None = None,
    **kwargs: Any,
) -> GenerationClient:
    """Create a client from the given or the default configuration."""
    return GenerationClient(config or load_studio_config(), **kwargs)
