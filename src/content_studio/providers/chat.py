"""Chat refinement of a generated post or thread.

A session is seeded with the original prompt and the generated answer, then
each ``refine()`` call appends the instruction and the model's reply to the
history. Threads use the JSON thread schema; single posts use the search
tool. Replies are parsed with the lenient thread parser.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from google.genai import types

from ..content.models import ThreadResult
from ..content.prompts import refinement_prompt
from ..content.responses import ThreadResponse
from ..services.classifier import classify
from ..services.errors import EmptyResultError
from ..services.normalizer import parse_thread_lenient
from .modes import RequestMode, SchemaMode, ToolMode

if TYPE_CHECKING:
    from .gemini import GenerationClient

_logger = logging.getLogger("ai_calls")


def _turn(role: str, text: str) -> types.Content:
    return types.Content(role=role, parts=[types.Part.from_text(text=text)])


def answer_text(posts: list[str], is_thread: bool) -> str:
    """Model turn recorded for a generated result."""
    if is_thread:
        return json.dumps({"thread": posts}, ensure_ascii=False)
    return posts[0] if posts else ""


class RefinementSession:
    """Multi-turn refinement seeded with one generated result.

    Usage:
        session = client.start_refinement(request, thread.posts)
        refined = await session.refine("Hazlo más corto")
    """

    def __init__(
        self,
        client: GenerationClient,
        system_instruction: str,
        is_thread: bool,
        prompt: str,
        posts: list[str],
    ):
        self._client = client
        self.system_instruction = system_instruction
        self.is_thread = is_thread
        self.history: list[types.Content] = [
            _turn("user", prompt),
            _turn("model", answer_text(posts, is_thread)),
        ]

    @property
    def mode(self) -> RequestMode:
        return SchemaMode(ThreadResponse) if self.is_thread else ToolMode()

    async def refine(self, instruction: str) -> ThreadResult:
        """Send a refinement instruction and parse the updated answer.

        Threads are parsed leniently: a non-JSON reply is split on newlines.
        A single post is taken verbatim. The history only grows when the
        call succeeds.

        Raises:
            AppError: Classified failure; EmptyResultError for an empty reply.
        """
        task = "refinement"
        user_turn = _turn("user", refinement_prompt(instruction, self.is_thread))
        try:
            response = await self._client.generate_content(
                task,
                [*self.history, user_turn],
                self.mode,
                self.system_instruction,
            )
            reply = response.text or ""
            if self.is_thread:
                posts = parse_thread_lenient(reply)
            else:
                posts = [reply] if reply.strip() else []
            if not posts:
                raise EmptyResultError("La IA devolvió una respuesta vacía.")
        except Exception as e:
            error = classify(e, task)
            _logger.warning(f"AI_FAILED | task:{task} | kind:{error.kind.value} | error:{e}")
            if error is e:
                raise
            raise error from e

        self.history.extend([user_turn, _turn("model", reply)])
        return ThreadResult(posts=posts)
