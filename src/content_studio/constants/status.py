"""Status enums and progress messages for the content studio core.

AI CONTEXT:
-----------
Every generation call follows the same state machine:
  PENDING -> NORMALIZING -> DONE
  PENDING -> PENDING (retry)
  PENDING | NORMALIZING -> FAILED

Video jobs have their own lifecycle:
  SUBMITTING -> PROCESSING -> POLLING -> COMPLETING -> DONE
  SUBMITTING | PROCESSING | POLLING -> FAILED

Progress messages are user-facing and stay in Spanish, the product language.
"""

from enum import Enum
from typing import Final


# =============================================================================
# GENERATION CALL STATE
# =============================================================================

class GenerationState(str, Enum):
    """State of a single generation call."""

    PENDING = "pending"
    """Request sent (or being retried)."""

    NORMALIZING = "normalizing"
    """Provider answered, output is being parsed."""

    DONE = "done"
    """Result returned to the caller."""

    FAILED = "failed"
    """A classified AppError was raised."""


# =============================================================================
# VIDEO JOB STATE
# =============================================================================

class VideoJobState(str, Enum):
    """Lifecycle of a long-running video generation job."""

    SUBMITTING = "submitting"
    PROCESSING = "processing"
    POLLING = "polling"
    COMPLETING = "completing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (VideoJobState.DONE, VideoJobState.FAILED)


VIDEO_PROGRESS_MESSAGES: Final[dict[VideoJobState, str]] = {
    VideoJobState.SUBMITTING: "🚀 Iniciando la generación de video...",
    VideoJobState.PROCESSING: "🤖 La IA está procesando la solicitud...",
    VideoJobState.POLLING: "⏳ Generando fotogramas, esto puede tardar unos minutos...",
    VideoJobState.COMPLETING: "✅ Finalizando el video...",
    VideoJobState.DONE: "🎉 ¡El video está listo!",
}
"""Human-readable progress for each reported transition."""

VIDEO_PROGRESS_ERROR_PREFIX: Final[str] = "Error: "
