"""Global constants package for the content studio core.

PACKAGE STRUCTURE:
-----------------
- limits.py   : Retry defaults, video polling budget, output caps
- status.py   : Generation and video job states, progress messages

USAGE EXAMPLES:
--------------
    from content_studio.constants import RETRY_MAX_ATTEMPTS, VideoJobState
"""

# =============================================================================
# LIMITS
# =============================================================================
from .limits import (
    RETRY_MAX_ATTEMPTS,
    RETRY_INITIAL_DELAY_MS,
    RETRY_BACKOFF_MULTIPLIER,
    RETRYABLE_SIGNATURES,
    VIDEO_POLL_INTERVAL_SECONDS,
    VIDEO_MAX_WAIT_SECONDS,
    VIDEO_DOWNLOAD_TIMEOUT_SECONDS,
    VIDEO_NUMBER_OF_VIDEOS,
    SEARCH_MAX_RESULTS,
    THREAD_DELIMITER,
    IMAGE_DEFAULT_ASPECT_RATIO,
    IMAGE_OUTPUT_MIME_TYPE,
    PROMPT_LOG_PREVIEW_CHARS,
)

# =============================================================================
# STATUS
# =============================================================================
from .status import (
    GenerationState,
    VideoJobState,
    VIDEO_PROGRESS_MESSAGES,
    VIDEO_PROGRESS_ERROR_PREFIX,
)

__all__ = [
    "RETRY_MAX_ATTEMPTS",
    "RETRY_INITIAL_DELAY_MS",
    "RETRY_BACKOFF_MULTIPLIER",
    "RETRYABLE_SIGNATURES",
    "VIDEO_POLL_INTERVAL_SECONDS",
    "VIDEO_MAX_WAIT_SECONDS",
    "VIDEO_DOWNLOAD_TIMEOUT_SECONDS",
    "VIDEO_NUMBER_OF_VIDEOS",
    "SEARCH_MAX_RESULTS",
    "THREAD_DELIMITER",
    "IMAGE_DEFAULT_ASPECT_RATIO",
    "IMAGE_OUTPUT_MIME_TYPE",
    "PROMPT_LOG_PREVIEW_CHARS",
    "GenerationState",
    "VideoJobState",
    "VIDEO_PROGRESS_MESSAGES",
    "VIDEO_PROGRESS_ERROR_PREFIX",
]
