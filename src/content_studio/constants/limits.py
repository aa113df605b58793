"""Limit constants for the content studio core.

This module contains all limits and constraints:
- Retry and backoff defaults
- Video job polling interval and wall-clock budget
- Result size caps and output delimiters

AI CONTEXT:
-----------
These values mirror the behavior of the Gemini-backed studio. The retry
defaults (3 attempts, 1s, doubling) and the 10 second poll interval are part
of the observable contract of the core; change them through configuration
(config/studio.yaml) rather than here.

MODIFICATION GUIDE:
------------------
- RETRY_* settings: defaults for RetryPolicy, overridable per client
- VIDEO_* settings: defaults for VideoSettings
- *_MAX_* caps: applied after parsing model output
"""

from typing import Final

# =============================================================================
# RETRY SETTINGS
# =============================================================================

RETRY_MAX_ATTEMPTS: Final[int] = 3
"""Default number of attempts (first call included)."""

RETRY_INITIAL_DELAY_MS: Final[int] = 1000
"""Delay before the second attempt, in milliseconds."""

RETRY_BACKOFF_MULTIPLIER: Final[float] = 2.0
"""Each subsequent delay is multiplied by this factor."""

RETRYABLE_SIGNATURES: Final[tuple[str, ...]] = (
    "xhr error",
    "rpc failed",
    "500",
    "429",
    "rate-limited",
    "at capacity",
)
"""Lowercase substrings that mark a failure as transient."""


# =============================================================================
# VIDEO JOB SETTINGS
# =============================================================================

VIDEO_POLL_INTERVAL_SECONDS: Final[float] = 10.0
"""Sleep between two status fetches of a video operation."""

VIDEO_MAX_WAIT_SECONDS: Final[float] = 600.0
"""Wall-clock budget for a single video job (submission to download)."""

VIDEO_DOWNLOAD_TIMEOUT_SECONDS: Final[float] = 120.0
"""Timeout for the final, non-retried asset download."""

VIDEO_NUMBER_OF_VIDEOS: Final[int] = 1
"""Videos requested per job."""


# =============================================================================
# OUTPUT LIMITS
# =============================================================================

SEARCH_MAX_RESULTS: Final[int] = 10
"""Maximum items returned by a grounded web search."""

THREAD_DELIMITER: Final[str] = "|||"
"""Separator used when a thread is produced with the search tool enabled."""

IMAGE_DEFAULT_ASPECT_RATIO: Final[str] = "1:1"
"""Aspect ratio used when the caller does not pass one."""

IMAGE_OUTPUT_MIME_TYPE: Final[str] = "image/jpeg"
"""MIME type requested from the image model."""

PROMPT_LOG_PREVIEW_CHARS: Final[int] = 200
"""Characters of prompt/response kept in log previews."""
