"""Services for the resilient AI-invocation layer.

Provides the pieces every generation call is built from:
- with_retry: Exponential backoff around transient provider failures
- normalizer: Fence stripping, thread parsing, refusal detection, field repair
- classify: Maps raw failures into the AppError taxonomy

These services hold no shared state - each call owns its own attempt
counter, parse result and error.
"""

from .errors import (
    AppError,
    ApiPermissionError,
    AuthError,
    CapacityError,
    ConfigurationError,
    EmptyResultError,
    ErrorKind,
    JobTimeoutError,
    MalformedResponseError,
    QuotaExceededError,
    RefusalError,
    SafetyRejectionError,
    TransportError,
    UnknownError,
)
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, is_retryable, with_retry
from .classifier import classify, describe_context, permission_action
from .normalizer import (
    ensure_not_refusal,
    extract_sources,
    parse_delimited_thread,
    parse_json_thread,
    parse_plain,
    parse_search_items,
    parse_synthesized_posts,
    parse_thread_lenient,
    parse_trending_topics,
    strip_code_fences,
)

__all__ = [
    "AppError",
    "ApiPermissionError",
    "AuthError",
    "CapacityError",
    "ConfigurationError",
    "EmptyResultError",
    "ErrorKind",
    "JobTimeoutError",
    "MalformedResponseError",
    "QuotaExceededError",
    "RefusalError",
    "SafetyRejectionError",
    "TransportError",
    "UnknownError",
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "is_retryable",
    "with_retry",
    "classify",
    "describe_context",
    "permission_action",
    "ensure_not_refusal",
    "extract_sources",
    "parse_delimited_thread",
    "parse_json_thread",
    "parse_plain",
    "parse_search_items",
    "parse_synthesized_posts",
    "parse_thread_lenient",
    "parse_trending_topics",
    "strip_code_fences",
]
