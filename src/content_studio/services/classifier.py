"""Error classifier - maps raw failures to the user-facing taxonomy.

``classify()`` is a pure function: it inspects the lowercased error message
against an ordered rule table (first match wins) and returns a ready-to-raise
``AppError``. The ``context`` label only specializes the permission message;
it never changes which rule matches.

Usage:
    try:
        response = await with_retry(call, policy)
    except Exception as e:
        raise classify(e, "thread") from e
"""

from __future__ import annotations

import json
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from .errors import (
    ERROR_CLASSES,
    AppError,
    ConfigurationError,
    ErrorKind,
)


# Display labels for the operation contexts (messages are Spanish)
CONTEXT_LABELS: dict[str, str] = {
    "tweet": "el tuit",
    "thread": "el hilo",
    "proofread": "la corrección",
    "regeneration": "la regeneración del tuit",
    "refinement": "el refinamiento",
    "summary": "el resumen",
    "URL summary": "el resumen de URL",
    "web search summary": "el resumen de búsqueda web",
    "web search": "la búsqueda web",
    "X post search": "la búsqueda de posts en X",
    "trending topics": "los temas en tendencia",
    "image": "la imagen",
    "image edit": "la edición de imagen",
    "video": "el video",
}

# Substrings of a context that require the web search tool
_WEB_SEARCH_CONTEXT_MARKERS = ("search", "url summary", "post", "trend")


@dataclass(frozen=True)
class ClassificationRule:
    """A single keyword category of the taxonomy."""

    kind: ErrorKind
    keywords: tuple[str, ...]
    user_message: str
    exception_types: tuple[type[BaseException], ...] = ()

    def matches(self, error: BaseException, lowered: str) -> bool:
        if self.exception_types and isinstance(error, self.exception_types):
            return True
        return any(keyword in lowered for keyword in self.keywords)


# Ordered by precedence - the first matching rule wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        kind=ErrorKind.AUTH,
        keywords=("api key", "clave api", "authentication"),
        exception_types=(ConfigurationError,),
        user_message=(
            "Error de Clave API: La clave API de Gemini proporcionada parece ser "
            "inválida. Por favor, contacta al desarrollador."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.PERMISSION,
        keywords=("permission denied", "403"),
        user_message=(
            "Error de Permiso: Tu clave API de Gemini no tiene los permisos necesarios "
            "para {action}. Por favor, asegúrate de que las APIs correctas (ej. Vertex AI "
            "API para multimedia) estén habilitadas en tu proyecto de Google Cloud."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.MALFORMED_RESPONSE,
        keywords=("unexpected end of json input",),
        exception_types=(json.JSONDecodeError, ValidationError),
        user_message=(
            "Error de API (Gemini): La IA devolvió una respuesta inválida o incompleta. "
            "Esto puede ocurrir bajo alta demanda. Por favor, inténtalo de nuevo."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.CAPACITY,
        keywords=("at capacity",),
        user_message=(
            "El modelo de IA está experimentando una alta demanda en este momento. "
            "Por favor, inténtalo de nuevo en unos momentos."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.QUOTA_EXCEEDED,
        keywords=("resource_exhausted", "quota"),
        user_message=(
            "Se ha excedido la cuota de la API para Gemini. Por favor, revisa tu plan "
            "y detalles de facturación en su sitio web."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.SAFETY_REJECTION,
        keywords=("usage guidelines", "safety policy"),
        user_message=(
            "La solicitud no pudo ser enviada debido a restricciones de seguridad. "
            "Por favor, intenta reformular tu petición."
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.TRANSPORT,
        keywords=("xhr error", "rpc failed", "500"),
        exception_types=(httpx.TransportError,),
        user_message=(
            "Ocurrió un error de red al comunicarse con la IA. Esto podría ser un "
            "problema temporal. Por favor, inténtalo de nuevo. (Detalles: {details})"
        ),
    ),
)

UNKNOWN_MESSAGE = "Ocurrió un error inesperado: {details}"


def describe_context(context: str) -> str:
    """Spanish label for an operation context."""
    return CONTEXT_LABELS.get(context, context)


def permission_action(context: str) -> str:
    """Describe the capability a permission error is about."""
    lowered = context.lower()
    if any(marker in lowered for marker in _WEB_SEARCH_CONTEXT_MARKERS):
        return "usar la Búsqueda Web"
    if "image" in lowered:
        return "generar imágenes"
    if "video" in lowered:
        return "generar videos"
    return "esta acción"


def _error_text(error: BaseException | str) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


def classify(raw_error: BaseException | str, context: str) -> AppError:
    """Map a raw failure into a typed, user-presentable AppError.

    Args:
        raw_error: The caught exception (or a bare message).
        context: Short label of the calling operation ("thread", "image", ...).

    Returns:
        An AppError subclass instance. Already classified errors keep their
        kind: one that carries a context is returned as-is, one without a
        context is copied with ``context`` filled in. The input is never
        modified.
    """
    if isinstance(raw_error, AppError) and not isinstance(raw_error, ConfigurationError):
        if raw_error.context is not None:
            return raw_error
        return type(raw_error)(raw_error.message, context=context)

    details = _error_text(raw_error)
    lowered = details.lower()
    error_obj = raw_error if isinstance(raw_error, BaseException) else Exception(details)

    for rule in CLASSIFICATION_RULES:
        if rule.matches(error_obj, lowered):
            message = rule.user_message.format(
                action=permission_action(context),
                details=details,
            )
            return ERROR_CLASSES[rule.kind](message, context=context)

    return ERROR_CLASSES[ErrorKind.UNKNOWN](
        UNKNOWN_MESSAGE.format(details=details), context=context
    )
