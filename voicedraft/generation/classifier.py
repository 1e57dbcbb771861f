"""Classification of provider error messages.

The upstream SDK only exposes free-form error text, so classification is a
substring scan. The tables below are the single place to update when the
provider changes its wording. Matching is case-sensitive.
"""

from .types import ErrorClassification

# Checked in this order; the first table with a hit wins.
QUOTA_MARKERS = ("429", "quota", "Too Many Requests")
RETRYABLE_MARKERS = ("503", "overloaded", "500", "502", "504", "timeout", "network")
NON_RETRYABLE_MARKERS = (
    "401",
    "403",
    "invalid",
    "not found",
    "permission",
    "unauthorized",
    "forbidden",
)

_PRECEDENCE = (
    (ErrorClassification.QUOTA_EXCEEDED, QUOTA_MARKERS),
    (ErrorClassification.RETRYABLE, RETRYABLE_MARKERS),
    (ErrorClassification.NON_RETRYABLE, NON_RETRYABLE_MARKERS),
)

# Used by the request boundary to pick a more specific status code.
FORMAT_ERROR_MARKERS = (
    "did not match the expected pattern",
    "Unsupported MIME type",
    "INVALID_ARGUMENT",
)
TOO_LARGE_MARKERS = ("Request Entity Too Large",)
TIMEOUT_MARKERS = ("timeout", "AbortError")


def _contains_any(message: str, markers: tuple[str, ...]) -> bool:
    return any(marker in message for marker in markers)


def classify_error(message: str | None) -> ErrorClassification:
    """Map a provider error message to an ErrorClassification."""
    message = message or ""
    for classification, markers in _PRECEDENCE:
        if _contains_any(message, markers):
            return classification
    return ErrorClassification.UNKNOWN


def is_format_error(message: str | None) -> bool:
    return _contains_any(message or "", FORMAT_ERROR_MARKERS)


def is_too_large_error(message: str | None) -> bool:
    return _contains_any(message or "", TOO_LARGE_MARKERS)


def is_timeout_error(message: str | None) -> bool:
    return _contains_any(message or "", TIMEOUT_MARKERS)
