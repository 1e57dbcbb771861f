"""Provider error classification tests."""

import pytest

from voicedraft.generation.classifier import (
    classify_error,
    is_format_error,
    is_timeout_error,
    is_too_large_error,
)
from voicedraft.generation.types import ErrorClassification


@pytest.mark.parametrize(
    "message",
    [
        "429 RESOURCE_EXHAUSTED. {'error': {'code': 429}}",
        "You exceeded your current quota",
        "Too Many Requests",
    ],
)
def test_quota_errors(message):
    assert classify_error(message) is ErrorClassification.QUOTA_EXCEEDED


@pytest.mark.parametrize(
    "message",
    [
        "503 UNAVAILABLE. The model is overloaded.",
        "500 INTERNAL",
        "502 Bad Gateway",
        "504 DEADLINE_EXCEEDED",
        "Provider timeout: ReadTimeout()",
        "Provider network error: ConnectError()",
    ],
)
def test_retryable_errors(message):
    assert classify_error(message) is ErrorClassification.RETRYABLE


@pytest.mark.parametrize(
    "message",
    [
        "401 UNAUTHENTICATED",
        "403 PERMISSION_DENIED",
        "400 INVALID_ARGUMENT. Request contains an invalid argument.",
        "404 model not found",
        "Gemini API key not configured (unauthorized)",
    ],
)
def test_non_retryable_errors(message):
    assert classify_error(message) is ErrorClassification.NON_RETRYABLE


def test_unmatched_message_is_unknown():
    assert classify_error("something odd happened") is ErrorClassification.UNKNOWN
    assert classify_error("") is ErrorClassification.UNKNOWN
    assert classify_error(None) is ErrorClassification.UNKNOWN


def test_quota_takes_precedence_over_retryable():
    """A quota error that also mentions 500 must stay a quota error."""
    assert classify_error("429 quota exceeded (upstream 500)") is ErrorClassification.QUOTA_EXCEEDED


def test_retryable_takes_precedence_over_non_retryable():
    assert classify_error("503 invalid upstream state") is ErrorClassification.RETRYABLE


def test_matching_is_case_sensitive():
    assert classify_error("QUOTA") is ErrorClassification.UNKNOWN
    assert classify_error("Request Timeout") is ErrorClassification.UNKNOWN


def test_classification_is_stable():
    message = "503 overloaded"
    assert classify_error(message) is classify_error(message)


def test_boundary_markers():
    assert is_format_error("The string did not match the expected pattern.")
    assert is_format_error("400 INVALID_ARGUMENT. Unsupported MIME type: text/plain")
    assert not is_format_error("403 PERMISSION_DENIED")

    assert is_too_large_error("413 Request Entity Too Large")
    assert not is_too_large_error("503 overloaded")

    assert is_timeout_error("AbortError: request aborted")
    assert is_timeout_error("Provider timeout: ReadTimeout()")
    assert not is_timeout_error(None)
