"""Error types raised by the provider adapter and the request boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..generation.types import GenerationFailure


class ProviderError(Exception):
    """A provider call failed. The message is what the classifier inspects."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DraftError(Exception):
    """Base class for failures surfaced to the caller as `{success: false}`.

    `message_key` selects the localized text; `params` fill its placeholders.
    """

    status_code: int = 500
    message_key: str = "failed"

    def __init__(self, detail: str | None = None, **params):
        self.detail = detail
        self.params = params
        super().__init__(detail or self.message_key)


class MissingAudioError(DraftError):
    status_code = 400
    message_key = "missing_audio"


class PayloadTooLargeError(DraftError):
    status_code = 413
    message_key = "too_large"

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Audio is {size_bytes} bytes, limit is {limit_bytes}",
            size_mb=round(size_bytes / 1024 / 1024),
            limit_mb=round(limit_bytes / 1024 / 1024),
        )


class UnsupportedAudioError(DraftError):
    status_code = 400
    message_key = "unsupported_format"


class InvalidModelError(DraftError):
    status_code = 400
    message_key = "invalid_model"

    def __init__(self, model: str):
        super().__init__(f"Unknown model '{model}'", model=model)


class GenerationFailedError(DraftError):
    """The orchestrator gave up. Status and message come from the failure mapping."""

    def __init__(self, failure: GenerationFailure, status_code: int, message_key: str):
        self.failure = failure
        self.status_code = status_code
        self.message_key = message_key
        super().__init__(failure.message)
