"""Value types passed between the provider, the orchestrator and the boundary."""

from dataclasses import dataclass
from enum import Enum


class ModelChoice(str, Enum):
    """User-facing model tier, as sent in the `model` form field."""

    FAST = "flash"
    ACCURATE = "pro"


class ErrorClassification(str, Enum):
    RETRYABLE = "retryable"
    QUOTA_EXCEEDED = "quota_exceeded"
    NON_RETRYABLE = "non_retryable"
    UNKNOWN = "unknown"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    QUOTA_FAILURE = "quota_failure"
    FATAL_FAILURE = "fatal_failure"


class FailureReason(str, Enum):
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class TranscriptionRequest:
    """One validated user submission. Built by the drafting service."""

    audio: bytes
    mime_type: str
    model: ModelChoice = ModelChoice.ACCURATE
    prior_text: str | None = None


@dataclass(frozen=True)
class ProviderResponse:
    text: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of a single provider call."""

    model: ModelChoice
    attempt_number: int
    outcome: AttemptOutcome
    classification: ErrorClassification | None = None
    error: str | None = None
    response: ProviderResponse | None = None


@dataclass(frozen=True)
class GenerationResult:
    text: str
    input_tokens: int
    output_tokens: int
    model_used: ModelChoice
    model_id: str
    did_fallback: bool = False
    attempts: int = 1


@dataclass(frozen=True)
class GenerationFailure:
    reason: FailureReason
    message: str
    classification: ErrorClassification | None = None
    model: ModelChoice | None = None
    did_fallback: bool = False
    attempts: int = 0
