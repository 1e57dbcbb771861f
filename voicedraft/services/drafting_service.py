"""Request boundary: validate the upload, run the orchestrator, shape the response."""

from datetime import UTC, datetime

from ..config import Config
from ..core.errors import (
    GenerationFailedError,
    InvalidModelError,
    MissingAudioError,
    PayloadTooLargeError,
    UnsupportedAudioError,
)
from ..core.llm_observability import LLMObservability
from ..core.logging import get_logger
from ..generation.classifier import is_format_error, is_timeout_error, is_too_large_error
from ..generation.orchestrator import GenerationOrchestrator
from ..generation.pricing import calculate_cost
from ..generation.prompts import build_prompt, is_completion
from ..generation.types import (
    ErrorClassification,
    FailureReason,
    GenerationFailure,
    ModelChoice,
    TranscriptionRequest,
)
from ..interfaces import AbstractDrafter, AbstractGenerationProvider
from ..messages import get_message
from ..schemas.draft import CostSummary, DraftSuccess

log = get_logger("drafting")

DEFAULT_MIME_TYPE = "audio/webm"
ACCEPTED_MIME_PREFIXES = ("audio/", "video/")


def failure_status(failure: GenerationFailure) -> tuple[int, str]:
    """Map a generation failure to (HTTP status, message key)."""
    if failure.reason is FailureReason.TIMEOUT:
        return 408, "timeout"
    if failure.reason is FailureReason.EMPTY_RESPONSE:
        return 500, "empty_response"

    message = failure.message
    classification = failure.classification

    if classification is ErrorClassification.QUOTA_EXCEEDED:
        return 429, "quota"
    # Boundary markers apply whatever the classification.
    if is_too_large_error(message):
        return 413, "too_large_upstream"
    if is_format_error(message):
        return 400, "unsupported_format"
    if is_timeout_error(message):
        return 408, "timeout"
    if classification is ErrorClassification.NON_RETRYABLE:
        return 500, "failed"
    return 500, "transient"


class DraftingService(AbstractDrafter):
    """Turns a voice memo upload into a drafted text.

    Holds only read-only collaborators; per-request state lives in the
    GenerationOrchestrator created for each call to `draft`.
    """

    def __init__(
        self,
        config: Config,
        provider: AbstractGenerationProvider,
        observability: LLMObservability | None = None,
    ):
        self.config = config
        self.provider = provider
        self.observability = observability or LLMObservability()

    def build_request(
        self,
        audio: bytes | None,
        mime_type: str | None,
        model: str | None,
        existing_text: str | None,
    ) -> TranscriptionRequest:
        """Validate raw form fields. Raises a DraftError subclass on bad input."""
        if not audio:
            raise MissingAudioError()

        limit = self.config.upload.max_audio_bytes
        if len(audio) > limit:
            raise PayloadTooLargeError(len(audio), limit)

        mime_type = (mime_type or DEFAULT_MIME_TYPE).split(";")[0].strip().lower()
        if not mime_type.startswith(ACCEPTED_MIME_PREFIXES):
            raise UnsupportedAudioError(f"Unsupported content type '{mime_type}'")

        return TranscriptionRequest(
            audio=audio,
            mime_type=mime_type,
            model=parse_model(model),
            prior_text=existing_text or None,
        )

    async def draft(self, request: TranscriptionRequest, request_id: str | None = None) -> DraftSuccess:
        """Run generation for a validated request.

        Raises:
            GenerationFailedError: the orchestrator gave up; carries status and message key.
        """
        prompt = build_prompt(request.prior_text)
        mode = "complete" if is_completion(request.prior_text) else "draft"
        log.info(
            f"Drafting {len(request.audio) // 1024}KB of {request.mime_type}",
            extra={"request_id": request_id, "mode": mode, "requested_model": request.model.value},
        )

        span = self.observability.start_drafting(
            {
                "request_id": request_id,
                "mode": mode,
                "model": self.config.gemini.model_id(request.model),
            },
            request.audio,
        )

        orchestrator = GenerationOrchestrator(
            self.provider,
            self.config.gemini,
            self.config.retry,
            timeout=self.config.upload.request_timeout,
            request_id=request_id,
        )
        outcome = await orchestrator.run(prompt, request.audio, request.mime_type, request.model)

        if isinstance(outcome, GenerationFailure):
            self.observability.finish_error(span, outcome)
            status_code, message_key = failure_status(outcome)
            raise GenerationFailedError(outcome, status_code, message_key)

        cost = calculate_cost(outcome.model_id, outcome.input_tokens, outcome.output_tokens)
        self.observability.finish_success(span, outcome, cost)

        return DraftSuccess(
            content=outcome.text,
            cost=CostSummary(
                total_eur=cost.total_eur,
                total_usd=cost.total_usd,
                input_tokens=cost.input_tokens,
                output_tokens=cost.output_tokens,
                model=cost.model,
            ),
            fallback=get_message("fallback", self.config.locale) if outcome.did_fallback else None,
            timestamp=datetime.now(UTC).isoformat(),
        )


def parse_model(value: str | None) -> ModelChoice:
    """Parse the `model` form field; empty means the accurate tier."""
    if not value or not value.strip():
        return ModelChoice.ACCURATE
    try:
        return ModelChoice(value.strip().lower())
    except ValueError:
        raise InvalidModelError(value)
