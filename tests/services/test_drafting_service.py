"""Request boundary tests: validation, prompt selection and failure mapping."""

import pytest

from voicedraft.core.errors import (
    GenerationFailedError,
    InvalidModelError,
    MissingAudioError,
    PayloadTooLargeError,
    ProviderError,
    UnsupportedAudioError,
)
from voicedraft.generation.prompts import DRAFT_PROMPT
from voicedraft.generation.pricing import USD_TO_EUR
from voicedraft.generation.types import (
    ErrorClassification,
    FailureReason,
    GenerationFailure,
    ModelChoice,
    ProviderResponse,
    TranscriptionRequest,
)
from voicedraft.services.drafting_service import failure_status, parse_model

MB = 1024 * 1024


# --- Validation ---


class TestBuildRequest:
    def test_valid_request(self, drafting_service):
        req = drafting_service.build_request(b"audio", "audio/webm;codecs=opus", "flash", None)

        assert req.audio == b"audio"
        assert req.mime_type == "audio/webm"
        assert req.model is ModelChoice.FAST
        assert req.prior_text is None

    def test_missing_audio(self, drafting_service):
        with pytest.raises(MissingAudioError):
            drafting_service.build_request(None, "audio/webm", None, None)

    def test_empty_audio_counts_as_missing(self, drafting_service):
        with pytest.raises(MissingAudioError):
            drafting_service.build_request(b"", "audio/webm", None, None)

    def test_audio_over_limit(self, drafting_service):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            drafting_service.build_request(b"x" * (5 * MB), "audio/webm", None, None)

        assert exc_info.value.status_code == 413
        assert exc_info.value.params == {"size_mb": 5, "limit_mb": 4}

    def test_audio_at_limit_is_accepted(self, drafting_service):
        req = drafting_service.build_request(b"x" * (4 * MB), "audio/webm", None, None)
        assert len(req.audio) == 4 * MB

    def test_missing_mime_type_defaults_to_webm(self, drafting_service):
        req = drafting_service.build_request(b"audio", None, None, None)
        assert req.mime_type == "audio/webm"

    def test_video_webm_is_accepted(self, drafting_service):
        req = drafting_service.build_request(b"audio", "video/webm", None, None)
        assert req.mime_type == "video/webm"

    def test_non_audio_type_is_rejected(self, drafting_service):
        with pytest.raises(UnsupportedAudioError):
            drafting_service.build_request(b"%PDF", "application/pdf", None, None)

    def test_existing_text_kept(self, drafting_service):
        req = drafting_service.build_request(b"audio", "audio/webm", "pro", "Dear all,")
        assert req.prior_text == "Dear all,"


class TestParseModel:
    def test_default_is_accurate(self):
        assert parse_model(None) is ModelChoice.ACCURATE
        assert parse_model("") is ModelChoice.ACCURATE

    def test_known_values(self):
        assert parse_model("flash") is ModelChoice.FAST
        assert parse_model(" PRO ") is ModelChoice.ACCURATE

    def test_unknown_value(self):
        with pytest.raises(InvalidModelError):
            parse_model("ultra")


# --- Drafting ---


@pytest.mark.asyncio
async def test_draft_success_includes_cost(drafting_service, provider, observability):
    req = TranscriptionRequest(audio=b"a" * (3 * MB), mime_type="audio/webm", model=ModelChoice.FAST)

    resp = await drafting_service.draft(req, request_id="r-1")

    assert resp.success is True
    assert resp.content == "Dear team,\nplease find the report attached."
    assert resp.cost.model == "gemini-2.5-flash"
    assert resp.cost.input_tokens == 1000
    assert resp.cost.output_tokens == 500
    assert resp.cost.total_usd == pytest.approx(0.014)
    assert resp.cost.total_eur == resp.cost.total_usd * USD_TO_EUR
    assert resp.fallback is None
    observability.finish_success.assert_called_once()


@pytest.mark.asyncio
async def test_draft_mode_uses_draft_prompt(drafting_service, provider):
    req = TranscriptionRequest(audio=b"a", mime_type="audio/webm")

    await drafting_service.draft(req)

    model_id, prompt, audio, mime = provider.generate.await_args.args
    assert model_id == "gemini-2.5-pro"
    assert prompt == DRAFT_PROMPT


@pytest.mark.asyncio
async def test_completion_mode_embeds_prior_text(drafting_service, provider):
    req = TranscriptionRequest(audio=b"a", mime_type="audio/webm", prior_text="Agenda: budget review")

    await drafting_service.draft(req)

    prompt = provider.generate.await_args.args[1]
    assert "Agenda: budget review" in prompt
    assert prompt != DRAFT_PROMPT


@pytest.mark.asyncio
async def test_fallback_note_and_cost_of_model_used(drafting_service, provider):
    provider.generate.side_effect = [
        ProviderError("429 RESOURCE_EXHAUSTED"),
        ProviderResponse(text="Short draft", input_tokens=1000, output_tokens=500),
    ]
    req = TranscriptionRequest(audio=b"a", mime_type="audio/webm", model=ModelChoice.ACCURATE)

    resp = await drafting_service.draft(req)

    assert resp.fallback == "Pro quota reached, automatically fell back to Flash"
    assert resp.cost.model == "gemini-2.5-flash"
    assert resp.cost.total_usd == pytest.approx(0.014)


@pytest.mark.asyncio
async def test_non_retryable_failure_raises(drafting_service, provider, observability):
    provider.generate.side_effect = ProviderError("403 PERMISSION_DENIED")
    req = TranscriptionRequest(audio=b"a", mime_type="audio/webm")

    with pytest.raises(GenerationFailedError) as exc_info:
        await drafting_service.draft(req)

    assert exc_info.value.status_code == 500
    assert exc_info.value.message_key == "failed"
    assert exc_info.value.failure.classification is ErrorClassification.NON_RETRYABLE
    observability.finish_error.assert_called_once()


# --- Failure mapping ---


def _failure(message="", classification=None, reason=FailureReason.PROVIDER_ERROR):
    return GenerationFailure(reason=reason, message=message, classification=classification)


@pytest.mark.parametrize(
    "failure, expected",
    [
        (_failure("timeout", ErrorClassification.RETRYABLE, FailureReason.TIMEOUT), (408, "timeout")),
        (_failure("Empty", None, FailureReason.EMPTY_RESPONSE), (500, "empty_response")),
        (_failure("429 quota", ErrorClassification.QUOTA_EXCEEDED), (429, "quota")),
        (_failure("503 overloaded", ErrorClassification.RETRYABLE), (500, "transient")),
        (_failure("Provider timeout: ReadTimeout", ErrorClassification.RETRYABLE), (408, "timeout")),
        (_failure("403 forbidden", ErrorClassification.NON_RETRYABLE), (500, "failed")),
        (
            _failure("400 INVALID_ARGUMENT. invalid audio", ErrorClassification.NON_RETRYABLE),
            (400, "unsupported_format"),
        ),
        (_failure("Request Entity Too Large", ErrorClassification.UNKNOWN), (413, "too_large_upstream")),
        (_failure("weird", ErrorClassification.UNKNOWN), (500, "transient")),
        (
            _failure("The string did not match the expected pattern.", ErrorClassification.UNKNOWN),
            (400, "unsupported_format"),
        ),
        (
            _failure("400 Bad Request. Unsupported MIME type: audio/x-foo", ErrorClassification.UNKNOWN),
            (400, "unsupported_format"),
        ),
        (_failure("AbortError: This operation was aborted", ErrorClassification.UNKNOWN), (408, "timeout")),
    ],
)
def test_failure_status(failure, expected):
    assert failure_status(failure) == expected
