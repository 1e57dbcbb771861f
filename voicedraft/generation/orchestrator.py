"""Retry and fallback orchestration around a single drafting request."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ..core.logging import get_logger
from .classifier import classify_error
from .types import (
    AttemptOutcome,
    ErrorClassification,
    FailureReason,
    GenerationAttempt,
    GenerationFailure,
    GenerationResult,
    ModelChoice,
)

if TYPE_CHECKING:
    from ..config import GeminiConfig, RetryConfig
    from ..interfaces import AbstractGenerationProvider

log = get_logger("orchestrator")

_OUTCOME_BY_CLASSIFICATION = {
    ErrorClassification.QUOTA_EXCEEDED: AttemptOutcome.QUOTA_FAILURE,
    ErrorClassification.RETRYABLE: AttemptOutcome.RETRYABLE_FAILURE,
    ErrorClassification.UNKNOWN: AttemptOutcome.RETRYABLE_FAILURE,
    ErrorClassification.NON_RETRYABLE: AttemptOutcome.FATAL_FAILURE,
}


class GenerationOrchestrator:
    """Drives one request through provider attempts until success or failure.

    One instance per request. Attempts are strictly sequential:
    - a quota error on a non-fast model switches once to the fast model
    - retryable errors are retried on the same model with backoff
    - unknown errors get a single retry
    - anything else, or an exhausted budget, ends the run

    The whole run is bounded by ``timeout`` seconds; on expiry the in-flight
    attempt is cancelled and the run fails with ``FailureReason.TIMEOUT``.
    """

    def __init__(
        self,
        provider: AbstractGenerationProvider,
        gemini: GeminiConfig,
        retry: RetryConfig,
        timeout: float,
        request_id: str | None = None,
    ):
        self.provider = provider
        self.gemini = gemini
        self.retry = retry
        self.timeout = timeout
        self.request_id = request_id
        self.attempts: list[GenerationAttempt] = []
        self._model: ModelChoice | None = None
        self._did_fallback = False
        self._started = False

    async def run(
        self,
        prompt: str,
        audio: bytes,
        mime_type: str,
        preference: ModelChoice,
    ) -> GenerationResult | GenerationFailure:
        if self._started:
            raise RuntimeError("GenerationOrchestrator instances are single-use")
        self._started = True

        try:
            return await asyncio.wait_for(
                self._run(prompt, audio, mime_type, preference), timeout=self.timeout
            )
        except TimeoutError:
            log.error(
                f"Generation timed out after {self.timeout}s",
                extra=self._extra(model=self._model, attempt=len(self.attempts)),
            )
            return GenerationFailure(
                reason=FailureReason.TIMEOUT,
                message=f"Request timeout after {self.timeout}s",
                classification=ErrorClassification.RETRYABLE,
                model=self._model,
                did_fallback=self._did_fallback,
                attempts=len(self.attempts),
            )

    async def _run(
        self,
        prompt: str,
        audio: bytes,
        mime_type: str,
        preference: ModelChoice,
    ) -> GenerationResult | GenerationFailure:
        self._model = preference
        attempt_number = 1

        while True:
            attempt = await self._attempt(self._model, attempt_number, prompt, audio, mime_type)
            self.attempts.append(attempt)

            if attempt.outcome is AttemptOutcome.SUCCESS:
                return self._result(attempt)

            if attempt.response is not None:
                # Provider answered but produced no text.
                return self._failure(attempt, FailureReason.EMPTY_RESPONSE)

            if self._should_fallback(attempt):
                log.warning(
                    f"Quota reached for {self.gemini.model_id(self._model)}, "
                    f"falling back to {self.gemini.model_id(ModelChoice.FAST)}",
                    extra=self._extra(model=self._model, attempt=attempt_number),
                )
                self._model = ModelChoice.FAST
                self._did_fallback = True
                attempt_number = 1
                continue

            if self._should_retry(attempt):
                delay = self.retry.delay_for(attempt_number)
                log.warning(
                    f"Attempt {attempt_number}/{self.retry.attempt_budget} failed "
                    f"({attempt.classification.value}), retrying in {delay:g}s",
                    extra=self._extra(model=self._model, attempt=attempt_number),
                )
                await asyncio.sleep(delay)
                attempt_number += 1
                continue

            return self._failure(attempt, FailureReason.PROVIDER_ERROR)

    async def _attempt(
        self,
        model: ModelChoice,
        attempt_number: int,
        prompt: str,
        audio: bytes,
        mime_type: str,
    ) -> GenerationAttempt:
        """Make one provider call and turn its outcome into a GenerationAttempt."""
        model_id = self.gemini.model_id(model)
        log.info(
            f"Attempt {attempt_number}/{self.retry.attempt_budget} with {model_id}",
            extra=self._extra(model=model, attempt=attempt_number),
        )
        try:
            response = await self.provider.generate(model_id, prompt, audio, mime_type)
        except Exception as e:
            message = str(e) or type(e).__name__
            classification = classify_error(message)
            log.warning(
                f"Provider error with {model_id}: {message}",
                extra=self._extra(
                    model=model, attempt=attempt_number, classification=classification.value
                ),
            )
            return GenerationAttempt(
                model=model,
                attempt_number=attempt_number,
                outcome=_OUTCOME_BY_CLASSIFICATION[classification],
                classification=classification,
                error=message,
            )

        if not response.text or not response.text.strip():
            log.error(
                f"Empty response from {model_id}",
                extra=self._extra(model=model, attempt=attempt_number),
            )
            return GenerationAttempt(
                model=model,
                attempt_number=attempt_number,
                outcome=AttemptOutcome.FATAL_FAILURE,
                error="Empty model response",
                response=response,
            )

        return GenerationAttempt(
            model=model,
            attempt_number=attempt_number,
            outcome=AttemptOutcome.SUCCESS,
            response=response,
        )

    def _should_fallback(self, attempt: GenerationAttempt) -> bool:
        return (
            attempt.classification is ErrorClassification.QUOTA_EXCEEDED
            and attempt.model is not ModelChoice.FAST
            and not self._did_fallback
        )

    def _should_retry(self, attempt: GenerationAttempt) -> bool:
        budget = self.retry.attempt_budget
        if attempt.classification is ErrorClassification.RETRYABLE:
            return attempt.attempt_number < budget
        if attempt.classification is ErrorClassification.UNKNOWN:
            return attempt.attempt_number == 1 and budget > 1
        return False

    def _result(self, attempt: GenerationAttempt) -> GenerationResult:
        response = attempt.response
        log.info(
            f"Generation succeeded with {self.gemini.model_id(attempt.model)}",
            extra=self._extra(
                model=attempt.model,
                attempt=attempt.attempt_number,
                fallback=self._did_fallback,
                output_chars=len(response.text),
            ),
        )
        return GenerationResult(
            text=response.text.strip(),
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            model_used=attempt.model,
            model_id=self.gemini.model_id(attempt.model),
            did_fallback=self._did_fallback,
            attempts=len(self.attempts),
        )

    def _failure(self, attempt: GenerationAttempt, reason: FailureReason) -> GenerationFailure:
        log.error(
            f"Generation failed: {attempt.error}",
            extra=self._extra(
                model=attempt.model,
                attempt=attempt.attempt_number,
                reason=reason.value,
                classification=attempt.classification.value if attempt.classification else None,
            ),
        )
        return GenerationFailure(
            reason=reason,
            message=attempt.error or reason.value,
            classification=attempt.classification,
            model=attempt.model,
            did_fallback=self._did_fallback,
            attempts=len(self.attempts),
        )

    def _extra(self, model: ModelChoice | None = None, **fields) -> dict:
        return {
            "request_id": self.request_id,
            "model": self.gemini.model_id(model) if model else None,
            **fields,
        }
