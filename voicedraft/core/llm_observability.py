"""Optional Langfuse observability for drafting runs."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from hashlib import sha256
from typing import TYPE_CHECKING, Any

from .logging import get_logger

if TYPE_CHECKING:
    from ..generation.pricing import CostBreakdown
    from ..generation.types import GenerationFailure, GenerationResult

log = get_logger("llm_observability")


@dataclass
class DraftingSpan:
    """In-memory drafting span for telemetry and logging."""

    context: dict[str, Any]
    started_at: float
    trace: Any | None = None
    generation: Any | None = None


class LLMObservability:
    """Wrapper that emits Langfuse spans when configured, no-ops otherwise."""

    def __init__(self):
        self.prompt_version = os.getenv("VOICEDRAFT_PROMPT_VERSION", "v1")
        self.capture_output = os.getenv("VOICEDRAFT_LANGFUSE_CAPTURE_OUTPUT", "false").lower() == "true"
        self.client = self._build_client()

    def _build_client(self) -> Any | None:
        public_key = os.getenv("LANGFUSE_PUBLIC_KEY", "")
        secret_key = os.getenv("LANGFUSE_SECRET_KEY", "")
        if not public_key or not secret_key:
            return None

        try:
            from langfuse import Langfuse  # type: ignore[import-not-found]
        except ImportError:
            log.warning("LANGFUSE keys set but langfuse is not installed; telemetry disabled")
            return None

        kwargs = {"public_key": public_key, "secret_key": secret_key}
        if host := os.getenv("LANGFUSE_HOST"):
            kwargs["host"] = host

        try:
            return Langfuse(**kwargs)
        except Exception as exc:
            log.warning("Failed to initialize Langfuse client", extra={"error": str(exc)})
            return None

    def start_drafting(self, context: dict[str, Any], audio: bytes) -> DraftingSpan:
        """Create a drafting span. Only the audio size and hash are recorded."""
        ctx = dict(context)
        ctx.setdefault("feature", "drafting")
        ctx.setdefault("prompt_version", self.prompt_version)
        metadata = {
            **ctx,
            "audio_bytes": len(audio),
            "audio_sha16": sha256(audio).hexdigest()[:16],
        }

        trace = None
        generation = None

        if self.client:
            try:
                trace = self.client.trace(
                    name="voice_draft",
                    session_id=str(ctx.get("request_id", "unknown")),
                    metadata=metadata,
                )
                generation = trace.generation(
                    name="audio_drafting",
                    model=str(ctx.get("model", "unknown")),
                    metadata={"feature": ctx["feature"], "prompt_version": ctx["prompt_version"]},
                )
            except Exception as exc:
                log.warning("Failed to start Langfuse span", extra={"error": str(exc)})
                trace = None
                generation = None

        return DraftingSpan(context=ctx, started_at=time.monotonic(), trace=trace, generation=generation)

    def finish_success(
        self, span: DraftingSpan, result: GenerationResult, cost: CostBreakdown
    ) -> None:
        duration_ms = round((time.monotonic() - span.started_at) * 1000, 1)
        if span.generation:
            try:
                span.generation.end(
                    model=result.model_id,
                    output=result.text if self.capture_output else {"captured": False},
                    usage={"input": result.input_tokens, "output": result.output_tokens},
                    metadata={
                        "duration_ms": duration_ms,
                        "attempts": result.attempts,
                        "fallback": result.did_fallback,
                        "total_usd": cost.total_usd,
                    },
                )
            except Exception as exc:
                log.warning("Failed to end Langfuse generation", extra={"error": str(exc)})

        log.info(
            "Drafting success",
            extra={
                "request_id": span.context.get("request_id"),
                "model": result.model_id,
                "attempts": result.attempts,
                "fallback": result.did_fallback,
                "input_tokens": result.input_tokens,
                "output_tokens": result.output_tokens,
                "total_usd": round(cost.total_usd, 6),
                "duration_ms": duration_ms,
            },
        )

    def finish_error(self, span: DraftingSpan, failure: GenerationFailure) -> None:
        duration_ms = round((time.monotonic() - span.started_at) * 1000, 1)
        if span.generation:
            try:
                span.generation.end(
                    level="ERROR",
                    status_message=failure.message,
                    metadata={
                        "duration_ms": duration_ms,
                        "attempts": failure.attempts,
                        "reason": failure.reason.value,
                    },
                )
            except Exception as exc:
                log.warning("Failed to end Langfuse error span", extra={"error": str(exc)})

        log.warning(
            "Drafting failed",
            extra={
                "request_id": span.context.get("request_id"),
                "reason": failure.reason.value,
                "classification": failure.classification.value if failure.classification else None,
                "attempts": failure.attempts,
                "duration_ms": duration_ms,
                "error": failure.message,
            },
        )
