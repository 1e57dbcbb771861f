"""Gemini provider adapter over the google-genai SDK."""

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ..config import GeminiConfig
from ..core.errors import ProviderError
from ..core.logging import get_logger
from ..interfaces import AbstractGenerationProvider
from .types import ProviderResponse

log = get_logger("gemini")


class GeminiProvider(AbstractGenerationProvider):
    """Sends a prompt plus inline audio to Gemini and returns text and token usage.

    Every failure leaves this class as a ProviderError whose message keeps the
    upstream wording, so the classifier sees the same text the SDK produced.
    """

    def __init__(self, config: GeminiConfig, client: genai.Client | None = None):
        self.config = config
        self._client = client

    def is_configured(self) -> bool:
        return self._client is not None or bool(self.config.api_key)

    def _get_client(self) -> genai.Client:
        """Create the SDK client on first use (lazy singleton)."""
        if self._client is None:
            if not self.config.api_key:
                raise ProviderError("Gemini API key not configured (unauthorized)")
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=genai_types.HttpOptions(timeout=self.config.attempt_timeout * 1000),
            )
        return self._client

    async def generate(
        self,
        model_id: str,
        prompt: str,
        audio: bytes,
        mime_type: str,
    ) -> ProviderResponse:
        client = self._get_client()
        audio_part = genai_types.Part.from_bytes(data=audio, mime_type=mime_type)

        try:
            response = await client.aio.models.generate_content(
                model=model_id,
                contents=[prompt, audio_part],
            )
        except genai_errors.APIError as e:
            raise ProviderError(str(e), status_code=e.code) from e
        except (httpx.TimeoutException, TimeoutError) as e:
            raise ProviderError(f"Provider timeout: {e!r}") from e
        except httpx.TransportError as e:
            raise ProviderError(f"Provider network error: {e!r}") from e

        usage = response.usage_metadata
        return ProviderResponse(
            text=response.text or "",
            input_tokens=int(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=int(usage.candidates_token_count or 0) if usage else 0,
        )
