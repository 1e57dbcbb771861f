"""Abstract base classes for dependency inversion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .generation.types import ProviderResponse, TranscriptionRequest
    from .schemas.draft import DraftSuccess


class AbstractGenerationProvider(ABC):
    """Interface for generative-AI providers that accept inline audio."""

    @abstractmethod
    async def generate(
        self,
        model_id: str,
        prompt: str,
        audio: bytes,
        mime_type: str,
    ) -> ProviderResponse:
        """Run one generation. Raises ProviderError on any failure."""

    @abstractmethod
    def is_configured(self) -> bool: ...


class AbstractDrafter(ABC):
    """Interface for the request boundary."""

    @abstractmethod
    def build_request(
        self,
        audio: bytes | None,
        mime_type: str | None,
        model: str | None,
        existing_text: str | None,
    ) -> TranscriptionRequest: ...

    @abstractmethod
    async def draft(
        self, request: TranscriptionRequest, request_id: str | None = None
    ) -> DraftSuccess: ...
