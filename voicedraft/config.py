"""Configuration for the VoiceDraft backend."""

import os
from dataclasses import dataclass, field

from .generation.pricing import has_pricing
from .generation.types import ModelChoice

RETRY_POLICIES = ("exponential", "fixed")
LOCALES = ("fr", "en")


@dataclass
class GeminiConfig:
    """Configuration for the Gemini provider."""

    api_key: str = ""
    fast_model: str = "gemini-2.5-flash"
    accurate_model: str = "gemini-2.5-pro"
    attempt_timeout: int = 300  # Max seconds for a single provider call

    def model_id(self, choice: ModelChoice) -> str:
        if choice is ModelChoice.FAST:
            return self.fast_model
        return self.accurate_model


@dataclass
class RetryConfig:
    """Retry budget and backoff between provider attempts."""

    policy: str = "exponential"  # "exponential" (2^n s) or "fixed" (one retry)
    max_attempts: int = 3
    fixed_delay: float = 3.0

    @property
    def attempt_budget(self) -> int:
        """Total calls allowed per model, first attempt included."""
        if self.policy == "fixed":
            return 2
        return self.max_attempts

    def delay_for(self, attempt_number: int) -> float:
        """Seconds to wait after failed attempt `attempt_number` (1-based)."""
        if self.policy == "fixed":
            return self.fixed_delay
        return float(2**attempt_number)


@dataclass
class UploadConfig:
    """Limits applied at the request boundary."""

    max_audio_bytes: int = 50 * 1024 * 1024
    request_timeout: int = 600  # Max seconds for the whole retry/fallback run


@dataclass
class Config:
    """Main application configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    api_token: str | None = None
    locale: str = "fr"

    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot serve requests."""
        for choice in ModelChoice:
            model_id = self.gemini.model_id(choice)
            if not has_pricing(model_id):
                raise ValueError(f"No pricing entry for model '{model_id}' ({choice.value})")
        if self.retry.policy not in RETRY_POLICIES:
            raise ValueError(f"Unknown retry policy '{self.retry.policy}'")
        if self.retry.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.upload.max_audio_bytes <= 0:
            raise ValueError("max_audio_bytes must be positive")
        if self.locale not in LOCALES:
            raise ValueError(f"Unsupported locale '{self.locale}'")


def load_config() -> Config:
    """Load configuration from environment variables."""
    gemini = GeminiConfig(api_key=os.getenv("GEMINI_API_KEY", ""))
    if fast_model := os.getenv("VOICEDRAFT_FAST_MODEL"):
        gemini.fast_model = fast_model
    if accurate_model := os.getenv("VOICEDRAFT_ACCURATE_MODEL"):
        gemini.accurate_model = accurate_model
    if attempt_timeout := os.getenv("VOICEDRAFT_ATTEMPT_TIMEOUT"):
        gemini.attempt_timeout = int(attempt_timeout)

    retry = RetryConfig()
    if policy := os.getenv("VOICEDRAFT_RETRY_POLICY"):
        retry.policy = policy.lower()
    if max_attempts := os.getenv("VOICEDRAFT_MAX_ATTEMPTS"):
        retry.max_attempts = int(max_attempts)

    upload = UploadConfig()
    if max_mb := os.getenv("VOICEDRAFT_MAX_AUDIO_MB"):
        upload.max_audio_bytes = int(float(max_mb) * 1024 * 1024)
    if request_timeout := os.getenv("VOICEDRAFT_REQUEST_TIMEOUT"):
        upload.request_timeout = int(request_timeout)

    config = Config(gemini=gemini, retry=retry, upload=upload)

    if host := os.getenv("VOICEDRAFT_HOST"):
        config.host = host
    if port := os.getenv("VOICEDRAFT_PORT"):
        config.port = int(port)
    if api_token := os.getenv("VOICEDRAFT_API_TOKEN"):
        config.api_token = api_token
    if locale := os.getenv("VOICEDRAFT_LOCALE"):
        config.locale = locale.lower()

    config.validate()
    return config
