"""VoiceDraft Backend API."""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Config, load_config
from .core.errors import DraftError
from .core.logging import get_logger
from .dependencies import get_config, get_drafting_service
from .generation.gemini_provider import GeminiProvider
from .messages import get_message
from .routers import transcribe
from .schemas.draft import DraftFailure
from .services.drafting_service import DraftingService

log = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - build the read-only config and services once."""
    config = load_config()
    provider = GeminiProvider(config.gemini)

    app.state.config = config
    app.state.drafting_service = DraftingService(config, provider)

    log.info("Backend started")
    log.info(f"Models: fast={config.gemini.fast_model} accurate={config.gemini.accurate_model}")
    log.info(f"Retry policy: {config.retry.policy} ({config.retry.attempt_budget} attempts)")
    log.info(f"Max audio size: {config.upload.max_audio_bytes // (1024 * 1024)}MB")
    if not provider.is_configured():
        log.warning("GEMINI_API_KEY is not set; drafting requests will fail")

    yield


app = FastAPI(
    title="VoiceDraft API",
    description="Turns spoken briefs into written drafts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Attach an X-Request-ID to every request and echo it back."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(DraftError)
async def draft_error_handler(request: Request, exc: DraftError):
    config: Config = request.app.state.config
    log.warning(
        f"Request failed with {exc.status_code}: {exc}",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "error_type": type(exc).__name__,
        },
    )
    body = DraftFailure(error=get_message(exc.message_key, config.locale, **exc.params))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True))


app.include_router(transcribe.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "VoiceDraft", "version": __version__}


@app.get("/health")
async def health(
    config: Config = Depends(get_config),
    service: DraftingService = Depends(get_drafting_service),
):
    """Health check endpoint."""
    return {
        "status": "ok",
        "provider_configured": service.provider.is_configured(),
        "models": {
            "flash": config.gemini.fast_model,
            "pro": config.gemini.accurate_model,
        },
    }


def main():
    import uvicorn

    config = load_config()
    uvicorn.run(
        "voicedraft.main:app",
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
