from fastapi import Depends, Request

from .config import Config
from .core.auth import security, verify_token
from .services.drafting_service import DraftingService


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_drafting_service(request: Request) -> DraftingService:
    return request.app.state.drafting_service


def get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def require_auth(request: Request, credentials=Depends(security)):
    """Dependency to require authentication on protected endpoints."""
    config = get_config(request)
    verify_token(
        credentials,
        config.api_token,
        request_id=get_request_id(request),
        path=request.url.path,
    )
