from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..config import Config
from ..core.errors import PayloadTooLargeError
from ..dependencies import get_config, get_drafting_service, get_request_id, require_auth
from ..schemas.draft import DraftSuccess
from ..services.drafting_service import DraftingService

router = APIRouter(prefix="/api/transcribe", dependencies=[Depends(require_auth)])


@router.post("", response_model=DraftSuccess, response_model_by_alias=True, response_model_exclude_none=True)
async def transcribe(
    audio: UploadFile | None = File(None, description="Recorded voice memo"),
    model: str | None = Form(None, description="'flash' or 'pro' (default)"),
    existing_text: str | None = Form(
        None, alias="existingText", description="Text to modify or extend"
    ),
    config: Config = Depends(get_config),
    service: DraftingService = Depends(get_drafting_service),
    request_id: str | None = Depends(get_request_id),
):
    """Draft a text from a voice memo, or rework `existingText` following it."""
    audio_bytes = None
    mime_type = None
    if audio is not None:
        limit = config.upload.max_audio_bytes
        # The multipart body is already spooled; this only skips loading it into memory.
        if audio.size is not None and audio.size > limit:
            raise PayloadTooLargeError(audio.size, limit)
        audio_bytes = await audio.read()
        mime_type = audio.content_type

    request = service.build_request(audio_bytes, mime_type, model, existing_text)
    return await service.draft(request, request_id=request_id)
