import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from ...core.errors import BadRequestError
from ...core.security import CurrentUser, get_current_user
from ...schemas.tasks import TaskOut
from ...services.store import RecordStore
from ...services.tasks import audio_media_type, audio_object_path, check_audio_path
from ..deps import get_store

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/tasks/{task_id}/audio", response_model=TaskOut)
async def upload(
    task_id: str,
    audio: Optional[UploadFile] = File(default=None),
    duration: Optional[float] = Form(default=None),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    if audio is None:
        raise BadRequestError("No audio file provided")
    store.get_task(user.id, task_id)
    content = await audio.read()
    content_type = audio.content_type or "audio/webm"
    path = audio_object_path(user.id, task_id, content_type)
    store.save_audio(user.id, task_id, path, content, content_type, duration)
    logger.info("audio %s stored (%d bytes)", path, len(content))
    return store.update_task(user.id, task_id, {"audio_path": path, "audio_duration": duration})

@router.get("/audio/{path:path}")
def download(path: str, user: CurrentUser = Depends(get_current_user),
             store: RecordStore = Depends(get_store)):
    check_audio_path(user.id, path)
    content, content_type = store.load_audio(path)
    return Response(
        content=content,
        media_type=audio_media_type(path, content_type),
        headers={"Cache-Control": "private, max-age=3600"},
    )
