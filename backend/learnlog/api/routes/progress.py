from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from ...core.errors import BadRequestError
from ...core.security import CurrentUser, get_current_user
from ...schemas.progress import ImportResult, ProgressStats
from ...services.stats import progress_stats
from ...services.store import RecordStore
from ...services.transfer import export_dump, export_filename, fetch_sample_csv, import_text
from ..deps import get_store

router = APIRouter()

@router.get("/progress", response_model=ProgressStats)
def progress(user: CurrentUser = Depends(get_current_user), store: RecordStore = Depends(get_store)):
    return progress_stats(store.list_tasks(user.id), date.today())

@router.get("/export")
def export(user: CurrentUser = Depends(get_current_user), store: RecordStore = Depends(get_store)):
    dump = export_dump(store.list_tasks(user.id), store.list_categories(user.id))
    return JSONResponse(
        content=dump,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )

@router.post("/import", response_model=ImportResult)
async def import_file(
    file: Optional[UploadFile] = File(default=None),
    text: Optional[str] = Form(default=None),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    if file is not None:
        name = (file.filename or "").lower()
        if name.endswith(".json"):
            kind = "json"
        elif name.endswith(".csv"):
            kind = "csv"
        else:
            raise BadRequestError("Only .csv and .json files can be imported")
        try:
            content = (await file.read()).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BadRequestError("File is not valid UTF-8") from e
        return import_text(store, user.id, content, kind)
    if text and text.strip():
        return import_text(store, user.id, text, "csv")
    raise BadRequestError("No file selected or text provided for import")

@router.post("/import/sample", response_model=ImportResult)
def import_sample(user: CurrentUser = Depends(get_current_user), store: RecordStore = Depends(get_store)):
    return import_text(store, user.id, fetch_sample_csv(), "csv")
