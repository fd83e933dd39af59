from typing import Any, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.api.deps import require_auth, get_store
from app.core.errors import BadRequest
from app.schemas import UploadResult
from app.services import storage
from app.services.storage import ObjectStore

router = APIRouter()


@router.put("", response_model=UploadResult, dependencies=[Depends(require_auth)])
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    store: ObjectStore = Depends(get_store),
) -> Any:
    """
    Upload a single file (multipart field ``file``) to the object store.

    Images land under images/, audio under audios/, everything else under
    others/. Returns the public URL of the stored object.
    """
    if file is None or not file.filename:
        raise BadRequest("No file uploaded")

    # boto3 is blocking
    url = await run_in_threadpool(
        storage.upload_file,
        store,
        file.filename,
        file.file,
        file.content_type,
    )
    return UploadResult(url=url)
