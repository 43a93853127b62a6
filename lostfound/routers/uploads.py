from typing import Literal

from fastapi import APIRouter, Depends, File, UploadFile

from lostfound.services.auth import SessionContext
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_storage
from lostfound.utils.storage_service import LocalStorage, store_image

router = APIRouter()


@router.post("/{bucket}", status_code=201)
async def upload_image(
    bucket: Literal["item-images", "proofs"],
    file: UploadFile = File(...),
    storage: LocalStorage = Depends(get_storage),
    current_user: SessionContext = Depends(get_current_user_required),
):
    data = await file.read()
    url = store_image(storage, bucket, current_user.user_id, file.content_type, data)

    return {"url": url}
