import uuid

from fastapi import APIRouter, Depends, File, UploadFile

from lostfound.schemas.profile_schemas import ProfileUpdatePayload
from lostfound.services.auth import SessionContext
from lostfound.services.items import ItemService
from lostfound.services.profiles import ProfileService
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_item_service, get_profile_service, get_storage
from lostfound.utils.storage_service import LocalStorage


router = APIRouter()

@router.get("/me")
def get_my_profile(
    profiles: ProfileService = Depends(get_profile_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return profiles.get_or_create_profile(current_user)


@router.put("/me")
def update_my_profile(
    payload: ProfileUpdatePayload,
    profiles: ProfileService = Depends(get_profile_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return profiles.update_profile(current_user, payload.model_dump(exclude_unset=True))


@router.post("/me/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    profiles: ProfileService = Depends(get_profile_service),
    storage: LocalStorage = Depends(get_storage),
    current_user: SessionContext = Depends(get_current_user_required),
):
    data = await file.read()
    return profiles.set_avatar(current_user, storage, file.content_type, data)


@router.get("/items")
def get_my_items(
    items: ItemService = Depends(get_item_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return items.list_user_items(current_user.user_id)


@router.get("/{user_id}")
def get_profile(
    user_id: uuid.UUID,
    profiles: ProfileService = Depends(get_profile_service),
    items: ItemService = Depends(get_item_service),
):
    profile = profiles.get_profile(user_id)

    return {
        "profile": profile,
        **items.list_user_items(user_id),
    }
