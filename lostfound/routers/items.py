from typing import Literal, Optional
import uuid

from fastapi import APIRouter, Depends, Query

from lostfound.schemas.items_schemas import ItemCreateSchema, ItemStatusSchema, ItemUpdateSchema
from lostfound.schemas.message_schemas import CommentCreateRequest
from lostfound.services.auth import SessionContext
from lostfound.services.claims import ClaimWorkflow
from lostfound.services.items import ItemService
from lostfound.services.messaging import MessagingService
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_claim_workflow, get_item_service, get_messaging_service


router = APIRouter()


@router.get("")
def list_items(
    category: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    sort: Literal["newest", "oldest"] = Query("newest"),
    search: Optional[str] = Query(None, max_length=100),
    items: ItemService = Depends(get_item_service),
):
    return items.list_items(category=category, type=type, status=status, sort=sort, search=search)


@router.post("", status_code=201)
def report_item(
    payload: ItemCreateSchema,
    items: ItemService = Depends(get_item_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return items.report_item(current_user, payload.model_dump())


@router.get("/{item_id}")
def get_item(item_id: uuid.UUID, items: ItemService = Depends(get_item_service)):
    item, owner = items.get_item_with_owner(item_id)

    return {
        "item": item,
        "owner": owner,
    }


@router.patch("/{item_id}")
def update_item(
    item_id: uuid.UUID,
    payload: ItemUpdateSchema,
    items: ItemService = Depends(get_item_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return items.update_item(current_user, item_id, payload.model_dump(exclude_unset=True))


@router.delete("/{item_id}")
def delete_item(
    item_id: uuid.UUID,
    items: ItemService = Depends(get_item_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    items.delete_item(current_user, item_id)

    return {
        "ok": True,
        "message": "Item deleted successfully"
    }


@router.post("/{item_id}/status")
def change_item_status(
    item_id: uuid.UUID,
    payload: ItemStatusSchema,
    items: ItemService = Depends(get_item_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return items.change_item_status(current_user, item_id, payload.status)


@router.get("/{item_id}/comments")
def list_comments(item_id: uuid.UUID, messaging: MessagingService = Depends(get_messaging_service)):
    return messaging.list_comments(item_id)


@router.post("/{item_id}/comments", status_code=201)
def add_comment(
    item_id: uuid.UUID,
    payload: CommentCreateRequest,
    messaging: MessagingService = Depends(get_messaging_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return messaging.add_comment(current_user, item_id, payload.content)


@router.get("/{item_id}/messages")
def list_messages(
    item_id: uuid.UUID,
    messaging: MessagingService = Depends(get_messaging_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return messaging.list_messages(current_user, item_id)


@router.get("/{item_id}/claims")
def list_item_claims(
    item_id: uuid.UUID,
    claims: ClaimWorkflow = Depends(get_claim_workflow),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return claims.list_item_claims(current_user, item_id)


@router.get("/{item_id}/claims/mine")
def get_my_claim(
    item_id: uuid.UUID,
    claims: ClaimWorkflow = Depends(get_claim_workflow),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return claims.get_my_claim(current_user, item_id)
