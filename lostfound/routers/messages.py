from fastapi import APIRouter, Depends

from lostfound.schemas.message_schemas import MessageCreateRequest
from lostfound.services.auth import SessionContext
from lostfound.services.messaging import MessagingService
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_messaging_service

router = APIRouter()


@router.post("", status_code=201)
def post_message(
    payload: MessageCreateRequest,
    messaging: MessagingService = Depends(get_messaging_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return messaging.post_message(current_user, payload.item_id, payload.recipient_id, payload.content)
