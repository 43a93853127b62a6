import uuid

from fastapi import APIRouter, Depends

from lostfound.schemas.claim_schemas import ClaimCreateRequest, ClaimDecisionRequest
from lostfound.services.auth import SessionContext
from lostfound.services.claims import ClaimWorkflow
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_claim_workflow

router = APIRouter()


@router.post("", status_code=201)
def submit_claim(
    payload: ClaimCreateRequest,
    claims: ClaimWorkflow = Depends(get_claim_workflow),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return claims.submit_claim(current_user, payload.item_id, payload.proof_of_ownership)


@router.post("/{claim_id}/decision")
def adjudicate_claim(
    claim_id: uuid.UUID,
    payload: ClaimDecisionRequest,
    claims: ClaimWorkflow = Depends(get_claim_workflow),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return claims.adjudicate_claim(
        current_user,
        claim_id,
        payload.decision,
        payload.item_id,
        admin_notes=payload.admin_notes,
    )
