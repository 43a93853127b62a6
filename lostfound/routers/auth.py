from fastapi import APIRouter, Depends

from lostfound.schemas.auth_schemas import SignInPayload, SignUpPayload, TokenResponse
from lostfound.services.auth import SessionContext, SessionProvider
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_session_provider

router = APIRouter()


@router.post("/sign-up", status_code=201)
def sign_up(payload: SignUpPayload, provider: SessionProvider = Depends(get_session_provider)):
    user = provider.sign_up(
        payload.email,
        payload.password,
        full_name=payload.full_name,
        phone=payload.phone,
    )

    return {
        "id": str(user.id),
        "email": user.email,
        "message": "Account created successfully! Please sign in.",
    }


@router.post("/sign-in", response_model=TokenResponse)
def sign_in(payload: SignInPayload, provider: SessionProvider = Depends(get_session_provider)):
    context = provider.sign_in(payload.email, payload.password)

    return TokenResponse(
        access_token=context.access_token,
        expires_at=context.expires_at,
        user_id=str(context.user_id),
    )


@router.post("/sign-out")
def sign_out(
    provider: SessionProvider = Depends(get_session_provider),
    current_user: SessionContext = Depends(get_current_user_required),
):
    provider.sign_out(current_user)
    return {"ok": True}


@router.get("/me")
def me(current_user: SessionContext = Depends(get_current_user_required)):
    return current_user.as_user()
