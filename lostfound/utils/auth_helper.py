from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lostfound.services.auth import SessionContext, SessionProvider
from lostfound.utils.dependencies import get_session_provider

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_required(
    token: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: SessionProvider = Depends(get_session_provider),
) -> SessionContext:
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    context = provider.current_user(token.credentials)
    if context is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return context
