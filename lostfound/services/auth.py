from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from lostfound.db.gateway import Gateway
from lostfound.errors import AuthError, RemoteError, ValidationError
from lostfound.utils.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    token_expiry,
    verify_password,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class SessionContext:
    """The signed-in identity every workflow call acts on behalf of."""

    user_id: uuid.UUID
    email: str
    session_id: uuid.UUID
    expires_at: datetime
    access_token: Optional[str] = None

    def as_user(self) -> dict:
        return {"id": str(self.user_id), "email": self.email}


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SessionProvider:
    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ):
        email = email.strip().lower()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters long")

        if self.gateway.select_one("users", {"email": email}):
            raise AuthError("This email is already registered. Please sign in instead.")

        try:
            with self.gateway.transaction():
                user, = self.gateway.insert("users", [{
                    "email": email,
                    "password_hash": get_password_hash(password),
                }])
                self.gateway.insert("profiles", [{
                    "id": user.id,
                    "full_name": full_name,
                    "phone": phone,
                }])
        except RemoteError as exc:
            raise AuthError("Failed to create account") from exc

        logger.info("Registered user %s", user.id)
        return user

    def sign_in(self, email: str, password: str) -> SessionContext:
        user = self.gateway.select_one("users", {"email": email.strip().lower()})
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password")

        expires_at = token_expiry()
        session, = self.gateway.insert("user_sessions", [{
            "user_id": user.id,
            "expires_at": expires_at,
        }])

        token = create_access_token(user.id, user.email, session.id, expires_at)
        return SessionContext(
            user_id=user.id,
            email=user.email,
            session_id=session.id,
            expires_at=expires_at,
            access_token=token,
        )

    def sign_out(self, context: SessionContext) -> None:
        revoked = self.gateway.update(
            "user_sessions",
            {"revoked_at": datetime.now(timezone.utc)},
            {"id": context.session_id, "revoked_at": None},
        )
        if not revoked:
            raise AuthError("Session already signed out")

    def current_user(self, token: Optional[str]) -> Optional[SessionContext]:
        """Resolve a bearer token to its live session, or None."""

        if not token:
            return None
        try:
            claims = decode_access_token(token)
            user_id = uuid.UUID(claims["sub"])
            session_id = uuid.UUID(claims["jti"])
        except (ValueError, KeyError):
            return None

        session = self.gateway.select_one("user_sessions", {"id": session_id, "user_id": user_id})
        if session is None or session.revoked_at is not None:
            return None
        if _aware(session.expires_at) <= datetime.now(timezone.utc):
            return None

        return SessionContext(
            user_id=user_id,
            email=claims.get("email", ""),
            session_id=session_id,
            expires_at=_aware(session.expires_at),
            access_token=token,
        )
