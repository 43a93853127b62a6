"""Password hashing and access-token helpers."""

from datetime import datetime, timedelta, timezone
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext

from lostfound.config import get_settings

ALGORITHM = "HS256"

settings = get_settings()

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: uuid.UUID, email: str, session_id: uuid.UUID, expires_at: datetime) -> str:
    jwt_payload = {
        "sub": str(user_id),
        "email": email,
        "jti": str(session_id),
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
    }
    return jwt.encode(jwt_payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the token claims; raises ValueError for invalid or expired tokens."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired token") from exc


def token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
