"""Password hashing and bearer token signing."""

from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from src.core.config import constants, settings


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or expired."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.signing_key(), salt=constants.TOKEN_SALT)


def create_access_token(user_id: str) -> str:
    """Sign an opaque token naming the user."""
    return _serializer().dumps({"sub": user_id})


def decode_access_token(token: str) -> str:
    """Return the user id carried by a token.

    Raises:
        InvalidTokenError: If the signature is bad, the token expired, or the payload has no subject
    """
    try:
        payload: Any = _serializer().loads(token, max_age=settings.token_max_age_seconds)
    except SignatureExpired as err:
        raise InvalidTokenError("Token expired") from err
    except BadSignature as err:
        raise InvalidTokenError("Token signature invalid") from err

    user_id = payload.get("sub") if isinstance(payload, dict) else None
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError("Token has no subject")
    return user_id
