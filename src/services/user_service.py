"""User service: signup, login, token resolution, and profile management."""

import logging
from typing import Any

from src.core import db_client, security
from src.core.config import constants
from src.core.errors import FieldError, InternalError, InvalidInputError, NotFoundError, UnauthenticatedError
from src.core.logging import span
from src.core.query import EQUALS, Condition
from src.domain.create_models import UserCreate
from src.domain.update_models import ProfileUpdate
from src.domain.user import AuthResult, RequestContext, User


logger = logging.getLogger(__name__)

USERS = constants.USERS_COLLECTION


def _to_user(record: dict[str, Any]) -> User:
    return User.model_validate({key: value for key, value in record.items() if key != "password"})


def _duplicate_email() -> InvalidInputError:
    return InvalidInputError(
        errors=[FieldError(field="email", message="User already exists")],
        message="User already exists",
    )


async def _find_by_email(email: str) -> dict[str, Any] | None:
    return await db_client.get_first_record(collection=USERS, filters=[Condition("email", EQUALS, email)])


async def signup(*, payload: UserCreate) -> AuthResult:
    """Register a new user and issue a token.

    Returns:
        The created user with a bearer token

    Raises:
        InvalidInputError: If the email is already registered
        InternalError: If the store fails
    """
    with span("user_service.signup"):
        email = str(payload.email)
        try:
            # Guard: email must be unique
            if await _find_by_email(email):
                logger.warning("Signup rejected, email already registered", extra={"email": email})
                raise _duplicate_email()

            record = await db_client.create_record(
                collection=USERS,
                data={
                    "name": payload.name,
                    "email": email,
                    "bio": "",
                    "avatar": "",
                    "password": security.hash_password(payload.password),
                },
            )
        except db_client.DuplicateRecordError as e:
            raise _duplicate_email() from e
        except db_client.DatabaseError as e:
            logger.exception("Signup error")
            raise InternalError("Server error during signup") from e

        user = _to_user(record)
        logger.info("Created user", extra={"user_id": user.id})
        return AuthResult(user=user, token=security.create_access_token(user.id))


async def login(*, email: str, password: str) -> AuthResult:
    """Check credentials and issue a token.

    Raises:
        UnauthenticatedError: If the email is unknown or the password is wrong
        InternalError: If the store fails
    """
    with span("user_service.login"):
        try:
            record = await _find_by_email(email)
        except db_client.DatabaseError as e:
            logger.exception("Login error")
            raise InternalError("Server error during login") from e

        if record is None or not security.verify_password(password, record.get("password", "")):
            logger.warning("Failed login attempt", extra={"email": email})
            raise UnauthenticatedError("Invalid credentials")

        user = _to_user(record)
        logger.info("User logged in", extra={"user_id": user.id})
        return AuthResult(user=user, token=security.create_access_token(user.id))


async def resolve_token(token: str) -> RequestContext:
    """Resolve a bearer token to the identity of an existing user.

    Raises:
        UnauthenticatedError: If the token is invalid, expired, or names a deleted user
        InternalError: If the store fails
    """
    try:
        user_id = security.decode_access_token(token)
    except security.InvalidTokenError as e:
        logger.info("Rejected bearer token", extra={"reason": str(e)})
        raise UnauthenticatedError("Not authorized, token failed") from e

    try:
        record = await db_client.get_record(collection=USERS, record_id=user_id)
    except db_client.RecordNotFoundError as e:
        logger.info("Token names unknown user", extra={"user_id": user_id})
        raise UnauthenticatedError("Not authorized, token failed") from e
    except db_client.DatabaseError as e:
        logger.exception("Token resolution error")
        raise InternalError() from e

    return RequestContext(user_id=record["id"], email=record.get("email", ""))


async def get_profile(*, ctx: RequestContext) -> User:
    """Return the caller's profile.

    Raises:
        NotFoundError: If the user was deleted after the token was resolved
        InternalError: If the store fails
    """
    with span("user_service.get_profile"):
        try:
            record = await db_client.get_record(collection=USERS, record_id=ctx.user_id)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("User not found") from e
        except db_client.DatabaseError as e:
            logger.exception("Get profile error", extra={"user_id": ctx.user_id})
            raise InternalError("Server error fetching profile") from e

        return _to_user(record)


async def update_profile(*, ctx: RequestContext, payload: ProfileUpdate) -> User:
    """Apply a partial profile update to the caller's own user.

    Raises:
        InvalidInputError: If the new email belongs to another user
        NotFoundError: If the user was deleted
        InternalError: If the store fails
    """
    with span("user_service.update_profile"):
        changes = payload.changes()

        try:
            new_email = changes.get("email")
            if new_email and new_email != ctx.email:
                existing = await _find_by_email(new_email)
                if existing and existing["id"] != ctx.user_id:
                    raise _duplicate_email()

            record = await db_client.update_record(collection=USERS, record_id=ctx.user_id, data=changes)
        except db_client.DuplicateRecordError as e:
            raise _duplicate_email() from e
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("User not found") from e
        except db_client.DatabaseError as e:
            logger.exception("Update profile error", extra={"user_id": ctx.user_id})
            raise InternalError("Server error updating profile") from e

        logger.info("Updated profile", extra={"user_id": ctx.user_id, "fields": sorted(changes)})
        return _to_user(record)
