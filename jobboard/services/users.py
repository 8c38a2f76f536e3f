"""User resource service: signup, login, profile reads and owner-only mutation."""
from __future__ import annotations
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from .. import crud, models, security
from ..config import Settings
from ..errors import ConflictError, InvalidCredentialsError, NotFoundError, ValidationError
from ..token import Principal, create_access_token
from .validation import check_email, clean_patch, is_blank, require_fields, require_owner

LOGGER = logging.getLogger("jobboard.users")

EMAIL_IN_USE_MESSAGE = "Email already in use."
USER_NOT_FOUND_MESSAGE = "User not found."
UPDATABLE_FIELDS = {"name", "email", "password"}


@dataclass
class AuthResult:
    user: models.User
    token: str


def signup(db: Session, settings: Settings, name: str | None, email: str | None, password: str | None) -> AuthResult:
    require_fields(
        {"name": name, "email": email, "password": password},
        ["name", "email", "password"],
        "Name, email and password are required.",
    )
    check_email(email)
    if crud.get_user_by_email(db, email):
        raise ConflictError(EMAIL_IN_USE_MESSAGE)

    user = crud.create_user(db, name.strip(), email, security.hash_password(password))
    LOGGER.info("user signed up id=%s", user.id)
    return AuthResult(user=user, token=create_access_token(settings, user.id, user.email))


def login(db: Session, settings: Settings, email: str | None, password: str | None) -> AuthResult:
    if is_blank(email) or is_blank(password):
        raise ValidationError("Email and password are required.")

    user = crud.get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User email not found.")
    matches, new_hash = security.verify_and_update(password, user.password)
    if not matches:
        raise InvalidCredentialsError("Invalid email or password.")
    if new_hash is not None:
        user = crud.update_user(db, user, {"password": new_hash})
        LOGGER.info("password hash upgraded id=%s", user.id)
    return AuthResult(user=user, token=create_access_token(settings, user.id, user.email))


def list_users(db: Session) -> list[models.User]:
    return crud.list_users(db)


def get_user(db: Session, user_id: int) -> models.User:
    user = crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return user


def update_user(db: Session, user_id: int, patch: dict, principal: Principal | None) -> models.User:
    # ownership first: a stranger learns nothing about whether the user exists
    require_owner(principal, user_id)
    values = clean_patch(patch, UPDATABLE_FIELDS)
    user = get_user(db, user_id)

    if "email" in values:
        check_email(values["email"])
        other = crud.get_user_by_email(db, values["email"])
        if other is not None and other.id != user.id:
            raise ConflictError(EMAIL_IN_USE_MESSAGE)
    if "password" in values:
        values["password"] = security.hash_password(values["password"])

    user = crud.update_user(db, user, values)
    LOGGER.info("user updated id=%s fields=%s", user.id, sorted(values))
    return user


def delete_user(db: Session, user_id: int, principal: Principal | None) -> None:
    require_owner(principal, user_id)
    user = get_user(db, user_id)
    crud.delete_user(db, user)
    LOGGER.info("user deleted id=%s", user_id)
