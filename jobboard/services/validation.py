from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from ..errors import ForbiddenError, ValidationError
from ..token import Principal

NO_UPDATE_DATA_MESSAGE = "No update data provided."


def parse_id(value, message: str) -> int:
    """Parse a wire identifier (int or digit string) into a positive int."""
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValidationError(message)
    if parsed <= 0:
        raise ValidationError(message)
    return parsed


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: dict, fields: list[str], message: str) -> None:
    if any(is_blank(values.get(field)) for field in fields):
        raise ValidationError(message)


def optional_filter(value: str | None, message: str) -> str | None:
    """None means "not supplied"; a supplied filter must be non-blank."""
    if value is None:
        return None
    if not value.strip():
        raise ValidationError(message)
    return value.strip()


def clean_patch(patch: dict, allowed: set[str]) -> dict:
    """
    Keep the allowed, non-null fields of a partial update. Raises when
    nothing is left or a supplied string field is blank.
    """
    values = {k: v for k, v in patch.items() if k in allowed and v is not None}
    if not values:
        raise ValidationError(NO_UPDATE_DATA_MESSAGE)
    for field, value in values.items():
        if isinstance(value, str) and not value.strip():
            raise ValidationError(f"{field} cannot be blank.")
    return values


def check_email(email: str) -> str:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Invalid email address.")
    return email


def require_owner(principal: Principal | None, owner_id: int) -> None:
    if principal is None or principal.user_id != owner_id:
        raise ForbiddenError("Access denied.")
