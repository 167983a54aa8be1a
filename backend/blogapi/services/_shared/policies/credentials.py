"""Registration rules for names, emails and passwords.

Each check returns the list of messages for its field; an empty list means
the value is acceptable. :func:`validate_registration` collects them in the
``field -> messages`` shape carried by
:class:`~blogapi.services._shared.errors.ValidationError`.
"""

from __future__ import annotations

import re

from marshmallow import ValidationError as MarshmallowValidationError
from marshmallow import validate

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100

# Any Unicode letter; digits and underscore are excluded from the word class.
_LETTER = re.compile(r"[^\W\d_]")
_DIGIT = re.compile(r"\d")
_email_validator = validate.Email(error="The email must be a valid email address.")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_name(name: str) -> list[str]:
    value = (name or "").strip()
    if not value:
        return ["The name field is required."]
    if len(value) > NAME_MAX_LENGTH:
        return [f"The name may not be greater than {NAME_MAX_LENGTH} characters."]
    return []


def check_email(email: str) -> list[str]:
    value = normalize_email(email or "")
    if not value:
        return ["The email field is required."]
    errors: list[str] = []
    if len(value) > EMAIL_MAX_LENGTH:
        errors.append(f"The email may not be greater than {EMAIL_MAX_LENGTH} characters.")
    try:
        _email_validator(value)
    except MarshmallowValidationError as exc:
        errors.extend(str(m) for m in exc.messages)
    return errors


def check_password(password: str) -> list[str]:
    value = password or ""
    if not value:
        return ["The password field is required."]
    errors: list[str] = []
    if len(value) < PASSWORD_MIN_LENGTH:
        errors.append(f"The password must be at least {PASSWORD_MIN_LENGTH} characters.")
    if len(value) > PASSWORD_MAX_LENGTH:
        errors.append(f"The password may not be greater than {PASSWORD_MAX_LENGTH} characters.")
    if not _LETTER.search(value):
        errors.append("The password must contain at least one letter.")
    if not _DIGIT.search(value):
        errors.append("The password must contain at least one digit.")
    return errors


def validate_registration(*, name: str, email: str, password: str) -> dict[str, list[str]]:
    """Run every registration check.

    :returns: Field name -> messages, only for fields that failed.
    :rtype: dict[str, list[str]]
    """
    checks = {
        "name": check_name(name),
        "email": check_email(email),
        "password": check_password(password),
    }
    return {fieldname: msgs for fieldname, msgs in checks.items() if msgs}
