"""
Field rules for student records.

validate_student() never touches the database: it only looks at the values it
is given and returns every rule they break. An empty list means the data may
be stored.
"""
from typing import Any, Callable, Dict, List, Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import FieldError
from app.models.student import (
    EMAIL_MAX_LENGTH,
    GENDERS,
    GRADE_MAX_LENGTH,
    MAJOR_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)

AGE_MIN = 1
AGE_MAX = 150

REQUIRED = "is required"


def _check_text(max_length: int) -> Callable[[Any], Optional[str]]:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return "must be a string"
        if not value.strip():
            return "must not be empty"
        # len() counts code points, not bytes
        if len(value) > max_length:
            return f"must be at most {max_length} characters"
        return None
    return check


def _check_age(value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        return "must be an integer"
    if not AGE_MIN <= value <= AGE_MAX:
        return f"must be between {AGE_MIN} and {AGE_MAX}"
    return None


def _check_gender(value: Any) -> Optional[str]:
    if value not in GENDERS:
        return f"must be one of: {', '.join(GENDERS)}"
    return None


def _check_email(value: Any) -> Optional[str]:
    reason = _check_text(EMAIL_MAX_LENGTH)(value)
    if reason:
        return reason
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "is not a valid email address"
    return None


# Declaration order is the order errors are reported in
FIELD_RULES: Dict[str, Callable[[Any], Optional[str]]] = {
    "name": _check_text(NAME_MAX_LENGTH),
    "age": _check_age,
    "gender": _check_gender,
    "email": _check_email,
    "phone": _check_text(PHONE_MAX_LENGTH),
    "major": _check_text(MAJOR_MAX_LENGTH),
    "grade": _check_text(GRADE_MAX_LENGTH),
}


def validate_student(data: Mapping[str, Any], is_create: bool) -> List[FieldError]:
    """
    Check student fields against their constraints.

    On create every field is checked and a missing or null one is an error.
    On update only the keys present in ``data`` are checked; an explicit null
    is still an error because stored columns are never empty.
    """
    errors: List[FieldError] = []
    for field, check in FIELD_RULES.items():
        if field not in data and not is_create:
            continue
        value = data.get(field)
        if value is None:
            errors.append(FieldError(field, REQUIRED))
            continue
        reason = check(value)
        if reason:
            errors.append(FieldError(field, reason))
    return errors
