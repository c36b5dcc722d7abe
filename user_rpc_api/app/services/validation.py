"""
Input validation for procedures.

Each procedure input has an explicit validation function that runs
before the store is touched.  The functions never raise: they return a
``ValidationResult`` holding either the parsed value or a flattened
error structure::

    {"formErrors": ["..."], "fieldErrors": {"email": ["Invalid email format"]}}

``formErrors`` collects problems with the input as a whole (wrong type,
empty id), ``fieldErrors`` problems with individual fields of an
object input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from ..schemas.user import USER_ID_ERROR_MESSAGE, UserCreate, UserId


_user_id_adapter = TypeAdapter(UserId)

# Error types for which the per-field override message is not used.
_GENERIC_TYPES = {"missing", "string_type", "model_type", "model_attributes_type"}


@dataclass(frozen=True)
class ValidationResult:
    value: Any = None
    errors: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.errors is None


def _clean_message(message: str) -> str:
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message


def flatten_validation_error(
    exc: ValidationError,
    field_messages: Optional[Mapping[str, str]] = None,
    form_message: Optional[str] = None,
) -> Dict[str, Any]:
    """Convert a pydantic ``ValidationError`` into the flattened structure.

    ``field_messages`` replaces pydantic's message for constraint
    violations on the named fields; ``form_message`` does the same for
    errors on the input as a whole.
    """
    field_messages = field_messages or {}
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        error_type = error.get("type", "")
        if error_type == "missing":
            message = "Required"
        else:
            message = _clean_message(error.get("msg", ""))
        if not loc:
            if form_message and error_type not in _GENERIC_TYPES:
                message = form_message
            form_errors.append(message)
            continue
        field = str(loc[0])
        if field in field_messages and error_type not in _GENERIC_TYPES:
            message = field_messages[field]
        messages = field_errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_user_id(raw: Any) -> ValidationResult:
    """Validate the id input of ``getUserById`` and ``deleteUser``."""
    try:
        value = _user_id_adapter.validate_python(raw)
    except ValidationError as exc:
        return ValidationResult(
            errors=flatten_validation_error(exc, form_message=USER_ID_ERROR_MESSAGE)
        )
    return ValidationResult(value=value)


def validate_user_create(raw: Any) -> ValidationResult:
    """Validate the ``{name, email}`` input of ``createUser``."""
    try:
        value = UserCreate.model_validate(raw)
    except ValidationError as exc:
        return ValidationResult(
            errors=flatten_validation_error(exc, field_messages=UserCreate.ERROR_MESSAGES)
        )
    return ValidationResult(value=value)
