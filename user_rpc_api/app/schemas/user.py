"""
Pydantic models for user data.

``User`` is the record returned by every procedure.  ``UserCreate`` is
the input shape of ``createUser`` and ``UserId`` the input of
``getUserById`` and ``deleteUser``.  The ``ERROR_MESSAGES`` mappings
hold the human-readable messages reported for constraint violations
instead of pydantic's defaults.
"""

from typing import Annotated, ClassVar, Dict

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictStr


def check_email(value: str) -> str:
    """Reject anything that is not a bare email address.

    The value is returned exactly as given; the normalised form computed
    by ``email_validator`` is discarded.
    """
    if value != value.strip() or "<" in value or ">" in value:
        raise ValueError("Invalid email format")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email format") from exc
    return value


EmailAddress = Annotated[StrictStr, AfterValidator(check_email)]


class User(BaseModel):
    """A user record as stored and returned by the API."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., examples=["1"])
    name: str = Field(..., examples=["Alice"])
    email: str = Field(..., examples=["alice@example.com"])


class UserCreate(BaseModel):
    """Input of ``createUser``."""

    name: StrictStr = Field(..., min_length=2, examples=["Dana"])
    email: EmailAddress = Field(..., examples=["dana@example.com"])

    ERROR_MESSAGES: ClassVar[Dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "email": "Invalid email format",
    }


UserId = Annotated[StrictStr, Field(min_length=1)]

USER_ID_ERROR_MESSAGE = "User ID is required"
