"""Registration field validation using pydantic.

Implements RegistrationValidatorPort. The rules are checked in field order
(name, username, email, password) and the first failure is reported.
Email syntax is checked by EmailStr, which returns the address with its
domain lowercased.
"""

import logging
import re

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
)

from emporium.core.errors import RegistrationRejectedError
from emporium.core.models import RegistrationData
from emporium.core.ports import RegistrationValidatorPort

logger = logging.getLogger(__name__)

ALLOWED_EMAIL_TLDS = ("com", "org", "ng")

_NAME_RE = re.compile(r"^[A-Za-z\s]+$")


def _reject_outer_whitespace(value: str, field: str) -> str:
    if value != value.strip():
        raise ValueError(f"{field} must not start or end with a space.")
    return value


class RegistrationForm(BaseModel):
    """Schema for raw registration input."""

    model_config = ConfigDict(str_strip_whitespace=False)

    name: str = Field(min_length=3, max_length=30)
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=4, max_length=6)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Letters and spaces only, no leading or trailing space."""
        _reject_outer_whitespace(v, "Name")
        if not _NAME_RE.match(v):
            raise ValueError("Name must only contain letters and spaces.")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Alphanumeric with at least one letter."""
        if not (v.isascii() and v.isalnum()):
            raise ValueError("Username must only contain letters and numbers.")
        if not any(c.isalpha() for c in v):
            raise ValueError("Username must contain at least one letter.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_spacing(cls, v: object) -> object:
        # EmailStr strips surrounding whitespace, so check the raw input first
        if isinstance(v, str):
            _reject_outer_whitespace(v, "Email")
        return v

    @field_validator("email", mode="after")
    @classmethod
    def validate_email_domain(cls, v: str) -> str:
        """Only com, org and ng top-level domains are accepted."""
        tld = v.rsplit(".", 1)[-1].lower()
        if tld not in ALLOWED_EMAIL_TLDS:
            raise ValueError(
                f"Email domain must end with one of: {', '.join(ALLOWED_EMAIL_TLDS)}."
            )
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _reject_outer_whitespace(v, "Password")


class PydanticRegistrationValidator(RegistrationValidatorPort):
    """Validates registration fields against RegistrationForm."""

    def validate(
        self, name: str, username: str, email: str, password: str
    ) -> RegistrationData:
        try:
            form = RegistrationForm(
                name=name, username=username, email=email, password=password
            )
        except ValidationError as e:
            reason = self._first_reason(e)
            logger.debug(f"Registration rejected: {reason}")
            raise RegistrationRejectedError(reason) from e

        return RegistrationData(
            name=form.name,
            username=form.username,
            email=form.email,
            password=form.password,
        )

    @staticmethod
    def _first_reason(error: ValidationError) -> str:
        first = error.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "input"
        message = first["msg"].removeprefix("Value error, ")
        return f"{field}: {message}"
