"""Form Schemas — Pydantic models for every form the dashboard accepts.

Invariants:
    - InvoiceForm: customerId non-empty, amount worth >= 1 cent, status in {pending, paid}
    - RegisterForm: name >= 1 char, email syntactically valid, password >= 6 chars
    - LoginForm: email syntactically valid, password >= 6 chars
    - parse_form() returns a typed model or raises FormValidationError — never a partial dict

Design Decisions:
    - Decimal for amount: "10.50" stays exact until converted to minor units
    - FIELD_MESSAGES per schema: one user-facing message per field regardless of error type
    - Field aliases match the HTML form names (customerId), attributes stay snake_case
"""

from decimal import Decimal
from typing import Any, ClassVar, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from dashboard.core import messages
from dashboard.core.domain_types import InvoiceStatus, to_minor_units
from dashboard.core.errors import FormValidationError
from dashboard.core.validation import flatten_field_errors


class FormSchema(BaseModel):
    """Base for form payloads."""
    model_config = ConfigDict(populate_by_name=True)

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {}


def _strip(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


class InvoiceForm(FormSchema):
    """Create/update invoice payload. The invoice id travels in the URL, not the form."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    customer_id: str = Field(alias="customerId", min_length=1)
    amount: Decimal = Field(gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "customerId": messages.CUSTOMER_REQUIRED,
        "amount": messages.AMOUNT_POSITIVE,
        "status": messages.STATUS_REQUIRED,
    }

    @field_validator("amount")
    @classmethod
    def at_least_one_cent(cls, v: Decimal) -> Decimal:
        if to_minor_units(v) <= 0:
            raise ValueError("amount rounds to zero cents")
        return v


class RegisterForm(FormSchema):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "name": messages.NAME_REQUIRED,
        "email": messages.EMAIL_INVALID,
        "password": messages.PASSWORD_TOO_SHORT,
    }

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        # passwords are kept verbatim
        return _strip(v)


class LoginForm(FormSchema):
    email: EmailStr
    password: str = Field(min_length=6)


Form = TypeVar("Form", bound=FormSchema)


def parse_form(
    schema: type[Form], payload: Mapping[str, Any], message: str,
) -> Form:
    """Validate a submitted form; raise FormValidationError with per-field messages."""
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as e:
        fields = flatten_field_errors(
            e.errors(include_url=False), schema.FIELD_MESSAGES,
        )
        raise FormValidationError(message, fields) from e


class FormState(BaseModel):
    """Payload returned to the form when a submission does not redirect."""
    errors: dict[str, list[str]] | None = None
    message: str | None = None
