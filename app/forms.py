# app/forms.py
"""
Form validation for the signup and login pages.

Each form is a typed pydantic model. The validate_* functions never
raise; they return a FormResult that is either the parsed form or the
list of field errors in field order, so the first entry is the one
shown to the user.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

F = TypeVar("F", bound=BaseModel)

MIN_PASSWORD_LENGTH = 6

# EmailStr also accepts "Name <addr>"; only bare addresses are valid here
_NOT_BARE_ADDRESS = re.compile(r"[\s<>]")


def _bare_address(value):
    if isinstance(value, str) and _NOT_BARE_ADDRESS.search(value):
        raise ValueError("not a bare email address")
    return value


class SignupForm(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("email", mode="before")
    @classmethod
    def email_is_bare_address(cls, value):
        return _bare_address(value)


class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def email_is_bare_address(cls, value):
        return _bare_address(value)


@dataclass(frozen=True)
class FieldError:
    """A single validation failure, tied to one form field."""
    field: str
    message: str


@dataclass
class FormResult(Generic[F]):
    """Either a parsed form (ok) or the field errors that prevented it."""
    form: Optional[F] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.form is not None and not self.errors

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None


def _error_message(name: str, error: dict) -> str:
    """Turn a pydantic error into the message shown on the page."""
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f'"{name}" is required'
    if error.get("input") == "":
        return f'"{name}" is not allowed to be empty'
    if kind == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length <= 1:
            return f'"{name}" is not allowed to be empty'
        return f'"{name}" length must be at least {min_length} characters long'
    if kind == "string_type":
        return f'"{name}" must be a string'
    if name == "email":
        return f'"{name}" must be a valid email'
    return f'"{name}" is invalid'


def _collect_errors(model: type[BaseModel], exc: ValidationError) -> List[FieldError]:
    by_field = {}
    for error in exc.errors():
        loc = error.get("loc") or ("",)
        name = str(loc[0])
        # Keep the first failure per field
        by_field.setdefault(name, FieldError(field=name, message=_error_message(name, error)))

    order = list(model.model_fields)
    return sorted(
        by_field.values(),
        key=lambda e: order.index(e.field) if e.field in order else len(order),
    )


def _validate(model: type[F], data: Mapping[str, Optional[str]]) -> FormResult[F]:
    # Absent fields stay absent so they report as required, not as empty
    payload = {k: v for k, v in data.items() if v is not None}
    try:
        return FormResult(form=model.model_validate(payload))
    except ValidationError as exc:
        return FormResult(errors=_collect_errors(model, exc))


def validate_signup(data: Mapping[str, Optional[str]]) -> FormResult[SignupForm]:
    """Validate a signup submission: name, email and a password of 6+ characters."""
    return _validate(SignupForm, data)


def validate_login(data: Mapping[str, Optional[str]]) -> FormResult[LoginForm]:
    """Validate a login submission: email and a non-empty password."""
    return _validate(LoginForm, data)
