"""Pydantic models for contact records and operation outcomes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from book.errors import ValidationError

PHONE_PATTERN = re.compile(r"[0-9]{10}")


class ContactField(str, Enum):
    """Fields that an update may target."""

    NAME = "name"
    PHONE = "phone"
    CATEGORY = "category"


class _ContactFields(BaseModel):
    name: str
    phone: str
    category: str

    @field_validator("name", "category")
    @classmethod
    def _not_empty(cls, value: str, info) -> str:
        if not value:
            raise ValueError(f"{info.field_name} cannot be empty")
        return value

    @field_validator("phone")
    @classmethod
    def _ten_digits(cls, value: str) -> str:
        if not value:
            raise ValueError("phone cannot be empty")
        # ASCII only: str.isdigit() would also accept other scripts' digits
        if not PHONE_PATTERN.fullmatch(value):
            raise ValueError("phone number must be exactly 10 digits")
        return value


class ContactRecord(_ContactFields):
    """Live record owned by the record store and mutated in place by updates."""

    model_config = ConfigDict(validate_assignment=True)

    id: int

    def snapshot(self) -> ContactSnapshot:
        return ContactSnapshot(
            id=self.id, name=self.name, phone=self.phone, category=self.category
        )


class ContactSnapshot(BaseModel):
    """Immutable copy of a record handed out to callers."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    phone: str
    category: str

    def to_line(self) -> str:
        return f"{self.name},{self.phone},{self.category}"

    def describe(self) -> str:
        return f"Name: {self.name}\tPhone: {self.phone}\tCategory: {self.category}"


def _first_message(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    original = error.get("ctx", {}).get("error")
    if original is not None:
        return str(original)
    return f"{'.'.join(str(p) for p in error.get('loc', ()))}: {error.get('msg', 'invalid value')}"


def validate_contact(name: str, phone: str, category: str) -> None:
    """Raise ``ValidationError`` unless all three fields are acceptable."""
    try:
        _ContactFields(name=name, phone=phone, category=category)
    except PydanticValidationError as exc:
        raise ValidationError(_first_message(exc)) from exc


def assign_field(record: ContactRecord, contact_field: ContactField, value: str) -> str:
    """Set one field on a live record and return its previous value.

    The record is left untouched when the new value fails validation.
    """
    previous = getattr(record, contact_field.value)
    try:
        setattr(record, contact_field.value, value)
    except PydanticValidationError as exc:
        raise ValidationError(_first_message(exc)) from exc
    return previous


@dataclass
class OperationResult:
    """Outcome of one core operation as seen by the shell."""

    success: bool
    reason: str
    record: ContactSnapshot | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(
        cls,
        reason: str,
        record: ContactSnapshot | None = None,
        warnings: list[str] | None = None,
    ) -> OperationResult:
        return cls(success=True, reason=reason, record=record, warnings=warnings or [])

    @classmethod
    def failed(cls, exc: Exception) -> OperationResult:
        return cls(success=False, reason=str(exc), error=getattr(exc, "kind", "error"))


@dataclass
class LoadReport:
    """Summary of reading the contacts file at startup."""

    loaded: int = 0
    rejected: list[tuple[int, str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
