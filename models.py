"""Pydantic models for patient records."""

import re
import uuid
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import MAX_PRIORITY, MIN_PRIORITY

# Identifiers are written unquoted into CSV lines, so no commas or whitespace.
ID_PATTERN = r"^[A-Za-z0-9_-]+$"

# Free text is stored unquoted too; these become a space.
_UNSAFE_TEXT = re.compile(r"[,\r\n]")


class InvalidPatientError(ValueError):
    """Raised when patient fields fail validation (e.g. priority out of range)."""


def clean_text(text: str) -> str:
    """Replace CSV-unsafe characters with a space and trim."""
    return _UNSAFE_TEXT.sub(" ", text).strip()


def generate_patient_id() -> str:
    return f"patient-{uuid.uuid4().hex[:16]}"


class PatientRecord(BaseModel):
    """A waiting or treated patient. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    patient_id: str = Field(pattern=ID_PATTERN)
    name: str
    age: int = Field(ge=0)
    priority: int = Field(ge=MIN_PRIORITY, le=MAX_PRIORITY)
    contact: str = ""
    arrival_order: int = Field(ge=0, lt=2**63)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = clean_text(v)
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("contact")
    @classmethod
    def clean_contact(cls, v: str) -> str:
        return clean_text(v)

    @property
    def sort_key(self) -> Tuple[int, int, str]:
        """Heap key: higher priority first (negate), then earlier arrival."""
        return (-self.priority, self.arrival_order, self.patient_id)

    @property
    def name_key(self) -> str:
        return self.name.casefold()
