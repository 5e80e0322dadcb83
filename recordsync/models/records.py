"""
Record domain models.

A Record is an inspected property or asset (a "site" in the legacy naming).
Records are classified by a RecordType. Reports and templates are only seen
here as the lightweight summaries the detail screen needs.
"""
from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class RecordType(BaseModel):
    """Named classification of records (e.g. Sites, Vehicles)."""
    id: str = Field(default_factory=new_id)
    organisation_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    name_singular: str = Field(..., min_length=1)
    description: Optional[str] = None
    icon: str = "folder"
    color: str = "#0F4C5C"
    is_default: bool = False
    archived: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Record(BaseModel):
    """An inspected property/asset."""
    id: str = Field(default_factory=new_id)
    organisation_id: Optional[str] = None
    record_type_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    archived: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class RecordWithType(Record):
    """Record joined with its record type."""
    record_type: RecordType


class RecordTypeSummary(BaseModel):
    id: str
    name: str
    name_singular: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class RecordSearchResult(BaseModel):
    """Minimal record shape for autocomplete/picker suggestions."""
    id: str
    name: str
    address: Optional[str] = None
    record_type: RecordTypeSummary


class Template(BaseModel):
    """Inspection template; templates are organisation-wide."""
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    record_type_id: Optional[str] = None
    is_published: bool = True
    created_at: datetime = Field(default_factory=_utcnow)


class ReportSummary(BaseModel):
    """Report row shown on a record's detail screen."""
    id: str = Field(default_factory=new_id)
    record_id: Optional[str] = None
    status: Literal["draft", "submitted"] = "draft"
    started_at: datetime = Field(default_factory=_utcnow)
    submitted_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    template_name: str = ""
    user_name: Optional[str] = None


# ---------------------------------------------------------------------------
# Mutation payloads
# ---------------------------------------------------------------------------

class RecordCreate(BaseModel):
    name: str
    address: Optional[str] = None
    record_type_id: Optional[str] = None
    organisation_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Record name cannot be blank")
        return v.strip()


class RecordUpdate(BaseModel):
    """Only the fields that are set are applied."""
    name: Optional[str] = None
    address: Optional[str] = None
    archived: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Record name cannot be blank")
        return v.strip() if v is not None else v


class RecordTypeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    name_singular: str = Field(..., min_length=1)
    description: Optional[str] = None
    icon: str = "folder"
    color: str = "#0F4C5C"
    is_default: bool = False
    organisation_id: Optional[str] = None


class RecordTypeUpdate(BaseModel):
    name: Optional[str] = None
    name_singular: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: Optional[bool] = None
