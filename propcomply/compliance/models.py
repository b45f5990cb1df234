"""Input snapshots consumed by the compliance core."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from propcomply.compliance.catalog import Classification


class PropertyRef(BaseModel):
    """Read-only view of a property from the property directory."""

    id: str
    jurisdiction_code: str
    classification: Classification = Classification.STANDARD
    label: str | None = None

    model_config = {"frozen": True, "from_attributes": True}

    @field_validator("jurisdiction_code")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


class CertificateDraft(BaseModel):
    """A certificate as submitted by the user, before it is recorded."""

    property_id: str
    requirement_id: str
    issue_date: date
    expiry_date: date | None = None
    certificate_number: str | None = None
    contractor: str | None = None
    notes: str | None = None


class CertificateRecord(BaseModel):
    """A recorded certificate as held by the certificate repository."""

    id: str
    property_id: str
    requirement_id: str
    issue_date: date
    expiry_date: date | None = None
    certificate_number: str | None = None
    contractor: str | None = None
    notes: str | None = None
    # Jurisdiction the requirement resolved against when recorded
    jurisdiction_code: str | None = None
    created_at: datetime | None = Field(default=None)

    model_config = {"frozen": True, "from_attributes": True}
