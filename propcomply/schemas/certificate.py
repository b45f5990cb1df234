"""Certificate Pydantic schemas."""


from datetime import date, datetime

from pydantic import Field

from propcomply.schemas.common import CamelModel

class CertificateCreate(CamelModel):
    requirement_id: str = Field(min_length=1)
    issue_date: date
    expiry_date: date | None = None
    certificate_number: str | None = None
    contractor: str | None = None
    notes: str | None = None

class CertificateOut(CamelModel):
    id: str
    property_id: str
    requirement_id: str
    issue_date: date
    expiry_date: date | None = None
    certificate_number: str | None = None
    contractor: str | None = None
    notes: str | None = None
    jurisdiction_code: str | None = None
    created_at: datetime | None = None
    # Derived on read, never stored
    status: str | None = None
    days_remaining: int | None = None

class CertificateHistoryOut(CamelModel):
    id: str
    issue_date: date
    expiry_date: date | None = None
    certificate_number: str | None = None
    created_at: datetime
    deleted_at: datetime | None = None
    superseded_by_id: str | None = None

class RecordCertificateOut(CamelModel):
    certificate: CertificateOut
    superseded_ids: list[str] = Field(default_factory=list)
