"""Property Pydantic schemas (request DTOs and response models)."""


from datetime import datetime

from pydantic import Field

from propcomply.compliance.catalog import Classification
from propcomply.schemas.common import CamelModel

class PropertyCreate(CamelModel):
    name: str = Field(min_length=1)
    jurisdiction_code: str = Field(min_length=2, max_length=8)
    classification: Classification = Classification.STANDARD
    address_line1: str | None = None
    address_city: str | None = None
    postal_code: str | None = None
    notes: str | None = None

class PropertyUpdate(CamelModel):
    name: str | None = None
    jurisdiction_code: str | None = Field(default=None, min_length=2, max_length=8)
    classification: Classification | None = None
    address_line1: str | None = None
    address_city: str | None = None
    postal_code: str | None = None
    notes: str | None = None

class PropertyOut(CamelModel):
    id: str
    client_id: str
    name: str
    jurisdiction_code: str
    classification: str
    address_line1: str | None = None
    address_city: str | None = None
    postal_code: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
