"""Compliance read-model schemas: catalog, summaries, attention ranking, alerts."""


from pydantic import Field

from propcomply.schemas.certificate import CertificateOut
from propcomply.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class RequirementOut(CamelModel):
    id: str
    name: str
    description: str = ""
    frequency: str
    frequency_label: str
    mandatory: bool
    applies_to_standard: bool
    applies_to_hmo: bool

class JurisdictionOut(CamelModel):
    code: str
    name: str
    currency_symbol: str
    currency_code: str
    currency_position: str
    date_format: str
    deposit_rule: str = ""
    deposit_max_weeks: int | None = None
    version: str
    is_default: bool = False
    requirement_count: int

class RequirementListOut(CamelModel):
    requested_code: str | None = None
    jurisdiction_code: str
    classification: str
    catalog_version: str
    is_fallback: bool = False
    warning: str | None = Field(
        default=None,
        description="Set when the requested jurisdiction is unknown and the default was used.",
    )
    requirements: list[RequirementOut] = Field(default_factory=list)

# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

class StatusCountsOut(CamelModel):
    valid: int = 0
    expiring_soon: int = 0
    expired: int = 0
    missing: int = 0
    pending: int = 0
    total: int = 0

class RequirementStatusOut(CamelModel):
    requirement: RequirementOut
    status: str
    certificate: CertificateOut | None = None
    days_remaining: int | None = None

class OrphanCertificateOut(CamelModel):
    certificate_id: str
    property_id: str
    requirement_id: str
    reason: str

class PropertySummaryOut(CamelModel):
    property_id: str
    property_name: str | None = None
    jurisdiction_code: str
    classification: str
    is_fallback: bool = False
    counts: StatusCountsOut
    applicable_count: int
    has_attention_needed: bool
    attention_score: int
    items: list[RequirementStatusOut] = Field(default_factory=list)
    orphans: list[OrphanCertificateOut] = Field(default_factory=list)

class JurisdictionSummaryOut(CamelModel):
    jurisdiction_code: str
    is_fallback: bool = False
    property_count: int
    attention_count: int
    counts: StatusCountsOut
    attention_score: int

class PortfolioSummaryOut(CamelModel):
    property_count: int
    attention_count: int
    counts: StatusCountsOut
    attention_score: int
    by_jurisdiction: dict[str, JurisdictionSummaryOut] = Field(default_factory=dict)
    properties: list[PropertySummaryOut] = Field(default_factory=list)

class AttentionItemOut(CamelModel):
    """One row of the attention ranking (highest score first)."""

    property_id: str
    property_name: str | None = None
    jurisdiction_code: str
    attention_score: int
    has_attention_needed: bool
    expired: int
    expiring_soon: int
    missing: int

class AlertOut(CamelModel):
    type: str
    priority: str
    property_id: str
    requirement_id: str
    certificate_id: str | None = None
    title: str
    message: str
    days_until_due: int | None = None
