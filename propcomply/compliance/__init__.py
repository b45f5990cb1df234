"""Compliance core — pure, synchronous rules over in-memory snapshots.

Modules:
  catalog.py      — jurisdiction requirement catalog + resolver (registry with explicit fallback)
  classifier.py   — certificate lifecycle status from dates and a caller-supplied "now"
  aggregation.py  — per-property / per-jurisdiction / portfolio summaries, attention ranking
  recording.py    — replacement rule (validate, supersede) over an injected CertificateStore
  alerts.py       — attention alerts derived from a property summary
  dates.py        — date coercion and month arithmetic

Rule: nothing here reads the clock, touches the database, or imports FastAPI.
"""

from propcomply.compliance.aggregation import (
    JurisdictionSummary,
    OrphanCertificate,
    PortfolioSummary,
    PropertySummary,
    RequirementStatus,
    StatusCounts,
    current_certificates,
    rank_by_attention,
    summarize,
    summarize_jurisdictions,
    summarize_portfolio,
)
from propcomply.compliance.alerts import ComplianceAlert, build_alerts, sort_alerts
from propcomply.compliance.catalog import (
    Classification,
    ComplianceRequirement,
    Frequency,
    InvalidJurisdiction,
    JurisdictionConfig,
    JurisdictionRegistry,
    RequirementResolution,
    builtin_registry,
    default_registry,
    get_requirements,
)
from propcomply.compliance.classifier import CertificateStatus, assess, classify
from propcomply.compliance.models import CertificateDraft, CertificateRecord, PropertyRef
from propcomply.compliance.recording import (
    CertificateStore,
    InMemoryCertificateStore,
    RecordOutcome,
    record_certificate,
    remove_certificate,
    validate_certificate,
)

__all__ = [
    "CertificateDraft",
    "CertificateRecord",
    "CertificateStatus",
    "CertificateStore",
    "Classification",
    "ComplianceAlert",
    "ComplianceRequirement",
    "Frequency",
    "InMemoryCertificateStore",
    "InvalidJurisdiction",
    "JurisdictionConfig",
    "JurisdictionRegistry",
    "JurisdictionSummary",
    "OrphanCertificate",
    "PortfolioSummary",
    "PropertyRef",
    "PropertySummary",
    "RecordOutcome",
    "RequirementResolution",
    "RequirementStatus",
    "StatusCounts",
    "assess",
    "build_alerts",
    "builtin_registry",
    "classify",
    "current_certificates",
    "default_registry",
    "get_requirements",
    "rank_by_attention",
    "record_certificate",
    "remove_certificate",
    "sort_alerts",
    "summarize",
    "summarize_jurisdictions",
    "summarize_portfolio",
    "validate_certificate",
]
