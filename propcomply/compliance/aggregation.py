"""Aggregation engine: per-property, per-jurisdiction and portfolio summaries.

Joins resolved requirements against each property's *current* certificates
(last write wins per property + requirement), classifies them, and rolls the
results up. Everything here is recomputed from (catalog, certificates, now)
on every call; nothing is cached or stored.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Sequence

from pydantic import BaseModel, computed_field

from propcomply.compliance.catalog import (
    ComplianceRequirement,
    JurisdictionRegistry,
    RequirementResolution,
    default_registry,
    normalize_code,
)
from propcomply.compliance.classifier import (
    EXPIRING_SOON_DAYS,
    CertificateStatus,
    assess,
)
from propcomply.compliance.models import CertificateRecord, PropertyRef

logger = logging.getLogger(__name__)

EXPIRED_WEIGHT = 1000


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------

class StatusCounts(BaseModel):
    valid: int = 0
    expiring_soon: int = 0
    expired: int = 0
    missing: int = 0
    pending: int = 0

    model_config = {"frozen": True}

    def __add__(self, other: "StatusCounts") -> "StatusCounts":
        if not isinstance(other, StatusCounts):
            return NotImplemented
        return StatusCounts(
            valid=self.valid + other.valid,
            expiring_soon=self.expiring_soon + other.expiring_soon,
            expired=self.expired + other.expired,
            missing=self.missing + other.missing,
            pending=self.pending + other.pending,
        )

    @computed_field
    @property
    def total(self) -> int:
        return self.valid + self.expiring_soon + self.expired + self.missing + self.pending

    @property
    def attention_score(self) -> int:
        # Any expired certificate outranks any number of expiring ones.
        return self.expired * EXPIRED_WEIGHT + self.expiring_soon

    @property
    def needs_attention(self) -> bool:
        return self.expired > 0 or self.missing > 0


class RequirementStatus(BaseModel):
    requirement: ComplianceRequirement
    status: CertificateStatus
    certificate: CertificateRecord | None = None
    days_remaining: int | None = None

    model_config = {"frozen": True}


class OrphanCertificate(BaseModel):
    """A current certificate whose requirement does not apply to its property."""

    certificate_id: str
    property_id: str
    requirement_id: str
    reason: str

    model_config = {"frozen": True}


class PropertySummary(BaseModel):
    property_ref: PropertyRef
    jurisdiction_code: str
    is_fallback: bool = False
    counts: StatusCounts
    applicable_count: int
    items: tuple[RequirementStatus, ...] = ()
    orphans: tuple[OrphanCertificate, ...] = ()

    model_config = {"frozen": True}

    @computed_field
    @property
    def has_attention_needed(self) -> bool:
        return self.counts.needs_attention

    @computed_field
    @property
    def attention_score(self) -> int:
        return self.counts.attention_score

    def items_with_status(self, status: CertificateStatus) -> list[RequirementStatus]:
        return [item for item in self.items if item.status is status]


class JurisdictionSummary(BaseModel):
    jurisdiction_code: str
    is_fallback: bool = False
    property_count: int = 0
    attention_count: int = 0
    counts: StatusCounts = StatusCounts()

    model_config = {"frozen": True}

    @computed_field
    @property
    def attention_score(self) -> int:
        return self.counts.attention_score


class PortfolioSummary(BaseModel):
    property_count: int = 0
    attention_count: int = 0
    counts: StatusCounts = StatusCounts()
    by_jurisdiction: dict[str, JurisdictionSummary] = {}
    properties: tuple[PropertySummary, ...] = ()

    model_config = {"frozen": True}

    @computed_field
    @property
    def attention_score(self) -> int:
        return self.counts.attention_score


# ---------------------------------------------------------------------------
# Current-certificate selection
# ---------------------------------------------------------------------------

def _supersedes(candidate: CertificateRecord, current: CertificateRecord) -> bool:
    """True when *candidate* (seen later in the input) replaces *current*."""
    if candidate.created_at is None or current.created_at is None:
        return True
    try:
        return candidate.created_at >= current.created_at
    except TypeError:
        # naive vs aware timestamps: fall back to input order
        return True


def current_certificates(
    certificates: Iterable[CertificateRecord],
) -> list[CertificateRecord]:
    """Keep only the most recently created record per (property, requirement)."""
    current: dict[tuple[str, str], CertificateRecord] = {}
    for cert in certificates:
        key = (cert.property_id, cert.requirement_id)
        existing = current.get(key)
        if existing is None or _supersedes(cert, existing):
            current[key] = cert
    return list(current.values())


# ---------------------------------------------------------------------------
# Per-property summary
# ---------------------------------------------------------------------------

_COUNTED = {
    CertificateStatus.VALID: "valid",
    CertificateStatus.EXPIRING_SOON: "expiring_soon",
    CertificateStatus.EXPIRED: "expired",
    CertificateStatus.MISSING: "missing",
    CertificateStatus.PENDING: "pending",
}


def summarize(
    prop: PropertyRef,
    requirements: RequirementResolution | Sequence[ComplianceRequirement],
    certificates: Iterable[CertificateRecord],
    now: date | datetime,
    *,
    warning_days: int = EXPIRING_SOON_DAYS,
) -> PropertySummary:
    """Classify every resolved requirement of *prop* against its current certificates."""
    if isinstance(requirements, RequirementResolution):
        jurisdiction_code = requirements.jurisdiction_code
        is_fallback = requirements.is_fallback
        reqs = requirements.requirements
    else:
        jurisdiction_code = prop.jurisdiction_code
        is_fallback = False
        reqs = tuple(requirements)

    own = current_certificates(c for c in certificates if c.property_id == prop.id)
    by_requirement = {c.requirement_id: c for c in own}
    resolved_ids = {r.id for r in reqs}

    tally = dict.fromkeys(_COUNTED.values(), 0)
    items: list[RequirementStatus] = []
    for req in reqs:
        cert = by_requirement.get(req.id)
        if cert is None:
            status = CertificateStatus.MISSING if req.mandatory else CertificateStatus.NOT_REQUIRED
            items.append(RequirementStatus(requirement=req, status=status))
        else:
            result = assess(cert, now, frequency=req.frequency, warning_days=warning_days)
            status = result.status
            items.append(
                RequirementStatus(
                    requirement=req,
                    status=status,
                    certificate=cert,
                    days_remaining=result.days_remaining,
                )
            )
        if status in _COUNTED:
            tally[_COUNTED[status]] += 1

    orphans = tuple(
        OrphanCertificate(
            certificate_id=c.id,
            property_id=c.property_id,
            requirement_id=c.requirement_id,
            reason=(
                f"Requirement '{c.requirement_id}' does not apply to "
                f"{jurisdiction_code} {prop.classification.value} properties"
            ),
        )
        for c in own
        if c.requirement_id not in resolved_ids
    )
    if orphans:
        logger.warning(
            "Property %s has %d orphan certificate(s): %s",
            prop.id, len(orphans), ", ".join(o.certificate_id for o in orphans),
        )

    counts = StatusCounts(**tally)
    return PropertySummary(
        property_ref=prop,
        jurisdiction_code=jurisdiction_code,
        is_fallback=is_fallback,
        counts=counts,
        applicable_count=sum(1 for r in reqs if r.mandatory or r.id in by_requirement),
        items=tuple(items),
        orphans=orphans,
    )


# ---------------------------------------------------------------------------
# Roll-ups
# ---------------------------------------------------------------------------

def rank_by_attention(summaries: Iterable[PropertySummary]) -> list[PropertySummary]:
    """Highest attention score first; ties keep their input order."""
    return sorted(summaries, key=lambda s: s.attention_score, reverse=True)


def summarize_jurisdictions(
    summaries: Iterable[PropertySummary],
) -> dict[str, JurisdictionSummary]:
    """Pointwise sums grouped by each property's declared jurisdiction code."""
    groups: dict[str, list[PropertySummary]] = defaultdict(list)
    for summary in summaries:
        groups[normalize_code(summary.property_ref.jurisdiction_code)].append(summary)

    result: dict[str, JurisdictionSummary] = {}
    for code, members in groups.items():
        counts = sum((m.counts for m in members), StatusCounts())
        result[code] = JurisdictionSummary(
            jurisdiction_code=code,
            is_fallback=any(m.is_fallback for m in members),
            property_count=len(members),
            attention_count=sum(1 for m in members if m.has_attention_needed),
            counts=counts,
        )
    return result


def summarize_portfolio(
    properties: Iterable[PropertyRef],
    certificates: Iterable[CertificateRecord],
    now: date | datetime,
    *,
    registry: JurisdictionRegistry | None = None,
    warning_days: int = EXPIRING_SOON_DAYS,
) -> PortfolioSummary:
    """Summarize a property set that may span several jurisdictions."""
    registry = registry or default_registry()

    by_property: dict[str, list[CertificateRecord]] = defaultdict(list)
    for cert in certificates:
        by_property[cert.property_id].append(cert)

    summaries = [
        summarize(
            prop,
            registry.get_requirements(prop.jurisdiction_code, prop.classification),
            by_property.get(prop.id, []),
            now,
            warning_days=warning_days,
        )
        for prop in properties
    ]

    return PortfolioSummary(
        property_count=len(summaries),
        attention_count=sum(1 for s in summaries if s.has_attention_needed),
        counts=sum((s.counts for s in summaries), StatusCounts()),
        by_jurisdiction=summarize_jurisdictions(summaries),
        properties=tuple(rank_by_attention(summaries)),
    )
