"""Compliance service — wires the pure compliance core to the repositories.

This module owns the orchestration around certificates and summaries.
Routers delegate here and never contain domain logic directly.

Responsibilities:
  - Requirement lookup per jurisdiction + classification (with explicit fallback)
  - Recording certificates through the replacement rule, with an audit row
    for every superseded or removed certificate
  - Building property / portfolio summaries, attention ranking and alerts
    from a fresh snapshot on every call
  - Response-model construction
"""


import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.compliance import (
    CertificateDraft,
    CertificateRecord,
    CertificateStatus,
    Classification,
    ComplianceAlert,
    ComplianceRequirement,
    JurisdictionConfig,
    JurisdictionRegistry,
    JurisdictionSummary,
    PortfolioSummary,
    PropertyRef,
    PropertySummary,
    RequirementResolution,
    StatusCounts,
    build_alerts,
    default_registry,
    record_certificate,
    remove_certificate,
    sort_alerts,
    summarize,
    summarize_portfolio,
)
from propcomply.compliance.catalog import frequency_label
from propcomply.core.config import settings
from propcomply.core.errors import NotFoundError
from propcomply.domain.mixins import utcnow
from propcomply.repositories.audit import AuditRepository
from propcomply.repositories.certificate import CertificateRepository
from propcomply.repositories.property import PropertyRepository
from propcomply.schemas.certificate import (
    CertificateCreate,
    CertificateHistoryOut,
    CertificateOut,
    RecordCertificateOut,
)
from propcomply.schemas.compliance import (
    AlertOut,
    AttentionItemOut,
    JurisdictionOut,
    JurisdictionSummaryOut,
    OrphanCertificateOut,
    PortfolioSummaryOut,
    PropertySummaryOut,
    RequirementListOut,
    RequirementOut,
    RequirementStatusOut,
    StatusCountsOut,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------

def requirement_out(req: ComplianceRequirement) -> RequirementOut:
    return RequirementOut(
        id=req.id,
        name=req.name,
        description=req.description,
        frequency=req.frequency.value,
        frequency_label=frequency_label(req.frequency),
        mandatory=req.mandatory,
        applies_to_standard=req.applies_to_standard,
        applies_to_hmo=req.applies_to_hmo,
    )

def jurisdiction_out(config: JurisdictionConfig, *, is_default: bool = False) -> JurisdictionOut:
    return JurisdictionOut(
        code=config.code,
        name=config.name,
        currency_symbol=config.currency.symbol,
        currency_code=config.currency.code,
        currency_position=config.currency.position,
        date_format=config.date_format,
        deposit_rule=config.deposit_rule,
        deposit_max_weeks=config.deposit_max_weeks,
        version=config.version,
        is_default=is_default,
        requirement_count=len(config.requirements),
    )

def resolution_out(resolution: RequirementResolution) -> RequirementListOut:
    return RequirementListOut(
        requested_code=resolution.requested_code,
        jurisdiction_code=resolution.jurisdiction_code,
        classification=resolution.classification.value,
        catalog_version=resolution.catalog_version,
        is_fallback=resolution.is_fallback,
        warning=resolution.warning.message if resolution.warning else None,
        requirements=[requirement_out(r) for r in resolution.requirements],
    )

def certificate_out(
    record: CertificateRecord,
    status: CertificateStatus | None = None,
    days_remaining: int | None = None,
) -> CertificateOut:
    return CertificateOut(
        **record.model_dump(),
        status=status.value if status else None,
        days_remaining=days_remaining,
    )

def counts_out(counts: StatusCounts) -> StatusCountsOut:
    return StatusCountsOut(**counts.model_dump())

def summary_out(summary: PropertySummary) -> PropertySummaryOut:
    ref = summary.property_ref
    return PropertySummaryOut(
        property_id=ref.id,
        property_name=ref.label,
        jurisdiction_code=summary.jurisdiction_code,
        classification=ref.classification.value,
        is_fallback=summary.is_fallback,
        counts=counts_out(summary.counts),
        applicable_count=summary.applicable_count,
        has_attention_needed=summary.has_attention_needed,
        attention_score=summary.attention_score,
        items=[
            RequirementStatusOut(
                requirement=requirement_out(item.requirement),
                status=item.status.value,
                certificate=(
                    certificate_out(item.certificate, item.status, item.days_remaining)
                    if item.certificate else None
                ),
                days_remaining=item.days_remaining,
            )
            for item in summary.items
        ],
        orphans=[OrphanCertificateOut(**o.model_dump()) for o in summary.orphans],
    )

def jurisdiction_summary_out(summary: JurisdictionSummary) -> JurisdictionSummaryOut:
    return JurisdictionSummaryOut(
        jurisdiction_code=summary.jurisdiction_code,
        is_fallback=summary.is_fallback,
        property_count=summary.property_count,
        attention_count=summary.attention_count,
        counts=counts_out(summary.counts),
        attention_score=summary.attention_score,
    )

def portfolio_out(portfolio: PortfolioSummary, *, include_items: bool = True) -> PortfolioSummaryOut:
    properties = [summary_out(s) for s in portfolio.properties]
    if not include_items:
        properties = [p.model_copy(update={"items": [], "orphans": []}) for p in properties]
    return PortfolioSummaryOut(
        property_count=portfolio.property_count,
        attention_count=portfolio.attention_count,
        counts=counts_out(portfolio.counts),
        attention_score=portfolio.attention_score,
        by_jurisdiction={
            code: jurisdiction_summary_out(js) for code, js in portfolio.by_jurisdiction.items()
        },
        properties=properties,
    )

def attention_item_out(summary: PropertySummary) -> AttentionItemOut:
    return AttentionItemOut(
        property_id=summary.property_ref.id,
        property_name=summary.property_ref.label,
        jurisdiction_code=summary.property_ref.jurisdiction_code,
        attention_score=summary.attention_score,
        has_attention_needed=summary.has_attention_needed,
        expired=summary.counts.expired,
        expiring_soon=summary.counts.expiring_soon,
        missing=summary.counts.missing,
    )

def alert_out(alert: ComplianceAlert) -> AlertOut:
    return AlertOut(**alert.model_dump())

# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

class CatalogService:
    """Catalog reads. No database access."""

    def __init__(self, registry: JurisdictionRegistry | None = None):
        self._registry = registry or default_registry()

    def list_jurisdictions(self) -> list[JurisdictionOut]:
        default = self._registry.default_code
        return [
            jurisdiction_out(c, is_default=c.code == default) for c in self._registry.configs()
        ]

    def get_jurisdiction(self, code: str) -> JurisdictionOut:
        config = self._registry.get(code)
        if config is None:
            raise NotFoundError("Jurisdiction", code)
        return jurisdiction_out(config, is_default=config.code == self._registry.default_code)

    def requirements(self, code: str, classification: Classification) -> RequirementListOut:
        return resolution_out(self._registry.get_requirements(code, classification))

class ComplianceService:
    def __init__(
        self,
        session: AsyncSession,
        client_id: str,
        registry: JurisdictionRegistry | None = None,
    ):
        self._properties = PropertyRepository(session, client_id)
        self._certificates = CertificateRepository(session, client_id)
        self._audit = AuditRepository(session, client_id)
        self._registry = registry or default_registry()
        self._warning_days = settings.expiring_soon_days

    # ------------------------------------------------------------------
    # Certificates
    # ------------------------------------------------------------------

    async def _property_ref(self, property_id: str) -> PropertyRef:
        ref = await self._properties.get_ref(property_id)
        if ref is None:
            raise NotFoundError("Property", property_id)
        return ref

    async def record_certificate(
        self, property_id: str, data: CertificateCreate
    ) -> RecordCertificateOut:
        prop = await self._property_ref(property_id)
        draft = CertificateDraft(property_id=prop.id, **data.model_dump())
        outcome = await record_certificate(
            self._certificates,
            prop,
            draft,
            now=utcnow(),
            registry=self._registry,
            fill_expiry=settings.derive_missing_expiry,
        )

        for old in outcome.superseded:
            await self._certificates.mark_superseded(old.id, outcome.record.id)
            await self._audit.record(
                "certificate.superseded",
                "certificate",
                old.id,
                old_value=old.model_dump(mode="json"),
                new_value=outcome.record.model_dump(mode="json"),
                description=f"Superseded by {outcome.record.id}",
            )

        return RecordCertificateOut(
            certificate=certificate_out(outcome.record),
            superseded_ids=[old.id for old in outcome.superseded],
        )

    async def list_certificates(self, property_id: str, now: date) -> list[CertificateOut]:
        """Current certificates for a property, each with its status at *now*."""
        summary = await self.property_summary_model(property_id, now)
        out = [
            certificate_out(item.certificate, item.status, item.days_remaining)
            for item in summary.items
            if item.certificate is not None
        ]
        orphan_ids = {o.certificate_id for o in summary.orphans}
        for record in await self._certificates.load(property_id):
            if record.id in orphan_ids:
                out.append(certificate_out(record))
        return out

    async def certificate_history(
        self, property_id: str, requirement_id: str
    ) -> list[CertificateHistoryOut]:
        await self._property_ref(property_id)
        rows = await self._certificates.history(property_id, requirement_id)
        return [CertificateHistoryOut.model_validate(row) for row in rows]

    async def delete_certificate(self, certificate_id: str) -> None:
        row = await self._certificates.get_by_id(certificate_id)
        await remove_certificate(self._certificates, certificate_id)
        await self._audit.record(
            "certificate.deleted",
            "certificate",
            certificate_id,
            old_value=CertificateRecord.model_validate(row).model_dump(mode="json") if row else None,
        )

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    async def property_summary_model(self, property_id: str, now: date) -> PropertySummary:
        prop = await self._property_ref(property_id)
        resolution = self._registry.get_requirements(prop.jurisdiction_code, prop.classification)
        certificates = await self._certificates.load(prop.id)
        return summarize(prop, resolution, certificates, now, warning_days=self._warning_days)

    async def property_summary(self, property_id: str, now: date) -> PropertySummaryOut:
        return summary_out(await self.property_summary_model(property_id, now))

    async def _portfolio(self, now: date, jurisdiction: str | None = None) -> PortfolioSummary:
        props = await self._properties.list_refs(jurisdiction)
        certificates = await self._certificates.load_many([p.id for p in props])
        return summarize_portfolio(
            props,
            certificates,
            now,
            registry=self._registry,
            warning_days=self._warning_days,
        )

    async def portfolio_summary(
        self, now: date, jurisdiction: str | None = None, include_items: bool = False
    ) -> PortfolioSummaryOut:
        portfolio = await self._portfolio(now, jurisdiction)
        logger.debug(
            "Portfolio summary: %d properties, %d need attention",
            portfolio.property_count, portfolio.attention_count,
        )
        return portfolio_out(portfolio, include_items=include_items)

    async def attention(self, now: date, limit: int | None = None) -> list[AttentionItemOut]:
        portfolio = await self._portfolio(now)
        ranked = [s for s in portfolio.properties if s.attention_score > 0 or s.has_attention_needed]
        if limit is not None:
            ranked = ranked[:limit]
        return [attention_item_out(s) for s in ranked]

    async def alerts(self, now: date, property_id: str | None = None) -> list[AlertOut]:
        if property_id:
            summaries = [await self.property_summary_model(property_id, now)]
        else:
            summaries = list((await self._portfolio(now)).properties)
        alerts = sort_alerts(a for s in summaries for a in build_alerts(s))
        return [alert_out(a) for a in alerts]
