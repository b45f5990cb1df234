"""Certificate replacement rule: validate, then supersede (last write wins).

Recording a certificate for a (property, requirement) pair replaces whatever
was current for that pair. Validation happens here, at the creation
boundary, so bad date ranges and orphan certificates never reach the
classifier or the aggregation engine.

Persistence goes through a ``CertificateStore``. The store owns its own
atomicity: after ``record_certificate`` it must hold at most one current
record per pair. Whether superseded rows are kept as history is the store's
business (the SQL repository soft-deletes them).
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Protocol

from pydantic import BaseModel

from propcomply.compliance.catalog import (
    ComplianceRequirement,
    JurisdictionRegistry,
    default_registry,
    renewal_months,
)
from propcomply.compliance.dates import add_months
from propcomply.compliance.models import CertificateDraft, CertificateRecord, PropertyRef
from propcomply.core.errors import (
    InvalidDateRangeError,
    NotFoundError,
    OrphanCertificateError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class CertificateStore(Protocol):
    async def load(self, property_id: str) -> list[CertificateRecord]:
        """Current certificates for a property."""
        ...

    async def save(self, record: CertificateRecord) -> CertificateRecord:
        ...

    async def delete(self, record_id: str) -> bool:
        ...


class InMemoryCertificateStore:
    """Dict-backed store for tests and embedded use. Deleting discards the record."""

    def __init__(self, records: list[CertificateRecord] | None = None):
        self._records: dict[str, CertificateRecord] = {}
        for record in records or []:
            self._records[record.id] = record

    async def load(self, property_id: str) -> list[CertificateRecord]:
        return [r for r in self._records.values() if r.property_id == property_id]

    async def save(self, record: CertificateRecord) -> CertificateRecord:
        self._records[record.id] = record
        return record

    async def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def all(self) -> list[CertificateRecord]:
        return list(self._records.values())


class RecordOutcome(BaseModel):
    record: CertificateRecord
    requirement: ComplianceRequirement
    superseded: list[CertificateRecord] = []


def _check(
    draft: CertificateDraft,
    prop: PropertyRef,
    registry: JurisdictionRegistry | None,
) -> tuple[ComplianceRequirement, str]:
    if draft.property_id != prop.id:
        raise ValidationError(
            f"Certificate is for property '{draft.property_id}', not '{prop.id}'"
        )
    if draft.expiry_date is not None and draft.expiry_date < draft.issue_date:
        raise InvalidDateRangeError(draft.issue_date, draft.expiry_date)

    resolution = (registry or default_registry()).get_requirements(
        prop.jurisdiction_code, prop.classification
    )
    requirement = resolution.find(draft.requirement_id)
    if requirement is None:
        raise OrphanCertificateError(
            draft.requirement_id, resolution.jurisdiction_code, prop.classification.value
        )
    return requirement, resolution.jurisdiction_code


def validate_certificate(
    draft: CertificateDraft,
    prop: PropertyRef,
    registry: JurisdictionRegistry | None = None,
) -> ComplianceRequirement:
    """Check a draft against its property; return the requirement it satisfies.

    Raises InvalidDateRangeError or OrphanCertificateError.
    """
    requirement, _ = _check(draft, prop, registry)
    return requirement


def derive_expiry(issue_date: date, requirement: ComplianceRequirement) -> date | None:
    """Expiry implied by the requirement's renewal cadence, if it has one."""
    months = renewal_months(requirement.frequency)
    if months is None:
        return None
    return add_months(issue_date, months)


async def record_certificate(
    store: CertificateStore,
    prop: PropertyRef,
    draft: CertificateDraft,
    *,
    now: datetime,
    registry: JurisdictionRegistry | None = None,
    fill_expiry: bool = False,
) -> RecordOutcome:
    """Record *draft* as the current certificate for its (property, requirement) pair.

    *now* becomes the record's ``created_at``; it decides which record is
    current when snapshots are replayed.
    """
    requirement, jurisdiction_code = _check(draft, prop, registry)

    expiry = draft.expiry_date
    if expiry is None and fill_expiry:
        expiry = derive_expiry(draft.issue_date, requirement)

    existing = await store.load(prop.id)
    superseded = [r for r in existing if r.requirement_id == draft.requirement_id]
    for old in superseded:
        await store.delete(old.id)

    record = CertificateRecord(
        id=str(uuid.uuid4()),
        property_id=prop.id,
        requirement_id=draft.requirement_id,
        issue_date=draft.issue_date,
        expiry_date=expiry,
        certificate_number=draft.certificate_number,
        contractor=draft.contractor,
        notes=draft.notes,
        jurisdiction_code=jurisdiction_code,
        created_at=now,
    )
    saved = await store.save(record)
    if superseded:
        logger.info(
            "Certificate %s supersedes %s for %s/%s",
            saved.id, ", ".join(r.id for r in superseded), prop.id, draft.requirement_id,
        )
    return RecordOutcome(record=saved, requirement=requirement, superseded=superseded)


async def remove_certificate(store: CertificateStore, record_id: str) -> None:
    if not await store.delete(record_id):
        raise NotFoundError("Certificate", record_id)
