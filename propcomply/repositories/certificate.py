"""Certificate repository — the SQL-backed CertificateStore.

``load`` returns only current (non-deleted) rows. ``delete`` soft-deletes,
so superseded certificates stay in the table as history.
"""

from __future__ import annotations

from propcomply.compliance.models import CertificateRecord
from propcomply.domain.certificate import ComplianceCertificate
from propcomply.repositories.base import BaseRepository


class CertificateRepository(BaseRepository[ComplianceCertificate]):
    model = ComplianceCertificate

    # ------------------------------------------------------------------
    # CertificateStore protocol
    # ------------------------------------------------------------------

    async def load(self, property_id: str) -> list[CertificateRecord]:
        rows = await self.list_all({"property_id": property_id})
        return [CertificateRecord.model_validate(row) for row in rows]

    async def save(self, record: CertificateRecord) -> CertificateRecord:
        row = await self.create(
            **record.model_dump(exclude_none=True),
        )
        return CertificateRecord.model_validate(row)

    async def delete(self, record_id: str) -> bool:
        return await self.soft_delete(record_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def load_many(self, property_ids: list[str]) -> list[CertificateRecord]:
        if not property_ids:
            return []
        rows = await self._scalars(
            self._base_query()
            .where(ComplianceCertificate.property_id.in_(property_ids))
            .order_by(ComplianceCertificate.created_at.asc())
        )
        return [CertificateRecord.model_validate(row) for row in rows]

    async def history(self, property_id: str, requirement_id: str) -> list[ComplianceCertificate]:
        """All rows for a pair, including superseded ones, newest first."""
        return await self.list_all(
            {"property_id": property_id, "requirement_id": requirement_id},
            include_deleted=True,
            newest_first=True,
        )

    async def mark_superseded(self, record_id: str, superseded_by_id: str) -> None:
        await self.update(record_id, superseded_by_id=superseded_by_id)
