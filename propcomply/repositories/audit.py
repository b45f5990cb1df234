"""Audit trail repository (append-only)."""

from __future__ import annotations

from typing import Any

from propcomply.domain.audit import AuditTrail
from propcomply.repositories.base import BaseRepository


class AuditRepository(BaseRepository[AuditTrail]):
    model = AuditTrail

    async def record(
        self,
        action: str,
        entity_type: str,
        entity_id: str | None = None,
        *,
        old_value: Any = None,
        new_value: Any = None,
        description: str | None = None,
    ) -> AuditTrail:
        return await self.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            old_value=old_value,
            new_value=new_value,
            description=description,
        )

    async def for_entity(self, entity_id: str) -> list[AuditTrail]:
        return await self.list_all({"entity_id": entity_id})
