"""Property repository."""

import logging

from propcomply.compliance.catalog import Classification
from propcomply.compliance.models import PropertyRef
from propcomply.domain.property import Property
from propcomply.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    model = Property

    async def get_ref(self, property_id: str) -> PropertyRef | None:
        row = await self.get_by_id(property_id)
        return to_ref(row) if row else None

    async def list_refs(self, jurisdiction_code: str | None = None) -> list[PropertyRef]:
        filters = {"jurisdiction_code": jurisdiction_code.upper()} if jurisdiction_code else None
        return [to_ref(row) for row in await self.list_all(filters)]


def _classification(row: Property) -> Classification:
    try:
        return Classification(row.classification)
    except ValueError:
        # Reads must not fail on a bad stored value; treat it as the baseline rule set.
        logger.warning(
            "Property %s has unknown classification %r; treating it as standard",
            row.id, row.classification,
        )
        return Classification.STANDARD


def to_ref(row: Property) -> PropertyRef:
    return PropertyRef(
        id=row.id,
        jurisdiction_code=row.jurisdiction_code,
        classification=_classification(row),
        label=row.name,
    )
