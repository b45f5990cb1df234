"""Property service — the minimal property directory the compliance rules read from.

Rule: No FastAPI here. Persistence goes through PropertyRepository.
"""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.compliance.catalog import JurisdictionRegistry, default_registry
from propcomply.core.errors import NotFoundError, ValidationError
from propcomply.core.pagination import PaginationParams
from propcomply.domain.property import Property
from propcomply.repositories.property import PropertyRepository
from propcomply.schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)

class PropertyService:
    def __init__(
        self,
        session: AsyncSession,
        client_id: str,
        registry: JurisdictionRegistry | None = None,
    ):
        self._repo = PropertyRepository(session, client_id)
        self._registry = registry or default_registry()

    def _check_jurisdiction(self, code: str) -> str:
        code = code.strip().upper()
        if code not in self._registry:
            raise ValidationError(
                f"Unknown jurisdiction '{code}'. "
                f"Supported: {', '.join(self._registry.codes())}",
                code="UNKNOWN_JURISDICTION",
            )
        return code

    async def list_properties(
        self, pagination: PaginationParams, jurisdiction: str | None = None
    ):
        filters = {"jurisdiction_code": jurisdiction.upper()} if jurisdiction else None
        items, total = await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters=filters,
        )
        return items, total

    async def get_property(self, property_id: str) -> Property:
        prop = await self._repo.get_by_id(property_id)
        if not prop:
            raise NotFoundError("Property", property_id)
        return prop

    async def create_property(self, data: PropertyCreate) -> Property:
        values = data.model_dump(exclude_none=True)
        values["jurisdiction_code"] = self._check_jurisdiction(data.jurisdiction_code)
        values["classification"] = data.classification.value
        prop = await self._repo.create(**values)
        logger.info("Created property %s (%s)", prop.id, prop.jurisdiction_code)
        return prop

    async def update_property(self, property_id: str, data: PropertyUpdate) -> Property:
        _ = await self.get_property(property_id)  # raises 404 if missing
        values = data.model_dump(exclude_none=True, exclude_unset=True)
        if data.jurisdiction_code is not None:
            values["jurisdiction_code"] = self._check_jurisdiction(data.jurisdiction_code)
        if data.classification is not None:
            values["classification"] = data.classification.value
        updated = await self._repo.update(property_id, **values)
        return updated  # type: ignore[return-value]

    async def delete_property(self, property_id: str) -> None:
        deleted = await self._repo.soft_delete(property_id)
        if not deleted:
            raise NotFoundError("Property", property_id)
