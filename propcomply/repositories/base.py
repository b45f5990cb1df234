"""Tenant-scoped async repository shared by properties, certificates and the audit trail."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """CRUD over one model, always restricted to a single client_id.

    Models with a ``deleted_at`` column are soft-deleted: standard reads skip
    those rows, history reads ask for them with ``include_deleted=True``.
    Nothing is ever hard-deleted.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession, client_id: str):
        self._session = session
        self._client_id = client_id

    @property
    def _soft_deletes(self) -> bool:
        return hasattr(self.model, "deleted_at")

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def _base_query(self, *, include_deleted: bool = False) -> Select:
        q = select(self.model).where(self.model.client_id == self._client_id)
        if self._soft_deletes and not include_deleted:
            q = q.where(self.model.deleted_at.is_(None))
        return q

    def _filtered(self, q: Select, filters: dict[str, Any] | None) -> Select:
        """Equality filters; unknown columns and None values are skipped."""
        for col_name, value in (filters or {}).items():
            if value is not None and hasattr(self.model, col_name):
                q = q.where(getattr(self.model, col_name) == value)
        return q

    async def _scalars(self, q: Select) -> list[ModelT]:
        return list((await self._session.execute(q)).scalars().all())

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query().where(self.model.id == entity_id)
        )
        return result.scalars().first()

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order: str = "desc",
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """One page of rows plus the unpaginated total."""
        q = self._filtered(self._base_query(), filters)
        total = (
            await self._session.execute(select(func.count()).select_from(q.subquery()))
        ).scalar_one()

        col = getattr(self.model, order_by, None)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        return await self._scalars(q.offset(offset).limit(limit)), total

    async def list_all(
        self,
        filters: dict[str, Any] | None = None,
        *,
        include_deleted: bool = False,
        newest_first: bool = False,
    ) -> list[ModelT]:
        """Every matching row in creation order, oldest first unless *newest_first*."""
        q = self._filtered(self._base_query(include_deleted=include_deleted), filters)
        if hasattr(self.model, "created_at"):
            created = self.model.created_at
            q = q.order_by(created.desc() if newest_first else created.asc())
        return await self._scalars(q)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(client_id=self._client_id, **kwargs)
        self._session.add(instance)
        await self._session.flush()
        await self._session.refresh(instance)
        return instance

    async def update(self, entity_id: str, **kwargs: Any) -> ModelT | None:
        """Update a row (deleted or not) and return it if it is still live."""
        kwargs.pop("id", None)
        kwargs.pop("client_id", None)
        if "updated_at" not in kwargs and hasattr(self.model, "updated_at"):
            kwargs["updated_at"] = datetime.now(timezone.utc)

        await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.client_id == self._client_id)
            .values(**kwargs)
        )
        await self._session.flush()
        return await self.get_by_id(entity_id)

    async def soft_delete(self, entity_id: str) -> bool:
        """Mark a live row deleted. False when there was no live row to delete."""
        result = await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.client_id == self._client_id)
            .where(self.model.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
        )
        await self._session.flush()
        return result.rowcount > 0
