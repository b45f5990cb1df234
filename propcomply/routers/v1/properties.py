"""Property router — minimal property directory CRUD.

Pattern:
  1. Declare a router with prefix and tags
  2. Inject DB session via Depends
  3. Instantiate the service with (session, default client)
  4. Call service methods and wrap result in response envelope
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.core.config import settings
from propcomply.core.pagination import PaginationParams
from propcomply.core.response import DataResponse, ListResponse, paginated
from propcomply.db.base import get_db
from propcomply.schemas.property import PropertyCreate, PropertyOut, PropertyUpdate
from propcomply.services.property import PropertyService

router = APIRouter(prefix="/properties", tags=["Properties"])


def _svc(session: AsyncSession) -> PropertyService:
    return PropertyService(session, settings.default_client_id)


@router.get("", response_model=ListResponse[PropertyOut])
async def list_properties(
    jurisdiction: Optional[str] = Query(default=None, description="Filter by jurisdiction code"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """List properties (paginated). Filter by ?jurisdiction=UK|GR|US|SA."""
    items, total = await _svc(session).list_properties(pagination, jurisdiction=jurisdiction)
    return paginated(
        [PropertyOut.model_validate(p) for p in items],
        total, pagination,
    )


@router.post("", response_model=DataResponse[PropertyOut], status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    session: AsyncSession = Depends(get_db),
):
    prop = await _svc(session).create_property(body)
    return {"data": PropertyOut.model_validate(prop)}


@router.get("/{property_id}", response_model=DataResponse[PropertyOut])
async def get_property(
    property_id: str,
    session: AsyncSession = Depends(get_db),
):
    prop = await _svc(session).get_property(property_id)
    return {"data": PropertyOut.model_validate(prop)}


@router.put("/{property_id}", response_model=DataResponse[PropertyOut])
async def update_property(
    property_id: str,
    body: PropertyUpdate,
    session: AsyncSession = Depends(get_db),
):
    """Update a property. Changing jurisdiction or classification can orphan certificates."""
    prop = await _svc(session).update_property(property_id, body)
    return {"data": PropertyOut.model_validate(prop)}


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: str,
    session: AsyncSession = Depends(get_db),
):
    await _svc(session).delete_property(property_id)
