"""Compliance summary router — per-property and portfolio read models."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.core.clock import reference_date
from propcomply.core.config import settings
from propcomply.core.response import DataResponse
from propcomply.db.base import get_db
from propcomply.schemas.compliance import (
    AlertOut,
    AttentionItemOut,
    PortfolioSummaryOut,
    PropertySummaryOut,
)
from propcomply.services.compliance import ComplianceService

router = APIRouter(tags=["Compliance"])


def _svc(session: AsyncSession) -> ComplianceService:
    return ComplianceService(session, settings.default_client_id)


@router.get(
    "/properties/{property_id}/compliance",
    response_model=DataResponse[PropertySummaryOut],
)
async def property_summary(
    property_id: str,
    now: date = Depends(reference_date),
    session: AsyncSession = Depends(get_db),
):
    return {"data": await _svc(session).property_summary(property_id, now)}


@router.get("/compliance/portfolio", response_model=DataResponse[PortfolioSummaryOut])
async def portfolio_summary(
    jurisdiction: Optional[str] = Query(default=None, description="Only this jurisdiction"),
    include_items: bool = Query(
        default=False, alias="includeItems",
        description="Include per-requirement rows for every property",
    ),
    now: date = Depends(reference_date),
    session: AsyncSession = Depends(get_db),
):
    """Counts per jurisdiction and overall, with properties ranked by attention score."""
    result = await _svc(session).portfolio_summary(
        now, jurisdiction=jurisdiction, include_items=include_items,
    )
    return {"data": result}


@router.get("/compliance/attention", response_model=DataResponse[list[AttentionItemOut]])
async def attention(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    now: date = Depends(reference_date),
    session: AsyncSession = Depends(get_db),
):
    """Properties needing attention, highest score (expired * 1000 + expiring soon) first."""
    return {"data": await _svc(session).attention(now, limit=limit)}


@router.get("/compliance/alerts", response_model=DataResponse[list[AlertOut]])
async def alerts(
    property_id: Optional[str] = Query(default=None, alias="propertyId"),
    now: date = Depends(reference_date),
    session: AsyncSession = Depends(get_db),
):
    return {"data": await _svc(session).alerts(now, property_id=property_id)}
