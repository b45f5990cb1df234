"""Jurisdiction catalog router — read-only requirement lookup."""

from __future__ import annotations

from fastapi import APIRouter, Query

from propcomply.compliance.catalog import Classification
from propcomply.core.response import DataResponse
from propcomply.schemas.compliance import JurisdictionOut, RequirementListOut
from propcomply.services.compliance import CatalogService

router = APIRouter(prefix="/jurisdictions", tags=["Jurisdictions"])


def _svc() -> CatalogService:
    return CatalogService()


@router.get("", response_model=DataResponse[list[JurisdictionOut]])
async def list_jurisdictions():
    return {"data": _svc().list_jurisdictions()}


@router.get("/{code}", response_model=DataResponse[JurisdictionOut])
async def get_jurisdiction(code: str):
    return {"data": _svc().get_jurisdiction(code)}


@router.get("/{code}/requirements", response_model=DataResponse[RequirementListOut])
async def get_requirements(
    code: str,
    classification: Classification = Query(
        default=Classification.STANDARD,
        description="standard | multi_occupancy",
    ),
):
    """Requirements for a jurisdiction + classification, in catalog order.

    Unknown codes are not an error: the default jurisdiction's list is
    returned with ``isFallback`` and ``warning`` set.
    """
    return {"data": _svc().requirements(code, classification)}
