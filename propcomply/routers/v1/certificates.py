"""Certificate router — record (supersede), list, history, delete."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from propcomply.core.clock import reference_date
from propcomply.core.config import settings
from propcomply.core.response import DataResponse, ErrorResponse
from propcomply.db.base import get_db
from propcomply.schemas.certificate import (
    CertificateCreate,
    CertificateHistoryOut,
    CertificateOut,
    RecordCertificateOut,
)
from propcomply.services.compliance import ComplianceService

router = APIRouter(tags=["Certificates"])


def _svc(session: AsyncSession) -> ComplianceService:
    return ComplianceService(session, settings.default_client_id)


@router.post(
    "/properties/{property_id}/certificates",
    response_model=DataResponse[RecordCertificateOut],
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def record_certificate(
    property_id: str,
    body: CertificateCreate,
    session: AsyncSession = Depends(get_db),
):
    """Record a certificate; it replaces the current one for the same requirement."""
    result = await _svc(session).record_certificate(property_id, body)
    return {"data": result}


@router.get(
    "/properties/{property_id}/certificates",
    response_model=DataResponse[list[CertificateOut]],
)
async def list_certificates(
    property_id: str,
    now: date = Depends(reference_date),
    session: AsyncSession = Depends(get_db),
):
    return {"data": await _svc(session).list_certificates(property_id, now)}


@router.get(
    "/properties/{property_id}/certificates/{requirement_id}/history",
    response_model=DataResponse[list[CertificateHistoryOut]],
)
async def certificate_history(
    property_id: str,
    requirement_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Every recorded certificate for one requirement, newest first (superseded included)."""
    return {"data": await _svc(session).certificate_history(property_id, requirement_id)}


@router.delete("/certificates/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certificate(
    certificate_id: str,
    session: AsyncSession = Depends(get_db),
):
    await _svc(session).delete_certificate(certificate_id)
