"""Attention alerts derived from a property summary (delivery is someone else's job)."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from propcomply.compliance.aggregation import PropertySummary
from propcomply.compliance.classifier import CertificateStatus

URGENT_DAYS = 30

_PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


class ComplianceAlert(BaseModel):
    # compliance_expired | compliance_expiring | compliance_missing
    type: str
    priority: str  # high | medium
    property_id: str
    requirement_id: str
    title: str
    message: str
    certificate_id: str | None = None
    days_until_due: int | None = None


def sort_alerts(alerts: Iterable[ComplianceAlert]) -> list[ComplianceAlert]:
    """High priority first, then the soonest due. Alerts with no due date go last."""
    return sorted(
        alerts,
        key=lambda a: (
            _PRIORITY_RANK.get(a.priority, len(_PRIORITY_RANK)),
            a.days_until_due is None,
            a.days_until_due or 0,
        ),
    )


def build_alerts(summary: PropertySummary) -> list[ComplianceAlert]:
    """One alert per expired, expiring-soon or missing mandatory requirement, most urgent first."""
    place = summary.property_ref.label or summary.property_ref.id
    alerts: list[ComplianceAlert] = []

    for item in summary.items:
        req = item.requirement
        cert_id = item.certificate.id if item.certificate else None
        days = item.days_remaining

        if item.status is CertificateStatus.EXPIRED:
            ago = abs(days) if days is not None else 0
            when = "today" if ago == 0 else f"{ago} days ago"
            alerts.append(
                ComplianceAlert(
                    type="compliance_expired",
                    priority="high",
                    property_id=summary.property_ref.id,
                    requirement_id=req.id,
                    certificate_id=cert_id,
                    days_until_due=days,
                    title=f"{req.name} expired",
                    message=f"{req.name} for {place} expired {when}. Renew immediately.",
                )
            )
        elif item.status is CertificateStatus.EXPIRING_SOON:
            alerts.append(
                ComplianceAlert(
                    type="compliance_expiring",
                    priority="high" if days is not None and days <= URGENT_DAYS else "medium",
                    property_id=summary.property_ref.id,
                    requirement_id=req.id,
                    certificate_id=cert_id,
                    days_until_due=days,
                    title=f"{req.name} expiring soon",
                    message=(
                        f"{req.name} for {place} expires in {days} days. "
                        "Start the renewal process now."
                    ),
                )
            )
        elif item.status is CertificateStatus.MISSING:
            alerts.append(
                ComplianceAlert(
                    type="compliance_missing",
                    priority="high",
                    property_id=summary.property_ref.id,
                    requirement_id=req.id,
                    title=f"{req.name} missing",
                    message=f"No {req.name} is on record for {place}.",
                )
            )

    return sort_alerts(alerts)
