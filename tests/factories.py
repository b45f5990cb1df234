"""Snapshot builders shared by the compliance tests."""

from datetime import date, datetime, timezone

from propcomply.compliance import CertificateRecord

NOW = date(2024, 1, 1)


def make_cert(
    property_id: str,
    requirement_id: str,
    expiry: date | None,
    *,
    issue: date = date(2023, 1, 1),
    id: str | None = None,
    created_at: datetime | None = None,
) -> CertificateRecord:
    return CertificateRecord(
        id=id or f"{property_id}-{requirement_id}",
        property_id=property_id,
        requirement_id=requirement_id,
        issue_date=issue,
        expiry_date=expiry,
        created_at=created_at or datetime(2023, 6, 1, tzinfo=timezone.utc),
    )
