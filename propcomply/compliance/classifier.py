"""Certificate lifecycle status classifier.

Status is a pure function of (certificate, now): it is never stored, so it
cannot go stale when time passes without a refresh. The classifier backs
dashboards rather than validation gates, so it never raises; data it cannot
interpret comes back as ``pending``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

from propcomply.compliance.catalog import NON_EXPIRING_FREQUENCIES, Frequency
from propcomply.compliance.dates import to_date

logger = logging.getLogger(__name__)

EXPIRING_SOON_DAYS = 90


class CertificateStatus(str, Enum):
    VALID = "valid"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    PENDING = "pending"
    # Only produced by aggregation, for requirements with no current certificate
    MISSING = "missing"
    NOT_REQUIRED = "not_required"


class CertificateAssessment(BaseModel):
    status: CertificateStatus
    days_remaining: int | None = None

    model_config = {"frozen": True}


def _frequency_or_none(frequency: Any) -> Frequency | None:
    if frequency is None:
        return None
    try:
        return Frequency(frequency)
    except ValueError:
        return None


def assess(
    certificate: Any,
    now: date | datetime,
    *,
    frequency: Frequency | str | None = None,
    warning_days: int = EXPIRING_SOON_DAYS,
) -> CertificateAssessment:
    """Classify *certificate* at *now* and report the whole days left until expiry.

    *certificate* is any object exposing ``issue_date`` and ``expiry_date``
    (dates, datetimes, ISO strings or None). *frequency* is the renewal
    cadence of the certificate's requirement, when known.
    """
    freq = _frequency_or_none(frequency)
    if freq in NON_EXPIRING_FREQUENCIES:
        return CertificateAssessment(status=CertificateStatus.VALID)

    issue_raw = getattr(certificate, "issue_date", None)
    expiry_raw = getattr(certificate, "expiry_date", None)
    try:
        today = to_date(now)
        if issue_raw is not None:
            to_date(issue_raw)
        expiry = to_date(expiry_raw) if expiry_raw is not None else None
    except (TypeError, ValueError) as exc:
        logger.debug(
            "Certificate %s has unusable dates: %s",
            getattr(certificate, "id", "?"), exc,
        )
        return CertificateAssessment(status=CertificateStatus.PENDING)

    if expiry is None:
        if freq is Frequency.AS_NEEDED:
            return CertificateAssessment(status=CertificateStatus.VALID)
        return CertificateAssessment(status=CertificateStatus.PENDING)

    days_remaining = (expiry - today).days
    if days_remaining <= 0:
        status = CertificateStatus.EXPIRED
    elif days_remaining <= warning_days:
        status = CertificateStatus.EXPIRING_SOON
    else:
        status = CertificateStatus.VALID
    return CertificateAssessment(status=status, days_remaining=days_remaining)


def classify(
    certificate: Any,
    now: date | datetime,
    *,
    frequency: Frequency | str | None = None,
    warning_days: int = EXPIRING_SOON_DAYS,
) -> CertificateStatus:
    """Lifecycle status of an existing certificate: valid, expiring_soon, expired or pending."""
    return assess(
        certificate, now, frequency=frequency, warning_days=warning_days
    ).status
