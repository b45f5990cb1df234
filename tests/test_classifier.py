from datetime import date, datetime, timedelta

import pytest

from propcomply.compliance import CertificateStatus, CertificateRecord, Frequency, assess, classify
from propcomply.compliance.dates import add_months, days_until, to_date
from tests.factories import NOW, make_cert


def _expiring_in(days: int) -> CertificateRecord:
    return make_cert("p1", "gas_safety", NOW + timedelta(days=days))


def test_expiring_today_is_expired():
    cert = make_cert("p1", "gas_safety", date(2024, 1, 1))
    assert classify(cert, date(2024, 1, 1), frequency=Frequency.ANNUAL) is CertificateStatus.EXPIRED


@pytest.mark.parametrize(
    "days, expected",
    [
        (-30, CertificateStatus.EXPIRED),
        (0, CertificateStatus.EXPIRED),
        (1, CertificateStatus.EXPIRING_SOON),
        (90, CertificateStatus.EXPIRING_SOON),
        (91, CertificateStatus.VALID),
        (365, CertificateStatus.VALID),
    ],
)
def test_status_boundaries(days, expected):
    result = assess(_expiring_in(days), NOW, frequency=Frequency.ANNUAL)
    assert result.status is expected
    assert result.days_remaining == days


def test_custom_warning_window():
    cert = _expiring_in(45)
    assert classify(cert, NOW, warning_days=30) is CertificateStatus.VALID
    assert classify(cert, NOW, warning_days=60) is CertificateStatus.EXPIRING_SOON


def test_datetime_now_uses_calendar_day():
    cert = _expiring_in(1)
    late_evening = datetime(2024, 1, 1, 23, 59)
    assert assess(cert, late_evening).days_remaining == 1


def test_once_requirements_never_expire():
    cert = make_cert("p1", "deposit_protection", date(2020, 1, 1))
    assert classify(cert, NOW, frequency=Frequency.ONCE) is CertificateStatus.VALID
    assert classify(cert, NOW, frequency="once") is CertificateStatus.VALID


def test_as_needed_without_expiry_is_valid():
    cert = make_cert("p1", "legionella", None)
    assert classify(cert, NOW, frequency=Frequency.AS_NEEDED) is CertificateStatus.VALID


def test_missing_expiry_is_pending():
    cert = make_cert("p1", "gas_safety", None)
    assert classify(cert, NOW, frequency=Frequency.ANNUAL) is CertificateStatus.PENDING
    assert classify(cert, NOW) is CertificateStatus.PENDING


def test_malformed_dates_are_pending_not_errors():
    cert = CertificateRecord.model_construct(
        id="bad",
        property_id="p1",
        requirement_id="gas_safety",
        issue_date="2023-01-01",
        expiry_date="not-a-date",
    )
    result = assess(cert, NOW, frequency=Frequency.ANNUAL)
    assert result.status is CertificateStatus.PENDING
    assert result.days_remaining is None


def test_string_dates_are_accepted():
    cert = CertificateRecord.model_construct(
        id="iso",
        property_id="p1",
        requirement_id="gas_safety",
        issue_date="2023-01-01",
        expiry_date="2024-06-01",
    )
    assert classify(cert, "2024-01-01") is CertificateStatus.VALID


def test_classify_is_deterministic():
    cert = _expiring_in(10)
    assert classify(cert, NOW) is classify(cert, NOW)


def test_date_helpers():
    assert to_date(datetime(2024, 2, 29, 12, 0)) == date(2024, 2, 29)
    assert to_date("2024-02-29T08:30:00") == date(2024, 2, 29)
    assert days_until(date(2024, 1, 31), NOW) == 30
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 6, 15), 60) == date(2028, 6, 15)
    with pytest.raises(ValueError):
        to_date(42)
