import inspect
import os
import subprocess
import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from propcomply.compliance import (
    CertificateDraft,
    InMemoryCertificateStore,
    current_certificates,
    record_certificate,
    remove_certificate,
    validate_certificate,
)
from propcomply.compliance.recording import derive_expiry
from propcomply.core.errors import (
    InvalidDateRangeError,
    NotFoundError,
    OrphanCertificateError,
    ValidationError,
)


RECORDED_AT = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _draft(requirement_id="gas_safety", issue=date(2023, 5, 1), expiry=date(2024, 5, 1), **kw):
    return CertificateDraft(
        property_id=kw.pop("property_id", "p-uk"),
        requirement_id=requirement_id,
        issue_date=issue,
        expiry_date=expiry,
        **kw,
    )


@pytest.mark.asyncio
async def test_recording_replaces_current_certificate(registry, uk_flat):
    store = InMemoryCertificateStore()
    first = await record_certificate(
        store, uk_flat, _draft(), registry=registry,
        now=datetime(2023, 5, 1, tzinfo=timezone.utc),
    )
    second = await record_certificate(
        store, uk_flat, _draft(issue=date(2024, 4, 20), expiry=date(2025, 4, 20)),
        registry=registry, now=datetime(2024, 4, 20, tzinfo=timezone.utc),
    )

    current = await store.load("p-uk")
    assert [r.id for r in current] == [second.record.id]
    assert current[0].expiry_date == date(2025, 4, 20)
    assert first.superseded == []
    assert [r.id for r in second.superseded] == [first.record.id]


@pytest.mark.asyncio
async def test_recording_leaves_other_requirements_alone(registry, uk_flat):
    store = InMemoryCertificateStore()
    await record_certificate(
        store, uk_flat, _draft("gas_safety"), now=RECORDED_AT, registry=registry
    )
    await record_certificate(
        store, uk_flat, _draft("epc", expiry=date(2033, 5, 1)), now=RECORDED_AT, registry=registry
    )
    await record_certificate(
        store, uk_flat, _draft("gas_safety"), now=RECORDED_AT, registry=registry
    )

    current = await store.load("p-uk")
    assert sorted(r.requirement_id for r in current) == ["epc", "gas_safety"]
    assert len(current_certificates(store.all())) == len(store.all())


@pytest.mark.asyncio
async def test_expiry_before_issue_is_rejected(registry, uk_flat):
    store = InMemoryCertificateStore()
    with pytest.raises(InvalidDateRangeError) as exc_info:
        await record_certificate(
            store, uk_flat, _draft(issue=date(2024, 1, 2), expiry=date(2024, 1, 1)),
            now=RECORDED_AT, registry=registry,
        )
    assert exc_info.value.code == "INVALID_DATE_RANGE"
    assert exc_info.value.status_code == 422
    assert store.all() == []


@pytest.mark.asyncio
async def test_same_day_issue_and_expiry_is_allowed(registry, uk_flat):
    store = InMemoryCertificateStore()
    outcome = await record_certificate(
        store, uk_flat, _draft(issue=date(2024, 1, 1), expiry=date(2024, 1, 1)),
        now=RECORDED_AT, registry=registry,
    )
    assert outcome.record.expiry_date == date(2024, 1, 1)


@pytest.mark.asyncio
async def test_orphan_certificate_is_rejected(registry, uk_flat):
    store = InMemoryCertificateStore()
    with pytest.raises(OrphanCertificateError) as exc_info:
        await record_certificate(
            store, uk_flat, _draft("hmo_license"), now=RECORDED_AT, registry=registry
        )
    assert exc_info.value.requirement_id == "hmo_license"
    assert exc_info.value.jurisdiction_code == "UK"
    assert store.all() == []


def test_hmo_requirement_accepted_for_hmo(registry, uk_hmo):
    req = validate_certificate(_draft("hmo_license", property_id="p-hmo"), uk_hmo, registry)
    assert req.id == "hmo_license"


def test_draft_for_another_property_is_rejected(registry, uk_flat):
    with pytest.raises(ValidationError):
        validate_certificate(_draft(property_id="elsewhere"), uk_flat, registry)


@pytest.mark.asyncio
async def test_missing_expiry_derived_from_cadence(registry, uk_flat):
    store = InMemoryCertificateStore()
    outcome = await record_certificate(
        store, uk_flat, _draft("eicr", issue=date(2024, 2, 29), expiry=None),
        now=RECORDED_AT, registry=registry, fill_expiry=True,
    )
    assert outcome.record.expiry_date == date(2029, 2, 28)


@pytest.mark.asyncio
async def test_missing_expiry_kept_without_fill(registry, uk_flat):
    store = InMemoryCertificateStore()
    outcome = await record_certificate(
        store, uk_flat, _draft("gas_safety", expiry=None), now=RECORDED_AT, registry=registry,
    )
    assert outcome.record.expiry_date is None


def test_derive_expiry_for_non_renewing_requirement(registry):
    once = registry.get_requirements("UK", "standard").find("deposit_protection")
    assert derive_expiry(date(2024, 1, 1), once) is None


@pytest.mark.asyncio
async def test_remove_certificate(registry, uk_flat):
    store = InMemoryCertificateStore()
    outcome = await record_certificate(
        store, uk_flat, _draft(), now=RECORDED_AT, registry=registry
    )

    await remove_certificate(store, outcome.record.id)
    assert await store.load("p-uk") == []

    with pytest.raises(NotFoundError):
        await remove_certificate(store, outcome.record.id)


def test_recording_time_is_supplied_by_the_caller():
    param = inspect.signature(record_certificate).parameters["now"]
    assert param.default is inspect.Parameter.empty


def test_compliance_core_does_not_import_fastapi():
    root = Path(__file__).resolve().parents[1]
    env = {**os.environ, "PYTHONPATH": os.pathsep.join([str(root), os.environ.get("PYTHONPATH", "")])}
    result = subprocess.run(
        [
            sys.executable,
            "-c",
            "import sys, propcomply.compliance; print('fastapi' in sys.modules)",
        ],
        capture_output=True,
        text=True,
        env=env,
        cwd=root,
        check=True,
    )
    assert result.stdout.strip() == "False"
