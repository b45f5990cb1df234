from datetime import date

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from propcomply.compliance import builtin_registry
from propcomply.db.base import create_schema, make_session_factory
from propcomply.middleware.audit import infer_entity
from propcomply.repositories.audit import AuditRepository
from propcomply.repositories.property import PropertyRepository
from propcomply.schemas.certificate import CertificateCreate
from propcomply.schemas.property import PropertyCreate
from propcomply.services.compliance import CatalogService, ComplianceService
from propcomply.services.property import PropertyService

CLIENT = "tests"


@pytest.fixture
async def session(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'svc.db'}", poolclass=NullPool
    )
    await create_schema(engine)
    async with make_session_factory(engine)() as s:
        yield s
    await engine.dispose()


async def _property(session, **kw):
    data = PropertyCreate(name=kw.pop("name", "Flat 1"), jurisdiction_code=kw.pop("code", "UK"), **kw)
    return await PropertyService(session, CLIENT, builtin_registry()).create_property(data)


@pytest.mark.asyncio
async def test_superseded_certificate_leaves_audit_row(session):
    prop = await _property(session)
    svc = ComplianceService(session, CLIENT, builtin_registry())

    first = await svc.record_certificate(
        prop.id,
        CertificateCreate(requirement_id="gas_safety", issue_date=date(2023, 1, 1),
                          expiry_date=date(2024, 1, 1)),
    )
    second = await svc.record_certificate(
        prop.id,
        CertificateCreate(requirement_id="gas_safety", issue_date=date(2024, 1, 5),
                          expiry_date=date(2025, 1, 5)),
    )

    rows = await AuditRepository(session, CLIENT).for_entity(first.certificate.id)
    assert [r.action for r in rows] == ["certificate.superseded"]
    assert rows[0].old_value["id"] == first.certificate.id
    assert rows[0].new_value["id"] == second.certificate.id


@pytest.mark.asyncio
async def test_delete_leaves_audit_row(session):
    prop = await _property(session, code="SA")
    svc = ComplianceService(session, CLIENT, builtin_registry())
    out = await svc.record_certificate(
        prop.id, CertificateCreate(requirement_id="title_deed", issue_date=date(2020, 1, 1)),
    )

    await svc.delete_certificate(out.certificate.id)

    rows = await AuditRepository(session, CLIENT).for_entity(out.certificate.id)
    assert [r.action for r in rows] == ["certificate.deleted"]
    summary = await svc.property_summary(prop.id, date(2024, 1, 1))
    assert summary.counts.missing == 4


@pytest.mark.asyncio
async def test_tenants_are_isolated(session):
    prop = await _property(session)
    other = ComplianceService(session, "someone-else", builtin_registry())
    portfolio = await other.portfolio_summary(date(2024, 1, 1))
    assert portfolio.property_count == 0
    assert prop.client_id == CLIENT


def test_catalog_service():
    svc = CatalogService(builtin_registry())
    assert svc.get_jurisdiction("us").currency_code == "USD"
    listing = svc.requirements("UK", "multi_occupancy")
    assert listing.requirements[-1].id == "hmo_license"
    assert listing.requirements[0].frequency_label == "Every year"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/v1/properties", ("property", None)),
        (
            "/api/v1/certificates/0b6a3f5e-8c1d-4e2a-9f7b-1c2d3e4f5a6b",
            ("certificate", "0b6a3f5e-8c1d-4e2a-9f7b-1c2d3e4f5a6b"),
        ),
        ("/", ("unknown", None)),
    ],
)
def test_infer_entity(path, expected):
    assert infer_entity(path) == expected


@pytest.mark.asyncio
async def test_unknown_stored_classification_reads_as_standard(session):
    prop = await _property(session)
    await PropertyRepository(session, CLIENT).update(prop.id, classification="castle")
    svc = ComplianceService(session, CLIENT, builtin_registry())

    summary = await svc.property_summary(prop.id, date(2024, 1, 1))
    assert summary.classification == "standard"
    assert summary.counts.missing == 8

    portfolio = await svc.portfolio_summary(date(2024, 1, 1))
    assert portfolio.property_count == 1
