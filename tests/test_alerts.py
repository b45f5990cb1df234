from datetime import timedelta

from propcomply.compliance import PropertyRef, build_alerts, sort_alerts, summarize
from tests.factories import NOW, make_cert


def _alerts(registry, certs, code="GR"):
    prop = PropertyRef(id="p1", jurisdiction_code=code, label="Athens flat")
    return build_alerts(summarize(prop, registry.get_requirements(code, "standard"), certs, NOW))


def test_no_alerts_when_everything_is_valid(registry):
    certs = [
        make_cert("p1", "epc_greece", NOW + timedelta(days=3000)),
        make_cert("p1", "building_permit", None),
        make_cert("p1", "tax_clearance", NOW + timedelta(days=200)),
    ]
    assert _alerts(registry, certs) == []


def test_alert_per_attention_item(registry):
    certs = [
        make_cert("p1", "epc_greece", NOW - timedelta(days=5)),
        make_cert("p1", "tax_clearance", NOW + timedelta(days=60)),
    ]
    alerts = {a.requirement_id: a for a in _alerts(registry, certs)}

    expired = alerts["epc_greece"]
    assert expired.type == "compliance_expired"
    assert expired.priority == "high"
    assert expired.days_until_due == -5
    assert "5 days ago" in expired.message
    assert expired.certificate_id == "p1-epc_greece"

    expiring = alerts["tax_clearance"]
    assert expiring.type == "compliance_expiring"
    assert expiring.priority == "medium"

    missing = alerts["building_permit"]
    assert missing.type == "compliance_missing"
    assert missing.certificate_id is None
    assert "Athens flat" in missing.message


def test_expiring_within_a_month_is_urgent(registry):
    certs = [make_cert("p1", "tax_clearance", NOW + timedelta(days=30))]
    alerts = {a.requirement_id: a for a in _alerts(registry, certs)}
    assert alerts["tax_clearance"].priority == "high"


def test_optional_requirements_do_not_alert(registry):
    alerts = _alerts(registry, [], code="US")
    assert "local_permits" not in {a.requirement_id for a in alerts}
    assert len(alerts) == 2


def test_alerts_are_ordered_by_priority_then_due_date(registry):
    certs = [
        make_cert("p1", "epc_greece", NOW + timedelta(days=60)),
        make_cert("p1", "building_permit", None),
    ]
    alerts = _alerts(registry, certs)
    assert [(a.type, a.priority) for a in alerts] == [
        ("compliance_missing", "high"),
        ("compliance_expiring", "medium"),
    ]


def test_sort_alerts_across_properties(registry):
    flat = PropertyRef(id="flat", jurisdiction_code="GR", label="Flat")
    house = PropertyRef(id="house", jurisdiction_code="GR", label="House")
    resolution = registry.get_requirements("GR", "standard")
    flat_alerts = build_alerts(summarize(flat, resolution, [
        make_cert("flat", "epc_greece", NOW + timedelta(days=80)),
        make_cert("flat", "building_permit", None),
        make_cert("flat", "tax_clearance", NOW + timedelta(days=10)),
    ], NOW))
    house_alerts = build_alerts(summarize(house, resolution, [
        make_cert("house", "epc_greece", NOW - timedelta(days=2)),
        make_cert("house", "building_permit", None),
        make_cert("house", "tax_clearance", NOW + timedelta(days=45)),
    ], NOW))

    ordered = sort_alerts(flat_alerts + house_alerts)

    assert [(a.property_id, a.requirement_id) for a in ordered] == [
        ("house", "epc_greece"),       # high, overdue
        ("flat", "tax_clearance"),     # high, 10 days
        ("house", "tax_clearance"),    # medium, 45 days
        ("flat", "epc_greece"),        # medium, 80 days
    ]


def test_expired_today_message(registry):
    alerts = {a.requirement_id: a for a in _alerts(registry, [make_cert("p1", "tax_clearance", NOW)])}
    expired = alerts["tax_clearance"]
    assert expired.type == "compliance_expired"
    assert "expired today" in expired.message
    assert "0 days ago" not in expired.message
