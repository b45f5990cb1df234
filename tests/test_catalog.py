import json

import pytest
from pydantic import ValidationError

from propcomply.compliance import (
    Classification,
    ComplianceRequirement,
    Frequency,
    JurisdictionConfig,
    JurisdictionRegistry,
    get_requirements,
)
from propcomply.compliance.catalog import (
    BUILTIN_JURISDICTIONS,
    CurrencyConvention,
    frequency_label,
    renewal_months,
)


def _ids(resolution):
    return [r.id for r in resolution.requirements]


def test_builtin_catalog_has_four_jurisdictions(registry):
    assert registry.codes() == ["UK", "GR", "US", "SA"]
    assert registry.default_code == "UK"


def test_hmo_requirements_only_for_multi_occupancy(registry):
    hmo = _ids(registry.get_requirements("UK", Classification.MULTI_OCCUPANCY))
    standard = _ids(registry.get_requirements("UK", Classification.STANDARD))

    assert "fire_safety_hmo" in hmo
    assert "hmo_license" in hmo
    assert "fire_safety_hmo" not in standard
    assert "hmo_license" not in standard
    # everything a standard property needs, an HMO needs too
    assert set(standard) < set(hmo)


def test_requirements_keep_catalog_order(registry):
    assert _ids(registry.get_requirements("UK", "standard")) == [
        "gas_safety",
        "eicr",
        "epc",
        "deposit_protection",
        "right_to_rent",
        "legionella",
        "smoke_alarms",
        "co_alarms",
    ]


def test_unknown_jurisdiction_falls_back_with_warning(registry):
    resolution = registry.get_requirements("ZZ", "standard")
    uk = registry.get_requirements("UK", "standard")

    assert resolution.is_fallback
    assert resolution.jurisdiction_code == "UK"
    assert resolution.requested_code == "ZZ"
    assert resolution.warning.requested_code == "ZZ"
    assert resolution.warning.fallback_code == "UK"
    assert "ZZ" in resolution.warning.message
    assert resolution.requirements == uk.requirements
    assert not uk.is_fallback
    assert uk.warning is None


@pytest.mark.parametrize("code", [None, "", "   "])
def test_blank_jurisdiction_falls_back(registry, code):
    resolution = registry.get_requirements(code, "standard")
    assert resolution.is_fallback
    assert resolution.jurisdiction_code == "UK"


def test_lookup_is_case_insensitive(registry):
    assert "gr" in registry
    assert not registry.get_requirements(" gr ", "standard").is_fallback
    assert _ids(registry.get_requirements("gr", "standard")) == [
        "epc_greece",
        "building_permit",
        "tax_clearance",
    ]


def test_resolution_is_idempotent(registry):
    first = registry.get_requirements("SA", Classification.MULTI_OCCUPANCY)
    second = registry.get_requirements("SA", Classification.MULTI_OCCUPANCY)
    assert first == second


def test_hmo_alias_is_accepted(registry):
    assert Classification("hmo") is Classification.MULTI_OCCUPANCY
    assert "hmo_license" in _ids(registry.get_requirements("UK", "HMO"))


def test_optional_requirements_are_flagged(registry):
    us = registry.get_requirements("US", "standard")
    assert us.find("local_permits").mandatory is False
    assert us.find("lead_paint").mandatory is True
    assert us.find("nonexistent") is None


def test_module_level_get_requirements_uses_given_registry(registry):
    resolution = get_requirements("US", "standard", registry=registry)
    assert resolution.jurisdiction_code == "US"


def test_frequency_helpers():
    assert renewal_months(Frequency.ANNUAL) == 12
    assert renewal_months("10_years") == 120
    assert renewal_months(Frequency.ONCE) is None
    assert frequency_label(Frequency.BIENNIAL) == "Every 2 years"
    assert frequency_label("weekly") == "weekly"


def test_requirement_must_apply_somewhere():
    with pytest.raises(ValidationError):
        ComplianceRequirement(
            id="nowhere",
            name="Nowhere",
            frequency=Frequency.ANNUAL,
            applies_to_standard=False,
            applies_to_hmo=False,
        )


def test_duplicate_requirement_ids_rejected():
    req = ComplianceRequirement(id="epc", name="EPC", frequency=Frequency.TEN_YEARS)
    with pytest.raises(ValidationError):
        JurisdictionConfig(
            code="XX",
            name="Duplicated",
            currency=CurrencyConvention(symbol="€", code="EUR"),
            requirements=(req, req),
        )


def test_registry_rejects_duplicate_codes_and_unknown_default():
    with pytest.raises(ValueError):
        JurisdictionRegistry([BUILTIN_JURISDICTIONS[0], BUILTIN_JURISDICTIONS[0]])
    with pytest.raises(ValueError):
        JurisdictionRegistry(BUILTIN_JURISDICTIONS, default_code="ZZ")


def test_registry_from_json(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "jurisdictions": [
                    {
                        "code": "ie",
                        "name": "Ireland",
                        "currency": {"symbol": "€", "code": "EUR"},
                        "version": "2025.1",
                        "requirements": [
                            {"id": "ber", "name": "BER Certificate", "frequency": "10_years"},
                            {
                                "id": "rtb_registration",
                                "name": "RTB Registration",
                                "frequency": "annual",
                            },
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    registry = JurisdictionRegistry.from_json(path, default_code="IE")

    assert registry.codes() == ["IE"]
    resolution = registry.get_requirements("UK", "standard")
    assert resolution.is_fallback
    assert resolution.catalog_version == "2025.1"
    assert _ids(resolution) == ["ber", "rtb_registration"]


def test_single_requirement_lookup(registry):
    assert registry.requirement("UK", "multi_occupancy", "hmo_license").frequency is Frequency.FIVE_YEARS
    assert registry.requirement("UK", "standard", "hmo_license") is None
    assert registry.requirement("ZZ", "standard", "gas_safety").id == "gas_safety"
