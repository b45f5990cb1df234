"""Jurisdiction requirement catalog and requirement resolver.

The catalog is versioned configuration: one ``JurisdictionConfig`` per
jurisdiction code, each carrying an ordered list of statutory certificate
requirements. It is built once per process and never mutated at runtime;
changing the rules means deploying a new catalog version.

Resolution never fails. An unknown jurisdiction code resolves against the
registry's default jurisdiction, and the result says so explicitly
(``is_fallback`` plus an ``InvalidJurisdiction`` warning) so a caller can
never mistake a fallback for "this jurisdiction has no special rules".
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

CATALOG_VERSION = "2024.1"
DEFAULT_JURISDICTION = "UK"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Frequency(str, Enum):
    ANNUAL = "annual"
    BIENNIAL = "biennial"
    FIVE_YEARS = "5_years"
    TEN_YEARS = "10_years"
    ONCE = "once"
    AS_NEEDED = "as_needed"


class Classification(str, Enum):
    STANDARD = "standard"
    MULTI_OCCUPANCY = "multi_occupancy"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            if normalized in ("hmo", "multi_occupancy"):
                return cls.MULTI_OCCUPANCY
            if normalized == "standard":
                return cls.STANDARD
        return None


_RENEWAL_MONTHS: dict[Frequency, int | None] = {
    Frequency.ANNUAL: 12,
    Frequency.BIENNIAL: 24,
    Frequency.FIVE_YEARS: 60,
    Frequency.TEN_YEARS: 120,
    Frequency.ONCE: None,
    Frequency.AS_NEEDED: None,
}

_FREQUENCY_LABELS: dict[Frequency, str] = {
    Frequency.ANNUAL: "Every year",
    Frequency.BIENNIAL: "Every 2 years",
    Frequency.FIVE_YEARS: "Every 5 years",
    Frequency.TEN_YEARS: "Every 10 years",
    Frequency.ONCE: "Once per tenancy",
    Frequency.AS_NEEDED: "As needed",
}

# Certificates for these frequencies never expire once they exist.
NON_EXPIRING_FREQUENCIES = frozenset({Frequency.ONCE})


def renewal_months(frequency: Frequency | str) -> int | None:
    """Months between renewals, or None when the requirement has no cadence."""
    return _RENEWAL_MONTHS[Frequency(frequency)]


def frequency_label(frequency: Frequency | str) -> str:
    try:
        return _FREQUENCY_LABELS[Frequency(frequency)]
    except ValueError:
        return str(frequency)


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------

class ComplianceRequirement(BaseModel):
    id: str
    name: str
    description: str = ""
    frequency: Frequency
    mandatory: bool = True
    applies_to_standard: bool = True
    applies_to_hmo: bool = True

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _applies_somewhere(self) -> "ComplianceRequirement":
        if not (self.applies_to_standard or self.applies_to_hmo):
            raise ValueError(
                f"Requirement '{self.id}' must apply to standard or multi-occupancy properties"
            )
        return self

    def applies_to(self, classification: Classification | str) -> bool:
        if Classification(classification) is Classification.MULTI_OCCUPANCY:
            return self.applies_to_hmo
        return self.applies_to_standard


class CurrencyConvention(BaseModel):
    symbol: str
    code: str
    position: str = Field(default="before", pattern="^(before|after)$")

    model_config = {"frozen": True}


class JurisdictionConfig(BaseModel):
    code: str
    name: str
    currency: CurrencyConvention
    date_format: str = "DD/MM/YYYY"
    deposit_rule: str = ""
    deposit_max_weeks: int | None = None
    version: str = CATALOG_VERSION
    requirements: tuple[ComplianceRequirement, ...] = ()

    model_config = {"frozen": True}

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Jurisdiction code must not be blank")
        return code

    @model_validator(mode="after")
    def _unique_requirement_ids(self) -> "JurisdictionConfig":
        seen: set[str] = set()
        for req in self.requirements:
            if req.id in seen:
                raise ValueError(f"Duplicate requirement id '{req.id}' in {self.code}")
            seen.add(req.id)
        return self

    def requirements_for(
        self, classification: Classification | str
    ) -> tuple[ComplianceRequirement, ...]:
        """Applicable requirements, in declared catalog order."""
        cls_ = Classification(classification)
        return tuple(r for r in self.requirements if r.applies_to(cls_))


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------

class InvalidJurisdiction(BaseModel):
    """Warning attached to a resolution that fell back to the default jurisdiction."""

    requested_code: str | None
    fallback_code: str
    message: str

    model_config = {"frozen": True}


class RequirementResolution(BaseModel):
    requested_code: str | None
    jurisdiction_code: str
    classification: Classification
    requirements: tuple[ComplianceRequirement, ...]
    warning: InvalidJurisdiction | None = None
    catalog_version: str = CATALOG_VERSION

    model_config = {"frozen": True}

    @property
    def is_fallback(self) -> bool:
        return self.warning is not None

    def find(self, requirement_id: str) -> ComplianceRequirement | None:
        for req in self.requirements:
            if req.id == requirement_id:
                return req
        return None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


class JurisdictionRegistry:
    """Immutable lookup of jurisdiction configs keyed by code."""

    def __init__(
        self,
        configs: Iterable[JurisdictionConfig],
        default_code: str = DEFAULT_JURISDICTION,
    ):
        by_code: dict[str, JurisdictionConfig] = {}
        for config in configs:
            if config.code in by_code:
                raise ValueError(f"Duplicate jurisdiction code '{config.code}'")
            by_code[config.code] = config
        default_code = normalize_code(default_code)
        if default_code not in by_code:
            raise ValueError(f"Default jurisdiction '{default_code}' is not in the catalog")
        self._configs = by_code
        self._default_code = default_code

    @classmethod
    def from_json(
        cls, path: str | Path, default_code: str = DEFAULT_JURISDICTION
    ) -> "JurisdictionRegistry":
        """Load a catalog file: ``{"jurisdictions": [JurisdictionConfig, ...]}``."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        items = raw["jurisdictions"] if isinstance(raw, dict) else raw
        configs = [JurisdictionConfig.model_validate(item) for item in items]
        logger.info("Loaded %d jurisdiction(s) from %s", len(configs), path)
        return cls(configs, default_code=default_code)

    @property
    def default_code(self) -> str:
        return self._default_code

    def codes(self) -> list[str]:
        return list(self._configs)

    def configs(self) -> list[JurisdictionConfig]:
        return list(self._configs.values())

    def get(self, code: str | None) -> JurisdictionConfig | None:
        return self._configs.get(normalize_code(code))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._configs

    def resolve(
        self, code: str | None
    ) -> tuple[JurisdictionConfig, InvalidJurisdiction | None]:
        """Return ``(config, warning)``; *warning* is set only for a fallback."""
        config = self.get(code)
        if config is not None:
            return config, None
        warning = InvalidJurisdiction(
            requested_code=code,
            fallback_code=self._default_code,
            message=(
                f"Unknown jurisdiction '{code}'; using requirements for "
                f"'{self._default_code}' instead."
            ),
        )
        logger.warning(warning.message)
        return self._configs[self._default_code], warning

    def get_requirements(
        self, code: str | None, classification: Classification | str
    ) -> RequirementResolution:
        config, warning = self.resolve(code)
        cls_ = Classification(classification)
        return RequirementResolution(
            requested_code=code,
            jurisdiction_code=config.code,
            classification=cls_,
            requirements=config.requirements_for(cls_),
            warning=warning,
            catalog_version=config.version,
        )

    def requirement(
        self, code: str | None, classification: Classification | str, requirement_id: str
    ) -> ComplianceRequirement | None:
        """One applicable requirement by id, after fallback; None when it does not apply."""
        return self.get_requirements(code, classification).find(requirement_id)


# ---------------------------------------------------------------------------
# Built-in catalog
# ---------------------------------------------------------------------------

def _req(
    id: str,
    name: str,
    description: str,
    frequency: Frequency,
    *,
    mandatory: bool = True,
    standard: bool = True,
    hmo: bool = True,
) -> ComplianceRequirement:
    return ComplianceRequirement(
        id=id,
        name=name,
        description=description,
        frequency=frequency,
        mandatory=mandatory,
        applies_to_standard=standard,
        applies_to_hmo=hmo,
    )


UK = JurisdictionConfig(
    code="UK",
    name="United Kingdom",
    currency=CurrencyConvention(symbol="£", code="GBP", position="before"),
    date_format="DD/MM/YYYY",
    deposit_rule="Maximum 5 weeks rent (Tenant Fees Act 2019)",
    deposit_max_weeks=5,
    requirements=(
        _req("gas_safety", "Gas Safety Certificate",
             "Annual gas safety check by Gas Safe registered engineer", Frequency.ANNUAL),
        _req("eicr", "EICR (Electrical Installation Condition Report)",
             "Electrical safety inspection", Frequency.FIVE_YEARS),
        _req("epc", "EPC (Energy Performance Certificate)",
             "Energy efficiency rating, minimum E required", Frequency.TEN_YEARS),
        _req("deposit_protection", "Deposit Protection",
             "Protect tenant deposit in government-approved scheme within 30 days",
             Frequency.ONCE),
        _req("right_to_rent", "Right to Rent Check",
             "Verify tenant has legal right to rent in the UK", Frequency.ONCE),
        _req("legionella", "Legionella Risk Assessment",
             "Water safety risk assessment", Frequency.AS_NEEDED),
        _req("smoke_alarms", "Smoke Alarm Certificate",
             "Working smoke alarms on every floor", Frequency.ANNUAL),
        _req("co_alarms", "Carbon Monoxide Alarm Certificate",
             "CO alarms in rooms with solid fuel appliances", Frequency.ANNUAL),
        _req("fire_safety_hmo", "Fire Safety Certificate (HMO)",
             "Enhanced fire safety measures for HMOs", Frequency.ANNUAL, standard=False),
        _req("hmo_license", "HMO License",
             "Mandatory license for Houses in Multiple Occupation", Frequency.FIVE_YEARS,
             standard=False),
    ),
)

GR = JurisdictionConfig(
    code="GR",
    name="Greece",
    currency=CurrencyConvention(symbol="€", code="EUR", position="after"),
    date_format="DD/MM/YYYY",
    deposit_rule="Typically 1-2 months rent",
    requirements=(
        _req("epc_greece", "Energy Performance Certificate",
             "Energy efficiency certificate required for rental properties",
             Frequency.TEN_YEARS),
        _req("building_permit", "Building Permit",
             "Valid building permit documentation", Frequency.AS_NEEDED),
        _req("tax_clearance", "Tax Clearance Certificate",
             "Property tax clearance", Frequency.ANNUAL),
    ),
)

US = JurisdictionConfig(
    code="US",
    name="United States",
    currency=CurrencyConvention(symbol="$", code="USD", position="before"),
    date_format="MM/DD/YYYY",
    deposit_rule="Varies by state, typically 1-2 months rent",
    requirements=(
        _req("lead_paint", "Lead Paint Disclosure",
             "Required for properties built before 1978", Frequency.ONCE),
        _req("smoke_detectors_us", "Smoke Detector Compliance",
             "Working smoke detectors as per local code", Frequency.ANNUAL),
        _req("local_permits", "Local Permits",
             "Rental permits as required by municipality", Frequency.ANNUAL,
             mandatory=False),
    ),
)

SA = JurisdictionConfig(
    code="SA",
    name="Saudi Arabia",
    currency=CurrencyConvention(symbol="SAR", code="SAR", position="after"),
    date_format="DD/MM/YYYY",
    deposit_rule="Agreed in the Ejar contract",
    requirements=(
        _req("ejar_registration", "Ejar Contract Registration",
             "Residential rental contracts must be registered in Ejar", Frequency.ANNUAL),
        _req("title_deed", "Title Deed (Sukuk)",
             "Valid title deed required for property registration", Frequency.ONCE),
        _req("building_permit_sa", "Building Permit",
             "Building permit valid and matching the property", Frequency.AS_NEEDED),
        _req("national_address", "National Address Registration",
             "National (Watani) address registration", Frequency.ONCE),
        _req("civil_defense_permit", "Civil Defense Permit",
             "Required for some property types", Frequency.ANNUAL, mandatory=False),
    ),
)

BUILTIN_JURISDICTIONS: tuple[JurisdictionConfig, ...] = (UK, GR, US, SA)


def builtin_registry(default_code: str = DEFAULT_JURISDICTION) -> JurisdictionRegistry:
    return JurisdictionRegistry(BUILTIN_JURISDICTIONS, default_code=default_code)


@lru_cache(maxsize=1)
def default_registry() -> JurisdictionRegistry:
    """Process-wide registry: the configured catalog file, or the built-in catalog."""
    from propcomply.core.config import settings

    if settings.catalog_path:
        return JurisdictionRegistry.from_json(
            settings.catalog_path, default_code=settings.default_jurisdiction
        )
    return builtin_registry(settings.default_jurisdiction)


def get_requirements(
    jurisdiction_code: str | None,
    classification: Classification | str,
    registry: JurisdictionRegistry | None = None,
) -> RequirementResolution:
    """Applicable requirements for a jurisdiction + classification, in catalog order."""
    return (registry or default_registry()).get_requirements(jurisdiction_code, classification)
