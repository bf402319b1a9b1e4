# tariff_engine/pricing/tables.py
"""
Rating tables for the CTN tariff.

Provides:
- closed enums for sector code, guarantee tier and coverage type
- base rate / risk multiplier per sector
- guarantee and coverage coefficients
- headcount brackets (inclusive bounds, last bracket open-ended)
- descriptive sector metadata (sector_info)

All tables are read-only mappings built once at import.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class SectorCode(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741


class GuaranteeTier(int, Enum):
    T5000 = 5000
    T10000 = 10000
    T20000 = 20000
    T30000 = 30000
    T50000 = 50000
    T75000 = 75000
    T100000 = 100000
    T150000 = 150000
    T200000 = 200000


class CoverageType(str, Enum):
    FULL = "full"  # IP3 & IP4
    PARTIAL = "partial"  # IP4 only


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


# Ascending; enum definition order is the tier order
GUARANTEE_TIERS: Tuple[GuaranteeTier, ...] = tuple(GuaranteeTier)


BASE_RATES: Mapping[SectorCode, Decimal] = MappingProxyType({
    SectorCode.A: Decimal("0.45"),
    SectorCode.B: Decimal("0.85"),
    SectorCode.C: Decimal("0.35"),
    SectorCode.D: Decimal("0.25"),
    SectorCode.E: Decimal("0.55"),
    SectorCode.F: Decimal("0.40"),
    SectorCode.G: Decimal("0.20"),
    SectorCode.H: Decimal("0.30"),
    SectorCode.I: Decimal("0.35"),
})

SECTOR_RISK_MULTIPLIERS: Mapping[SectorCode, Decimal] = MappingProxyType({
    SectorCode.A: Decimal("1.1"),
    SectorCode.B: Decimal("1.4"),
    SectorCode.C: Decimal("1.0"),
    SectorCode.D: Decimal("0.8"),
    SectorCode.E: Decimal("1.2"),
    SectorCode.F: Decimal("1.0"),
    SectorCode.G: Decimal("0.7"),
    SectorCode.H: Decimal("0.9"),
    SectorCode.I: Decimal("0.9"),
})

GUARANTEE_COEFFICIENTS: Mapping[GuaranteeTier, Decimal] = MappingProxyType({
    GuaranteeTier.T5000: Decimal("0.8"),
    GuaranteeTier.T10000: Decimal("0.9"),
    GuaranteeTier.T20000: Decimal("1.0"),  # reference
    GuaranteeTier.T30000: Decimal("1.1"),
    GuaranteeTier.T50000: Decimal("1.2"),
    GuaranteeTier.T75000: Decimal("1.3"),
    GuaranteeTier.T100000: Decimal("1.4"),
    GuaranteeTier.T150000: Decimal("1.5"),
    GuaranteeTier.T200000: Decimal("1.6"),
})

COVERAGE_COEFFICIENTS: Mapping[CoverageType, Decimal] = MappingProxyType({
    CoverageType.FULL: Decimal("1.0"),
    CoverageType.PARTIAL: Decimal("0.85"),
})


@dataclass(frozen=True)
class HeadcountBracket:
    min_employees: int
    max_employees: Optional[int]  # None = open-ended
    coefficient: Decimal

    def contains(self, employee_count: int) -> bool:
        if employee_count < self.min_employees:
            return False
        return self.max_employees is None or employee_count <= self.max_employees


HEADCOUNT_BRACKETS: Tuple[HeadcountBracket, ...] = (
    HeadcountBracket(1, 9, Decimal("1.2")),
    HeadcountBracket(10, 49, Decimal("1.0")),
    HeadcountBracket(50, 199, Decimal("0.9")),
    HeadcountBracket(200, 499, Decimal("0.8")),
    HeadcountBracket(500, None, Decimal("0.7")),
)


_SECTOR_NAMES: Mapping[SectorCode, str] = MappingProxyType({
    SectorCode.A: "Métallurgie",
    SectorCode.B: "Bâtiment et Travaux Publics (BTP)",
    SectorCode.C: "Transports, eau gaz électricité, livre et communication",
    SectorCode.D: "Services, commerces de bouche, industries de l'alimentation",
    SectorCode.E: "Chimie, caoutchouc, plasturgie",
    SectorCode.F: "Bois, ameublement, papier-carton, textile, vêtement",
    SectorCode.G: "Commerces non alimentaires",
    SectorCode.H: "Services aux entreprises",
    SectorCode.I: "Services à la personne et au public",
})

_SECTOR_RISK_TIERS: Mapping[SectorCode, RiskTier] = MappingProxyType({
    SectorCode.A: RiskTier.MEDIUM,
    SectorCode.B: RiskTier.VERY_HIGH,
    SectorCode.C: RiskTier.MEDIUM,
    SectorCode.D: RiskTier.LOW,
    SectorCode.E: RiskTier.HIGH,
    SectorCode.F: RiskTier.MEDIUM,
    SectorCode.G: RiskTier.LOW,
    SectorCode.H: RiskTier.LOW,
    SectorCode.I: RiskTier.LOW,
})


@dataclass(frozen=True)
class SectorInfo:
    code: SectorCode
    name: str
    risk_tier: RiskTier
    base_rate: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "name": self.name,
            "risk_tier": self.risk_tier.value,
            "base_rate": float(self.base_rate),
        }


def headcount_coefficient(employee_count: int) -> Decimal:
    """
    Coefficient of the first bracket containing employee_count.

    Callers must have validated employee_count >= 1; anything else is a
    programming error.
    """
    for bracket in HEADCOUNT_BRACKETS:
        if bracket.contains(employee_count):
            return bracket.coefficient
    raise ValueError(f"No headcount bracket for employee_count={employee_count}")


def parse_sector_code(value: Any) -> Optional[SectorCode]:
    if isinstance(value, SectorCode):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SectorCode(value.strip().upper())
    except ValueError:
        return None


def sector_info(code: Any) -> Optional[SectorInfo]:
    """
    Descriptive lookup for a sector code (enum member or raw string).
    Returns None for unknown codes.
    """
    sector = parse_sector_code(code)
    if sector is None:
        return None
    return SectorInfo(
        code=sector,
        name=_SECTOR_NAMES[sector],
        risk_tier=_SECTOR_RISK_TIERS[sector],
        base_rate=BASE_RATES[sector],
    )


def next_tier(tier: GuaranteeTier, step: int) -> GuaranteeTier:
    """Move `step` positions along GUARANTEE_TIERS, clamped at both ends."""
    idx = GUARANTEE_TIERS.index(tier) + step
    idx = max(0, min(len(GUARANTEE_TIERS) - 1, idx))
    return GUARANTEE_TIERS[idx]


def _check_tables() -> None:
    for name, table, keys in (
        ("BASE_RATES", BASE_RATES, SectorCode),
        ("SECTOR_RISK_MULTIPLIERS", SECTOR_RISK_MULTIPLIERS, SectorCode),
        ("_SECTOR_NAMES", _SECTOR_NAMES, SectorCode),
        ("_SECTOR_RISK_TIERS", _SECTOR_RISK_TIERS, SectorCode),
        ("GUARANTEE_COEFFICIENTS", GUARANTEE_COEFFICIENTS, GuaranteeTier),
        ("COVERAGE_COEFFICIENTS", COVERAGE_COEFFICIENTS, CoverageType),
    ):
        missing = [k for k in keys if k not in table]
        if missing or len(table) != len(keys):
            raise RuntimeError(f"Rating table {name} does not match its key domain (missing={missing})")

    coeffs = [GUARANTEE_COEFFICIENTS[t] for t in GUARANTEE_TIERS]
    if any(b <= a for a, b in zip(coeffs, coeffs[1:])):
        raise RuntimeError("GUARANTEE_COEFFICIENTS must increase strictly with the tier")

    expected_min = 1
    for bracket in HEADCOUNT_BRACKETS:
        if bracket.min_employees != expected_min:
            raise RuntimeError(f"Headcount brackets are not contiguous at {bracket.min_employees}")
        if bracket.max_employees is None:
            break
        expected_min = bracket.max_employees + 1
    if HEADCOUNT_BRACKETS[-1].max_employees is not None:
        raise RuntimeError("Last headcount bracket must be open-ended")


_check_tables()
