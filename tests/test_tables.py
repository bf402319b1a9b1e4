from decimal import Decimal

import pytest

from tariff_engine.pricing.tables import (
    BASE_RATES,
    GUARANTEE_COEFFICIENTS,
    GUARANTEE_TIERS,
    GuaranteeTier,
    RiskTier,
    SectorCode,
    headcount_coefficient,
    next_tier,
    sector_info,
)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        BASE_RATES[SectorCode.A] = Decimal("9")  # type: ignore[index]


def test_guarantee_reference_point_and_order():
    assert GUARANTEE_COEFFICIENTS[GuaranteeTier.T20000] == Decimal("1.0")
    coeffs = [GUARANTEE_COEFFICIENTS[t] for t in GUARANTEE_TIERS]
    assert coeffs == sorted(coeffs)
    assert [int(t) for t in GUARANTEE_TIERS] == [5000, 10000, 20000, 30000, 50000, 75000, 100000, 150000, 200000]


@pytest.mark.parametrize(
    "employees,expected",
    [
        (1, "1.2"),
        (9, "1.2"),
        (10, "1.0"),
        (49, "1.0"),
        (50, "0.9"),
        (199, "0.9"),
        (200, "0.8"),
        (499, "0.8"),
        (500, "0.7"),
        (10000, "0.7"),
    ],
)
def test_headcount_bracket_bounds_are_inclusive(employees, expected):
    assert headcount_coefficient(employees) == Decimal(expected)


def test_headcount_below_first_bracket_is_an_error():
    with pytest.raises(ValueError):
        headcount_coefficient(0)


def test_next_tier_clamps_at_both_ends():
    assert next_tier(GuaranteeTier.T200000, +1) is GuaranteeTier.T200000
    assert next_tier(GuaranteeTier.T5000, -1) is GuaranteeTier.T5000
    assert next_tier(GuaranteeTier.T20000, +1) is GuaranteeTier.T30000
    assert next_tier(GuaranteeTier.T20000, -1) is GuaranteeTier.T10000


def test_sector_info_lookup():
    info = sector_info("b")
    assert info is not None
    assert info.code is SectorCode.B
    assert info.risk_tier is RiskTier.VERY_HIGH
    assert info.base_rate == Decimal("0.85")
    assert "BTP" in info.name

    assert sector_info(SectorCode.G).base_rate == Decimal("0.20")  # type: ignore[union-attr]


@pytest.mark.parametrize("code", ["Z", "", None, 3, "AB"])
def test_sector_info_unknown_is_none(code):
    assert sector_info(code) is None
