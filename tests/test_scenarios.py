from decimal import Decimal

import pytest

from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.quote import calculate
from tariff_engine.pricing.scenarios import simulate_scenarios
from tariff_engine.pricing.tables import CoverageType, GuaranteeTier, SectorCode


def _q(tier: GuaranteeTier, history: bool = True) -> QuestionnaireInput:
    return QuestionnaireInput(
        employee_count=300,
        sector_code=SectorCode.A,
        guarantee_amount=tier,
        coverage_type=CoverageType.FULL,
        had_severe_prior_disability=history,
    )


def test_scenarios_vary_one_answer_each():
    q = _q(GuaranteeTier.T50000)
    s = simulate_scenarios(q)

    assert s.current == calculate(q)
    assert s.without_history.history_coefficient == Decimal("1.0")
    assert s.current.history_coefficient == Decimal("1.3")
    assert s.higher_guarantee.guarantee_coefficient == Decimal("1.3")
    assert s.lower_guarantee.guarantee_coefficient == Decimal("1.1")
    assert s.lower_guarantee.premium_excluding_tax < s.current.premium_excluding_tax
    assert s.current.premium_excluding_tax < s.higher_guarantee.premium_excluding_tax


def test_top_tier_is_clamped():
    s = simulate_scenarios(_q(GuaranteeTier.T200000))
    assert s.higher_guarantee.premium_excluding_tax == s.current.premium_excluding_tax
    assert s.lower_guarantee.guarantee_coefficient == Decimal("1.5")


def test_bottom_tier_is_clamped():
    s = simulate_scenarios(_q(GuaranteeTier.T5000))
    assert s.lower_guarantee.premium_excluding_tax == s.current.premium_excluding_tax
    assert s.higher_guarantee.guarantee_coefficient == Decimal("0.9")


def test_invalid_base_gives_invalid_variants():
    q = QuestionnaireInput(
        employee_count=20,
        sector_code=SectorCode.C,
        guarantee_amount=None,
        coverage_type=CoverageType.FULL,
    )
    s = simulate_scenarios(q)
    for result in (s.current, s.without_history, s.higher_guarantee, s.lower_guarantee):
        assert not result.valid
        assert result.premium_excluding_tax == 0


def test_to_dict_has_four_labelled_results():
    out = simulate_scenarios(_q(GuaranteeTier.T20000)).to_dict(include_breakdown=False)
    assert set(out) == {"current", "without_history", "higher_guarantee", "lower_guarantee"}
    assert "breakdown" not in out["current"]


def test_plain_values_are_promoted_to_table_keys():
    q = QuestionnaireInput(
        employee_count=50,
        sector_code="D",  # type: ignore[arg-type]
        guarantee_amount=20000,  # type: ignore[arg-type]
        coverage_type="full",  # type: ignore[arg-type]
    )
    assert q.sector_code is SectorCode.D
    assert q.guarantee_amount is GuaranteeTier.T20000
    assert q.coverage_type is CoverageType.FULL
    assert calculate(q).premium_excluding_tax == Decimal("50.00")


def test_simulate_rejects_non_questionnaire():
    with pytest.raises(TypeError):
        simulate_scenarios(None)  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["d", " D ", "D"])
def test_sector_code_is_promoted_like_sector_info(raw):
    q = QuestionnaireInput(
        employee_count=50,
        sector_code=raw,  # type: ignore[arg-type]
        guarantee_amount=GuaranteeTier.T20000,
        coverage_type=CoverageType.FULL,
    )
    assert q.sector_code is SectorCode.D
    assert calculate(q).valid
