# tariff_engine/pricing/scenarios.py
"""
Side-by-side comparison of a questionnaire against three variants:
- without prior-disability history
- next guarantee tier up (clamped at the top tier)
- next guarantee tier down (clamped at the bottom tier)

Each variant goes through calculate(); nothing is cached or combined.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from tariff_engine.pricing.config import TariffConfig
from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.quote import CalculationResult, calculate
from tariff_engine.pricing.tables import GuaranteeTier, next_tier


@dataclass(frozen=True)
class ScenarioSet:
    current: CalculationResult
    without_history: CalculationResult
    higher_guarantee: CalculationResult
    lower_guarantee: CalculationResult

    def to_dict(self, include_breakdown: bool = True) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(include_breakdown),
            "without_history": self.without_history.to_dict(include_breakdown),
            "higher_guarantee": self.higher_guarantee.to_dict(include_breakdown),
            "lower_guarantee": self.lower_guarantee.to_dict(include_breakdown),
        }


def _shift_guarantee(q: QuestionnaireInput, step: int) -> QuestionnaireInput:
    # An invalid or missing tier has no neighbours; keep it so the variant fails like the base
    if not isinstance(q.guarantee_amount, GuaranteeTier):
        return q
    return replace(q, guarantee_amount=next_tier(q.guarantee_amount, step))


def simulate_scenarios(questionnaire: QuestionnaireInput, cfg: Optional[TariffConfig] = None) -> ScenarioSet:
    if not isinstance(questionnaire, QuestionnaireInput):
        raise TypeError(f"simulate_scenarios() expects a QuestionnaireInput, got {type(questionnaire).__name__}")

    return ScenarioSet(
        current=calculate(questionnaire, cfg),
        without_history=calculate(replace(questionnaire, had_severe_prior_disability=False), cfg),
        higher_guarantee=calculate(_shift_guarantee(questionnaire, +1), cfg),
        lower_guarantee=calculate(_shift_guarantee(questionnaire, -1), cfg),
    )
