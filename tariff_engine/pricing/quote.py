# tariff_engine/pricing/quote.py
"""
Premium calculation for a CTN questionnaire.

Provides:
- calculate(): questionnaire -> CalculationResult
- commission_rate_for(): tiered broker commission by premium excl. tax
- round2(): half-up rounding to cents

Formula:
  base_amount = employees * base_rate * sector_coefficient * headcount_coefficient
  premium_ht  = round2(base_amount * guarantee * coverage * history), floored at min_premium
  premium_ttc = round2(premium_ht * (1 + vat_rate))
  commission  = round2(premium_ht * rate / 100)

Only the three monetary amounts are rounded; coefficients and base_amount
are carried unrounded.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from tariff_engine.pricing.config import TariffConfig
from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.tables import (
    BASE_RATES,
    COVERAGE_COEFFICIENTS,
    GUARANTEE_COEFFICIENTS,
    SECTOR_RISK_MULTIPLIERS,
    headcount_coefficient,
)
from tariff_engine.pricing.validation import (
    RuleMessage,
    Severity,
    business_warnings,
    validate_structure,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Breakdown:
    base_amount: Decimal
    headcount_coefficient: Decimal
    sector: Decimal
    guarantee: Decimal
    coverage: Decimal
    history: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_amount": float(self.base_amount),
            "headcount_coefficient": float(self.headcount_coefficient),
            "adjustments": {
                "sector": float(self.sector),
                "guarantee": float(self.guarantee),
                "coverage": float(self.coverage),
                "history": float(self.history),
            },
        }


@dataclass(frozen=True)
class CalculationResult:
    valid: bool
    messages: Tuple[RuleMessage, ...]
    premium_excluding_tax: Decimal
    premium_including_tax: Decimal
    commission_rate_percent: int
    commission_amount: Decimal
    base_rate: Decimal
    sector_coefficient: Decimal
    guarantee_coefficient: Decimal
    coverage_coefficient: Decimal
    history_coefficient: Decimal
    breakdown: Optional[Breakdown] = None

    @property
    def message_texts(self) -> List[str]:
        return [m.text for m in self.messages]

    @property
    def blocking(self) -> List[RuleMessage]:
        return [m for m in self.messages if m.severity is Severity.BLOCKING]

    @property
    def advisories(self) -> List[RuleMessage]:
        return [m for m in self.messages if m.severity is Severity.ADVISORY]

    def to_dict(self, include_breakdown: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "valid": self.valid,
            "messages": self.message_texts,
            "diagnostics": [m.to_dict() for m in self.messages],
            "premium_excluding_tax": float(self.premium_excluding_tax),
            "premium_including_tax": float(self.premium_including_tax),
            "commission_rate_percent": self.commission_rate_percent,
            "commission_amount": float(self.commission_amount),
            "base_rate": float(self.base_rate),
            "sector_coefficient": float(self.sector_coefficient),
            "guarantee_coefficient": float(self.guarantee_coefficient),
            "coverage_coefficient": float(self.coverage_coefficient),
            "history_coefficient": float(self.history_coefficient),
        }
        if include_breakdown:
            out["breakdown"] = self.breakdown.to_dict() if self.breakdown is not None else None
        return out


def _invalid_result(messages: List[RuleMessage]) -> CalculationResult:
    return CalculationResult(
        valid=False,
        messages=tuple(messages),
        premium_excluding_tax=ZERO,
        premium_including_tax=ZERO,
        commission_rate_percent=0,
        commission_amount=ZERO,
        base_rate=ZERO,
        sector_coefficient=ZERO,
        guarantee_coefficient=ZERO,
        coverage_coefficient=ZERO,
        history_coefficient=ZERO,
        breakdown=None,
    )


def commission_rate_for(premium_excluding_tax: Decimal, cfg: Optional[TariffConfig] = None) -> int:
    """
    Broker commission rate (%) for a premium excl. tax.

    - < 500  : 25
    - < 2000 : 22
    - < 5000 : 20
    - else   : 18
    """
    cfg = cfg or TariffConfig()
    for upper, rate in cfg.commission_schedule:
        if premium_excluding_tax < upper:
            return rate
    return cfg.commission_rate_above


def calculate(questionnaire: QuestionnaireInput, cfg: Optional[TariffConfig] = None) -> CalculationResult:
    """
    Rate one questionnaire.

    Malformed answers never raise: they come back as valid=False with
    blocking messages. Passing anything other than a QuestionnaireInput
    raises TypeError.
    """
    if not isinstance(questionnaire, QuestionnaireInput):
        raise TypeError(f"calculate() expects a QuestionnaireInput, got {type(questionnaire).__name__}")
    cfg = cfg or TariffConfig()

    errors = validate_structure(questionnaire, cfg)
    if errors:
        return _invalid_result(errors)

    messages = business_warnings(questionnaire)

    sector = questionnaire.sector_code
    employees = questionnaire.employee_count

    base_rate = BASE_RATES[sector]  # type: ignore[index]
    sector_coeff = SECTOR_RISK_MULTIPLIERS[sector]  # type: ignore[index]
    guarantee_coeff = GUARANTEE_COEFFICIENTS[questionnaire.guarantee_amount]  # type: ignore[index]
    coverage_coeff = COVERAGE_COEFFICIENTS[questionnaire.coverage_type]  # type: ignore[index]
    history_coeff = (
        cfg.history_coefficient if questionnaire.had_severe_prior_disability else cfg.no_history_coefficient
    )
    headcount_coeff = headcount_coefficient(employees)  # type: ignore[arg-type]

    base_amount = Decimal(employees) * base_rate * sector_coeff * headcount_coeff
    premium_ht = round2(base_amount * guarantee_coeff * coverage_coeff * history_coeff)
    premium_ht = max(premium_ht, round2(cfg.min_premium))

    premium_ttc = round2(premium_ht * (Decimal("1") + cfg.vat_rate))

    rate = commission_rate_for(premium_ht, cfg)
    commission = round2(premium_ht * Decimal(rate) / Decimal("100"))

    return CalculationResult(
        valid=True,
        messages=tuple(messages),
        premium_excluding_tax=premium_ht,
        premium_including_tax=premium_ttc,
        commission_rate_percent=rate,
        commission_amount=commission,
        base_rate=base_rate,
        sector_coefficient=sector_coeff,
        guarantee_coefficient=guarantee_coeff,
        coverage_coefficient=coverage_coeff,
        history_coefficient=history_coeff,
        breakdown=Breakdown(
            base_amount=base_amount,
            headcount_coefficient=headcount_coeff,
            sector=sector_coeff,
            guarantee=guarantee_coeff,
            coverage=coverage_coeff,
            history=history_coeff,
        ),
    )
