# tariff_engine/pricing/validation.py
"""
Business rule validation for a questionnaire.

Two passes, always in this order:
- structural checks (blocking): the questionnaire cannot be rated
- business-rule warnings (advisory): only run once the structure is valid

Severity is carried on each message; callers never need to inspect the text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from tariff_engine.pricing.config import TariffConfig
from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.tables import (
    COVERAGE_COEFFICIENTS,
    GUARANTEE_COEFFICIENTS,
    BASE_RATES,
    CoverageType,
    GuaranteeTier,
    SectorCode,
)


class Severity(str, Enum):
    BLOCKING = "blocking"
    ADVISORY = "advisory"


@dataclass(frozen=True)
class RuleMessage:
    code: str
    severity: Severity
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "severity": self.severity.value, "message": self.text}


def _blocking(code: str, text: str) -> RuleMessage:
    return RuleMessage(code=code, severity=Severity.BLOCKING, text=text)


def _advisory(code: str, text: str) -> RuleMessage:
    return RuleMessage(code=code, severity=Severity.ADVISORY, text=text)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_structure(q: QuestionnaireInput, cfg: Optional[TariffConfig] = None) -> List[RuleMessage]:
    """
    Pass 1. Returns every blocking failure found (empty list = ratable).
    """
    cfg = cfg or TariffConfig()
    errors: List[RuleMessage] = []

    count = q.employee_count
    if count is not None and not _is_count(count):
        errors.append(_blocking("EMPLOYEE_COUNT_INVALID", "employee count must be a positive whole number"))
    elif count is None or count < 1:
        errors.append(_blocking("EMPLOYEE_COUNT_INVALID", "employee count must be > 0"))
    elif count > cfg.max_employees:
        errors.append(
            _blocking(
                "EMPLOYEE_COUNT_ABOVE_LIMIT",
                f"contact us directly for headcounts above {cfg.max_employees}",
            )
        )

    if not isinstance(q.sector_code, SectorCode) or q.sector_code not in BASE_RATES:
        errors.append(_blocking("SECTOR_CODE_INVALID", "invalid or missing sector code"))

    if not isinstance(q.guarantee_amount, GuaranteeTier) or q.guarantee_amount not in GUARANTEE_COEFFICIENTS:
        errors.append(_blocking("GUARANTEE_AMOUNT_INVALID", "invalid or missing guarantee amount"))

    if not isinstance(q.coverage_type, CoverageType) or q.coverage_type not in COVERAGE_COEFFICIENTS:
        errors.append(_blocking("COVERAGE_TYPE_INVALID", "invalid or missing coverage type"))

    return errors


def business_warnings(q: QuestionnaireInput) -> List[RuleMessage]:
    """
    Pass 2. Assumes validate_structure(q) returned no errors.
    """
    warnings: List[RuleMessage] = []
    guarantee = int(q.guarantee_amount)  # type: ignore[arg-type]

    if q.employee_count <= 10 and guarantee > 100000:  # type: ignore[operator]
        warnings.append(
            _advisory(
                "GUARANTEE_DISPROPORTIONATE",
                f"guarantee amount appears disproportionate for a headcount of {q.employee_count} employees",
            )
        )

    if q.sector_code is SectorCode.B and guarantee < 30000:
        warnings.append(
            _advisory(
                "CONSTRUCTION_GUARANTEE_LOW",
                "for the construction sector (BTP) we recommend a guarantee of at least 30000",
            )
        )

    if q.had_severe_prior_disability and q.coverage_type is CoverageType.PARTIAL:
        warnings.append(
            _advisory(
                "PARTIAL_COVERAGE_WITH_HISTORY",
                "with a prior disability rating above 10% we recommend full (IP3 & IP4) coverage",
            )
        )

    return warnings
