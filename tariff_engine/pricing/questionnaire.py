# tariff_engine/pricing/questionnaire.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from tariff_engine.pricing.tables import CoverageType, GuaranteeTier, SectorCode, parse_sector_code


@dataclass(frozen=True)
class QuestionnaireInput:
    """
    One questionnaire, as answered by the prospect.

    None means the answer is missing or was not a recognised value; the
    validator rejects it rather than substituting a default.
    """

    employee_count: Optional[int]
    sector_code: Optional[SectorCode]
    guarantee_amount: Optional[GuaranteeTier]
    coverage_type: Optional[CoverageType]
    had_severe_prior_disability: bool = False

    def __post_init__(self) -> None:
        # Plain values that name a table key are promoted to their enum; others are left for the validator
        sector = parse_sector_code(self.sector_code)
        if sector is not None:
            object.__setattr__(self, "sector_code", sector)

        for name, enum_cls in (
            ("guarantee_amount", GuaranteeTier),
            ("coverage_type", CoverageType),
        ):
            value = getattr(self, name)
            if value is None or isinstance(value, (enum_cls, bool)):
                continue
            try:
                object.__setattr__(self, name, enum_cls(value))
            except ValueError:
                pass

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_count": self.employee_count,
            "sector_code": self.sector_code.value if isinstance(self.sector_code, SectorCode) else self.sector_code,
            "guarantee_amount": (
                int(self.guarantee_amount) if isinstance(self.guarantee_amount, GuaranteeTier) else self.guarantee_amount
            ),
            "coverage_type": (
                self.coverage_type.value if isinstance(self.coverage_type, CoverageType) else self.coverage_type
            ),
            "had_severe_prior_disability": bool(self.had_severe_prior_disability),
        }
