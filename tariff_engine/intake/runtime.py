# tariff_engine/intake/runtime.py
"""
Runtime questionnaire builder for API and batch rating.

Goal:
- Convert a raw questionnaire record (dict from JSON, a form post or a CSV row)
  into a typed QuestionnaireInput.

Accepted shapes:
- English keys: employee_count, sector_code, guarantee_amount, coverage_type,
  had_severe_prior_disability
- Quote form keys: employees_count, ctn_code, guarantee_amount, ipp_type,
  had_ip_gt_10_last_4y

Coercion is permissive but never invents a value:
- numeric strings / integral floats -> int
- NaN, empty strings and the swagger placeholder "string" -> missing
- anything unrecognised -> None (rejected later by structural validation),
  with a warning explaining what was dropped
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.tables import CoverageType, GuaranteeTier, parse_sector_code

# canonical field -> accepted raw keys, in lookup order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "employee_count": ("employee_count", "employees_count"),
    "sector_code": ("sector_code", "ctn_code"),
    "guarantee_amount": ("guarantee_amount",),
    "coverage_type": ("coverage_type", "ipp_type"),
    "had_severe_prior_disability": ("had_severe_prior_disability", "had_ip_gt_10_last_4y"),
}


@dataclass(frozen=True)
class QuestionnaireBuildResult:
    questionnaire: QuestionnaireInput
    warnings: List[str]


_YN_MAP = {
    "yes": True,
    "no": False,
    "y": True,
    "n": False,
    "oui": True,
    "non": False,
    "true": True,
    "false": False,
    "1": True,
    "0": False,
    True: True,
    False: False,
    1: True,
    0: False,
}

_COVERAGE_MAP = {
    "full": CoverageType.FULL,
    "ip3 & ip4": CoverageType.FULL,
    "ip3&ip4": CoverageType.FULL,
    "partial": CoverageType.PARTIAL,
    "ip4_seul": CoverageType.PARTIAL,
    "ip4 seul": CoverageType.PARTIAL,
    "ip4": CoverageType.PARTIAL,
}


def _is_missing(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, (float, np.floating)) and np.isnan(val):
        return True
    if isinstance(val, str):
        text = val.strip()
        return text == "" or text.lower() == "string"  # swagger placeholder
    return False


def _pick(raw: Dict[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if key in raw:
            return raw.get(key)
    return None


def _to_int(val: Any) -> Optional[int]:
    """
    Whole numbers only. Booleans, fractional values and non-numeric text -> None.
    """
    if isinstance(val, (bool, np.bool_)):
        return None
    if isinstance(val, (int, np.integer)):
        return int(val)
    if isinstance(val, (float, np.floating)):
        return int(val) if float(val).is_integer() else None
    if isinstance(val, str):
        text = val.strip().replace(" ", "").replace("\u00a0", "")
        try:
            return int(text)
        except ValueError:
            pass
        try:
            f = float(text)
        except ValueError:
            return None
        return int(f) if f.is_integer() else None
    return None


def _to_flag(val: Any) -> Optional[bool]:
    if isinstance(val, np.bool_):
        return bool(val)
    if isinstance(val, str):
        return _YN_MAP.get(val.strip().lower())
    if isinstance(val, (float, np.floating)) and float(val).is_integer():
        val = int(val)
    try:
        return _YN_MAP.get(val)
    except TypeError:  # unhashable
        return None


def build_questionnaire_from_raw(raw: Dict[str, Any]) -> QuestionnaireBuildResult:
    """
    Build a QuestionnaireInput from a raw record.

    Missing answers stay None silently; present-but-unusable answers are
    dropped to None and reported in warnings.
    """
    warnings: List[str] = []

    # Employee count
    employee_count: Optional[int] = None
    val = _pick(raw, "employee_count")
    if not _is_missing(val):
        employee_count = _to_int(val)
        if employee_count is None:
            warnings.append(f"Could not read employee_count='{val}' as a whole number; treated as missing.")

    # Sector
    sector_code = None
    val = _pick(raw, "sector_code")
    if not _is_missing(val):
        sector_code = parse_sector_code(val)
        if sector_code is None:
            warnings.append(f"Unknown sector_code='{val}'.")

    # Guarantee tier
    guarantee_amount: Optional[GuaranteeTier] = None
    val = _pick(raw, "guarantee_amount")
    if not _is_missing(val):
        amount = _to_int(val)
        if amount is not None:
            try:
                guarantee_amount = GuaranteeTier(amount)
            except ValueError:
                guarantee_amount = None
        if guarantee_amount is None:
            warnings.append(f"guarantee_amount='{val}' is not one of the offered guarantee tiers.")

    # Coverage
    coverage_type: Optional[CoverageType] = None
    val = _pick(raw, "coverage_type")
    if not _is_missing(val):
        if isinstance(val, CoverageType):
            coverage_type = val
        elif isinstance(val, str):
            coverage_type = _COVERAGE_MAP.get(val.strip().lower())
        if coverage_type is None:
            warnings.append(f"Unknown coverage_type='{val}'.")

    # Prior disability flag (missing -> no history declared)
    had_history = False
    val = _pick(raw, "had_severe_prior_disability")
    if not _is_missing(val):
        mapped = _to_flag(val)
        if mapped is None:
            warnings.append(f"Could not map had_severe_prior_disability='{val}' to yes/no; set to False.")
        else:
            had_history = mapped

    q = QuestionnaireInput(
        employee_count=employee_count,
        sector_code=sector_code,
        guarantee_amount=guarantee_amount,
        coverage_type=coverage_type,
        had_severe_prior_disability=had_history,
    )
    return QuestionnaireBuildResult(questionnaire=q, warnings=warnings)
