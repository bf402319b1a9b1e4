# tariff_engine/service/service.py
"""
End-to-end rating service for the CTN tariff engine.

Single source of truth:
- raw questionnaire dict -> runtime questionnaire builder -> QuestionnaireInput
- QuestionnaireInput -> calculate / simulate_scenarios -> response dict

Coercion warnings (dropped or unreadable answers) are returned next to the
result; they are distinct from the result's own business-rule messages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from tariff_engine.intake.runtime import build_questionnaire_from_raw
from tariff_engine.pricing.config import TariffConfig
from tariff_engine.pricing.quote import calculate
from tariff_engine.pricing.scenarios import simulate_scenarios
from tariff_engine.pricing.tables import SectorCode, sector_info
from tariff_engine.service.schemas import QuoteResponse, ScenarioResponse
from tariff_engine.utils.config import get_service_config


def _include_breakdown(include_breakdown: Optional[bool]) -> bool:
    if include_breakdown is None:
        return get_service_config().include_breakdown
    return include_breakdown


def quote_from_questionnaire(
    raw: Dict[str, Any],
    *,
    pricing_cfg: Optional[TariffConfig] = None,
    include_breakdown: Optional[bool] = None,
) -> Tuple[QuoteResponse, List[str]]:
    """
    Rate a raw questionnaire dict.
    Returns (QuoteResponse, warnings).
    """
    cfg = pricing_cfg or TariffConfig()
    built = build_questionnaire_from_raw(raw)
    result = calculate(built.questionnaire, cfg)

    resp = QuoteResponse(
        questionnaire=built.questionnaire.to_dict(),
        currency=cfg.currency,
        result=result.to_dict(include_breakdown=_include_breakdown(include_breakdown)),
    )
    return resp, built.warnings


def quote_from_questionnaire_dict(
    raw: Dict[str, Any],
    *,
    pricing_cfg: Optional[TariffConfig] = None,
    include_breakdown: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Convenience: returns a JSON-ready dict and includes warnings.
    """
    resp, warnings = quote_from_questionnaire(raw, pricing_cfg=pricing_cfg, include_breakdown=include_breakdown)
    out = resp.to_dict()
    out["warnings"] = warnings
    return out


def scenarios_from_questionnaire_dict(
    raw: Dict[str, Any],
    *,
    pricing_cfg: Optional[TariffConfig] = None,
    include_breakdown: Optional[bool] = None,
) -> Dict[str, Any]:
    cfg = pricing_cfg or TariffConfig()
    built = build_questionnaire_from_raw(raw)
    scenarios = simulate_scenarios(built.questionnaire, cfg)

    resp = ScenarioResponse(
        questionnaire=built.questionnaire.to_dict(),
        currency=cfg.currency,
        scenarios=scenarios.to_dict(include_breakdown=_include_breakdown(include_breakdown)),
    )
    out = resp.to_dict()
    out["warnings"] = built.warnings
    return out


def sector_lookup(code: str) -> Optional[Dict[str, Any]]:
    info = sector_info(code)
    return info.to_dict() if info is not None else None


def list_sectors() -> List[Dict[str, Any]]:
    return [sector_info(code).to_dict() for code in SectorCode]  # type: ignore[union-attr]
