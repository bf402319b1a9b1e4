# tariff_engine/api/app.py
"""
FastAPI service for the CTN tariff engine (thin API wrapper).

Endpoints:
- GET  /health
- GET  /sectors            -> all CTN sectors with risk tier and base rate
- GET  /sectors/{code}     -> one sector (404 if unknown)
- POST /quote              -> premium, commission and diagnostics (+ warnings)
- POST /scenarios          -> current / without history / higher / lower guarantee

The API layer stays thin:
- accepts the questionnaire (English or quote-form field names)
- calls tariff_engine.service.service

An invalid questionnaire is not an HTTP error: it comes back with
result.valid = false and blocking messages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from tariff_engine.pricing.tables import GUARANTEE_TIERS
from tariff_engine.service.service import (
    list_sectors,
    quote_from_questionnaire_dict,
    scenarios_from_questionnaire_dict,
    sector_lookup,
)


app = FastAPI(title="CTN Tariff Engine", version="0.1.0")


# -----------------------------
# Schemas
# -----------------------------
class QuestionnaireRequest(BaseModel):
    employee_count: Optional[Union[int, float, str]] = None
    sector_code: Optional[str] = None
    guarantee_amount: Optional[Union[int, float, str]] = None
    coverage_type: Optional[str] = None
    had_severe_prior_disability: Optional[Union[bool, str]] = None

    # Quote form field names
    employees_count: Optional[Union[int, float, str]] = None
    ctn_code: Optional[str] = None
    ipp_type: Optional[str] = None
    had_ip_gt_10_last_4y: Optional[Union[bool, str]] = None

    include_breakdown: Optional[bool] = None


class QuoteResponse(BaseModel):
    questionnaire: Dict[str, Any]
    currency: str
    result: Dict[str, Any]
    warnings: list[str] = Field(default_factory=list)


class ScenarioResponse(BaseModel):
    questionnaire: Dict[str, Any]
    currency: str
    scenarios: Dict[str, Any]
    warnings: list[str] = Field(default_factory=list)


def _raw(req: QuestionnaireRequest) -> Dict[str, Any]:
    return req.model_dump(exclude_none=True, exclude={"include_breakdown"})


# -----------------------------
# Routes
# -----------------------------
@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok", "guarantee_tiers": [int(t) for t in GUARANTEE_TIERS]}


@app.get("/sectors")
def sectors() -> List[Dict[str, Any]]:
    return list_sectors()


@app.get("/sectors/{code}")
def sector(code: str) -> Dict[str, Any]:
    info = sector_lookup(code)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Unknown sector code: {code}")
    return info


@app.post("/quote", response_model=QuoteResponse)
def quote(req: QuestionnaireRequest) -> QuoteResponse:
    out = quote_from_questionnaire_dict(_raw(req), include_breakdown=req.include_breakdown)
    return QuoteResponse(
        questionnaire=dict(out["questionnaire"]),
        currency=str(out["currency"]),
        result=dict(out["result"]),
        warnings=list(out.get("warnings", [])),
    )


@app.post("/scenarios", response_model=ScenarioResponse)
def scenarios(req: QuestionnaireRequest) -> ScenarioResponse:
    out = scenarios_from_questionnaire_dict(_raw(req), include_breakdown=req.include_breakdown)
    return ScenarioResponse(
        questionnaire=dict(out["questionnaire"]),
        currency=str(out["currency"]),
        scenarios=dict(out["scenarios"]),
        warnings=list(out.get("warnings", [])),
    )
