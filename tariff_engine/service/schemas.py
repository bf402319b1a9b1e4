from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class QuoteResponse:
    questionnaire: Dict[str, Any]
    currency: str
    result: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"questionnaire": self.questionnaire, "currency": self.currency, "result": self.result}


@dataclass(frozen=True)
class ScenarioResponse:
    questionnaire: Dict[str, Any]
    currency: str
    scenarios: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"questionnaire": self.questionnaire, "currency": self.currency, "scenarios": self.scenarios}
