# tariff_engine/pricing/config.py
"""
Pricing configuration.

Constants applied after the rating-table lookups:
- min_premium: floor on the premium excluding tax
- vat_rate: fixed tax rate used for the premium including tax
- history_coefficient: loading when the insured had IPP > 10% in the last 4 years
- max_employees: headcount above which we do not quote online
- commission_schedule: (upper bound exclusive, rate %) pairs, ascending
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


@dataclass(frozen=True)
class TariffConfig:
    currency: str = "EUR"

    min_premium: Decimal = Decimal("50.00")
    vat_rate: Decimal = Decimal("0.20")

    history_coefficient: Decimal = Decimal("1.3")
    no_history_coefficient: Decimal = Decimal("1.0")

    max_employees: int = 10000

    # First bound the premium (excl. tax) is strictly below wins
    commission_schedule: Tuple[Tuple[Decimal, int], ...] = (
        (Decimal("500"), 25),
        (Decimal("2000"), 22),
        (Decimal("5000"), 20),
    )
    commission_rate_above: int = 18
