from tariff_engine.pricing.questionnaire import QuestionnaireInput
from tariff_engine.pricing.quote import calculate
from tariff_engine.pricing.scenarios import simulate_scenarios
from tariff_engine.pricing.tables import CoverageType, GuaranteeTier, SectorCode

# 50 employees, services sector, reference guarantee: lands on the 50.00 floor
q = QuestionnaireInput(
    employee_count=50,
    sector_code=SectorCode.D,
    guarantee_amount=GuaranteeTier.T20000,
    coverage_type=CoverageType.FULL,
    had_severe_prior_disability=False,
)

result = calculate(q)
print(result.to_dict())

for name, scenario in simulate_scenarios(q).to_dict(include_breakdown=False).items():
    print(name, scenario["premium_excluding_tax"], scenario["messages"])
