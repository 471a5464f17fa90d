"""
Rental Property Calculations

Monthly cash flow, capitalization rate and debt service coverage
for buy-and-hold rentals.
"""

from dataclasses import dataclass, asdict
from typing import Dict

from dealkit.calculations.rounding import (
    DEFAULT_MANAGEMENT_RATE,
    DEFAULT_VACANCY_RATE,
    MONTHS_PER_YEAR,
    round_ratio,
    round_whole,
    safe_divide,
)


@dataclass(frozen=True)
class RentalCashFlowInput:
    """Monthly figures for a rental property."""

    monthly_rent: float
    monthly_expenses: float
    monthly_mortgage: float
    vacancy_rate: float = DEFAULT_VACANCY_RATE  # Decimal (0.08 = 8%)
    property_management_rate: float = DEFAULT_MANAGEMENT_RATE  # Decimal of rent


@dataclass(frozen=True)
class RentalCashFlowResult:
    gross_monthly_income: float
    effective_gross_income: float
    net_operating_income: float
    monthly_cash_flow: float
    annual_cash_flow: float

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_rental_cash_flow(inputs: RentalCashFlowInput) -> RentalCashFlowResult:
    """
    Calculate rental property cash flow.

    Vacancy and management fees are both taken as a share of gross rent.
    All outputs are rounded to whole currency units.
    """
    gross_monthly_income = inputs.monthly_rent
    vacancy_loss = inputs.monthly_rent * inputs.vacancy_rate
    effective_gross_income = gross_monthly_income - vacancy_loss

    property_management = inputs.monthly_rent * inputs.property_management_rate
    total_expenses = inputs.monthly_expenses + property_management

    net_operating_income = effective_gross_income - total_expenses
    monthly_cash_flow = net_operating_income - inputs.monthly_mortgage
    annual_cash_flow = monthly_cash_flow * MONTHS_PER_YEAR

    return RentalCashFlowResult(
        gross_monthly_income=round_whole(gross_monthly_income),
        effective_gross_income=round_whole(effective_gross_income),
        net_operating_income=round_whole(net_operating_income),
        monthly_cash_flow=round_whole(monthly_cash_flow),
        annual_cash_flow=round_whole(annual_cash_flow),
    )


def calculate_cap_rate(net_operating_income: float, property_value: float) -> float:
    """
    Calculate capitalization rate.

    Args:
        net_operating_income: Annual NOI
        property_value: Current market value

    Returns:
        Cap rate as a percentage (e.g., 6.0), 0 when value is not positive
    """
    if property_value <= 0:
        return 0.0
    return round_ratio(net_operating_income / property_value * 100)


def calculate_dscr(net_operating_income: float, annual_debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        net_operating_income: Annual NOI
        annual_debt_service: Annual mortgage payments

    Returns:
        DSCR ratio, 0 when there is no debt service
    """
    return round_ratio(safe_divide(net_operating_income, annual_debt_service))
