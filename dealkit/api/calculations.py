"""
Deal calculation API endpoints.

These endpoints accept inputs and return calculated results.
Used by the mobile app's deal analysis and financing screens.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from dealkit.calculations import amortization, deal, mortgage, rental
from dealkit.calculations.rounding import DEFAULT_LOAN_TERM_YEARS
from dealkit.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_term(term_years: float) -> None:
    """Reject loan terms that would produce unreasonably long schedules."""
    settings = get_settings()
    if term_years > settings.max_term_years:
        logger.warning(f"Rejected loan term of {term_years} years")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Loan term cannot exceed {settings.max_term_years} years",
        )


class LoanInput(BaseModel):
    """Fixed-rate loan terms."""

    principal: float
    annual_rate: float  # Percent, e.g. 7.5
    term_years: float = DEFAULT_LOAN_TERM_YEARS


class PaymentResponse(BaseModel):
    monthly_payment: float


@router.post("/payment", response_model=PaymentResponse)
async def calculate_payment(inputs: LoanInput):
    """Calculate the monthly principal and interest payment."""
    _check_term(inputs.term_years)

    return PaymentResponse(
        monthly_payment=amortization.calculate_monthly_payment(
            inputs.principal, inputs.annual_rate, inputs.term_years
        )
    )


@router.post("/amortization")
async def calculate_amortization(inputs: LoanInput):
    """Generate a loan amortization schedule with summary and yearly rollup."""
    _check_term(inputs.term_years)

    schedule = amortization.generate_amortization_schedule(
        inputs.principal, inputs.annual_rate, inputs.term_years
    )
    summary = amortization.get_loan_summary(
        inputs.principal, inputs.annual_rate, inputs.term_years
    )

    return {
        "summary": summary.to_dict(),
        "schedule": [entry.to_dict() for entry in schedule],
        "yearly": [year.to_dict() for year in amortization.summarize_by_year(schedule)],
    }


class RemainingBalanceInput(LoanInput):
    months_elapsed: int


@router.post("/remaining-balance")
async def calculate_remaining_balance(inputs: RemainingBalanceInput):
    """Look up the loan balance after a number of payments."""
    _check_term(inputs.term_years)

    balance = amortization.calculate_remaining_balance(
        inputs.principal, inputs.annual_rate, inputs.term_years, inputs.months_elapsed
    )
    return {"balance": balance}


class DealInput(BaseModel):
    """Input for flip analysis. Omitted costs use the engine defaults."""

    purchase_price: float
    after_repair_value: float
    repair_costs: float
    holding_costs: Optional[float] = None
    closing_costs: Optional[float] = None
    selling_costs: Optional[float] = None
    down_payment: Optional[float] = None
    loan_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    loan_term_years: Optional[float] = None


class DealResponse(BaseModel):
    total_investment: float
    projected_profit: float
    return_on_investment: float
    cash_on_cash_return: float
    max_allowable_offer: float
    equity: float
    monthly_payment: Optional[float] = None


@router.post("/deal", response_model=DealResponse)
async def analyze_deal(inputs: DealInput):
    """Analyze flip profitability and the maximum allowable offer."""
    if inputs.loan_term_years is not None:
        _check_term(inputs.loan_term_years)

    result = deal.analyze_deal(deal.DealAnalysisInput.from_mapping(inputs.model_dump()))
    return DealResponse(**result.to_dict())


class MAOInput(BaseModel):
    after_repair_value: float
    repair_costs: float = 0.0


@router.post("/mao")
async def calculate_mao(inputs: MAOInput):
    """Calculate the 70% rule offer ceiling."""
    return {
        "max_allowable_offer": deal.calculate_70_percent_rule(
            inputs.after_repair_value, inputs.repair_costs
        )
    }


class RentalInput(BaseModel):
    monthly_rent: float
    monthly_expenses: float
    monthly_mortgage: float
    vacancy_rate: Optional[float] = None
    property_management_rate: Optional[float] = None


class RentalResponse(BaseModel):
    gross_monthly_income: float
    effective_gross_income: float
    net_operating_income: float
    monthly_cash_flow: float
    annual_cash_flow: float


@router.post("/rental-cash-flow", response_model=RentalResponse)
async def calculate_rental_cash_flow(inputs: RentalInput):
    """Calculate rental cash flow after vacancy, expenses and debt service."""
    rental_inputs = rental.RentalCashFlowInput(
        **inputs.model_dump(exclude_none=True)
    )
    result = rental.calculate_rental_cash_flow(rental_inputs)
    return RentalResponse(**result.to_dict())


class CapRateInput(BaseModel):
    net_operating_income: float  # Annual
    property_value: float


@router.post("/cap-rate")
async def calculate_cap_rate(inputs: CapRateInput):
    """Calculate capitalization rate as a percentage."""
    return {
        "cap_rate": rental.calculate_cap_rate(
            inputs.net_operating_income, inputs.property_value
        )
    }


class DSCRInput(BaseModel):
    net_operating_income: float  # Annual
    annual_debt_service: float


@router.post("/dscr")
async def calculate_dscr(inputs: DSCRInput):
    """Calculate debt service coverage ratio."""
    return {
        "dscr": rental.calculate_dscr(
            inputs.net_operating_income, inputs.annual_debt_service
        )
    }


class MortgageScheduleInput(BaseModel):
    """Input for a dated mortgage schedule from origination."""

    principal: float
    annual_rate: float
    term_months: int = DEFAULT_LOAN_TERM_YEARS * 12
    start_date: date
    extra_monthly_payment: float = 0.0


@router.post("/mortgage/schedule")
async def calculate_mortgage_schedule(inputs: MortgageScheduleInput):
    """Generate a dated mortgage schedule, optionally with extra payments."""
    _check_term(inputs.term_months / 12)

    schedule = mortgage.calculate_mortgage_schedule(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate,
        term_months=inputs.term_months,
        start_date=inputs.start_date,
        extra_monthly_payment=inputs.extra_monthly_payment,
    )
    return schedule.to_dict()


class ExtraPaymentInput(BaseModel):
    """Input for comparing extra monthly payment amounts."""

    current_balance: float
    annual_rate: float
    monthly_payment: float
    extra_amounts: List[float]
    start_date: Optional[date] = None


@router.post("/mortgage/extra-payments")
async def calculate_extra_payments(inputs: ExtraPaymentInput):
    """Show months and interest saved for each extra payment amount."""
    settings = get_settings()
    if len(inputs.extra_amounts) > settings.max_extra_scenarios:
        logger.warning(
            f"Rejected {len(inputs.extra_amounts)} extra payment scenarios"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"At most {settings.max_extra_scenarios} extra payment "
                "amounts can be compared"
            ),
        )

    start_date = inputs.start_date or date.today()
    scenarios = mortgage.calculate_extra_payment_impact(
        inputs.current_balance,
        inputs.annual_rate,
        inputs.monthly_payment,
        inputs.extra_amounts,
        start_date,
    )

    return {
        "payoff_date": mortgage.calculate_payoff_date(
            inputs.current_balance,
            inputs.annual_rate,
            inputs.monthly_payment,
            as_of=start_date,
        ),
        "breakdown": mortgage.calculate_payment_breakdown(
            inputs.current_balance, inputs.annual_rate, inputs.monthly_payment
        ).to_dict(),
        "scenarios": [scenario.to_dict() for scenario in scenarios],
    }
