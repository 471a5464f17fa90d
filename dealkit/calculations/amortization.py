"""
Loan Amortization Calculations

Fixed-rate monthly payment, per-period amortization schedules and
loan summaries. Rates are annual percentages (e.g., 7.5 for 7.5%).
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict, List

from dealkit.calculations.rounding import (
    MONTHS_PER_YEAR,
    round_currency,
    round_ratio,
    round_whole,
)


@dataclass(frozen=True)
class AmortizationEntry:
    """A single month of an amortization schedule."""

    month: int  # 1-based payment number
    payment: float
    principal: float
    interest: float
    balance: float
    total_interest_paid: float
    total_principal_paid: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class LoanSummary:
    """Totals derived from a loan's payment."""

    monthly_payment: float
    total_payments: float
    total_interest: float
    total_cost: float
    effective_rate: float  # Total interest as % of principal

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class YearlySummary:
    """Principal and interest paid during one loan year."""

    year: int
    annual_payment: float
    principal_paid: float
    interest_paid: float
    ending_balance: float

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_monthly_payment(
    principal: float, annual_rate_percent: float, term_years: float
) -> float:
    """
    Calculate monthly mortgage payment (principal and interest).

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate as percent (e.g., 7.5)
        term_years: Loan term in years

    Returns:
        Monthly payment rounded to cents, or 0 for invalid inputs.
        A 0% loan amortizes linearly and is not rounded.
    """
    if principal <= 0 or term_years <= 0:
        return 0.0

    num_payments = term_years * MONTHS_PER_YEAR

    if annual_rate_percent <= 0:
        return principal / num_payments

    monthly_rate = annual_rate_percent / 100 / MONTHS_PER_YEAR
    try:
        growth = (1 + monthly_rate) ** num_payments
    except OverflowError:
        growth = math.inf

    # Rate too small to register: amortize linearly
    if growth - 1 <= 0:
        return principal / num_payments

    payment = principal * (monthly_rate * growth) / (growth - 1)
    if not math.isfinite(payment):
        # Very long terms approach interest-only
        payment = principal * monthly_rate / (1 - 1 / growth)

    return round_currency(payment)


def generate_amortization_schedule(
    principal: float, annual_rate_percent: float, term_years: float
) -> List[AmortizationEntry]:
    """
    Generate a complete monthly amortization schedule.

    The final period settles whatever balance remains, so the last
    entry always ends at exactly 0.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate as percent
        term_years: Loan term in years

    Returns:
        One entry per month (term_years * 12), empty for invalid inputs
    """
    if principal <= 0 or term_years <= 0:
        return []

    monthly_rate = max(annual_rate_percent, 0) / 100 / MONTHS_PER_YEAR
    # Tolerate float noise such as (13 / 12) * 12 == 12.999...
    num_payments = math.floor(term_years * MONTHS_PER_YEAR + 1e-9)
    monthly_payment = calculate_monthly_payment(
        principal, annual_rate_percent, term_years
    )

    schedule = []
    balance = principal
    total_interest_paid = 0.0
    total_principal_paid = 0.0

    for month in range(1, num_payments + 1):
        interest = balance * monthly_rate
        principal_pmt = monthly_payment - interest
        payment = monthly_payment

        # Last payment (or an overshooting one) pays off the remainder
        if month == num_payments or principal_pmt > balance:
            principal_pmt = balance
            payment = principal_pmt + interest

        balance = max(0.0, balance - principal_pmt)
        total_interest_paid += interest
        total_principal_paid += principal_pmt

        schedule.append(
            AmortizationEntry(
                month=month,
                payment=round_currency(payment),
                principal=round_currency(principal_pmt),
                interest=round_currency(interest),
                balance=round_currency(balance),
                total_interest_paid=round_currency(total_interest_paid),
                total_principal_paid=round_currency(total_principal_paid),
            )
        )

    return schedule


def calculate_total_interest(
    principal: float, annual_rate_percent: float, term_years: float
) -> float:
    """Calculate total interest paid over the life of a loan."""
    monthly_payment = calculate_monthly_payment(
        principal, annual_rate_percent, term_years
    )
    if monthly_payment == 0:
        return 0.0
    total_payments = monthly_payment * term_years * MONTHS_PER_YEAR
    return round_currency(total_payments - principal)


def get_loan_summary(
    principal: float, annual_rate_percent: float, term_years: float
) -> LoanSummary:
    """
    Summarize a loan's payment, totals and effective rate.

    A non-positive principal or term yields an all-zero summary.
    """
    if principal <= 0 or term_years <= 0:
        return LoanSummary(
            monthly_payment=0.0,
            total_payments=0.0,
            total_interest=0.0,
            total_cost=0.0,
            effective_rate=0.0,
        )

    monthly_payment = calculate_monthly_payment(
        principal, annual_rate_percent, term_years
    )
    total_payments = monthly_payment * term_years * MONTHS_PER_YEAR
    total_interest = total_payments - principal
    effective_rate = total_interest / principal * 100

    return LoanSummary(
        monthly_payment=round_currency(monthly_payment),
        total_payments=round_currency(total_payments),
        total_interest=round_currency(total_interest),
        total_cost=round_currency(principal + total_interest),
        effective_rate=round_ratio(effective_rate),
    )


def calculate_remaining_balance(
    principal: float,
    annual_rate_percent: float,
    term_years: float,
    months_elapsed: int,
) -> float:
    """
    Calculate loan balance after a number of payments.

    Args:
        principal: Original loan amount
        annual_rate_percent: Annual interest rate as percent
        term_years: Original loan term in years
        months_elapsed: Payments made since origination

    Returns:
        Remaining balance (principal at month 0, 0 once paid off)
    """
    if months_elapsed <= 0:
        return principal

    schedule = generate_amortization_schedule(
        principal, annual_rate_percent, term_years
    )
    if months_elapsed >= len(schedule):
        return 0.0
    return schedule[months_elapsed - 1].balance


def calculate_equity(property_value: float, loan_balance: float) -> float:
    """Calculate owner equity, never below zero."""
    return max(0.0, property_value - loan_balance)


def summarize_by_year(schedule: List[AmortizationEntry]) -> List[YearlySummary]:
    """
    Roll a monthly schedule up into loan years.

    A trailing partial year gets its own row.
    """
    years = []
    year_principal = 0.0
    year_interest = 0.0

    for index, entry in enumerate(schedule):
        year_principal += entry.principal
        year_interest += entry.interest

        if (index + 1) % MONTHS_PER_YEAR == 0 or index == len(schedule) - 1:
            years.append(
                YearlySummary(
                    year=len(years) + 1,
                    annual_payment=round_currency(entry.payment * MONTHS_PER_YEAR),
                    principal_paid=round_whole(year_principal),
                    interest_paid=round_whole(year_interest),
                    ending_balance=entry.balance,
                )
            )
            year_principal = 0.0
            year_interest = 0.0

    return years
