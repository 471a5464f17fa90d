"""
Mortgage Tracking Calculations

Dated payment schedules for loans already in a portfolio, including
the effect of extra principal payments on payoff date and interest.
Interest is rounded to cents each month, as a servicer would bill it.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from dealkit.calculations.amortization import calculate_monthly_payment
from dealkit.calculations.rounding import MONTHS_PER_YEAR, round_currency

logger = logging.getLogger(__name__)

# Remaining schedules never run past 30 years
MAX_REMAINING_MONTHS = 360

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class MortgageEntry:
    month: int
    date: str  # ISO payment date
    payment: float
    principal: float
    interest: float
    balance: float
    total_principal: float
    total_interest: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class MortgageScheduleSummary:
    total_payments: int  # Number of payments
    total_principal: float
    total_interest: float
    payoff_date: str
    original_balance: float
    interest_rate: float
    monthly_payment: float  # Includes any extra payment
    term_months: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class MortgageSchedule:
    entries: List[MortgageEntry]
    summary: MortgageScheduleSummary

    def to_dict(self) -> Dict:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class ExtraPaymentScenario:
    """Savings from paying a fixed extra amount every month."""

    extra_monthly_amount: float
    new_payoff_date: str
    months_saved: int
    interest_saved: float
    total_interest_with_extra: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class PaymentBreakdown:
    principal: float
    interest: float

    def to_dict(self) -> Dict:
        return asdict(self)


def parse_start_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO-8601 string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(value).date()


def _build_schedule(
    balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    start_date: DateLike,
    extra_monthly_payment: float,
    max_months: int,
    stop_when_underwater: bool,
) -> List[MortgageEntry]:
    """Step a balance forward month by month until it is paid off."""
    start = parse_start_date(start_date)
    monthly_rate = max(annual_rate_percent, 0) / 100 / MONTHS_PER_YEAR

    entries = []
    total_principal = 0.0
    total_interest = 0.0
    month = 1

    while balance > 0 and month <= max_months:
        interest = round_currency(balance * monthly_rate)
        principal_pmt = monthly_payment - interest + extra_monthly_payment

        if principal_pmt >= balance:
            principal_pmt = balance

        if stop_when_underwater and principal_pmt <= 0:
            logger.warning(
                f"Payment of {monthly_payment} does not cover interest of "
                f"{interest} on balance {balance}; loan will never pay off"
            )
            break

        balance = max(0.0, round_currency(balance - principal_pmt))
        total_principal += principal_pmt
        total_interest += interest

        entries.append(
            MortgageEntry(
                month=month,
                date=(start + relativedelta(months=month)).isoformat(),
                payment=round_currency(principal_pmt + interest),
                principal=round_currency(principal_pmt),
                interest=interest,
                balance=balance,
                total_principal=round_currency(total_principal),
                total_interest=round_currency(total_interest),
            )
        )
        month += 1

    return entries


def _summarize(
    entries: List[MortgageEntry],
    original_balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    start_date: DateLike,
    term_months: int,
) -> MortgageScheduleSummary:
    if entries:
        payoff_date = entries[-1].date
        total_principal = entries[-1].total_principal
        total_interest = entries[-1].total_interest
    else:
        payoff_date = parse_start_date(start_date).isoformat()
        total_principal = 0.0
        total_interest = 0.0

    return MortgageScheduleSummary(
        total_payments=len(entries),
        total_principal=total_principal,
        total_interest=total_interest,
        payoff_date=payoff_date,
        original_balance=original_balance,
        interest_rate=annual_rate_percent,
        monthly_payment=monthly_payment,
        term_months=term_months,
    )


def calculate_mortgage_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    start_date: DateLike,
    extra_monthly_payment: float = 0.0,
) -> MortgageSchedule:
    """
    Generate a dated amortization schedule from loan origination.

    Args:
        principal: Original loan balance
        annual_rate_percent: Annual interest rate as percent
        term_months: Loan term in months
        start_date: Loan start date; first payment is one month later
        extra_monthly_payment: Additional principal paid every month

    Returns:
        Schedule entries with a summary
    """
    monthly_payment = calculate_monthly_payment(
        principal, annual_rate_percent, term_months / MONTHS_PER_YEAR
    )

    entries = _build_schedule(
        principal,
        annual_rate_percent,
        monthly_payment,
        start_date,
        extra_monthly_payment,
        max_months=term_months * 2,
        stop_when_underwater=False,
    )

    return MortgageSchedule(
        entries=entries,
        summary=_summarize(
            entries,
            principal,
            annual_rate_percent,
            monthly_payment + extra_monthly_payment,
            start_date,
            term_months,
        ),
    )


def calculate_remaining_mortgage_schedule(
    current_balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    start_date: DateLike,
    extra_monthly_payment: float = 0.0,
) -> MortgageSchedule:
    """
    Generate the remaining schedule for a loan from its current balance.

    Stops early if the payment does not cover the month's interest.
    """
    entries = _build_schedule(
        current_balance,
        annual_rate_percent,
        monthly_payment,
        start_date,
        extra_monthly_payment,
        max_months=MAX_REMAINING_MONTHS,
        stop_when_underwater=True,
    )

    return MortgageSchedule(
        entries=entries,
        summary=_summarize(
            entries,
            current_balance,
            annual_rate_percent,
            monthly_payment + extra_monthly_payment,
            start_date,
            len(entries),
        ),
    )


def calculate_extra_payment_impact(
    current_balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    extra_amounts: Sequence[float],
    start_date: DateLike,
) -> List[ExtraPaymentScenario]:
    """
    Compare extra monthly payment amounts against paying as scheduled.

    Args:
        current_balance: Current loan balance
        annual_rate_percent: Annual interest rate as percent
        monthly_payment: Current monthly payment
        extra_amounts: Extra monthly amounts to evaluate
        start_date: Date to start calculations from

    Returns:
        One scenario per extra amount, in input order
    """
    baseline = calculate_remaining_mortgage_schedule(
        current_balance, annual_rate_percent, monthly_payment, start_date
    ).summary

    scenarios = []
    for extra_amount in extra_amounts:
        with_extra = calculate_remaining_mortgage_schedule(
            current_balance,
            annual_rate_percent,
            monthly_payment,
            start_date,
            extra_amount,
        ).summary

        scenarios.append(
            ExtraPaymentScenario(
                extra_monthly_amount=extra_amount,
                new_payoff_date=with_extra.payoff_date,
                months_saved=baseline.total_payments - with_extra.total_payments,
                interest_saved=round_currency(
                    baseline.total_interest - with_extra.total_interest
                ),
                total_interest_with_extra=with_extra.total_interest,
            )
        )

    return scenarios


def calculate_payoff_date(
    current_balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    as_of: Optional[DateLike] = None,
) -> str:
    """Calculate the ISO payoff date of a loan, starting today by default."""
    schedule = calculate_remaining_mortgage_schedule(
        current_balance,
        annual_rate_percent,
        monthly_payment,
        as_of if as_of is not None else date.today(),
    )
    return schedule.summary.payoff_date


def calculate_payment_breakdown(
    balance: float, annual_rate_percent: float, monthly_payment: float
) -> PaymentBreakdown:
    """Split a single payment into its principal and interest portions."""
    monthly_rate = annual_rate_percent / 100 / MONTHS_PER_YEAR
    interest = round_currency(balance * monthly_rate)
    principal = round_currency(monthly_payment - interest)
    return PaymentBreakdown(principal=principal, interest=interest)


def estimate_current_balance(
    original_balance: float,
    annual_rate_percent: float,
    term_months: int,
    months_elapsed: int,
    as_of: Optional[DateLike] = None,
) -> float:
    """
    Estimate today's balance from the original loan terms.

    Returns the balance after ``months_elapsed`` payments, clamped to the
    final payment, or 0 if no schedule could be built.
    """
    schedule = calculate_mortgage_schedule(
        original_balance,
        annual_rate_percent,
        term_months,
        as_of if as_of is not None else date.today(),
    )
    if not schedule.entries:
        return 0.0
    if months_elapsed <= 0:
        return original_balance

    index = min(months_elapsed, len(schedule.entries)) - 1
    return schedule.entries[index].balance
