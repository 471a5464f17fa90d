"""
Deal Analysis Calculations

Flip profitability, return metrics and Maximum Allowable Offer (MAO)
for a purchase / renovate / resell investment.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Mapping, Optional

from dealkit.calculations.amortization import calculate_monthly_payment
from dealkit.calculations.rounding import (
    DEFAULT_LOAN_TERM_YEARS,
    MAO_ARV_RATIO,
    SELLING_COST_RATE,
    round_percent,
    round_whole,
)


@dataclass(frozen=True)
class DealAnalysisInput:
    """Inputs for a flip analysis. Optional costs default to 0."""

    purchase_price: float
    after_repair_value: float  # ARV
    repair_costs: float
    holding_costs: float = 0.0
    closing_costs: float = 0.0
    selling_costs: float = 0.0  # 0 means "use 6% of ARV"
    down_payment: Optional[float] = None  # Defaults to purchase_price
    loan_amount: float = 0.0
    interest_rate: float = 0.0  # Annual percent
    loan_term_years: float = DEFAULT_LOAN_TERM_YEARS

    @classmethod
    def from_mapping(cls, data: Mapping) -> "DealAnalysisInput":
        """Build inputs from a plain mapping, skipping unknown or None values."""
        names = {f.name for f in fields(cls)}
        values = {
            key: value
            for key, value in data.items()
            if key in names and value is not None
        }
        return cls(**values)


@dataclass(frozen=True)
class DealAnalysisResult:
    """Outcome of a flip analysis."""

    total_investment: float
    projected_profit: float
    return_on_investment: float  # Percent
    cash_on_cash_return: float  # Percent
    max_allowable_offer: float
    equity: float
    monthly_payment: Optional[float] = None  # None when not financed

    def to_dict(self) -> Dict:
        return asdict(self)


def analyze_deal(inputs: DealAnalysisInput) -> DealAnalysisResult:
    """
    Analyze a real estate flip.

    Selling costs fall back to 6% of ARV when not provided. Nonsensical
    inputs are not rejected; they simply produce a negative profit.

    Args:
        inputs: Deal inputs

    Returns:
        Whole-unit currency figures and percentages to one decimal
    """
    down_payment = (
        inputs.purchase_price if inputs.down_payment is None else inputs.down_payment
    )

    total_investment = (
        down_payment + inputs.repair_costs + inputs.holding_costs + inputs.closing_costs
    )

    selling_costs = inputs.selling_costs or inputs.after_repair_value * SELLING_COST_RATE

    projected_profit = (
        inputs.after_repair_value
        - inputs.purchase_price
        - inputs.repair_costs
        - inputs.holding_costs
        - inputs.closing_costs
        - selling_costs
    )

    return_on_investment = (
        projected_profit / total_investment * 100 if total_investment > 0 else 0.0
    )

    # Same basis as ROI for now; financing does not change the cash invested
    cash_invested = (
        down_payment + inputs.repair_costs + inputs.holding_costs + inputs.closing_costs
    )
    cash_on_cash_return = (
        projected_profit / cash_invested * 100 if cash_invested > 0 else 0.0
    )

    max_allowable_offer = inputs.after_repair_value * MAO_ARV_RATIO - inputs.repair_costs

    equity = inputs.after_repair_value - max(inputs.loan_amount, 0)

    monthly_payment = None
    if inputs.loan_amount > 0:
        monthly_payment = calculate_monthly_payment(
            inputs.loan_amount, inputs.interest_rate, inputs.loan_term_years
        )

    return DealAnalysisResult(
        total_investment=round_whole(total_investment),
        projected_profit=round_whole(projected_profit),
        return_on_investment=round_percent(return_on_investment),
        cash_on_cash_return=round_percent(cash_on_cash_return),
        max_allowable_offer=round_whole(max_allowable_offer),
        equity=round_whole(equity),
        monthly_payment=monthly_payment,
    )


def calculate_70_percent_rule(arv: float, repair_costs: float) -> float:
    """
    Calculate the Maximum Allowable Offer using the 70% rule.

    MAO = ARV * 0.70 - repair costs
    """
    return round_whole(arv * MAO_ARV_RATIO - repair_costs)
