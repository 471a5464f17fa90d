"""
Financial Calculation Engine

Deal analysis modules for real estate investors. Every function is
pure: plain numbers in, freshly built result records out.
"""

from dealkit.calculations import amortization, deal, mortgage, rental, rounding

__all__ = ["amortization", "deal", "mortgage", "rental", "rounding"]
