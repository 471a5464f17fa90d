"""
dealkit - real estate deal analysis engine.

Mortgage amortization, loan summaries, flip analysis and rental
cash flow metrics for investor workflows.
"""

__version__ = "0.1.0"
