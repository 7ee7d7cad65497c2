"""
Naija Tax Calculator - Display Formatters

Naira rendering for breakdown notes, explanations and bracket labels.
Calculators always work on raw floats; these helpers are presentation only.
"""

from typing import Optional


NAIRA_SIGN = "₦"


def format_number(num: float, decimals: int = 0) -> str:
    """Format a number with thousand separators."""
    return f"{num:,.{decimals}f}"


def format_naira(amount: float, decimals: int = 2) -> str:
    """
    Format an amount as Nigerian Naira.

    Examples:
        format_naira(1234.5) -> "₦1,234.50"
        format_naira(-30000) -> "-₦30,000.00"
    """
    if amount < 0:
        return f"-{NAIRA_SIGN}{format_number(abs(amount), decimals)}"
    return f"{NAIRA_SIGN}{format_number(amount, decimals)}"


def format_bracket_range(minimum: float, maximum: Optional[float]) -> str:
    """Human-readable label for a tax bracket range."""
    if maximum is None:
        return f"Above {format_naira(minimum - 1)}"
    return f"{format_naira(minimum)} – {format_naira(maximum)}"
