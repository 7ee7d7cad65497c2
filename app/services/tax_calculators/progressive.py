"""
Naija Tax Calculator - Progressive Bracket Allocator

Splits a taxable amount across an ordered list of rate brackets.
Shared by the PIT calculator and the individual path of the CGT calculator.

Algorithm:
- Walk the brackets in ascending order, tracking the amount still unallocated.
- The zero-rate band is a full exemption: it absorbs up to the exempt
  threshold at no tax.
- Every other band absorbs up to (maximum - minimum + 1); the top band is
  unbounded.
- Bands reached after the amount is exhausted are still reported with zero
  values so the breakdown always lists every band.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from app.services.tax_calculators.rates import (
    PIT_BRACKETS,
    PIT_EXEMPT_THRESHOLD,
    TaxBracket,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketAllocation:
    """Portion of the taxable amount that fell into one bracket."""
    bracket: TaxBracket
    taxable_in_bracket: float
    tax_for_bracket: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.bracket.label,
            "minimum": self.bracket.minimum,
            "maximum": self.bracket.maximum,
            "rate": self.bracket.rate,
            "taxable_in_bracket": self.taxable_in_bracket,
            "tax_for_bracket": self.tax_for_bracket,
        }


@dataclass(frozen=True)
class AllocationResult:
    """Total tax plus the per-bracket breakdown it was summed from."""
    total_tax: float
    breakdown: Tuple[BracketAllocation, ...]


def allocate(
    taxable_amount: float,
    brackets: Sequence[TaxBracket] = PIT_BRACKETS,
    exempt_threshold: float = PIT_EXEMPT_THRESHOLD,
) -> AllocationResult:
    """
    Allocate a taxable amount across progressive brackets.

    Args:
        taxable_amount: Amount to tax. Must be non-negative; callers validate.
        brackets: Contiguous brackets, ascending, first at 0%, last unbounded
        exempt_threshold: Amount absorbed by the zero-rate band

    Returns:
        AllocationResult whose total_tax is the in-order sum of the
        breakdown's tax_for_bracket values.
    """
    breakdown: List[BracketAllocation] = []
    total_tax = 0.0
    remaining = taxable_amount

    for bracket in brackets:
        if remaining <= 0:
            breakdown.append(BracketAllocation(bracket, 0.0, 0.0))
            continue

        if bracket.rate == 0:
            exempt_portion = min(remaining, exempt_threshold)
            breakdown.append(BracketAllocation(bracket, exempt_portion, 0.0))
            remaining -= exempt_portion
            continue

        taxable_in_bracket = min(remaining, bracket.capacity)
        tax_for_bracket = taxable_in_bracket * bracket.rate / 100

        breakdown.append(BracketAllocation(bracket, taxable_in_bracket, tax_for_bracket))
        total_tax += tax_for_bracket
        remaining -= taxable_in_bracket

    logger.debug("Allocated %s across %d brackets: tax=%s", taxable_amount, len(breakdown), total_tax)

    return AllocationResult(total_tax=total_tax, breakdown=tuple(breakdown))
