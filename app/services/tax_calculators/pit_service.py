"""
Naija Tax Calculator - Personal Income Tax (PIT/PAYE) Calculator

Nigeria 2026 PIT Bands (annual, Naira):
- ₦0 - ₦800,000: 0% (exempt)
- ₦800,001 - ₦3,000,000: 15%
- ₦3,000,001 - ₦12,000,000: 18%
- ₦12,000,001 - ₦25,000,000: 21%
- ₦25,000,001 - ₦50,000,000: 23%
- Above ₦50,000,000: 25%

Deduction caps:
- Rent relief: up to ₦500,000
- Job loss compensation: exempt up to ₦50,000,000
- Pension: up to 8% of gross income
- NHIS, NHF and anything else: uncapped
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from app.services.tax_calculators.progressive import BracketAllocation, allocate
from app.services.tax_calculators.rates import (
    NIGERIA_2026_RATES,
    DeductionType,
    IncomeSourceType,
    TaxRates,
)
from app.utils.formatters import format_naira, format_number


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomeSource:
    """One annual income stream."""
    source_type: Union[IncomeSourceType, str]
    amount: float


@dataclass(frozen=True)
class Deduction:
    """One claimed deduction. Unknown categories are accepted and left uncapped."""
    deduction_type: Union[DeductionType, str]
    amount: float


@dataclass(frozen=True)
class AppliedDeduction:
    """A deduction after its category cap was applied."""
    deduction_type: str
    claimed: float
    amount: float
    capped: bool


@dataclass(frozen=True)
class PITResult:
    """Result of a personal income tax calculation."""
    gross_income: float
    total_deductions: float
    taxable_income: float
    total_tax: float
    net_take_home: float
    effective_rate: float
    is_exempt: bool
    bracket_breakdown: Tuple[BracketAllocation, ...]
    monthly_tax: float
    monthly_net_pay: float
    exempt_reason: Optional[str] = None
    applied_deductions: Tuple[AppliedDeduction, ...] = field(default_factory=tuple)
    is_resident: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Format result for API response."""
        return {
            "gross_income": self.gross_income,
            "total_deductions": self.total_deductions,
            "taxable_income": self.taxable_income,
            "total_tax": self.total_tax,
            "net_take_home": self.net_take_home,
            "effective_rate": self.effective_rate,
            "is_exempt": self.is_exempt,
            "exempt_reason": self.exempt_reason,
            "bracket_breakdown": [b.to_dict() for b in self.bracket_breakdown],
            "monthly_tax": self.monthly_tax,
            "monthly_net_pay": self.monthly_net_pay,
            "applied_deductions": [
                {
                    "deduction_type": d.deduction_type,
                    "claimed": d.claimed,
                    "amount": d.amount,
                    "capped": d.capped,
                }
                for d in self.applied_deductions
            ],
            "is_resident": self.is_resident,
        }


def _category(tag: Union[DeductionType, str]) -> Optional[DeductionType]:
    """Resolve a deduction tag to its enum member, or None when unknown."""
    if isinstance(tag, DeductionType):
        return tag
    try:
        return DeductionType(tag)
    except ValueError:
        return None


class PITCalculator:
    """
    Personal Income Tax calculator for the Nigerian 2026 tax reform.

    The bracket walk itself lives in progressive.allocate; this class handles
    income aggregation, deduction caps, the exemption fast path and the
    monthly/effective-rate figures.
    """

    def __init__(self, rates: TaxRates = NIGERIA_2026_RATES):
        self.rates = rates

    def calculate_gross_income(self, incomes: Sequence[IncomeSource]) -> float:
        """Sum of all income sources."""
        return sum((source.amount for source in incomes), 0.0)

    def deduction_cap(self, tag: Union[DeductionType, str], gross_income: float) -> Optional[float]:
        """
        Maximum allowable amount for a deduction category.

        Returns None for uncapped categories (including unknown tags).
        """
        category = _category(tag)
        if category is None:
            return None
        if category == DeductionType.PENSION:
            return gross_income * self.rates.pension_max_percent / 100
        return self.rates.fixed_deduction_caps.get(category)

    def calculate_deductions(
        self,
        deductions: Sequence[Deduction],
        gross_income: float,
    ) -> Tuple[float, List[AppliedDeduction]]:
        """
        Apply per-category caps and sum the deductions.

        The total can never exceed gross income.

        Returns:
            Tuple of (total_deductions, applied_deductions)
        """
        applied: List[AppliedDeduction] = []
        total = 0.0

        for deduction in deductions:
            amount = deduction.amount
            cap = self.deduction_cap(deduction.deduction_type, gross_income)
            capped = cap is not None and amount > cap
            if capped:
                amount = cap

            tag = deduction.deduction_type
            applied.append(AppliedDeduction(
                deduction_type=tag.value if isinstance(tag, DeductionType) else str(tag),
                claimed=deduction.amount,
                amount=amount,
                capped=capped,
            ))
            total += amount

        return min(total, gross_income), applied

    def calculate(
        self,
        incomes: Sequence[IncomeSource],
        deductions: Sequence[Deduction] = (),
        is_resident: bool = True,
    ) -> PITResult:
        """
        Complete PIT calculation.

        Args:
            incomes: Annual income sources
            deductions: Claimed deductions (capped per category)
            is_resident: Residency flag. Non-residents currently receive the
                same treatment as residents.

        Returns:
            PITResult with bracket breakdown and monthly figures
        """
        gross_income = self.calculate_gross_income(incomes)
        total_deductions, applied = self.calculate_deductions(deductions, gross_income)
        taxable_income = max(0.0, gross_income - total_deductions)
        exempt_threshold = self.rates.pit_exempt_threshold

        if taxable_income <= exempt_threshold:
            logger.debug("PIT exempt: taxable income %s within threshold", taxable_income)
            exempt_band = self.rates.pit_brackets[0]
            return PITResult(
                gross_income=gross_income,
                total_deductions=total_deductions,
                taxable_income=taxable_income,
                total_tax=0.0,
                net_take_home=gross_income - total_deductions,
                effective_rate=0.0,
                is_exempt=True,
                exempt_reason=(
                    f"Annual income of {format_number(taxable_income)} is below "
                    f"{format_naira(exempt_threshold, 0)} threshold"
                ),
                bracket_breakdown=(BracketAllocation(exempt_band, taxable_income, 0.0),),
                monthly_tax=0.0,
                monthly_net_pay=(gross_income - total_deductions) / 12,
                applied_deductions=tuple(applied),
                is_resident=is_resident,
            )

        allocation = allocate(taxable_income, self.rates.pit_brackets, exempt_threshold)
        total_tax = allocation.total_tax

        net_take_home = gross_income - total_deductions - total_tax
        effective_rate = (total_tax / gross_income * 100) if gross_income > 0 else 0.0

        logger.debug(
            "PIT calculated: gross=%s taxable=%s tax=%s resident=%s",
            gross_income, taxable_income, total_tax, is_resident,
        )

        return PITResult(
            gross_income=gross_income,
            total_deductions=total_deductions,
            taxable_income=taxable_income,
            total_tax=total_tax,
            net_take_home=net_take_home,
            effective_rate=effective_rate,
            is_exempt=False,
            bracket_breakdown=allocation.breakdown,
            monthly_tax=total_tax / 12,
            monthly_net_pay=net_take_home / 12,
            applied_deductions=tuple(applied),
            is_resident=is_resident,
        )

    def quick_estimate(self, annual_income: float) -> PITResult:
        """Estimate for a single salary with no deductions."""
        return self.calculate([IncomeSource(IncomeSourceType.SALARY, annual_income)], [])
