"""
Naija Tax Calculator - CIT Calculator

Company Income Tax (CIT) calculation for the Nigeria Tax Act 2026.

Rates:
- Turnover ≤ ₦100,000,000: small company, 0% CIT, exempt from Development Levy
- Above that: 30% CIT plus 4% Development Levy on assessable profits

Minimum Effective Tax Rate (METR):
- Multinationals subject to Pillar Two / GloBE rules top up to 15% of
  assessable profits when CIT + levy falls short.

Controlled Foreign Company (CFC) tax:
- CIT rate on undistributed profits of foreign subsidiaries.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from app.services.tax_calculators.rates import NIGERIA_2026_RATES, TaxRates
from app.utils.formatters import format_naira


logger = logging.getLogger(__name__)


class CompanySize(str, Enum):
    """Company size classification for CIT purposes."""
    SMALL = "small"  # ≤ ₦100M turnover
    OTHER = "other"


class CompanyType(str, Enum):
    """Company type (informational, does not change the computation)."""
    DOMESTIC = "domestic"
    MULTINATIONAL = "multinational"


@dataclass(frozen=True)
class BreakdownItem:
    """One display line of a CIT or CGT computation."""
    label: str
    amount: float
    rate: Optional[float] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "amount": self.amount, "rate": self.rate, "note": self.note}


@dataclass(frozen=True)
class CITResult:
    """Result of a Company Income Tax calculation."""
    company_size: CompanySize
    turnover: float
    assessable_profits: float
    cit_rate: float
    cit_amount: float
    development_levy: float
    total_tax_before_top_up: float
    minimum_tax_top_up: float
    cfc_tax: float
    total_tax_payable: float
    effective_tax_rate: float
    breakdown: Tuple[BreakdownItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Format result for API response."""
        return {
            "company_size": self.company_size.value,
            "turnover": self.turnover,
            "assessable_profits": self.assessable_profits,
            "cit_rate": self.cit_rate,
            "cit_amount": self.cit_amount,
            "development_levy": self.development_levy,
            "total_tax_before_top_up": self.total_tax_before_top_up,
            "minimum_tax_top_up": self.minimum_tax_top_up,
            "cfc_tax": self.cfc_tax,
            "total_tax_payable": self.total_tax_payable,
            "effective_tax_rate": self.effective_tax_rate,
            "breakdown": [item.to_dict() for item in self.breakdown],
        }


class CITCalculator:
    """
    Company Income Tax calculator.

    Implements the Nigeria Tax Act 2026 CIT rules, Development Levy,
    15% minimum effective tax top-up and CFC tax.
    """

    def __init__(self, rates: TaxRates = NIGERIA_2026_RATES):
        self.rates = rates

    def determine_company_size(self, turnover: float) -> CompanySize:
        """
        Determine company size based on turnover.

        Args:
            turnover: Annual gross turnover

        Returns:
            CompanySize enum value
        """
        if turnover <= self.rates.small_company_turnover_limit:
            return CompanySize.SMALL
        return CompanySize.OTHER

    def calculate_minimum_tax_top_up(
        self,
        assessable_profits: float,
        current_tax: float,
        is_subject: bool,
    ) -> float:
        """
        Top-up needed to reach the minimum effective tax rate.

        A single correction, not iterated: the top-up itself is not fed back
        into the rate check.
        """
        if not is_subject or assessable_profits <= 0:
            return 0.0

        current_effective_rate = current_tax / assessable_profits * 100
        minimum_rate = self.rates.minimum_effective_tax_rate

        if current_effective_rate >= minimum_rate:
            return 0.0

        return assessable_profits * minimum_rate / 100 - current_tax

    def calculate_cfc_tax(
        self,
        foreign_profits: float = 0.0,
        distributed_foreign_profits: float = 0.0,
    ) -> float:
        """CIT rate applied to undistributed foreign subsidiary profits."""
        undistributed = max(0.0, foreign_profits - distributed_foreign_profits)
        return undistributed * self.rates.cit_rate / 100

    def _small_company_result(self, turnover: float, assessable_profits: float) -> CITResult:
        limit = self.rates.small_company_turnover_limit
        small_rate = self.rates.small_company_cit_rate
        return CITResult(
            company_size=CompanySize.SMALL,
            turnover=turnover,
            assessable_profits=assessable_profits,
            cit_rate=small_rate,
            cit_amount=0.0,
            development_levy=0.0,
            total_tax_before_top_up=0.0,
            minimum_tax_top_up=0.0,
            cfc_tax=0.0,
            total_tax_payable=0.0,
            effective_tax_rate=0.0,
            breakdown=(
                BreakdownItem(
                    "Company Classification", 0.0,
                    note=f"Small Company (Turnover ≤ {format_naira(limit, 0)})",
                ),
                BreakdownItem(
                    "Corporate Income Tax", 0.0, rate=small_rate,
                    note=f"{small_rate:g}% CIT rate for small companies",
                ),
                BreakdownItem("Development Levy", 0.0, rate=0.0, note="Exempt for small companies"),
            ),
        )

    def calculate(
        self,
        turnover: float,
        assessable_profits: float,
        company_type: CompanyType = CompanyType.DOMESTIC,
        is_multinational_subject: bool = False,
        foreign_profits: float = 0.0,
        distributed_foreign_profits: float = 0.0,
    ) -> CITResult:
        """
        Calculate Company Income Tax.

        Args:
            turnover: Annual gross turnover
            assessable_profits: Profit base for CIT and levy
            company_type: Domestic or multinational (display only)
            is_multinational_subject: Subject to the 15% minimum effective rate
            foreign_profits: Profits of controlled foreign subsidiaries
            distributed_foreign_profits: Portion of foreign profits distributed

        Returns:
            CITResult with itemized breakdown
        """
        company_size = self.determine_company_size(turnover)

        if company_size == CompanySize.SMALL:
            logger.debug("CIT small company: turnover=%s", turnover)
            return self._small_company_result(turnover, assessable_profits)

        cit_rate = self.rates.cit_rate
        levy_rate = self.rates.development_levy_rate
        breakdown: List[BreakdownItem] = []

        cit_amount = assessable_profits * cit_rate / 100
        breakdown.append(BreakdownItem(
            "Corporate Income Tax", cit_amount, rate=cit_rate,
            note=f"{cit_rate:g}% on assessable profits",
        ))

        development_levy = assessable_profits * levy_rate / 100
        breakdown.append(BreakdownItem(
            "Development Levy", development_levy, rate=levy_rate,
            note=f"{levy_rate:g}% of assessable profits",
        ))

        total_tax_before_top_up = cit_amount + development_levy

        minimum_tax_top_up = self.calculate_minimum_tax_top_up(
            assessable_profits, total_tax_before_top_up, is_multinational_subject
        )
        if is_multinational_subject:
            minimum_rate = self.rates.minimum_effective_tax_rate
            breakdown.append(BreakdownItem(
                f"Minimum Tax Top-Up (METR {minimum_rate:g}%)", minimum_tax_top_up, rate=minimum_rate,
                note=(
                    f"Top-up applied to meet {minimum_rate:g}% minimum effective rate"
                    if minimum_tax_top_up > 0
                    else f"No top-up needed - effective rate already ≥{minimum_rate:g}%"
                ),
            ))

        cfc_tax = self.calculate_cfc_tax(foreign_profits, distributed_foreign_profits)
        if foreign_profits > 0:
            breakdown.append(BreakdownItem(
                "CFC Tax (Foreign Profits)", cfc_tax, rate=cit_rate,
                note="Tax on undistributed foreign subsidiary profits",
            ))

        total_tax_payable = total_tax_before_top_up + minimum_tax_top_up + cfc_tax
        effective_tax_rate = (
            total_tax_payable / assessable_profits * 100 if assessable_profits > 0 else 0.0
        )

        logger.debug(
            "CIT calculated: turnover=%s profits=%s total=%s type=%s",
            turnover, assessable_profits, total_tax_payable, getattr(company_type, "value", company_type),
        )

        return CITResult(
            company_size=CompanySize.OTHER,
            turnover=turnover,
            assessable_profits=assessable_profits,
            cit_rate=cit_rate,
            cit_amount=cit_amount,
            development_levy=development_levy,
            total_tax_before_top_up=total_tax_before_top_up,
            minimum_tax_top_up=minimum_tax_top_up,
            cfc_tax=cfc_tax,
            total_tax_payable=total_tax_payable,
            effective_tax_rate=effective_tax_rate,
            breakdown=tuple(breakdown),
        )

    def quick_estimate(self, turnover: float, assessable_profits: float) -> CITResult:
        """Estimate for a domestic company outside the minimum-ETR regime."""
        return self.calculate(turnover, assessable_profits)
