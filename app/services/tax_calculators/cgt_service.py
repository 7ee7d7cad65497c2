"""
Naija Tax Calculator - Capital Gains Tax Calculator

Capital Gains Tax (2026):
- Companies: flat 30% on the chargeable gain
- Small companies (turnover ≤ ₦100M) are exempt
- Individuals: gain taxed through the PIT progressive bands (max 25%),
  fully exempt up to the ₦800,000 PIT threshold
- Indirect offshore share transfers are chargeable like any other disposal
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from app.services.tax_calculators.cit_service import BreakdownItem
from app.services.tax_calculators.progressive import allocate
from app.services.tax_calculators.rates import NIGERIA_2026_RATES, TaxRates
from app.utils.formatters import format_naira, format_number


logger = logging.getLogger(__name__)


class TaxpayerType(str, Enum):
    """Who is disposing of the asset."""
    INDIVIDUAL = "individual"
    COMPANY = "company"


@dataclass(frozen=True)
class CGTResult:
    """Result of Capital Gains Tax calculation."""
    taxpayer_type: TaxpayerType
    sale_proceeds: float
    total_costs: float
    capital_gain: float
    cgt_rate: Union[float, str]
    cgt_amount: float
    net_proceeds: float
    effective_rate: float
    is_exempt: bool
    exempt_reason: Optional[str] = None
    breakdown: Tuple[BreakdownItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Format result for API response."""
        return {
            "taxpayer_type": self.taxpayer_type.value,
            "sale_proceeds": self.sale_proceeds,
            "total_costs": self.total_costs,
            "capital_gain": self.capital_gain,
            "cgt_rate": self.cgt_rate,
            "cgt_amount": self.cgt_amount,
            "net_proceeds": self.net_proceeds,
            "effective_rate": self.effective_rate,
            "is_exempt": self.is_exempt,
            "exempt_reason": self.exempt_reason,
            "breakdown": [item.to_dict() for item in self.breakdown],
        }


class CGTCalculator:
    """
    Calculator for Capital Gains Tax under the 2026 Tax Reform.

    Individuals reuse the PIT bracket table through progressive.allocate.
    """

    def __init__(self, rates: TaxRates = NIGERIA_2026_RATES):
        self.rates = rates

    @staticmethod
    def calculate_total_costs(
        acquisition_cost: float,
        improvement_costs: float = 0.0,
        transfer_costs: float = 0.0,
    ) -> float:
        """Total deductible costs of the disposal."""
        return acquisition_cost + improvement_costs + transfer_costs

    @staticmethod
    def _cost_lines(
        sale_proceeds: float,
        acquisition_cost: float,
        improvement_costs: float,
        transfer_costs: float,
        capital_gain: float,
        include_zero_costs: bool,
    ) -> List[BreakdownItem]:
        lines = [
            BreakdownItem("Sale Proceeds", sale_proceeds),
            BreakdownItem("Acquisition Cost", acquisition_cost),
        ]
        if include_zero_costs or improvement_costs > 0:
            lines.append(BreakdownItem("Improvement Costs", improvement_costs))
        if include_zero_costs or transfer_costs > 0:
            lines.append(BreakdownItem("Transfer Costs", transfer_costs))
        lines.append(BreakdownItem("Capital Gain", capital_gain))
        return lines

    def _exempt_result(
        self,
        taxpayer_type: TaxpayerType,
        sale_proceeds: float,
        acquisition_cost: float,
        improvement_costs: float,
        transfer_costs: float,
        capital_gain: float,
        cgt_rate: Union[float, str],
        reason: str,
        note: str,
    ) -> CGTResult:
        breakdown = self._cost_lines(
            sale_proceeds, acquisition_cost, improvement_costs, transfer_costs,
            capital_gain, include_zero_costs=True,
        )
        breakdown.append(BreakdownItem("CGT (Exempt)", 0.0, note=note))
        return CGTResult(
            taxpayer_type=taxpayer_type,
            sale_proceeds=sale_proceeds,
            total_costs=self.calculate_total_costs(acquisition_cost, improvement_costs, transfer_costs),
            capital_gain=capital_gain,
            cgt_rate=cgt_rate,
            cgt_amount=0.0,
            net_proceeds=sale_proceeds,
            effective_rate=0.0,
            is_exempt=True,
            exempt_reason=reason,
            breakdown=tuple(breakdown),
        )

    def calculate_company_cgt(
        self,
        sale_proceeds: float,
        acquisition_cost: float,
        improvement_costs: float = 0.0,
        transfer_costs: float = 0.0,
        company_turnover: Optional[float] = None,
        is_offshore_transfer: bool = False,
    ) -> CGTResult:
        """Flat-rate CGT for companies, with the small company exemption."""
        total_costs = self.calculate_total_costs(acquisition_cost, improvement_costs, transfer_costs)
        capital_gain = max(0.0, sale_proceeds - total_costs)
        limit = self.rates.small_company_turnover_limit

        if company_turnover is not None and company_turnover <= limit:
            return self._exempt_result(
                TaxpayerType.COMPANY, sale_proceeds, acquisition_cost,
                improvement_costs, transfer_costs, capital_gain,
                cgt_rate=self.rates.small_company_cgt_rate,
                reason=f"Small company (turnover ≤ {format_naira(limit, 0)}) - CGT exempt",
                note="Small company exemption",
            )

        rate = self.rates.company_cgt_rate
        cgt_amount = capital_gain * rate / 100

        breakdown = self._cost_lines(
            sale_proceeds, acquisition_cost, improvement_costs, transfer_costs,
            capital_gain, include_zero_costs=False,
        )
        breakdown.append(BreakdownItem(
            f"CGT ({rate:g}%)", cgt_amount,
            note="Includes indirect offshore share transfer" if is_offshore_transfer else None,
        ))

        return CGTResult(
            taxpayer_type=TaxpayerType.COMPANY,
            sale_proceeds=sale_proceeds,
            total_costs=total_costs,
            capital_gain=capital_gain,
            cgt_rate=rate,
            cgt_amount=cgt_amount,
            net_proceeds=sale_proceeds - cgt_amount,
            effective_rate=(cgt_amount / sale_proceeds * 100) if sale_proceeds > 0 else 0.0,
            is_exempt=False,
            breakdown=tuple(breakdown),
        )

    def calculate_individual_cgt(
        self,
        sale_proceeds: float,
        acquisition_cost: float,
        improvement_costs: float = 0.0,
        transfer_costs: float = 0.0,
    ) -> CGTResult:
        """Progressive CGT for individuals using the PIT bands."""
        total_costs = self.calculate_total_costs(acquisition_cost, improvement_costs, transfer_costs)
        capital_gain = max(0.0, sale_proceeds - total_costs)
        threshold = self.rates.pit_exempt_threshold

        if capital_gain <= threshold:
            return self._exempt_result(
                TaxpayerType.INDIVIDUAL, sale_proceeds, acquisition_cost,
                improvement_costs, transfer_costs, capital_gain,
                cgt_rate="0%",
                reason=(
                    f"Capital gain of {format_naira(capital_gain, 0)} is below "
                    f"{format_naira(threshold, 0)} threshold"
                ),
                note="Below exempt threshold",
            )

        allocation = allocate(capital_gain, self.rates.pit_brackets, threshold)
        cgt_amount = allocation.total_tax

        breakdown = self._cost_lines(
            sale_proceeds, acquisition_cost, improvement_costs, transfer_costs,
            capital_gain, include_zero_costs=False,
        )
        for row in allocation.breakdown:
            if row.taxable_in_bracket > 0:
                breakdown.append(BreakdownItem(
                    f"Tax @ {row.bracket.rate:g}%", row.tax_for_bracket,
                    rate=row.bracket.rate,
                    note=f"On ₦{format_number(row.taxable_in_bracket)}",
                ))
        breakdown.append(BreakdownItem("Total CGT", cgt_amount))

        effective_rate = cgt_amount / sale_proceeds * 100 if sale_proceeds > 0 else 0.0

        return CGTResult(
            taxpayer_type=TaxpayerType.INDIVIDUAL,
            sale_proceeds=sale_proceeds,
            total_costs=total_costs,
            capital_gain=capital_gain,
            cgt_rate=f"Progressive (max {self.rates.individual_cgt_max_rate:g}%)",
            cgt_amount=cgt_amount,
            net_proceeds=sale_proceeds - cgt_amount,
            effective_rate=effective_rate,
            is_exempt=False,
            breakdown=tuple(breakdown),
        )

    def calculate(
        self,
        taxpayer_type: Union[TaxpayerType, str],
        sale_proceeds: float,
        acquisition_cost: float,
        improvement_costs: float = 0.0,
        transfer_costs: float = 0.0,
        company_turnover: Optional[float] = None,
        is_offshore_transfer: bool = False,
    ) -> CGTResult:
        """
        Calculate Capital Gains Tax on an asset disposal.

        Args:
            taxpayer_type: individual or company
            sale_proceeds: Proceeds from the disposal
            acquisition_cost: Original cost of the asset
            improvement_costs: Capital improvements to the asset
            transfer_costs: Costs of the transfer (legal, agency, etc.)
            company_turnover: Company's annual turnover, for the small company test
            is_offshore_transfer: Indirect offshore share transfer (note only)

        Returns:
            CGTResult with itemized breakdown
        """
        if taxpayer_type == TaxpayerType.COMPANY:
            result = self.calculate_company_cgt(
                sale_proceeds, acquisition_cost, improvement_costs, transfer_costs,
                company_turnover, is_offshore_transfer,
            )
        else:
            result = self.calculate_individual_cgt(
                sale_proceeds, acquisition_cost, improvement_costs, transfer_costs,
            )

        logger.debug(
            "CGT calculated: type=%s gain=%s cgt=%s exempt=%s",
            result.taxpayer_type.value, result.capital_gain, result.cgt_amount, result.is_exempt,
        )
        return result

    def quick_estimate(
        self,
        taxpayer_type: Union[TaxpayerType, str],
        sale_proceeds: float,
        acquisition_cost: float,
    ) -> CGTResult:
        """Estimate with no improvement or transfer costs."""
        return self.calculate(taxpayer_type, sale_proceeds, acquisition_cost)
