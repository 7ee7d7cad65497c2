"""
Naija Tax Calculator - Tax Calculators Package

Tax calculation engines for the Nigeria Tax Act 2026.

Modules:
- rates: immutable 2026 rate record and compliance reference tables
- progressive: bracket allocator shared by PIT and individual CGT
- pit_service: Personal Income Tax (0%/15%/18%/21%/23%/25%)
- cit_service: Company Income Tax, Development Levy, minimum ETR, CFC tax
- cgt_service: Capital Gains Tax for companies and individuals
- vat_service: VAT at 7.5% (inclusive, exclusive, business, multi-item)
"""

from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from app.services.tax_calculators.rates import (
    NIGERIA_2026_RATES,
    PIT_BRACKETS,
    DeductionType,
    IncomeSourceType,
    TaxBracket,
    TaxRates,
)
from app.services.tax_calculators.progressive import (
    AllocationResult,
    BracketAllocation,
    allocate,
)
from app.services.tax_calculators.pit_service import (
    AppliedDeduction,
    Deduction,
    IncomeSource,
    PITCalculator,
    PITResult,
)
from app.services.tax_calculators.cit_service import (
    BreakdownItem,
    CITCalculator,
    CITResult,
    CompanySize,
    CompanyType,
)
from app.services.tax_calculators.cgt_service import CGTCalculator, CGTResult, TaxpayerType
from app.services.tax_calculators.vat_service import (
    VATBusinessResult,
    VATCalculationType,
    VATCalculator,
    VATLineItem,
    VATMultiItemResult,
    VATResult,
)


class CalculationType(str, Enum):
    """Kinds of calculation that can be stored and re-run."""
    PIT = "pit"
    CIT = "cit"
    CGT = "cgt"
    VAT = "vat"


# ===========================================
# CONVENIENCE FUNCTIONS
# ===========================================

def calculate_pit(annual_income: float, deductions: Optional[Mapping[str, float]] = None) -> float:
    """
    Calculate PIT on a single annual income.

    Args:
        annual_income: Gross annual income
        deductions: Optional mapping of deduction type to claimed amount

    Returns:
        Total annual tax
    """
    claimed = [Deduction(tag, amount) for tag, amount in (deductions or {}).items()]
    incomes = [IncomeSource(IncomeSourceType.SALARY, annual_income)]
    return PITCalculator().calculate(incomes, claimed).total_tax


def calculate_cit(turnover: float, assessable_profits: float) -> float:
    """
    Calculate total company tax (CIT + Development Levy).

    - 0%: Turnover ≤₦100M (small company)
    - 30% CIT + 4% levy: Turnover >₦100M
    """
    return CITCalculator().quick_estimate(turnover, assessable_profits).total_tax_payable


def calculate_cgt(
    taxpayer_type: Union[TaxpayerType, str],
    sale_proceeds: float,
    acquisition_cost: float,
) -> float:
    """Capital Gains Tax with no improvement or transfer costs."""
    return CGTCalculator().quick_estimate(taxpayer_type, sale_proceeds, acquisition_cost).cgt_amount


def calculate_vat(amount: float, is_exempt: bool = False) -> float:
    """
    Calculate VAT on a net amount.

    Returns:
        VAT amount (7.5% or 0 if exempt)
    """
    if is_exempt:
        return 0.0
    return VATCalculator().quick_exclusive(amount).vat_amount


def calculate_business_vat(output_vat: float, input_vat: float) -> float:
    """Net VAT position; negative means a refund is due."""
    return VATCalculator().calculate_business(output_vat, input_vat).net_vat


def get_pit_band(annual_income: float) -> str:
    """
    Get the label of the highest PIT band an income reaches.

    Args:
        annual_income: Annual taxable income

    Returns:
        Band label, e.g. "Tax-Exempt" or "18% Bracket"
    """
    for bracket in PIT_BRACKETS:
        if bracket.maximum is None or annual_income <= bracket.maximum:
            return bracket.label
    return PIT_BRACKETS[-1].label


# ===========================================
# STORED CALCULATION DISPATCH
# ===========================================

def _run_pit(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    incomes = [
        IncomeSource(item.get("source_type", IncomeSourceType.OTHER.value), float(item["amount"]))
        for item in inputs.get("incomes", [])
    ]
    deductions = [
        Deduction(item["deduction_type"], float(item["amount"]))
        for item in inputs.get("deductions", [])
    ]
    result = PITCalculator().calculate(incomes, deductions, inputs.get("is_resident", True))
    return result.to_dict()


def _run_cit(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    result = CITCalculator().calculate(
        turnover=float(inputs["turnover"]),
        assessable_profits=float(inputs["assessable_profits"]),
        company_type=CompanyType(inputs.get("company_type", CompanyType.DOMESTIC.value)),
        is_multinational_subject=bool(inputs.get("is_multinational_subject", False)),
        foreign_profits=float(inputs.get("foreign_profits", 0.0)),
        distributed_foreign_profits=float(inputs.get("distributed_foreign_profits", 0.0)),
    )
    return result.to_dict()


def _run_cgt(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    turnover = inputs.get("company_turnover")
    result = CGTCalculator().calculate(
        taxpayer_type=TaxpayerType(inputs.get("taxpayer_type", TaxpayerType.INDIVIDUAL.value)),
        sale_proceeds=float(inputs["sale_proceeds"]),
        acquisition_cost=float(inputs["acquisition_cost"]),
        improvement_costs=float(inputs.get("improvement_costs", 0.0)),
        transfer_costs=float(inputs.get("transfer_costs", 0.0)),
        company_turnover=float(turnover) if turnover is not None else None,
        is_offshore_transfer=bool(inputs.get("is_offshore_transfer", False)),
    )
    return result.to_dict()


def _run_vat(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    calculator = VATCalculator()
    if "items" in inputs:
        items: Iterable[Mapping[str, Any]] = inputs["items"]
        lines = [
            VATLineItem(
                description=item.get("description", ""),
                amount=float(item["amount"]),
                is_vat_exempt=bool(item.get("is_vat_exempt", False)),
            )
            for item in items
        ]
        return calculator.calculate_multi_item(lines).to_dict()
    if "output_vat" in inputs:
        return calculator.calculate_business(
            float(inputs["output_vat"]), float(inputs.get("input_vat", 0.0))
        ).to_dict()
    mode = VATCalculationType(inputs.get("calculation_type", VATCalculationType.EXCLUSIVE.value))
    return calculator.calculate_simple(float(inputs["amount"]), mode).to_dict()


_RUNNERS = {
    CalculationType.PIT: _run_pit,
    CalculationType.CIT: _run_cit,
    CalculationType.CGT: _run_cgt,
    CalculationType.VAT: _run_vat,
}


def run_calculation(
    calculation_type: Union[CalculationType, str],
    inputs: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Run a calculation from a plain input mapping (as stored in history).

    VAT inputs select their mode by shape: "items" for multi-item,
    "output_vat" for the business position, otherwise "amount".

    Raises:
        ValueError: unknown calculation type or malformed inputs
        KeyError: a required input is missing
    """
    runner = _RUNNERS[CalculationType(calculation_type)]
    return runner(inputs)


__all__ = [
    # Rates
    "NIGERIA_2026_RATES",
    "PIT_BRACKETS",
    "TaxBracket",
    "TaxRates",
    "DeductionType",
    "IncomeSourceType",
    # Allocator
    "allocate",
    "AllocationResult",
    "BracketAllocation",
    # PIT
    "PITCalculator",
    "PITResult",
    "IncomeSource",
    "Deduction",
    "AppliedDeduction",
    # CIT
    "CITCalculator",
    "CITResult",
    "CompanySize",
    "CompanyType",
    "BreakdownItem",
    # CGT
    "CGTCalculator",
    "CGTResult",
    "TaxpayerType",
    # VAT
    "VATCalculator",
    "VATResult",
    "VATBusinessResult",
    "VATMultiItemResult",
    "VATLineItem",
    "VATCalculationType",
    # Dispatch
    "CalculationType",
    "run_calculation",
    # Convenience functions
    "calculate_pit",
    "calculate_cit",
    "calculate_cgt",
    "calculate_vat",
    "calculate_business_vat",
    "get_pit_band",
]
