"""
Naija Tax Calculator - Tax Router

Stateless calculator endpoints for the Nigeria Tax Act 2026:
- Personal Income Tax (PIT) with deductions and bracket breakdown
- Company Income Tax (CIT), Development Levy, minimum ETR and CFC tax
- Capital Gains Tax (CGT) for individuals and companies
- VAT (simple, business net position, multi-item)
- Rate tables, compliance reference data, TIN and residency checks
"""

from fastapi import APIRouter, Query
from typing import List

from app.schemas.tax import (
    CGTCalculateRequest,
    CGTResponse,
    CITCalculateRequest,
    CITResponse,
    ComplianceInfoResponse,
    PITCalculateRequest,
    PITResponse,
    ResidencyRequest,
    ResidencyResponse,
    TaxBracketResponse,
    TaxRatesResponse,
    TINValidationRequest,
    TINValidationResponse,
    VATBusinessRequest,
    VATBusinessResponse,
    VATCalculateRequest,
    VATMultiItemRequest,
    VATMultiItemResponse,
    VATResponse,
)
from app.services.tax_calculators import (
    NIGERIA_2026_RATES,
    CGTCalculator,
    CITCalculator,
    Deduction,
    IncomeSource,
    PITCalculator,
    VATCalculator,
    VATLineItem,
)
from app.services.tax_calculators.rates import (
    DEDUCTION_TYPES,
    DISPUTE_RESOLUTION_DAYS,
    FILING_DEADLINES,
    INCOME_SOURCES,
    PENALTY_CATEGORIES,
    PIT_MAX_RATE,
    RESIDENCY_DAYS_THRESHOLD,
    TIN_PATTERN,
)
from app.utils.formatters import format_bracket_range
from app.utils.validators import determine_residency, require_valid_tin, validate_tin


router = APIRouter()

rates = NIGERIA_2026_RATES


# ===========================================
# PERSONAL INCOME TAX
# ===========================================

@router.post(
    "/pit/calculate",
    response_model=PITResponse,
    summary="Calculate personal income tax",
    tags=["PIT"],
)
async def calculate_pit(request: PITCalculateRequest):
    """
    Calculate annual PIT from income sources and deductions.

    Deductions are capped per category (pension 8% of gross, rent relief
    ₦500,000, job loss compensation ₦50M) and the total never exceeds gross income.
    """
    incomes = [IncomeSource(item.source_type, item.amount) for item in request.incomes]
    deductions = [Deduction(item.deduction_type, item.amount) for item in request.deductions]

    result = PITCalculator(rates).calculate(incomes, deductions, request.is_resident)
    return result.to_dict()


@router.get(
    "/pit/estimate",
    response_model=PITResponse,
    summary="Quick PIT estimate",
    tags=["PIT"],
)
async def estimate_pit(
    annual_income: float = Query(..., ge=0, description="Gross annual income in Naira"),
):
    """Estimate PIT for a single salary with no deductions."""
    return PITCalculator(rates).quick_estimate(annual_income).to_dict()


@router.get(
    "/brackets",
    response_model=List[TaxBracketResponse],
    summary="PIT bracket table",
    tags=["Reference"],
)
async def get_brackets():
    return [
        TaxBracketResponse(
            label=bracket.label,
            minimum=bracket.minimum,
            maximum=bracket.maximum,
            rate=bracket.rate,
            range_label=format_bracket_range(bracket.minimum, bracket.maximum),
        )
        for bracket in rates.pit_brackets
    ]


# ===========================================
# COMPANY INCOME TAX
# ===========================================

@router.post(
    "/cit/calculate",
    response_model=CITResponse,
    summary="Calculate company income tax",
    tags=["CIT"],
)
async def calculate_cit(request: CITCalculateRequest):
    """
    Calculate CIT and Development Levy.

    Small companies (turnover ≤ ₦100M) pay nothing. Multinationals subject to
    the minimum effective tax rate are topped up to 15% of assessable profits.
    """
    result = CITCalculator(rates).calculate(
        turnover=request.turnover,
        assessable_profits=request.assessable_profits,
        company_type=request.company_type,
        is_multinational_subject=request.is_multinational_subject,
        foreign_profits=request.foreign_profits,
        distributed_foreign_profits=request.distributed_foreign_profits,
    )
    return result.to_dict()


# ===========================================
# CAPITAL GAINS TAX
# ===========================================

@router.post(
    "/cgt/calculate",
    response_model=CGTResponse,
    summary="Calculate capital gains tax",
    tags=["CGT"],
)
async def calculate_cgt(request: CGTCalculateRequest):
    result = CGTCalculator(rates).calculate(
        taxpayer_type=request.taxpayer_type,
        sale_proceeds=request.sale_proceeds,
        acquisition_cost=request.acquisition_cost,
        improvement_costs=request.improvement_costs,
        transfer_costs=request.transfer_costs,
        company_turnover=request.company_turnover,
        is_offshore_transfer=request.is_offshore_transfer,
    )
    return result.to_dict()


# ===========================================
# VALUE ADDED TAX
# ===========================================

@router.post(
    "/vat/calculate",
    response_model=VATResponse,
    summary="Calculate VAT on an amount",
    tags=["VAT"],
)
async def calculate_vat(request: VATCalculateRequest):
    """Exclusive adds 7.5% on top; inclusive extracts VAT from the gross amount."""
    return VATCalculator(rates).calculate_simple(request.amount, request.calculation_type).to_dict()


@router.post(
    "/vat/business",
    response_model=VATBusinessResponse,
    summary="Net VAT payable or refundable",
    tags=["VAT"],
)
async def calculate_business_vat(request: VATBusinessRequest):
    return VATCalculator(rates).calculate_business(request.output_vat, request.input_vat).to_dict()


@router.post(
    "/vat/multi-item",
    response_model=VATMultiItemResponse,
    summary="VAT for an itemized invoice",
    tags=["VAT"],
)
async def calculate_multi_item_vat(request: VATMultiItemRequest):
    items = [
        VATLineItem(item.description, item.amount, item.is_vat_exempt)
        for item in request.items
    ]
    return VATCalculator(rates).calculate_multi_item(items).to_dict()


# ===========================================
# REFERENCE DATA
# ===========================================

@router.get(
    "/rates",
    response_model=TaxRatesResponse,
    summary="Tax rates and caps",
    tags=["Reference"],
)
async def get_rates():
    return TaxRatesResponse(
        tax_year=rates.tax_year,
        pit_exempt_threshold=rates.pit_exempt_threshold,
        pit_max_rate=PIT_MAX_RATE,
        rent_relief_max=rates.rent_relief_max,
        job_loss_exempt_limit=rates.job_loss_exempt_limit,
        pension_max_percent=rates.pension_max_percent,
        small_company_turnover_limit=rates.small_company_turnover_limit,
        cit_rate=rates.cit_rate,
        small_company_cit_rate=rates.small_company_cit_rate,
        development_levy_rate=rates.development_levy_rate,
        minimum_effective_tax_rate=rates.minimum_effective_tax_rate,
        company_cgt_rate=rates.company_cgt_rate,
        small_company_cgt_rate=rates.small_company_cgt_rate,
        individual_cgt_max_rate=rates.individual_cgt_max_rate,
        vat_rate=rates.vat_rate,
        income_sources=INCOME_SOURCES,
        deduction_types=DEDUCTION_TYPES,
    )


@router.get(
    "/compliance",
    response_model=ComplianceInfoResponse,
    summary="Filing deadlines and penalties",
    tags=["Reference"],
)
async def get_compliance_info():
    return ComplianceInfoResponse(
        filing_deadlines=FILING_DEADLINES,
        penalties=PENALTY_CATEGORIES,
        dispute_resolution_days=DISPUTE_RESOLUTION_DAYS,
        residency_days_threshold=RESIDENCY_DAYS_THRESHOLD,
        tin_format=TIN_PATTERN.pattern,
    )


# ===========================================
# VALIDATION
# ===========================================

@router.post(
    "/validate/tin",
    response_model=TINValidationResponse,
    summary="Validate a TIN",
    tags=["Compliance"],
)
async def validate_tin_format(request: TINValidationRequest):
    """Check TIN format (10 or 12 digits). An invalid TIN is a normal response, not an error."""
    is_valid, message = validate_tin(request.tin)
    return TINValidationResponse(
        tin=request.tin,
        is_valid=is_valid,
        message=message,
        normalized_tin=require_valid_tin(request.tin) if is_valid else None,
    )


@router.post(
    "/residency",
    response_model=ResidencyResponse,
    summary="Determine tax residency",
    tags=["Compliance"],
)
async def check_residency(request: ResidencyRequest):
    is_resident, reason = determine_residency(request.days_in_nigeria, request.has_economic_ties)
    return ResidencyResponse(
        is_resident=is_resident,
        reason=reason,
        threshold_days=RESIDENCY_DAYS_THRESHOLD,
    )
