"""
Naija Tax Calculator - Tax Schemas

Pydantic schemas for calculator requests and responses.
All monetary inputs are annual Naira amounts and must be non-negative.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.services.tax_calculators import (
    CompanyType,
    IncomeSourceType,
    TaxpayerType,
    VATCalculationType,
)


# ===========================================
# SHARED
# ===========================================

class BreakdownLine(BaseModel):
    """One display line of a CIT or CGT computation."""
    label: str
    amount: float
    rate: Optional[float] = None
    note: Optional[str] = None


class BracketBreakdownItem(BaseModel):
    """Amount allocated to one progressive band."""
    label: str
    minimum: float
    maximum: Optional[float] = None
    rate: float
    taxable_in_bracket: float
    tax_for_bracket: float


# ===========================================
# PERSONAL INCOME TAX
# ===========================================

class IncomeSourceInput(BaseModel):
    source_type: IncomeSourceType = IncomeSourceType.SALARY
    amount: float = Field(..., ge=0, description="Annual amount in Naira")


class DeductionInput(BaseModel):
    """Claimed deduction. Unrecognised types are accepted and left uncapped."""
    deduction_type: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., ge=0)


class PITCalculateRequest(BaseModel):
    """Request to calculate personal income tax."""
    incomes: List[IncomeSourceInput] = Field(default_factory=list)
    deductions: List[DeductionInput] = Field(default_factory=list)
    is_resident: bool = True


class AppliedDeductionResponse(BaseModel):
    deduction_type: str
    claimed: float
    amount: float
    capped: bool


class PITResponse(BaseModel):
    """Personal income tax result."""
    gross_income: float
    total_deductions: float
    taxable_income: float
    total_tax: float
    net_take_home: float
    effective_rate: float
    is_exempt: bool
    exempt_reason: Optional[str] = None
    bracket_breakdown: List[BracketBreakdownItem]
    monthly_tax: float
    monthly_net_pay: float
    applied_deductions: List[AppliedDeductionResponse] = Field(default_factory=list)
    is_resident: bool = True


# ===========================================
# COMPANY INCOME TAX
# ===========================================

class CITCalculateRequest(BaseModel):
    """Request to calculate company income tax."""
    turnover: float = Field(..., ge=0, description="Annual gross turnover")
    assessable_profits: float = Field(..., ge=0)
    company_type: CompanyType = CompanyType.DOMESTIC
    is_multinational_subject: bool = Field(
        False, description="Subject to the 15% minimum effective tax rate"
    )
    foreign_profits: float = Field(0.0, ge=0)
    distributed_foreign_profits: float = Field(0.0, ge=0)


class CITResponse(BaseModel):
    """Company income tax result."""
    company_size: str
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
    breakdown: List[BreakdownLine]


# ===========================================
# CAPITAL GAINS TAX
# ===========================================

class CGTCalculateRequest(BaseModel):
    """Request to calculate capital gains tax."""
    taxpayer_type: TaxpayerType = TaxpayerType.INDIVIDUAL
    sale_proceeds: float = Field(..., ge=0)
    acquisition_cost: float = Field(..., ge=0)
    improvement_costs: float = Field(0.0, ge=0)
    transfer_costs: float = Field(0.0, ge=0)
    company_turnover: Optional[float] = Field(
        None, ge=0, description="Companies only: used for the small company exemption"
    )
    is_offshore_transfer: bool = False


class CGTResponse(BaseModel):
    """Capital gains tax result."""
    taxpayer_type: str
    sale_proceeds: float
    total_costs: float
    capital_gain: float
    cgt_rate: Union[float, str]
    cgt_amount: float
    net_proceeds: float
    effective_rate: float
    is_exempt: bool
    exempt_reason: Optional[str] = None
    breakdown: List[BreakdownLine]


# ===========================================
# VALUE ADDED TAX
# ===========================================

class VATCalculateRequest(BaseModel):
    """Add VAT to a net amount, or extract it from a gross amount."""
    amount: float = Field(..., ge=0)
    calculation_type: VATCalculationType = VATCalculationType.EXCLUSIVE


class VATResponse(BaseModel):
    original_amount: float
    vat_rate: float
    net_amount: float
    vat_amount: float
    gross_amount: float
    calculation_type: str


class VATBusinessRequest(BaseModel):
    """Output VAT collected and input VAT paid for a period."""
    output_vat: float = Field(..., ge=0)
    input_vat: float = Field(..., ge=0)


class VATBusinessResponse(BaseModel):
    output_vat: float
    input_vat: float
    net_vat: float
    is_payable: bool
    is_refundable: bool
    explanation: str


class VATLineItemInput(BaseModel):
    description: str = Field("", max_length=200)
    amount: float = Field(..., ge=0)
    is_vat_exempt: bool = False


class VATMultiItemRequest(BaseModel):
    items: List[VATLineItemInput] = Field(..., min_length=1)


class VATLineItemResponse(BaseModel):
    description: str
    amount: float
    vat_amount: float
    total_with_vat: float
    is_exempt: bool


class VATMultiItemResponse(BaseModel):
    items: List[VATLineItemResponse]
    total_net: float
    total_vat: float
    grand_total: float


# ===========================================
# REFERENCE DATA
# ===========================================

class TaxBracketResponse(BaseModel):
    label: str
    minimum: float
    maximum: Optional[float] = None
    rate: float
    range_label: str


class TaxRatesResponse(BaseModel):
    """Flat rates and caps in force for the tax year."""
    tax_year: int
    pit_exempt_threshold: float
    pit_max_rate: float
    rent_relief_max: float
    job_loss_exempt_limit: float
    pension_max_percent: float
    small_company_turnover_limit: float
    cit_rate: float
    small_company_cit_rate: float
    development_levy_rate: float
    minimum_effective_tax_rate: float
    company_cgt_rate: float
    small_company_cgt_rate: float
    individual_cgt_max_rate: float
    vat_rate: float
    income_sources: List[Dict[str, Union[str, float]]]
    deduction_types: List[Dict[str, Union[str, float]]]


class ComplianceInfoResponse(BaseModel):
    filing_deadlines: Dict[str, str]
    penalties: Dict[str, str]
    dispute_resolution_days: int
    residency_days_threshold: int
    tin_format: str


# ===========================================
# VALIDATION
# ===========================================

class TINValidationRequest(BaseModel):
    tin: str = Field("", max_length=50)


class TINValidationResponse(BaseModel):
    tin: str
    is_valid: bool
    message: str
    normalized_tin: Optional[str] = Field(None, description="Digits only, when valid")


class ResidencyRequest(BaseModel):
    days_in_nigeria: int = Field(..., ge=0, le=366)
    has_economic_ties: bool = False


class ResidencyResponse(BaseModel):
    is_resident: bool
    reason: str
    threshold_days: int
