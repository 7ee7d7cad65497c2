"""
Naija Tax Calculator - 2026 Rate Tables

Literal constants for the Nigeria Tax Act 2026 (signed June 26, 2025,
effective January 1, 2026):
- Nigeria Tax Act (NTA)
- Nigeria Tax Administration Act (NTAA)
- Nigeria Revenue Service (Establishment) Act
- Joint Revenue Board Act

Every calculator receives a TaxRates record at construction time. The default
is NIGERIA_2026_RATES; nothing in the application mutates it.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TaxBracket:
    """A single progressive tax band (annual amounts in Naira)."""
    minimum: float
    maximum: Optional[float]  # None means unbounded
    rate: float  # percentage
    label: str

    @property
    def is_unbounded(self) -> bool:
        return self.maximum is None

    @property
    def capacity(self) -> float:
        """Amount of income the band can absorb."""
        if self.is_unbounded:
            return float("inf")
        return self.maximum - self.minimum + 1


class DeductionType(str, Enum):
    """PIT deduction categories."""
    PENSION = "pension"
    NHIS = "nhis"
    NHF = "nhf"
    RENT_RELIEF = "rent_relief"
    JOB_LOSS = "job_loss"


class IncomeSourceType(str, Enum):
    """PIT income source categories (display only)."""
    SALARY = "salary"
    BONUS = "bonus"
    HONORARIUM = "honorarium"
    PRIZES = "prizes"
    DIGITAL_ASSETS = "digital_assets"
    RENTAL = "rental"
    OTHER = "other"


# ===========================================
# PERSONAL INCOME TAX (PIT/PAYE)
# ===========================================

PIT_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(0, 800_000, 0, "Tax-Exempt"),
    TaxBracket(800_001, 3_000_000, 15, "15% Bracket"),
    TaxBracket(3_000_001, 12_000_000, 18, "18% Bracket"),
    TaxBracket(12_000_001, 25_000_000, 21, "21% Bracket"),
    TaxBracket(25_000_001, 50_000_000, 23, "23% Bracket"),
    TaxBracket(50_000_001, None, 25, "25% Bracket (Maximum)"),
)

PIT_EXEMPT_THRESHOLD = 800_000
PIT_MAX_RATE = 25

RENT_RELIEF_MAX = 500_000
JOB_LOSS_COMPENSATION_EXEMPT_LIMIT = 50_000_000
PENSION_MAX_PERCENT = 8

# Days present in Nigeria to be treated as resident
RESIDENCY_DAYS_THRESHOLD = 183

# ===========================================
# CORPORATE INCOME TAX (CIT)
# ===========================================

SMALL_COMPANY_TURNOVER_LIMIT = 100_000_000
CIT_RATE = 30
SMALL_COMPANY_CIT_RATE = 0
DEVELOPMENT_LEVY_RATE = 4
MINIMUM_EFFECTIVE_TAX_RATE = 15  # OECD Pillar Two / GloBE

# ===========================================
# CAPITAL GAINS TAX (CGT)
# ===========================================

COMPANY_CGT_RATE = 30
SMALL_COMPANY_CGT_RATE = 0
INDIVIDUAL_CGT_MAX_RATE = 25

# ===========================================
# VALUE ADDED TAX (VAT)
# ===========================================

VAT_RATE = 7.5


@dataclass(frozen=True)
class TaxRates:
    """
    Immutable rate table for one tax year.

    Passed to each calculator constructor; defaults to NIGERIA_2026_RATES.
    """
    pit_brackets: Tuple[TaxBracket, ...] = PIT_BRACKETS
    pit_exempt_threshold: float = PIT_EXEMPT_THRESHOLD
    rent_relief_max: float = RENT_RELIEF_MAX
    job_loss_exempt_limit: float = JOB_LOSS_COMPENSATION_EXEMPT_LIMIT
    pension_max_percent: float = PENSION_MAX_PERCENT
    small_company_turnover_limit: float = SMALL_COMPANY_TURNOVER_LIMIT
    cit_rate: float = CIT_RATE
    small_company_cit_rate: float = SMALL_COMPANY_CIT_RATE
    development_levy_rate: float = DEVELOPMENT_LEVY_RATE
    minimum_effective_tax_rate: float = MINIMUM_EFFECTIVE_TAX_RATE
    company_cgt_rate: float = COMPANY_CGT_RATE
    small_company_cgt_rate: float = SMALL_COMPANY_CGT_RATE
    individual_cgt_max_rate: float = INDIVIDUAL_CGT_MAX_RATE
    vat_rate: float = VAT_RATE
    tax_year: int = 2026

    @property
    def fixed_deduction_caps(self) -> Dict[DeductionType, float]:
        """Absolute ceilings per deduction category. Pension is capped by percentage instead."""
        return {
            DeductionType.RENT_RELIEF: self.rent_relief_max,
            DeductionType.JOB_LOSS: self.job_loss_exempt_limit,
        }


NIGERIA_2026_RATES = TaxRates()


# ===========================================
# COMPLIANCE & ADMINISTRATION (informational)
# ===========================================

# 10 digits, or 8 digits-4 digits
TIN_PATTERN = re.compile(r"^[0-9]{10}$|^[0-9]{8}-[0-9]{4}$")

DISPUTE_RESOLUTION_DAYS = 90

FILING_DEADLINES = {
    "paye_monthly": "10th of following month",
    "annual_returns_individual": "March 31",
    "annual_returns_company": "6 months after accounting year-end",
    "vat_monthly": "21st of following month",
}

PENALTY_CATEGORIES = {
    "failure_to_register": "Heavy financial penalties and potential prosecution",
    "failure_to_file": "Penalty of ₦50,000 first month, ₦25,000 subsequent months",
    "late_payment": "Interest at prevailing CBN MPR + 5% per annum",
    "contract_without_tin": "Contract may be voided; both parties penalized",
}

INCOME_SOURCES = [
    {"id": IncomeSourceType.SALARY.value, "label": "Salary & Wages", "description": "Employment income"},
    {"id": IncomeSourceType.BONUS.value, "label": "Bonuses & Allowances", "description": "Performance bonuses, leave allowances, etc."},
    {"id": IncomeSourceType.HONORARIUM.value, "label": "Honorarium", "description": "Speaking fees, consulting fees"},
    {"id": IncomeSourceType.PRIZES.value, "label": "Prizes & Awards", "description": "Cash prizes, competition winnings"},
    {"id": IncomeSourceType.DIGITAL_ASSETS.value, "label": "Digital/Virtual Assets", "description": "Cryptocurrency, NFTs, etc."},
    {"id": IncomeSourceType.RENTAL.value, "label": "Rental Income", "description": "Income from property letting"},
    {"id": IncomeSourceType.OTHER.value, "label": "Other Income", "description": "Any other taxable income"},
]

DEDUCTION_TYPES = [
    {"id": DeductionType.PENSION.value, "label": "Pension Contribution", "description": "Employee contribution to pension scheme", "max_percent": 8},
    {"id": DeductionType.NHIS.value, "label": "NHIS Contribution", "description": "National Health Insurance Scheme", "max_percent": 5},
    {"id": DeductionType.NHF.value, "label": "NHF Contribution", "description": "National Housing Fund (2.5% of basic)", "max_percent": 2.5},
    {"id": DeductionType.RENT_RELIEF.value, "label": "Rent Relief", "description": "Up to ₦500,000", "max_amount": RENT_RELIEF_MAX},
    {"id": DeductionType.JOB_LOSS.value, "label": "Job Loss Compensation", "description": "Exempt up to ₦50 million", "max_amount": JOB_LOSS_COMPENSATION_EXEMPT_LIMIT},
]
