"""
Naija Tax Calculator - Input Validators

Boundary checks that run before a calculator is called. Each check returns
(is_valid, message); require_valid_tin raises InvalidTINException instead.
"""

import re
from typing import Tuple

from app.services.tax_calculators.rates import RESIDENCY_DAYS_THRESHOLD
from app.utils.error_handling import InvalidTINException


_TIN_SEPARATORS = re.compile(r"[\s-]")

ValidationResult = Tuple[bool, str]


def validate_tin(tin: str) -> ValidationResult:
    """
    Validate Tax Identification Number format.

    A valid TIN is 10 or 12 digits once spaces and hyphens are removed
    (e.g. 1234567890 or 12345678-1234).
    """
    if not tin or not tin.strip():
        return False, "TIN is required for tax compliance"

    cleaned = _TIN_SEPARATORS.sub("", tin)

    if not cleaned.isdigit():
        return False, "TIN must contain only numbers"

    if len(cleaned) not in (10, 12):
        return False, "TIN must be 10 or 12 digits"

    return True, "Valid TIN format"


def require_valid_tin(tin: str) -> str:
    """Return the TIN with separators removed, or raise InvalidTINException."""
    is_valid, message = validate_tin(tin)
    if not is_valid:
        raise InvalidTINException(tin, message)
    return _TIN_SEPARATORS.sub("", tin)


def determine_residency(days_in_nigeria: int, has_economic_ties: bool = False) -> Tuple[bool, str]:
    """
    Determine residency status from days present in Nigeria.

    Returns:
        Tuple of (is_resident, reason)
    """
    threshold = RESIDENCY_DAYS_THRESHOLD

    if days_in_nigeria >= threshold:
        return True, (
            f"Resident: Present in Nigeria for {days_in_nigeria} days "
            f"(≥{threshold} days threshold)"
        )

    if has_economic_ties:
        return True, "Resident: Strong economic/family ties to Nigeria"

    return False, (
        f"Non-Resident: Present in Nigeria for only {days_in_nigeria} days "
        f"(<{threshold} days threshold)"
    )

