"""
Naija Tax Calculator - Validator Tests

Unit tests for TIN and residency validation.
"""

import pytest

from app.utils.error_handling import ErrorCode, InvalidTINException
from app.utils.validators import (
    determine_residency,
    require_valid_tin,
    validate_tin,
)


class TestTINValidation:
    """Test Tax Identification Number format checks."""

    @pytest.mark.parametrize("tin", ["1234567890", "12345678-1234", "123456789012", " 12345 67890 "])
    def test_valid_formats(self, tin):
        assert validate_tin(tin) == (True, "Valid TIN format")

    @pytest.mark.parametrize("tin", ["", "   "])
    def test_required(self, tin):
        assert validate_tin(tin) == (False, "TIN is required for tax compliance")

    def test_non_numeric(self):
        assert validate_tin("12345ABCDE") == (False, "TIN must contain only numbers")

    @pytest.mark.parametrize("tin", ["123456789", "12345678901", "1234567890123"])
    def test_wrong_length(self, tin):
        assert validate_tin(tin) == (False, "TIN must be 10 or 12 digits")

    def test_require_valid_tin_strips_separators(self):
        assert require_valid_tin("12345678-1234") == "123456781234"

    def test_require_valid_tin_raises(self):
        with pytest.raises(InvalidTINException) as exc_info:
            require_valid_tin("123")

        assert exc_info.value.code == ErrorCode.INVALID_TIN
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "TIN must be 10 or 12 digits"


class TestResidency:
    """Test the 183-day residency rule."""

    def test_resident_by_days(self):
        is_resident, reason = determine_residency(200)

        assert is_resident is True
        assert reason == "Resident: Present in Nigeria for 200 days (≥183 days threshold)"

    def test_exactly_183_days(self):
        assert determine_residency(183)[0] is True

    def test_resident_by_economic_ties(self):
        assert determine_residency(30, has_economic_ties=True) == (
            True, "Resident: Strong economic/family ties to Nigeria"
        )

    def test_non_resident(self):
        is_resident, reason = determine_residency(182)

        assert is_resident is False
        assert reason.startswith("Non-Resident")

