"""
Naija Tax Calculator - Tax Calculator Tests

Unit tests for Nigeria 2026 Tax Reform calculations.
"""

import pytest

from app.services.tax_calculators import (
    CGTCalculator,
    CITCalculator,
    CompanySize,
    Deduction,
    DeductionType,
    IncomeSource,
    IncomeSourceType,
    PITCalculator,
    TaxBracket,
    TaxpayerType,
    VATCalculationType,
    VATCalculator,
    VATLineItem,
    allocate,
    calculate_business_vat,
    calculate_cgt,
    calculate_cit,
    calculate_pit,
    calculate_vat,
    get_pit_band,
    run_calculation,
)
from app.services.tax_calculators.rates import NIGERIA_2026_RATES, PIT_BRACKETS, TaxRates


def salary(amount: float) -> list:
    return [IncomeSource(IncomeSourceType.SALARY, amount)]


class TestProgressiveAllocator:
    """Test the bracket allocator shared by PIT and individual CGT."""

    def test_zero_amount_lists_every_band(self):
        result = allocate(0)

        assert result.total_tax == 0
        assert len(result.breakdown) == len(PIT_BRACKETS)
        assert all(row.taxable_in_bracket == 0 for row in result.breakdown)

    def test_first_taxable_band(self):
        """₦1,000,000: ₦800,000 exempt, ₦200,000 at 15%."""
        result = allocate(1_000_000)

        assert result.total_tax == pytest.approx(30_000)
        assert result.breakdown[0].taxable_in_bracket == pytest.approx(800_000)
        assert result.breakdown[0].tax_for_bracket == 0
        assert result.breakdown[1].taxable_in_bracket == pytest.approx(200_000)
        assert result.breakdown[1].tax_for_bracket == pytest.approx(30_000)
        assert all(row.taxable_in_bracket == 0 for row in result.breakdown[2:])

    def test_spans_two_taxable_bands(self):
        """₦5,000,000: ₦2.2M at 15% + ₦2M at 18%."""
        result = allocate(5_000_000)

        assert result.breakdown[1].taxable_in_bracket == pytest.approx(2_200_000)
        assert result.breakdown[2].taxable_in_bracket == pytest.approx(2_000_000)
        assert result.total_tax == pytest.approx(330_000 + 360_000)

    def test_reaches_top_band(self):
        """₦60M fills every band and puts ₦10M in the unbounded 25% band."""
        result = allocate(60_000_000)

        assert result.breakdown[-1].taxable_in_bracket == pytest.approx(10_000_000)
        assert result.total_tax == pytest.approx(
            330_000 + 1_620_000 + 2_730_000 + 5_750_000 + 2_500_000
        )

    @pytest.mark.parametrize("amount", [0, 799_999, 800_000, 800_001, 3_000_000, 12_500_000, 75_000_000])
    def test_total_is_sum_of_breakdown(self, amount):
        result = allocate(amount)

        assert result.total_tax == sum(row.tax_for_bracket for row in result.breakdown)

    @pytest.mark.parametrize("amount", [250_000, 1_000_000, 5_000_000, 40_000_000])
    def test_allocated_amounts_cover_taxable_amount(self, amount):
        result = allocate(amount)

        assert sum(row.taxable_in_bracket for row in result.breakdown) == pytest.approx(amount)

    def test_monotonic(self):
        amounts = [0, 500_000, 800_000, 900_000, 3_000_000, 3_000_001, 20_000_000, 50_000_000, 90_000_000]
        totals = [allocate(amount).total_tax for amount in amounts]

        assert totals == sorted(totals)

    def test_custom_brackets(self):
        brackets = (
            TaxBracket(0, 100, 0, "Exempt"),
            TaxBracket(101, 200, 10, "10%"),
            TaxBracket(201, None, 20, "20%"),
        )
        result = allocate(250, brackets, exempt_threshold=100)

        assert [row.taxable_in_bracket for row in result.breakdown] == [100, 100, 50]
        assert result.total_tax == pytest.approx(20)

    def test_breakdown_row_to_dict(self):
        row = allocate(1_000_000).breakdown[1].to_dict()

        assert row["label"] == "15% Bracket"
        assert row["rate"] == 15
        assert row["maximum"] == 3_000_000


class TestPITCalculation:
    """Test personal income tax per Nigeria 2026 Tax Reform."""

    def setup_method(self):
        self.calculator = PITCalculator()

    def test_one_million_salary(self):
        """₦1,000,000 taxable: 200,000 × 15% = ₦30,000."""
        result = self.calculator.calculate(salary(1_000_000))

        assert result.taxable_income == pytest.approx(1_000_000)
        assert result.total_tax == pytest.approx(30_000)
        assert result.net_take_home == pytest.approx(970_000)
        assert result.effective_rate == pytest.approx(3.0)
        assert result.monthly_tax == pytest.approx(2_500)
        assert result.is_exempt is False
        assert len(result.bracket_breakdown) == len(PIT_BRACKETS)

    def test_below_threshold_is_exempt(self):
        result = self.calculator.calculate(salary(500_000))

        assert result.is_exempt is True
        assert result.total_tax == 0
        assert result.effective_rate == 0
        assert result.exempt_reason == "Annual income of 500,000 is below ₦800,000 threshold"
        assert len(result.bracket_breakdown) == 1
        assert result.bracket_breakdown[0].taxable_in_bracket == pytest.approx(500_000)
        assert result.monthly_net_pay == pytest.approx(500_000 / 12)

    def test_exactly_at_threshold_is_exempt(self):
        result = self.calculator.calculate(salary(800_000))

        assert result.is_exempt is True
        assert result.total_tax == 0

    def test_no_income(self):
        result = self.calculator.calculate([])

        assert result.gross_income == 0
        assert result.is_exempt is True

    def test_multiple_income_sources_are_summed(self):
        incomes = [
            IncomeSource(IncomeSourceType.SALARY, 600_000),
            IncomeSource(IncomeSourceType.BONUS, 300_000),
            IncomeSource("rental", 100_000),
        ]
        result = self.calculator.calculate(incomes)

        assert result.gross_income == pytest.approx(1_000_000)
        assert result.total_tax == pytest.approx(30_000)

    def test_deduction_caps(self):
        """Pension capped at 8% of gross, rent relief at ₦500,000, NHIS uncapped."""
        deductions = [
            Deduction(DeductionType.PENSION, 1_000_000),
            Deduction(DeductionType.RENT_RELIEF, 600_000),
            Deduction(DeductionType.NHIS, 100_000),
        ]
        result = self.calculator.calculate(salary(10_000_000), deductions)

        assert result.total_deductions == pytest.approx(800_000 + 500_000 + 100_000)
        assert result.taxable_income == pytest.approx(8_600_000)
        assert result.total_tax == pytest.approx(330_000 + 5_600_000 * 0.18)

        pension, rent, nhis = result.applied_deductions
        assert pension.capped is True and pension.amount == pytest.approx(800_000)
        assert rent.capped is True and rent.amount == pytest.approx(500_000)
        assert nhis.capped is False and nhis.amount == pytest.approx(100_000)

    def test_job_loss_compensation_cap(self):
        result = self.calculator.calculate(
            salary(100_000_000), [Deduction(DeductionType.JOB_LOSS, 60_000_000)]
        )

        assert result.total_deductions == pytest.approx(50_000_000)

    def test_unknown_deduction_is_uncapped(self):
        result = self.calculator.calculate(
            salary(2_000_000), [Deduction("life_insurance", 900_000)]
        )

        assert result.total_deductions == pytest.approx(900_000)
        assert result.applied_deductions[0].deduction_type == "life_insurance"
        assert result.applied_deductions[0].capped is False

    def test_deductions_never_exceed_gross(self):
        result = self.calculator.calculate(
            salary(1_000_000), [Deduction(DeductionType.NHF, 2_000_000)]
        )

        assert result.total_deductions == pytest.approx(1_000_000)
        assert result.taxable_income == 0
        assert result.is_exempt is True

    def test_residency_flag_does_not_change_tax(self):
        resident = self.calculator.calculate(salary(5_000_000), is_resident=True)
        non_resident = self.calculator.calculate(salary(5_000_000), is_resident=False)

        assert non_resident.total_tax == resident.total_tax
        assert non_resident.is_resident is False

    def test_effective_rate(self):
        result = self.calculator.calculate(salary(5_000_000))

        assert result.effective_rate == pytest.approx(690_000 / 5_000_000 * 100)

    def test_quick_estimate(self):
        assert self.calculator.quick_estimate(1_000_000).total_tax == pytest.approx(30_000)

    def test_to_dict(self):
        data = self.calculator.calculate(salary(1_000_000)).to_dict()

        assert data["total_tax"] == pytest.approx(30_000)
        assert len(data["bracket_breakdown"]) == len(PIT_BRACKETS)
        assert data["applied_deductions"] == []


class TestCITCalculation:
    """Test company income tax per Nigeria 2026 Tax Reform."""

    def setup_method(self):
        self.calculator = CITCalculator()

    def test_large_company(self):
        """₦200M turnover, ₦10M profits: 30% CIT + 4% levy = ₦3.4M."""
        result = self.calculator.calculate(200_000_000, 10_000_000)

        assert result.company_size == CompanySize.OTHER
        assert result.cit_amount == pytest.approx(3_000_000)
        assert result.development_levy == pytest.approx(400_000)
        assert result.total_tax_payable == pytest.approx(3_400_000)
        assert result.effective_tax_rate == pytest.approx(34.0)
        assert [line.label for line in result.breakdown] == ["Corporate Income Tax", "Development Levy"]

    @pytest.mark.parametrize("turnover", [0, 1, 50_000_000, 100_000_000])
    def test_small_company_pays_nothing(self, turnover):
        result = self.calculator.calculate(turnover, 20_000_000)

        assert result.company_size == CompanySize.SMALL
        assert result.cit_amount == 0
        assert result.development_levy == 0
        assert result.total_tax_payable == 0
        assert len(result.breakdown) == 3

    def test_just_above_small_company_limit(self):
        result = self.calculator.calculate(100_000_001, 1_000_000)

        assert result.company_size == CompanySize.OTHER
        assert result.total_tax_payable == pytest.approx(340_000)

    def test_minimum_tax_top_up(self):
        assert self.calculator.calculate_minimum_tax_top_up(1_000_000, 100_000, True) == pytest.approx(50_000)
        assert self.calculator.calculate_minimum_tax_top_up(1_000_000, 100_000, False) == 0
        assert self.calculator.calculate_minimum_tax_top_up(0, 0, True) == 0
        assert self.calculator.calculate_minimum_tax_top_up(1_000_000, 200_000, True) == 0

    def test_multinational_line_shown_without_top_up(self):
        result = self.calculator.calculate(200_000_000, 10_000_000, is_multinational_subject=True)

        assert result.minimum_tax_top_up == 0
        assert result.breakdown[-1].label == "Minimum Tax Top-Up (METR 15%)"
        assert result.total_tax_payable == pytest.approx(3_400_000)

    def test_top_up_applied_when_rate_below_minimum(self):
        calculator = CITCalculator(TaxRates(cit_rate=5, development_levy_rate=0))

        result = calculator.calculate(200_000_000, 10_000_000, is_multinational_subject=True)

        assert result.total_tax_before_top_up == pytest.approx(500_000)
        assert result.minimum_tax_top_up == pytest.approx(1_000_000)
        assert result.total_tax_payable == pytest.approx(1_500_000)
        assert result.effective_tax_rate == pytest.approx(15)
        top_up_line = result.breakdown[-1]
        assert top_up_line.amount == pytest.approx(1_000_000)
        assert top_up_line.note == "Top-up applied to meet 15% minimum effective rate"

    def test_cfc_tax_on_undistributed_profits(self):
        result = self.calculator.calculate(
            200_000_000, 10_000_000,
            foreign_profits=5_000_000, distributed_foreign_profits=1_000_000,
        )

        assert result.cfc_tax == pytest.approx(1_200_000)
        assert result.total_tax_payable == pytest.approx(4_600_000)
        assert result.breakdown[-1].label == "CFC Tax (Foreign Profits)"

    def test_cfc_fully_distributed(self):
        assert self.calculator.calculate_cfc_tax(1_000_000, 2_000_000) == 0

    def test_zero_profits_effective_rate(self):
        result = self.calculator.calculate(200_000_000, 0)

        assert result.total_tax_payable == 0
        assert result.effective_tax_rate == 0

    def test_quick_estimate(self):
        assert self.calculator.quick_estimate(200_000_000, 10_000_000).total_tax_payable == pytest.approx(3_400_000)


class TestCGTCalculation:
    """Test capital gains tax per Nigeria 2026 Tax Reform."""

    def setup_method(self):
        self.calculator = CGTCalculator()

    def test_individual_progressive(self):
        """₦1.5M gain: ₦800,000 exempt, ₦700,000 at 15% = ₦105,000."""
        result = self.calculator.calculate(TaxpayerType.INDIVIDUAL, 2_000_000, 500_000)

        assert result.capital_gain == pytest.approx(1_500_000)
        assert result.cgt_amount == pytest.approx(105_000)
        assert result.net_proceeds == pytest.approx(1_895_000)
        assert result.effective_rate == pytest.approx(105_000 / 2_000_000 * 100)
        assert result.cgt_rate == "Progressive (max 25%)"
        assert result.is_exempt is False

        labels = [line.label for line in result.breakdown]
        assert labels == [
            "Sale Proceeds", "Acquisition Cost", "Capital Gain", "Tax @ 0%", "Tax @ 15%", "Total CGT",
        ]
        assert result.breakdown[3].note == "On ₦800,000"
        assert result.breakdown[4].note == "On ₦700,000"

    def test_individual_gain_within_threshold_is_exempt(self):
        result = self.calculator.calculate("individual", 1_300_000, 500_000)

        assert result.capital_gain == pytest.approx(800_000)
        assert result.is_exempt is True
        assert result.cgt_amount == 0
        assert result.cgt_rate == "0%"
        assert result.net_proceeds == pytest.approx(1_300_000)
        assert result.breakdown[-1].label == "CGT (Exempt)"

    def test_loss_is_zero_gain(self):
        result = self.calculator.calculate(TaxpayerType.INDIVIDUAL, 1_000_000, 3_000_000)

        assert result.capital_gain == 0
        assert result.cgt_amount == 0

    def test_individual_matches_pit_bands(self):
        gain = 20_000_000
        result = self.calculator.calculate_individual_cgt(gain, 0)

        assert result.cgt_amount == pytest.approx(allocate(gain).total_tax)

    def test_company_flat_rate(self):
        result = self.calculator.calculate(
            TaxpayerType.COMPANY, 50_000_000, 20_000_000,
            improvement_costs=5_000_000, transfer_costs=1_000_000,
            company_turnover=300_000_000,
        )

        assert result.total_costs == pytest.approx(26_000_000)
        assert result.capital_gain == pytest.approx(24_000_000)
        assert result.cgt_amount == pytest.approx(7_200_000)
        assert result.cgt_rate == 30
        assert result.effective_rate == pytest.approx(14.4)
        assert result.breakdown[-1].label == "CGT (30%)"

    @pytest.mark.parametrize("turnover", [0, 80_000_000, 100_000_000])
    def test_small_company_exempt(self, turnover):
        result = self.calculator.calculate(
            TaxpayerType.COMPANY, 50_000_000, 20_000_000, company_turnover=turnover,
        )

        assert result.is_exempt is True
        assert result.cgt_amount == 0
        assert "Small company" in result.exempt_reason

    def test_company_without_turnover_is_taxed(self):
        result = self.calculator.calculate(TaxpayerType.COMPANY, 10_000_000, 4_000_000)

        assert result.cgt_amount == pytest.approx(1_800_000)

    def test_offshore_transfer_note(self):
        result = self.calculator.calculate(
            TaxpayerType.COMPANY, 10_000_000, 4_000_000, is_offshore_transfer=True,
        )

        assert result.breakdown[-1].note == "Includes indirect offshore share transfer"

    def test_zero_proceeds(self):
        result = self.calculator.calculate(TaxpayerType.COMPANY, 0, 0)

        assert result.effective_rate == 0

    def test_to_dict(self):
        data = self.calculator.quick_estimate("individual", 2_000_000, 500_000).to_dict()

        assert data["taxpayer_type"] == "individual"
        assert data["cgt_amount"] == pytest.approx(105_000)
        assert data["breakdown"][0] == {"label": "Sale Proceeds", "amount": 2_000_000, "rate": None, "note": None}


class TestVATCalculation:
    """Test VAT calculations per Nigeria 2026 Tax Reform."""

    def setup_method(self):
        self.calculator = VATCalculator()

    def test_exclusive(self):
        result = self.calculator.calculate_simple(100_000, VATCalculationType.EXCLUSIVE)

        assert result.vat_amount == pytest.approx(7_500)
        assert result.gross_amount == pytest.approx(107_500)
        assert result.net_amount == 100_000
        assert result.vat_rate == 7.5

    def test_inclusive(self):
        result = self.calculator.calculate_simple(107_500, "inclusive")

        assert result.calculation_type == VATCalculationType.INCLUSIVE
        assert result.net_amount == pytest.approx(100_000)
        assert result.vat_amount == pytest.approx(7_500)
        assert result.gross_amount == 107_500

    @pytest.mark.parametrize("amount", [0, 1, 99.99, 100_000, 123_456_789.5])
    def test_round_trip(self, amount):
        gross = self.calculator.quick_exclusive(amount).gross_amount
        back = self.calculator.quick_inclusive(gross)

        assert abs(back.net_amount - amount) < 1e-6

    def test_business_refundable(self):
        result = self.calculator.calculate_business(50_000, 80_000)

        assert result.net_vat == pytest.approx(-30_000)
        assert result.is_refundable is True
        assert result.is_payable is False
        assert "refund of ₦30,000" in result.explanation

    def test_business_payable(self):
        result = self.calculator.calculate_business(80_000, 50_000)

        assert result.net_vat == pytest.approx(30_000)
        assert result.is_payable is True
        assert result.explanation.endswith("You owe ₦30,000 to NRS.")

    def test_business_balanced(self):
        result = self.calculator.calculate_business(10_000, 10_000)

        assert result.is_payable is False
        assert result.is_refundable is False
        assert "No VAT payment or refund is due" in result.explanation

    def test_multi_item(self):
        result = self.calculator.calculate_multi_item([
            VATLineItem("Consulting", 100_000),
            VATLineItem("Medical supplies", 50_000, is_vat_exempt=True),
        ])

        assert result.total_net == pytest.approx(150_000)
        assert result.total_vat == pytest.approx(7_500)
        assert result.grand_total == pytest.approx(157_500)
        assert result.items[1].vat_amount == 0
        assert result.items[0].total_with_vat == pytest.approx(107_500)

    def test_uses_injected_rates(self):
        from dataclasses import replace

        calculator = VATCalculator(replace(NIGERIA_2026_RATES, vat_rate=10))

        assert calculator.quick_exclusive(1_000).vat_amount == pytest.approx(100)


class TestConvenienceFunctions:
    """Test the package-level helpers."""

    def test_calculate_pit(self):
        assert calculate_pit(1_000_000) == pytest.approx(30_000)
        assert calculate_pit(10_000_000, {"pension": 1_000_000}) == pytest.approx(330_000 + 6_200_000 * 0.18)

    def test_calculate_cit(self):
        assert calculate_cit(200_000_000, 10_000_000) == pytest.approx(3_400_000)
        assert calculate_cit(90_000_000, 10_000_000) == 0

    def test_calculate_cgt(self):
        assert calculate_cgt("individual", 2_000_000, 500_000) == pytest.approx(105_000)

    def test_calculate_vat(self):
        assert calculate_vat(100_000) == pytest.approx(7_500)
        assert calculate_vat(100_000, is_exempt=True) == 0

    def test_calculate_business_vat(self):
        assert calculate_business_vat(50_000, 80_000) == pytest.approx(-30_000)

    @pytest.mark.parametrize(
        "income,label",
        [
            (500_000, "Tax-Exempt"),
            (800_000, "Tax-Exempt"),
            (1_000_000, "15% Bracket"),
            (3_000_000, "15% Bracket"),
            (10_000_000, "18% Bracket"),
            (60_000_000, "25% Bracket (Maximum)"),
        ],
    )
    def test_get_pit_band(self, income, label):
        assert get_pit_band(income) == label


class TestRunCalculation:
    """Test dispatch from stored input mappings."""

    def test_pit(self, pit_inputs):
        assert run_calculation("pit", pit_inputs)["total_tax"] == pytest.approx(30_000)

    def test_cit(self, cit_inputs):
        assert run_calculation("cit", cit_inputs)["total_tax_payable"] == pytest.approx(3_400_000)

    def test_cgt(self):
        result = run_calculation("cgt", {
            "taxpayer_type": "individual",
            "sale_proceeds": 2_000_000,
            "acquisition_cost": 500_000,
        })

        assert result["cgt_amount"] == pytest.approx(105_000)

    def test_vat_modes_by_shape(self):
        simple = run_calculation("vat", {"amount": 100_000})
        business = run_calculation("vat", {"output_vat": 50_000, "input_vat": 80_000})
        items = run_calculation("vat", {"items": [{"amount": 100_000}]})

        assert simple["vat_amount"] == pytest.approx(7_500)
        assert business["is_refundable"] is True
        assert items["grand_total"] == pytest.approx(107_500)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            run_calculation("wht", {})

    def test_missing_input(self):
        with pytest.raises(KeyError):
            run_calculation("cit", {"turnover": 1})
