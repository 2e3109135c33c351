"""Tests for federal, Massachusetts and Social Security taxation.

Covers:
- Federal bracket walk, effective and marginal rates
- Massachusetts flat tax with deductions and exemptions
- Taxable Social Security worksheet tiers
- Combined retirement taxes and their additivity
- Filing status validation
"""

import pytest

from ma_retirement.schemas.common import FilingStatus
from ma_retirement.services.tax.tax_calculator import (
    calculate_federal_tax,
    calculate_massachusetts_tax,
    calculate_retirement_taxes,
    calculate_social_security_tax,
    federal_standard_deduction,
)
from ma_retirement.utils.input_validation import InputValidationError


# ── Federal ───────────────────────────────────────────────────────────────────


class TestFederalTax:
    @pytest.mark.parametrize("status", list(FilingStatus))
    def test_zero_income(self, status):
        result = calculate_federal_tax(0, status)
        assert result.tax == 0
        assert result.effective_rate == 0
        assert result.brackets == []

    def test_worked_example_single(self):
        result = calculate_federal_tax(58000, "single")
        assert result.tax == pytest.approx(7813)
        assert result.marginal_rate == 0.22
        assert len(result.brackets) == 3
        assert result.effective_rate == pytest.approx(0.1347, abs=0.0001)
        assert [b.tax for b in result.brackets] == [1160, 4266, 2387]

    def test_exact_bracket_boundary(self):
        result = calculate_federal_tax(11600, "single")
        assert result.tax == pytest.approx(1160)
        assert result.marginal_rate == 0.10
        assert len(result.brackets) == 1

    def test_married_filing_jointly(self):
        result = calculate_federal_tax(100000, FilingStatus.MARRIED_FILING_JOINTLY)
        assert result.tax == pytest.approx(12106)

    def test_top_bracket(self):
        result = calculate_federal_tax(700000, "single")
        assert result.marginal_rate == 0.37
        assert len(result.brackets) == 7
        assert sum(b.income for b in result.brackets) == pytest.approx(700000)

    def test_standard_deduction_applied_on_request(self):
        result = calculate_federal_tax(72600, "single", apply_standard_deduction=True)
        assert result.taxable_income == pytest.approx(58000)
        assert result.tax == pytest.approx(7813)

    def test_age_65_additional_deduction(self):
        assert federal_standard_deduction("single", is_age_65_plus=True) == 16550
        assert federal_standard_deduction("married_filing_jointly") == 29200

    def test_negative_income_taxes_nothing(self):
        result = calculate_federal_tax(-5000, "single")
        assert result.tax == 0
        assert result.brackets == []

    def test_camel_case_status_accepted(self):
        result = calculate_federal_tax(100000, "marriedFilingJointly")
        assert result.filing_status is FilingStatus.MARRIED_FILING_JOINTLY

    def test_invalid_status_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_federal_tax(50000, "widowed")


# ── Massachusetts ─────────────────────────────────────────────────────────────


class TestMassachusettsTax:
    def test_single_under_65(self):
        result = calculate_massachusetts_tax(60000, "single", False)
        assert result.tax == pytest.approx(2560)
        assert result.taxable_income == pytest.approx(51200)

    def test_age_65_exemption_lowers_tax(self):
        under = calculate_massachusetts_tax(60000, "single", False)
        over = calculate_massachusetts_tax(60000, "single", True)
        assert over.tax == pytest.approx(2525)
        assert over.tax < under.tax

    def test_joint_filers_double_deductions(self):
        result = calculate_massachusetts_tax(60000, FilingStatus.MARRIED_FILING_JOINTLY)
        assert result.tax == pytest.approx(2120)

    def test_low_income_owes_nothing(self):
        assert calculate_massachusetts_tax(5000, "single").tax == 0


# ── Social Security ───────────────────────────────────────────────────────────


class TestSocialSecurityTax:
    def test_at_base_threshold_nothing_taxable(self):
        result = calculate_social_security_tax(20000, 15000, "single")
        assert result.provisional_income == 25000
        assert result.taxable_amount == 0

    def test_between_thresholds_half_of_excess(self):
        # Provisional income 30,000 is 5,000 over the base amount
        result = calculate_social_security_tax(20000, 20000, "single")
        assert result.taxable_amount == pytest.approx(2500)

    def test_above_adjusted_base(self):
        result = calculate_social_security_tax(20000, 30000, "single")
        assert result.taxable_amount == pytest.approx(9600)

    def test_capped_at_85_percent(self):
        result = calculate_social_security_tax(30000, 100000, "single")
        assert result.taxable_amount == pytest.approx(25500)
        assert result.taxable_percentage == pytest.approx(85)

    def test_joint_thresholds(self):
        result = calculate_social_security_tax(30000, 40000, "married_filing_jointly")
        assert result.taxable_amount == pytest.approx(15350)

    def test_married_filing_separately_has_no_base(self):
        result = calculate_social_security_tax(10000, 0, "married_filing_separately")
        assert result.taxable_amount == pytest.approx(4250)

    def test_no_benefit(self):
        result = calculate_social_security_tax(0, 80000, "single")
        assert result.taxable_amount == 0
        assert result.taxable_percentage == 0

    def test_monotonic_in_other_income(self):
        previous = -1.0
        for other in range(0, 120001, 2500):
            taxable = calculate_social_security_tax(24000, other, "single").taxable_amount
            assert taxable >= previous
            assert taxable <= 24000 * 0.85 + 0.01
            previous = taxable


# ── Combined ──────────────────────────────────────────────────────────────────


class TestRetirementTaxes:
    def test_worked_example(self):
        result = calculate_retirement_taxes(50000, 24000, 0, "single", True)
        assert result.social_security_taxable_amount == pytest.approx(20400)
        assert result.federal_taxable_income == pytest.approx(53850)
        assert result.federal_tax == pytest.approx(6900)
        assert result.state_tax == pytest.approx(2025)
        assert result.total_tax == pytest.approx(8925)
        assert result.gross_income == pytest.approx(74000)
        assert result.net_income == pytest.approx(65075)
        assert result.marginal_rate == 0.22

    def test_social_security_excluded_from_state_tax(self):
        result = calculate_retirement_taxes(0, 30000, 0, "single", True)
        assert result.state_tax == 0

    @pytest.mark.parametrize("pension", [0, 18000, 52000, 140000])
    @pytest.mark.parametrize("social_security", [0, 15000, 36000])
    @pytest.mark.parametrize("other", [-20000, 0, 7500])
    @pytest.mark.parametrize("status", list(FilingStatus))
    def test_additive(self, pension, social_security, other, status):
        result = calculate_retirement_taxes(pension, social_security, other, status, False)
        assert result.total_tax == pytest.approx(result.federal_tax + result.state_tax, abs=0.005)
        assert result.net_income == pytest.approx(result.gross_income - result.total_tax, abs=0.005)
        assert result.total_tax >= 0

    def test_net_loss_reported_as_is(self):
        result = calculate_retirement_taxes(0, 0, -5000, "single")
        assert result.total_tax == 0
        assert result.net_income == -5000
        assert result.effective_rate == 0

    def test_negative_pension_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_retirement_taxes(-1, 0, 0, "single")

    def test_infinite_income_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_retirement_taxes(float("inf"), 0, 0, "single")
