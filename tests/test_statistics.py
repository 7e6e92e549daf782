"""
Tests for summary statistics
"""

import pytest

from hsa_analyzer.aggregation.statistics import (
    GUARDED_ZERO,
    most_expensive_year,
    percentage,
    round_half_up,
    summarize,
    to_fixed,
)
from hsa_analyzer.models.receipt import InvalidFileRecord


class TestRounding:
    """Tests for display rounding helpers."""

    def test_to_fixed_rounds_up(self):
        """Test 99.999 carries over to the next dollar."""
        assert to_fixed(99.999, 2) == "100.00"

    def test_to_fixed_half_up_on_decimal_form(self):
        """1.005 rounds up, as a person would read it."""
        assert to_fixed(1.005, 2) == "1.01"
        assert to_fixed(12.25, 1) == "12.3"

    def test_to_fixed_pads(self):
        """Test trailing zeros are kept."""
        assert to_fixed(5, 2) == "5.00"

    def test_to_fixed_no_negative_zero(self):
        """Test tiny negatives do not print as -0.00."""
        assert to_fixed(-0.001, 2) == "0.00"

    def test_to_fixed_beyond_default_precision(self):
        """Test amounts wider than 28 digits keep every digit."""
        assert to_fixed(1e26, 2) == "100000000000000000000000000.00"
        assert to_fixed(123456789012345678901234567.0, 1).endswith(".0")

    def test_to_fixed_non_finite(self):
        """Test non-finite values are spelled out instead of raising."""
        assert to_fixed(float("inf"), 2) == "Infinity"
        assert to_fixed(float("-inf"), 2) == "-Infinity"
        assert to_fixed(float("nan"), 1) == "NaN"

    def test_round_half_up_large(self):
        """Test large values round without a precision error."""
        assert round_half_up(1e30) == 10 ** 30

    def test_round_half_up(self):
        """Test halves round away from zero."""
        assert round_half_up(2.5) == 3
        assert round_half_up(1.5) == 2
        assert round_half_up(1.49) == 1

    def test_percentage_guarded(self):
        """Test a zero denominator gives the guarded value."""
        assert percentage(5, 0) == GUARDED_ZERO
        assert percentage(1, 3) == "33.3"


class TestMostExpensiveYear:
    """Tests for picking the most expensive year."""

    def test_highest(self):
        """Test the biggest year wins."""
        assert most_expensive_year(["2020", "2021"], {"2020": 1.0, "2021": 2.0}) == "2021"

    def test_tie_keeps_earliest(self):
        """Test ties go to the earliest year."""
        assert most_expensive_year(["2020", "2021"], {"2020": 100.0, "2021": 100.0}) == "2020"

    def test_no_years(self):
        """Test no years gives None."""
        assert most_expensive_year([], {}) is None


class TestSummarize:
    """Tests for the full statistics computation."""

    @pytest.fixture
    def stats(self):
        return summarize(
            years=["2021", "2022"],
            expenses_by_year={"2021": 100.0, "2022": 300.0},
            reimbursements_by_year={"2021": 50.0, "2022": 0.0},
            receipt_counts={"2021": 2, "2022": 1},
            invalid_files=[InvalidFileRecord(file_name="bad.pdf", error="bad")],
        )

    def test_counts(self, stats):
        """Test file counts and the invalid percentage."""
        assert stats.total_files == 4
        assert stats.total_valid_files == 3
        assert stats.total_invalid_files == 1
        assert stats.invalid_file_percentage == "25.0"

    def test_totals_and_rates(self, stats):
        """Test totals and reimbursement rates."""
        assert stats.total_expenses == 400.0
        assert stats.total_reimbursements == 50.0
        assert stats.total_reimburseable == 350.0
        assert stats.reimbursement_rate == "12.5"
        assert stats.reimburseable_rate == "87.5"

    def test_averages(self, stats):
        """Test yearly averages."""
        assert stats.avg_expense_per_year == "200.00"
        assert stats.avg_receipts_per_year == 2

    def test_most_expensive_year(self, stats):
        """Test the most expensive year and its shares."""
        assert stats.most_expensive_year == "2022"
        assert stats.most_expensive_year_amount == 300.0
        assert stats.most_expensive_year_receipts == 1
        assert stats.expense_percentage == "75.0"
        assert stats.receipt_percentage == "33.3"

    def test_no_data(self):
        """Every ratio is guarded when there is nothing to divide by."""
        stats = summarize([], {}, {}, {}, [])
        assert stats.total_files == 0
        assert stats.total_expenses == 0.0
        assert stats.invalid_file_percentage == GUARDED_ZERO
        assert stats.reimbursement_rate == GUARDED_ZERO
        assert stats.reimburseable_rate == GUARDED_ZERO
        assert stats.avg_expense_per_year == GUARDED_ZERO
        assert stats.avg_receipts_per_year == 0
        assert stats.most_expensive_year is None
        assert stats.most_expensive_year_amount == 0.0
        assert stats.expense_percentage == GUARDED_ZERO
        assert stats.receipt_percentage == GUARDED_ZERO

    def test_only_invalid_files(self):
        """Test a run where every file was rejected."""
        stats = summarize([], {}, {}, {}, [InvalidFileRecord(file_name="a", error="e")])
        assert stats.total_files == 1
        assert stats.invalid_file_percentage == "100.0"

    def test_infinite_expenses(self):
        """Test an amount too large for a float still summarizes."""
        stats = summarize(["2021"], {"2021": float("inf")}, {"2021": 0.0}, {"2021": 1}, [])
        assert stats.total_expenses == float("inf")
        assert stats.avg_expense_per_year == "Infinity"
        assert stats.reimbursement_rate == "0.0"
        assert stats.expense_percentage == "NaN"

    def test_totals_rounded_to_cents(self):
        """Test year totals are summed on cents."""
        stats = summarize(
            ["2020", "2021"],
            {"2020": 0.1, "2021": 0.2},
            {"2020": 0.0, "2021": 0.0},
            {"2020": 1, "2021": 1},
            [],
        )
        assert stats.total_expenses == 0.3
        assert stats.total_reimburseable == 0.3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
