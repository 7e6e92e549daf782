"""
Tests for the receipt query engine

Queries never touch the filesystem, so the fixture aggregates a
plain list of filenames.
"""

import pytest
from pydantic import ValidationError

from hsa_analyzer.aggregation.scanner import aggregate_file_names
from hsa_analyzer.audit import AuditLogger
from hsa_analyzer.models.audit import AuditEventType
from hsa_analyzer.models.receipt import ReceiptQuery
from hsa_analyzer.queries import QueryExecutionError, ReceiptQueryExecutor


@pytest.fixture
def totals():
    return aggregate_file_names([
        "2022-01-10 - josh dentist cleaning - $150.00.pdf",
        "2022-03-05 - jane doctor visit - $75.50.reimbursed.pdf",
        "2023-02-01 - josh pharmacy - $20.00.jpg",
        "2023-06-15 - household first aid - $45.25.png",
        "2023-07-04 - Jane physical therapy - $300.00.pdf",
    ])


@pytest.fixture
def executor(totals):
    return ReceiptQueryExecutor(totals)


class TestSearch:
    """Tests for keyword search."""

    def test_case_insensitive(self, executor):
        """Test the keyword matches regardless of case."""
        result = executor.search_receipts("DOCTOR")
        assert result.data_found is True
        assert result.result_count == 1
        assert result.text == "2022-03-05 | jane doctor visit | $75.50 | reimbursed"
        assert result.results[0]["amount"] == 75.5

    def test_no_match(self, executor):
        """Test the message when nothing matches."""
        result = executor.search_receipts("xyz")
        assert result.data_found is False
        assert result.result_count == 0
        assert result.text == 'No receipts found matching "xyz".'


class TestLargest:
    """Tests for the largest expenses query."""

    def test_top_two(self, executor):
        """Test receipts come biggest first."""
        result = executor.get_largest_expenses(count=2)
        assert result.text.split("\n") == [
            "2023-07-04 | Jane physical therapy | $300.00 | not reimbursed",
            "2022-01-10 | josh dentist cleaning | $150.00 | not reimbursed",
        ]

    def test_by_year(self, executor):
        """Test restricting to one year."""
        result = executor.get_largest_expenses(year="2022")
        assert [r["amount"] for r in result.results] == [150.0, 75.5]

    def test_unknown_year(self, executor):
        """Test a year without receipts."""
        result = executor.get_largest_expenses(year="1999")
        assert result.data_found is False
        assert result.text == "No receipts found for year 1999."

    def test_no_receipts(self):
        """Test an empty aggregation."""
        result = ReceiptQueryExecutor(aggregate_file_names([])).get_largest_expenses()
        assert result.text == "No receipts found."


class TestUnreimbursed:
    """Tests for the unreimbursed expenses query."""

    def test_all_years(self, executor):
        """Test reimbursed receipts are left out and the total is shown."""
        result = executor.get_unreimbursed_expenses()
        assert [r["amount"] for r in result.results] == [300.0, 150.0, 45.25, 20.0]
        assert result.text.endswith("Total unreimbursed: $515.25 (4 receipts)")
        assert "not reimbursed" not in result.text

    def test_year_and_minimum(self, executor):
        """Test year and minimum amount filters together."""
        result = executor.get_unreimbursed_expenses(year="2023", min_amount=40)
        assert [r["amount"] for r in result.results] == [300.0, 45.25]

    def test_nothing_left(self, executor):
        """Test the message when every receipt is filtered out."""
        result = executor.get_unreimbursed_expenses(min_amount=1000)
        assert result.data_found is False
        assert result.text == "No unreimbursed expenses found matching criteria."


class TestYear:
    """Tests for the single year summary."""

    def test_year_summary(self, executor):
        """Test totals and the category breakdown of one year."""
        result = executor.get_expenses_by_year("2023")
        assert result.text == (
            "## 2023 Expenses\n"
            "- Total Expenses: $365.25\n"
            "- Reimbursed: $0.00\n"
            "- Unreimbursed: $365.25\n"
            "\n"
            "### By Category:\n"
            "- jane: $300.00 (1 receipts, $0.00 reimbursed)\n"
            "- household: $45.25 (1 receipts, $0.00 reimbursed)\n"
            "- josh: $20.00 (1 receipts, $0.00 reimbursed)\n"
        )
        assert result.result_count == 3
        assert result.results[0]["category"] == "jane"

    def test_reimbursed_year(self, executor):
        """Test a year with a reimbursement."""
        result = executor.get_expenses_by_year("2022")
        assert "- Reimbursed: $75.50" in result.text
        assert "- Unreimbursed: $150.00" in result.text

    def test_unknown_year(self, executor):
        """Test a year without data."""
        result = executor.get_expenses_by_year("1999")
        assert result.data_found is False
        assert result.text == "No expense data found for year 1999."


class TestCategory:
    """Tests for category queries."""

    def test_category_case_insensitive(self, executor):
        """Test the category name matches regardless of case."""
        result = executor.get_receipts_by_category("JOSH")
        assert [r["amount"] for r in result.results] == [150.0, 20.0]
        assert result.text.endswith("Total for JOSH: $170.00 (2 receipts)")

    def test_category_in_year(self, executor):
        """Test restricting a category to one year."""
        result = executor.get_receipts_by_category("jane", year="2023")
        assert result.result_count == 1
        assert result.results[0]["description"] == "Jane physical therapy"

    def test_unknown_category(self, executor):
        """Test an unknown category."""
        assert executor.get_receipts_by_category("bob").text == 'No receipts found for category "bob".'

    def test_unknown_category_in_year(self, executor):
        """Test a known category in a year without its receipts."""
        result = executor.get_receipts_by_category("josh", year="2021")
        assert result.text == 'No receipts found for category "josh" in 2021.'

    def test_list_categories(self, executor):
        """Test every category is listed by descending total."""
        result = executor.list_categories()
        assert result.text == (
            "jane: $375.50 (2 receipts)\n"
            "josh: $170.00 (2 receipts)\n"
            "household: $45.25 (1 receipts)"
        )
        assert result.results[0] == {"category": "jane", "expenses": 375.5, "count": 2}

    def test_list_categories_empty(self):
        """Test listing categories of an empty aggregation."""
        result = ReceiptQueryExecutor(aggregate_file_names([])).list_categories()
        assert result.data_found is False
        assert result.text == ""


class TestExecute:
    """Tests for query dispatch."""

    def test_dispatch_largest(self, executor):
        """Test a largest query through execute."""
        result = executor.execute(ReceiptQuery(query_type="largest", count=1))
        assert result.query_type == "largest"
        assert result.result_count == 1

    def test_dispatch_search(self, executor):
        """Test a search query through execute."""
        result = executor.execute(ReceiptQuery(query_type="search", keyword="pharmacy"))
        assert result.result_count == 1

    def test_year_query_needs_year(self, executor):
        """Test a year query without a year."""
        with pytest.raises(QueryExecutionError):
            executor.execute(ReceiptQuery(query_type="year"))

    def test_category_query_needs_category(self, executor):
        """Test a category query without a category."""
        with pytest.raises(QueryExecutionError):
            executor.execute(ReceiptQuery(query_type="category"))

    def test_unknown_type_rejected_by_model(self):
        """Unknown query types never reach the executor."""
        with pytest.raises(ValidationError):
            ReceiptQuery(query_type="bogus")

    def test_query_logged(self, totals):
        """Test executed queries are audited."""
        audit_logger = AuditLogger()
        ReceiptQueryExecutor(totals, audit_logger).execute(ReceiptQuery(query_type="categories"))
        event = audit_logger.events[-1]
        assert event.event_type == AuditEventType.QUERY_EXECUTED
        assert event.details == {"query_type": "categories", "result_count": 3}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
