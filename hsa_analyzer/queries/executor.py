"""
Receipt Query Engine

DESIGN DECISION: Query execution is DETERMINISTIC and READ-ONLY.
An assistant picks a tool; the tool becomes a ReceiptQuery; this engine
answers it from an existing ReceiptTotals. Nothing is re-aggregated and
the filesystem is never touched.

Six query types:
- search:       receipts whose description contains a keyword
- largest:      biggest receipts, optionally for one year
- unreimbursed: receipts still open for reimbursement
- year:         totals and category breakdown of one year
- category:     receipts of one category, optionally for one year
- categories:   every category with its totals
"""

from typing import Optional

from hsa_analyzer.audit import AuditLogger
from hsa_analyzer.models.receipt import (
    Receipt,
    ReceiptQuery,
    ReceiptQueryResult,
    ReceiptTotals,
)
from hsa_analyzer.reporting.formatter import (
    format_currency,
    format_receipt_list,
    sort_categories,
)


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


def _by_amount(receipts: list[Receipt]) -> list[Receipt]:
    return sorted(receipts, key=lambda r: r.amount, reverse=True)


class ReceiptQueryExecutor:
    """
    Executes receipt queries against one aggregation result.

    GUARANTEES:
    - Only returns receipts that were actually scanned
    - Never estimates or invents amounts
    - Clear "no receipts found" text if nothing matches
    """

    def __init__(
        self,
        totals: ReceiptTotals,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._totals = totals
        self._audit_logger = audit_logger

    def execute(self, query: ReceiptQuery) -> ReceiptQueryResult:
        """Route a query to its handler and return the result."""
        if query.query_type == "search":
            result = self.search_receipts(query.keyword or "")
        elif query.query_type == "largest":
            result = self.get_largest_expenses(query.count, query.year)
        elif query.query_type == "unreimbursed":
            result = self.get_unreimbursed_expenses(query.year, query.min_amount)
        elif query.query_type == "year":
            if not query.year:
                raise QueryExecutionError("A 'year' query needs a year")
            result = self.get_expenses_by_year(query.year)
        elif query.query_type == "category":
            if not query.category:
                raise QueryExecutionError("A 'category' query needs a category")
            result = self.get_receipts_by_category(query.category, query.year)
        elif query.query_type == "categories":
            result = self.list_categories()
        else:
            raise QueryExecutionError(f"Unsupported query type: {query.query_type}")

        if self._audit_logger:
            self._audit_logger.log_query_executed(result.query_type, result.result_count)

        return result

    def search_receipts(self, keyword: str) -> ReceiptQueryResult:
        """Receipts whose description contains keyword (case-insensitive)."""
        needle = keyword.lower()
        matches = [
            r for r in self._totals.valid_receipts if needle in r.description.lower()
        ]

        if not matches:
            return self._empty("search", f'No receipts found matching "{keyword}".')

        return self._receipts_result("search", matches, format_receipt_list(matches))

    def get_largest_expenses(self, count: int = 10, year: Optional[str] = None) -> ReceiptQueryResult:
        """The `count` biggest receipts, optionally restricted to one year."""
        receipts = list(self._totals.valid_receipts)
        if year:
            receipts = [r for r in receipts if r.year == year]

        largest = _by_amount(receipts)[:count]

        if not largest:
            message = f"No receipts found for year {year}." if year else "No receipts found."
            return self._empty("largest", message)

        return self._receipts_result("largest", largest, format_receipt_list(largest))

    def get_unreimbursed_expenses(
        self,
        year: Optional[str] = None,
        min_amount: float = 0,
    ) -> ReceiptQueryResult:
        """Receipts not yet reimbursed, at least min_amount, biggest first."""
        receipts = [
            r for r in self._totals.valid_receipts
            if not r.is_reimbursed and r.amount >= min_amount
        ]
        if year:
            receipts = [r for r in receipts if r.year == year]

        receipts = _by_amount(receipts)

        if not receipts:
            return self._empty("unreimbursed", "No unreimbursed expenses found matching criteria.")

        total = sum(r.amount for r in receipts)
        text = (
            f"{format_receipt_list(receipts, include_reimbursed_status=False)}\n\n"
            f"Total unreimbursed: {format_currency(total)} ({len(receipts)} receipts)"
        )
        return self._receipts_result("unreimbursed", receipts, text)

    def get_expenses_by_year(self, year: str) -> ReceiptQueryResult:
        """Totals for one year with its category breakdown."""
        expenses = self._totals.expenses_by_year.get(year)
        reimbursements = self._totals.reimbursements_by_year.get(year, 0)
        categories = self._totals.expenses_by_category.get(year)

        if not expenses:
            return self._empty("year", f"No expense data found for year {year}.")

        lines = [
            f"## {year} Expenses",
            f"- Total Expenses: {format_currency(expenses)}",
            f"- Reimbursed: {format_currency(reimbursements)}",
            f"- Unreimbursed: {format_currency(expenses - reimbursements)}",
        ]

        rows = []
        if categories:
            lines.append("")
            lines.append("### By Category:")
            for category, data in sort_categories(categories):
                lines.append(
                    f"- {category}: {format_currency(data.expenses)} "
                    f"({data.count} receipts, {format_currency(data.reimbursements)} reimbursed)"
                )
                rows.append({"category": category, **data.model_dump()})

        return ReceiptQueryResult(
            query_type="year",
            data_found=True,
            result_count=len(rows),
            results=rows,
            text="\n".join(lines) + "\n",
        )

    def get_receipts_by_category(
        self,
        category: str,
        year: Optional[str] = None,
    ) -> ReceiptQueryResult:
        """Receipts of one category (case-insensitive), biggest first."""
        wanted = category.lower()
        receipts = [r for r in self._totals.valid_receipts if r.category.lower() == wanted]
        if year:
            receipts = [r for r in receipts if r.year == year]

        if not receipts:
            suffix = f" in {year}" if year else ""
            return self._empty("category", f'No receipts found for category "{category}"{suffix}.')

        receipts = _by_amount(receipts)
        total = sum(r.amount for r in receipts)
        text = (
            f"{format_receipt_list(receipts)}\n\n"
            f"Total for {category}: {format_currency(total)} ({len(receipts)} receipts)"
        )
        return self._receipts_result("category", receipts, text)

    def list_categories(self) -> ReceiptQueryResult:
        """Every category across all years with its total and count."""
        category_totals: dict[str, dict] = {}
        for receipt in self._totals.valid_receipts:
            entry = category_totals.setdefault(receipt.category, {"expenses": 0.0, "count": 0})
            entry["expenses"] += receipt.amount
            entry["count"] += 1

        ordered = sorted(category_totals.items(), key=lambda item: item[1]["expenses"], reverse=True)
        text = "\n".join(
            f"{category}: {format_currency(data['expenses'])} ({data['count']} receipts)"
            for category, data in ordered
        )

        return ReceiptQueryResult(
            query_type="categories",
            data_found=bool(ordered),
            result_count=len(ordered),
            results=[{"category": category, **data} for category, data in ordered],
            text=text,
        )

    def _receipts_result(
        self,
        query_type: str,
        receipts: list[Receipt],
        text: str,
    ) -> ReceiptQueryResult:
        return ReceiptQueryResult(
            query_type=query_type,
            data_found=True,
            result_count=len(receipts),
            results=[r.to_dict() for r in receipts],
            text=text,
        )

    def _empty(self, query_type: str, text: str) -> ReceiptQueryResult:
        return ReceiptQueryResult(
            query_type=query_type,
            data_found=False,
            result_count=0,
            text=text,
        )
