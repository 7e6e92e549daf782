"""
Report Formatting

Converts numeric aggregates into display-ready structures:
- build_yearly_result: the nested per-year report with a "Total" row
- prepare_chart_data: per-year series for bar charts
- format_receipt / format_receipt_list: one line per receipt
- build_expense_context: markdown summary handed to an assistant

DESIGN DECISION: Rounding to cents happens HERE, at the display
boundary. Inputs are raw floats; outputs are strings.
"""

from typing import Iterable, Mapping, Optional, Sequence

from hsa_analyzer.aggregation.statistics import to_fixed
from hsa_analyzer.models.receipt import (
    CategoryTotals,
    ChartPoint,
    Receipt,
    SummaryStats,
)


TOTAL_ROW = "Total"


def format_currency(value: float) -> str:
    """Dollar string with exactly two decimals: 99.999 -> "$100.00"."""
    return f"${to_fixed(value, 2)}"


def _format_row(expenses: float, reimbursements: float, receipts: int) -> dict:
    return {
        "expenses": format_currency(expenses),
        "reimbursements": format_currency(reimbursements),
        "receipts": receipts,
    }


def sort_categories(categories: Mapping[str, CategoryTotals]) -> list[tuple[str, CategoryTotals]]:
    """Categories by descending expenses. Ties keep insertion order."""
    return sorted(categories.items(), key=lambda item: item[1].expenses, reverse=True)


def build_yearly_result(
    years: Sequence[str],
    expenses_by_year: Mapping[str, float],
    reimbursements_by_year: Mapping[str, float],
    receipt_counts: Mapping[str, int],
    expenses_by_category: Optional[Mapping[str, Mapping[str, CategoryTotals]]] = None,
) -> dict:
    """
    Build the nested report shown to the user.

    Every year gets expenses, reimbursements and receipts. Years present in
    expenses_by_category also get a "by_category" breakdown. The "Total"
    row re-sums the year values and never has a breakdown.
    """
    expenses_by_category = expenses_by_category or {}
    result = {}

    total_expenses = 0.0
    total_reimbursements = 0.0
    total_receipts = 0

    for year in years:
        year_expenses = expenses_by_year.get(year, 0)
        year_reimbursements = reimbursements_by_year.get(year, 0)
        year_receipts = receipt_counts.get(year, 0)

        total_expenses += year_expenses
        total_reimbursements += year_reimbursements
        total_receipts += year_receipts

        result[year] = _format_row(year_expenses, year_reimbursements, year_receipts)

        if year in expenses_by_category:
            result[year]["by_category"] = {
                category: _format_row(data.expenses, data.reimbursements, data.count)
                for category, data in sort_categories(expenses_by_category[year])
            }

    result[TOTAL_ROW] = _format_row(total_expenses, total_reimbursements, total_receipts)

    return result


def prepare_chart_data(
    years: Sequence[str],
    expenses_by_year: Mapping[str, float],
    reimbursements_by_year: Mapping[str, float],
) -> tuple[list[ChartPoint], list[ChartPoint]]:
    """One expense point and one reimbursement point per year."""
    expense_data = [
        ChartPoint(label=year, value=expenses_by_year.get(year, 0)) for year in years
    ]
    reimbursement_data = [
        ChartPoint(label=year, value=reimbursements_by_year.get(year, 0)) for year in years
    ]
    return expense_data, reimbursement_data


def format_receipt(receipt: Receipt, include_reimbursed_status: bool = True) -> str:
    """'2023-05-15 | josh dentist | $150.00 | not reimbursed'"""
    base = f"{receipt.date} | {receipt.description} | {format_currency(receipt.amount)}"
    if not include_reimbursed_status:
        return base
    status = "reimbursed" if receipt.is_reimbursed else "not reimbursed"
    return f"{base} | {status}"


def format_receipt_list(
    receipts: Iterable[Receipt],
    include_reimbursed_status: bool = True,
) -> str:
    """One formatted receipt per line, order preserved."""
    return "\n".join(format_receipt(r, include_reimbursed_status) for r in receipts)


def build_expense_context(years: Sequence[str], stats: SummaryStats) -> str:
    """
    High-level summary of the expense data for an assistant.

    Detailed data is left to the query executor; this only frames it.
    """
    first_year = years[0] if years else "n/a"
    last_year = years[-1] if years else "n/a"

    return f"""
## HSA Expense Data Summary

- **Total Receipts:** {stats.total_files}
- **Years Covered:** {len(years)} ({first_year} - {last_year})
- **Total Expenses:** {format_currency(stats.total_expenses)}
- **Total Reimbursements:** {format_currency(stats.total_reimbursements)} ({stats.reimbursement_rate}%)
- **Total Unreimbursed:** {format_currency(stats.total_reimburseable)} ({stats.reimburseable_rate}%)
- **Most Expensive Year:** {stats.most_expensive_year} ({format_currency(stats.most_expensive_year_amount)})

Use the available tools to query detailed expense data as needed."""
