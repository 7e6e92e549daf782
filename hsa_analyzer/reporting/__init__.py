"""Reporting package."""

from hsa_analyzer.reporting.formatter import (
    TOTAL_ROW,
    build_expense_context,
    build_yearly_result,
    format_currency,
    format_receipt,
    format_receipt_list,
    prepare_chart_data,
    sort_categories,
)

__all__ = [
    "TOTAL_ROW",
    "build_expense_context",
    "build_yearly_result",
    "format_currency",
    "format_receipt",
    "format_receipt_list",
    "prepare_chart_data",
    "sort_categories",
]
