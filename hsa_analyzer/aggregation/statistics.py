"""
Summary Statistics

Derives totals, rates, averages and the most expensive year from the
yearly aggregates of a scan.

DESIGN DECISION: Display values are fixed with round-half-away-from-zero
on the shortest decimal form of the float (what a person reads), not on
its binary expansion. 99.999 becomes "100.00" and 1.005 becomes "1.01".
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from functools import reduce
from typing import Mapping, Optional, Sequence

from hsa_analyzer.aggregation.scanner import add_cents
from hsa_analyzer.models.receipt import InvalidFileRecord, SummaryStats


# Value stored when a rate or average would divide by zero
GUARDED_ZERO = "0"


def _quantize(number: Decimal, places: int) -> Decimal:
    """Round a finite Decimal to `places` decimals, whatever its size."""
    exponent = Decimal(1).scaleb(-places)
    with localcontext() as context:
        # Amounts have no digit limit; the default 28 digits is not enough
        context.prec = max(context.prec, number.adjusted() + places + 2)
        return number.quantize(exponent, rounding=ROUND_HALF_UP)


def to_fixed(value: float, places: int) -> str:
    """
    Format a number with exactly `places` decimals, rounding half up.

    Non-finite values come out as "Infinity", "-Infinity" or "NaN".
    """
    number = Decimal(repr(float(value)))
    if not number.is_finite():
        return str(number)

    fixed = _quantize(number, places)
    if fixed == 0:
        fixed = abs(fixed)  # no "-0.00"
    return str(fixed)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(_quantize(Decimal(repr(float(value))), 0))


def percentage(part: float, whole: float) -> str:
    """part/whole as a percentage with one decimal, guarded against zero."""
    if whole <= 0:
        return GUARDED_ZERO
    return to_fixed(part / whole * 100, 1)


def most_expensive_year(
    years: Sequence[str],
    expenses_by_year: Mapping[str, float],
) -> Optional[str]:
    """
    Year with the highest expenses, or None when there are no years.

    Ties keep the first year in `years`, so callers pass years sorted
    ascending to get the earliest one.
    """
    if not years:
        return None
    return reduce(
        lambda best, year: year
        if expenses_by_year.get(year, 0) > expenses_by_year.get(best, 0)
        else best,
        years,
    )


def summarize(
    years: Sequence[str],
    expenses_by_year: Mapping[str, float],
    reimbursements_by_year: Mapping[str, float],
    receipt_counts: Mapping[str, int],
    invalid_files: Sequence[InvalidFileRecord],
) -> SummaryStats:
    """
    Calculate summary statistics for a set of years.

    Args:
        years: Years to include, sorted ascending
        expenses_by_year: Year -> total expenses
        reimbursements_by_year: Year -> total reimbursements
        receipt_counts: Year -> number of accepted receipts
        invalid_files: Files rejected during the scan

    Returns:
        SummaryStats with every derived value
    """
    total_valid_files = sum(receipt_counts.values())
    total_invalid_files = len(invalid_files)
    total_files = total_valid_files + total_invalid_files

    total_expenses = 0.0
    total_reimbursements = 0.0
    for year in years:
        total_expenses = add_cents(total_expenses, expenses_by_year.get(year, 0))
        total_reimbursements = add_cents(total_reimbursements, reimbursements_by_year.get(year, 0))

    total_reimburseable = round(total_expenses - total_reimbursements, 2)

    if years:
        avg_expense_per_year = to_fixed(total_expenses / len(years), 2)
        avg_receipts_per_year = round_half_up(total_valid_files / len(years))
    else:
        avg_expense_per_year = GUARDED_ZERO
        avg_receipts_per_year = 0

    best_year = most_expensive_year(years, expenses_by_year)
    best_amount = expenses_by_year.get(best_year, 0) if best_year else 0.0
    best_receipts = receipt_counts.get(best_year, 0) if best_year else 0

    return SummaryStats(
        total_files=total_files,
        total_valid_files=total_valid_files,
        total_invalid_files=total_invalid_files,
        invalid_file_percentage=percentage(total_invalid_files, total_files),
        total_expenses=total_expenses,
        total_reimbursements=total_reimbursements,
        total_reimburseable=total_reimburseable,
        reimbursement_rate=percentage(total_reimbursements, total_expenses),
        reimburseable_rate=percentage(total_reimburseable, total_expenses),
        avg_expense_per_year=avg_expense_per_year,
        avg_receipts_per_year=avg_receipts_per_year,
        most_expensive_year=best_year,
        most_expensive_year_amount=best_amount,
        most_expensive_year_receipts=best_receipts,
        expense_percentage=percentage(best_amount, total_expenses),
        receipt_percentage=percentage(best_receipts, total_valid_files),
    )
