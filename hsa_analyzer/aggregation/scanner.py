"""
Receipt Directory Scanner

Turns a directory listing into ReceiptTotals in a single pass.

DESIGN DECISION: The listing is read once, fully, and then folded.
An explicit accumulator is threaded through functools.reduce and
frozen into an immutable ReceiptTotals at the end. Nothing outside
the fold ever sees a partially built total.

Per entry:
- Hidden files (leading ".") are skipped without a trace
- Invalid filenames are recorded in invalid_files and nothing else
- Valid filenames with a non-positive amount are ignored silently
- Everything else becomes a Receipt and is added to every total

IMPORTANT: Running sums are rounded to cents after EVERY addition,
so totals match a hand-reconciled ledger to the cent.
"""

import os
from functools import reduce
from typing import Iterable, Optional, Union

from hsa_analyzer.audit import AuditLogger
from hsa_analyzer.models.receipt import (
    CategoryTotals,
    InvalidFileRecord,
    Receipt,
    ReceiptTotals,
)
from hsa_analyzer.validation.filename import SEGMENT_SEPARATOR, parse_file_name


UNCATEGORIZED = "uncategorized"


class ScanError(Exception):
    """Base error for directory scanning."""
    pass


class DirectoryAccessError(ScanError):
    """The receipts directory could not be listed. Fatal for the run."""
    pass


def add_cents(total: float, amount: float) -> float:
    """Add an amount to a running total and round back to cents."""
    return round(total + amount, 2)


def derive_category(description: str) -> str:
    """
    Category key for a description: its first word, lowercased.

    "Josh doctor" -> "josh", "  " -> "uncategorized"
    """
    first_word = description.strip().split(" ")[0]
    return (first_word or UNCATEGORIZED).lower()


class _TotalsAccumulator:
    """Mutable state of one fold. Never escapes ReceiptScanner."""

    def __init__(self):
        self.expenses_by_year: dict[str, float] = {}
        self.reimbursements_by_year: dict[str, float] = {}
        self.receipt_counts: dict[str, int] = {}
        self.invalid_files: list[InvalidFileRecord] = []
        self.expenses_by_category: dict[str, dict[str, CategoryTotals]] = {}
        self.valid_receipts: list[Receipt] = []

    def reject(self, file_name: str, error: str) -> None:
        self.invalid_files.append(InvalidFileRecord(file_name=file_name, error=error))

    def add(self, receipt: Receipt) -> None:
        year = receipt.year

        # Year maps are initialised together so they share one key set
        if year not in self.expenses_by_year:
            self.expenses_by_year[year] = 0.0
            self.reimbursements_by_year[year] = 0.0
            self.receipt_counts[year] = 0
            self.expenses_by_category[year] = {}

        categories = self.expenses_by_category[year]
        current = categories.get(receipt.category, CategoryTotals())

        # Reimbursed receipts are counted as expenses too
        self.expenses_by_year[year] = add_cents(self.expenses_by_year[year], receipt.amount)
        updated = {
            "expenses": add_cents(current.expenses, receipt.amount),
            "count": current.count + 1,
        }

        if receipt.is_reimbursed:
            self.reimbursements_by_year[year] = add_cents(
                self.reimbursements_by_year[year], receipt.amount
            )
            updated["reimbursements"] = add_cents(current.reimbursements, receipt.amount)

        categories[receipt.category] = current.model_copy(update=updated)
        self.receipt_counts[year] += 1
        self.valid_receipts.append(receipt)

    def freeze(self) -> ReceiptTotals:
        return ReceiptTotals(
            expenses_by_year=self.expenses_by_year,
            reimbursements_by_year=self.reimbursements_by_year,
            receipt_counts=self.receipt_counts,
            invalid_files=self.invalid_files,
            expenses_by_category=self.expenses_by_category,
            valid_receipts=self.valid_receipts,
        )


class ReceiptScanner:
    """
    Scans receipt directories and aggregates their filenames.

    GUARANTEES:
    - A file is either fully aggregated or not aggregated at all
    - Invalid files never abort the scan
    - An unreadable directory always raises DirectoryAccessError
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        """
        Initialize scanner.

        Args:
            audit_logger: Receives rejected/ignored file events.
                         If None, nothing is logged.
        """
        self._audit_logger = audit_logger

    def list_directory(self, directory: Union[str, os.PathLike]) -> list[str]:
        """List every entry name of a directory, or raise DirectoryAccessError."""
        try:
            return os.listdir(directory)
        except OSError as e:
            if self._audit_logger:
                self._audit_logger.log_directory_access_failed(
                    directory=os.fspath(directory),
                    error_message=str(e),
                )
            raise DirectoryAccessError(f"Cannot access directory: {e}") from e

    def aggregate_directory(self, directory: Union[str, os.PathLike]) -> ReceiptTotals:
        """List a directory once and aggregate everything in it."""
        if self._audit_logger:
            self._audit_logger.log_scan_started(os.fspath(directory))

        totals = self.aggregate_file_names(self.list_directory(directory))

        if self._audit_logger:
            self._audit_logger.log_scan_completed(
                directory=os.fspath(directory),
                valid_count=len(totals.valid_receipts),
                invalid_count=len(totals.invalid_files),
            )
        return totals

    def aggregate_file_names(self, file_names: Iterable[str]) -> ReceiptTotals:
        """Fold an already materialized listing into ReceiptTotals."""
        accumulator = reduce(self._fold_entry, file_names, _TotalsAccumulator())
        return accumulator.freeze()

    def _fold_entry(self, accumulator: _TotalsAccumulator, file_name: str) -> _TotalsAccumulator:
        # Hidden files (.DS_Store and friends)
        if file_name.startswith("."):
            return accumulator

        parsed = parse_file_name(file_name)

        if not parsed.is_valid:
            accumulator.reject(file_name, parsed.error)
            if self._audit_logger:
                self._audit_logger.log_file_rejected(file_name, parsed.error)
            return accumulator

        if parsed.amount <= 0:
            if self._audit_logger:
                self._audit_logger.log_file_dropped(file_name, parsed.amount)
            return accumulator

        accumulator.add(Receipt(
            date=file_name.split(SEGMENT_SEPARATOR)[0],
            year=parsed.year,
            description=parsed.description,
            amount=parsed.amount,
            is_reimbursed=parsed.is_reimbursement,
            category=derive_category(parsed.description),
        ))
        return accumulator


def aggregate_directory(
    directory: Union[str, os.PathLike],
    audit_logger: Optional[AuditLogger] = None,
) -> ReceiptTotals:
    """Aggregate a receipts directory. See ReceiptScanner.aggregate_directory."""
    return ReceiptScanner(audit_logger).aggregate_directory(directory)


def aggregate_file_names(
    file_names: Iterable[str],
    audit_logger: Optional[AuditLogger] = None,
) -> ReceiptTotals:
    """Aggregate a list of filenames. See ReceiptScanner.aggregate_file_names."""
    return ReceiptScanner(audit_logger).aggregate_file_names(file_names)
