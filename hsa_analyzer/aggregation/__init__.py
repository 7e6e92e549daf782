"""Aggregation package: directory scanning and summary statistics."""

from hsa_analyzer.aggregation.scanner import (
    DirectoryAccessError,
    ReceiptScanner,
    ScanError,
    aggregate_directory,
    aggregate_file_names,
    derive_category,
)
from hsa_analyzer.aggregation.statistics import summarize, to_fixed

__all__ = [
    "DirectoryAccessError",
    "ReceiptScanner",
    "ScanError",
    "aggregate_directory",
    "aggregate_file_names",
    "derive_category",
    "summarize",
    "to_fixed",
]
