"""
Main Orchestrator for the HSA Receipt Analyzer

Ties the components together into one analysis run:
1. Scan: directory listing -> ReceiptTotals
2. Summarize: yearly aggregates -> SummaryStats
3. Format: aggregates -> nested report with currency strings

DESIGN DECISION: The orchestrator enforces the error tiers:
- An unreadable directory aborts the run (DirectoryAccessError)
- A directory without a single usable receipt aborts the run
  (NoValidReceiptsError), so no empty report is ever shown
- Invalid files never abort anything; they travel in the result
"""

import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from hsa_analyzer.aggregation.scanner import ReceiptScanner
from hsa_analyzer.aggregation.statistics import summarize
from hsa_analyzer.audit import AuditLogger
from hsa_analyzer.models.receipt import ReceiptTotals, SummaryStats
from hsa_analyzer.queries import ReceiptQueryExecutor
from hsa_analyzer.reporting.formatter import build_yearly_result


class NoValidReceiptsError(Exception):
    """The directory was readable but held no usable receipts."""

    def __init__(self, directory: str, invalid_count: int):
        self.directory = directory
        self.invalid_count = invalid_count
        super().__init__(f"No valid receipt files found in {directory}")


class AnalysisReport(BaseModel):
    """Everything one analysis run produced."""
    model_config = ConfigDict(frozen=True)

    totals: ReceiptTotals
    years: list[str]
    stats: SummaryStats
    report: dict


class AnalysisFlow:
    """
    Orchestrates an analysis run.

    Flow:
    1. Scan the directory (fatal on access errors)
    2. Collect the years that have data, ascending
    3. Summarize and format

    The returned report is read-only; queries run on top of it.
    """

    def __init__(
        self,
        scanner: Optional[ReceiptScanner] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._audit_logger = audit_logger
        self._scanner = scanner or ReceiptScanner(audit_logger)

    def run(
        self,
        directory: Union[str, os.PathLike],
        include_categories: bool = False,
    ) -> AnalysisReport:
        """
        Analyze a receipts directory.

        Raises:
            DirectoryAccessError: the directory cannot be listed
            NoValidReceiptsError: nothing could be aggregated
        """
        totals = self._scanner.aggregate_directory(directory)
        years = totals.years

        if not years:
            raise NoValidReceiptsError(os.fspath(directory), len(totals.invalid_files))

        stats = summarize(
            years,
            totals.expenses_by_year,
            totals.reimbursements_by_year,
            totals.receipt_counts,
            totals.invalid_files,
        )

        report = build_yearly_result(
            years,
            totals.expenses_by_year,
            totals.reimbursements_by_year,
            totals.receipt_counts,
            totals.expenses_by_category if include_categories else None,
        )

        if self._audit_logger:
            self._audit_logger.log_report_built(years, include_categories)

        return AnalysisReport(totals=totals, years=years, stats=stats, report=report)

    def query_executor(self, analysis: AnalysisReport) -> ReceiptQueryExecutor:
        """Query engine over the result of a run, sharing this flow's audit logger."""
        return ReceiptQueryExecutor(analysis.totals, audit_logger=self._audit_logger)
