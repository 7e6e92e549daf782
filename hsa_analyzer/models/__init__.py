"""
Data Models Package

This package contains all Pydantic models used by the HSA Receipt Analyzer.
Everything the pipeline produces conforms to these schemas.
"""

from hsa_analyzer.models.receipt import (
    CategoryTotals,
    ChartPoint,
    InvalidFileRecord,
    ParsedFilename,
    Receipt,
    ReceiptQuery,
    ReceiptQueryResult,
    ReceiptTotals,
    SummaryStats,
)
from hsa_analyzer.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Receipt models
    "CategoryTotals",
    "ChartPoint",
    "InvalidFileRecord",
    "ParsedFilename",
    "Receipt",
    "ReceiptQuery",
    "ReceiptQueryResult",
    "ReceiptTotals",
    "SummaryStats",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
