"""
Audit Models for the HSA Receipt Analyzer

Every significant step of an analysis run is described by an AuditEvent.
This provides:
1. Traceability of which files were rejected and why
2. Debugging information when a directory cannot be read
3. A record of which queries were answered from the data

DESIGN DECISION: Events are plain data. Writing them is the job of the
AuditLogger, so the core never decides how or where logs end up.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Directory scanning
    DIRECTORY_SCAN_STARTED = "directory_scan_started"
    DIRECTORY_SCAN_COMPLETED = "directory_scan_completed"
    DIRECTORY_ACCESS_FAILED = "directory_access_failed"

    # Per-file outcomes
    FILE_REJECTED = "file_rejected"
    FILE_DROPPED = "file_dropped"  # valid name, non-positive amount

    # Reporting and queries
    REPORT_BUILT = "report_built"
    QUERY_EXECUTED = "query_executed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - all events of one analysis run share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one run"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.file_rejected(file_name, error, correlation_id)
        event = AuditEventBuilder.scan_completed(directory, 12, 3, correlation_id)
    """

    @staticmethod
    def scan_started(
        directory: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DIRECTORY_SCAN_STARTED,
            correlation_id=correlation_id,
            description=f"Scanning receipts in {directory}"[:500],
            details={"directory": directory},
        )

    @staticmethod
    def scan_completed(
        directory: str,
        valid_count: int,
        invalid_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DIRECTORY_SCAN_COMPLETED,
            correlation_id=correlation_id,
            description=f"Scan finished: {valid_count} receipts, {invalid_count} invalid files",
            details={
                "directory": directory,
                "valid_count": valid_count,
                "invalid_count": invalid_count,
            },
        )

    @staticmethod
    def directory_access_failed(
        directory: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DIRECTORY_ACCESS_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Cannot access receipts directory",
            details={"directory": directory},
            error_message=error_message,
        )

    @staticmethod
    def file_rejected(
        file_name: str,
        error: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILE_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Receipt filename rejected",
            details={"file_name": file_name, "error": error},
        )

    @staticmethod
    def file_dropped(
        file_name: str,
        amount: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILE_DROPPED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Receipt with non-positive amount ignored",
            details={"file_name": file_name, "amount": amount},
        )

    @staticmethod
    def report_built(
        years: list[str],
        include_categories: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_BUILT,
            correlation_id=correlation_id,
            description=f"Report built for {len(years)} years",
            details={
                "years": years,
                "include_categories": include_categories,
            },
        )

    @staticmethod
    def query_executed(
        query_type: str,
        result_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            correlation_id=correlation_id,
            description=f"Query executed: {query_type} returned {result_count} results",
            details={
                "query_type": query_type,
                "result_count": result_count,
            },
        )
