"""
Audit Logger

DESIGN DECISION: Every significant step of an analysis run is logged.
This provides:
1. Traceability of rejected and ignored files
2. Debugging capability when a directory cannot be read
3. A record of the queries answered from the data

The audit logger:
- Is synchronous, like the rest of the pipeline
- Writes structured events through structlog
- Supports correlation IDs to trace the events of one run
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from hsa_analyzer.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "WARNING", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    JSON lines by default; a human-friendly console renderer otherwise.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level.upper())

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Every event is written to the structured log at the level
    matching its severity.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            correlation_id: Attached to every event logged through
                    this instance. A fresh one is created if None.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("hsa_analyzer.audit")
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        """Log an audit event and keep it for inspection."""
        self.events.append(event)
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_scan_started(self, directory: str) -> None:
        """Log the start of a directory scan."""
        self.log(AuditEventBuilder.scan_started(
            directory=directory,
            correlation_id=self.correlation_id,
        ))

    def log_scan_completed(
        self,
        directory: str,
        valid_count: int,
        invalid_count: int,
    ) -> None:
        """Log scan completion with receipt counts."""
        self.log(AuditEventBuilder.scan_completed(
            directory=directory,
            valid_count=valid_count,
            invalid_count=invalid_count,
            correlation_id=self.correlation_id,
        ))

    def log_directory_access_failed(self, directory: str, error_message: str) -> None:
        """Log a directory that could not be listed."""
        self.log(AuditEventBuilder.directory_access_failed(
            directory=directory,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def log_file_rejected(self, file_name: str, error: str) -> None:
        """Log a filename that failed validation."""
        self.log(AuditEventBuilder.file_rejected(
            file_name=file_name,
            error=error,
            correlation_id=self.correlation_id,
        ))

    def log_file_dropped(self, file_name: str, amount: float) -> None:
        """Log a valid filename ignored for its non-positive amount."""
        self.log(AuditEventBuilder.file_dropped(
            file_name=file_name,
            amount=amount,
            correlation_id=self.correlation_id,
        ))

    def log_report_built(self, years: list[str], include_categories: bool) -> None:
        """Log report construction."""
        self.log(AuditEventBuilder.report_built(
            years=years,
            include_categories=include_categories,
            correlation_id=self.correlation_id,
        ))

    def log_query_executed(self, query_type: str, result_count: int) -> None:
        """Log query execution."""
        self.log(AuditEventBuilder.query_executed(
            query_type=query_type,
            result_count=result_count,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of an analysis run and pass it through
    all subsequent operations.
    """
    return uuid4()
