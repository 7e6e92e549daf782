"""Query execution package."""

from hsa_analyzer.queries.executor import QueryExecutionError, ReceiptQueryExecutor

__all__ = ["QueryExecutionError", "ReceiptQueryExecutor"]
