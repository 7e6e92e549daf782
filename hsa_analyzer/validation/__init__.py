"""Filename validation package."""

from hsa_analyzer.validation.filename import (
    FILENAME_RULES,
    FilenameCandidate,
    FilenameIssue,
    parse_file_name,
    run_rules,
)

__all__ = [
    "FILENAME_RULES",
    "FilenameCandidate",
    "FilenameIssue",
    "parse_file_name",
    "run_rules",
]
