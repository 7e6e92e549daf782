"""
Receipt Filename Validation

A receipt filename IS the record:

    <yyyy-mm-dd> - <description> - $<amount>.<ext>
    <yyyy-mm-dd> - <description> - $<amount>.reimbursed.<ext>

DESIGN DECISION: Validation is an ordered chain of rules.
Each rule receives the candidate refined by the rules before it and
returns either a further-refined candidate or a FilenameIssue.
The first issue wins; later rules never run.

ORDER MATTERS:
1. Three segments separated by " - "
2. Date matches yyyy-mm-dd
3. Date is a real calendar date (same message as rule 2)
4. Amount starts with $
5. Amount ends with a 2-5 letter extension
6. Extension (and any .reimbursed. marker) is stripped
7. What is left is digits, a dot and exactly two digits
8. The amount is converted to a float

IMPORTANT: Parsing NEVER fixes a filename.
"$50,00.pdf" is reported, not read as fifty dollars.
"""

import re
from datetime import date
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict

from hsa_analyzer.models.receipt import ParsedFilename


SEGMENT_SEPARATOR = " - "
REIMBURSED_MARKER = ".reimbursed."

# ASCII digits only; str.isdigit() and \d both accept other scripts
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_EXTENSION_PATTERN = re.compile(r"\.[A-Za-z]{2,5}\Z")
_AMOUNT_PATTERN = re.compile(r"[0-9]+\.[0-9]{2}")

FORMAT_ERROR = 'File name should have format "yyyy-mm-dd - description - $amount.ext"'
MISSING_EXTENSION_ERROR = "File is missing extension (should end with .pdf, .jpg, etc.)"


class FilenameCandidate(BaseModel):
    """
    A filename part-way through the rule chain.

    Fields are filled in as rules pass.
    """
    model_config = ConfigDict(frozen=True)

    file_name: str
    date: Optional[str] = None
    description: Optional[str] = None
    amount_token: Optional[str] = None
    amount_text: Optional[str] = None
    amount: Optional[float] = None


class FilenameIssue(BaseModel):
    """The rule that rejected a filename and the message for the user."""
    model_config = ConfigDict(frozen=True)

    rule: str
    message: str


RuleOutcome = Union[FilenameCandidate, FilenameIssue]
FilenameRule = Callable[[FilenameCandidate], RuleOutcome]


# =============================================================================
# RULES
# =============================================================================

def check_segments(candidate: FilenameCandidate) -> RuleOutcome:
    parts = candidate.file_name.split(SEGMENT_SEPARATOR)
    if len(parts) != 3:
        return FilenameIssue(rule="segments", message=FORMAT_ERROR)

    date_part, description, amount_token = parts
    return candidate.model_copy(update={
        "date": date_part,
        "description": description,
        "amount_token": amount_token,
    })


def check_date_format(candidate: FilenameCandidate) -> RuleOutcome:
    if not _DATE_PATTERN.fullmatch(candidate.date):
        return FilenameIssue(
            rule="date_format",
            message=f'Date "{candidate.date}" should be yyyy-mm-dd format',
        )
    return candidate


def check_calendar_date(candidate: FilenameCandidate) -> RuleOutcome:
    year, month, day = (int(part) for part in candidate.date.split("-"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        parsed = None

    if parsed is None or (parsed.year, parsed.month, parsed.day) != (year, month, day):
        # Same message as check_date_format, kept for compatibility
        return FilenameIssue(
            rule="calendar_date",
            message=f'Date "{candidate.date}" should be yyyy-mm-dd format',
        )
    return candidate


def check_dollar_sign(candidate: FilenameCandidate) -> RuleOutcome:
    if not candidate.amount_token or not candidate.amount_token.startswith("$"):
        return FilenameIssue(
            rule="dollar_sign",
            message=f'Amount "{candidate.amount_token}" should start with $',
        )
    return candidate


def check_extension(candidate: FilenameCandidate) -> RuleOutcome:
    if not _EXTENSION_PATTERN.search(candidate.amount_token):
        return FilenameIssue(rule="extension", message=MISSING_EXTENSION_ERROR)
    return candidate


def strip_extension(candidate: FilenameCandidate) -> RuleOutcome:
    amount_text = candidate.amount_token[1:]

    if REIMBURSED_MARKER in amount_text:
        # Marker and the real extension go together
        amount_text = amount_text.partition(REIMBURSED_MARKER)[0]
    else:
        amount_text = amount_text.rpartition(".")[0]

    return candidate.model_copy(update={"amount_text": amount_text})


def check_amount_format(candidate: FilenameCandidate) -> RuleOutcome:
    if not _AMOUNT_PATTERN.fullmatch(candidate.amount_text):
        return FilenameIssue(
            rule="amount_format",
            message=f'Amount "{candidate.amount_token}" should be a valid format like $50.00',
        )
    return candidate


def convert_amount(candidate: FilenameCandidate) -> RuleOutcome:
    return candidate.model_copy(update={"amount": float(candidate.amount_text)})


FILENAME_RULES: tuple[FilenameRule, ...] = (
    check_segments,
    check_date_format,
    check_calendar_date,
    check_dollar_sign,
    check_extension,
    strip_extension,
    check_amount_format,
    convert_amount,
)


# =============================================================================
# ENTRY POINTS
# =============================================================================

def run_rules(
    file_name: str,
    rules: tuple[FilenameRule, ...] = FILENAME_RULES,
) -> RuleOutcome:
    """
    Run the rule chain over one filename.

    Returns the fully refined candidate, or the first issue found.
    """
    outcome: RuleOutcome = FilenameCandidate(file_name=file_name)
    for rule in rules:
        outcome = rule(outcome)
        if isinstance(outcome, FilenameIssue):
            return outcome
    return outcome


def parse_file_name(file_name: str) -> ParsedFilename:
    """
    Parse a receipt filename into a ParsedFilename.

    Pure: the same name always gives the same result.
    Reimbursement is detected over the whole filename, independently
    of how the amount was stripped.
    """
    outcome = run_rules(file_name)

    if isinstance(outcome, FilenameIssue):
        return ParsedFilename(is_valid=False, error=outcome.message)

    return ParsedFilename(
        year=outcome.date[:4],
        description=outcome.description,
        amount=outcome.amount,
        is_reimbursement=REIMBURSED_MARKER in file_name,
        is_valid=True,
    )
