"""
Core Data Models for the HSA Receipt Analyzer

These models define the schemas for everything that flows from a directory
listing to the final report:
1. ParsedFilename - the outcome of parsing one filename
2. Receipt - an accepted expense record
3. CategoryTotals / ReceiptTotals - the aggregation result
4. SummaryStats - derived statistics
5. ReceiptQuery / ReceiptQueryResult - read-only queries over the result

DESIGN DECISION: Everything built by the pipeline is frozen.
A record is produced once and only read afterwards. The only values that
change during a run are accumulator totals, and those never leave the fold.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# PARSING MODELS
# =============================================================================

class ParsedFilename(BaseModel):
    """
    Result of parsing a single receipt filename.

    Invalid results carry no year/description and a zero amount.
    The error message is what the user sees in the warning table.
    """
    model_config = ConfigDict(frozen=True)

    year: Optional[str] = Field(
        default=None,
        description="Four digit year taken from the date segment"
    )
    description: Optional[str] = Field(
        default=None,
        description="Middle segment of the filename, untouched"
    )
    amount: float = Field(
        default=0.0,
        description="Receipt amount in dollars"
    )
    is_reimbursement: bool = Field(
        default=False,
        description="Filename carries the .reimbursed. marker"
    )
    is_valid: bool = Field(
        ...,
        description="Did the filename pass every rule?"
    )
    error: Optional[str] = Field(
        default=None,
        description="Message of the first rule that failed"
    )


class InvalidFileRecord(BaseModel):
    """A filename that failed parsing. Reported, never aggregated."""
    model_config = ConfigDict(frozen=True)

    file_name: str
    error: str


# =============================================================================
# RECEIPT MODEL
# =============================================================================

class Receipt(BaseModel):
    """
    A validated expense record derived from one filename.

    CRITICAL: Only created for valid filenames with a positive amount.
    Zero amounts are dropped before a Receipt exists.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(
        ...,
        pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$",
        description="Receipt date (yyyy-mm-dd)"
    )
    year: str = Field(
        ...,
        min_length=4,
        max_length=4,
    )
    description: str = Field(
        ...,
        description="Description exactly as written in the filename"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount in dollars"
    )
    is_reimbursed: bool = False
    category: str = Field(
        ...,
        min_length=1,
        description="Lowercased first word of the description"
    )

    def to_dict(self) -> dict:
        """Convert to a plain dictionary for query results."""
        return {
            "date": self.date,
            "year": self.year,
            "description": self.description,
            "amount": self.amount,
            "is_reimbursed": self.is_reimbursed,
            "category": self.category,
        }


# =============================================================================
# AGGREGATION MODELS
# =============================================================================

class CategoryTotals(BaseModel):
    """
    Running totals for one category within one year.

    NOTE: reimbursements is a second sum over the same receipts,
    not a deduction. reimbursements <= expenses is not enforced.
    """
    model_config = ConfigDict(frozen=True)

    expenses: float = 0.0
    reimbursements: float = 0.0
    count: int = Field(default=0, ge=0)


class ReceiptTotals(BaseModel):
    """
    Immutable result of one aggregation pass over a directory listing.

    Year maps always share the same key set. Category maps keep the
    order in which categories were first seen.
    """
    model_config = ConfigDict(frozen=True)

    expenses_by_year: dict[str, float] = Field(default_factory=dict)
    reimbursements_by_year: dict[str, float] = Field(default_factory=dict)
    receipt_counts: dict[str, int] = Field(default_factory=dict)
    invalid_files: list[InvalidFileRecord] = Field(default_factory=list)
    expenses_by_category: dict[str, dict[str, CategoryTotals]] = Field(
        default_factory=dict,
        description="year -> category -> totals"
    )
    valid_receipts: list[Receipt] = Field(
        default_factory=list,
        description="Accepted receipts in directory listing order"
    )

    @property
    def years(self) -> list[str]:
        """All years with data, ascending."""
        return sorted(set(self.expenses_by_year) | set(self.reimbursements_by_year))


# =============================================================================
# STATISTICS MODELS
# =============================================================================

class SummaryStats(BaseModel):
    """
    Statistics derived from the yearly aggregates.

    Percentages and the yearly average are display strings fixed to a
    number of decimals. A guarded division yields the string "0".
    """
    model_config = ConfigDict(frozen=True)

    total_files: int = Field(ge=0)
    total_valid_files: int = Field(ge=0)
    total_invalid_files: int = Field(ge=0)
    invalid_file_percentage: str

    total_expenses: float
    total_reimbursements: float
    total_reimburseable: float
    reimbursement_rate: str
    reimburseable_rate: str

    avg_expense_per_year: str
    avg_receipts_per_year: int

    most_expensive_year: Optional[str] = None
    most_expensive_year_amount: float = 0.0
    most_expensive_year_receipts: int = 0
    expense_percentage: str
    receipt_percentage: str


class ChartPoint(BaseModel):
    """One bar of a per-year chart."""
    model_config = ConfigDict(frozen=True)

    label: str
    value: float


# =============================================================================
# QUERY MODELS (for the assistant tool layer)
# =============================================================================

class ReceiptQuery(BaseModel):
    """
    A structured, read-only query over aggregated receipts.

    The assistant layer maps each of its tools onto one query_type.
    Execution is deterministic and never touches the filesystem.
    """

    query_type: str = Field(
        ...,
        pattern="^(search|largest|unreimbursed|year|category|categories)$",
        description="Which projection to run"
    )
    keyword: Optional[str] = Field(
        default=None,
        description="Keyword for description search (case-insensitive)"
    )
    year: Optional[str] = Field(
        default=None,
        description="Restrict to one year, e.g. '2023'"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category name, typically a person like 'josh'"
    )
    count: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="How many receipts a 'largest' query returns"
    )
    min_amount: float = Field(
        default=0.0,
        ge=0,
        description="Lower bound for 'unreimbursed' queries"
    )


class ReceiptQueryResult(BaseModel):
    """
    Result of executing a ReceiptQuery.

    `text` is the rendered answer the assistant reads back to the user.
    """

    query_type: str
    data_found: bool = Field(
        ...,
        description="Was any data found?"
    )
    result_count: int = Field(
        ge=0,
        description="Number of results"
    )
    results: list[dict] = Field(
        default_factory=list,
        description="Matching receipts or category rows as dicts"
    )
    text: str = Field(
        ...,
        description="Human-readable answer"
    )
