"""Command-line interface for the HSA receipt analyzer."""

import argparse
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from hsa_analyzer import __version__
from hsa_analyzer.aggregation.scanner import DirectoryAccessError
from hsa_analyzer.audit import AuditLogger, configure_logging
from hsa_analyzer.config import SETTINGS_GROUPS, get_settings, validate_all_settings
from hsa_analyzer.models.receipt import ChartPoint, InvalidFileRecord, SummaryStats
from hsa_analyzer.orchestrator import AnalysisFlow, AnalysisReport, NoValidReceiptsError
from hsa_analyzer.reporting.formatter import format_currency, prepare_chart_data

EXPECTED_PATTERN = "Expected pattern: <yyyy-mm-dd> - <description> - $<amount>.<ext>"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="hsa-analyzer",
        description=(
            "Analyze HSA expenses and reimbursements by year from receipt files."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Expected file format:
  <yyyy-mm-dd> - <description> - $<amount>.<ext>
  <yyyy-mm-dd> - <description> - $<amount>.reimbursed.<ext>

Examples:
  %(prog)s --dir-path ./receipts
  %(prog)s -d ./receipts --by-category
  %(prog)s -d ./receipts --summary-only --no-color
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-d", "--dir-path",
        default=None,
        help="The directory path containing receipt files (default: $HSA_RECEIPTS_DIR)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--summary-only",
        action="store_true",
        default=None,
        help="Show only summary statistics",
    )

    parser.add_argument(
        "--by-category",
        action="store_true",
        default=None,
        help="Show expenses grouped by category (e.g., person)",
    )

    return parser


def render_invalid_files(console: Console, invalid_files: list[InvalidFileRecord]) -> None:
    """Warning table of files that did not match the naming pattern."""
    console.print(
        "WARNING: The following files do not match the expected pattern",
        style="yellow",
        markup=False,
    )
    console.print(EXPECTED_PATTERN, style="dim", markup=False)

    table = Table(show_edge=False, header_style="cyan")
    table.add_column("Filename")
    table.add_column("Error")
    for record in invalid_files:
        table.add_row(Text(record.file_name, style="yellow"), Text(record.error, style="red"))

    console.print(table)
    console.print()


def render_report_tree(console: Console, report: dict) -> None:
    """Nested report as a tree: year -> totals (-> categories)."""
    tree = Tree("Receipts by year", guide_style="dim")

    def add_rows(branch: Tree, rows: dict) -> None:
        for key, value in rows.items():
            if isinstance(value, dict):
                add_rows(branch.add(Text(str(key), style="cyan")), value)
            else:
                branch.add(Text(f"{key}: {value}"))

    add_rows(tree, report)
    console.print(tree)
    console.print()


def _bar(value: float, max_value: float, width: int) -> str:
    if max_value <= 0:
        filled = 0
    elif value == max_value:
        filled = width  # also covers an infinite maximum
    else:
        filled = int(value / max_value * width)
    return "█" * filled + "░" * (width - filled)


def render_bar_chart(console: Console, title: str, points: list[ChartPoint], width: int) -> None:
    """Single-series horizontal bar chart."""
    max_value = max((p.value for p in points), default=0)
    console.print(title, style="bold", markup=False)
    for point in points:
        console.print(
            f"{point.label} ╢{_bar(point.value, max_value, width)} {format_currency(point.value)}",
            markup=False,
        )
    console.print()


def render_comparison_chart(
    console: Console,
    expense_data: list[ChartPoint],
    reimbursement_data: list[ChartPoint],
    width: int,
) -> None:
    """Expenses and reimbursements side by side on one scale."""
    max_value = max((p.value for p in expense_data + reimbursement_data), default=0)

    console.print("Expenses vs Reimbursements by year", style="bold", markup=False)
    for expense, reimbursement in zip(expense_data, reimbursement_data):
        console.print(
            f"{expense.label} Expenses       ╢{_bar(expense.value, max_value, width)} "
            f"{format_currency(expense.value)}",
            markup=False,
        )
        console.print(
            f"{reimbursement.label} Reimbursements ╢{_bar(reimbursement.value, max_value, width)} "
            f"{format_currency(reimbursement.value)}",
            markup=False,
        )
    console.print(" " * 20 + "╚" + "═" * width)
    console.print()


def render_summary(console: Console, years: list[str], stats: SummaryStats) -> None:
    """Summary statistics block."""
    console.print("Summary Statistics", style="bold")
    console.print("━" * 50)

    def line(label: str, value: str, style: str = "cyan") -> None:
        text = Text()
        text.append(label, style=style)
        text.append(f" {value}")
        console.print(text)

    line("Total Receipts Processed:", str(stats.total_files))
    if stats.total_invalid_files > 0:
        line(
            "Invalid Receipts:",
            f"{stats.total_invalid_files} ({stats.invalid_file_percentage}%)",
            style="yellow",
        )
    line("Years Covered:", f"{len(years)} ({years[0]} - {years[-1]})")
    line("Total Expenses:", format_currency(stats.total_expenses))
    line(
        "Total Reimbursements:",
        f"{format_currency(stats.total_reimbursements)} ({stats.reimbursement_rate}%)",
    )
    line(
        "Total Reimburseable:",
        f"{format_currency(stats.total_reimburseable)} ({stats.reimburseable_rate}%)",
        style="green",
    )
    line("Average Expenses/Year:", f"${stats.avg_expense_per_year}")
    line("Average Receipts/Year:", str(stats.avg_receipts_per_year))

    if stats.most_expensive_year:
        line(
            "Most Expensive Year:",
            f"{stats.most_expensive_year} "
            f"({format_currency(stats.most_expensive_year_amount)} [{stats.expense_percentage}%], "
            f"{stats.most_expensive_year_receipts} receipts [{stats.receipt_percentage}%])",
        )


def render_analysis(
    console: Console,
    analysis: AnalysisReport,
    summary_only: bool,
    chart_width: int,
) -> None:
    """Print a full analysis: invalid files, report, charts, summary."""
    if analysis.totals.invalid_files:
        render_invalid_files(console, analysis.totals.invalid_files)

    if not summary_only:
        render_report_tree(console, analysis.report)

        expense_data, reimbursement_data = prepare_chart_data(
            analysis.years,
            analysis.totals.expenses_by_year,
            analysis.totals.reimbursements_by_year,
        )
        render_bar_chart(console, "Expenses by year", expense_data, chart_width)
        render_bar_chart(console, "Reimbursements by year", reimbursement_data, chart_width)
        render_comparison_chart(console, expense_data, reimbursement_data, chart_width)

    render_summary(console, analysis.years, analysis.stats)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(no_color=args.no_color, highlight=False, soft_wrap=True)
    err_console = Console(stderr=True, no_color=args.no_color, highlight=False, soft_wrap=True)

    status = validate_all_settings()
    failed = [name for name in SETTINGS_GROUPS if not status.get(name, False)]
    if failed:
        for name in failed:
            err_console.print(f"Error: Invalid {name} settings", style="red", markup=False)
            err_console.print(f"   {status.get(f'{name}_error', '')}", style="dim", markup=False)
        return 1

    settings = get_settings()
    app_settings = settings.app
    log_settings = settings.logging
    configure_logging(log_settings.level, log_settings.json_output)

    directory = args.dir_path or app_settings.receipts_dir
    if not directory:
        parser.error("the following arguments are required: -d/--dir-path")

    summary_only = app_settings.summary_only if args.summary_only is None else args.summary_only
    by_category = app_settings.by_category if args.by_category is None else args.by_category

    flow = AnalysisFlow(audit_logger=AuditLogger())

    try:
        analysis = flow.run(directory, include_categories=by_category)
    except DirectoryAccessError as e:
        err_console.print("Error: Cannot access directory", style="red", markup=False)
        err_console.print(
            f"   {str(e).replace('Cannot access directory: ', '')}",
            style="dim",
            markup=False,
        )
        return 1
    except NoValidReceiptsError:
        err_console.print(
            "Error: No valid receipt files found in the specified directory",
            style="red",
            markup=False,
        )
        err_console.print(EXPECTED_PATTERN, style="dim", markup=False)
        return 1

    render_analysis(console, analysis, summary_only, app_settings.chart_width)
    return 0


if __name__ == "__main__":
    sys.exit(main())
