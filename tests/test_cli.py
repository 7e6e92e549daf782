"""
Tests for the command-line interface
"""

import io

import pytest
from rich.console import Console

from hsa_analyzer import __version__
from hsa_analyzer.cli import create_parser, main, render_bar_chart
from hsa_analyzer.config import get_settings
from hsa_analyzer.models.receipt import ChartPoint


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "HSA_RECEIPTS_DIR",
        "HSA_BY_CATEGORY",
        "HSA_SUMMARY_ONLY",
        "HSA_CHART_WIDTH",
        "HSA_LOG_LEVEL",
        "HSA_LOG_JSON_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def receipts_dir(tmp_path):
    directory = tmp_path / "receipts"
    directory.mkdir()
    for name in [
        "2021-01-01 - Josh doctor - $50.00.pdf",
        "2022-03-01 - jane pharmacy - $150.00.reimbursed.jpg",
        "bad.pdf",
    ]:
        (directory / name).touch()
    return directory


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test unset flags fall back to None so settings can apply."""
        args = create_parser().parse_args([])
        assert args.dir_path is None
        assert args.summary_only is None
        assert args.by_category is None
        assert args.no_color is False

    def test_version(self, capsys):
        """Test --version prints the version and exits."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for full CLI runs."""

    def test_full_report(self, receipts_dir, capsys):
        """Test the default output sections."""
        assert main(["-d", str(receipts_dir), "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "WARNING: The following files do not match the expected pattern" in out
        assert "bad.pdf" in out
        assert "Receipts by year" in out
        assert "expenses: $150.00" in out
        assert "Expenses by year" in out
        assert "Summary Statistics" in out
        assert "Total Expenses: $200.00" in out
        assert "Most Expensive Year: 2022" in out

    def test_summary_only(self, receipts_dir, capsys):
        """Test --summary-only skips the report and charts."""
        assert main(["-d", str(receipts_dir), "--no-color", "--summary-only"]) == 0
        out = capsys.readouterr().out
        assert "Receipts by year" not in out
        assert "Expenses by year" not in out
        assert "Summary Statistics" in out

    def test_by_category(self, receipts_dir, capsys):
        """Test --by-category adds the breakdown."""
        assert main(["-d", str(receipts_dir), "--no-color", "--by-category"]) == 0
        out = capsys.readouterr().out
        assert "by_category" in out
        assert "josh" in out

    def test_directory_from_settings(self, receipts_dir, monkeypatch, capsys):
        """Test HSA_RECEIPTS_DIR stands in for --dir-path."""
        monkeypatch.setenv("HSA_RECEIPTS_DIR", str(receipts_dir))
        assert main(["--no-color", "--summary-only"]) == 0
        assert "Summary Statistics" in capsys.readouterr().out

    def test_missing_directory_argument(self):
        """Test running without any directory is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_missing_directory(self, tmp_path, capsys):
        """Test an unreadable directory exits with 1."""
        assert main(["-d", str(tmp_path / "missing"), "--no-color"]) == 1
        assert "Error: Cannot access directory" in capsys.readouterr().err

    def test_no_valid_receipts(self, tmp_path, capsys):
        """Test a directory without receipts exits with 1."""
        empty = tmp_path / "empty"
        empty.mkdir()
        assert main(["-d", str(empty), "--no-color"]) == 1
        err = capsys.readouterr().err
        assert "Error: No valid receipt files found in the specified directory" in err
        assert "Expected pattern" in err

    def test_very_large_amount(self, tmp_path, capsys):
        """Test a 27-digit amount renders instead of crashing."""
        directory = tmp_path / "big"
        directory.mkdir()
        (directory / "2021-01-01 - josh big - $100000000000000000000000000.00.pdf").touch()
        assert main(["-d", str(directory), "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "Total Expenses: $100000000000000000000000000.00" in out


class TestSettingsValidation:
    """Invalid settings stop the run before anything is scanned."""

    def test_invalid_app_settings(self, receipts_dir, monkeypatch, capsys):
        """Test an out of range chart width exits with 1."""
        monkeypatch.setenv("HSA_CHART_WIDTH", "2")
        assert main(["-d", str(receipts_dir), "--no-color"]) == 1
        captured = capsys.readouterr()
        assert "Error: Invalid app settings" in captured.err
        assert "chart_width" in captured.err
        assert "Summary Statistics" not in captured.out

    def test_invalid_logging_settings(self, receipts_dir, monkeypatch, capsys):
        """Test an unknown log level exits with 1."""
        monkeypatch.setenv("HSA_LOG_LEVEL", "chatty")
        assert main(["-d", str(receipts_dir), "--no-color"]) == 1
        err = capsys.readouterr().err
        assert "Error: Invalid logging settings" in err
        assert "Error: Invalid app settings" not in err


class TestBarChart:
    """Tests for the terminal bar chart."""

    def test_infinite_value(self):
        """Test an infinite value fills the bar and finite ones stay empty."""
        buffer = io.StringIO()
        console = Console(file=buffer, no_color=True, highlight=False, soft_wrap=True)
        render_bar_chart(
            console,
            "Expenses by year",
            [ChartPoint(label="2021", value=float("inf")), ChartPoint(label="2022", value=5.0)],
            10,
        )
        lines = buffer.getvalue().splitlines()
        assert lines[1] == "2021 ╢" + "█" * 10 + " $Infinity"
        assert lines[2] == "2022 ╢" + "░" * 10 + " $5.00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
