"""Tests for CLI commands."""

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from stocktax.cli import app

runner = CliRunner()


class TestCLI:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "stocktax" in result.output

    def test_calculate_help(self):
        result = runner.invoke(app, ["calculate", "--help"])
        assert result.exit_code == 0

    def test_sales_help(self):
        result = runner.invoke(app, ["sales", "--help"])
        assert result.exit_code == 0

    def test_rate_help(self):
        result = runner.invoke(app, ["rate", "--help"])
        assert result.exit_code == 0

    def test_log_level_defaults_to_errors_only(self, nbp_file: Path, monkeypatch):
        levels = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: levels.append(kwargs["level"]))
        runner.invoke(app, ["rate", "2020-02-03", "-r", str(nbp_file)])
        runner.invoke(app, ["-v", "rate", "2020-02-03", "-r", str(nbp_file)])
        assert levels == [logging.ERROR, logging.DEBUG]


class TestCalculateCommand:
    def test_summary(self, statement_file: Path, nbp_file: Path):
        result = runner.invoke(
            app, ["calculate", str(statement_file), "--rates", str(nbp_file), "--year", "2021"]
        )
        assert result.exit_code == 0
        assert "805.00" in result.output
        assert "152.95" in result.output

    def test_json_output(self, statement_file: Path, nbp_file: Path):
        result = runner.invoke(
            app,
            ["calculate", str(statement_file), "-r", str(nbp_file), "-y", "2021",
             "--include-dividends", "--json"],
        )
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["summary"]["fiscal_year"] == 2021
        assert payload["summary"]["tax_due"] == "154.05"
        assert payload["warnings"] == []

    def test_custom_tax_rate(self, statement_file: Path, nbp_file: Path):
        result = runner.invoke(
            app,
            ["calculate", str(statement_file), "-r", str(nbp_file), "-y", "2021",
             "--tax-rate", "0.1", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["summary"]["tax_due"] == "80.50"

    def test_custom_splits_file(self, statement_file: Path, nbp_file: Path, tmp_path: Path):
        splits = tmp_path / "splits.json"
        splits.write_text("{}")
        result = runner.invoke(
            app,
            ["calculate", str(statement_file), "-r", str(nbp_file), "-y", "2021",
             "--splits", str(splits)],
        )
        assert result.exit_code == 0
        assert "UNMATCHED_SALE" in result.output

    def test_missing_rates_file(self, statement_file: Path, tmp_path: Path):
        result = runner.invoke(
            app,
            ["calculate", str(statement_file), "-r", str(tmp_path / "none.csv"), "-y", "2021"],
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_statement(self, nbp_file: Path, tmp_path: Path):
        result = runner.invoke(
            app, ["calculate", str(tmp_path / "none.txt"), "-r", str(nbp_file), "-y", "2021"]
        )
        assert result.exit_code == 1

    def test_rate_gap_fail(self, nbp_file: Path, tmp_path: Path):
        statement = tmp_path / "old.txt"
        statement.write_text("2019\n2 May\nBuy AAPL 1 -$200.00\n")
        result = runner.invoke(
            app,
            ["calculate", str(statement), "-r", str(nbp_file), "-y", "2019", "--rate-gap", "fail"],
        )
        assert result.exit_code == 1
        assert "No exchange rate available for 2019-05-02" in result.output

    def test_out_of_range_tax_rate(self, statement_file: Path, nbp_file: Path):
        result = runner.invoke(
            app,
            ["calculate", str(statement_file), "-r", str(nbp_file), "-y", "2021", "--tax-rate", "1.5"],
        )
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "flat_rate" in result.output


class TestSalesCommand:
    def test_table(self, statement_file: Path, nbp_file: Path):
        result = runner.invoke(app, ["sales", str(statement_file), "-r", str(nbp_file)])
        assert result.exit_code == 0
        assert "Matched sales" in result.output
        assert "AAPL" in result.output
        assert "3045.00" in result.output


class TestRateCommand:
    def test_lookup(self, nbp_file: Path):
        result = runner.invoke(app, ["rate", "2020-02-03", "-r", str(nbp_file)])
        assert result.exit_code == 0
        assert "3.9000" in result.output
        assert "2020-01-31" in result.output

    def test_lookup_before_table(self, nbp_file: Path):
        result = runner.invoke(app, ["rate", "2019-12-31", "-r", str(nbp_file)])
        assert result.exit_code == 1
        assert "No rate available" in result.output

    def test_lookup_after_table(self, nbp_file: Path):
        result = runner.invoke(app, ["rate", "2022-01-03", "-r", str(nbp_file)])
        assert result.exit_code == 1
        assert "No rate available for 2022-01-03" in result.output
