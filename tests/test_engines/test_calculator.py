"""End-to-end tests for the calculation pipeline."""

from decimal import Decimal

import pytest

from stocktax.config import CalculationSettings
from stocktax.engines.calculator import CapitalGainsCalculator
from stocktax.engines.splits import SplitAdjuster
from stocktax.exceptions import RateGapError
from stocktax.models.enums import RateGapPolicy, WarningCategory
from stocktax.parsing.statement import StatementParser


class TestCapitalGainsCalculator:
    @pytest.fixture(autouse=True)
    def _parse_statement(self, sample_statement: str):
        self.parsed = StatementParser().parse(sample_statement.splitlines())

    def test_split_adjusted_fifo_gain(self, sample_rate_table, aapl_split):
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        run = calculator.calculate(self.parsed.transactions, CalculationSettings(fiscal_year=2021))

        assert len(run.sales) == 1
        sale = run.sales[0]
        # pre-split buy of 1 share restated as 4; 4 + 4 shares fund the sale of 8
        assert [a.shares_taken for a in sale.allocations] == [Decimal("4"), Decimal("4")]
        assert sale.cost_basis == Decimal("3045.00")
        assert sale.proceeds == Decimal("3850.00")
        assert run.summary.realized_gain == Decimal("805.00")
        assert run.summary.tax_due == Decimal("152.95")
        assert run.summary.dividend_income == Decimal("5.78")
        assert run.warnings == []
        assert run.open_lots == []

    def test_include_dividends(self, sample_rate_table, aapl_split):
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        settings = CalculationSettings(fiscal_year=2021, include_dividends=True)
        run = calculator.calculate(self.parsed.transactions, settings)

        assert run.summary.taxable_base == Decimal("810.78")
        assert run.summary.tax_due == Decimal("154.05")
        assert len(run.dividends) == 1

    def test_other_year_has_nothing_to_tax(self, sample_rate_table, aapl_split):
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        run = calculator.calculate(self.parsed.transactions, CalculationSettings(fiscal_year=2020))
        assert run.summary.sale_count == 0
        assert run.summary.tax_due == Decimal("0.00")
        assert run.sales_in_year() == []

    def test_missing_split_leaves_sale_short(self, sample_rate_table):
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster({}))
        run = calculator.calculate(self.parsed.transactions, CalculationSettings(fiscal_year=2021))

        assert run.sales[0].unmatched_shares == Decimal("3")
        assert [w.category for w in run.warnings] == [WarningCategory.UNMATCHED_SALE]

    def test_parse_warnings_are_carried(self, sample_rate_table, aapl_split):
        parsed = StatementParser().parse(["2021", "15 March", "Sell AAPL 1 no amount", "Header"])
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        run = calculator.calculate(
            parsed.transactions,
            CalculationSettings(fiscal_year=2021, rate_gap_policy=RateGapPolicy.SKIP),
            parse_warnings=parsed.warnings,
        )
        categories = [w.category for w in run.warnings]
        assert categories == [WarningCategory.UNRECOGNIZED_LINE, WarningCategory.PARSE_FAILURE]
        assert run.sales == []

    def test_repeated_runs_are_identical(self, sample_rate_table, aapl_split):
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        settings = CalculationSettings(fiscal_year=2021)
        first = calculator.calculate(self.parsed.transactions, settings)
        second = calculator.calculate(self.parsed.transactions, settings)
        assert first.summary == second.summary
        assert [s.model_dump() for s in first.sales] == [s.model_dump() for s in second.sales]

    def test_sale_past_loaded_rates_is_not_priced_at_stale_rate(self, sample_rate_table, aapl_split):
        parsed = StatementParser().parse(
            ["2022", "1 June", "Sell AAPL 1 +$100.00", "2021", "15 March", "Buy AAPL 1 -$50.00"]
        )
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        run = calculator.calculate(parsed.transactions, CalculationSettings(fiscal_year=2022))

        assert run.sales[0].proceeds == Decimal("0.00")
        assert run.sales[0].cost_basis == Decimal("192.50")
        assert [w.category for w in run.warnings] == [WarningCategory.RATE_GAP]

    def test_sale_past_loaded_rates_fails_under_fail_policy(self, sample_rate_table, aapl_split):
        parsed = StatementParser().parse(["2022", "1 June", "Sell AAPL 1 +$100.00"])
        calculator = CapitalGainsCalculator(sample_rate_table, SplitAdjuster(aapl_split))
        settings = CalculationSettings(fiscal_year=2022, rate_gap_policy=RateGapPolicy.FAIL)
        with pytest.raises(RateGapError, match="2022-06-01"):
            calculator.calculate(parsed.transactions, settings)
