"""Calculation pipeline: normalize, match lots, summarize.

Raw statement transactions flow one way through the engines:
TransactionNormalizer -> LotMatcher -> TaxSummarizer. Every stage reports
data-integrity problems as warnings instead of failing the run.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from stocktax.config import CalculationSettings
from stocktax.engines.lot_matcher import LotMatcher
from stocktax.engines.normalizer import TransactionNormalizer
from stocktax.engines.rates import RateTable
from stocktax.engines.splits import SplitAdjuster
from stocktax.engines.summarizer import TaxSummarizer
from stocktax.models.enums import TransactionKind
from stocktax.models.reports import TaxSummary
from stocktax.models.transactions import (
    MatchedSale,
    NormalizedTransaction,
    OpenLot,
    RawTransaction,
)
from stocktax.models.warnings import DataIntegrityWarning, count_by_category

logger = logging.getLogger(__name__)


@dataclass
class CalculationRun:
    """Everything one run produced."""

    summary: TaxSummary
    transactions: list[NormalizedTransaction] = field(default_factory=list)
    sales: list[MatchedSale] = field(default_factory=list)
    open_lots: list[OpenLot] = field(default_factory=list)
    warnings: list[DataIntegrityWarning] = field(default_factory=list)

    @property
    def dividends(self) -> list[NormalizedTransaction]:
        return [t for t in self.transactions if t.kind == TransactionKind.DIVIDEND]

    def sales_in_year(self) -> list[MatchedSale]:
        return [s for s in self.sales if s.sale_date.year == self.summary.fiscal_year]


class CapitalGainsCalculator:
    """Orchestrates one capital-gains calculation over pre-parsed inputs."""

    def __init__(self, rate_table: RateTable, split_adjuster: SplitAdjuster):
        self.rate_table = rate_table
        self.split_adjuster = split_adjuster
        self.normalizer = TransactionNormalizer()
        self.lot_matcher = LotMatcher()
        self.summarizer = TaxSummarizer()

    def calculate(
        self,
        raw_transactions: Sequence[RawTransaction],
        settings: CalculationSettings,
        newest_first: bool = True,
        parse_warnings: Sequence[DataIntegrityWarning] = (),
    ) -> CalculationRun:
        """Run the full pipeline for ``settings.fiscal_year``.

        Args:
            raw_transactions: Transactions in statement order.
            settings: Fiscal year, flat rate, dividend flag, rate-gap policy.
            newest_first: Statement lists newest transactions first, so
                they are reversed before matching.
            parse_warnings: Warnings already raised by the statement parser,
                carried into the run result.
        """
        chronological = list(reversed(raw_transactions)) if newest_first else list(raw_transactions)
        normalized, warnings = self.normalizer.normalize_all(
            chronological,
            self.rate_table,
            self.split_adjuster,
            settings.rate_gap_policy,
        )
        matched = self.lot_matcher.match(normalized)
        summary = self.summarizer.summarize(
            matched.sales,
            settings.fiscal_year,
            settings.flat_rate,
            dividends=normalized,
            include_dividends=settings.include_dividends,
        )

        all_warnings = [*parse_warnings, *warnings, *matched.warnings]
        if all_warnings:
            counts = count_by_category(all_warnings)
            logger.info(
                "Calculation finished with data-integrity warnings: %s",
                ", ".join(f"{category.value}={count}" for category, count in counts.items()),
            )
        return CalculationRun(
            summary=summary,
            transactions=normalized,
            sales=matched.sales,
            open_lots=matched.open_lots,
            warnings=all_warnings,
        )
