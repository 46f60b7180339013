"""Flat-rate capital-gains tax summary for one fiscal year."""

import logging
from collections.abc import Iterable
from decimal import Decimal

from stocktax.engines.normalizer import round2
from stocktax.models.enums import TransactionKind
from stocktax.models.reports import TaxSummary
from stocktax.models.transactions import MatchedSale, NormalizedTransaction

logger = logging.getLogger(__name__)


class TaxSummarizer:
    """Sums realized gains for a fiscal year and applies a flat tax rate."""

    def summarize(
        self,
        matched_sales: Iterable[MatchedSale],
        fiscal_year: int,
        flat_rate: Decimal,
        dividends: Iterable[NormalizedTransaction] = (),
        include_dividends: bool = False,
    ) -> TaxSummary:
        """Compute the year's realized gain and tax due.

        Gain and tax are each rounded to cents:
        ``tax_due = round2(round2(gain) * flat_rate)``. Dividends are always
        totalled but only taxed when ``include_dividends`` is set.
        """
        in_year = [s for s in matched_sales if s.sale_date.year == fiscal_year]
        realized_gain = round2(sum((s.realized_gain for s in in_year), Decimal("0")))

        dividend_income = round2(sum(
            (d.local_amount for d in dividends
             if d.kind == TransactionKind.DIVIDEND and d.trade_date.year == fiscal_year),
            Decimal("0"),
        ))

        taxable_base = realized_gain
        if include_dividends:
            taxable_base = round2(realized_gain + dividend_income)
        tax_due = round2(taxable_base * flat_rate)

        logger.info(
            "Fiscal year %d: %d sale(s), realized gain %s, tax due %s",
            fiscal_year, len(in_year), realized_gain, tax_due,
        )
        return TaxSummary(
            fiscal_year=fiscal_year,
            flat_rate=flat_rate,
            sale_count=len(in_year),
            realized_gain=realized_gain,
            dividend_income=dividend_income,
            dividends_included=include_dividends,
            taxable_base=taxable_base,
            tax_due=tax_due,
        )
