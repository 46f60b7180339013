"""Transaction normalization: currency conversion and split adjustment."""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from stocktax.engines.rates import RateTable
from stocktax.engines.splits import SplitAdjuster
from stocktax.exceptions import RateGapError, TransactionParseError
from stocktax.models.enums import (
    RateGapPolicy,
    TransactionKind,
    WarningCategory,
    WarningSeverity,
)
from stocktax.models.transactions import NormalizedTransaction, RawTransaction
from stocktax.models.warnings import DataIntegrityWarning

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class TransactionNormalizer:
    """Converts raw transactions to local currency and post-split share counts."""

    def normalize(
        self,
        raw: RawTransaction,
        rate: Decimal,
        split_multiplier: int = 1,
        sequence: int = 0,
    ) -> NormalizedTransaction:
        """Build a NormalizedTransaction from a raw record and its resolved inputs.

        Raises:
            TransactionParseError: the line carried no USD amount, or a buy/sell
                carried no share count.
        """
        if raw.usd_amount is None:
            raise TransactionParseError(raw.source_line, "no USD amount", raw.line_number)

        adjusted_shares: Decimal | None = None
        multiplier = 1
        if raw.kind in (TransactionKind.BUY, TransactionKind.SELL):
            if raw.share_count is None:
                raise TransactionParseError(raw.source_line, "no share count", raw.line_number)
            multiplier = split_multiplier
            adjusted_shares = raw.share_count * multiplier

        return NormalizedTransaction(
            id=f"{raw.security_id}-{raw.kind.value.lower()}-{sequence}",
            kind=raw.kind,
            security_id=raw.security_id,
            trade_date=raw.trade_date,
            share_count=raw.share_count,
            usd_amount=raw.usd_amount,
            source_line=raw.source_line,
            line_number=raw.line_number,
            rate=rate,
            split_multiplier=multiplier,
            local_amount=round2(raw.usd_amount * rate),
            adjusted_share_count=adjusted_shares,
        )

    def normalize_all(
        self,
        raws: Iterable[RawTransaction],
        rate_table: RateTable,
        split_adjuster: SplitAdjuster,
        gap_policy: RateGapPolicy = RateGapPolicy.ZERO,
    ) -> tuple[list[NormalizedTransaction], list[DataIntegrityWarning]]:
        """Normalize every transaction, dropping the ones that cannot be parsed.

        Raises:
            RateGapError: only under ``RateGapPolicy.FAIL``.
        """
        normalized: list[NormalizedTransaction] = []
        warnings: list[DataIntegrityWarning] = []

        for sequence, raw in enumerate(raws):
            found = rate_table.lookup(raw.trade_date)
            rate = found.rate
            if rate is None:
                if gap_policy == RateGapPolicy.FAIL:
                    raise RateGapError(raw.trade_date)
                skipped = gap_policy == RateGapPolicy.SKIP
                warnings.append(DataIntegrityWarning(
                    category=WarningCategory.RATE_GAP,
                    severity=WarningSeverity.ERROR if skipped else WarningSeverity.WARNING,
                    message=(
                        f"No exchange rate for {raw.trade_date.isoformat()} ("
                        f"{raw.kind.value} {raw.security_id}); "
                        + ("transaction skipped" if skipped else "converted at rate 0")
                    ),
                    security_id=raw.security_id,
                    event_date=raw.trade_date,
                    line_number=raw.line_number,
                ))
                logger.warning("Rate gap on %s (%s)", raw.trade_date, gap_policy.value)
                if skipped:
                    continue
                rate = Decimal("0")

            multiplier = split_adjuster.multiplier(raw.security_id, raw.trade_date)
            try:
                normalized.append(self.normalize(raw, rate, multiplier, sequence))
            except TransactionParseError as exc:
                logger.warning("%s", exc)
                warnings.append(DataIntegrityWarning(
                    category=WarningCategory.PARSE_FAILURE,
                    severity=WarningSeverity.ERROR,
                    message=str(exc),
                    security_id=raw.security_id,
                    event_date=raw.trade_date,
                    line_number=raw.line_number,
                ))

        logger.debug("Normalized %d transaction(s), %d warning(s)", len(normalized), len(warnings))
        return normalized, warnings
