"""Lot matching engine: FIFO cost basis per security."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from stocktax.models.enums import TransactionKind, WarningCategory, WarningSeverity
from stocktax.models.transactions import (
    MatchedSale,
    NormalizedTransaction,
    OpenLot,
    SaleAllocation,
)
from stocktax.models.warnings import DataIntegrityWarning

logger = logging.getLogger(__name__)

# Share arithmetic on fractional statements leaves dust below this size.
SHARE_EPSILON = Decimal("0.0000001")


@dataclass
class LotState:
    """Mutable remaining quantity of one buy, private to a single matching pass."""

    lot: NormalizedTransaction
    remaining: Decimal


@dataclass
class MatchResult:
    """Bundles matched sales, unsold lots, and shortfall warnings."""

    sales: list[MatchedSale] = field(default_factory=list)
    open_lots: list[OpenLot] = field(default_factory=list)
    warnings: list[DataIntegrityWarning] = field(default_factory=list)


class LotMatcher:
    """Matches sales to earlier buys of the same security, oldest lot first."""

    def match(self, transactions: Iterable[NormalizedTransaction]) -> MatchResult:
        """Match every sale in a chronological (oldest-first) transaction list.

        Securities are processed independently; each gets a fresh lot ledger,
        so calling ``match`` twice on the same input gives the same result.
        Dividends are ignored.

        Returns:
            MatchResult with sales in date order (ingestion order breaks ties).
        """
        by_security: dict[str, list[tuple[int, NormalizedTransaction]]] = {}
        for position, txn in enumerate(transactions):
            if txn.kind == TransactionKind.DIVIDEND:
                continue
            by_security.setdefault(txn.security_id, []).append((position, txn))

        sales: list[tuple[date, int, MatchedSale]] = []
        open_lots: list[tuple[date, int, OpenLot]] = []
        for security_id, items in by_security.items():
            matched, ledger = self._match_security(items)
            sales.extend(matched)
            open_lots.extend(
                (state.lot.trade_date, position, OpenLot(lot=state.lot, remaining_shares=state.remaining))
                for position, state in ledger
                if state.remaining > SHARE_EPSILON
            )
            logger.debug("%s: matched %d sale(s)", security_id, len(matched))

        sales.sort(key=lambda item: item[:2])
        open_lots.sort(key=lambda item: item[:2])

        result = MatchResult(
            sales=[sale for _, _, sale in sales],
            open_lots=[lot for _, _, lot in open_lots],
        )
        for sale in result.sales:
            if sale.unmatched_shares > 0:
                result.warnings.append(self._shortfall_warning(sale))
        return result

    def _match_security(
        self, items: list[tuple[int, NormalizedTransaction]]
    ) -> tuple[list[tuple[date, int, MatchedSale]], list[tuple[int, LotState]]]:
        ordered = sorted(items, key=lambda item: (item[1].trade_date, item[0]))
        ledger = [
            (position, LotState(lot=txn, remaining=txn.adjusted_share_count or Decimal("0")))
            for position, txn in ordered
            if txn.kind == TransactionKind.BUY
        ]

        matched: list[tuple[date, int, MatchedSale]] = []
        for position, txn in ordered:
            if txn.kind != TransactionKind.SELL:
                continue
            eligible = [state for _, state in ledger if state.lot.trade_date <= txn.trade_date]
            matched.append((txn.trade_date, position, self._match_fifo(eligible, txn)))
        return matched, ledger

    def _match_fifo(self, lots: list[LotState], sale: NormalizedTransaction) -> MatchedSale:
        """FIFO: consume the oldest lots first and prorate each lot's converted cost."""
        still_needed = sale.adjusted_share_count or Decimal("0")
        allocations: list[SaleAllocation] = []

        for state in lots:
            if still_needed <= 0:
                break
            if state.remaining <= 0:
                continue
            lot = state.lot
            taken = min(state.remaining, still_needed)
            allocations.append(SaleAllocation(
                lot_id=lot.id,
                lot_date=lot.trade_date,
                lot_local_amount=lot.local_amount,
                lot_share_count=lot.adjusted_share_count,
                shares_taken=taken,
                # Prorate the lot total, not a rounded per-share price.
                cost=lot.local_amount * taken / lot.adjusted_share_count,
            ))
            state.remaining -= taken
            still_needed -= taken

        cost_basis = sum((a.cost for a in allocations), Decimal("0"))
        return MatchedSale(
            sale=sale,
            allocations=allocations,
            cost_basis=cost_basis,
            realized_gain=sale.local_amount - cost_basis,
            unmatched_shares=still_needed if still_needed > SHARE_EPSILON else Decimal("0"),
        )

    @staticmethod
    def _shortfall_warning(sale: MatchedSale) -> DataIntegrityWarning:
        logger.warning(
            "Could not find where %s shares of %s sold on %s were bought",
            sale.unmatched_shares, sale.security_id, sale.sale_date,
        )
        return DataIntegrityWarning(
            category=WarningCategory.UNMATCHED_SALE,
            severity=WarningSeverity.WARNING,
            message=(
                f"Sale of {sale.security_id} on {sale.sale_date.isoformat()} has "
                f"{sale.unmatched_shares} share(s) with no prior purchase; "
                "cost basis is incomplete"
            ),
            security_id=sale.security_id,
            event_date=sale.sale_date,
            line_number=sale.sale.line_number,
            shares=sale.unmatched_shares,
        )
