"""Exchange-rate, split, transaction, and matched-sale models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from stocktax.models.enums import TransactionKind


class RateObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate_date: date
    rate: Decimal = Field(gt=0)


class SplitEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    security_id: str
    effective_date: date
    ratio: int = Field(ge=2)


class RawTransaction(BaseModel):
    """A transaction line as extracted by a statement parser.

    ``usd_amount`` is the unsigned magnitude. It and ``share_count`` are
    None when the parser could not find them on the line.
    """

    model_config = ConfigDict(frozen=True)

    kind: TransactionKind
    security_id: str
    trade_date: date
    share_count: Decimal | None = Field(default=None, ge=0)
    usd_amount: Decimal | None = Field(default=None, ge=0)
    source_line: str = ""
    line_number: int | None = None


class NormalizedTransaction(RawTransaction):
    """A transaction converted to local currency and post-split share units."""

    id: str
    usd_amount: Decimal = Field(ge=0)
    rate: Decimal
    split_multiplier: int = Field(default=1, ge=1)
    local_amount: Decimal
    adjusted_share_count: Decimal | None = None


class SaleAllocation(BaseModel):
    """Shares a sale drew from one buy lot, with the lot values used for costing."""

    model_config = ConfigDict(frozen=True)

    lot_id: str
    lot_date: date
    lot_local_amount: Decimal
    lot_share_count: Decimal
    shares_taken: Decimal
    cost: Decimal


class MatchedSale(BaseModel):
    sale: NormalizedTransaction
    allocations: list[SaleAllocation] = Field(default_factory=list)
    cost_basis: Decimal = Decimal("0")
    realized_gain: Decimal = Decimal("0")
    unmatched_shares: Decimal = Decimal("0")

    @property
    def security_id(self) -> str:
        return self.sale.security_id

    @property
    def sale_date(self) -> date:
        return self.sale.trade_date

    @property
    def proceeds(self) -> Decimal:
        return self.sale.local_amount

    @property
    def matched_shares(self) -> Decimal:
        return sum((a.shares_taken for a in self.allocations), Decimal("0"))

    @property
    def is_fully_matched(self) -> bool:
        return self.unmatched_shares == 0


class OpenLot(BaseModel):
    """Unsold remainder of a buy after matching."""

    lot: NormalizedTransaction
    remaining_shares: Decimal

    @property
    def remaining_cost(self) -> Decimal:
        if not self.lot.adjusted_share_count:
            return Decimal("0")
        return self.lot.local_amount * self.remaining_shares / self.lot.adjusted_share_count
