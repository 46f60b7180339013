"""Shared test fixtures for stocktax."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from stocktax.engines.rates import RateTable
from stocktax.models.enums import TransactionKind
from stocktax.models.transactions import NormalizedTransaction, RateObservation, SplitEvent

SAMPLE_STATEMENT = """\
2021
15 March
Sell AAPL 8 shares at $125.00 +$1,000.00
Dividend AAPL +$1.50
2020
10 September
Buy AAPL 4 shares at $125.00 -$500.00
3 February
Buy AAPL 1 share at $300.00 -$300.00
"""

SAMPLE_NBP_CSV = """\
data;nr tabeli;1USD;1EUR
;;dolar amerykański;euro
20200131;21/A/NBP/2020;3,9000;4,3000
20200203;22/A/NBP/2020;3,9500;4,3100
20200909;175/A/NBP/2020;3,7500;4,4000
20200910;176/A/NBP/2020;3,8000;4,4100
20210312;50/A/NBP/2021;3,8500;4,6000
20210315;51/A/NBP/2021;3,9000;4,6100

Źródło: NBP
"""


@pytest.fixture
def sample_statement() -> str:
    return SAMPLE_STATEMENT


@pytest.fixture
def aapl_split() -> dict[str, list[SplitEvent]]:
    return {
        "AAPL": [SplitEvent(security_id="AAPL", effective_date=date(2020, 8, 28), ratio=4)],
    }


@pytest.fixture
def sample_rate_table() -> RateTable:
    return RateTable([
        RateObservation(rate_date=date(2020, 1, 31), rate=Decimal("3.90")),
        RateObservation(rate_date=date(2020, 2, 3), rate=Decimal("3.95")),
        RateObservation(rate_date=date(2020, 9, 9), rate=Decimal("3.75")),
        RateObservation(rate_date=date(2020, 9, 10), rate=Decimal("3.80")),
        RateObservation(rate_date=date(2021, 3, 12), rate=Decimal("3.85")),
        RateObservation(rate_date=date(2021, 3, 15), rate=Decimal("3.90")),
    ])


@pytest.fixture
def statement_file(tmp_path: Path) -> Path:
    path = tmp_path / "stocks_transactions.txt"
    path.write_text(SAMPLE_STATEMENT, encoding="utf-8")
    return path


@pytest.fixture
def nbp_file(tmp_path: Path) -> Path:
    path = tmp_path / "archiwum_tab_a_2020.csv"
    path.write_text(SAMPLE_NBP_CSV, encoding="cp1250")
    return path


@pytest.fixture
def make_txn():
    """Factory for normalized transactions with the local amount given directly."""
    counter = iter(range(10_000))

    def _make(
        kind: TransactionKind,
        trade_date: date,
        shares: str | None = None,
        local_amount: str = "0",
        security_id: str = "ACME",
    ) -> NormalizedTransaction:
        share_count = Decimal(shares) if shares is not None else None
        return NormalizedTransaction(
            id=f"{security_id}-{kind.value.lower()}-{next(counter)}",
            kind=kind,
            security_id=security_id,
            trade_date=trade_date,
            share_count=share_count,
            usd_amount=Decimal(local_amount),
            rate=Decimal("1"),
            local_amount=Decimal(local_amount),
            adjusted_share_count=share_count,
        )

    return _make
