"""Run settings and stock-split reference data."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from stocktax.exceptions import SplitConfigError
from stocktax.models.enums import RateGapPolicy
from stocktax.models.transactions import SplitEvent

DEFAULT_FLAT_RATE = Decimal("0.19")

DEFAULT_SPLITS: dict[str, list[SplitEvent]] = {
    "AAPL": [SplitEvent(security_id="AAPL", effective_date=date(2020, 8, 28), ratio=4)],
    "TSLA": [SplitEvent(security_id="TSLA", effective_date=date(2020, 8, 31), ratio=5)],
}


class CalculationSettings(BaseModel):
    fiscal_year: int
    flat_rate: Decimal = Field(default=DEFAULT_FLAT_RATE, ge=0, le=1)
    include_dividends: bool = False
    rate_gap_policy: RateGapPolicy = RateGapPolicy.ZERO


def load_splits(file_path: Path) -> dict[str, list[SplitEvent]]:
    """Load a split table from JSON.

    Expected shape: ``{"AAPL": [{"date": "2020-08-28", "ratio": 4}], ...}``.
    """
    if not file_path.exists():
        raise SplitConfigError(str(file_path), "file not found")
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SplitConfigError(str(file_path), f"invalid JSON ({exc})") from exc
    if not isinstance(raw, dict):
        raise SplitConfigError(str(file_path), "expected an object keyed by security")

    splits: dict[str, list[SplitEvent]] = {}
    for security, entries in raw.items():
        if not isinstance(entries, list):
            raise SplitConfigError(str(file_path), f"{security}: expected a list of splits")
        try:
            splits[security] = [
                SplitEvent(
                    security_id=security,
                    effective_date=date.fromisoformat(entry["date"]),
                    ratio=entry["ratio"],
                )
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise SplitConfigError(str(file_path), f"{security}: {exc}") from exc
    return splits
