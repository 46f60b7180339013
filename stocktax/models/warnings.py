"""Data-integrity warnings collected during a calculation run.

None of these abort the run. They flag output that rests on incomplete
input: an unparsable line, a missing exchange rate, or a sale without
enough recorded purchases behind it.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from stocktax.models.enums import WarningCategory, WarningSeverity


class DataIntegrityWarning(BaseModel):
    category: WarningCategory
    severity: WarningSeverity = WarningSeverity.WARNING
    message: str
    security_id: str | None = None
    event_date: date | None = None
    line_number: int | None = None
    shares: Decimal | None = None

    def __str__(self) -> str:
        prefix = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"[{self.category.value}] {prefix}{self.message}"


def count_by_category(warnings: list[DataIntegrityWarning]) -> dict[WarningCategory, int]:
    counts: dict[WarningCategory, int] = {}
    for warning in warnings:
        counts[warning.category] = counts.get(warning.category, 0) + 1
    return counts
