"""Report output models."""

from decimal import Decimal

from pydantic import BaseModel


class TaxSummary(BaseModel):
    fiscal_year: int
    flat_rate: Decimal
    sale_count: int
    realized_gain: Decimal
    dividend_income: Decimal
    dividends_included: bool = False
    taxable_base: Decimal
    tax_due: Decimal
