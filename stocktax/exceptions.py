"""Custom exceptions for stocktax."""

from datetime import date


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class TransactionParseError(TaxComputationError):
    """Raised when a transaction line lacks a required field."""

    def __init__(self, line: str, message: str, line_number: int | None = None):
        self.line = line
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Cannot parse transaction{location}: {message}: {line!r}")


class RateGapError(TaxComputationError):
    """Raised when the rate table does not cover a transaction date."""

    def __init__(self, query_date: date):
        self.query_date = query_date
        super().__init__(f"No exchange rate available for {query_date.isoformat()}")


class InputUnavailableError(TaxComputationError):
    """Raised when a rate or transaction source cannot be read."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Input unavailable from {source}: {message}")


class SplitConfigError(TaxComputationError):
    """Raised when a split configuration file is malformed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Invalid split configuration in {source}: {message}")
