"""Enumerations for stocktax."""

from enum import StrEnum


class TransactionKind(StrEnum):
    BUY = "BUY"
    SELL = "SELL"
    DIVIDEND = "DIVIDEND"


class RateGapPolicy(StrEnum):
    """What to do with a transaction dated outside the loaded rate table."""

    ZERO = "zero"
    SKIP = "skip"
    FAIL = "fail"


class WarningSeverity(StrEnum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class WarningCategory(StrEnum):
    PARSE_FAILURE = "PARSE_FAILURE"
    RATE_GAP = "RATE_GAP"
    UNMATCHED_SALE = "UNMATCHED_SALE"
    UNRECOGNIZED_LINE = "UNRECOGNIZED_LINE"
