"""Data models for stocktax."""

from stocktax.models.enums import (
    RateGapPolicy,
    TransactionKind,
    WarningCategory,
    WarningSeverity,
)
from stocktax.models.reports import TaxSummary
from stocktax.models.transactions import (
    MatchedSale,
    NormalizedTransaction,
    OpenLot,
    RateObservation,
    RawTransaction,
    SaleAllocation,
    SplitEvent,
)
from stocktax.models.warnings import DataIntegrityWarning

__all__ = [
    "DataIntegrityWarning",
    "MatchedSale",
    "NormalizedTransaction",
    "OpenLot",
    "RateGapPolicy",
    "RateObservation",
    "RawTransaction",
    "SaleAllocation",
    "SplitEvent",
    "TaxSummary",
    "TransactionKind",
    "WarningCategory",
    "WarningSeverity",
]
