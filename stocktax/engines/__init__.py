"""Tax computation engines."""

from stocktax.engines.calculator import CalculationRun, CapitalGainsCalculator
from stocktax.engines.lot_matcher import LotMatcher, MatchResult
from stocktax.engines.normalizer import TransactionNormalizer, round2
from stocktax.engines.rates import RateLookup, RateTable
from stocktax.engines.splits import SplitAdjuster
from stocktax.engines.summarizer import TaxSummarizer

__all__ = [
    "CalculationRun",
    "CapitalGainsCalculator",
    "LotMatcher",
    "MatchResult",
    "RateLookup",
    "RateTable",
    "SplitAdjuster",
    "TaxSummarizer",
    "TransactionNormalizer",
    "round2",
]
