"""Rate-file and statement parsing for stocktax."""

from stocktax.parsing.nbp import load_nbp_rates, parse_nbp_csv
from stocktax.parsing.statement import StatementParser, StatementParseResult

__all__ = [
    "StatementParseResult",
    "StatementParser",
    "load_nbp_rates",
    "parse_nbp_csv",
]
