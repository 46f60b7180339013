"""Loader for National Bank of Poland "table A" rate archives.

The archives (``archiwum_tab_a_YYYY.csv``) are semicolon-separated and
cp1250-encoded. A header row names the ``data`` column and one column per
currency (``1USD``, ``1EUR``, ...). Rates use a decimal comma. Each data row
starts with a ``YYYYMMDD`` date; everything else (the second header, footers,
blank lines) is skipped.
"""

import csv
import io
import logging
import re
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from stocktax.engines.rates import RateTable
from stocktax.exceptions import InputUnavailableError
from stocktax.models.transactions import RateObservation

logger = logging.getLogger(__name__)

NBP_ENCODING = "cp1250"
DEFAULT_COLUMN = "1USD"
# Position of 1USD in the table A layout, used when the header row is absent.
_FALLBACK_COLUMN_INDEX = 2
_DATE_CELL = re.compile(r"^\d{8}$")


def _parse_rate(value: str) -> Decimal | None:
    cleaned = value.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        rate = Decimal(cleaned)
    except InvalidOperation:
        return None
    return rate if rate.is_finite() and rate > 0 else None


def parse_nbp_csv(text: str, column: str = DEFAULT_COLUMN) -> list[RateObservation]:
    """Parse the text of one archive into observations, in file order."""
    column_index = _FALLBACK_COLUMN_INDEX
    observations: list[RateObservation] = []

    for row in csv.reader(io.StringIO(text), delimiter=";"):
        if not row:
            continue
        first = row[0].strip()
        if first.lower() == "data":
            headers = [cell.strip() for cell in row]
            if column in headers:
                column_index = headers.index(column)
            else:
                logger.warning("Column %s not in header, using position %d", column, column_index)
            continue
        if not _DATE_CELL.match(first) or len(row) <= column_index:
            continue
        rate = _parse_rate(row[column_index])
        if rate is None:
            logger.debug("Skipping row without a usable rate: %s", row[:3])
            continue
        observations.append(RateObservation(
            rate_date=datetime.strptime(first, "%Y%m%d").date(),
            rate=rate,
        ))
    return observations


def load_nbp_rates(paths: Iterable[Path], column: str = DEFAULT_COLUMN) -> RateTable:
    """Read and merge several yearly archives into one RateTable.

    Raises:
        InputUnavailableError: a file is missing or unreadable, or no file
            yielded any rate.
    """
    observations: list[RateObservation] = []
    for path in paths:
        if not path.exists():
            raise InputUnavailableError(str(path), "rate file not found")
        try:
            text = path.read_text(encoding=NBP_ENCODING)
        except OSError as exc:
            raise InputUnavailableError(str(path), str(exc)) from exc
        parsed = parse_nbp_csv(text, column)
        logger.info("Loaded %d %s rate(s) from %s", len(parsed), column, path.name)
        observations.extend(parsed)

    if not observations:
        raise InputUnavailableError("rate files", f"no {column} rates found")
    return RateTable(observations)
