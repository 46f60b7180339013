"""Parser for plain-text brokerage statements.

The statement lists transactions newest first, grouped under year and day
headings::

    2021
    15 March
    Sell AAPL 2.5 ... +$312.40
    Buy TSLA 0.1 ... -$65.00
    Dividend AAPL ... +$0.41

Only the kind, ticker, share count, and the signed ``±$`` amount are read
from a transaction line. Everything else on the line is ignored.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from stocktax.exceptions import InputUnavailableError, TransactionParseError
from stocktax.models.enums import TransactionKind, WarningCategory, WarningSeverity
from stocktax.models.transactions import RawTransaction
from stocktax.models.warnings import DataIntegrityWarning

logger = logging.getLogger(__name__)

UNKNOWN_SECURITY = "UNKNOWN"

_YEAR_LINE = re.compile(r"^\d{4}$")
_DAY_LINE = re.compile(r"^\d{1,2} [A-Za-z]+$")
_AMOUNT = re.compile(r"[+-]\$([\d.,]+)")
_KIND_PREFIXES = {
    "Buy ": TransactionKind.BUY,
    "Sell ": TransactionKind.SELL,
    "Dividend ": TransactionKind.DIVIDEND,
}


def parse_number(value: str) -> Decimal | None:
    """Parse ``1,234.56`` style numbers; None when the text is not a number."""
    try:
        number = Decimal(value.replace(",", ""))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_usd_amount(line: str) -> Decimal | None:
    """Magnitude of the first explicitly signed dollar amount on the line."""
    found = _AMOUNT.search(line)
    if not found:
        return None
    return parse_number(found.group(1))


@dataclass
class StatementParseResult:
    """Transactions in statement order plus per-line warnings."""

    transactions: list[RawTransaction] = field(default_factory=list)
    warnings: list[DataIntegrityWarning] = field(default_factory=list)


class StatementParser:
    """Extracts RawTransactions from statement lines."""

    def parse_file(self, file_path: Path) -> StatementParseResult:
        if not file_path.exists():
            raise InputUnavailableError(str(file_path), "statement file not found")
        try:
            text = file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputUnavailableError(str(file_path), str(exc)) from exc
        result = self.parse(text.splitlines())
        logger.info(
            "Parsed %d transaction(s) from %s (%d warning(s))",
            len(result.transactions), file_path.name, len(result.warnings),
        )
        return result

    def parse(self, lines: Iterable[str]) -> StatementParseResult:
        result = StatementParseResult()
        year: int | None = None
        current_date: date | None = None

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                if _YEAR_LINE.match(line):
                    year = int(line)
                    continue
                if _DAY_LINE.match(line):
                    current_date = None  # a bad heading must not reuse the previous day
                    current_date = self._parse_day(line, year, line_number)
                    continue
                kind = self._detect_kind(line)
                if kind is None:
                    logger.debug("No case for line %d: %s", line_number, line)
                    result.warnings.append(DataIntegrityWarning(
                        category=WarningCategory.UNRECOGNIZED_LINE,
                        severity=WarningSeverity.INFO,
                        message=f"Ignored line: {line!r}",
                        line_number=line_number,
                    ))
                    continue
                if current_date is None:
                    raise TransactionParseError(line, "no date heading before transaction", line_number)
                result.transactions.append(
                    self._parse_transaction(kind, line, current_date, line_number)
                )
            except TransactionParseError as exc:
                logger.warning("%s", exc)
                result.warnings.append(DataIntegrityWarning(
                    category=WarningCategory.PARSE_FAILURE,
                    severity=WarningSeverity.ERROR,
                    message=str(exc),
                    event_date=current_date,
                    line_number=line_number,
                ))
        return result

    @staticmethod
    def _detect_kind(line: str) -> TransactionKind | None:
        for prefix, kind in _KIND_PREFIXES.items():
            if line.startswith(prefix):
                return kind
        return None

    @staticmethod
    def _parse_day(line: str, year: int | None, line_number: int) -> date:
        if year is None:
            raise TransactionParseError(line, "day heading before any year heading", line_number)
        try:
            return datetime.strptime(f"{year} {line}", "%Y %d %B").date()
        except ValueError as exc:
            raise TransactionParseError(line, f"bad day heading ({exc})", line_number) from exc

    @staticmethod
    def _parse_transaction(
        kind: TransactionKind, line: str, trade_date: date, line_number: int
    ) -> RawTransaction:
        tokens = line.split()
        security = tokens[1] if len(tokens) > 1 and not _AMOUNT.match(tokens[1]) else UNKNOWN_SECURITY
        if kind != TransactionKind.DIVIDEND and security == UNKNOWN_SECURITY:
            raise TransactionParseError(line, "no ticker", line_number)

        share_count = None
        if kind != TransactionKind.DIVIDEND and len(tokens) > 2:
            share_count = parse_number(tokens[2])
            if share_count is not None and share_count < 0:
                share_count = None

        return RawTransaction(
            kind=kind,
            security_id=security,
            trade_date=trade_date,
            share_count=share_count,
            usd_amount=parse_usd_amount(line),
            source_line=line,
            line_number=line_number,
        )
