"""
Transaction extraction from a resolved statement table.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from functools import reduce

from lxml import etree

from .config import DEFAULT_LOCALE, LocaleConfig
from .models import RawRow, Transaction
from .normalizers import (
    amount_styling,
    collapse_whitespace,
    is_credit,
    parse_amount,
    parse_date,
)
from .table_resolver import row_cells, table_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionState:
    """Accumulator carried across rows: the date in effect and the output so far."""

    current_date: str | None = None
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    skipped_dates: int = 0


def read_rows(table: etree._Element) -> list[RawRow | None]:
    """
    Build RawRow views over the rows of a table.

    Rows with fewer than three cells are returned as None so callers can
    still see the original row positions.
    """
    rows: list[RawRow | None] = []
    for row in table_rows(table):
        cells = row_cells(row)
        if len(cells) < 3:
            rows.append(None)
            continue
        rows.append(
            RawRow(
                date_text=collapse_whitespace(cells[0].text_content()),
                description=collapse_whitespace(cells[1].text_content()),
                amount_text=collapse_whitespace(cells[2].text_content()),
                amount_cell=cells[2],
            ),
        )
    return rows


class TransactionExtractor:
    """Turns statement table rows into Transaction records."""

    def __init__(self, locale: LocaleConfig = DEFAULT_LOCALE):
        self.locale = locale

    def extract(
        self,
        table: etree._Element | None,
        today: date | None = None,
    ) -> list[Transaction]:
        """
        Extract transactions from a statement table.

        Args:
            table: The resolved table, or None when none was found
            today: Reference date for year inference

        Returns:
            Transactions in table row order
        """
        if table is None:
            logger.error("No transactions table found on the page")
            return []

        transactions = self.extract_rows(read_rows(table), today)
        logger.info(f"Extracted {len(transactions)} transactions")
        return transactions

    def extract_rows(
        self,
        rows: Iterable[RawRow | None],
        today: date | None = None,
    ) -> list[Transaction]:
        """Fold over raw rows, carrying the current date across continuation rows."""
        state = reduce(
            lambda acc, row: self._step(acc, row, today),
            rows,
            ExtractionState(),
        )
        if state.skipped_dates:
            logger.warning(f"Dropped {state.skipped_dates} rows with unparseable dates")
        return list(state.transactions)

    def is_header(self, row: RawRow) -> bool:
        """Header rows have a short first cell mentioning the date column."""
        first = row.date_text.strip().lower()
        return self.locale.header_marker in first and len(first) < self.locale.header_max_length

    def _step(
        self,
        state: ExtractionState,
        row: RawRow | None,
        today: date | None,
    ) -> ExtractionState:
        if row is None or self.is_header(row):
            return state

        current_date = row.date_text or state.current_date
        if current_date != state.current_date:
            state = ExtractionState(current_date, state.transactions, state.skipped_dates)

        if not current_date or not row.description or not row.amount_text:
            return state

        amount = abs(parse_amount(row.amount_text))
        if amount == 0:
            logger.debug(f"Skipping zero amount row: {row.description}")
            return state

        parts = parse_date(current_date, today, self.locale)
        if parts is None:
            logger.warning(
                f"Skipping row with unparseable date '{current_date}': {row.description}",
            )
            return ExtractionState(current_date, state.transactions, state.skipped_dates + 1)

        classes, color = amount_styling(row.amount_cell)
        transaction = Transaction.from_parts(
            raw_date=current_date,
            parts=parts,
            description=row.description,
            amount=amount,
            is_credit=is_credit(
                row.description,
                row.amount_text,
                classes,
                color,
                self.locale,
            ),
        )
        return ExtractionState(
            current_date,
            state.transactions + (transaction,),
            state.skipped_dates,
        )
