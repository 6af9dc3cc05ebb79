"""
Data models for statement export.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any


class TransactionType(Enum):
    """Transaction type enumeration."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


@dataclass(frozen=True)
class DateParts:
    """A decomposed statement date."""

    day: int
    month: int
    year: int

    @property
    def date_csv(self) -> str:
        return f"{self.day:02d}/{self.month:02d}/{self.year:04d}"

    @property
    def date_key(self) -> str:
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"


@dataclass(frozen=True)
class RawRow:
    """Text view over one statement table row."""

    date_text: str
    description: str
    amount_text: str
    amount_cell: Any = None


@dataclass(frozen=True)
class Transaction:
    """Represents a single credit card statement entry."""

    raw_date: str
    day: int
    month: int
    year: int
    description: str
    amount: float
    is_credit: bool

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"amount must be a magnitude, got {self.amount}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"month out of range: {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"day out of range: {self.day}")
        if not 1000 <= self.year <= 9999:
            raise ValueError(f"year must have 4 digits: {self.year}")

    @classmethod
    def from_parts(
        cls,
        raw_date: str,
        parts: DateParts,
        description: str,
        amount: float,
        is_credit: bool,
    ) -> "Transaction":
        """Create Transaction from a decomposed date."""
        return cls(
            raw_date=raw_date,
            day=parts.day,
            month=parts.month,
            year=parts.year,
            description=description,
            amount=amount,
            is_credit=is_credit,
        )

    @property
    def date_csv(self) -> str:
        """Date as DD/MM/YYYY."""
        return f"{self.day:02d}/{self.month:02d}/{self.year:04d}"

    @property
    def date_key(self) -> str:
        """Date as YYYYMMDD, used for filtering and the OFX date fields."""
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    @property
    def type(self) -> TransactionType:
        return TransactionType.CREDIT if self.is_credit else TransactionType.DEBIT


@dataclass(frozen=True)
class ExportRequest:
    """Options for a single export call."""

    min_date: date | None = None


@dataclass(frozen=True)
class ExportResult:
    """A finished document ready for download or clipboard."""

    content: str
    filename: str
    mime_type: str
    transaction_count: int
