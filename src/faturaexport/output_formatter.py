"""
Output formatting for CSV and OFX exports.
"""

import logging
from datetime import date, datetime
from xml.sax.saxutils import escape

from .models import Transaction

logger = logging.getLogger(__name__)

CSV_HEADER = "Data;Descricao;Valor"

OFX_FID = "341"
OFX_ORG = "ITAU"
OFX_FITID_PREFIX = "ITAU"
OFX_TIME_SUFFIX = "120000"
OFX_LANGUAGE = "POR"
OFX_CURRENCY = "BRL"
OFX_ACCOUNT_ID = "ITAUCARD"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def filter_by_min_date(
    transactions: list[Transaction],
    min_date: date | None,
) -> list[Transaction]:
    """
    Drop transactions dated before ``min_date``.

    Args:
        transactions: Transactions to filter
        min_date: Inclusive lower bound, or None to keep everything

    Returns:
        Filtered list in the original order
    """
    if min_date is None:
        return list(transactions)
    boundary = min_date.strftime("%Y%m%d")
    return [t for t in transactions if t.date_key >= boundary]


def escape_xml(text: str) -> str:
    """Escape ``& < > " '`` for inclusion in XML text."""
    return escape(text, _XML_ENTITIES)


class CsvFormatter:
    """Formats transactions as a semicolon separated document."""

    def __init__(self, delimiter: str = ";"):
        self.delimiter = delimiter

    def format_csv(
        self,
        transactions: list[Transaction],
        min_date: date | None = None,
    ) -> str:
        """
        Format transactions for CSV output.

        Descriptions are written as-is; a delimiter inside a description is
        not quoted.
        """
        lines = [CSV_HEADER]
        for transaction in filter_by_min_date(transactions, min_date):
            lines.append(
                self.delimiter.join(
                    [
                        transaction.date_csv,
                        transaction.description,
                        self._format_amount(transaction),
                    ],
                ),
            )
        return "\n".join(lines) + "\n"

    def _format_amount(self, transaction: Transaction) -> str:
        """Credits are negative, decimal comma."""
        formatted = f"{transaction.amount:.2f}".replace(".", ",")
        if transaction.is_credit:
            return f"-{formatted}"
        return formatted


class OfxFormatter:
    """Formats transactions as an OFX credit card statement."""

    def format_ofx(
        self,
        transactions: list[Transaction],
        min_date: date | None = None,
        now: datetime | None = None,
    ) -> str:
        """
        Format transactions for OFX output.

        Args:
            transactions: Transactions in statement order
            min_date: Optional inclusive lower bound
            now: Timestamp for DTSERVER and the empty-range fallback

        Returns:
            The OFX document
        """
        now = now or datetime.now()
        included = filter_by_min_date(transactions, min_date)

        if included:
            keys = [t.date_key for t in included]
            dt_start, dt_end = min(keys), max(keys)
        else:
            dt_start = dt_end = now.strftime("%Y%m%d")

        lines = [
            '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
            '<?OFX OFXHEADER="200" VERSION="220" SECURITY="NONE" OLDFILEUID="NONE" NEWFILEUID="NONE"?>',
            "<OFX>",
            "  <SIGNONMSGSRSV1>",
            "    <SONRS>",
            "      <STATUS>",
            "        <CODE>0</CODE>",
            "        <SEVERITY>INFO</SEVERITY>",
            "      </STATUS>",
            f"      <DTSERVER>{now.strftime('%Y%m%d%H%M%S')}</DTSERVER>",
            f"      <LANGUAGE>{OFX_LANGUAGE}</LANGUAGE>",
            "      <FI>",
            f"        <ORG>{OFX_ORG}</ORG>",
            f"        <FID>{OFX_FID}</FID>",
            "      </FI>",
            "    </SONRS>",
            "  </SIGNONMSGSRSV1>",
            "  <CREDITCARDMSGSRSV1>",
            "    <CCSTMTTRNRS>",
            "      <TRNUID>1</TRNUID>",
            "      <STATUS>",
            "        <CODE>0</CODE>",
            "        <SEVERITY>INFO</SEVERITY>",
            "      </STATUS>",
            "      <CCSTMTRS>",
            f"        <CURDEF>{OFX_CURRENCY}</CURDEF>",
            "        <CCACCTFROM>",
            f"          <ACCTID>{OFX_ACCOUNT_ID}</ACCTID>",
            "        </CCACCTFROM>",
            "        <BANKTRANLIST>",
            f"          <DTSTART>{dt_start}</DTSTART>",
            f"          <DTEND>{dt_end}</DTEND>",
        ]

        for position, transaction in enumerate(included, start=1):
            lines.extend(self._format_transaction(transaction, position))

        lines.extend(
            [
                "        </BANKTRANLIST>",
                "      </CCSTMTRS>",
                "    </CCSTMTTRNRS>",
                "  </CREDITCARDMSGSRSV1>",
                "</OFX>",
            ],
        )
        logger.debug(f"Formatted {len(included)} transactions as OFX")
        return "\n".join(lines) + "\n"

    def _format_transaction(self, transaction: Transaction, position: int) -> list[str]:
        return [
            "          <STMTTRN>",
            f"            <TRNTYPE>{transaction.type.value}</TRNTYPE>",
            f"            <DTPOSTED>{transaction.date_key}{OFX_TIME_SUFFIX}</DTPOSTED>",
            f"            <TRNAMT>{self._format_amount(transaction)}</TRNAMT>",
            f"            <FITID>{OFX_FITID_PREFIX}{transaction.date_key}{position:03d}</FITID>",
            f"            <MEMO>{escape_xml(transaction.description)}</MEMO>",
            "          </STMTTRN>",
        ]

    def _format_amount(self, transaction: Transaction) -> str:
        """Debits are negative, credits positive."""
        if transaction.is_credit:
            return f"{transaction.amount:.2f}"
        return f"-{transaction.amount:.2f}"


class SummaryFormatter:
    """Formats summary information."""

    @staticmethod
    def format_summary(transactions: list[Transaction]) -> str:
        """Format a summary of extracted transactions."""
        debits = sum(t.amount for t in transactions if not t.is_credit)
        credits = sum(t.amount for t in transactions if t.is_credit)

        lines = []
        lines.append("=== Fatura Export Summary ===")
        lines.append(f"Total transactions: {len(transactions)}")
        lines.append(f"Debits: {len([t for t in transactions if not t.is_credit])}")
        lines.append(f"Credits: {len([t for t in transactions if t.is_credit])}")
        lines.append(f"Total debits: R$ {debits:.2f}")
        lines.append(f"Total credits: R$ {credits:.2f}")
        lines.append(f"Statement balance: R$ {debits - credits:.2f}")

        if transactions:
            keys = [t.date_key for t in transactions]
            first, last = min(keys), max(keys)
            lines.append(f"Period: {first[6:8]}/{first[4:6]}/{first[:4]} - {last[6:8]}/{last[4:6]}/{last[:4]}")

        return "\n".join(lines)
