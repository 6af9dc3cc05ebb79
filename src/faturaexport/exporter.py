"""
Main exporter class that orchestrates the export process.
"""

import logging
from datetime import date, datetime

from lxml import etree, html

from .config import DEFAULT_LOCALE, DEFAULT_RESOLVER, LocaleConfig, ResolverConfig
from .extractor import TransactionExtractor
from .models import ExportRequest, ExportResult, Transaction
from .normalizers import collapse_whitespace
from .output_formatter import CsvFormatter, OfxFormatter, SummaryFormatter, filter_by_min_date
from .table_resolver import TableResolver

logger = logging.getLogger(__name__)

CSV_MIME_TYPE = "text/csv"
OFX_MIME_TYPE = "application/x-ofx"
FILENAME_PREFIX = "itau-"


def parse_html(source: str | bytes) -> etree._Element | None:
    """
    Parse page markup into an element tree, or None for empty input.

    Text input is parsed as UTF-8 bytes, so pages saved as XHTML with an
    encoding declaration are accepted.
    """
    if not source or not source.strip():
        return None
    parser = None
    if isinstance(source, str):
        source = source.encode("utf-8")
        parser = html.HTMLParser(encoding="utf-8")
    try:
        return html.document_fromstring(source, parser=parser)
    except (etree.ParserError, ValueError) as e:
        logger.error(f"Could not parse page markup: {e}")
        return None


def period_label(title_text: str | None, today: date | None = None) -> str:
    """
    Derive the period part of an export filename from the statement title.

    "Fatura de outubro 2025" gives "outubro"; a title with fewer tokens gives
    its first token; no title gives today's date as YYYYMMDD.
    """
    tokens = collapse_whitespace(title_text).split()
    if len(tokens) > 2:
        return tokens[2]
    if tokens:
        return tokens[0]
    return (today or date.today()).strftime("%Y%m%d")


class FaturaExporter:
    """Main exporter class for statement pages."""

    def __init__(
        self,
        locale: LocaleConfig = DEFAULT_LOCALE,
        resolver_config: ResolverConfig = DEFAULT_RESOLVER,
    ):
        self.resolver = TableResolver(resolver_config)
        self.extractor = TransactionExtractor(locale)
        self.csv_formatter = CsvFormatter()
        self.ofx_formatter = OfxFormatter()
        self.summary_formatter = SummaryFormatter()

    def extract(
        self,
        source: str | bytes | etree._Element | None,
        today: date | None = None,
    ) -> list[Transaction]:
        """
        Read the statement transactions currently rendered in a page.

        Args:
            source: Page markup or an already parsed document
            today: Reference date for year inference

        Returns:
            Transactions in table order, empty when no table is present
        """
        document = self._document(source)
        table = self.resolver.resolve(document)
        return self.extractor.extract(table, today)

    def is_ready(self, source: str | bytes | etree._Element | None) -> bool:
        """Check whether the page shows statement components."""
        return self.resolver.is_ready(self._document(source))

    def export_csv(
        self,
        source: str | bytes | etree._Element | None,
        request: ExportRequest | None = None,
        today: date | None = None,
    ) -> ExportResult:
        """Export the statement as CSV."""
        request = request or ExportRequest()
        document = self._document(source)
        transactions = self.extract(document, today)
        return ExportResult(
            content=self.csv_formatter.format_csv(transactions, request.min_date),
            filename=self.filename(document, ".csv", today),
            mime_type=CSV_MIME_TYPE,
            transaction_count=len(filter_by_min_date(transactions, request.min_date)),
        )

    def export_ofx(
        self,
        source: str | bytes | etree._Element | None,
        request: ExportRequest | None = None,
        now: datetime | None = None,
    ) -> ExportResult:
        """Export the statement as OFX."""
        request = request or ExportRequest()
        now = now or datetime.now()
        document = self._document(source)
        transactions = self.extract(document, now.date())
        return ExportResult(
            content=self.ofx_formatter.format_ofx(transactions, request.min_date, now),
            filename=self.filename(document, ".ofx", now.date()),
            mime_type=OFX_MIME_TYPE,
            transaction_count=len(filter_by_min_date(transactions, request.min_date)),
        )

    def copy_csv(
        self,
        source: str | bytes | etree._Element | None,
        request: ExportRequest | None = None,
        today: date | None = None,
    ) -> str:
        """Return the CSV document as plain text for the clipboard."""
        return self.export_csv(source, request, today).content

    def filename(
        self,
        source: str | bytes | etree._Element | None,
        suffix: str,
        today: date | None = None,
    ) -> str:
        """Suggested download filename, e.g. ``itau-outubro.csv``."""
        title = self.resolver.locate_title(self._document(source))
        title_text = title.text_content() if title is not None else None
        return f"{FILENAME_PREFIX}{period_label(title_text, today)}{suffix}"

    def format_summary(self, transactions: list[Transaction]) -> str:
        """Format summary information."""
        return self.summary_formatter.format_summary(transactions)

    def _document(
        self,
        source: str | bytes | etree._Element | None,
    ) -> etree._Element | None:
        if source is None or isinstance(source, etree._Element):
            return source
        return parse_html(source)
