"""
Fatura Export - Itaú credit card statement export.

This package provides tools to locate the transactions table of a statement
page, normalize Brazilian dates and amounts, and generate CSV or OFX output.
"""

from .exporter import FaturaExporter
from .extractor import TransactionExtractor
from .locator import locate, locate_all
from .models import ExportRequest, ExportResult, Transaction, TransactionType
from .output_formatter import CsvFormatter, OfxFormatter, SummaryFormatter
from .table_resolver import TableResolver

__version__ = "0.1.0"
__all__ = [
    "CsvFormatter",
    "ExportRequest",
    "ExportResult",
    "FaturaExporter",
    "OfxFormatter",
    "SummaryFormatter",
    "TableResolver",
    "Transaction",
    "TransactionExtractor",
    "TransactionType",
    "locate",
    "locate_all",
]
