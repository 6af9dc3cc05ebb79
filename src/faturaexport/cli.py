"""
Command-line interface for statement export.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from .config import DEFAULT_LOCALE
from .exporter import FaturaExporter
from .models import ExportRequest, ExportResult
from .readiness import PollingReadinessWatcher, snapshot_probe

logger = logging.getLogger(__name__)


class FileSavingError(Exception):
    """Exception raised when a file cannot be saved."""


class HtmlLoadingError(Exception):
    """Exception raised when the page markup cannot be read."""


def load_config(config_file: str | None) -> dict:
    """Load CLI configuration from JSON file."""
    if not config_file:
        return {}

    config_path = Path(config_file)
    if not config_path.exists():
        logger.debug(f"CLI config file {config_file} does not exist")
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = json.load(f)
        logger.debug(f"Loaded CLI config from {config_file}")
        return config
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in CLI config file {config_file}: {e}")
        return {}
    except OSError as e:
        logger.warning(f"Failed to load CLI config from {config_file}: {e}")
        return {}


def save_config(config_file: str, config: dict) -> None:
    """Save CLI configuration to JSON file."""
    try:
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
        logger.info(f"CLI configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save CLI config to {config_file}: {e}")
        raise FileSavingError(
            f"Failed to save CLI config to {config_file}: {e}",
        ) from e


def load_html(html_file: str) -> str:
    """Read saved page markup."""
    try:
        with open(html_file, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise HtmlLoadingError(f"Could not read {html_file}: {e}") from e


def write_output(result: ExportResult, output: Path) -> Path:
    """Write an export result to ``output``, a file or a directory."""
    target = output / result.filename if output.is_dir() else output
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(result.content)
    except OSError as e:
        raise FileSavingError(f"Failed to write {target}: {e}") from e
    return target


def parse_min_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD minimum date."""
    if not value:
        return None
    return datetime.strptime(value, "%Y-%m-%d").date()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Export Itaú credit card statement pages to CSV or OFX",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    parser.add_argument(
        "--config",
        help="Path to CLI configuration file (defaults for format, output_dir, min_date, extra_credit_keywords)",
    )

    parser.add_argument(
        "html_file",
        help="Path to the saved statement page",
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=["csv", "ofx"],
        help="Output format (default: csv)",
    )

    parser.add_argument(
        "--min-date",
        help="Skip transactions before this date (YYYY-MM-DD format)",
    )

    parser.add_argument(
        "--output",
        "-o",
        help="Output file or directory (default: suggested filename in the current directory)",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the document instead of writing a file",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Log a summary of the extracted transactions",
    )

    parser.add_argument(
        "--wait",
        type=float,
        default=0,
        metavar="SECONDS",
        help="Poll the page file until statement components appear",
    )

    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store format, min date and output directory in the --config file",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    config = load_config(args.config)

    output_format = args.format or config.get("output_format", "csv")
    min_date_str = args.min_date or config.get("min_date")
    output_dir = config.get("output_dir")

    try:
        min_date = parse_min_date(min_date_str)
    except ValueError:
        logger.error(f"Error: invalid minimum date '{min_date_str}', expected YYYY-MM-DD")
        sys.exit(1)

    if args.save_config:
        if not args.config:
            logger.error("Error: --save-config requires --config")
            sys.exit(1)
        config["output_format"] = output_format
        if min_date_str:
            config["min_date"] = min_date_str
        if args.output and Path(args.output).is_dir():
            config["output_dir"] = args.output
        try:
            save_config(args.config, config)
        except FileSavingError:
            sys.exit(1)

    locale = DEFAULT_LOCALE
    extra_keywords = config.get("extra_credit_keywords") or []
    if extra_keywords:
        locale = DEFAULT_LOCALE.with_extra_keywords(extra_keywords)

    exporter = FaturaExporter(locale=locale)

    if args.wait > 0:
        watcher = PollingReadinessWatcher(interval=min(3.0, args.wait), timeout=args.wait)
        probe = snapshot_probe(lambda: _read_or_empty(args.html_file), exporter.resolver)
        if not watcher.start(probe):
            logger.error(f"Statement page not ready after {args.wait}s")
            sys.exit(1)

    try:
        page = load_html(args.html_file)
    except HtmlLoadingError as e:
        logger.error(f"Error loading page: {e}")
        sys.exit(1)

    request = ExportRequest(min_date=min_date)
    if output_format == "ofx":
        result = exporter.export_ofx(page, request)
    else:
        result = exporter.export_csv(page, request)

    if args.summary:
        logger.info(exporter.format_summary(exporter.extract(page)))

    if result.transaction_count == 0:
        logger.error("No transactions found to export")
        sys.exit(1)

    if args.stdout:
        sys.stdout.write(result.content)
        return

    output = Path(args.output or output_dir or ".")
    try:
        target = write_output(result, output)
    except FileSavingError as e:
        logger.error(f"Error writing output: {e}")
        sys.exit(1)

    logger.info(f"Exported {result.transaction_count} transactions to {target}")


def _read_or_empty(html_file: str) -> str:
    try:
        return load_html(html_file)
    except HtmlLoadingError as e:
        logger.debug(f"Page not readable yet: {e}")
        return ""


if __name__ == "__main__":
    main()
