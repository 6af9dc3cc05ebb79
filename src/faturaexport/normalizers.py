"""
Normalization of raw statement text into canonical values.

Dates arrive either as ``DD/MM/YYYY`` (or ``DD/MM/YY``, ``DD/MM``) or as
``DD mon`` with a Portuguese month abbreviation and no year. Amounts use the
Brazilian format (``R$ 1.234,56``).
"""

import logging
import re
from datetime import date

from lxml import etree

from .config import DEFAULT_LOCALE, LocaleConfig
from .models import DateParts

logger = logging.getLogger(__name__)

_AMOUNT_CHARS = re.compile(r"[^\d,.\-]")
_NUMERIC_PREFIX = re.compile(r"-?\d*\.?\d+")
_WHITESPACE = re.compile(r"\s+")
_STYLE_COLOR = re.compile(r"(?:^|;)\s*color\s*:\s*([^;]+)", re.IGNORECASE)
_RGB = re.compile(r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})", re.IGNORECASE)
_HEX = re.compile(r"#([0-9a-f]{6}|[0-9a-f]{3})\b", re.IGNORECASE)


def collapse_whitespace(text: str | None) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_day(raw_date: str) -> str:
    """Return the day part of a raw date, zero-padded to two digits."""
    if "/" in raw_date:
        day = raw_date.split("/")[0].strip()
    else:
        tokens = raw_date.split()
        day = tokens[0] if tokens else ""
    return day.zfill(2)


def normalize_month(raw_date: str, locale: LocaleConfig = DEFAULT_LOCALE) -> str | None:
    """
    Return the month part of a raw date as two digits.

    Returns None when the month abbreviation is not recognized.
    """
    if "/" in raw_date:
        segments = raw_date.split("/")
        if len(segments) < 2:
            return None
        return segments[1].strip().zfill(2)

    tokens = raw_date.split()
    if len(tokens) < 2:
        return None
    abbreviation = tokens[1].strip().lower().rstrip(".")
    month = locale.month_map.get(abbreviation)
    if month is None:
        return None
    return f"{month:02d}"


def infer_year(month: int, today: date | None = None) -> int:
    """
    Guess the year of a statement entry that shows only day and month.

    A December entry seen in January belongs to the previous year, as does
    any entry whose month lies more than two months after the current one.
    Everything else belongs to the current year. This is a heuristic with no
    lower bound check, so unusual statement ranges can be misplaced.
    """
    today = today or date.today()
    if month == 12 and today.month == 1:
        return today.year - 1
    if month > today.month + 2:
        return today.year - 1
    return today.year


def normalize_year(raw_date: str, month: int, today: date | None = None) -> int | None:
    """Return the explicit year of a raw date, or an inferred one."""
    if "/" in raw_date:
        segments = raw_date.split("/")
        if len(segments) == 3:
            year_text = segments[2].strip()
            if not year_text.isdigit():
                return None
            year = int(year_text)
            if len(year_text) == 2:
                year += 2000
            return year
    return infer_year(month, today)


def parse_date(
    raw_date: str,
    today: date | None = None,
    locale: LocaleConfig = DEFAULT_LOCALE,
) -> DateParts | None:
    """
    Decompose a raw statement date.

    Args:
        raw_date: Date text as shown in the statement
        today: Reference date for year inference (defaults to today)
        locale: Month abbreviations to use

    Returns:
        DateParts, or None when the text cannot be interpreted
    """
    text = collapse_whitespace(raw_date)
    month_text = normalize_month(text, locale)
    if month_text is None or not month_text.isdigit():
        logger.warning(f"Could not parse month from date '{raw_date}'")
        return None

    day_text = normalize_day(text)
    if not day_text.isdigit():
        logger.warning(f"Could not parse day from date '{raw_date}'")
        return None

    month = int(month_text)
    day = int(day_text)
    year = normalize_year(text, month, today)
    if year is None:
        logger.warning(f"Could not parse year from date '{raw_date}'")
        return None

    if not (1 <= month <= 12 and 1 <= day <= 31 and 1000 <= year <= 9999):
        logger.warning(f"Date '{raw_date}' is out of range")
        return None

    return DateParts(day=day, month=month, year=year)


def normalize_date(
    raw_date: str,
    today: date | None = None,
    locale: LocaleConfig = DEFAULT_LOCALE,
) -> str:
    """Return ``DD/MM/YYYY`` for a raw date, or the raw text if unparseable."""
    parts = parse_date(raw_date, today, locale)
    if parts is None:
        return raw_date
    return parts.date_csv


def parse_amount(text: str | None) -> float:
    """
    Parse a Brazilian currency string into a float.

    ``"R$ 1.234,56"`` becomes ``1234.56``. Without a comma the cleaned text is
    parsed as-is. Only the leading number counts, so a stray trailing minus
    (``"50,00-"``) is ignored. Empty or non-numeric input gives ``0.0``.
    """
    if not text:
        return 0.0

    cleaned = _AMOUNT_CHARS.sub("", text)
    if "," in cleaned:
        integer_part, _, decimal_part = cleaned.replace(".", "").rpartition(",")
        cleaned = f"{integer_part.replace(',', '')}.{decimal_part}"

    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_color(style: str | None) -> tuple[int, int, int] | None:
    """Extract the ``color`` declaration of an inline style as an RGB triple."""
    if not style:
        return None
    match = _STYLE_COLOR.search(style)
    if not match:
        return None
    value = match.group(1).strip()

    rgb = _RGB.search(value)
    if rgb:
        return int(rgb.group(1)), int(rgb.group(2)), int(rgb.group(3))

    hex_match = _HEX.search(value)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    return None


def amount_styling(
    cell: etree._Element | None,
) -> tuple[list[str], tuple[int, int, int] | None]:
    """Collect class names and the first inline text color of an amount cell."""
    if cell is None:
        return [], None

    classes: list[str] = []
    color = None
    for element in cell.iter():
        if not isinstance(element.tag, str):
            continue
        classes.extend((element.get("class") or "").split())
        if color is None:
            color = parse_color(element.get("style"))
    return classes, color


def is_credit(
    description: str,
    amount_text: str,
    amount_classes: list[str] | tuple[str, ...] = (),
    amount_color: tuple[int, int, int] | None = None,
    locale: LocaleConfig = DEFAULT_LOCALE,
) -> bool:
    """
    Decide whether an entry reduces the statement balance.

    Checked in order: credit keywords in the description, credit class names
    on the amount, a known green text color, a leading minus sign.
    """
    lowered = description.lower()
    if any(keyword in lowered for keyword in locale.credit_keywords):
        return True

    for class_name in amount_classes:
        lowered_class = class_name.lower()
        if any(marker in lowered_class for marker in locale.credit_class_markers):
            return True

    if amount_color is not None and tuple(amount_color) in locale.green_colors:
        return True

    return amount_text.strip().startswith("-")
