"""Unit tests for normalizers.py."""

import logging
from datetime import date

import pytest
from lxml import html

from faturaexport.config import LocaleConfig
from faturaexport.normalizers import (
    amount_styling,
    collapse_whitespace,
    infer_year,
    is_credit,
    normalize_date,
    normalize_day,
    normalize_month,
    normalize_year,
    parse_amount,
    parse_color,
    parse_date,
)

OCTOBER = date(2026, 10, 19)
JANUARY = date(2026, 1, 5)


class TestNormalizeDay:
    """Tests for normalize_day function."""

    def test_slash_format(self):
        """Test day from DD/MM/YYYY."""
        assert normalize_day("15/09/2026") == "15"

    def test_slash_format_pads(self):
        """Test single digit day is zero padded."""
        assert normalize_day("5/9/2026") == "05"

    def test_space_format(self):
        """Test day from 'DD mon'."""
        assert normalize_day("7 set") == "07"

    def test_empty(self):
        """Test empty input."""
        assert normalize_day("") == "00"


class TestNormalizeMonth:
    """Tests for normalize_month function."""

    @pytest.mark.parametrize(
        ("abbreviation", "expected"),
        [
            ("jan", "01"),
            ("fev", "02"),
            ("mar", "03"),
            ("abr", "04"),
            ("mai", "05"),
            ("jun", "06"),
            ("jul", "07"),
            ("ago", "08"),
            ("set", "09"),
            ("out", "10"),
            ("nov", "11"),
            ("dez", "12"),
        ],
    )
    def test_all_abbreviations(self, abbreviation, expected):
        """Test every Portuguese abbreviation, with and without a trailing dot."""
        assert normalize_month(f"10 {abbreviation}") == expected
        assert normalize_month(f"10 {abbreviation}.") == expected

    def test_case_insensitive(self):
        """Test upper case abbreviations."""
        assert normalize_month("10 SET") == "09"
        assert normalize_month("10 Dez.") == "12"

    def test_unknown_abbreviation(self):
        """Test that unknown abbreviations give None."""
        assert normalize_month("10 sep") is None

    def test_missing_month(self):
        """Test a date without a month token."""
        assert normalize_month("10") is None

    def test_slash_format(self):
        """Test month from DD/MM/YYYY."""
        assert normalize_month("15/9/2026") == "09"

    def test_custom_locale(self):
        """Test substituting another month table."""
        locale = LocaleConfig(month_map={"sep": 9})

        assert normalize_month("10 sep", locale) == "09"
        assert normalize_month("10 set", locale) is None


class TestYearInference:
    """Tests for infer_year and normalize_year.

    The inference rule is a heuristic over a two month lookahead window.
    """

    def test_december_in_january_is_previous_year(self):
        """Test December entries seen in January."""
        assert infer_year(12, JANUARY) == 2025

    def test_month_beyond_lookahead_is_previous_year(self):
        """Test months more than two after the current one."""
        assert infer_year(4, JANUARY) == 2025
        assert infer_year(12, date(2026, 9, 1)) == 2025

    def test_month_within_lookahead_is_current_year(self):
        """Test months up to two after the current one."""
        assert infer_year(3, JANUARY) == 2026
        assert infer_year(12, OCTOBER) == 2026

    def test_past_months_are_current_year(self):
        """Test earlier months in the same year."""
        assert infer_year(1, OCTOBER) == 2026
        assert infer_year(9, OCTOBER) == 2026

    def test_defaults_to_today(self):
        """Test that today is used without a reference date."""
        today = date.today()

        assert infer_year(today.month) == today.year

    def test_explicit_four_digit_year(self):
        """Test an explicit year is used as-is."""
        assert normalize_year("15/09/2019", 9, OCTOBER) == 2019

    def test_explicit_two_digit_year(self):
        """Test two digit years are in the 2000s."""
        assert normalize_year("15/09/24", 9, OCTOBER) == 2024

    def test_two_segment_slash_date_is_inferred(self):
        """Test DD/MM without a year."""
        assert normalize_year("15/12", 12, JANUARY) == 2025

    def test_non_numeric_year(self):
        """Test a year segment that is not a number."""
        assert normalize_year("15/09/abcd", 9, OCTOBER) is None


class TestParseDate:
    """Tests for parse_date and normalize_date functions."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("15/09/2026", "15/09/2026"),
            ("01/01/2000", "01/01/2000"),
            ("5/3/2024", "05/03/2024"),
            ("31/12/1999", "31/12/1999"),
        ],
    )
    def test_slash_dates_round_trip(self, raw, expected):
        """Test DD/MM/YYYY inputs keep their day, month and year."""
        assert normalize_date(raw, OCTOBER) == expected

    def test_day_month_with_inferred_year(self):
        """Test 'DD mon' input."""
        parts = parse_date("15 set", OCTOBER)

        assert (parts.day, parts.month, parts.year) == (15, 9, 2026)
        assert parts.date_key == "20260915"

    def test_trailing_dot_and_extra_whitespace(self):
        """Test 'DD mon.' input with messy spacing."""
        assert normalize_date("  3   out. ", OCTOBER) == "03/10/2026"

    def test_december_entry_in_january(self):
        """Test the year rollover case."""
        assert normalize_date("28 dez", JANUARY) == "28/12/2025"

    def test_unknown_month_returns_raw_text(self, caplog):
        """Test that an unparseable date is returned unchanged with a warning."""
        with caplog.at_level(logging.WARNING):
            result = normalize_date("15 foo", OCTOBER)

        assert result == "15 foo"
        assert "Could not parse month" in caplog.text

    def test_unknown_month_parse_date_is_none(self):
        """Test that parse_date gives None for unknown months."""
        assert parse_date("15 foo", OCTOBER) is None

    def test_out_of_range_values(self):
        """Test that impossible day or month values are rejected."""
        assert parse_date("15/13/2026", OCTOBER) is None
        assert parse_date("32/01/2026", OCTOBER) is None

    def test_non_numeric_day(self):
        """Test a day that is not a number."""
        assert parse_date("xx set", OCTOBER) is None


class TestParseAmount:
    """Tests for parse_amount function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("R$ 1.234,56", 1234.56),
            ("1234,56", 1234.56),
            ("12.34", 12.34),
            ("R$ 1.234.567,89", 1234567.89),
            ("R$ 0,99", 0.99),
            ("- R$ 50,00", -50.0),
            ("R$ 50,00-", 50.0),
            ("50,00 -", 50.0),
            ("1-2", 1.0),
        ],
    )
    def test_values(self, text, expected):
        """Test Brazilian and plain formats."""
        assert parse_amount(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", None, "abc", "R$", "-", "--5"])
    def test_non_numeric_is_zero(self, text):
        """Test that empty or non-numeric input gives zero."""
        assert parse_amount(text) == 0.0


class TestParseColor:
    """Tests for parse_color function."""

    def test_rgb(self):
        """Test rgb() values."""
        assert parse_color("color: rgb(0, 128, 0)") == (0, 128, 0)

    def test_rgba(self):
        """Test rgba() values."""
        assert parse_color("font-weight:bold; color:rgba(34,139,34,1)") == (34, 139, 34)

    def test_hex(self):
        """Test hex values."""
        assert parse_color("color: #00A650") == (0, 166, 80)
        assert parse_color("color: #0f0") == (0, 255, 0)

    def test_background_color_is_ignored(self):
        """Test that background-color is not taken as the text color."""
        assert parse_color("background-color: rgb(0, 128, 0)") is None

    def test_missing(self):
        """Test styles without a color."""
        assert parse_color(None) is None
        assert parse_color("font-weight: bold") is None


class TestAmountStyling:
    """Tests for amount_styling function."""

    def test_collects_nested_classes_and_color(self):
        """Test classes and color from the cell and its children."""
        table = html.fromstring(
            "<table><tr>"
            '<td class="amount"><span class="value--positive" style="color: rgb(0, 128, 0)">R$ 5,00</span></td>'
            "</tr></table>",
        )
        cell = table.cssselect("td")[0]

        classes, color = amount_styling(cell)

        assert classes == ["amount", "value--positive"]
        assert color == (0, 128, 0)

    def test_none_cell(self):
        """Test a missing cell."""
        assert amount_styling(None) == ([], None)


class TestIsCredit:
    """Tests for is_credit function."""

    def test_payment_received(self):
        """Test a received payment is a credit."""
        assert is_credit("PAGAMENTO RECEBIDO - BOLETO", "R$ 500,00") is True

    @pytest.mark.parametrize(
        "description",
        [
            "ESTORNO COMPRA",
            "Crédito de juros",
            "CREDITO ROTATIVO",
            "Devolução loja",
            "DEVOLUCAO",
            "reembolso viagem",
            "Pagamento efetuado",
        ],
    )
    def test_keywords(self, description):
        """Test every credit keyword, case-insensitively."""
        assert is_credit(description, "R$ 10,00") is True

    def test_plain_purchase_is_debit(self):
        """Test an entry with no credit signals."""
        assert is_credit("SUPERMERCADO XYZ", "R$ 10,00") is False

    def test_credit_class(self):
        """Test credit class names on the amount."""
        assert is_credit("LOJA", "R$ 10,00", ["amount", "is-Credito"]) is True
        assert is_credit("LOJA", "R$ 10,00", ["valor-positivo"]) is True

    def test_green_color(self):
        """Test known green text colors."""
        assert is_credit("LOJA", "R$ 10,00", amount_color=(0, 128, 0)) is True
        assert is_credit("LOJA", "R$ 10,00", amount_color=(255, 0, 0)) is False

    def test_leading_minus(self):
        """Test a negative amount text."""
        assert is_credit("LOJA", "-R$ 10,00") is True
        assert is_credit("LOJA", "R$ -10,00") is False
        assert is_credit("LOJA", "R$ 10,00-") is False
        assert is_credit("ESTORNO LOJA", "R$ 50,00-") is True

    def test_extra_keywords(self):
        """Test extending the keyword list."""
        locale = LocaleConfig().with_extra_keywords(["Cashback"])

        assert is_credit("CASHBACK APP", "R$ 1,00", locale=locale) is True


class TestCollapseWhitespace:
    """Tests for collapse_whitespace function."""

    def test_collapses_and_trims(self):
        """Test runs of whitespace and newlines."""
        assert collapse_whitespace("  SUPERMERCADO \n\t XYZ ") == "SUPERMERCADO XYZ"

    def test_none(self):
        """Test None input."""
        assert collapse_whitespace(None) == ""
