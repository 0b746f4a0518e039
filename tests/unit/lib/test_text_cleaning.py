"""Tests for enrichment text cleaning."""

import pytest

from docingest.lib.text_cleaning import clean_text


class TestCleanText:
    """Tests for clean_text."""

    def test_strips_html_tags(self) -> None:
        """Test table markup is removed."""
        html = "<table><tr><th>Year</th></tr><tr><td>2023</td></tr></table>"
        assert clean_text(html) == "year 2023"

    def test_replaces_disallowed_characters(self) -> None:
        """Test punctuation other than . _ - becomes whitespace."""
        assert clean_text("Revenue (USD): $1,200!") == "revenue usd 1 200"

    def test_keeps_periods_dashes_underscores(self) -> None:
        """Test allowed punctuation survives."""
        assert clean_text("Q1-2023 net_income 3.5") == "q1-2023 net_income 3.5"

    def test_keeps_unicode_word_characters(self) -> None:
        """Test accented letters are word characters."""
        assert clean_text("Relatório Anual") == "relatório anual"

    def test_collapses_whitespace(self) -> None:
        """Test runs of whitespace collapse to one space."""
        assert clean_text("  a \n\n b\t c  ") == "a b c"

    @pytest.mark.parametrize("value", ["", "   ", "\n"])
    def test_blank_input(self, value: str) -> None:
        """Test blank content cleans to an empty string."""
        assert clean_text(value) == ""
