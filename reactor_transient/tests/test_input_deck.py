"""
Unit tests for the input deck reader.
"""

import logging

import pytest

from reactor_transient.exceptions import (
    InputDeckError,
    InsufficientDataError,
    InvalidTableError,
    MalformedRowError,
)
from reactor_transient.input_deck import (
    load_input_deck,
    parse_input_deck,
    parse_logical,
    parse_real,
)

RAMP_DECK = """\
.TRUE.
0.0    0.0      0.0
10.0   0.5E-3   1.0D2
20.0   1.0e-3   100.0
"""

README_DECK = """\
T                    ! thermal spectrum? (Fortran logical)
0.0    0.0     0.0   ! time [s]  reactivity [Δk/k]  source [n/s]
10.0   5.0D-4  1.0E2
20.0   5.0D-4  1.0E2
"""


@pytest.fixture
def deck_file(tmp_path):
    path = tmp_path / "ramp.inp"
    path.write_text(RAMP_DECK)
    return path


class TestParsing:
    """Test value parsing helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("T", True), (".TRUE.", True), ("true", True), (".t", True), ("1", True),
        ("F", False), (".false.", False), ("False", False), ("0", False),
        ("  T  ! thermal core", True),
    ])
    def test_parse_logical(self, text, expected):
        """Test Fortran-style logical values."""
        assert parse_logical(text) is expected

    @pytest.mark.parametrize("text", ["", "yes", "2", ".", "1.0"])
    def test_parse_logical_invalid(self, text):
        """Test non-logical values are rejected."""
        with pytest.raises(ValueError):
            parse_logical(text)

    def test_parse_real_fortran_exponent(self):
        """Test D exponents are read as E exponents."""
        assert parse_real("1.0D2") == 100.0
        assert parse_real("2d-3") == pytest.approx(2e-3)
        assert parse_real("-4.5") == -4.5


class TestLoadInputDeck:
    """Test reading complete decks."""

    def test_load(self, deck_file):
        """Test a valid deck is read into a table."""
        deck = load_input_deck(deck_file)
        assert deck.is_thermal is True
        assert deck.source_path == deck_file
        assert len(deck.table) == 3
        assert deck.table.start_time() == 0.0
        assert deck.table.end_time() == 20.0
        assert deck.table.reactivity_at(12.0) == pytest.approx(0.5e-3)
        assert deck.table.source_at(12.0) == 100.0

    def test_load_accepts_str_path(self, deck_file):
        """Test string paths are accepted."""
        assert len(load_input_deck(str(deck_file)).table) == 3

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_input_deck(tmp_path / "missing.inp")

    def test_debug_trace(self, deck_file, caplog):
        """Test the reader logs what it reads at debug level."""
        with caplog.at_level(logging.DEBUG, logger="reactor_transient"):
            load_input_deck(deck_file)
        assert "Reading input from file" in caplog.text
        assert "Thermal spectrum problem? True" in caplog.text
        assert "3 state points" in caplog.text


class TestParseInputDeck:
    """Test parsing deck text and its error cases."""

    def test_fast_spectrum_with_comments_and_commas(self):
        """Test comments, blank lines and comma separators."""
        lines = [
            "# fast reactor step",
            "F",
            "",
            "0.0, 0.0, 1.0e4",
            "# step in",
            "5.0, 0.002, 1.0e4",
        ]
        deck = parse_input_deck(lines)
        assert deck.is_thermal is False
        assert deck.source_path is None
        assert deck.table.reactivity_at(6.0) == 0.002

    def test_bad_flag(self):
        """Test a missing spectrum flag is reported on its line."""
        with pytest.raises(MalformedRowError) as excinfo:
            parse_input_deck(["0.0 0.0 0.0", "1.0 0.0 0.0", "2.0 0.0 0.0"])
        assert excinfo.value.line_number == 1

    def test_non_numeric_row(self):
        """Test a non-numeric value is reported with its line."""
        with pytest.raises(MalformedRowError) as excinfo:
            parse_input_deck(["T", "0.0 0.0 0.0", "1.0 abc 0.0"], source="bad.inp")
        error = excinfo.value
        assert error.line_number == 3
        assert error.line == "1.0 abc 0.0"
        assert error.source == "bad.inp"
        assert "bad.inp" in str(error)

    @pytest.mark.parametrize("row", ["1.0 0.0", "1.0", "1.0 0.0 ! 5.0"])
    def test_too_few_values(self, row):
        """Test rows with fewer than three values are rejected."""
        with pytest.raises(MalformedRowError, match="expected 3 values"):
            parse_input_deck(["T", "0.0 0.0 0.0", row])

    @pytest.mark.parametrize("row", ["1.0 0.5 2.0 4.0", "1.0 0.5 2.0 step in", "1.0, 0.5, 2.0, extra"])
    def test_trailing_values_ignored(self, row):
        """Test values after the third are ignored, as in a list-directed read."""
        deck = parse_input_deck(["T", "0.0 0.0 0.0", row])
        assert deck.table.reactivity_at(1.0) == 0.5
        assert deck.table.source_at(1.0) == 2.0

    def test_trailing_comments(self):
        """Test text after an exclamation mark is a comment on any line."""
        deck = parse_input_deck(README_DECK.splitlines())
        assert deck.is_thermal is True
        assert len(deck.table) == 3
        assert deck.table.reactivity_at(15.0) == pytest.approx(5.0e-4)
        assert deck.table.source_at(15.0) == 100.0

    def test_comment_only_lines(self):
        """Test lines holding only a comment are skipped."""
        deck = parse_input_deck(["! step insertion", "F", "! t rho S", "0.0 0.0 0.0", "1.0 0.1 0.0"])
        assert deck.is_thermal is False
        assert len(deck.table) == 2

    @pytest.mark.parametrize("lines,count", [
        ([], 0),
        (["T"], 0),
        (["T", "0.0 0.0 0.0"], 1),
    ])
    def test_insufficient_data(self, lines, count):
        """Test fewer than two data rows is an error."""
        with pytest.raises(InsufficientDataError) as excinfo:
            parse_input_deck(lines)
        assert excinfo.value.count == count
        assert isinstance(excinfo.value, InputDeckError)

    def test_unsorted_times(self):
        """Test decreasing times surface as a table error."""
        with pytest.raises(InvalidTableError):
            parse_input_deck(["T", "0.0 0.0 0.0", "2.0 0.0 0.0", "1.0 0.0 0.0"])
