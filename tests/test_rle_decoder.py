"""
Tests for the RLE pattern decoder.

Tests verify:
- Run lengths, row terminators and the end marker move the cursor correctly
- Header and comment lines are skipped
- Illegal characters abort decoding with MalformedPatternError
- The returned summary reflects what was activated
"""

import io

import pytest

from rle_decoder import DecodeSummary, MalformedPatternError, decode_rle, parse_header


class Recorder:
    def __init__(self):
        self.cells = []

    def activate(self, x, y):
        self.cells.append((x, y))


def decode(text):
    recorder = Recorder()
    summary = decode_rle(text, recorder)
    return recorder.cells, summary


class TestRunLengths:
    """Cursor movement for b, o, $ and repeat counts."""

    def test_block(self):
        """A 2x2 block activates exactly its four cells."""
        cells, _ = decode("2o$2o!")
        assert cells == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_leading_blank(self):
        """A dead run shifts the following live cell."""
        cells, _ = decode("bo$2o!")
        assert cells == [(1, 0), (0, 1), (1, 1)]

    def test_single_o_without_count(self):
        """An o without digits activates one cell and moves one step."""
        cells, _ = decode("oo!")
        assert cells == [(0, 0), (1, 0)]

    def test_zero_count_still_activates_one(self):
        """An accumulator of 0 counts as a run of one."""
        cells, _ = decode("0o!")
        assert cells == [(0, 0)]

    def test_multi_digit_count(self):
        cells, _ = decode("12o!")
        assert cells == [(x, 0) for x in range(12)]

    def test_count_is_reset_after_use(self):
        """A count applies to the next token only."""
        cells, _ = decode("3bo$o!")
        assert cells == [(3, 0), (0, 1)]

    def test_row_terminator_with_count(self):
        """n$ skips n - 1 empty rows and resets x."""
        cells, _ = decode("2o2$o!")
        assert cells == [(0, 0), (1, 0), (0, 2)]

    def test_runs_continue_across_lines(self):
        """Tokens carry on over line breaks, including a pending count."""
        cells, _ = decode("2\no$bo!")
        assert cells == [(0, 0), (1, 0), (1, 1)]

    def test_coordinates_are_never_negative(self):
        cells, _ = decode("5b3o$2$10bo3$o!")
        assert all(x >= 0 and y >= 0 for x, y in cells)


class TestTermination:
    """End marker and end of input."""

    def test_stops_at_exclamation_mark(self):
        """Anything after ! is ignored, even illegal characters."""
        cells, _ = decode("o!zz2o\n3o!")
        assert cells == [(0, 0)]

    def test_implicit_end_of_input(self):
        cells, _ = decode("2o$bo")
        assert cells == [(0, 0), (1, 0), (1, 1)]

    def test_empty_input(self):
        cells, summary = decode("")
        assert cells == []
        assert summary == DecodeSummary(0, 0, 0)


class TestHeaderAndComments:
    """Lines starting with x or # are never tokenized."""

    def test_glider_file(self):
        text = "#N Glider\n#C a comment with 7 and ?\nx = 3, y = 3, rule = B3/S23\nbob$2bo$3o!\n"
        cells, summary = decode(text)
        assert cells == [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)]
        assert summary == DecodeSummary(activations=5, width=3, height=3)

    def test_header_is_informational_only(self):
        """Declared size does not limit decoding."""
        cells, summary = decode("x = 1, y = 1\n4o!")
        assert len(cells) == 4
        assert summary.width == 4

    def test_line_starting_with_x_is_skipped(self):
        """A raw line starting with x is a header even if it looks like tokens."""
        cells, _ = decode("x5y!\no!")
        assert cells == [(0, 0)]

    def test_indented_header_is_not_skipped(self):
        """The header check happens before trimming."""
        with pytest.raises(MalformedPatternError) as excinfo:
            decode("  x = 3\no!")
        assert excinfo.value.character == "x"

    def test_parse_header(self):
        assert parse_header("x = 3, y = 4, rule = B3/S23") == {"x": "3", "y": "4", "rule": "B3/S23"}

    def test_parse_header_ignores_noise(self):
        assert parse_header("x = 3, garbage") == {"x": "3"}


class TestMalformedPattern:
    """Unknown characters abort decoding."""

    def test_error_names_character_and_position(self):
        with pytest.raises(MalformedPatternError) as excinfo:
            decode("o$\n2o5y!")
        error = excinfo.value
        assert error.character == "y"
        assert error.line_number == 2
        assert error.column == 4
        assert "'y'" in str(error)

    def test_no_activations_after_error(self):
        recorder = Recorder()
        with pytest.raises(MalformedPatternError):
            decode_rle("o$2o5y3o!", recorder)
        assert recorder.cells == [(0, 0), (0, 1), (1, 1)]

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            decode("o?")


class TestInputKinds:
    """decode_rle accepts strings, lists and file objects."""

    def test_file_object(self):
        recorder = Recorder()
        decode_rle(io.StringIO("x = 2, y = 1\n2o!\n"), recorder)
        assert recorder.cells == [(0, 0), (1, 0)]

    def test_list_of_lines(self):
        recorder = Recorder()
        decode_rle(["#C comment", "bo$", "o!"], recorder)
        assert recorder.cells == [(1, 0), (0, 1)]

    def test_trailing_whitespace_is_trimmed(self):
        cells, _ = decode("  2o  \n")
        assert cells == [(0, 0), (1, 0)]
