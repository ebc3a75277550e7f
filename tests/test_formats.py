import io
from fractions import Fraction

import pytest

from ebikit.formats import LineReader, ParseError, export_value, fraction_info, string_info


def test_line_reader_skips_comments():
    reader = LineReader(io.StringIO("header\n# comment\n3\n  # another\ntrue\n"))
    assert reader.next_line_string() == "header"
    assert reader.next_line_index() == 3
    assert reader.next_line_bool() is True


def test_line_reader_reads_bytes():
    reader = LineReader(io.BytesIO(b"false\n"))
    assert reader.next_line_bool() is False


def test_line_reader_end_of_input():
    reader = LineReader(io.StringIO("only\n"))
    reader.next_line_string()
    with pytest.raises(ParseError):
        reader.next_line_string()


@pytest.mark.parametrize("text", ["abc\n", "-1\n", "1.5\n"])
def test_line_reader_bad_index(text):
    with pytest.raises(ParseError):
        LineReader(io.StringIO(text)).next_line_index()


def test_line_reader_bad_bool():
    with pytest.raises(ParseError):
        LineReader(io.StringIO("True\n")).next_line_bool()


def test_last_line_tracks_read_line():
    reader = LineReader(io.StringIO("first\nsecond\n"))
    reader.next_line_string()
    reader.next_line_string()
    assert reader.last_line == "second"


def test_export_value():
    buf = io.StringIO()
    export_value(42, buf)
    assert buf.getvalue() == "42\n"


def test_string_info():
    buf = io.StringIO()
    string_info("hello", buf)
    assert buf.getvalue() == "Length\t5\n"


def test_fraction_info_bits():
    buf = io.StringIO()
    fraction_info(Fraction(3, 4), buf)
    assert buf.getvalue() == "2 bits / 3 bits"


def test_fraction_info_nan():
    buf = io.StringIO()
    fraction_info(float("nan"), buf)
    assert buf.getvalue() == "NaN"


def test_fraction_info_infinity():
    buf = io.StringIO()
    fraction_info(float("-inf"), buf)
    assert buf.getvalue().endswith(" infinity")
    assert buf.getvalue().startswith("-")