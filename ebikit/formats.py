"""Shared helpers for reading and writing textual formats."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from fractions import Fraction
from typing import TextIO

_INDEX = re.compile(r"[0-9]+")


class ParseError(ValueError):
    """Raised when input does not follow the expected format."""


class LineReader:
    """Reads significant lines from a stream, skipping comment lines starting with '#'."""

    def __init__(self, stream: Iterable[str | bytes]) -> None:
        self._lines = iter(stream)
        self.line_number = 0
        self.last_line = ""

    def _next_line(self) -> str:
        for raw in self._lines:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            self.line_number += 1
            line = raw.rstrip("\r\n")
            self.last_line = line
            if line.lstrip().startswith("#"):
                continue
            return line
        raise ParseError(f"unexpected end of input after line {self.line_number}")

    def next_line_string(self) -> str:
        return self._next_line()

    def next_line_index(self) -> int:
        text = self._next_line().strip()
        if not _INDEX.fullmatch(text):
            raise ParseError(f"line {self.line_number}: expected a non-negative integer, found `{text}`")
        return int(text)

    def next_line_bool(self) -> bool:
        text = self._next_line().strip()
        if text == "true":
            return True
        if text == "false":
            return False
        raise ParseError(f"line {self.line_number}: expected true or false, found `{text}`")


def export_value(value: object, stream: TextIO) -> None:
    """Write a plain value followed by a newline."""
    stream.write(f"{value}\n")


def string_info(text: str, stream: TextIO) -> None:
    """Write information about a text: its length in bytes."""
    stream.write(f"Length\t{len(text.encode('utf-8'))}\n")


def fraction_info(value: Fraction | int | float, stream: TextIO) -> None:
    """Write the bit sizes of a fraction, or describe infinity or NaN."""
    if isinstance(value, float):
        if math.isnan(value):
            stream.write("NaN")
            return
        if math.isinf(value):
            sign = "-" if value < 0 else "+"
            stream.write(f"{sign} infinity")
            return
    frac = Fraction(value)
    stream.write(f"{abs(frac.numerator).bit_length()} bits / {frac.denominator.bit_length()} bits")