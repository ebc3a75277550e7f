"""Alignments between traces and a model, in a line-based text format."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

from ebikit.activity_key import Activity, ActivityKey
from ebikit.formats import LineReader, ParseError

HEADER = "alignments"


class MoveKind(IntEnum):
    """The kinds of moves, in their sorting order."""

    LOG = 0
    MODEL = 1
    SYNCHRONOUS = 2
    SILENT = 3


@dataclass(frozen=True, order=True)
class Move:
    """One step of an alignment; moves sort by kind, then activity, then transition."""

    kind: MoveKind
    activity: Activity | None = None
    transition: int | None = None

    @classmethod
    def log_move(cls, activity: Activity) -> Move:
        return cls(MoveKind.LOG, activity, None)

    @classmethod
    def model_move(cls, activity: Activity, transition: int) -> Move:
        return cls(MoveKind.MODEL, activity, transition)

    @classmethod
    def synchronous_move(cls, activity: Activity, transition: int) -> Move:
        return cls(MoveKind.SYNCHRONOUS, activity, transition)

    @classmethod
    def silent_move(cls, transition: int) -> Move:
        return cls(MoveKind.SILENT, None, transition)


def _read_label(reader: LineReader, what: str) -> str:
    try:
        line = reader.next_line_string()
    except ParseError as error:
        raise ParseError(f"failed to read label of {what}: {error}") from error
    stripped = line.lstrip()
    if not stripped.startswith("label "):
        raise ParseError("Line must have a label")
    return stripped[6:]


def _read_transition(reader: LineReader, what: str) -> int:
    try:
        return reader.next_line_index()
    except ParseError as error:
        raise ParseError(f"failed to read transition of {what}: {error}") from error


class Alignments:
    """A list of alignments, each a list of moves, sharing one activity key."""

    def __init__(self, activity_key: ActivityKey) -> None:
        self.activity_key = activity_key
        self.alignments: list[list[Move]] = []

    def __len__(self) -> int:
        return len(self.alignments)

    def __getitem__(self, index: int) -> list[Move]:
        return self.alignments[index]

    def __iter__(self) -> Iterator[list[Move]]:
        return iter(self.alignments)

    def append(self, alignment: Iterable[Move]) -> None:
        self.alignments.append(list(alignment))

    def extend(self, alignments: Iterable[Iterable[Move]]) -> None:
        for alignment in alignments:
            self.append(alignment)

    def sort(self) -> None:
        self.alignments.sort()

    def __str__(self) -> str:
        lines = [HEADER, "# number of alignments", str(len(self.alignments))]
        for i, moves in enumerate(self.alignments):
            lines.append(f"# alignment {i}")
            lines.append("# number of moves")
            lines.append(str(len(moves)))
            for j, move in enumerate(moves):
                lines.append(f"# move {j}")
                if move.kind is MoveKind.LOG:
                    lines.append("log move")
                    lines.append(f"label {self.activity_key.get_activity_label(move.activity)}")
                elif move.kind is MoveKind.MODEL:
                    lines.append("model move")
                    lines.append(f"label {self.activity_key.get_activity_label(move.activity)}")
                    lines.append(str(move.transition))
                elif move.kind is MoveKind.SYNCHRONOUS:
                    lines.append("synchronous move")
                    lines.append(f"label {self.activity_key.get_activity_label(move.activity)}")
                    lines.append(str(move.transition))
                else:
                    lines.append("silent move")
                    lines.append(str(move.transition))
        return "\n".join(lines) + "\n"

    @classmethod
    def read(cls, stream: Iterable[str | bytes]) -> Alignments:
        reader = LineReader(stream)
        result = cls(ActivityKey())

        try:
            head = reader.next_line_string()
        except ParseError as error:
            raise ParseError(f"failed to read header, which should be {HEADER}: {error}") from error
        if head != HEADER:
            raise ParseError(f"first line should be exactly `{HEADER}`, but found `{reader.last_line}`")

        try:
            number_of_alignments = reader.next_line_index()
        except ParseError as error:
            raise ParseError(f"failed to read number of alignments: {error}") from error

        for a in range(number_of_alignments):
            try:
                number_of_moves = reader.next_line_index()
            except ParseError as error:
                raise ParseError(f"failed to read number of moves in alignment {a}: {error}") from error

            moves = []
            for m in range(number_of_moves):
                what = f"move {m} of alignment {a}"
                try:
                    kind_line = reader.next_line_string().lstrip()
                except ParseError as error:
                    raise ParseError(f"failed to read type of {what}: {error}") from error

                if kind_line.startswith("log move"):
                    activity = result.activity_key.process_activity(_read_label(reader, what))
                    moves.append(Move.log_move(activity))
                elif kind_line.startswith("model move"):
                    activity = result.activity_key.process_activity(_read_label(reader, what))
                    moves.append(Move.model_move(activity, _read_transition(reader, what)))
                elif kind_line.startswith("synchronous move"):
                    activity = result.activity_key.process_activity(_read_label(reader, what))
                    moves.append(Move.synchronous_move(activity, _read_transition(reader, what)))
                elif kind_line.startswith("silent move"):
                    moves.append(Move.silent_move(_read_transition(reader, what)))
                else:
                    raise ParseError(f"Type of {what} is not recognised.")
            result.alignments.append(moves)

        return result

    @classmethod
    def parse(cls, text: str) -> Alignments:
        return cls.read(io.StringIO(text))

    def export(self, stream: TextIO) -> None:
        stream.write(str(self))

    def info(self, stream: TextIO) -> None:
        stream.write(f"Number of alignments\t\t{len(self.alignments)}\n")