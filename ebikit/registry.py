"""The object types and the file handlers that read and write them."""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any, BinaryIO

from ebikit.alignments import Alignments
from ebikit.compressed_event_log import export_compressed_event_log, read_compressed_event_log
from ebikit.deterministic_finite_automaton import DeterministicFiniteAutomaton
from ebikit.directly_follows_model import DirectlyFollowsModel
from ebikit.event_log import EventLog
from ebikit.executions import Executions
from ebikit.formats import ParseError

Importer = Callable[[BinaryIO], Any]
ObjectExporter = Callable[[Any, BinaryIO], None]


class ObjectType(Enum):
    """The kinds of objects that can be read and written."""

    ALIGNMENTS = "alignments"
    STOCHASTIC_DETERMINISTIC_FINITE_AUTOMATON = "stochastic deterministic finite automaton"
    DETERMINISTIC_FINITE_AUTOMATON = "deterministic finite automaton"
    DIRECTLY_FOLLOWS_MODEL = "directly follows model"
    EVENT_LOG = "event log"
    FINITE_LANGUAGE = "finite language"
    FINITE_STOCHASTIC_LANGUAGE = "finite stochastic language"
    LABELLED_PETRI_NET = "labelled Petri net"
    STOCHASTIC_LABELLED_PETRI_NET = "stochastic labelled Petri net"
    EXECUTIONS = "executions"

    def article(self) -> str:
        if self in (ObjectType.ALIGNMENTS, ObjectType.EXECUTIONS):
            return ""
        if self is ObjectType.EVENT_LOG:
            return "an"
        return "a"

    def __str__(self) -> str:
        return self.value


def _as_stream(data: bytes | str | BinaryIO) -> BinaryIO:
    if isinstance(data, str):
        return io.BytesIO(data.encode("utf-8"))
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(data))
    return data


def _export_text(obj: Any, stream: BinaryIO) -> None:
    text = io.TextIOWrapper(stream, encoding="utf-8", newline="")
    try:
        obj.export(text)
        text.flush()
    finally:
        text.detach()


@total_ordering
@dataclass(frozen=True, eq=False)
class FileHandler:
    """A file format: how to validate, import and export objects in it."""

    name: str
    article: str
    file_extension: str
    validator: Importer
    importers: tuple[tuple[ObjectType, Importer], ...]
    exporters: tuple[tuple[ObjectType, ObjectExporter], ...]

    def __str__(self) -> str:
        return f"{self.name} (.{self.file_extension})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileHandler):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other: FileHandler) -> bool:
        if not isinstance(other, FileHandler):
            return NotImplemented
        return self.name < other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def validate(self, data: bytes | str | BinaryIO) -> None:
        """Check that the data is a valid file of this format; raise ParseError if not."""
        try:
            self.validator(_as_stream(data))
        except ParseError:
            raise
        except (ValueError, OSError, EOFError) as error:
            raise ParseError(f"not a valid {self.name}: {error}") from error


ALIGNMENTS = FileHandler(
    name="alignments",
    article="",
    file_extension="ali",
    validator=Alignments.read,
    importers=((ObjectType.ALIGNMENTS, Alignments.read),),
    exporters=((ObjectType.ALIGNMENTS, _export_text),),
)

COMPRESSED_EVENT_LOG = FileHandler(
    name="compressed event log",
    article="a",
    file_extension="xes.gz",
    validator=read_compressed_event_log,
    importers=((ObjectType.EVENT_LOG, read_compressed_event_log),),
    exporters=((ObjectType.EVENT_LOG, export_compressed_event_log),),
)

DETERMINISTIC_FINITE_AUTOMATON = FileHandler(
    name="deterministic finite automaton",
    article="a",
    file_extension="dfa",
    validator=DeterministicFiniteAutomaton.read,
    importers=((ObjectType.DETERMINISTIC_FINITE_AUTOMATON, DeterministicFiniteAutomaton.read),),
    exporters=((ObjectType.DETERMINISTIC_FINITE_AUTOMATON, _export_text),),
)

DIRECTLY_FOLLOWS_MODEL = FileHandler(
    name="directly follows model",
    article="a",
    file_extension="dfm",
    validator=DirectlyFollowsModel.read,
    importers=((ObjectType.DIRECTLY_FOLLOWS_MODEL, DirectlyFollowsModel.read),),
    exporters=((ObjectType.DIRECTLY_FOLLOWS_MODEL, _export_text),),
)

EVENT_LOG = FileHandler(
    name="event log",
    article="an",
    file_extension="xes",
    validator=EventLog.read,
    importers=((ObjectType.EVENT_LOG, EventLog.read),),
    exporters=((ObjectType.EVENT_LOG, _export_text),),
)

EXECUTIONS = FileHandler(
    name="executions",
    article="",
    file_extension="exs",
    validator=Executions.read,
    importers=((ObjectType.EXECUTIONS, Executions.read),),
    exporters=((ObjectType.EXECUTIONS, _export_text),),
)

FILE_HANDLERS: tuple[FileHandler, ...] = (
    ALIGNMENTS,
    COMPRESSED_EVENT_LOG,
    DETERMINISTIC_FINITE_AUTOMATON,
    DIRECTLY_FOLLOWS_MODEL,
    EVENT_LOG,
    EXECUTIONS,
)

_TYPES: tuple[tuple[type, ObjectType], ...] = (
    (Alignments, ObjectType.ALIGNMENTS),
    (DeterministicFiniteAutomaton, ObjectType.DETERMINISTIC_FINITE_AUTOMATON),
    (DirectlyFollowsModel, ObjectType.DIRECTLY_FOLLOWS_MODEL),
    (EventLog, ObjectType.EVENT_LOG),
    (Executions, ObjectType.EXECUTIONS),
)


def find_file_handler(text: str) -> FileHandler:
    """Find a file handler by its name or its file extension."""
    for handler in FILE_HANDLERS:
        if text in (handler.name, handler.file_extension):
            return handler
    raise ValueError(f"{text} is not a known file handler.")


def object_type_of(obj: object) -> ObjectType:
    """The object type of a loaded object."""
    for cls, object_type in _TYPES:
        if isinstance(obj, cls):
            return object_type
    raise TypeError(f"{type(obj).__name__} is not a known object type")


def file_handlers_for(object_type: ObjectType) -> list[FileHandler]:
    """The file handlers that can import the given object type, in registry order."""
    return [
        handler
        for handler in FILE_HANDLERS
        if any(importer_type is object_type for importer_type, _ in handler.importers)
    ]