"""Results of commands and the exporters that write them."""

from __future__ import annotations

import io
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, BinaryIO

from ebikit.formats import export_value
from ebikit.registry import (
    ALIGNMENTS,
    COMPRESSED_EVENT_LOG,
    DETERMINISTIC_FINITE_AUTOMATON,
    DIRECTLY_FOLLOWS_MODEL,
    EXECUTIONS,
    FILE_HANDLERS,
    FileHandler,
    ObjectType,
    object_type_of,
)


class Svg(str):
    """A string holding an SVG document."""


class OutputKind(Enum):
    """The kinds of results a command can produce."""

    OBJECT = "object"
    STRING = "text"
    SVG = "svg"
    USIZE = "integer"
    FRACTION = "fraction"


@dataclass(frozen=True)
class OutputType:
    """The type of a result: a kind, and for objects the object type."""

    kind: OutputKind
    object_type: ObjectType | None = None

    @classmethod
    def for_object(cls, object_type: ObjectType) -> OutputType:
        return cls(OutputKind.OBJECT, object_type)

    def __post_init__(self) -> None:
        if (self.kind is OutputKind.OBJECT) != (self.object_type is not None):
            raise ValueError("an object type is given exactly for object outputs")

    def __str__(self) -> str:
        if self.kind is OutputKind.OBJECT:
            return str(self.object_type)
        return self.kind.value


_PLAIN = {
    OutputKind.STRING: ("", "string", "txt"),
    OutputKind.SVG: ("an", "SVG", "svg"),
    OutputKind.USIZE: ("an", "integer", "int"),
    OutputKind.FRACTION: ("a", "fraction", "frac"),
}


@dataclass(frozen=True)
class Exporter:
    """A way to write a result: a plain value, or an object in a file format."""

    kind: OutputKind
    handler: FileHandler | None = None
    write: Callable[[Any, BinaryIO], None] | None = None
    object_type: ObjectType | None = None

    @property
    def article(self) -> str:
        if self.handler is not None:
            return self.handler.article
        return _PLAIN[self.kind][0]

    @property
    def name(self) -> str:
        if self.handler is not None:
            return self.handler.name
        return _PLAIN[self.kind][1]

    @property
    def extension(self) -> str:
        if self.handler is not None:
            return self.handler.file_extension
        return _PLAIN[self.kind][2]

    def __str__(self) -> str:
        if self.handler is not None:
            return str(self.handler)
        return self.kind.value

    def export(self, value: Any, stream: BinaryIO) -> None:
        """Write the value to a binary stream; raises TypeError if it does not fit."""
        actual = output_type_of(value)
        if actual.kind is not self.kind or (
            self.kind is OutputKind.OBJECT and actual.object_type is not self.object_type
        ):
            raise TypeError(f"cannot export {actual} with the {self} exporter")
        if self.write is not None:
            self.write(value, stream)
            return
        text = io.TextIOWrapper(stream, encoding="utf-8", newline="")
        try:
            export_value(value, text)
            text.flush()
        finally:
            text.detach()


def output_type_of(value: Any) -> OutputType:
    """The output type of a result value."""
    if isinstance(value, Svg):
        return OutputType(OutputKind.SVG)
    if isinstance(value, str):
        return OutputType(OutputKind.STRING)
    if isinstance(value, bool):
        raise TypeError("a boolean is not a result value")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"integer results must be non-negative, found {value}")
        return OutputType(OutputKind.USIZE)
    if isinstance(value, Fraction):
        return OutputType(OutputKind.FRACTION)
    return OutputType.for_object(object_type_of(value))


def exporters_for(output_type: OutputType) -> list[Exporter]:
    """All exporters that can write the given output type, in registry order."""
    if output_type.kind is not OutputKind.OBJECT:
        return [Exporter(output_type.kind)]
    return [
        Exporter(OutputKind.OBJECT, handler, write, object_type)
        for handler in FILE_HANDLERS
        for object_type, write in handler.exporters
        if object_type is output_type.object_type
    ]


_DEFAULT_HANDLERS = {
    ObjectType.ALIGNMENTS: ALIGNMENTS,
    ObjectType.DETERMINISTIC_FINITE_AUTOMATON: DETERMINISTIC_FINITE_AUTOMATON,
    ObjectType.DIRECTLY_FOLLOWS_MODEL: DIRECTLY_FOLLOWS_MODEL,
    ObjectType.EVENT_LOG: COMPRESSED_EVENT_LOG,
    ObjectType.EXECUTIONS: EXECUTIONS,
}


def default_exporter(output_type: OutputType) -> Exporter:
    """The exporter used when no file extension asks for another."""
    if output_type.kind is not OutputKind.OBJECT:
        return Exporter(output_type.kind)
    handler = _DEFAULT_HANDLERS.get(output_type.object_type)
    if handler is not None:
        for object_type, write in handler.exporters:
            if object_type is output_type.object_type:
                return Exporter(OutputKind.OBJECT, handler, write, object_type)
    raise ValueError(f"no exporter available for {output_type}")


def select_exporter(output_type: OutputType, path: str | os.PathLike[str] | None) -> Exporter:
    """Pick the exporter whose file extension matches the path, or the default one."""
    if path is not None:
        name = os.fspath(path)
        candidates = sorted(exporters_for(output_type), key=lambda exporter: len(exporter.extension))
        for exporter in candidates:
            if exporter.handler is not None and name.endswith("." + exporter.handler.file_extension):
                return exporter
    return default_exporter(output_type)


def export_to_file(path: str | os.PathLike[str], value: Any, exporter: Exporter) -> None:
    """Write the value to a file with the given exporter."""
    try:
        with open(path, "wb") as file:
            exporter.export(value, file)
    except OSError as error:
        raise OSError(f"Writing result to file {os.fspath(path)!r}.") from error


def export_to_string(value: Any, exporter: Exporter) -> str:
    """Write the value with the given exporter and return the text."""
    buffer = io.BytesIO()
    exporter.export(value, buffer)
    return buffer.getvalue().decode("utf-8")