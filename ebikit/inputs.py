"""Reading input files as objects, trying every file handler that fits."""

from __future__ import annotations

import io
import os
import sys
from typing import Any, BinaryIO

from ebikit.formats import ParseError
from ebikit.registry import FILE_HANDLERS, FileHandler, ObjectType

_IMPORT_ERRORS = (ParseError, ValueError, OSError, EOFError, KeyError, IndexError, TypeError)


def _as_bytes(data: bytes | str | BinaryIO) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    content = data.read()
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


def open_input(path: str | os.PathLike[str]) -> bytes:
    """Read the whole content of a file, or of standard input if the path is '-'."""
    if os.fspath(path) == "-":
        return sys.stdin.buffer.read()
    try:
        with open(path, "rb") as file:
            return file.read()
    except OSError as error:
        raise OSError(f"Could not read file `{os.fspath(path)}`.") from error


def _attempt(importer: Any, content: bytes) -> tuple[bool, Any]:
    try:
        return True, importer(io.BytesIO(content))
    except _IMPORT_ERRORS:
        return False, None


def read_as_object(object_type: ObjectType, data: bytes | str | BinaryIO) -> tuple[Any, FileHandler]:
    """Import the data as the given object type; return the object and the handler that read it."""
    content = _as_bytes(data)
    for handler in FILE_HANDLERS:
        for importer_type, importer in handler.importers:
            if importer_type is object_type:
                ok, obj = _attempt(importer, content)
                if ok:
                    return obj, handler
    raise ParseError("File could not be recognised.")


def read_as_any_object(data: bytes | str | BinaryIO) -> tuple[Any, FileHandler]:
    """Import the data as any object; return the object and the handler that read it."""
    content = _as_bytes(data)
    for handler in FILE_HANDLERS:
        for _, importer in handler.importers:
            ok, obj = _attempt(importer, content)
            if ok:
                return obj, handler
    raise ParseError("File could not be recognised.")


def validate_object_of(data: bytes | str | BinaryIO, file_handler: FileHandler) -> None:
    """Check that the data is a valid file of the given handler; raise ParseError if not."""
    file_handler.validate(_as_bytes(data))