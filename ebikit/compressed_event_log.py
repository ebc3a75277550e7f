"""Gzip-compressed XES event logs."""

from __future__ import annotations

import gzip
import io
from typing import BinaryIO

from ebikit.event_log import EventLog
from ebikit.formats import ParseError


def read_compressed_event_log(stream: BinaryIO) -> EventLog:
    """Read an event log from a gzip-compressed XES binary stream."""
    try:
        with gzip.GzipFile(fileobj=stream, mode="rb") as decompressed:
            return EventLog.read(decompressed)
    except ParseError:
        raise
    except (OSError, EOFError) as error:
        raise ParseError(f"could not decompress event log: {error}") from error


def export_compressed_event_log(log: EventLog, stream: BinaryIO) -> None:
    """Write an event log as gzip-compressed XES to a binary stream."""
    with gzip.GzipFile(fileobj=stream, mode="wb", compresslevel=9) as compressed:
        text = io.TextIOWrapper(compressed, encoding="utf-8", newline="")
        try:
            log.export(text)
            text.flush()
        finally:
            text.detach()