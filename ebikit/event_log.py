"""Event logs in the XES format, with activity keys and attribute profiling."""

from __future__ import annotations

import io
import math
import uuid
import xml.etree.ElementTree as ET
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from fractions import Fraction
from typing import Any, TextIO

from ebikit.activity_key import Activity, ActivityKey
from ebikit.formats import ParseError

DEFAULT_CLASSIFIER = ("concept:name",)

_ATTRIBUTE_TAGS = frozenset({"string", "date", "int", "float", "boolean", "id", "list", "container"})


@dataclass
class Trace:
    """A trace: its own attributes and a sequence of events, each a mapping of attributes."""

    attributes: dict[str, Any] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_date(text: str) -> datetime:
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _parse_boolean(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"`{text}` is not a boolean")


_VALUE_PARSERS = {
    "string": str,
    "date": _parse_date,
    "int": int,
    "float": float,
    "boolean": _parse_boolean,
    "id": uuid.UUID,
}


def _read_attribute(element: ET.Element) -> tuple[str, Any]:
    tag = _local(element.tag)
    key = element.get("key")
    if key is None:
        raise ParseError(f"{tag} attribute without a key")
    if tag == "list":
        values: list[tuple[str, Any]] = []
        for child in element:
            if _local(child.tag) == "values":
                values.extend(_read_attribute(item) for item in child if _local(item.tag) in _ATTRIBUTE_TAGS)
        return key, values
    if tag == "container":
        return key, dict(_read_attribute(child) for child in element if _local(child.tag) in _ATTRIBUTE_TAGS)
    text = element.get("value")
    if text is None:
        raise ParseError(f"{tag} attribute `{key}` without a value")
    try:
        return key, _VALUE_PARSERS[tag](text)
    except ValueError as error:
        raise ParseError(f"could not read {tag} attribute `{key}`: {error}") from error


def _read_attributes(element: ET.Element) -> dict[str, Any]:
    return dict(_read_attribute(child) for child in element if _local(child.tag) in _ATTRIBUTE_TAGS)


def read_xes(stream: TextIO | Any) -> list[Trace]:
    """Read the traces of an XES document from a text or binary stream."""
    try:
        root = ET.parse(stream).getroot()
    except ET.ParseError as error:
        raise ParseError(f"invalid XES: {error}") from error
    if _local(root.tag) != "log":
        raise ParseError(f"expected a log element, found `{_local(root.tag)}`")
    traces = []
    for trace_element in root:
        if _local(trace_element.tag) != "trace":
            continue
        events = [
            _read_attributes(event_element)
            for event_element in trace_element
            if _local(event_element.tag) == "event"
        ]
        traces.append(Trace(_read_attributes(trace_element), events))
    return traces


def _write_attribute(parent: ET.Element, key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool):
        tag, text = "boolean", "true" if value else "false"
    elif isinstance(value, int):
        tag, text = "int", str(value)
    elif isinstance(value, float):
        tag, text = "float", repr(value)
    elif isinstance(value, datetime):
        tag, text = "date", value.isoformat()
    elif isinstance(value, uuid.UUID):
        tag, text = "id", str(value)
    elif isinstance(value, list):
        element = ET.SubElement(parent, "list", key=key)
        values = ET.SubElement(element, "values")
        for item_key, item_value in value:
            _write_attribute(values, item_key, item_value)
        return
    elif isinstance(value, dict):
        element = ET.SubElement(parent, "container", key=key)
        for item_key, item_value in value.items():
            _write_attribute(element, item_key, item_value)
        return
    else:
        tag, text = "string", str(value)
    ET.SubElement(parent, tag, key=key, value=text)


def write_xes(traces: Iterable[Trace], stream: TextIO) -> None:
    """Write traces as an XES document to a text stream."""
    root = ET.Element("log", {"xes.version": "1.0", "xes.features": "nested-attributes"})
    for trace in traces:
        trace_element = ET.SubElement(root, "trace")
        for key, value in trace.attributes.items():
            _write_attribute(trace_element, key, value)
        for event in trace.events:
            event_element = ET.SubElement(trace_element, "event")
            for key, value in event.items():
                _write_attribute(event_element, key, value)
    ET.indent(root)
    stream.write('<?xml version="1.0" encoding="UTF-8"?>\n')
    ET.ElementTree(root).write(stream, encoding="unicode")
    stream.write("\n")


def _parse_fraction(text: str) -> Fraction | None:
    if not text or text != text.strip():
        return None
    try:
        return Fraction(text)
    except (ValueError, ZeroDivisionError):
        return None


def _parse_datetime(text: str) -> datetime | None:
    try:
        value = datetime.fromisoformat(text)
    except ValueError:
        return None
    return value if value.tzinfo is not None else None


def _float_fraction(value: float) -> Fraction | None:
    if not math.isfinite(value):
        return None
    return Fraction(repr(value))


def _format_datetime(value: datetime) -> str:
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond:
        digits = f"{value.microsecond:06d}"
        if digits.endswith("000"):
            digits = digits[:3]
        text += "." + digits
    offset = value.utcoffset()
    total = int(offset.total_seconds()) if offset is not None else 0
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total) // 60, 60)
    return f"{text} {sign}{hours:02d}:{minutes:02d}"


class _Kind(Enum):
    CATEGORICAL = "categorical"
    NUMERICAL = "numerical"
    TIME = "time"
    UNDEFINED = "undefined"


@dataclass
class DataType:
    """The inferred type of an attribute, with its range where it has one."""

    kind: _Kind
    minimum: Fraction | datetime | None = None
    maximum: Fraction | datetime | None = None

    @classmethod
    def init(cls, value: Any) -> DataType:
        """Infer the data type of a single attribute value."""
        if isinstance(value, str):
            number = _parse_fraction(value)
            if number is not None:
                return cls(_Kind.NUMERICAL, number, number)
            moment = _parse_datetime(value)
            if moment is not None:
                return cls(_Kind.TIME, moment, moment)
            return cls(_Kind.CATEGORICAL)
        if isinstance(value, datetime):
            return cls(_Kind.TIME, value, value)
        if isinstance(value, bool):
            return cls(_Kind.UNDEFINED)
        if isinstance(value, int):
            return cls(_Kind.NUMERICAL, Fraction(value), Fraction(value))
        if isinstance(value, float):
            number = _float_fraction(value)
            if number is not None:
                return cls(_Kind.NUMERICAL, number, number)
        return cls(_Kind.UNDEFINED)

    def _widen(self, value: Any) -> DataType:
        undefined = DataType(_Kind.UNDEFINED)
        if self.kind is _Kind.CATEGORICAL:
            if value is None or isinstance(value, str):
                return DataType(_Kind.CATEGORICAL)
            return undefined
        if self.kind is _Kind.NUMERICAL:
            if value is None:
                return DataType(_Kind.NUMERICAL, self.minimum, self.maximum)
            if isinstance(value, str):
                number = _parse_fraction(value)
            elif isinstance(value, bool):
                number = None
            elif isinstance(value, int):
                number = Fraction(value)
            elif isinstance(value, float):
                number = _float_fraction(value)
            else:
                number = None
            if number is None:
                return undefined
            return DataType(_Kind.NUMERICAL, min(number, self.minimum), max(number, self.maximum))
        if self.kind is _Kind.TIME:
            if value is None:
                return DataType(_Kind.TIME, self.minimum, self.maximum)
            if isinstance(value, str):
                moment = _parse_datetime(value)
                if moment is None:
                    return DataType(_Kind.CATEGORICAL)
            elif isinstance(value, datetime):
                moment = value
            else:
                return undefined
            return DataType(_Kind.TIME, min(moment, self.minimum), max(moment, self.maximum))
        return undefined

    def update(self, value: Any) -> None:
        """Widen the data type to also cover the given value."""
        widened = self._widen(value)
        self.kind, self.minimum, self.maximum = widened.kind, widened.minimum, widened.maximum

    def __str__(self) -> str:
        if self.kind is _Kind.NUMERICAL:
            return f"numerical between {self.minimum} and {self.maximum}"
        if self.kind is _Kind.TIME:
            return f"time between {_format_datetime(self.minimum)} and {_format_datetime(self.maximum)}"
        return self.kind.value


def _attribute_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class EventLog:
    """An event log whose events are classified into activities."""

    def __init__(self, traces: Iterable[Trace], classifier: Sequence[str] = DEFAULT_CLASSIFIER) -> None:
        self.traces = list(traces)
        self.classifier = tuple(classifier)
        self.activity_key = ActivityKey()
        self._activity_traces = [
            self.read_trace_with_activity_key(self.activity_key, index) for index in range(len(self.traces))
        ]

    def _class_identity(self, event: dict[str, Any]) -> str:
        return "+".join(_attribute_text(event[key]) for key in self.classifier if key in event)

    def _labels(self, trace: Trace) -> tuple[str, ...]:
        return tuple(self._class_identity(event) for event in trace.events)

    def __len__(self) -> int:
        return len(self.traces)

    def __str__(self) -> str:
        return f"event log with {len(self.traces)} traces"

    def get_trace(self, trace_index: int) -> list[Activity] | None:
        """Return the activities of a trace, or None if there is no such trace."""
        if 0 <= trace_index < len(self._activity_traces):
            return self._activity_traces[trace_index]
        return None

    def read_trace_with_activity_key(self, activity_key: ActivityKey, trace_index: int) -> list[Activity]:
        return activity_key.process_trace(self._labels(self.traces[trace_index]))

    def trace_attributes(self) -> dict[str, DataType]:
        """Infer the data type of every trace attribute over all traces."""
        result: dict[str, DataType] = {}
        for trace in self.traces:
            for key, value in trace.attributes.items():
                if key in result:
                    result[key].update(value)
                else:
                    result[key] = DataType.init(value)
        return result

    def finite_language(self) -> set[tuple[str, ...]]:
        """The distinct traces of the log, as label sequences."""
        return {self._labels(trace) for trace in self.traces}

    def trace_counts(self) -> Counter[tuple[str, ...]]:
        """How often each label sequence occurs in the log."""
        return Counter(self._labels(trace) for trace in self.traces)

    @classmethod
    def read(cls, stream: TextIO | Any) -> EventLog:
        traces = read_xes(stream)
        if not traces:
            raise ParseError("event log has no traces")
        return cls(traces)

    @classmethod
    def parse(cls, text: str) -> EventLog:
        return cls.read(io.StringIO(text))

    def export(self, stream: TextIO) -> None:
        write_xes(self.traces, stream)

    def info(self, stream: TextIO) -> None:
        stream.write(f"Number of traces\t{len(self.traces)}\n")
        stream.write(f"Number of events\t{sum(len(trace.events) for trace in self.traces)}\n")
        stream.write(f"Number of unique traces\t{len(self.finite_language())}\n")
        stream.write(f"Number of activities\t{len(self.activity_key)}\n")
        attributes = sorted(self.trace_attributes().items())
        stream.write("Trace attributes:\n")
        stream.write("\t" + "\n\t".join(f"{key}\t{data_type}" for key, data_type in attributes) + "\n")