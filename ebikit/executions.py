"""Recorded transition executions, stored as JSON."""

from __future__ import annotations

import io
import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TextIO

from ebikit.formats import ParseError


def _index(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"field `{name}`: expected a non-negative integer, found {value!r}")
    return value


def _index_list(value: Any, name: str) -> list[int] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ParseError(f"field `{name}`: expected a list, found {value!r}")
    return [_index(item, name) for item in value]


def _time(value: Any, name: str) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(f"field `{name}`: expected a date-time string, found {value!r}")
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as error:
        raise ParseError(f"field `{name}`: {error}") from error
    if moment.tzinfo is None:
        raise ParseError(f"field `{name}`: date-time `{value}` has no offset")
    return moment


def _dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


@dataclass
class Execution:
    """One execution of a transition, with optional context at its enablement."""

    transition: int
    enabled_transitions_at_enablement: list[int] | None = None
    time_of_enablement: datetime | None = None
    time_of_execution: datetime | None = None
    features_at_enablement: list[int] | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "transition": self.transition,
            "enabled_transitions_at_enablement": self.enabled_transitions_at_enablement,
            "time_of_enablement": self.time_of_enablement.isoformat() if self.time_of_enablement else None,
            "time_of_execution": self.time_of_execution.isoformat() if self.time_of_execution else None,
            "features_at_enablement": self.features_at_enablement,
        }

    @classmethod
    def from_json(cls, data: Any) -> Execution:
        if not isinstance(data, dict):
            raise ParseError(f"expected an execution object, found {data!r}")
        if "transition" not in data:
            raise ParseError("missing field `transition`")
        return cls(
            transition=_index(data["transition"], "transition"),
            enabled_transitions_at_enablement=_index_list(
                data.get("enabled_transitions_at_enablement"), "enabled_transitions_at_enablement"
            ),
            time_of_enablement=_time(data.get("time_of_enablement"), "time_of_enablement"),
            time_of_execution=_time(data.get("time_of_execution"), "time_of_execution"),
            features_at_enablement=_index_list(data.get("features_at_enablement"), "features_at_enablement"),
        )

    def __str__(self) -> str:
        return _dumps(self.to_json())


class Executions:
    """A list of executions."""

    def __init__(self, executions: Iterable[Execution] = ()) -> None:
        self.executions = list(executions)

    def __len__(self) -> int:
        return len(self.executions)

    def __iter__(self) -> Iterator[Execution]:
        return iter(self.executions)

    def __getitem__(self, index: int) -> Execution:
        return self.executions[index]

    def __str__(self) -> str:
        return _dumps({"executions": [execution.to_json() for execution in self.executions]})

    @classmethod
    def read(cls, stream: TextIO | Any) -> Executions:
        try:
            data = json.load(stream)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise ParseError(f"invalid JSON: {error}") from error
        if not isinstance(data, dict) or "executions" not in data:
            raise ParseError("missing field `executions`")
        items = data["executions"]
        if not isinstance(items, list):
            raise ParseError("field `executions` is not a list")
        return cls(Execution.from_json(item) for item in items)

    @classmethod
    def parse(cls, text: str) -> Executions:
        return cls.read(io.StringIO(text))

    def export(self, stream: TextIO) -> None:
        stream.write(str(self))

    def info(self, stream: TextIO) -> None:
        stream.write(f"Number of executions\t\t{len(self.executions)}\n")