"""Deterministic finite automata over activities, stored as JSON."""

from __future__ import annotations

import io
import json
from bisect import bisect_left
from typing import Any, TextIO

from ebikit.activity_key import Activity, ActivityKey
from ebikit.dottable import DotGraph
from ebikit.formats import ParseError


def _number(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"{what}: expected a non-negative integer, found {value!r}")
    return value


def _field(data: Any, name: str, what: str) -> Any:
    if not isinstance(data, dict) or name not in data:
        raise ParseError(f"{what}: field `{name}` not found")
    return data[name]


def _field_number(data: Any, name: str, what: str) -> int:
    return _number(_field(data, name, what), what)


def _field_list(data: Any, name: str, what: str) -> list:
    value = _field(data, name, what)
    if not isinstance(value, list):
        raise ParseError(f"{what}: field `{name}` is not a list")
    return value


def _field_string(data: Any, name: str, what: str) -> str:
    value = _field(data, name, what)
    if not isinstance(value, str):
        raise ParseError(f"{what}: field `{name}` is not a string")
    return value


class DeterministicFiniteAutomaton:
    """An automaton whose transitions are kept sorted by (source, activity)."""

    def __init__(self) -> None:
        self.activity_key = ActivityKey()
        self.initial_state = 0
        self.max_state = 0
        self.sources: list[int] = []
        self.targets: list[int] = []
        self.activities: list[Activity] = []
        self.final_states: list[bool] = [False]

    def _ensure_states(self, new_max_state: int) -> None:
        while new_max_state > self.max_state:
            self.max_state += 1
            self.final_states.append(False)

    def _search(self, source: int, activity: Activity) -> tuple[bool, int]:
        index = bisect_left(
            range(len(self.sources)),
            (source, activity.id),
            key=lambda i: (self.sources[i], self.activities[i].id),
        )
        found = (
            index < len(self.sources)
            and self.sources[index] == source
            and self.activities[index] == activity
        )
        return found, index

    def _insert(self, index: int, source: int, activity: Activity, target: int) -> None:
        self.sources.insert(index, source)
        self.targets.insert(index, target)
        self.activities.insert(index, activity)

    def set_initial_state(self, state: int) -> None:
        self._ensure_states(state)
        self.initial_state = state

    def add_transition(self, source: int, activity: Activity, target: int) -> None:
        """Add a transition; raises ValueError if it would break determinism."""
        self._ensure_states(max(source, target))
        found, index = self._search(source, activity)
        if found:
            raise ValueError("tried to insert an edge that would violate the determinism of the automaton")
        self._insert(index, source, activity, target)

    def take_or_add_transition(self, source: int, activity: Activity) -> int:
        """Return the target of the transition, adding it to a new state if absent."""
        found, index = self._search(source, activity)
        if found:
            return self.targets[index]
        target = self.add_state()
        self._insert(index, source, activity, target)
        return target

    def can_terminate_in_state(self, state: int) -> bool:
        return self.final_states[state]

    def set_final_state(self, state: int, is_final: bool) -> None:
        self.final_states[state] = is_final

    def add_state(self) -> int:
        self.max_state += 1
        self.final_states.append(False)
        return self.max_state

    @classmethod
    def read(cls, stream: TextIO) -> DeterministicFiniteAutomaton:
        try:
            data = json.load(stream)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise ParseError(f"invalid JSON: {error}") from error

        result = cls()
        result.set_initial_state(_field_number(data, "initialState", "failed to read initial state"))

        for jtransition in _field_list(data, "transitions", "failed to read list of transitions"):
            source = _field_number(jtransition, "from", "could not read from")
            target = _field_number(jtransition, "to", "could not read to")
            label = _field_string(jtransition, "label", "could not read label")
            activity = result.activity_key.process_activity(label)
            try:
                result.add_transition(source, activity, target)
            except ValueError as error:
                raise ParseError(str(error)) from error

        for jfinal in _field_list(data, "finalStates", "failed to read list of final states"):
            state = _number(jfinal, "could not read final state")
            result._ensure_states(state)
            result.final_states[state] = True

        return result

    @classmethod
    def parse(cls, text: str) -> DeterministicFiniteAutomaton:
        return cls.read(io.StringIO(text))

    def __str__(self) -> str:
        parts = ["{\n", f'"initialState": {self.initial_state},\n', '"transitions": [\n']
        rows = [
            f'{{"from":{source},"to":{target},"label":'
            f"{json.dumps(self.activity_key.get_activity_label(activity), ensure_ascii=False)}}}"
            for source, target, activity in zip(self.sources, self.targets, self.activities)
        ]
        if rows:
            parts.append(",\n".join(rows) + "\n")
        parts.append('], "finalStates": [\n')
        parts.append(",".join(str(state) for state, final in enumerate(self.final_states) if final) + "\n")
        parts.append("]}\n")
        return "".join(parts)

    def export(self, stream: TextIO) -> None:
        stream.write(str(self))

    def info(self, stream: TextIO) -> None:
        stream.write(f"Number of states\t{self.max_state}\n")
        stream.write(f"Number of transitions\t{len(self.sources)}\n")
        stream.write(f"Number of activities\t{len(self.activity_key)}\n")

    def to_dot(self) -> DotGraph:
        graph = DotGraph()
        nodes = [
            graph.add_transition(str(state), "") if self.can_terminate_in_state(state) else graph.add_place(str(state))
            for state in range(self.max_state + 1)
        ]
        for source, target, activity in zip(self.sources, self.targets, self.activities):
            graph.add_edge(nodes[source], nodes[target], self.activity_key.get_activity_label(activity))
        return graph