"""Mapping between activity labels and compact activity identifiers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Activity:
    """An activity, identified by its index in an :class:`ActivityKey`."""

    id: int

    def __str__(self) -> str:
        return f"ac{self.id}"

    def __repr__(self) -> str:
        return f"ac{self.id}"


class ActivityKey:
    """Assigns consecutive identifiers to activity labels in order of first appearance."""

    def __init__(self) -> None:
        self.name2activity: dict[str, Activity] = {}
        self.activity2name: list[str] = []

    def __len__(self) -> int:
        return len(self.name2activity)

    def __str__(self) -> str:
        return "".join(f"ac{i}: {label}, " for i, label in enumerate(self.activity2name))

    def __repr__(self) -> str:
        return f"ActivityKey({self.activity2name!r})"

    def process_activity(self, label: str) -> Activity:
        """Return the activity of a label, registering the label if it is new."""
        activity = self.name2activity.get(label)
        if activity is None:
            activity = Activity(len(self.activity2name))
            self.activity2name.append(label)
            self.name2activity[label] = activity
        return activity

    def process_trace(self, trace: Iterable[str]) -> list[Activity]:
        return [self.process_activity(label) for label in trace]

    def get_activity_label(self, activity: Activity) -> str:
        return self.activity2name[activity.id]

    def get_activity_by_id(self, activity_id: int) -> Activity:
        return Activity(activity_id)

    def deprocess_trace(self, trace: Iterable[Activity]) -> list[str]:
        return [self.get_activity_label(activity) for activity in trace]

    def deprocess_set(self, traces: Iterable[Iterable[Activity]]) -> set[tuple[str, ...]]:
        return {tuple(self.deprocess_trace(trace)) for trace in traces}


class ActivityKeyTranslator:
    """Translates activities of one activity key into those of another."""

    def __init__(self, source: ActivityKey, target: ActivityKey) -> None:
        self._mapping = [target.process_activity(label) for label in source.activity2name]

    def translate_activity(self, activity: Activity) -> Activity:
        return self._mapping[activity.id]

    def translate_trace(self, trace: Iterable[Activity]) -> list[Activity]:
        return [self._mapping[activity.id] for activity in trace]