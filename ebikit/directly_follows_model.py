"""Directly follows models in a line-based text format."""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import TextIO

from ebikit.activity_key import Activity, ActivityKey
from ebikit.dottable import DotGraph
from ebikit.formats import LineReader, ParseError

HEADER = "directly follows model"


def _parse_node(text: str, count: int, what: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ParseError(f"{what}: expected a non-negative integer, found `{text}`")
    node = int(text)
    if node >= count:
        raise ParseError(f"{what}: node {node} does not exist")
    return node


class DirectlyFollowsModel:
    """Nodes labelled with activities, directly-follows edges, and start and end nodes."""

    def __init__(
        self,
        empty_traces: bool,
        edges: list[list[bool]],
        activity_key: ActivityKey,
        node_activities: list[Activity],
        start_nodes: Iterable[int],
        end_nodes: Iterable[int],
    ) -> None:
        self.empty_traces = empty_traces
        self.edges = edges
        self.activity_key = activity_key
        self.node_activities = node_activities
        self.start_nodes = set(start_nodes)
        self.end_nodes = set(end_nodes)

    def number_of_edges(self) -> int:
        return sum(sum(1 for edge in row if edge) for row in self.edges)

    def number_of_nodes(self) -> int:
        return len(self.node_activities)

    def _edge_pairs(self) -> list[tuple[int, int]]:
        return [
            (source, target)
            for source, row in enumerate(self.edges)
            for target, edge in enumerate(row)
            if edge
        ]

    @classmethod
    def read(cls, stream: Iterable[str | bytes]) -> DirectlyFollowsModel:
        reader = LineReader(stream)

        try:
            head = reader.next_line_string()
        except ParseError as error:
            raise ParseError(f"failed to read header, which should be {HEADER}: {error}") from error
        if head != HEADER:
            raise ParseError(f"first line should be exactly `{HEADER}`, but found `{reader.last_line}`")

        try:
            empty_traces = reader.next_line_bool()
        except ParseError as error:
            raise ParseError(f"could not read whether the model supports empty traces: {error}") from error

        try:
            number_of_activities = reader.next_line_index()
        except ParseError as error:
            raise ParseError(f"could not read the number of activities: {error}") from error
        activity_key = ActivityKey()
        node_activities = []
        for i in range(number_of_activities):
            try:
                label = reader.next_line_string()
            except ParseError as error:
                raise ParseError(f"could not read activity {i}: {error}") from error
            node_activities.append(activity_key.process_activity(label))

        def read_nodes(kind: str) -> set[int]:
            try:
                count = reader.next_line_index()
            except ParseError as error:
                raise ParseError(f"could not read the number of {kind} activities: {error}") from error
            nodes = set()
            for i in range(count):
                try:
                    node = reader.next_line_index()
                except ParseError as error:
                    raise ParseError(f"could not read {kind} activity {i}: {error}") from error
                if node >= number_of_activities:
                    raise ParseError(f"{kind} activity {i}: node {node} does not exist")
                nodes.add(node)
            return nodes

        start_nodes = read_nodes("start")
        end_nodes = read_nodes("end")

        edges = [[False] * number_of_activities for _ in range(number_of_activities)]
        try:
            number_of_edges = reader.next_line_index()
        except ParseError as error:
            raise ParseError(f"could not read number of edges: {error}") from error
        for e in range(number_of_edges):
            try:
                line = reader.next_line_string()
            except ParseError as error:
                raise ParseError(f"could not read edge {e}: {error}") from error
            parts = line.split(">")
            if len(parts) < 2:
                raise ParseError(f"could not read target of edge {e}")
            source = _parse_node(parts[0], number_of_activities, f"source of edge {e}")
            target = _parse_node(parts[1], number_of_activities, f"target of edge {e}")
            edges[source][target] = True

        return cls(empty_traces, edges, activity_key, node_activities, start_nodes, end_nodes)

    @classmethod
    def parse(cls, text: str) -> DirectlyFollowsModel:
        return cls.read(io.StringIO(text))

    def __str__(self) -> str:
        lines = [HEADER, "# empty trace", "true" if self.empty_traces else "false"]

        lines.append("# number of activites")
        lines.append(str(len(self.node_activities)))
        for a, activity in enumerate(self.node_activities):
            lines.append(f"#activity {a}")
            lines.append(self.activity_key.get_activity_label(activity))

        lines.append("# number of start activites")
        lines.append(str(len(self.start_nodes)))
        for i, node in enumerate(sorted(self.start_nodes)):
            lines.append(f"# start activity {i}")
            lines.append(str(node))

        lines.append("# number of end activites")
        lines.append(str(len(self.end_nodes)))
        for i, node in enumerate(sorted(self.end_nodes)):
            lines.append(f"# end activity {i}")
            lines.append(str(node))

        lines.append("# number of edges")
        lines.append(str(self.number_of_edges()))
        lines.append("# edges")
        lines.extend(f"{source}>{target}" for source, target in self._edge_pairs())
        return "\n".join(lines) + "\n"

    def export(self, stream: TextIO) -> None:
        stream.write(str(self))

    def info(self, stream: TextIO) -> None:
        stream.write(f"Number of transitions\t{len(self.node_activities)}\n")
        stream.write(f"Number of activities\t{len(self.activity_key.activity2name)}\n")
        stream.write(f"Number of edges\t\t{self.number_of_edges()}\n")

    def to_dot(self) -> DotGraph:
        graph = DotGraph()
        source = graph.add_place("")
        sink = graph.add_place("")

        if self.empty_traces:
            graph.add_edge(source, sink, "")

        nodes = [
            graph.add_transition(self.activity_key.get_activity_label(activity), "")
            for activity in self.node_activities
        ]
        for node in sorted(self.start_nodes):
            graph.add_edge(source, nodes[node], "")
        for node in sorted(self.end_nodes):
            graph.add_edge(nodes[node], sink, "")
        for from_node, to_node in self._edge_pairs():
            graph.add_edge(nodes[from_node], nodes[to_node], "")
        return graph