"""A small graph builder that renders to Graphviz DOT text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DotNode:
    shape: str
    label: str
    fill_color: str | None = None


@dataclass(frozen=True)
class DotEdge:
    source: int
    target: int
    label: str


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class DotGraph:
    """A left-to-right graph of places, transitions and labelled edges."""

    def __init__(self) -> None:
        self.nodes: list[DotNode] = []
        self.edges: list[DotEdge] = []

    def _add(self, node: DotNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def add_place(self, label: str) -> int:
        return self._add(DotNode("circle", label))

    def add_transition(self, label: str, xlabel: str) -> int:
        return self._add(DotNode("box", f"{label}\n{xlabel}"))

    def add_silent_transition(self, xlabel: str) -> int:
        return self._add(DotNode("box", xlabel, "grey"))

    def add_edge(self, source: int, target: int, label: str) -> None:
        for handle in (source, target):
            if not 0 <= handle < len(self.nodes):
                raise ValueError(f"unknown node {handle}")
        self.edges.append(DotEdge(source, target, label))

    def to_dot(self) -> str:
        lines = ["digraph {", "    rankdir=LR;"]
        for index, node in enumerate(self.nodes):
            attributes = f'shape={node.shape}, label="{_escape(node.label)}"'
            if node.fill_color is not None:
                attributes += f", style=filled, fillcolor={node.fill_color}"
            lines.append(f"    n{index} [{attributes}];")
        for edge in self.edges:
            lines.append(f'    n{edge.source} -> n{edge.target} [label="{_escape(edge.label)}"];')
        lines.append("}")
        return "\n".join(lines) + "\n"