"""Graph store for contact relationships."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GraphNode:
    """Mirrors one contact's name and category."""

    node_id: int
    name: str
    category: str
    neighbors: set[int] = field(default_factory=set)


class GraphStore:
    """Minimal in-memory relationship chain.

    Each new node is joined to the most recently created surviving node only.
    Removing a node leaves a gap; its former neighbours are not re-joined.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, GraphNode] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._nodes)

    def link(self, name: str, category: str) -> GraphNode:
        node = GraphNode(node_id=self._next_id, name=name, category=category)
        self._next_id += 1
        if self._nodes:
            previous = next(reversed(self._nodes.values()))
            previous.neighbors.add(node.node_id)
            node.neighbors.add(previous.node_id)
        self._nodes[node.node_id] = node
        return node

    def unlink(self, name: str) -> GraphNode | None:
        """Remove the first node named ``name``; return it, or None if absent."""
        node = self._first(name)
        if node is None:
            return None
        del self._nodes[node.node_id]
        for neighbor_id in node.neighbors:
            neighbor = self._nodes.get(neighbor_id)
            if neighbor is not None:
                neighbor.neighbors.discard(node.node_id)
        return node

    def neighbors(self, name: str) -> list[str]:
        node = self._first(name)
        if node is None:
            return []
        return [self._nodes[n].name for n in sorted(node.neighbors) if n in self._nodes]

    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    def edges(self) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        for node in self._nodes.values():
            for neighbor_id in sorted(node.neighbors):
                if neighbor_id > node.node_id and neighbor_id in self._nodes:
                    pairs.append((node.name, self._nodes[neighbor_id].name))
        return pairs

    def _first(self, name: str) -> GraphNode | None:
        for node in self._nodes.values():
            if node.name == name:
                return node
        return None
