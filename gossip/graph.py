"""Topologies under test and the hop distances between their nodes."""

from __future__ import annotations

import json
from collections import Counter, defaultdict, deque
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Callable, Union

# Distance reported for nodes that cannot be reached from the start node.
UNREACHABLE = (1 << 64) - 1


def _optional_uint(value: Any, name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


@dataclass(frozen=True)
class NodeConfig:
    """Settings of one node; None means the default is used."""

    degree: int | None = None
    cache_size: int | None = None
    gossip_timer: int | None = None

    @classmethod
    def _from_json(cls, value: Any) -> "NodeConfig":
        # a plain integer stands for a node with default settings
        if isinstance(value, int) and not isinstance(value, bool):
            if value < 0:
                raise ValueError(f"node index must be non-negative, got {value}")
            return cls()
        if isinstance(value, dict):
            fields = {str(key).lower(): item for key, item in value.items()}
            return cls(
                degree=_optional_uint(fields.get("degree"), "degree"),
                cache_size=_optional_uint(fields.get("cache_size"), "cache_size"),
                gossip_timer=_optional_uint(fields.get("gossiptimer"), "gossip_timer"),
            )
        raise ValueError(f"a node must be an integer or an object, got {value!r}")


def _edge(value: Any) -> tuple[int, int]:
    if not isinstance(value, list) or len(value) < 2:
        raise ValueError(f"an edge must be a list of two node indices, got {value!r}")
    first = _optional_uint(value[0], "edge end")
    second = _optional_uint(value[1], "edge end")
    if first is None or second is None:
        raise ValueError(f"an edge must not contain null, got {value!r}")
    return first, second


@dataclass
class Graph:
    """Nodes of a test topology and the undirected edges between them."""

    nodes: list[NodeConfig] = field(default_factory=list)
    edges: list[tuple[int, int]] = field(default_factory=list)

    @classmethod
    def from_json(cls, path: Union[str, PathLike]) -> "Graph":
        """Read a graph from a JSON file with "nodes" and "edges" keys.

        Raises :class:`OSError` if the file cannot be read and
        :class:`ValueError` if its content is not a valid graph.
        """
        with open(path, encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise ValueError("a graph must be a JSON object")
        fields = {str(key).lower(): value for key, value in raw.items()}
        nodes = fields.get("nodes") or []
        edges = fields.get("edges") or []
        if not isinstance(nodes, list) or not isinstance(edges, list):
            raise ValueError("nodes and edges must be lists")
        return cls(
            nodes=[NodeConfig._from_json(node) for node in nodes],
            edges=[_edge(edge) for edge in edges],
        )

    def calc_distances(self, start: int) -> dict[int, int]:
        """Map every node to its hop distance from ``start``.

        Nodes without a path to ``start`` get :data:`UNREACHABLE`.
        """
        adjacency: defaultdict[int, list[int]] = defaultdict(list)
        for first, second in self.edges:
            adjacency[first].append(second)
            adjacency[second].append(first)

        distances = {start: 0}
        todo = deque([start])
        while todo:
            node = todo.popleft()
            for neighbour in adjacency.get(node, ()):
                if neighbour not in distances:
                    distances[neighbour] = distances[node] + 1
                    todo.append(neighbour)

        for index in range(len(self.nodes)):
            distances.setdefault(index, UNREACHABLE)
        return distances


@dataclass
class DistanceBook:
    """Caches the distances computed for one start node."""

    valid: bool = False
    start_node: int = 0
    node_to_dist: dict[int, int] = field(default_factory=dict)
    dist_ord: list[int] = field(default_factory=list)
    dist_max_cnt: dict[int, int] = field(default_factory=dict)

    def setup(
        self, gen_distances: Callable[[int], dict[int, int]], start_node: int
    ) -> dict[int, int]:
        """Prepare the distances for ``start_node``, recomputing only if needed.

        Returns a fresh counter mapping every known distance to zero.
        """
        if self.valid and self.start_node == start_node:
            return dict.fromkeys(self.dist_ord, 0)

        self.node_to_dist = dict(gen_distances(start_node))
        self.dist_max_cnt = dict(Counter(self.node_to_dist.values()))
        self.dist_ord = sorted(self.dist_max_cnt)
        self.valid = True
        self.start_node = start_node
        return dict.fromkeys(self.dist_ord, 0)