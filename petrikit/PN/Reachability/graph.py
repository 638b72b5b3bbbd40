from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

import networkx as nx

from ..marking import Marking
from .vertex import StateVertex

LOGGER = logging.getLogger(__name__)

VertexLike = Union[StateVertex, Marking]


def _key(v: VertexLike) -> Marking:
    return v.marking if isinstance(v, StateVertex) else v


class ReachabilityGraph:
    """
    Reachability graph of a Petri net.

    The graph is stored as a :class:`networkx.DiGraph` whose nodes are
    :class:`~petrikit.PN.marking.Marking` objects. Node attribute
    ``reached_from`` keeps the tag of the vertex as first inserted; edge
    attribute ``transition`` keeps the tag of the successor as listed in its
    predecessor's adjacency (i.e. the transition that first produced the
    arc). Node and successor order is insertion order, so every iteration
    over the graph is deterministic.

    :param initial: Root vertex (or its marking).
    :type initial: StateVertex | Marking
    """

    def __init__(self, initial: VertexLike) -> None:
        self._g = nx.DiGraph()
        self.unbounded_states: Optional[Tuple[StateVertex, StateVertex]] = None
        root = initial if isinstance(initial, StateVertex) else StateVertex(initial)
        self.add_vertex(root)
        self._initial = root

    # -------------------------
    # Construction
    # -------------------------
    @property
    def initial(self) -> StateVertex:
        return self._initial

    def set_initial(self, vertex: VertexLike) -> None:
        """Designate ``vertex`` as the root, inserting it if needed."""
        vertex = vertex if isinstance(vertex, StateVertex) else StateVertex(vertex)
        self.add_vertex(vertex)
        self._initial = vertex

    def add_vertex(self, vertex: StateVertex) -> bool:
        """
        Insert a vertex with an empty successor list. Idempotent.

        :returns: ``True`` if the vertex was new.
        :rtype: bool
        """
        key = vertex.marking
        if key in self._g:
            LOGGER.debug("Vertex %s already present, no duplicate added.", vertex)
            return False
        self._g.add_node(key, reached_from=vertex.reached_from)
        LOGGER.debug("Added vertex %s", vertex)
        return True

    def add_arc(self, source: StateVertex, target: StateVertex) -> bool:
        """
        Add the arc ``source -> target``.

        Both endpoints are inserted if missing. An arc between the same pair
        of vertices is recorded once, whatever transition produced it.

        :returns: ``True`` if the arc was new.
        :rtype: bool
        """
        self.add_vertex(source)
        self.add_vertex(target)
        if self._g.has_edge(source.marking, target.marking):
            return False
        self._g.add_edge(source.marking, target.marking, transition=target.reached_from)
        LOGGER.debug(
            "Added arc %s -> %s along transition %s", source, target, target.reached_from
        )
        return True

    # -------------------------
    # Queries
    # -------------------------
    def __contains__(self, vertex: VertexLike) -> bool:
        return _key(vertex) in self._g

    def __len__(self) -> int:
        return self._g.number_of_nodes()

    def __iter__(self) -> Iterator[StateVertex]:
        return iter(self.vertices())

    def vertex(self, marking: Marking) -> StateVertex:
        """
        The stored vertex for ``marking``, with its first-insertion tag.

        :raises KeyError: If the marking is not in the graph.
        """
        if marking not in self._g:
            raise KeyError(f"Vertex {marking} not found.")
        return StateVertex(marking, self._g.nodes[marking]["reached_from"])

    def vertices(self) -> List[StateVertex]:
        return [StateVertex(m, data["reached_from"]) for m, data in self._g.nodes(data=True)]

    def successors(self, vertex: VertexLike) -> List[StateVertex]:
        """
        Ordered successor list of ``vertex``; each successor is tagged with
        the transition labelling the arc.
        """
        key = _key(vertex)
        return [
            StateVertex(succ, self._g.edges[key, succ]["transition"])
            for succ in self._g.successors(key)
        ]

    def arcs(self) -> List[Tuple[StateVertex, StateVertex]]:
        return [
            (self.vertex(u), StateVertex(v, data["transition"]))
            for u, v, data in self._g.edges(data=True)
        ]

    @property
    def vertex_count(self) -> int:
        return self._g.number_of_nodes()

    @property
    def arc_count(self) -> int:
        return sum(len(self._g.succ[n]) for n in self._g.nodes)

    def count_string(self) -> str:
        """Vertex and arc counts as ``"V / E"``."""
        return f"{self.vertex_count} / {self.arc_count}"

    # -------------------------
    # Search
    # -------------------------
    def has_path(self, source: VertexLike, target: VertexLike) -> bool:
        """
        ``True`` if ``target`` is reachable from ``source`` along arcs.
        A vertex always reaches itself.
        """
        s, t = _key(source), _key(target)
        if s not in self._g or t not in self._g:
            return False
        return nx.has_path(self._g, s, t)

    def find_path(
        self,
        source: VertexLike,
        target: VertexLike,
        *,
        strategy: str = "dfs",
    ) -> List[StateVertex]:
        """
        Find *a* path from ``source`` to ``target``.

        With ``strategy="dfs"`` a stack-based traversal is used: vertices are
        marked when discovered and the search stops as soon as ``target`` is
        discovered, so the result is a path but not necessarily a shortest
        one. ``strategy="bfs"`` returns a shortest path.

        :param source: Start vertex.
        :param target: End vertex.
        :param strategy: ``"dfs"`` or ``"bfs"``.
        :type strategy: str
        :returns: Vertices after ``source`` up to and including ``target``,
            each tagged with the transition fired to reach it. Empty if
            ``source == target`` or no path exists.
        :rtype: List[StateVertex]
        :raises ValueError: If ``strategy`` is not ``"dfs"`` or ``"bfs"``.
        """
        if strategy not in {"dfs", "bfs"}:
            raise ValueError('strategy must be "dfs" or "bfs"')

        s, t = _key(source), _key(target)
        if s == t or s not in self._g or t not in self._g:
            return []

        if strategy == "bfs":
            try:
                nodes = nx.shortest_path(self._g, s, t)
            except nx.NetworkXNoPath:
                return []
            return [
                StateVertex(v, self._g.edges[u, v]["transition"])
                for u, v in zip(nodes, nodes[1:])
            ]

        predecessors: Dict[Marking, Marking] = {}
        stack: List[Marking] = [s]
        visited = {s}
        while stack:
            current = stack.pop()
            for neighbour in self._g.successors(current):
                if neighbour in visited:
                    continue
                predecessors[neighbour] = current
                if neighbour == t:
                    return self._unwind(predecessors, s, t)
                visited.add(neighbour)
                stack.append(neighbour)
        return []

    def _unwind(
        self, predecessors: Dict[Marking, Marking], source: Marking, target: Marking
    ) -> List[StateVertex]:
        path: List[StateVertex] = []
        at = target
        while at != source:
            prev = predecessors[at]
            path.append(StateVertex(at, self._g.edges[prev, at]["transition"]))
            at = prev
        path.reverse()
        return path

    def transition_path(
        self, source: VertexLike, target: VertexLike, *, strategy: str = "dfs"
    ) -> List[str]:
        """Transition ids along :meth:`find_path`."""
        return [v.reached_from for v in self.find_path(source, target, strategy=strategy)]

    # -------------------------
    # Copy / export
    # -------------------------
    def copy(self) -> "ReachabilityGraph":
        """Value copy; markings are immutable, the adjacency is duplicated."""
        clone = ReachabilityGraph.__new__(ReachabilityGraph)
        clone._g = self._g.copy()
        clone._initial = self._initial
        clone.unbounded_states = self.unbounded_states
        return clone

    def to_networkx(self) -> nx.DiGraph:
        """Independent copy of the underlying :class:`networkx.DiGraph`."""
        return self._g.copy()

    def __repr__(self) -> str:
        return f"ReachabilityGraph({self.count_string()})"
