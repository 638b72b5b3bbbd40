"""
Boundedness analysis on a (possibly partial) reachability graph.

A net is reported unbounded as soon as the graph contains two markings
``m`` and ``m'`` such that ``m'`` covers ``m`` and ``m'`` is reachable from
``m``. Two covering rules are available:

* ``"unit"`` (default): every place differs by exactly 0 or 1 token and at
  least one place gains a token. Growth by two or more tokens in a single
  place is *not* recognised by this rule.
* ``"general"``: ``m' >= m`` element-wise and ``m' != m``.

The witness consists of the pair ``(m, m')`` and a firing sequence from the
initial vertex to ``m'``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..marking import Marking
from .graph import ReachabilityGraph
from .vertex import StateVertex

LOGGER = logging.getLogger(__name__)

_COVERING_RULES = {"unit", "general"}
_PATH_STRATEGIES = {"dfs", "bfs"}


@dataclass(frozen=True)
class Witness:
    """
    Proof of unboundedness.

    :param m: The smaller marking.
    :type m: StateVertex
    :param m_prime: The covering marking, reachable from ``m``.
    :type m_prime: StateVertex
    :param path: Transition ids fired from the initial vertex to ``m_prime``.
    :type path: Tuple[str, ...]
    """

    m: StateVertex
    m_prime: StateVertex
    path: Tuple[str, ...] = ()

    @property
    def path_length(self) -> int:
        return len(self.path)

    def format_path(self) -> str:
        """Path as ``"<length>:(t1,t2,...);"``."""
        return f"{self.path_length}:({','.join(self.path)});"

    def __str__(self) -> str:
        return f"{self.format_path()} m={self.m}, m'={self.m_prime}"


class CoverabilityChecker:
    """
    Pairwise covering scan over a reachability graph.

    :param covering: Covering rule, ``"unit"`` or ``"general"``.
    :type covering: str
    :param path_strategy: Strategy used to reconstruct the witness path,
        ``"dfs"`` (a path) or ``"bfs"`` (a shortest path).
    :type path_strategy: str
    :raises ValueError: On an unknown option value.
    """

    def __init__(self, *, covering: str = "unit", path_strategy: str = "dfs") -> None:
        if covering not in _COVERING_RULES:
            raise ValueError('covering must be "unit" or "general"')
        if path_strategy not in _PATH_STRATEGIES:
            raise ValueError('path_strategy must be "dfs" or "bfs"')
        self.covering = covering
        self.path_strategy = path_strategy

    # -------------------------
    # Domination
    # -------------------------
    @staticmethod
    def dominates_unit(a: Marking, b: Marking) -> bool:
        """``b - a`` is in ``{0, 1}`` everywhere and ``1`` somewhere."""
        if len(a) != len(b):
            return False
        bigger = False
        for d in a.difference(b):
            if d == 1:
                bigger = True
            elif d != 0:
                return False
        return bigger

    @staticmethod
    def dominates_general(a: Marking, b: Marking) -> bool:
        """``b >= a`` everywhere and ``b != a``."""
        if len(a) != len(b):
            return False
        diff = a.difference(b)
        return all(d >= 0 for d in diff) and any(d > 0 for d in diff)

    def dominates(self, a: Marking, b: Marking) -> bool:
        """
        ``True`` if ``b`` covers ``a`` under the configured rule.

        :param a: Candidate ``m``.
        :param b: Candidate ``m'``.
        """
        if self.covering == "unit":
            return self.dominates_unit(a, b)
        return self.dominates_general(a, b)

    # -------------------------
    # Scan
    # -------------------------
    def find_covering_pair(
        self, graph: ReachabilityGraph
    ) -> Optional[Tuple[StateVertex, StateVertex]]:
        """
        First pair ``(v1, v2)`` in graph insertion order such that ``v2``
        covers ``v1`` and ``v2`` is reachable from ``v1``.
        """
        vertices = graph.vertices()
        for v1 in vertices:
            for v2 in vertices:
                if not self.dominates(v1.marking, v2.marking):
                    continue
                LOGGER.debug("Covering candidates: %s & %s", v1, v2)
                if graph.has_path(v1, v2):
                    LOGGER.debug("Path found between %s and %s", v1, v2)
                    return v1, v2
        return None

    def is_bounded(self, graph: ReachabilityGraph) -> bool:
        """
        Check the graph explored so far for a covering pair.

        On ``False`` the pair is stored in ``graph.unbounded_states``. A
        ``True`` answer is conclusive only for a fully explored graph.

        :param graph: Reachability graph (complete or partial).
        :type graph: ReachabilityGraph
        :returns: ``False`` if an unbounded witness pair exists.
        :rtype: bool
        """
        pair = self.find_covering_pair(graph)
        if pair is None:
            LOGGER.debug("Graph bounded so far (%s)", graph.count_string())
            return True
        graph.unbounded_states = pair
        LOGGER.debug("Graph unbounded, m=%s, m'=%s", pair[0], pair[1])
        return False

    def witness(self, graph: ReachabilityGraph) -> Optional[Witness]:
        """
        Build the witness for the pair recorded by :meth:`is_bounded`.

        :returns: ``None`` if the graph has no recorded pair.
        :rtype: Optional[Witness]
        """
        if graph.unbounded_states is None:
            return None
        m, m_prime = graph.unbounded_states
        path = graph.transition_path(graph.initial, m_prime, strategy=self.path_strategy)
        return Witness(m=m, m_prime=m_prime, path=tuple(path))

    def __repr__(self) -> str:
        return (
            f"CoverabilityChecker(covering={self.covering!r}, "
            f"path_strategy={self.path_strategy!r})"
        )
