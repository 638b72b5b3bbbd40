from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ..exceptions import ExplorationLimitError
from ..marking import Marking
from ..net import PetriNet
from .coverability import CoverabilityChecker, Witness
from .graph import ReachabilityGraph
from .vertex import StateVertex

LOGGER = logging.getLogger(__name__)

WorkItem = Tuple[Marking, str]


@dataclass
class ExplorationResult:
    """
    Outcome of a state-space exploration.

    :param graph: The (possibly partial) reachability graph.
    :type graph: ReachabilityGraph
    :param bounded: ``False`` if a covering pair was found.
    :type bounded: bool
    :param witness: Unboundedness witness, ``None`` when bounded.
    :type witness: Optional[Witness]
    :param fired: Number of firings performed during the traversal.
    :type fired: int
    """

    graph: ReachabilityGraph
    bounded: bool
    witness: Optional[Witness] = None
    fired: int = 0


class StateSpaceExplorer:
    """
    Depth-first construction of the reachability graph with an early stop on
    unboundedness.

    The traversal works on ``(marking, transition id)`` pairs: each pair is
    pushed at most once, and popping it sets the net to the marking and fires
    the transition. The coverability check runs after every firing, so an
    unbounded net terminates as soon as the explored part of its graph
    contains a covering pair.

    :param net: Net to explore. Its marking is modified during the run.
    :type net: PetriNet
    :param graph: Graph to extend; a fresh one rooted at the current marking
        is created if omitted.
    :type graph: Optional[ReachabilityGraph]
    :param checker: Coverability checker, default ``CoverabilityChecker()``.
    :type checker: Optional[CoverabilityChecker]
    :param max_states: Optional upper bound on the number of vertices.
    :type max_states: Optional[int]
    :param restore_marking: Put the net back into its starting marking when
        the run ends.
    :type restore_marking: bool
    :raises ValueError: If ``max_states`` is not positive.
    """

    def __init__(
        self,
        net: PetriNet,
        graph: Optional[ReachabilityGraph] = None,
        *,
        checker: Optional[CoverabilityChecker] = None,
        max_states: Optional[int] = None,
        restore_marking: bool = True,
    ) -> None:
        if max_states is not None and max_states < 1:
            raise ValueError("max_states must be a positive integer")
        self.net = net
        self.graph = graph if graph is not None else ReachabilityGraph(net.marking())
        self.checker = checker if checker is not None else CoverabilityChecker()
        self.max_states = max_states
        self.restore_marking = restore_marking

    # -------------------------
    # Work stack
    # -------------------------
    def _push_enabled(
        self, marking: Marking, stack: List[WorkItem], visited: Set[WorkItem]
    ) -> None:
        for tid in self.net.enabled_transitions():
            item = (marking, tid)
            if item in visited:
                continue
            visited.add(item)
            stack.append(item)
            LOGGER.debug("Pushed %s with transition %s", marking, tid)

    def _check_limit(self) -> None:
        if self.max_states is not None and self.graph.vertex_count > self.max_states:
            raise ExplorationLimitError(
                f"Exploration exceeded max_states={self.max_states} "
                f"({self.graph.count_string()})."
            )

    # -------------------------
    # Traversal
    # -------------------------
    def explore(self) -> ExplorationResult:
        """
        Run the traversal.

        :returns: Graph, boundedness verdict and witness.
        :rtype: ExplorationResult
        :raises ExplorationLimitError: If the graph grows past ``max_states``.
        """
        start = self.net.marking()
        stack: List[WorkItem] = []
        visited: Set[WorkItem] = set()
        fired = 0
        bounded = True

        try:
            self._push_enabled(start, stack, visited)
            while stack:
                before, tid = stack.pop()
                LOGGER.debug("Popped %s with transition %s", before, tid)
                self.net.apply(before)
                after = self.net.fire(tid)
                fired += 1
                self.graph.add_arc(StateVertex(before), StateVertex(after, tid))
                if not self.checker.is_bounded(self.graph):
                    bounded = False
                    break
                self._check_limit()
                self._push_enabled(after, stack, visited)
        finally:
            if self.restore_marking:
                self.net.apply(start)

        witness = None if bounded else self.checker.witness(self.graph)
        LOGGER.info(
            "Explored %s after %d firings, bounded=%s", self.graph.count_string(), fired, bounded
        )
        return ExplorationResult(graph=self.graph, bounded=bounded, witness=witness, fired=fired)
