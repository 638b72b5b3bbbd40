from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .exceptions import EmptyHistoryError
from .net import PetriNet
from .Reachability.graph import ReachabilityGraph

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """
    Value copy of a net together with its reachability graph.

    Use :meth:`capture` to build one; the constructor stores the objects as
    given.
    """

    net: PetriNet
    graph: ReachabilityGraph

    @classmethod
    def capture(cls, net: PetriNet, graph: ReachabilityGraph) -> "Snapshot":
        return cls(net=net.copy(), graph=graph.copy())

    def restore(self) -> "Snapshot":
        """Fresh copies of the stored pair, so the snapshot stays reusable."""
        return Snapshot.capture(self.net, self.graph)


class History:
    """
    Undo/redo stacks of :class:`Snapshot` objects.

    Every pushed or returned snapshot is a fresh copy; the live net and graph
    are never aliased by anything kept on the stacks.
    """

    def __init__(self) -> None:
        self._undo: List[Snapshot] = []
        self._redo: List[Snapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._undo)

    def save(self, net: PetriNet, graph: ReachabilityGraph) -> None:
        """
        Push a copy of the live pair onto the undo stack.

        The redo stack is left as is.
        """
        self._undo.append(Snapshot.capture(net, graph))
        LOGGER.debug("Saved state %s (%d on undo stack)", net.marking(), len(self._undo))

    def undo(self, net: PetriNet, graph: ReachabilityGraph) -> Snapshot:
        """
        Step back one state.

        :param net: Live net, copied onto the redo stack.
        :param graph: Live graph, copied onto the redo stack.
        :returns: The state to make live.
        :rtype: Snapshot
        :raises EmptyHistoryError: If there is nothing to undo.
        """
        if not self._undo:
            raise EmptyHistoryError("Nothing to undo.")
        self._redo.append(Snapshot.capture(net, graph))
        return self._undo.pop()

    def redo(self, net: PetriNet, graph: ReachabilityGraph) -> Snapshot:
        """
        Step forward one state; the mirror image of :meth:`undo`.

        :raises EmptyHistoryError: If there is nothing to redo.
        """
        if not self._redo:
            raise EmptyHistoryError("Nothing to redo.")
        self._undo.append(Snapshot.capture(net, graph))
        return self._redo.pop()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
