from __future__ import annotations

import logging
import warnings
from typing import Optional, Sequence, Union

from .exceptions import EmptyHistoryError
from .history import History
from .io import NetDescription, load
from .marking import Marking
from .net import PetriNet
from .Reachability.coverability import CoverabilityChecker, Witness
from .Reachability.explorer import ExplorationResult, StateSpaceExplorer
from .Reachability.graph import ReachabilityGraph
from .Reachability.vertex import StateVertex

LOGGER = logging.getLogger(__name__)


def _warn(message: str) -> None:
    LOGGER.warning(message)
    warnings.warn(message, UserWarning, stacklevel=3)


class NetSession:
    """
    Interactive controller around one net and its reachability graph.

    Mutating operations do not save history on their own; callers invoke
    :meth:`save_state` before a change they want to be undoable.

    :param net: The live net. The session takes ownership of it.
    :type net: PetriNet
    :param covering: Covering rule passed to :class:`CoverabilityChecker`.
    :type covering: str
    :param path_strategy: Witness path strategy, ``"dfs"`` or ``"bfs"``.
    :type path_strategy: str
    :param max_states: Vertex budget for :meth:`analyze`.
    :type max_states: Optional[int]
    """

    def __init__(
        self,
        net: PetriNet,
        *,
        covering: str = "unit",
        path_strategy: str = "dfs",
        max_states: Optional[int] = None,
    ) -> None:
        self.checker = CoverabilityChecker(covering=covering, path_strategy=path_strategy)
        self.max_states = max_states
        self.net = net
        self.graph = ReachabilityGraph(net.marking())
        self.history = History()

    @classmethod
    def from_description(
        cls, description: NetDescription, *, allow_duplicate_arcs: bool = False, **options
    ) -> "NetSession":
        net = load(description, allow_duplicate_arcs=allow_duplicate_arcs)
        return cls(net, **options)

    # -------------------------
    # Firing
    # -------------------------
    def fire(self, transition_id: str) -> bool:
        """
        Fire a transition and record the step in the reachability graph.

        A disabled transition is ignored.

        :returns: ``True`` if the transition fired.
        :rtype: bool
        :raises KeyError: If the transition is unknown.
        """
        if not self.net.is_enabled(transition_id):
            LOGGER.debug("Transition %s is not enabled, ignored.", transition_id)
            return False
        before = StateVertex(self.net.marking())
        after = StateVertex(self.net.fire(transition_id), transition_id)
        self.graph.add_arc(before, after)
        return True

    def check_bounded(self) -> bool:
        """Coverability check on the graph built so far."""
        bounded = self.checker.is_bounded(self.graph)
        if not bounded:
            LOGGER.warning("The reachability graph is unbounded!")
        return bounded

    def witness(self) -> Optional[Witness]:
        return self.checker.witness(self.graph)

    # -------------------------
    # Tokens and markings
    # -------------------------
    def add_token(self, place_id: str) -> None:
        """
        Put one more token on a place. The new marking becomes the initial
        marking and the reachability graph starts over from it.
        """
        place = self.net.place(place_id)
        self.net.set_tokens(place_id, place.tokens + 1)
        self._restart_from_current()

    def remove_token(self, place_id: str) -> None:
        """
        Take one token from a place, or warn if it is empty. Either way the
        current marking becomes the initial marking and the reachability
        graph starts over from it.
        """
        place = self.net.place(place_id)
        if place.tokens > 0:
            self.net.set_tokens(place_id, place.tokens - 1)
        else:
            _warn(
                f"Cannot remove token from place {place_id} because it is already empty."
            )
        self._restart_from_current()

    def _restart_from_current(self) -> None:
        self.reset_reachability()
        self.net.mark_initial()

    def reset_to_initial(self) -> Marking:
        LOGGER.info("Resetting to initial marking: %s", self.net.initial_marking)
        return self.net.reset_to_initial()

    def reset_reachability(self) -> None:
        """Discard the graph and start a new one at the current marking."""
        self.graph = ReachabilityGraph(self.net.marking())

    def set_marking(self, marking: Union[Marking, Sequence[int]]) -> None:
        """
        :raises InvariantViolation: On length mismatch or a negative entry.
        """
        LOGGER.info("Setting marking to %s", marking)
        self.net.set_marking(marking)

    # -------------------------
    # History
    # -------------------------
    def save_state(self) -> None:
        LOGGER.debug("Saving current state: %s", self.net.marking())
        self.history.save(self.net, self.graph)

    def undo(self) -> bool:
        """
        Restore the most recently saved state.

        :returns: ``False`` (after a warning) if there was nothing to undo.
        :rtype: bool
        """
        try:
            state = self.history.undo(self.net, self.graph)
        except EmptyHistoryError as exc:
            _warn(f"Warning: {exc}")
            return False
        self.net, self.graph = state.net, state.graph
        LOGGER.debug("Undo, current state: %s", self.net.marking())
        return True

    def redo(self) -> bool:
        """
        Restore the state replaced by the last :meth:`undo`.

        :returns: ``False`` (after a warning) if there was nothing to redo.
        :rtype: bool
        """
        try:
            state = self.history.redo(self.net, self.graph)
        except EmptyHistoryError as exc:
            _warn(f"Warning: {exc}")
            return False
        self.net, self.graph = state.net, state.graph
        LOGGER.debug("Redo, current state: %s", self.net.marking())
        return True

    # -------------------------
    # Analysis
    # -------------------------
    def analyze(self) -> ExplorationResult:
        """
        Explore the full state space from the initial marking.

        The net is reset to its initial marking and the session graph is
        replaced by the explored graph. If exploration fails, the net and
        the session graph are left as they were.

        :returns: Graph, boundedness verdict and witness.
        :rtype: ExplorationResult
        :raises ExplorationLimitError: If ``max_states`` is exceeded.
        """
        work = self.net.copy()
        work.reset_to_initial()
        explorer = StateSpaceExplorer(
            work,
            ReachabilityGraph(work.marking()),
            checker=self.checker,
            max_states=self.max_states,
        )
        result = explorer.explore()
        self.net.reset_to_initial()
        self.graph = result.graph
        return result

    def __repr__(self) -> str:
        return f"NetSession({self.net!r}, {self.graph!r})"
