"""
Functional entry points.

Typical usage::

    from petrikit.PN import api
    from petrikit.PN.io import NetDescription

    desc = NetDescription.from_mapping({
        "places": [{"id": "p1", "tokens": 0}],
        "transitions": ["t1"],
        "arcs": [("a1", "t1", "p1")],
    })
    net = api.load(desc)
    result = api.explore(net)
    print(result.bounded, result.witness)
"""

from __future__ import annotations

from typing import Optional, Tuple

from .history import Snapshot
from .io import NetDescription
from .io import load as _load
from .marking import Marking
from .net import PetriNet
from .Reachability.coverability import CoverabilityChecker
from .Reachability.explorer import ExplorationResult, StateSpaceExplorer
from .Reachability.graph import ReachabilityGraph


def load(description: NetDescription, *, allow_duplicate_arcs: bool = False) -> PetriNet:
    """
    :raises StructuralError: If the description is not a valid net.
    """
    return _load(description, allow_duplicate_arcs=allow_duplicate_arcs)


def fire(net: PetriNet, transition_id: str) -> Marking:
    """
    :raises InvariantViolation: If the transition is not enabled.
    """
    return net.fire(transition_id)


def enabled(net: PetriNet, transition_id: str) -> bool:
    return net.is_enabled(transition_id)


def explore(
    net: PetriNet,
    *,
    covering: str = "unit",
    path_strategy: str = "dfs",
    max_states: Optional[int] = None,
) -> ExplorationResult:
    """
    Build the reachability graph of ``net`` from its current marking.

    Exploration runs on a copy, so ``net`` is left untouched.

    :param net: Net to explore.
    :type net: PetriNet
    :param covering: ``"unit"`` or ``"general"``.
    :param path_strategy: ``"dfs"`` or ``"bfs"``.
    :param max_states: Optional vertex budget.
    :returns: Graph, boundedness verdict and witness.
    :rtype: ExplorationResult
    :raises ExplorationLimitError: If ``max_states`` is exceeded.
    """
    checker = CoverabilityChecker(covering=covering, path_strategy=path_strategy)
    explorer = StateSpaceExplorer(net.copy(), checker=checker, max_states=max_states)
    return explorer.explore()


def snapshot(net: PetriNet, graph: ReachabilityGraph) -> Snapshot:
    return Snapshot.capture(net, graph)


def restore(state: Snapshot) -> Tuple[PetriNet, ReachabilityGraph]:
    """Independent copies of the pair stored in ``state``."""
    fresh = state.restore()
    return fresh.net, fresh.graph
