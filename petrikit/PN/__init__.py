"""
Public API for :mod:`petrikit.PN`.

Re-exported classes
-------------------
- :class:`~petrikit.PN.marking.Marking`
- :class:`~petrikit.PN.net.PetriNet`
- :class:`~petrikit.PN.io.NetDescription`
- :class:`~petrikit.PN.session.NetSession`
- :class:`~petrikit.PN.history.History`
- :class:`~petrikit.PN.Reachability.graph.ReachabilityGraph`
- :class:`~petrikit.PN.Reachability.explorer.StateSpaceExplorer`
"""

from __future__ import annotations
from typing import List

from .exceptions import (
    PetriNetError,
    StructuralError,
    InvariantViolation,
    EmptyHistoryError,
    SearchError,
    ExplorationLimitError,
)
from .marking import Marking
from .core import Place, Transition
from .net import PetriNet
from .io import NetDescription, PlaceSpec, TransitionSpec, ArcSpec, load, net_from_arc_table
from .history import History, Snapshot
from .Reachability import (
    StateVertex,
    ReachabilityGraph,
    CoverabilityChecker,
    Witness,
    ExplorationResult,
    StateSpaceExplorer,
)
from .session import NetSession
from .analysis import AnalysisResult, analyze, analyze_many, results_to_frame, format_report

__all__: List[str] = [
    "PetriNetError",
    "StructuralError",
    "InvariantViolation",
    "EmptyHistoryError",
    "SearchError",
    "ExplorationLimitError",
    "Marking",
    "Place",
    "Transition",
    "PetriNet",
    "NetDescription",
    "PlaceSpec",
    "TransitionSpec",
    "ArcSpec",
    "load",
    "net_from_arc_table",
    "History",
    "Snapshot",
    "StateVertex",
    "ReachabilityGraph",
    "CoverabilityChecker",
    "Witness",
    "ExplorationResult",
    "StateSpaceExplorer",
    "NetSession",
    "AnalysisResult",
    "analyze",
    "analyze_many",
    "results_to_frame",
    "format_report",
]
