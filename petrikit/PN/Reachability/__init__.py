from .vertex import StateVertex
from .graph import ReachabilityGraph
from .coverability import CoverabilityChecker, Witness
from .explorer import ExplorationResult, StateSpaceExplorer

__all__ = [
    "StateVertex",
    "ReachabilityGraph",
    "CoverabilityChecker",
    "Witness",
    "ExplorationResult",
    "StateSpaceExplorer",
]
