from __future__ import annotations


class PetriNetError(RuntimeError):
    """Base class for all Petri net specific errors."""


class StructuralError(PetriNetError):
    """Raised when a net description is malformed (unknown ids, collisions, bad arcs)."""


class InvariantViolation(PetriNetError):
    """Raised when an operation would corrupt the net state (e.g. firing a disabled transition)."""


class EmptyHistoryError(PetriNetError):
    """Raised when undo/redo is requested but the corresponding stack is empty."""


class SearchError(PetriNetError):
    """Raised for search/exploration issues (invalid arguments, overflow, etc.)."""


class ExplorationLimitError(SearchError):
    """Raised when the state-space exploration exceeds its configured state budget."""
