from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..marking import Marking


@dataclass(frozen=True)
class StateVertex:
    """
    A vertex of the reachability graph.

    Identity (equality and hash) depends on the marking only; the
    ``reached_from`` tag is metadata naming the transition whose firing
    produced this state (``None`` for the root).

    :param marking: Net state at this vertex.
    :type marking: Marking
    :param reached_from: Id of the transition that led here.
    :type reached_from: Optional[str]
    """

    marking: Marking
    reached_from: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.marking)
