from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class Place:
    """
    A single place of a Petri net.

    :param name: Display name (irrelevant to the analysis).
    :type name: str
    :param tokens: Current number of tokens, never negative.
    :type tokens: int
    :param position: Optional layout coordinates carried through from the
        net description. Not used by the analysis.
    :type position: Optional[Tuple[int, int]]
    """

    name: str = "unnamed"
    tokens: int = 0
    position: Optional[Tuple[int, int]] = None

    def copy(self) -> "Place":
        return Place(name=self.name, tokens=self.tokens, position=self.position)


@dataclass
class Transition:
    """
    A single transition of a Petri net.

    Pre- and post-sets map arc identifiers to place identifiers, one entry
    per arc. Places are referenced by id only, so a transition never holds a
    handle on a mutable :class:`Place`.

    :param name: Display name.
    :type name: str
    :param pre: Mapping arc id -> input place id.
    :type pre: Dict[str, str]
    :param post: Mapping arc id -> output place id.
    :type post: Dict[str, str]
    :param position: Optional layout coordinates.
    :type position: Optional[Tuple[int, int]]
    """

    name: str = "unnamed"
    pre: Dict[str, str] = field(default_factory=dict)
    post: Dict[str, str] = field(default_factory=dict)
    position: Optional[Tuple[int, int]] = None

    @property
    def input_places(self) -> List[str]:
        return list(self.pre.values())

    @property
    def output_places(self) -> List[str]:
        return list(self.post.values())

    def copy(self) -> "Transition":
        return Transition(
            name=self.name,
            pre=dict(self.pre),
            post=dict(self.post),
            position=self.position,
        )
