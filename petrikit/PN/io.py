from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .net import PetriNet

LOGGER = logging.getLogger(__name__)


@dataclass
class PlaceSpec:
    id: str
    tokens: int = 0
    name: str = "unnamed"
    position: Optional[Tuple[int, int]] = None


@dataclass
class TransitionSpec:
    id: str
    name: str = "unnamed"
    position: Optional[Tuple[int, int]] = None


@dataclass
class ArcSpec:
    id: str
    source: str
    target: str


@dataclass
class NetDescription:
    """
    Parsed form of a net document, as handed over by a reader.

    Element order matters: the first place listed becomes the initial place.

    :param name: Document name (e.g. the file name), used in reports.
    :type name: str
    :param places: Places in document order.
    :type places: List[PlaceSpec]
    :param transitions: Transitions in document order.
    :type transitions: List[TransitionSpec]
    :param arcs: Arcs in document order.
    :type arcs: List[ArcSpec]
    """

    name: str = "unnamed"
    places: List[PlaceSpec] = field(default_factory=list)
    transitions: List[TransitionSpec] = field(default_factory=list)
    arcs: List[ArcSpec] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NetDescription":
        """
        Build a description from plain containers.

        Places and transitions may be given as ids or as dictionaries with
        the :class:`PlaceSpec` / :class:`TransitionSpec` fields; arcs as
        ``(id, source, target)`` triples or dictionaries.

        Example::

            NetDescription.from_mapping({
                "name": "producer",
                "places": [{"id": "p1", "tokens": 0}],
                "transitions": ["t1"],
                "arcs": [("a1", "t1", "p1")],
            })

        :raises ValueError: If an entry has an unsupported shape.
        """
        places = [_spec(PlaceSpec, p) for p in data.get("places", [])]
        transitions = [_spec(TransitionSpec, t) for t in data.get("transitions", [])]
        arcs: List[ArcSpec] = []
        for a in data.get("arcs", []):
            if isinstance(a, Mapping):
                arcs.append(ArcSpec(id=str(a["id"]), source=str(a["source"]), target=str(a["target"])))
            elif isinstance(a, (tuple, list)) and len(a) == 3:
                arcs.append(ArcSpec(id=str(a[0]), source=str(a[1]), target=str(a[2])))
            else:
                raise ValueError(f"Unsupported arc entry: {a!r}")
        return cls(
            name=str(data.get("name", "unnamed")),
            places=places,
            transitions=transitions,
            arcs=arcs,
        )


def _spec(kind, entry):
    if isinstance(entry, str):
        return kind(id=entry)
    if isinstance(entry, Mapping):
        values = dict(entry)
        values["id"] = str(values["id"])
        if values.get("position") is not None:
            values["position"] = tuple(values["position"])
        return kind(**values)
    raise ValueError(f"Unsupported {kind.__name__} entry: {entry!r}")


def load(description: NetDescription, *, allow_duplicate_arcs: bool = False) -> PetriNet:
    """
    Build a :class:`PetriNet` from a description and record its initial
    marking.

    :param description: Parsed net document.
    :type description: NetDescription
    :param allow_duplicate_arcs: Honour repeated place/transition arcs as
        multiplicity instead of rejecting them.
    :type allow_duplicate_arcs: bool
    :returns: The loaded net.
    :rtype: PetriNet
    :raises StructuralError: On any structural defect of the description.
    """
    net = PetriNet(allow_duplicate_arcs=allow_duplicate_arcs)
    for p in description.places:
        net.add_place(p.id, p.tokens, name=p.name)
        if p.position is not None:
            net.set_position(p.id, p.position)
    for t in description.transitions:
        net.add_transition(t.id, name=t.name)
        if t.position is not None:
            net.set_position(t.id, t.position)
    for a in description.arcs:
        net.add_arc(a.id, a.source, a.target)
    net.mark_initial()
    LOGGER.info("Loaded net %s\n%s", description.name, net.describe())
    return net


def net_from_arc_table(
    df: pd.DataFrame,
    tokens: Optional[Dict[str, int]] = None,
    *,
    places: Optional[Iterable[str]] = None,
    name: str = "unnamed",
) -> NetDescription:
    """
    Build a :class:`NetDescription` from a pandas table of arcs.

    Expected columns:

    * ``source`` – id of the arc's source node
    * ``target`` – id of the arc's target node
    * ``id`` – optional arc id, default ``"a<row number>"``

    A node is a place if it is listed in ``places`` or is a key of
    ``tokens``; every other node is a transition. Nodes are listed in
    order of first appearance, so the first place met in the table is the
    initial place.

    :param df: Arc table.
    :type df: pandas.DataFrame
    :param tokens: Initial token count per place (missing places hold 0).
    :type tokens: Optional[Dict[str, int]]
    :param places: Additional place ids without tokens.
    :type places: Optional[Iterable[str]]
    :param name: Name of the resulting description.
    :type name: str
    :returns: Net description ready for :func:`load`.
    :rtype: NetDescription
    :raises ValueError: If a required column is missing or no place is given.
    """
    if "source" not in df.columns or "target" not in df.columns:
        raise ValueError("DataFrame must contain 'source' and 'target' columns.")

    tokens = dict(tokens or {})
    declared = list(places or ()) + list(tokens)
    place_ids = set(declared)
    if not place_ids:
        raise ValueError("At least one place must be named via 'tokens' or 'places'.")

    seen: Dict[str, None] = {}
    arcs: List[ArcSpec] = []
    for i, (_, row) in enumerate(df.iterrows()):
        source, target = str(row["source"]), str(row["target"])
        arc_id = str(row["id"]) if "id" in df.columns else f"a{i}"
        arcs.append(ArcSpec(id=arc_id, source=source, target=target))
        seen.setdefault(source)
        seen.setdefault(target)
    for pid in declared:
        seen.setdefault(pid)

    return NetDescription(
        name=name,
        places=[PlaceSpec(id=n, tokens=int(tokens.get(n, 0))) for n in seen if n in place_ids],
        transitions=[TransitionSpec(id=n) for n in seen if n not in place_ids],
        arcs=arcs,
    )
