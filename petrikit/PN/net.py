from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .core import Place, Transition
from .exceptions import InvariantViolation, StructuralError
from .marking import Marking

LOGGER = logging.getLogger(__name__)


def _token_count(place_id: str, tokens) -> int:
    """Validate a token count supplied from outside the net."""
    try:
        count = int(tokens)
    except (TypeError, ValueError) as exc:
        raise StructuralError(
            f"Place {place_id!r}: token count {tokens!r} is not an integer."
        ) from exc
    if isinstance(tokens, float) and count != tokens:
        raise StructuralError(
            f"Place {place_id!r}: token count {tokens!r} is not an integer."
        )
    if count < 0:
        raise StructuralError(
            f"Place {place_id!r} cannot hold a negative number of tokens ({count})."
        )
    return count


class PetriNet:
    """
    Place/transition net with unit arc weights.

    Places and transitions live in id-keyed arenas. Transitions refer to their
    input and output places by id, so the only mutable state is the token
    count stored on each :class:`~petrikit.PN.core.Place`, and every write to
    it goes through :meth:`apply`.

    Places are kept in canonical order (identifiers sorted alphabetically);
    the marking vector returned by :meth:`marking` follows that order.
    Transitions keep their insertion order.

    :param allow_duplicate_arcs: If ``False`` (default), a second arc between
        the same place and transition in the same direction is rejected with
        :class:`StructuralError`. If ``True``, such arcs are honoured as
        multiplicity: the transition needs as many tokens as it has arcs from
        the place and consumes/produces one token per arc.
    :type allow_duplicate_arcs: bool
    """

    def __init__(self, *, allow_duplicate_arcs: bool = False) -> None:
        self.places: Dict[str, Place] = {}
        self.transitions: Dict[str, Transition] = {}
        self.arcs: Dict[str, Tuple[str, str]] = {}
        self.initial_place: Optional[str] = None
        self.initial_marking: Optional[Marking] = None
        self.allow_duplicate_arcs = allow_duplicate_arcs

    # -------------------------
    # Construction
    # -------------------------
    def _check_new_id(self, node_id: str) -> None:
        if node_id in self.places or node_id in self.transitions:
            raise StructuralError(f"Duplicate node id {node_id!r}.")

    def add_place(self, place_id: str, tokens: int = 0, name: str = "unnamed") -> Place:
        """
        Add a place. The first place ever added becomes the initial place.

        :param place_id: Unique node identifier.
        :type place_id: str
        :param tokens: Initial token count.
        :type tokens: int
        :param name: Display name.
        :type name: str
        :returns: The created place.
        :rtype: Place
        :raises StructuralError: On id collision or a token count that is
            negative or not an integer.
        """
        self._check_new_id(place_id)
        tokens = _token_count(place_id, tokens)
        place = Place(name=name, tokens=tokens)
        self.places[place_id] = place
        if self.initial_place is None:
            self.initial_place = place_id
        self.places = dict(sorted(self.places.items()))
        return place

    def add_transition(self, transition_id: str, name: str = "unnamed") -> Transition:
        """
        Add a transition with empty pre- and post-sets.

        :raises StructuralError: On id collision.
        """
        self._check_new_id(transition_id)
        transition = Transition(name=name)
        self.transitions[transition_id] = transition
        return transition

    def add_arc(self, arc_id: str, source: str, target: str) -> None:
        """
        Connect a place to a transition or a transition to a place.

        :param arc_id: Unique arc identifier.
        :type arc_id: str
        :param source: Id of the source node.
        :type source: str
        :param target: Id of the target node.
        :type target: str
        :raises StructuralError: If the arc id is taken, an endpoint is
            unknown, both endpoints are of the same kind, or the arc
            duplicates an existing one while duplicates are not allowed.
        """
        if arc_id in self.arcs:
            raise StructuralError(f"Duplicate arc id {arc_id!r}.")

        if source in self.places:
            if target not in self.transitions:
                raise StructuralError(
                    f"Arc {arc_id!r}: transition with id {target!r} not found."
                )
            self._check_duplicate_arc(arc_id, source, target)
            self.transitions[target].pre[arc_id] = source
        elif source in self.transitions:
            if target not in self.places:
                raise StructuralError(
                    f"Arc {arc_id!r}: place with id {target!r} not found."
                )
            self._check_duplicate_arc(arc_id, source, target)
            self.transitions[source].post[arc_id] = target
        else:
            raise StructuralError(
                f"Arc {arc_id!r}: no place or transition with id {source!r} found."
            )
        self.arcs[arc_id] = (source, target)

    def _check_duplicate_arc(self, arc_id: str, source: str, target: str) -> None:
        if self.allow_duplicate_arcs:
            return
        for other_id, endpoints in self.arcs.items():
            if endpoints == (source, target):
                raise StructuralError(
                    f"Arc {arc_id!r} duplicates arc {other_id!r} "
                    f"({source!r} -> {target!r})."
                )

    def set_tokens(self, place_id: str, tokens: int) -> None:
        """
        Set the token count of a single place.

        :raises StructuralError: If the place is unknown or ``tokens`` is
            negative or not an integer.
        """
        if place_id not in self.places:
            raise StructuralError(f"Place with id {place_id!r} not found.")
        tokens = _token_count(place_id, tokens)
        counts = [
            tokens if pid == place_id else p.tokens
            for pid, p in self.places.items()
        ]
        self.apply(Marking(tuple(counts)))

    def set_name(self, node_id: str, name: str) -> None:
        """Rename a place or a transition."""
        self._node(node_id).name = name

    def set_position(self, node_id: str, position: Tuple[int, int]) -> None:
        """Attach layout coordinates to a place or a transition."""
        x, y = position
        self._node(node_id).position = (int(x), int(y))

    def _node(self, node_id: str) -> Union[Place, Transition]:
        if node_id in self.places:
            return self.places[node_id]
        if node_id in self.transitions:
            return self.transitions[node_id]
        raise StructuralError(f"No element with id {node_id!r} found.")

    def mark_initial(self) -> Marking:
        """
        Record the current marking as the initial marking and return it.
        """
        self.initial_marking = self.marking()
        return self.initial_marking

    # -------------------------
    # Lookup
    # -------------------------
    @property
    def place_ids(self) -> List[str]:
        return list(self.places.keys())

    @property
    def transition_ids(self) -> List[str]:
        return list(self.transitions.keys())

    @property
    def arc_count(self) -> int:
        return sum(len(t.pre) + len(t.post) for t in self.transitions.values())

    def place(self, place_id: str) -> Place:
        try:
            return self.places[place_id]
        except KeyError:
            raise KeyError(f"Place with id {place_id!r} not found.") from None

    def transition(self, transition_id: str) -> Transition:
        try:
            return self.transitions[transition_id]
        except KeyError:
            raise KeyError(f"Transition with id {transition_id!r} not found.") from None

    def id_of(self, element: Union[Place, Transition]) -> str:
        """
        Reverse lookup of a place or transition object owned by this net.

        This is a linear identity scan.

        :raises KeyError: If the object does not belong to this net.
        """
        pool = self.places if isinstance(element, Place) else self.transitions
        for node_id, candidate in pool.items():
            if candidate is element:
                return node_id
        kind = "Place" if isinstance(element, Place) else "Transition"
        raise KeyError(f"{kind} with name {element.name!r} not found.")

    # -------------------------
    # Marking
    # -------------------------
    def marking(self) -> Marking:
        """Snapshot of the current token counts in canonical place order."""
        return Marking(tuple(p.tokens for p in self.places.values()))

    def apply(self, marking: Union[Marking, Sequence[int]]) -> None:
        """
        Overwrite every place's token count, positionally.

        This is the single entry point through which token counts change.
        The vector is validated completely before any place is written.

        :param marking: One count per place in canonical order.
        :type marking: Marking | Sequence[int]
        :raises InvariantViolation: On length mismatch, a negative entry or a
            non-integer entry.
        """
        if not isinstance(marking, Marking):
            try:
                marking = Marking.from_iterable(marking)
            except ValueError as exc:
                raise InvariantViolation(str(exc)) from exc
        if len(marking) != len(self.places):
            raise InvariantViolation(
                f"Marking {marking} has {len(marking)} entries, "
                f"net has {len(self.places)} places."
            )
        if not marking.is_non_negative():
            raise InvariantViolation(f"Marking {marking} has a negative entry.")
        for place, tokens in zip(self.places.values(), marking):
            place.tokens = tokens

    def set_marking(self, marking: Union[Marking, Sequence[int]]) -> None:
        """Alias of :meth:`apply`."""
        self.apply(marking)

    def reset_to_initial(self) -> Marking:
        """
        Restore the initial marking recorded by :meth:`mark_initial`.

        :raises InvariantViolation: If no initial marking was recorded.
        """
        if self.initial_marking is None:
            raise InvariantViolation("Net has no initial marking.")
        self.apply(self.initial_marking)
        return self.initial_marking

    # -------------------------
    # Firing
    # -------------------------
    def _demand(self, transition: Transition) -> Counter[str]:
        return Counter(transition.pre.values())

    def is_enabled(self, transition_id: str) -> bool:
        """
        ``True`` iff every place in the pre-set holds a token (one per arc).
        A transition with an empty pre-set is always enabled.

        :raises KeyError: If the transition is unknown.
        """
        transition = self.transition(transition_id)
        for place_id, needed in self._demand(transition).items():
            if self.places[place_id].tokens < needed:
                return False
        return True

    def enabled_transitions(self) -> List[str]:
        return [tid for tid in self.transitions if self.is_enabled(tid)]

    def successor(self, transition_id: str) -> Marking:
        """
        Marking reached by firing ``transition_id``, without mutating the net.

        The result may contain negative entries if the transition is not
        enabled; :meth:`fire` refuses to apply such a marking.
        """
        transition = self.transition(transition_id)
        counts = {pid: p.tokens for pid, p in self.places.items()}
        for place_id in transition.pre.values():
            counts[place_id] -= 1
        for place_id in transition.post.values():
            counts[place_id] += 1
        return Marking(tuple(counts.values()))

    def fire(self, transition_id: str) -> Marking:
        """
        Fire a transition: one token is removed per pre-set arc and one is
        added per post-set arc. The net is either fully updated or untouched.

        :param transition_id: Transition to fire.
        :type transition_id: str
        :returns: The new marking.
        :rtype: Marking
        :raises KeyError: If the transition is unknown.
        :raises InvariantViolation: If the transition is not enabled.
        """
        if not self.is_enabled(transition_id):
            raise InvariantViolation(
                f"Transition {transition_id!r} is not enabled in marking {self.marking()}."
            )
        after = self.successor(transition_id)
        if not after.is_non_negative():
            raise InvariantViolation(
                f"Firing {transition_id!r} would produce negative marking {after}."
            )
        LOGGER.debug("Firing transition %s: %s -> %s", transition_id, self.marking(), after)
        self.apply(after)
        return after

    # -------------------------
    # Structure
    # -------------------------
    def incidence_matrix(self) -> np.ndarray:
        """
        Build the place x transition incidence matrix ``C = post - pre``.

        Column ``j`` is the marking change caused by firing the ``j``-th
        transition (insertion order); rows follow the canonical place order.

        :returns: Integer matrix with shape (n_places, n_transitions).
        :rtype: numpy.ndarray
        """
        row = {pid: i for i, pid in enumerate(self.places)}
        C = np.zeros((len(self.places), len(self.transitions)), dtype=int)
        for j, t in enumerate(self.transitions.values()):
            for place_id in t.post.values():
                C[row[place_id], j] += 1
            for place_id in t.pre.values():
                C[row[place_id], j] -= 1
        return C

    def copy(self) -> "PetriNet":
        """
        Value copy: no place, transition or mapping is shared with ``self``.
        """
        clone = PetriNet(allow_duplicate_arcs=self.allow_duplicate_arcs)
        clone.places = {pid: p.copy() for pid, p in self.places.items()}
        clone.transitions = {tid: t.copy() for tid, t in self.transitions.items()}
        clone.arcs = dict(self.arcs)
        clone.initial_place = self.initial_place
        clone.initial_marking = self.initial_marking
        return clone

    def describe(self) -> str:
        """Multi-line summary: counts, initial place and current marking."""
        if self.initial_place is not None:
            init = f"[{self.initial_place}] {self.places[self.initial_place].name}"
        else:
            init = "-"
        return (
            f"\tPlaces:\t\t\t{len(self.places)}\n"
            f"\tTransitions:\t\t{len(self.transitions)}\n"
            f"\tArcs:\t\t\t{self.arc_count}\n"
            f"\tInitial Place:\t\t{init}\n"
            f"\tInitial Marking:\t{self.marking()}"
        )

    @classmethod
    def from_parts(
        cls,
        places: Iterable[Tuple[str, int]],
        transitions: Iterable[str],
        arcs: Iterable[Tuple[str, str, str]],
        *,
        allow_duplicate_arcs: bool = False,
    ) -> "PetriNet":
        """
        Small builder for tests and scripts.

        :param places: ``(id, tokens)`` pairs in insertion order.
        :param transitions: Transition ids.
        :param arcs: ``(arc_id, source, target)`` triples.
        :returns: Net with its initial marking recorded.
        """
        net = cls(allow_duplicate_arcs=allow_duplicate_arcs)
        for pid, tokens in places:
            net.add_place(pid, tokens)
        for tid in transitions:
            net.add_transition(tid)
        for arc_id, source, target in arcs:
            net.add_arc(arc_id, source, target)
        net.mark_initial()
        return net

    def __repr__(self) -> str:
        return (
            f"PetriNet({len(self.places)} places, {len(self.transitions)} transitions, "
            f"{self.arc_count} arcs)"
        )
