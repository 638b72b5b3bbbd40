from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union, overload


@dataclass(frozen=True)
class Marking:
    """
    Token-count vector of a Petri net, one entry per place in canonical
    (alphabetically sorted) place order.

    Two markings are equal iff they have the same length and are equal
    element-wise. Markings are hashable and can be used as graph nodes.

    :param tokens: Token counts in canonical place order.
    :type tokens: Tuple[int, ...]
    :raises ValueError: If a count is not an integral value.
    """

    tokens: Tuple[int, ...]

    def __post_init__(self) -> None:
        # accept any iterable on construction, store an immutable tuple
        raw = tuple(self.tokens)
        try:
            counts = tuple(int(t) for t in raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Token counts must be integers, got {raw!r}.") from exc
        if counts != raw:
            raise ValueError(f"Token counts must be integers, got {raw!r}.")
        object.__setattr__(self, "tokens", counts)

    @classmethod
    def of(cls, *counts: int) -> "Marking":
        """
        Convenience constructor, ``Marking.of(1, 0)`` equals
        ``Marking((1, 0))``.
        """
        return cls(counts)

    @classmethod
    def from_iterable(cls, counts: Iterable[int]) -> "Marking":
        return cls(tuple(counts))

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[int]:
        return iter(self.tokens)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[int, ...]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[int, Tuple[int, ...]]:
        return self.tokens[index]

    def difference(self, other: "Marking") -> Tuple[int, ...]:
        """
        Element-wise difference ``other - self``.

        :param other: Marking of the same length.
        :type other: Marking
        :returns: Tuple of per-place differences.
        :rtype: Tuple[int, ...]
        :raises ValueError: If the markings differ in length.
        """
        if len(other) != len(self):
            raise ValueError(
                f"Cannot compare markings of length {len(self)} and {len(other)}."
            )
        return tuple(b - a for a, b in zip(self.tokens, other.tokens))

    def total(self) -> int:
        """Total number of tokens."""
        return sum(self.tokens)

    def is_non_negative(self) -> bool:
        return all(t >= 0 for t in self.tokens)

    def __str__(self) -> str:
        return "(" + "|".join(str(t) for t in self.tokens) + ")"

    def __repr__(self) -> str:
        return f"Marking{self.tokens!r}"
