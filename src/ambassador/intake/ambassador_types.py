"""Weighted random ambassador-type assignment."""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar


class Weighted(Protocol):
    @property
    def assignment_weight(self) -> float: ...


T = TypeVar("T", bound=Weighted)


@dataclass(frozen=True)
class WeightedOption:
    """Plain name/weight pair, for callers that don't hold ORM rows."""

    name: str
    assignment_weight: float


def select_ambassador_type(types: Sequence[T], rand: Callable[[], float] = random.random) -> T:
    """Pick one entry with probability proportional to its assignment_weight.

    Draws r uniformly from [0, total) and walks the sequence in order,
    returning the first entry whose weight covers what is left of r, so a
    draw landing exactly on a boundary goes to the earlier entry.
    Entries with weight 0 are never chosen while any weight is positive.
    If every weight is 0 the first entry is returned.

    Args:
        types: Candidates in a stable order. Negative weights count as 0.
        rand: Source of uniform floats in [0, 1). Inject a seeded
            ``random.Random(...).random`` for reproducible draws.

    Raises:
        ValueError: If ``types`` is empty.
    """
    if not types:
        msg = "Cannot select from an empty list of ambassador types"
        raise ValueError(msg)

    weights = [max(t.assignment_weight, 0) for t in types]
    total = sum(weights)
    if total <= 0:
        return types[0]

    remaining = rand() * total
    last_positive = types[0]
    for option, weight in zip(types, weights):
        if weight <= 0:
            continue
        if remaining <= weight:
            return option
        remaining -= weight
        last_positive = option

    # Float drift can leave remaining a hair above the last weight
    return last_positive
