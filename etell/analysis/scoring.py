"""
Scoring primitives shared by the placement and layout analyzers.

Both analyzers rank candidates by a weighted composite score in which
centrality is one term. The distance function is always passed in, so each
analyzer measures in its own coordinate system.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence, Tuple, TypeVar

from etell.analysis.types import Scored

T = TypeVar("T")
Point = Tuple[float, float]
DistanceFn = Callable[[Point, Point], float]


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def first_max(items: Iterable[T], key: Callable[[T], float]) -> Optional[Scored[T]]:
    """
    Highest-scoring item, scanning in the given order.

    Ties go to the earliest item. Returns None for an empty iterable.
    """
    best: Optional[Scored[T]] = None
    for item in items:
        score = key(item)
        if best is None or score > best.score:
            best = Scored(item, score)
    return best


def relative_centrality(origin: Point, others: Sequence[Point], distance: DistanceFn) -> float:
    """
    `1 - mean/max` of the distances from `origin` to `others`.

    A point whose neighbours are all equally far away scores 0; if every
    neighbour coincides with it (max distance 0), or it has none, it scores 1.
    """
    distances = [distance(origin, other) for other in others]
    if not distances:
        return 1.0
    d_max = max(distances)
    if d_max == 0:
        return 1.0
    return 1.0 - mean(distances) / d_max


def range_centrality(
    origin: Point, others: Sequence[Point], distance: DistanceFn, scale: float
) -> float:
    """
    `max(0, 1 - mean/scale)` of the distances from `origin` to `others`.

    A point with no neighbours scores 1.
    """
    if not others:
        return 1.0
    avg = mean([distance(origin, other) for other in others])
    return max(0.0, 1.0 - avg / scale)
