# etell/analysis/types.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in canvas units.

    Parameters
    ----------
    x : float
        Left edge.
    y : float
        Top edge.
    width : float
        Horizontal extent.
    height : float
        Vertical extent.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def expanded(self, margin: float) -> Rect:
        """Grow (or shrink, for negative margins) by `margin` on every side."""
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def intersects(self, other: Rect) -> bool:
        """Open-interval overlap: touching edges do not count."""
        return (
            self.x < other.max_x
            and other.x < self.max_x
            and self.y < other.max_y
            and other.y < self.max_y
        )

    def contains(self, point: tuple[float, float]) -> bool:
        px, py = point
        return self.x <= px <= self.max_x and self.y <= py <= self.max_y


@dataclass(frozen=True)
class Scored(Generic[T]):
    """
    A candidate paired with its composite placement score.

    Parameters
    ----------
    item : T
        The scored sample or room.
    score : float
        Composite score; higher is better.
    """
    item: T
    score: float


@dataclass(frozen=True)
class ExtenderSite:
    """
    Where an extender should go to serve a weak room.

    Parameters
    ----------
    position : tuple[float, float]
        Canvas point between the weak room and `anchor_id`.
    anchor_id : str
        Id of the adjacent room with the stronger signal.
    """
    position: tuple[float, float]
    anchor_id: str
