"""
Room adjacency on a floor plan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from etell.utils.geo import rects_intersect

if TYPE_CHECKING:
    from etell.utils.validate import Room

DEFAULT_MARGIN = 10.0


def rooms_adjacent(a: "Room", b: "Room", margin: float = DEFAULT_MARGIN) -> bool:
    """
    Two rooms are adjacent when `a` grown by `margin` overlaps `b`.
    """
    return rects_intersect(a.rect, b.rect, margin)


def compute_adjacency(
    rooms: Sequence["Room"], margin: float = DEFAULT_MARGIN
) -> dict[str, set[str]]:
    """
    Build the `room id -> adjacent room ids` map for one floor.

    Every room gets an entry, empty when it touches nothing.
    """
    adjacency: dict[str, set[str]] = {room.id: set() for room in rooms}
    for i, room in enumerate(rooms):
        for other in rooms[i+1:]:
            if room.id == other.id:
                continue
            if rooms_adjacent(room, other, margin):
                adjacency[room.id].add(other.id)
                adjacency[other.id].add(room.id)
    return adjacency
