"""
Floor-plan editor state: rooms built from calibration samples, then moved and
resized by the user.

Adjacency is recomputed once per committed move or resize, never per drag
frame. Analyses run on a deep-copied snapshot, so later edits cannot change a
result that is already being computed.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from etell.analysis.config import LayoutConfig
from etell.analysis.layout import LayoutAnalyzer
from etell.errors import FloorNotFoundError, RoomNotFoundError
from etell.utils.log import get_logger
from etell.utils.validate import FloorLayout, LayoutResult, LocationType, Room, Sample

logger = get_logger(__name__)

GRID_COLUMNS = 3

DEFAULT_SIZES: dict[LocationType, tuple[float, float]] = {
    LocationType.ROOM:      (60.0, 60.0),
    LocationType.HALLWAY:   (80.0, 30.0),
    LocationType.STAIRCASE: (40.0, 40.0),
}


def infer_location_type(name: str) -> LocationType:
    """
    Guess the location type from a user-supplied sample name.
    """
    words = re.findall(r"[a-z]+", name.lower())
    # "Upstairs Bedroom" is a room, "Stairway" is not
    if any(w.startswith("stair") for w in words):
        return LocationType.STAIRCASE
    if any(w.startswith(("hall", "corridor", "passage")) for w in words):
        return LocationType.HALLWAY
    return LocationType.ROOM


def room_from_sample(sample: Sample, position: tuple[float, float]) -> Room:
    loc_type = infer_location_type(sample.name)
    return Room(
        id=sample.id,
        name=sample.name,
        type=loc_type,
        floor=sample.floor,
        signal_strength=sample.signal_strength,
        position=position,
        size=DEFAULT_SIZES[loc_type],
    )


def initial_position(index: int) -> tuple[float, float]:
    col = index % GRID_COLUMNS
    row = index // GRID_COLUMNS
    return (col * 80.0 + 40.0, row * 60.0 + 40.0)


class LayoutEditor:
    """
    Owns the floor layouts for one editing session.
    """
    def __init__(self, floors: Sequence[FloorLayout], cfg: Optional[LayoutConfig] = None) -> None:
        self.cfg = cfg or LayoutConfig.default()
        self.floors: list[FloorLayout] = sorted(floors, key=lambda f: f.floor)
        for floor in self.floors:
            floor.refresh_adjacency(self.cfg.adjacency_margin)
        self.current_floor: int = self.floors[0].floor if self.floors else 1
        self.selected_id: Optional[str] = None

    @classmethod
    def from_samples(
        cls, samples: Sequence[Sample], cfg: Optional[LayoutConfig] = None
    ) -> LayoutEditor:
        """
        Lay out one room per sample, on a 3-column grid per floor.
        """
        floors: list[FloorLayout] = []
        for floor_no in sorted({s.floor for s in samples}):
            on_floor = [s for s in samples if s.floor == floor_no]
            rooms = [room_from_sample(s, initial_position(i)) for i, s in enumerate(on_floor)]
            floors.append(FloorLayout(floor=floor_no, rooms=rooms))
        logger.info("Built layout with %d floors from %d samples", len(floors), len(samples))
        return cls(floors, cfg)

    # -- lookup -------------------------------------------------------------

    def floor(self, floor_no: Optional[int] = None) -> FloorLayout:
        wanted = self.current_floor if floor_no is None else floor_no
        for floor in self.floors:
            if floor.floor == wanted:
                return floor
        raise FloorNotFoundError(f"No floor {wanted} in layout", {"floor": str(wanted)})

    @property
    def rooms(self) -> list[Room]:
        """Rooms on the current floor."""
        return list(self.floor().rooms)

    @property
    def selected_room(self) -> Optional[Room]:
        if self.selected_id is None:
            return None
        return self.floor().room(self.selected_id)

    def _room(self, room_id: str) -> Room:
        room = self.floor().room(room_id)
        if room is None:
            raise RoomNotFoundError(
                f"Room {room_id} is not on floor {self.current_floor}",
                {"room_id": room_id, "floor": str(self.current_floor)},
            )
        return room

    def room_at(self, point: tuple[float, float]) -> Optional[Room]:
        """
        Topmost room on the current floor under `point` (last drawn wins).
        """
        for room in reversed(self.floor().rooms):
            if room.rect.contains(point):
                return room
        return None

    # -- gestures -----------------------------------------------------------

    def select_room(self, room_id: str) -> Room:
        room = self._room(room_id)
        self.selected_id = room.id
        return room

    def deselect_room(self) -> None:
        self.selected_id = None

    def switch_to_floor(self, floor_no: int) -> None:
        self.floor(floor_no)
        self.deselect_room()
        self.current_floor = floor_no

    def snap(self, point: tuple[float, float]) -> tuple[float, float]:
        cell = self.cfg.grid_cell
        return (round(point[0] / cell) * cell, round(point[1] / cell) * cell)

    def move_room(self, room_id: str, position: tuple[float, float]) -> Room:
        room = self._room(room_id)
        room.position = self.snap(position) if self.cfg.snap_to_grid else position
        self._commit()
        return room

    def resize_room(self, room_id: str, size: tuple[float, float]) -> Room:
        room = self._room(room_id)
        # clamped by Room validation
        room.size = size
        self._commit()
        return room

    def _commit(self) -> None:
        self.floor().refresh_adjacency(self.cfg.adjacency_margin)

    # -- analysis -----------------------------------------------------------

    def snapshot(self) -> list[FloorLayout]:
        return [floor.model_copy(deep=True) for floor in self.floors]

    def analyze(self) -> LayoutResult:
        return LayoutAnalyzer(self.cfg).analyze(self.snapshot())
