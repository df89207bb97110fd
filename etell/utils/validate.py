"""
Pydantic schemas for calibration data, floor layouts and analysis results.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from etell.analysis.adjacency import DEFAULT_MARGIN, compute_adjacency
from etell.analysis.types import Rect

# Room size bounds in canvas units, (min, max)
ROOM_WIDTH_RANGE = (30.0, 120.0)
ROOM_HEIGHT_RANGE = (20.0, 100.0)


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationType(str, Enum):
    ROOM = "Room"
    HALLWAY = "Hallway"
    STAIRCASE = "Staircase"


class ExtenderType(str, Enum):
    ROOM_EXTENDER = "roomExtender"
    HALLWAY_EXTENDER = "hallwayExtender"


class EnvironmentType(str, Enum):
    HOUSE = "House"
    APARTMENT = "Apartment"
    OFFICE = "Office"


class CalibrationSetup(BaseModel):
    """
    Answers from the pre-calibration questionnaire.
    """
    environment_type: Optional[EnvironmentType] = None
    number_of_floors: Optional[int] = Field(default=None, ge=1)
    has_hallways: Optional[bool] = None


class Sample(BaseModel):
    """
    One calibration measurement.

    `position` is (latitude, longitude) and is not range-checked, so tests and
    offline tools may feed a planar approximation together with a planar
    distance function.
    """
    id: str = Field(default_factory=_new_id)
    name: str
    position: tuple[float, float]
    relative_height: float = 0.0
    signal_strength: float = Field(ge=0.0, le=1.0)
    timestamp: datetime = Field(default_factory=_utcnow)
    distance_from_previous: float = Field(default=0.0, ge=0.0)
    floor: int = Field(default=1, ge=1)
    heading: Optional[float] = None
    step_count: Optional[int] = None


class Session(BaseModel):
    """
    Ordered samples from one calibration run.
    """
    id: str = Field(default_factory=_new_id)
    started_at: datetime = Field(default_factory=_utcnow)
    ended_at: Optional[datetime] = None
    samples: list[Sample] = Field(default_factory=list)
    setup: Optional[CalibrationSetup] = None

    @field_validator("samples")
    @classmethod
    def _unique_sample_ids(cls, samples: list[Sample]) -> list[Sample]:
        seen: set[str] = set()
        for s in samples:
            if s.id in seen:
                raise ValueError(f"duplicate sample id {s.id}")
            seen.add(s.id)
        return samples

    @property
    def is_complete(self) -> bool:
        return self.ended_at is not None


class SessionSummary(BaseModel):
    id: str
    started_at: datetime
    ended_at: Optional[datetime]
    n_samples: int


class Room(BaseModel):
    """
    A calibrated location drawn as a rectangle on the floor-plan canvas.

    Position and size change in place as the user drags and resizes; size is
    clamped on every assignment.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    name: str
    type: LocationType = LocationType.ROOM
    floor: int = Field(default=1, ge=1)
    signal_strength: float = Field(ge=0.0, le=1.0)
    position: tuple[float, float]
    size: tuple[float, float] = (60.0, 60.0)

    @field_validator("size")
    @classmethod
    def _clamp_size(cls, size: tuple[float, float]) -> tuple[float, float]:
        width, height = size
        return (
            max(ROOM_WIDTH_RANGE[0], min(ROOM_WIDTH_RANGE[1], width)),
            max(ROOM_HEIGHT_RANGE[0], min(ROOM_HEIGHT_RANGE[1], height)),
        )

    @property
    def rect(self) -> Rect:
        return Rect(self.position[0], self.position[1], self.size[0], self.size[1])

    @property
    def center(self) -> tuple[float, float]:
        return self.rect.center


class FloorLayout(BaseModel):
    """
    Rooms on one floor plus their adjacency map.

    Every room must carry this floor number. When no adjacency map is
    supplied it is derived from the room rectangles.
    """
    floor: int = Field(ge=1)
    rooms: list[Room] = Field(default_factory=list)
    adjacency: dict[str, set[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_rooms(self) -> "FloorLayout":
        strays = [r.id for r in self.rooms if r.floor != self.floor]
        if strays:
            raise ValueError(f"rooms {strays} are not on floor {self.floor}")
        if not self.adjacency:
            self.adjacency = compute_adjacency(self.rooms)
        return self

    def refresh_adjacency(self, margin: float = DEFAULT_MARGIN) -> None:
        """Recompute adjacency after a committed move or resize."""
        self.adjacency = compute_adjacency(self.rooms, margin)

    def room(self, room_id: str) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)


class ExtenderRecommendation(BaseModel):
    """
    Extender suggestion for a weak calibration sample.
    """
    location: str
    floor: int
    reason: str
    type: ExtenderType
    anchor: Optional[str] = None


class CoverageAnalysis(BaseModel):
    total: int
    well_covered: int
    weak_areas: int
    coverage_percentage: float


class SignalPredictionMap(BaseModel):
    predictions: dict[str, float]
    resolution: float = 1.0  # metres per grid point


class PlacementResult(BaseModel):
    status: Literal["ok"] = "ok"
    optimal_router_location: Sample
    router_score: float
    extender_recommendations: list[ExtenderRecommendation]
    coverage: CoverageAnalysis
    signal_prediction: SignalPredictionMap


class InsufficientData(BaseModel):
    """
    Returned instead of a placement result when too few samples exist.
    """
    status: Literal["insufficient_data"] = "insufficient_data"
    sample_count: int
    required: int
    message: str


class RouterRecommendation(BaseModel):
    floor: int
    room: Room
    position: tuple[float, float]
    score: float
    reasoning: str


class LayoutExtenderRecommendation(BaseModel):
    floor: int
    target_room: Room
    recommended_position: tuple[float, float]
    placement_room: Room
    signal_improvement: float
    reasoning: str


class LayoutResult(BaseModel):
    router_recommendations: list[RouterRecommendation]
    extender_recommendations: list[LayoutExtenderRecommendation]
    coverage: CoverageAnalysis


class LocationAdvice(BaseModel):
    sample_id: str
    name: str
    recommendations: list[str]


class SessionAdvice(BaseModel):
    setup: list[str]
    locations: list[LocationAdvice]
