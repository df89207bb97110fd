"""
Calibration session recording.

`SampleStore` is fed by the capture loop: it stamps each reading with its
height relative to the first sample and its distance from the previous one.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from etell.errors import SessionNotActiveError
from etell.utils.geo import haversine
from etell.utils.log import get_logger
from etell.utils.validate import CalibrationSetup, Sample, Session

logger = get_logger(__name__)


class SampleStore:
    """
    Ordered samples of the current calibration session.
    """
    def __init__(self) -> None:
        self.session: Optional[Session] = None
        self._reference_altitude: Optional[float] = None

    @property
    def is_recording(self) -> bool:
        return self.session is not None and not self.session.is_complete

    @property
    def samples(self) -> tuple[Sample, ...]:
        if self.session is None:
            return ()
        return tuple(self.session.samples)

    def start(self, setup: Optional[CalibrationSetup] = None) -> Session:
        self.session = Session(setup=setup)
        self._reference_altitude = None
        logger.info("Started calibration session %s", self.session.id)
        return self.session

    def end(self) -> Session:
        if self.session is None:
            raise SessionNotActiveError("No calibration session to end")
        if self.session.ended_at is None:
            self.session.ended_at = datetime.now(timezone.utc)
            logger.info(
                "Ended session %s with %d samples",
                self.session.id, len(self.session.samples),
            )
        return self.session

    def capture(
        self,
        position: tuple[float, float],
        altitude: float,
        signal_strength: float,
        name: str = "",
        floor: int = 1,
        heading: Optional[float] = None,
        step_count: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Sample:
        """
        Append a reading to the open session.

        Parameters
        ----------
        position
            (latitude, longitude) of the reading.
        altitude
            Barometric altitude (m); only differences from the first sample
            are kept.
        signal_strength
            Normalized signal in [0, 1].
        name
            Label for the location; defaults to "Point N".

        Raises
        ------
        SessionNotActiveError
            If no session is open or it has already ended.
        """
        if not self.is_recording:
            raise SessionNotActiveError("Cannot capture point: no active session")
        samples = self.session.samples
        if not samples:
            self._reference_altitude = altitude
        previous = samples[-1] if samples else None
        sample = Sample(
            name=name or f"Point {len(samples) + 1}",
            position=position,
            relative_height=altitude - self._reference_altitude,
            signal_strength=signal_strength,
            timestamp=timestamp or datetime.now(timezone.utc),
            distance_from_previous=haversine(previous.position, position) if previous else 0.0,
            floor=floor,
            heading=heading,
            step_count=step_count,
        )
        samples.append(sample)
        logger.info("Captured %s (signal %.2f)", sample.name, signal_strength)
        return sample

    def progress(self, target: int) -> float:
        """Fraction of `target` samples captured so far, capped at 1."""
        if target <= 0:
            return 1.0
        return min(1.0, len(self.samples) / target)
