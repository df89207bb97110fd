"""Tests for calibration session recording."""

import pytest

from etell.analysis.session import SampleStore
from etell.errors import SessionNotActiveError
from etell.utils.geo import haversine
from etell.utils.validate import CalibrationSetup, EnvironmentType


def test_capture_requires_active_session():
    store = SampleStore()
    with pytest.raises(SessionNotActiveError):
        store.capture((37.7749, -122.4194), 10.0, 0.8)


def test_first_sample_sets_height_reference():
    store = SampleStore()
    store.start()
    first = store.capture((37.7749, -122.4194), 12.0, 0.8, name="Living Room")
    second = store.capture((37.7750, -122.4194), 15.5, 0.6, name="Bedroom", floor=2)

    assert first.relative_height == 0.0
    assert first.distance_from_previous == 0.0
    assert second.relative_height == pytest.approx(3.5)
    assert second.distance_from_previous == pytest.approx(
        haversine((37.7749, -122.4194), (37.7750, -122.4194))
    )
    assert second.floor == 2
    assert [s.name for s in store.samples] == ["Living Room", "Bedroom"]


def test_default_names_and_progress():
    store = SampleStore()
    store.start()
    assert store.progress(4) == 0.0
    for i in range(3):
        store.capture((0.0, float(i) * 1e-4), 0.0, 0.5)
    assert [s.name for s in store.samples] == ["Point 1", "Point 2", "Point 3"]
    assert store.progress(4) == pytest.approx(0.75)
    assert store.progress(2) == 1.0


def test_end_session_stops_capture():
    store = SampleStore()
    setup = CalibrationSetup(environment_type=EnvironmentType.HOUSE, number_of_floors=2)
    session = store.start(setup)
    store.capture((0.0, 0.0), 0.0, 0.5)
    ended = store.end()

    assert ended is session
    assert ended.is_complete
    assert ended.setup.environment_type == EnvironmentType.HOUSE
    with pytest.raises(SessionNotActiveError):
        store.capture((0.0, 0.0), 0.0, 0.5)


def test_samples_is_a_snapshot():
    store = SampleStore()
    store.start()
    store.capture((0.0, 0.0), 0.0, 0.5)
    snapshot = store.samples
    store.capture((0.0, 1e-4), 0.0, 0.5)
    assert len(snapshot) == 1
    assert len(store.samples) == 2


def test_restart_resets_reference():
    store = SampleStore()
    store.start()
    store.capture((0.0, 0.0), 100.0, 0.5)
    store.start()
    sample = store.capture((0.0, 0.0), 40.0, 0.5)
    assert sample.relative_height == 0.0
    assert len(store.samples) == 1
