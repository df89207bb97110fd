"""Tests for the floor-plan layout editor."""

import pytest

from etell.analysis.config import LayoutConfig
from etell.analysis.editor import LayoutEditor, infer_location_type
from etell.errors import FloorNotFoundError, RoomNotFoundError
from etell.utils.validate import LocationType, Sample


def _sample(name, signal, floor=1):
    return Sample(
        id=name.lower().replace(" ", "-"),
        name=name,
        position=(0.0, 0.0),
        signal_strength=signal,
        floor=floor,
    )


@pytest.fixture()
def editor():
    samples = [
        _sample("Living Room", 0.9),
        _sample("Main Hallway", 0.45),
        _sample("Staircase", 0.6),
        _sample("Kitchen", 0.3),
        _sample("Upstairs Bedroom", 0.35, floor=2),
    ]
    return LayoutEditor.from_samples(samples)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Living Room", LocationType.ROOM),
        ("Upstairs Bedroom", LocationType.ROOM),
        ("Main Hallway", LocationType.HALLWAY),
        ("corridor 2", LocationType.HALLWAY),
        ("Stairway", LocationType.STAIRCASE),
        ("Point 3", LocationType.ROOM),
    ],
)
def test_infer_location_type(name, expected):
    assert infer_location_type(name) == expected


def test_initial_grid_layout(editor):
    assert [f.floor for f in editor.floors] == [1, 2]
    assert editor.current_floor == 1
    rooms = {r.name: r for r in editor.rooms}
    assert rooms["Living Room"].position == (40.0, 40.0)
    assert rooms["Main Hallway"].position == (120.0, 40.0)
    assert rooms["Staircase"].position == (200.0, 40.0)
    assert rooms["Kitchen"].position == (40.0, 100.0)
    assert rooms["Main Hallway"].size == (80.0, 30.0)
    assert rooms["Staircase"].size == (40.0, 40.0)
    assert rooms["Kitchen"].type == LocationType.ROOM
    # room ids follow the sample ids
    assert rooms["Kitchen"].id == "kitchen"


def test_initial_adjacency(editor):
    adjacency = editor.floor(1).adjacency
    assert adjacency["living-room"] == {"kitchen"}
    assert adjacency["main-hallway"] == {"staircase"}


def test_move_snaps_and_recomputes_adjacency(editor):
    room = editor.move_room("main-hallway", (103.0, 47.0))
    assert room.position == (100.0, 40.0)
    adjacency = editor.floor(1).adjacency
    assert "main-hallway" in adjacency["living-room"]
    assert "staircase" not in adjacency["main-hallway"]


def test_move_without_snapping():
    editor = LayoutEditor.from_samples([_sample("Den", 0.5)], LayoutConfig.freeform())
    room = editor.move_room("den", (13.0, 27.0))
    assert room.position == (13.0, 27.0)


def test_resize_is_clamped(editor):
    room = editor.resize_room("kitchen", (500.0, 5.0))
    assert room.size == (120.0, 20.0)


def test_unknown_room_raises(editor):
    with pytest.raises(RoomNotFoundError) as exc:
        editor.move_room("upstairs-bedroom", (0.0, 0.0))
    assert exc.value.details["floor"] == "1"


def test_switch_floor(editor):
    editor.select_room("kitchen")
    editor.switch_to_floor(2)
    assert editor.selected_room is None
    assert [r.name for r in editor.rooms] == ["Upstairs Bedroom"]
    with pytest.raises(FloorNotFoundError):
        editor.switch_to_floor(7)
    assert editor.current_floor == 2


def test_select_and_hit_test(editor):
    room = editor.room_at((50.0, 50.0))
    assert room.name == "Living Room"
    assert editor.room_at((1000.0, 1000.0)) is None
    editor.select_room(room.id)
    assert editor.selected_room.id == room.id
    editor.deselect_room()
    assert editor.selected_room is None


def test_snapshot_is_isolated(editor):
    snapshot = editor.snapshot()
    editor.move_room("kitchen", (400.0, 400.0))
    kitchen = next(r for r in snapshot[0].rooms if r.id == "kitchen")
    assert kitchen.position == (40.0, 100.0)
    assert "kitchen" in snapshot[0].adjacency["living-room"]


def test_analyze(editor):
    result = editor.analyze()
    assert [r.floor for r in result.router_recommendations] == [1, 2]
    assert result.router_recommendations[0].room.name == "Living Room"
    # kitchen (0.3) sits under the living room; the hallway's only neighbour
    # is the staircase at 0.6
    targets = {e.target_room.name: e.placement_room.name for e in result.extender_recommendations}
    assert targets == {"Kitchen": "Living Room", "Main Hallway": "Staircase"}
    assert result.coverage.total == 5
