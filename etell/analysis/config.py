# etell/analysis/config.py

from dataclasses import dataclass


@dataclass
class PlacementConfig:
    """
    Thresholds and weights for router/extender placement over calibration
    samples.

    Attributes
    ----------
    min_samples
        Fewest samples an analysis will run on.
    centrality_weight, height_weight, signal_weight
        Composite router score weights.
    height_offset
        Preferred height (m) above the session's mean sample height.
    height_tolerance
        Height difference (m) at which the height score reaches 0.
    weak_threshold
        Signal below which a sample is a weak spot needing an extender.
    strong_threshold
        Signal a sample must exceed to anchor an extender.
    coverage_weak, coverage_strong
        Coverage summary bands (weak is `<`, strong is `>=`).
    target_signal
        Signal an extender is expected to bring a weak spot up to.
    room_gap
        Expected improvement above which a room extender is recommended
        instead of a hallway extender.
    max_range_m
        Distance (m) at which predicted router signal bottoms out.
    min_prediction
        Floor for predicted signal.
    """
    min_samples:       int   = 3
    centrality_weight: float = 0.4
    height_weight:     float = 0.3
    signal_weight:     float = 0.3
    height_offset:     float = 0.5
    height_tolerance:  float = 3.0
    weak_threshold:    float = 0.4
    strong_threshold:  float = 0.7
    coverage_weak:     float = 0.5
    coverage_strong:   float = 0.7
    target_signal:     float = 0.8
    room_gap:          float = 0.4
    max_range_m:       float = 50.0
    min_prediction:    float = 0.1

    @classmethod
    def default(cls):
        """Preset matching the calibration flow's thresholds."""
        return cls()


@dataclass
class LayoutConfig:
    """
    Thresholds and weights for the floor-plan layout analysis and editor.

    Attributes
    ----------
    adjacency_margin
        Canvas units a room is grown by before testing adjacency.
    centrality_weight, signal_weight, type_weight
        Composite router score weights.
    room_bonus
        Type score for a `Room` (hallways and staircases score 0).
    centrality_range
        Mean centre distance (canvas units) at which centrality reaches 0.
    weak_threshold
        Signal below which a room gets an extender.
    extender_boost
        Flat signal improvement assumed for an extender.
    coverage_weak, coverage_strong
        Coverage summary bands (weak is `<`, strong is `>=`).
    grid_cell
        Snap grid size (canvas units) for moved rooms.
    snap_to_grid
        Whether moves snap to the grid.
    """
    adjacency_margin:  float = 10.0
    centrality_weight: float = 0.4
    signal_weight:     float = 0.4
    type_weight:       float = 0.2
    room_bonus:        float = 0.2
    centrality_range:  float = 200.0
    weak_threshold:    float = 0.5
    extender_boost:    float = 0.3
    coverage_weak:     float = 0.4
    coverage_strong:   float = 0.7
    grid_cell:         float = 20.0
    snap_to_grid:      bool  = True

    @classmethod
    def default(cls):
        """Preset for the layout editor canvas."""
        return cls()

    @classmethod
    def freeform(cls):
        """Preset without grid snapping."""
        return cls(snap_to_grid=False)
