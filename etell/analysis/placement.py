"""
Router and extender placement from calibration samples.

Given the samples of one calibration session this computes:
- the sample best suited for the router (centrality, height and signal)
- extender recommendations for weak spots, anchored on the nearest strong sample
- a coverage summary
- a distance-based signal prediction around the chosen router spot
"""

from __future__ import annotations

from typing import Optional, Sequence

from etell.analysis.config import PlacementConfig
from etell.analysis.scoring import DistanceFn, first_max, mean, relative_centrality
from etell.analysis.types import Scored
from etell.utils.geo import haversine
from etell.utils.log import get_logger
from etell.utils.validate import (
    CoverageAnalysis,
    ExtenderRecommendation,
    ExtenderType,
    InsufficientData,
    PlacementResult,
    Sample,
    Session,
    SignalPredictionMap,
)

logger = get_logger(__name__)


class PlacementAnalyzer:
    """
    Stateless analyzer; one instance can serve any number of sessions.
    """
    def __init__(
        self,
        cfg: Optional[PlacementConfig] = None,
        distance: DistanceFn = haversine,
    ) -> None:
        self.cfg = cfg or PlacementConfig.default()
        self.distance = distance

    def analyze_optimal_placement(
        self, session: Session | Sequence[Sample]
    ) -> PlacementResult | InsufficientData:
        """
        Run every placement step over a session (or a bare list of samples).

        Returns
        -------
        PlacementResult, or InsufficientData when fewer than
        `cfg.min_samples` samples are available.
        """
        samples = list(session.samples if isinstance(session, Session) else session)
        if len(samples) < self.cfg.min_samples:
            logger.warning(
                "Need at least %d calibration points for analysis, got %d",
                self.cfg.min_samples, len(samples),
            )
            return InsufficientData(
                sample_count=len(samples),
                required=self.cfg.min_samples,
                message=(
                    f"Need at least {self.cfg.min_samples} calibration points "
                    f"for analysis, got {len(samples)}"
                ),
            )

        logger.info("Analyzing placement over %d samples", len(samples))
        router = self.find_optimal_router_location(samples)
        weak_spots = self.find_weak_spots(samples)
        extenders = self.generate_extender_recommendations(weak_spots, samples)
        logger.info(
            "Router at %s (score %.3f), %d weak spots, %d extenders",
            router.item.name, router.score, len(weak_spots), len(extenders),
        )
        return PlacementResult(
            optimal_router_location=router.item,
            router_score=router.score,
            extender_recommendations=extenders,
            coverage=self.analyze_coverage(samples),
            signal_prediction=self.generate_signal_prediction(samples, router.item),
        )

    # -- router -------------------------------------------------------------

    def find_optimal_router_location(self, samples: Sequence[Sample]) -> Scored[Sample]:
        """
        Sample with the highest composite score; the first one wins ties.
        """
        best = first_max(range(len(samples)), lambda i: self.location_score(i, samples))
        if best is None:
            raise ValueError("cannot place a router without samples")
        return Scored(samples[best.item], best.score)

    def location_score(self, index: int, samples: Sequence[Sample]) -> float:
        point = samples[index]
        score = (
            self.cfg.centrality_weight * self.centrality(index, samples)
            + self.cfg.height_weight * self.height_score(point, samples)
            + self.cfg.signal_weight * point.signal_strength
        )
        logger.debug("score %s = %.4f", point.name, score)
        return score

    def centrality(self, index: int, samples: Sequence[Sample]) -> float:
        """
        Centrality of `samples[index]` against every other sample.

        The point itself is excluded by index, so a duplicate position
        elsewhere in the list still counts as a neighbour.
        """
        others = [s.position for i, s in enumerate(samples) if i != index]
        return relative_centrality(samples[index].position, others, self.distance)

    def height_score(self, point: Sample, samples: Sequence[Sample]) -> float:
        """
        Prefer points slightly above the session's mean height.
        """
        ideal = mean([s.relative_height for s in samples]) + self.cfg.height_offset
        diff = abs(point.relative_height - ideal)
        return max(0.0, 1.0 - diff / self.cfg.height_tolerance)

    # -- extenders ----------------------------------------------------------

    def find_weak_spots(self, samples: Sequence[Sample]) -> list[Sample]:
        return [s for s in samples if s.signal_strength < self.cfg.weak_threshold]

    def generate_extender_recommendations(
        self, weak_spots: Sequence[Sample], samples: Sequence[Sample]
    ) -> list[ExtenderRecommendation]:
        """
        One recommendation per weak spot that has a strong sample to anchor on.

        Weak spots with no sample above `strong_threshold` get no
        recommendation at all.
        """
        strong = [s for s in samples if s.signal_strength > self.cfg.strong_threshold]
        recommendations: list[ExtenderRecommendation] = []
        for weak in weak_spots:
            nearest = first_max(strong, lambda s: -self.distance(weak.position, s.position))
            if nearest is None:
                logger.debug("No strong sample to anchor an extender for %s", weak.name)
                continue
            improvement = self.cfg.target_signal - weak.signal_strength
            recommendations.append(ExtenderRecommendation(
                location=weak.name,
                floor=weak.floor,
                reason=f"Weak signal ({int(weak.signal_strength * 100)}%) detected at {weak.name}",
                type=(
                    ExtenderType.ROOM_EXTENDER
                    if improvement > self.cfg.room_gap
                    else ExtenderType.HALLWAY_EXTENDER
                ),
                anchor=nearest.item.name,
            ))
        return recommendations

    # -- summaries ----------------------------------------------------------

    def analyze_coverage(self, samples: Sequence[Sample]) -> CoverageAnalysis:
        """
        Share of samples at or above `coverage_strong`, over all samples.
        """
        weak = [s for s in samples if s.signal_strength < self.cfg.coverage_weak]
        strong = [s for s in samples if s.signal_strength >= self.cfg.coverage_strong]
        pct = 100.0 * len(strong) / len(samples) if samples else 0.0
        return CoverageAnalysis(
            total=len(samples),
            well_covered=len(strong),
            weak_areas=len(weak),
            coverage_percentage=pct,
        )

    def generate_signal_prediction(
        self, samples: Sequence[Sample], router: Sample
    ) -> SignalPredictionMap:
        predictions: dict[str, float] = {}
        for s in samples:
            d = self.distance(router.position, s.position)
            lat, lon = s.position
            predictions[f"{lat},{lon}"] = max(
                self.cfg.min_prediction, 1.0 - d / self.cfg.max_range_m
            )
        return SignalPredictionMap(predictions=predictions, resolution=1.0)


def analyze_optimal_placement(
    session: Session | Sequence[Sample],
    cfg: Optional[PlacementConfig] = None,
    distance: DistanceFn = haversine,
) -> PlacementResult | InsufficientData:
    """
    Convenience wrapper around `PlacementAnalyzer.analyze_optimal_placement`.
    """
    return PlacementAnalyzer(cfg, distance).analyze_optimal_placement(session)
