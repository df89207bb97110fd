"""
Router and extender placement over a user-arranged floor plan.

Each floor is analysed on its own; results are concatenated in floor order.
Rooms are canvas rectangles, so every distance here is planar.
"""

from __future__ import annotations

from typing import Optional, Sequence

from etell.analysis.config import LayoutConfig
from etell.analysis.scoring import first_max, range_centrality
from etell.analysis.types import ExtenderSite
from etell.utils.geo import euclidean, midpoint
from etell.utils.log import get_logger
from etell.utils.validate import (
    CoverageAnalysis,
    FloorLayout,
    LayoutExtenderRecommendation,
    LayoutResult,
    LocationType,
    Room,
    RouterRecommendation,
)

logger = get_logger(__name__)


class LayoutAnalyzer:
    """
    Scores rooms on each floor for router placement and finds extender spots
    between weak rooms and their better-covered neighbours.
    """
    def __init__(self, cfg: Optional[LayoutConfig] = None) -> None:
        self.cfg = cfg or LayoutConfig.default()

    def analyze(self, floors: Sequence[FloorLayout]) -> LayoutResult:
        logger.info("Analyzing layout over %d floors", len(floors))
        routers: list[RouterRecommendation] = []
        extenders: list[LayoutExtenderRecommendation] = []
        for floor in floors:
            router = self.find_optimal_router_position(floor)
            if router is not None:
                routers.append(router)
            extenders.extend(self.find_optimal_extender_positions(floor))
        return LayoutResult(
            router_recommendations=routers,
            extender_recommendations=extenders,
            coverage=self.analyze_coverage(floors),
        )

    # -- router -------------------------------------------------------------

    def centrality(self, room: Room, floor: FloorLayout) -> float:
        others = [r.center for r in floor.rooms if r.id != room.id]
        return range_centrality(room.center, others, euclidean, self.cfg.centrality_range)

    def room_score(self, room: Room, floor: FloorLayout) -> float:
        type_score = self.cfg.room_bonus if room.type == LocationType.ROOM else 0.0
        score = (
            self.cfg.centrality_weight * self.centrality(room, floor)
            + self.cfg.signal_weight * room.signal_strength
            + self.cfg.type_weight * type_score
        )
        logger.debug("score %s (floor %d) = %.4f", room.name, floor.floor, score)
        return score

    def find_optimal_router_position(self, floor: FloorLayout) -> Optional[RouterRecommendation]:
        """
        Best router room on `floor`, or None when the floor has no rooms.
        """
        best = first_max(floor.rooms, lambda r: self.room_score(r, floor))
        if best is None:
            logger.debug("Floor %d has no rooms", floor.floor)
            return None
        room = best.item
        return RouterRecommendation(
            floor=floor.floor,
            room=room,
            position=room.position,
            score=best.score,
            reasoning=self._router_reasoning(room, best.score),
        )

    def _router_reasoning(self, room: Room, score: float) -> str:
        reasons: list[str] = []
        if score > 0.8:
            reasons.append("Central location with excellent coverage potential")
        elif score > 0.6:
            reasons.append("Good central position")
        if room.signal_strength > 0.7:
            reasons.append("Strong existing signal strength")
        if room.type == LocationType.ROOM:
            reasons.append("Main living area suitable for router placement")
        return " • ".join(reasons)

    # -- extenders ----------------------------------------------------------

    def find_extender_site(self, weak: Room, floor: FloorLayout) -> Optional[ExtenderSite]:
        """
        Midpoint between `weak` and its strongest adjacent room, provided that
        room has a strictly better signal.
        """
        neighbour_ids = floor.adjacency.get(weak.id, set())
        candidates = [
            r for r in floor.rooms
            if r.id in neighbour_ids and r.signal_strength > weak.signal_strength
        ]
        best = first_max(candidates, lambda r: r.signal_strength)
        if best is None:
            return None
        return ExtenderSite(midpoint(weak.position, best.item.position), best.item.id)

    def find_optimal_extender_positions(
        self, floor: FloorLayout
    ) -> list[LayoutExtenderRecommendation]:
        extenders: list[LayoutExtenderRecommendation] = []
        for weak in floor.rooms:
            if weak.signal_strength >= self.cfg.weak_threshold:
                continue
            site = self.find_extender_site(weak, floor)
            if site is None:
                logger.debug("No better-covered neighbour for %s", weak.name)
                continue
            anchor = floor.room(site.anchor_id)
            extenders.append(LayoutExtenderRecommendation(
                floor=floor.floor,
                target_room=weak,
                recommended_position=site.position,
                placement_room=anchor,
                signal_improvement=min(1.0, weak.signal_strength + self.cfg.extender_boost),
                reasoning=(
                    f"Weak signal area ({int(weak.signal_strength * 100)}%)"
                    f" • Placement near {anchor.name} ({int(anchor.signal_strength * 100)}% signal)"
                ),
            ))
        return extenders

    # -- summary ------------------------------------------------------------

    def analyze_coverage(self, floors: Sequence[FloorLayout]) -> CoverageAnalysis:
        rooms = [r for floor in floors for r in floor.rooms]
        strong = sum(1 for r in rooms if r.signal_strength >= self.cfg.coverage_strong)
        weak = sum(1 for r in rooms if r.signal_strength < self.cfg.coverage_weak)
        return CoverageAnalysis(
            total=len(rooms),
            well_covered=strong,
            weak_areas=weak,
            coverage_percentage=100.0 * strong / len(rooms) if rooms else 0.0,
        )


def analyze_layout(
    floors: Sequence[FloorLayout], cfg: Optional[LayoutConfig] = None
) -> LayoutResult:
    """
    Convenience wrapper around `LayoutAnalyzer.analyze`.
    """
    return LayoutAnalyzer(cfg).analyze(floors)
