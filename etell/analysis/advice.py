"""
Plain-language placement advice shown alongside the analyses.
"""

from typing import Optional

from etell.utils.validate import (
    CalibrationSetup,
    EnvironmentType,
    LocationAdvice,
    LocationType,
    Session,
    SessionAdvice,
)
from etell.analysis.editor import infer_location_type


def setup_recommendations(setup: Optional[CalibrationSetup]) -> list[str]:
    """
    General advice from the setup questionnaire answers.
    """
    if setup is None:
        return []
    recs: list[str] = []

    match setup.environment_type:
        case EnvironmentType.HOUSE:
            recs.append("Place router on the main floor for best coverage")
            if (setup.number_of_floors or 0) > 1:
                recs.append("Consider a mesh system for multi-floor coverage")
        case EnvironmentType.APARTMENT:
            recs.append("Central placement works best in apartments")
            recs.append("Avoid placing router near neighboring units")
        case EnvironmentType.OFFICE:
            recs.append("Position router away from conference rooms")
            recs.append("Consider business-grade equipment for offices")

    if setup.number_of_floors is not None and setup.number_of_floors > 2:
        recs.append("Three-floor setup may need signal boosters")

    if setup.has_hallways is True:
        recs.append("Place router with clear line-of-sight to hallways")
        recs.append("Avoid corners and closed spaces")
    elif setup.has_hallways is False:
        recs.append("Open floor plan allows flexible router placement")

    return recs


def location_recommendations(loc_type: LocationType, signal: float, floor: int) -> list[str]:
    """
    Advice for a single calibrated location.
    """
    recs: list[str] = []
    if signal < 0.3:
        recs.append("Poor signal - Consider WiFi extender")
    elif signal < 0.6:
        recs.append("Moderate signal - May need signal boost")
    elif signal < 0.8:
        recs.append("Good signal strength")
    else:
        recs.append("Excellent signal strength")

    match loc_type:
        case LocationType.ROOM:
            if signal < 0.5:
                recs.append("Consider mesh node in this room")
        case LocationType.HALLWAY:
            recs.append("Strategic location for WiFi extender")
        case LocationType.STAIRCASE:
            recs.append("Important transition point - consider coverage")

    if floor > 1 and signal < 0.6:
        recs.append("Upper floor may need dedicated access point")
    return recs


def session_advice(session: Session) -> SessionAdvice:
    return SessionAdvice(
        setup=setup_recommendations(session.setup),
        locations=[
            LocationAdvice(
                sample_id=s.id,
                name=s.name,
                recommendations=location_recommendations(
                    infer_location_type(s.name), s.signal_strength, s.floor
                ),
            )
            for s in session.samples
        ],
    )
