"""Exception hierarchy for the etell toolkit.

Analysis outcomes such as "not enough samples" are returned as values; these
exceptions cover misuse by the host flow (capturing without a session,
editing a room that does not exist, asking storage for an unknown session).
"""

from __future__ import annotations


class EtellError(Exception):
    """Base exception for all etell errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SessionError(EtellError):
    """Base class for calibration session errors."""
    pass


class SessionNotActiveError(SessionError):
    """Raised when capturing a sample with no open calibration session."""
    pass


class SessionNotFoundError(SessionError):
    """Raised when a stored session id is unknown."""
    pass


class LayoutError(EtellError):
    """Base class for layout editor errors."""
    pass


class RoomNotFoundError(LayoutError):
    """Raised when a room id does not exist on the current floor."""
    pass


class FloorNotFoundError(LayoutError):
    """Raised when switching to a floor the layout does not have."""
    pass


class SessionExistsError(SessionError):
    """Raised when storing a session whose id is already stored."""
    pass


class DuplicateSampleError(SessionError):
    """Raised when appending a sample id the session already holds."""
    pass
