"""Domain errors raised before anything is written to the database"""


class BarberProError(Exception):
    """Base class for user-facing domain errors"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(BarberProError):
    """Missing required field, malformed input or no services selected"""

    status_code = 400


class SchedulingConflict(BarberProError):
    """Candidate interval overlaps a non-cancelled appointment on the same day"""

    status_code = 409

    def __init__(self, message: str, conflicting_ids: list[str] | None = None):
        super().__init__(message)
        self.conflicting_ids = conflicting_ids or []
