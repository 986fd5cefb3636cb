"""Scheduling error kinds and their HTTP status codes"""


class SchedulingError(Exception):
    """Base class for every failure surfaced to callers of the scheduling core"""

    status_code = 500
    default_message = "Scheduling request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFound(SchedulingError):
    """Raised when a referenced patient, doctor or appointment does not exist"""

    status_code = 404
    default_message = "Resource not found"


class InvalidUpdate(SchedulingError):
    """Raised when an appointment patch carries a field that cannot be edited"""

    status_code = 400
    default_message = "Invalid appointment update"


class InvalidPagination(SchedulingError):
    status_code = 400
    default_message = "Invalid pagination parameters"


class InvalidFilter(SchedulingError):
    status_code = 400
    default_message = "Invalid listing filter"


class SlotConflict(SchedulingError):
    """Raised when the doctor is already booked at the exact date and time"""

    status_code = 422
    default_message = "The doctor already has an appointment at that date and time"


class CapacityExceeded(SchedulingError):
    """Raised when the doctor reached the daily appointment cap"""

    status_code = 422
    default_message = "The doctor reached the daily appointment limit"


class DoctorInactive(SchedulingError):
    status_code = 400
    default_message = "The doctor is not active"


class DuplicateKey(SchedulingError):
    """Raised when a unique constraint is violated at the store"""

    status_code = 422
    default_message = "A record with that key already exists"


class DoctorHasUpcomingAppointments(SchedulingError):
    """Raised when deactivating a doctor who still has pending or confirmed future appointments"""

    status_code = 422
    default_message = "The doctor has upcoming appointments and cannot be deactivated"


class StoreFailure(SchedulingError):
    """Raised for persistence errors that are not constraint violations"""

    status_code = 500
    default_message = "Database operation failed"
