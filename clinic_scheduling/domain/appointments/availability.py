"""
Availability Checker

Answers the two questions the scheduler asks before writing:
- is the doctor already booked at an exact date and time?
- how many appointments does the doctor hold on a calendar day?

Both are read-only pre-checks run inside the caller's transaction.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional, Union

from sqlalchemy.orm import Session

from ...shared.validators import combine_date_time
from .repository import AppointmentRepository

END_OF_DAY = time(23, 59, 59, 999000)


def day_window(day: Union[date, datetime]) -> tuple[datetime, datetime]:
    """
    Return the [00:00:00.000, 23:59:59.999] window of a calendar day.

    Args:
        day: a date, or a datetime whose calendar day is used
    """
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min), datetime.combine(day, END_OF_DAY)


class AvailabilityChecker:
    """Stateless slot and daily-load checks for a doctor"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def is_slot_free(
        self,
        doctor_id: int,
        day: date,
        time_of_day: Union[str, time],
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        """
        True if no other non-cancelled appointment holds the doctor's exact (day, time) slot.

        Args:
            doctor_id: doctor to check
            day: calendar day of the slot
            time_of_day: "HH:MM" or datetime.time
            exclude_appointment_id: appointment being edited, ignored by the check
        """
        scheduled_at = combine_date_time(day, time_of_day)
        holder = self.repo.find_slot_holder(
            self.db,
            doctor_id,
            scheduled_at,
            exclude_appointment_id=exclude_appointment_id,
        )
        return holder is None

    def daily_load(
        self,
        doctor_id: int,
        day: Union[date, datetime],
        exclude_appointment_id: Optional[int] = None,
        states: Optional[Iterable[str]] = None,
    ) -> int:
        """
        Count the doctor's appointments on the calendar day of `day`.

        Args:
            states: only count appointments in these states; every state when None
        """
        start, end = day_window(day)
        return self.repo.count_in_window(
            self.db,
            doctor_id,
            start,
            end,
            exclude_appointment_id=exclude_appointment_id,
            states=states,
        )
