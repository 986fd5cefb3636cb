"""Appointment service - Scheduling, re-scheduling and listing of appointments"""

import logging
import math
from datetime import date, time
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...config import (
    CREATE_DAILY_CAP,
    DEFAULT_PAGE_SIZE,
    EDIT_DAILY_CAP,
    REQUIRE_ACTIVE_DOCTOR_ON_CREATE,
)
from ...database import transaction
from ...models import Appointment, AppointmentState, Doctor
from ...shared.errors import (
    CapacityExceeded,
    DoctorInactive,
    InvalidPagination,
    NotFound,
    SlotConflict,
)
from ...shared.validators import combine_date_time, validate_time_of_day
from ..directory.repository import DoctorRepository, PatientRepository
from .availability import AvailabilityChecker, day_window
from .repository import AppointmentRepository
from .schemas import AppointmentPage, AppointmentPatch, AppointmentResponse

logger = logging.getLogger(__name__)


def _positive_int(value: Union[int, str, None]) -> Optional[int]:
    """Parse a pagination parameter, returning None when it is not a positive integer"""
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if isinstance(value, float) and value != number:
        return None
    return number if number > 0 else None


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.patients = PatientRepository()
        self.doctors = DoctorRepository()
        self.availability = AvailabilityChecker(db)

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_appointment(self, appointment_id: int) -> Appointment:
        """Get an appointment with its patient and doctor loaded"""
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, populate=True)
        if not appointment:
            raise NotFound("Appointment not found")
        return appointment

    def list_appointments(
        self,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        day: Optional[date] = None,
        page: Union[int, str] = 1,
        page_size: Union[int, str] = DEFAULT_PAGE_SIZE,
    ) -> AppointmentPage:
        """
        List appointments filtered by patient, doctor and calendar day.

        Page numbers start at 1. An empty match returns an empty page.
        """
        page_number = _positive_int(page)
        if page_number is None:
            raise InvalidPagination("Invalid page number")
        limit = _positive_int(page_size)
        if limit is None:
            raise InvalidPagination("Invalid page size")

        if patient_id is not None and not self.patients.get_patient_by_id(self.db, patient_id):
            raise NotFound("Patient not found")
        if doctor_id is not None and not self.doctors.get_doctor_by_id(self.db, doctor_id):
            raise NotFound("Doctor not found")

        start = end = None
        if day is not None:
            start, end = day_window(day)

        total, items = self.repo.search_appointments(
            self.db,
            patient_id=patient_id,
            doctor_id=doctor_id,
            start=start,
            end=end,
            offset=(page_number - 1) * limit,
            limit=limit,
        )

        return AppointmentPage(
            items=[AppointmentResponse.model_validate(a) for a in items],
            total=total,
            total_pages=math.ceil(total / limit),
            page=page_number,
        )

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def create_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        day: date,
        time_of_day: Union[str, time],
        state: Optional[Union[AppointmentState, str]] = None,
    ) -> Appointment:
        """
        Book a doctor for a patient at an exact date and time.

        The capacity check, the slot check, the insert and both back-reference
        links run in one transaction, with the doctor row locked.
        """
        state = AppointmentState(state or AppointmentState.CONFIRMED).value
        time_of_day = validate_time_of_day(time_of_day)
        scheduled_at = combine_date_time(day, time_of_day)

        logger.info(
            f"📥 Creating appointment patient={patient_id} doctor={doctor_id} at {scheduled_at:%Y-%m-%d %H:%M}"
        )

        with transaction(self.db):
            patient = self.patients.get_patient_by_id(self.db, patient_id)
            if not patient:
                raise NotFound("Patient not found")

            doctor = self.doctors.get_doctor_by_id(self.db, doctor_id, for_update=True)
            if not doctor:
                raise NotFound("Doctor not found")
            if REQUIRE_ACTIVE_DOCTOR_ON_CREATE and not doctor.active:
                raise DoctorInactive()

            cap = self._daily_cap(doctor, CREATE_DAILY_CAP)
            confirmed = self.availability.daily_load(
                doctor.id, scheduled_at, states=[AppointmentState.CONFIRMED.value]
            )
            if confirmed >= cap:
                logger.warning(
                    f"⚠️ Doctor {doctor.id} already has {confirmed} confirmed appointment(s) on {scheduled_at:%Y-%m-%d}"
                )
                raise CapacityExceeded(
                    f"The doctor already has {cap} confirmed appointments on that date"
                )

            if not self.availability.is_slot_free(doctor.id, day, time_of_day):
                logger.warning(f"⚠️ Doctor {doctor.id} is already booked at {scheduled_at}")
                raise SlotConflict()

            appointment = self.repo.add_appointment(
                self.db,
                patient_id=patient.id,
                doctor_id=doctor.id,
                scheduled_at=scheduled_at,
                time=time_of_day,
                specialty=doctor.specialty,
                state=state,
            )
            self.repo.link_patient(self.db, patient, appointment.id)
            self.repo.link_doctor(self.db, doctor, appointment.id)

        logger.info(f"✅ Appointment {appointment.id} created ({state})")
        return self.get_appointment(appointment.id)

    def edit_appointment(
        self, appointment_id: int, patch: Union[AppointmentPatch, dict]
    ) -> Appointment:
        """
        Re-schedule or re-assign an appointment.

        Order of work inside the transaction:
        1. Load the appointment
        2. Resolve the effective slot (patched or current date/time and doctor)
        3. Reject if another non-cancelled appointment holds that exact slot, unless
           the edited appointment itself ends up cancelled
        4. Reject if the doctor's day is full
        5. Move the appointment between patients' lists when the patient changes
        6. Move it between doctors' lists when the doctor changes (doctor must be active)
        7. Apply date/time and state
        Any failure rolls back every change, including the list moves.
        """
        if isinstance(patch, dict):
            patch = AppointmentPatch.from_payload(patch)
        changes = {
            field: getattr(patch, field)
            for field in patch.model_fields_set
            if getattr(patch, field) is not None
        }

        logger.info(f"✏️ Editing appointment {appointment_id}: {sorted(changes)}")

        with transaction(self.db):
            # 1. Load
            appointment = self.repo.get_appointment_by_id(self.db, appointment_id, populate=True)
            if not appointment:
                raise NotFound("Appointment not found")

            # 2. Effective slot
            if "date" in changes:
                new_time = changes["time"]
                new_scheduled_at = combine_date_time(changes["date"], new_time)
            else:
                new_time = appointment.time
                new_scheduled_at = appointment.scheduled_at
            target_doctor_id = changes.get("doctor", appointment.doctor_id)

            locked = self.doctors.lock_doctors(
                self.db, {appointment.doctor_id, target_doctor_id}
            )

            # 3. Slot conflict, a cancelled appointment holds no slot
            new_state = AppointmentState(changes.get("state", appointment.state)).value
            holds_slot = new_state != AppointmentState.CANCELLED.value
            if holds_slot and not self.availability.is_slot_free(
                target_doctor_id,
                new_scheduled_at.date(),
                new_time,
                exclude_appointment_id=appointment.id,
            ):
                logger.warning(
                    f"⚠️ Doctor {target_doctor_id} already has an appointment at {new_scheduled_at}"
                )
                raise SlotConflict()

            # 4. Daily cap, every state counts
            target_doctor = locked.get(target_doctor_id)
            cap = self._daily_cap(target_doctor, EDIT_DAILY_CAP) if target_doctor else EDIT_DAILY_CAP
            load = self.availability.daily_load(
                target_doctor_id, new_scheduled_at, exclude_appointment_id=appointment.id
            )
            if load >= cap:
                logger.warning(
                    f"⚠️ Doctor {target_doctor_id} already has {load} appointment(s) on {new_scheduled_at:%Y-%m-%d}"
                )
                raise CapacityExceeded(f"The doctor already has {cap} appointments on that day")

            # 5. Patient re-assignment
            new_patient_id = changes.get("patient")
            if new_patient_id is not None and new_patient_id != appointment.patient_id:
                new_patient = self.patients.get_patient_by_id(self.db, new_patient_id)
                if not new_patient:
                    raise NotFound("Patient not found")
                self.repo.unlink_patient(self.db, appointment.patient, appointment.id)
                self.repo.link_patient(self.db, new_patient, appointment.id)
                appointment.patient = new_patient

            # 6. Doctor re-assignment
            if "doctor" in changes and target_doctor_id != appointment.doctor_id:
                if not target_doctor:
                    raise NotFound("Doctor not found")
                if not target_doctor.active:
                    logger.warning(f"⚠️ Doctor {target_doctor_id} is inactive")
                    raise DoctorInactive("Doctor not found or inactive")
                self.repo.unlink_doctor(self.db, appointment.doctor, appointment.id)
                self.repo.link_doctor(self.db, target_doctor, appointment.id)
                appointment.doctor = target_doctor
                appointment.specialty = target_doctor.specialty

            # 7. Slot and state
            if "date" in changes:
                appointment.scheduled_at = new_scheduled_at
                appointment.time = new_time
            appointment.state = new_state

            self.db.flush()

        logger.info(f"✅ Appointment {appointment_id} updated")
        return self.get_appointment(appointment_id)

    @staticmethod
    def _daily_cap(doctor: Doctor, operational_cap: int) -> int:
        """The stricter of the operational cap and the doctor's own daily maximum"""
        if doctor.max_daily_appointments:
            return min(operational_cap, doctor.max_daily_appointments)
        return operational_cap
