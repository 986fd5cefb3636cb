"""Appointment repository - Database operations for appointments and their back-references"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import (
    Appointment,
    AppointmentState,
    Doctor,
    DoctorAppointment,
    Patient,
    PatientAppointment,
)


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointment_by_id(
        db: Session, appointment_id: int, populate: bool = False
    ) -> Optional[Appointment]:
        """Get an appointment, optionally with patient and doctor eagerly loaded"""
        query = db.query(Appointment).filter(Appointment.id == appointment_id)
        if populate:
            query = query.options(joinedload(Appointment.patient), joinedload(Appointment.doctor))
        return query.first()

    @staticmethod
    def find_slot_holder(
        db: Session,
        doctor_id: int,
        scheduled_at: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        """Return a non-cancelled appointment occupying the doctor's exact slot, if any"""
        query = db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_at == scheduled_at,
            Appointment.state != AppointmentState.CANCELLED.value,
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return query.first()

    @staticmethod
    def count_in_window(
        db: Session,
        doctor_id: int,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[int] = None,
        states: Optional[Iterable[str]] = None,
    ) -> int:
        """Count a doctor's appointments with start <= scheduled_at <= end"""
        query = db.query(func.count(Appointment.id)).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_at >= start,
            Appointment.scheduled_at <= end,
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        if states is not None:
            query = query.filter(Appointment.state.in_(list(states)))
        return query.scalar()

    @staticmethod
    def add_appointment(db: Session, **appointment_data) -> Appointment:
        """Stage a new appointment and flush it so it gets an id"""
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    # Back-reference lists
    @staticmethod
    def link_patient(db: Session, patient: Patient, appointment_id: int) -> None:
        """Append the appointment to the patient's list unless it is already there"""
        if appointment_id not in patient.appointment_ids:
            patient.appointment_refs.append(PatientAppointment(appointment_id=appointment_id))
            db.flush()

    @staticmethod
    def unlink_patient(db: Session, patient: Patient, appointment_id: int) -> None:
        for ref in list(patient.appointment_refs):
            if ref.appointment_id == appointment_id:
                patient.appointment_refs.remove(ref)
        db.flush()

    @staticmethod
    def link_doctor(db: Session, doctor: Doctor, appointment_id: int) -> None:
        """Append the appointment to the doctor's list unless it is already there"""
        if appointment_id not in doctor.appointment_ids:
            doctor.appointment_refs.append(DoctorAppointment(appointment_id=appointment_id))
            db.flush()

    @staticmethod
    def unlink_doctor(db: Session, doctor: Doctor, appointment_id: int) -> None:
        for ref in list(doctor.appointment_refs):
            if ref.appointment_id == appointment_id:
                doctor.appointment_refs.remove(ref)
        db.flush()

    # Listing
    @staticmethod
    def search_appointments(
        db: Session,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[int, list[Appointment]]:
        """
        Filter appointments and return (total matching, requested page).
        Results are ordered by scheduled date ascending.
        """
        query = db.query(Appointment)

        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if start is not None:
            query = query.filter(Appointment.scheduled_at >= start)
        if end is not None:
            query = query.filter(Appointment.scheduled_at <= end)

        total = query.count()
        items = (
            query.options(joinedload(Appointment.patient), joinedload(Appointment.doctor))
            .order_by(Appointment.scheduled_at.asc(), Appointment.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return total, items
