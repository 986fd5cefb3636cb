"""Directory repository - Database operations for patients and doctors"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentState, Doctor, Patient


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def get_patient_by_id(db: Session, patient_id: int) -> Optional[Patient]:
        return db.query(Patient).filter(Patient.id == patient_id).first()

    @staticmethod
    def get_patient_by_national_id(db: Session, national_id: str) -> Optional[Patient]:
        return db.query(Patient).filter(Patient.national_id == national_id).first()

    @staticmethod
    def add_patient(db: Session, **patient_data) -> Patient:
        """Stage a new patient; the caller's transaction commits it"""
        patient = Patient(**patient_data)
        db.add(patient)
        db.flush()
        return patient

    @staticmethod
    def update_patient(db: Session, patient: Patient, **updates) -> Patient:
        """Update a patient with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(patient, key):
                setattr(patient, key, value)
        db.flush()
        return patient


class DoctorRepository:
    """Repository for doctor database operations"""

    @staticmethod
    def get_doctor_by_id(db: Session, doctor_id: int, for_update: bool = False) -> Optional[Doctor]:
        """Get a doctor, optionally locking its row until the transaction ends"""
        query = db.query(Doctor).filter(Doctor.id == doctor_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def lock_doctors(db: Session, doctor_ids: Iterable[int]) -> dict[int, Doctor]:
        """Lock several doctor rows in id order and return them keyed by id"""
        ids = sorted(set(doctor_ids))
        doctors = db.query(Doctor).filter(Doctor.id.in_(ids)).order_by(Doctor.id).with_for_update().all()
        return {doctor.id: doctor for doctor in doctors}

    @staticmethod
    def get_doctor_by_license(db: Session, license_number: str) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.license_number == license_number).first()

    @staticmethod
    def add_doctor(db: Session, **doctor_data) -> Doctor:
        """Stage a new doctor; the caller's transaction commits it"""
        doctor = Doctor(**doctor_data)
        db.add(doctor)
        db.flush()
        return doctor

    @staticmethod
    def update_doctor(db: Session, doctor: Doctor, **updates) -> Doctor:
        """Update a doctor with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(doctor, key):
                setattr(doctor, key, value)
        db.flush()
        return doctor

    @staticmethod
    def count_upcoming_appointments(db: Session, doctor_id: int, now: datetime) -> int:
        """Count future appointments of a doctor that are still pending or confirmed"""
        return (
            db.query(func.count(Appointment.id))
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.scheduled_at > now,
                Appointment.state.in_(
                    [AppointmentState.PENDING.value, AppointmentState.CONFIRMED.value]
                ),
            )
            .scalar()
        )
