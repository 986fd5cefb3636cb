"""Directory service - Patient and doctor registration, updates and doctor activation"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...config import DEFAULT_DOCTOR_DAILY_MAX
from ...database import transaction
from ...models import Doctor, Patient
from ...shared.errors import DoctorHasUpcomingAppointments, DuplicateKey, NotFound
from .repository import DoctorRepository, PatientRepository
from .schemas import DoctorCreate, DoctorUpdate, PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)


class DirectoryService:
    """Service layer for the patient and doctor records the scheduler depends on"""

    def __init__(self, db: Session):
        self.db = db
        self.patients = PatientRepository()
        self.doctors = DoctorRepository()

    def get_patient(self, patient_id: int) -> Patient:
        patient = self.patients.get_patient_by_id(self.db, patient_id)
        if not patient:
            raise NotFound("Patient not found")
        return patient

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.doctors.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")
        return doctor

    def register_patient(self, data: PatientCreate) -> Patient:
        """Register a patient; the national ID must be unique"""
        logger.info(f"📥 Registering patient with national ID {data.national_id}")

        with transaction(self.db):
            if self.patients.get_patient_by_national_id(self.db, data.national_id):
                logger.warning(f"⚠️ Duplicate patient national ID {data.national_id}")
                raise DuplicateKey("A patient with that national ID already exists")

            patient = self.patients.add_patient(
                self.db,
                name=data.name,
                surname=data.surname,
                national_id=data.national_id,
                coverage_name=data.coverage_name,
            )

        self.db.refresh(patient)
        return patient

    def register_doctor(self, data: DoctorCreate) -> Doctor:
        """Register a doctor; the license number must be unique"""
        logger.info(f"📥 Registering doctor with license {data.license_number}")

        with transaction(self.db):
            if self.doctors.get_doctor_by_license(self.db, data.license_number):
                logger.warning(f"⚠️ Duplicate doctor license {data.license_number}")
                raise DuplicateKey("A doctor with that license number already exists")

            doctor = self.doctors.add_doctor(
                self.db,
                name=data.name,
                surname=data.surname,
                specialty=data.specialty,
                license_number=data.license_number,
                phone=data.phone,
                email=data.email,
                schedule=[window.model_dump() for window in data.schedule],
                active=data.active,
                max_daily_appointments=data.max_daily_appointments or DEFAULT_DOCTOR_DAILY_MAX,
                notes=data.notes,
            )

        self.db.refresh(doctor)
        return doctor

    def update_patient(self, patient_id: int, data: PatientUpdate) -> Patient:
        """Update a patient; a changed national ID must not belong to another patient"""
        with transaction(self.db):
            patient = self.get_patient(patient_id)

            if data.national_id and data.national_id != patient.national_id:
                if self.patients.get_patient_by_national_id(self.db, data.national_id):
                    logger.warning(f"⚠️ Duplicate patient national ID {data.national_id}")
                    raise DuplicateKey("A patient with that national ID already exists")

            self.patients.update_patient(
                self.db,
                patient,
                name=data.name,
                surname=data.surname,
                national_id=data.national_id,
                coverage_name=data.coverage_name,
            )

        logger.info(f"✅ Patient {patient_id} updated")
        self.db.refresh(patient)
        return patient

    def update_doctor(self, doctor_id: int, data: DoctorUpdate) -> Doctor:
        """
        Update a doctor.

        A changed license number must not belong to another doctor, an empty
        schedule keeps the current one, and deactivation goes through the same
        upcoming-appointments guard as set_doctor_active.
        """
        with transaction(self.db):
            doctor = self.doctors.get_doctor_by_id(self.db, doctor_id, for_update=True)
            if not doctor:
                raise NotFound("Doctor not found")

            if data.license_number and data.license_number != doctor.license_number:
                if self.doctors.get_doctor_by_license(self.db, data.license_number):
                    logger.warning(f"⚠️ Duplicate doctor license {data.license_number}")
                    raise DuplicateKey("A doctor with that license number already exists")

            if data.active is False:
                self._ensure_can_deactivate(doctor)

            self.doctors.update_doctor(
                self.db,
                doctor,
                name=data.name,
                surname=data.surname,
                specialty=data.specialty,
                license_number=data.license_number,
                phone=data.phone,
                email=data.email,
                schedule=[window.model_dump() for window in data.schedule] if data.schedule else None,
                active=data.active,
                max_daily_appointments=data.max_daily_appointments,
                notes=data.notes,
            )

        logger.info(f"✅ Doctor {doctor_id} updated")
        self.db.refresh(doctor)
        return doctor

    def set_doctor_active(self, doctor_id: int, active: bool) -> Doctor:
        """
        Enable or disable a doctor.

        A doctor holding future pending or confirmed appointments cannot be disabled.
        """
        with transaction(self.db):
            doctor = self.doctors.get_doctor_by_id(self.db, doctor_id, for_update=True)
            if not doctor:
                raise NotFound("Doctor not found")

            if not active:
                self._ensure_can_deactivate(doctor)

            doctor.active = active

        logger.info(f"✅ Doctor {doctor_id} active={active}")
        self.db.refresh(doctor)
        return doctor

    def _ensure_can_deactivate(self, doctor: Doctor) -> None:
        if not doctor.active:
            return
        upcoming = self.doctors.count_upcoming_appointments(self.db, doctor.id, datetime.now())
        if upcoming > 0:
            logger.warning(
                f"⚠️ Doctor {doctor.id} has {upcoming} upcoming appointment(s), not deactivating"
            )
            raise DoctorHasUpcomingAppointments()
