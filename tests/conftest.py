"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database, a session bound to it and
factories for patients, doctors and appointments. Appointments built by the
factory bypass the scheduling rules so tests can set up full days.
"""

import itertools
import os
from datetime import date

# Ensure test environment before the package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_scheduling.database import Base, get_db
from clinic_scheduling.main import app
from clinic_scheduling.models import (
    Appointment,
    AppointmentState,
    Doctor,
    DoctorAppointment,
    Patient,
    PatientAppointment,
)
from clinic_scheduling.shared.validators import combine_date_time

_sequence = itertools.count(1)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_patient(db_session):
    def _make_patient(**overrides) -> Patient:
        n = next(_sequence)
        data = {
            "name": f"Patient{n}",
            "surname": "Gomez",
            "national_id": f"{30000000 + n}",
            "coverage_name": "OSDE",
        }
        data.update(overrides)
        patient = Patient(**data)
        db_session.add(patient)
        db_session.commit()
        return patient

    return _make_patient


@pytest.fixture
def make_doctor(db_session):
    def _make_doctor(**overrides) -> Doctor:
        n = next(_sequence)
        data = {
            "name": f"Doctor{n}",
            "surname": "Perez",
            "specialty": "Cardiology",
            "license_number": f"MN-{n}",
            "active": True,
            "max_daily_appointments": 20,
            "schedule": [],
        }
        data.update(overrides)
        doctor = Doctor(**data)
        db_session.add(doctor)
        db_session.commit()
        return doctor

    return _make_doctor


@pytest.fixture
def make_appointment(db_session):
    def _make_appointment(
        patient: Patient,
        doctor: Doctor,
        day: date,
        time_of_day: str,
        state: str = AppointmentState.CONFIRMED.value,
    ) -> Appointment:
        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            scheduled_at=combine_date_time(day, time_of_day),
            time=time_of_day,
            specialty=doctor.specialty,
            state=state,
        )
        db_session.add(appointment)
        db_session.flush()
        patient.appointment_refs.append(PatientAppointment(appointment_id=appointment.id))
        doctor.appointment_refs.append(DoctorAppointment(appointment_id=appointment.id))
        db_session.commit()
        return appointment

    return _make_appointment


@pytest.fixture
def fill_day(make_appointment, make_patient):
    """Book `count` appointments for a doctor on one day, hourly from 08:00"""

    def _fill_day(doctor: Doctor, day: date, count: int, state: str = "confirmed") -> list:
        patient = make_patient()
        return [
            make_appointment(patient, doctor, day, f"{8 + i:02d}:00", state=state)
            for i in range(count)
        ]

    return _fill_day
