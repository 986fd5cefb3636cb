import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .config import DEFAULT_DOCTOR_DAILY_MAX
from .database import Base


class AppointmentState(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    surname = Column(String(255), nullable=False)
    national_id = Column(String(20), unique=True, index=True, nullable=False)
    coverage_name = Column(String(255), nullable=False)  # Medical coverage / insurer

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Back-reference list, ordered by link insertion
    appointment_refs = relationship(
        "PatientAppointment",
        back_populates="patient",
        order_by="PatientAppointment.id",
        cascade="all, delete-orphan",
    )

    @property
    def appointment_ids(self) -> list[int]:
        return [ref.appointment_id for ref in self.appointment_refs]


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    surname = Column(String(255), nullable=False)
    specialty = Column(String(255), nullable=False, index=True)
    license_number = Column(String(50), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    # [{"day": "Monday", "start": "09:00", "end": "13:00"}, ...] - informational only
    schedule = Column(JSON, default=list, nullable=False)
    active = Column(Boolean, default=True, nullable=False)  # Disable doctors without deleting them
    max_daily_appointments = Column(Integer, default=DEFAULT_DOCTOR_DAILY_MAX, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointment_refs = relationship(
        "DoctorAppointment",
        back_populates="doctor",
        order_by="DoctorAppointment.id",
        cascade="all, delete-orphan",
    )

    @property
    def appointment_ids(self) -> list[int]:
        return [ref.appointment_id for ref in self.appointment_refs]


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)

    # Scheduling
    scheduled_at = Column(DateTime, nullable=False, index=True)  # Date combined with time
    time = Column(String(5), nullable=False)  # HH:MM format
    specialty = Column(String(255), nullable=True)  # Copied from the doctor

    # pending | confirmed | cancelled | completed
    state = Column(String(20), default=AppointmentState.CONFIRMED.value, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("Patient")
    doctor = relationship("Doctor")

    __table_args__ = (
        # At most one non-cancelled appointment per doctor slot
        Index(
            "uq_appointments_doctor_slot",
            "doctor_id",
            "scheduled_at",
            unique=True,
            sqlite_where=text("state != 'cancelled'"),
            postgresql_where=text("state != 'cancelled'"),
        ),
    )

    @property
    def date(self):
        return self.scheduled_at.date() if self.scheduled_at else None


class PatientAppointment(Base):
    """Link row of a patient's appointment list"""

    __tablename__ = "patient_appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, unique=True)

    patient = relationship("Patient", back_populates="appointment_refs")


class DoctorAppointment(Base):
    """Link row of a doctor's appointment list"""

    __tablename__ = "doctor_appointments"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, unique=True)

    doctor = relationship("Doctor", back_populates="appointment_refs")
