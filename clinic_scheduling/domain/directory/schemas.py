"""Directory schemas - Pydantic models for patient and doctor registration"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import (
    WEEKDAYS,
    validate_email,
    validate_national_id,
    validate_required_text,
    validate_time_of_day,
)


class PatientCreate(BaseModel):
    """Schema for registering a patient"""

    name: str
    surname: str
    national_id: str
    coverage_name: str

    @field_validator("name", "surname", "coverage_name")
    @classmethod
    def validate_required(cls, v):
        return validate_required_text(v)

    @field_validator("national_id")
    @classmethod
    def validate_national_id(cls, v):
        return validate_national_id(v)


class PatientUpdate(BaseModel):
    """Schema for updating a patient, omitted fields keep their value"""

    name: Optional[str] = None
    surname: Optional[str] = None
    national_id: Optional[str] = None
    coverage_name: Optional[str] = None

    @field_validator("name", "surname", "coverage_name")
    @classmethod
    def validate_required(cls, v):
        if v is None:
            return v
        return validate_required_text(v)

    @field_validator("national_id")
    @classmethod
    def validate_national_id(cls, v):
        if v is None:
            return v
        return validate_national_id(v)


class PatientResponse(BaseModel):
    id: int
    name: str
    surname: str
    national_id: str
    coverage_name: str
    appointment_ids: list[int] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScheduleWindow(BaseModel):
    """One weekly attention window of a doctor"""

    day: str
    start: str
    end: str

    @field_validator("day")
    @classmethod
    def validate_day(cls, v):
        if v not in WEEKDAYS:
            raise ValueError(f"Day must be one of {', '.join(WEEKDAYS)}")
        return v

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class DoctorCreate(BaseModel):
    """Schema for registering a doctor"""

    name: str
    surname: str
    specialty: str
    license_number: str
    phone: Optional[str] = None
    email: Optional[str] = None
    schedule: list[ScheduleWindow] = []
    active: bool = True
    max_daily_appointments: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None

    @field_validator("name", "surname", "specialty", "license_number")
    @classmethod
    def validate_required(cls, v):
        return validate_required_text(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class DoctorUpdate(BaseModel):
    """Schema for updating a doctor, omitted fields keep their value"""

    name: Optional[str] = None
    surname: Optional[str] = None
    specialty: Optional[str] = None
    license_number: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    schedule: Optional[list[ScheduleWindow]] = None
    active: Optional[bool] = None
    max_daily_appointments: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None

    @field_validator("name", "surname", "specialty", "license_number")
    @classmethod
    def validate_required(cls, v):
        if v is None:
            return v
        return validate_required_text(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class DoctorResponse(BaseModel):
    id: int
    name: str
    surname: str
    specialty: str
    license_number: str
    phone: Optional[str] = None
    email: Optional[str] = None
    schedule: list[ScheduleWindow] = []
    active: bool
    max_daily_appointments: int
    notes: Optional[str] = None
    appointment_ids: list[int] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DoctorStatusUpdate(BaseModel):
    active: bool
