"""Appointment domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ...models import AppointmentState
from ...shared.errors import InvalidUpdate
from ...shared.validators import combine_date_time, validate_time_of_day


class AppointmentCreate(BaseModel):
    """Schema for booking a new appointment"""

    model_config = ConfigDict(populate_by_name=True)

    patient: int
    doctor: int
    date: dt.date
    time: str
    state: Optional[AppointmentState] = Field(default=None, alias="estado")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def validate_in_future(self):
        if combine_date_time(self.date, self.time) <= dt.datetime.now():
            raise ValueError("Appointments must be scheduled in the future")
        return self


class AppointmentPatch(BaseModel):
    """
    Fields an appointment edit may change.

    Unknown fields are rejected, and date and time travel together since the
    slot is the combination of both.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    patient: Optional[int] = None
    doctor: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    state: Optional[AppointmentState] = Field(default=None, alias="estado")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        if v is None:
            return v
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def validate_date_with_time(self):
        if (self.date is None) != (self.time is None):
            raise ValueError("date and time must be updated together")
        return self

    @classmethod
    def from_payload(cls, payload: dict) -> "AppointmentPatch":
        """Build a patch from a raw request body, failing with InvalidUpdate"""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in e.errors())
            raise InvalidUpdate(f"Invalid appointment update: {fields}") from e


class PatientSummary(BaseModel):
    id: int
    name: str
    surname: str

    model_config = ConfigDict(from_attributes=True)


class DoctorSummary(BaseModel):
    id: int
    name: str
    surname: str
    specialty: str

    model_config = ConfigDict(from_attributes=True)


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    patient: PatientSummary
    doctor: DoctorSummary
    date: dt.date
    time: str
    scheduled_at: dt.datetime
    specialty: Optional[str] = None
    state: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AppointmentPage(BaseModel):
    items: list[AppointmentResponse]
    total: int
    total_pages: int
    page: int
