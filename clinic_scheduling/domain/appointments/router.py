"""Appointment router - FastAPI endpoints for appointment operations"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ...config import DEFAULT_PAGE_SIZE
from ...database import get_db
from ...shared.errors import InvalidFilter
from .schemas import AppointmentCreate, AppointmentPage, AppointmentResponse
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=AppointmentPage)
async def list_appointments(
    service: AppointmentService = Depends(get_appointment_service),
    patient: Optional[int] = Query(None),
    doctor: Optional[int] = Query(None),
    day: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD"),
    page: str = Query("1"),
    limit: str = Query(str(DEFAULT_PAGE_SIZE)),
):
    """List appointments filtered by patient, doctor and date, ordered by date"""
    parsed_day = None
    if day:
        try:
            parsed_day = date.fromisoformat(day)
        except ValueError:
            raise InvalidFilter("Invalid date format, expected YYYY-MM-DD")

    return service.list_appointments(
        patient_id=patient, doctor_id=doctor, day=parsed_day, page=page, page_size=limit
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get a specific appointment with patient and doctor details"""
    return AppointmentResponse.model_validate(service.get_appointment(appointment_id))


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book a new appointment"""
    appointment = service.create_appointment(
        patient_id=data.patient,
        doctor_id=data.doctor,
        day=data.date,
        time_of_day=data.time,
        state=data.state,
    )
    return AppointmentResponse.model_validate(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def edit_appointment(
    appointment_id: int,
    payload: dict[str, Any] = Body(...),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Re-schedule, re-assign or change the state of an appointment"""
    appointment = service.edit_appointment(appointment_id, payload)
    return AppointmentResponse.model_validate(appointment)
