"""Directory router - Registration and update endpoints for patients and doctors"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    DoctorCreate,
    DoctorResponse,
    DoctorStatusUpdate,
    DoctorUpdate,
    PatientCreate,
    PatientResponse,
    PatientUpdate,
)
from .service import DirectoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Directory"])


def get_directory_service(db: Session = Depends(get_db)) -> DirectoryService:
    """Dependency injection for DirectoryService"""
    return DirectoryService(db)


@router.post("/patients", response_model=PatientResponse, status_code=201)
async def register_patient(
    data: PatientCreate,
    service: DirectoryService = Depends(get_directory_service),
):
    """Register a new patient"""
    return PatientResponse.model_validate(service.register_patient(data))


@router.put("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    service: DirectoryService = Depends(get_directory_service),
):
    """Update a patient"""
    return PatientResponse.model_validate(service.update_patient(patient_id, data))


@router.post("/doctors", response_model=DoctorResponse, status_code=201)
async def register_doctor(
    data: DoctorCreate,
    service: DirectoryService = Depends(get_directory_service),
):
    """Register a new doctor"""
    return DoctorResponse.model_validate(service.register_doctor(data))


@router.put("/doctors/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    data: DoctorUpdate,
    service: DirectoryService = Depends(get_directory_service),
):
    """Update a doctor, including its schedule and active flag"""
    return DoctorResponse.model_validate(service.update_doctor(doctor_id, data))


@router.patch("/doctors/{doctor_id}/status", response_model=DoctorResponse)
async def update_doctor_status(
    doctor_id: int,
    data: DoctorStatusUpdate,
    service: DirectoryService = Depends(get_directory_service),
):
    """Enable or disable a doctor"""
    return DoctorResponse.model_validate(service.set_doctor_active(doctor_id, data.active))
