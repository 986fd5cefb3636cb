"""
Appointments Domain

Booking, re-scheduling and listing of clinic appointments.

Structure:
- availability.py: slot and daily-load checks
- repository.py: appointment queries and back-reference list maintenance
- service.py: create/edit (transactional) and list/get
- schemas.py: request/response models
- router.py: HTTP endpoints
"""

from .router import router

__all__ = ["router"]
