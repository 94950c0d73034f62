"""
Hai Backend - FastAPI Dependencies

Purpose: Shared dependencies for dependency injection
"""

from functools import lru_cache

from fastapi import Depends

from hai.config import settings
from hai.errors import ValidationError
from hai.repositories.guest import GuestRepository
from hai.repositories.message import MessageRepository
from hai.repositories.property import PropertyRepository
from hai.repositories.reservation import ReservationRepository
from hai.repositories.staff import StaffRepository
from hai.repositories.task import TaskRepository
from hai.services.db import DatabaseService
from hai.utils.dates import is_valid_wire_date


# Service dependencies
@lru_cache
def get_db_service() -> DatabaseService:
    """Get database service instance (one per process)"""
    return DatabaseService()


def get_property_repository(db: DatabaseService = Depends(get_db_service)) -> PropertyRepository:
    return PropertyRepository(db)


def get_guest_repository(db: DatabaseService = Depends(get_db_service)) -> GuestRepository:
    return GuestRepository(db)


def get_reservation_repository(db: DatabaseService = Depends(get_db_service)) -> ReservationRepository:
    return ReservationRepository(db)


def get_message_repository(db: DatabaseService = Depends(get_db_service)) -> MessageRepository:
    return MessageRepository(db)


def get_staff_repository(db: DatabaseService = Depends(get_db_service)) -> StaffRepository:
    return StaffRepository(db)


def get_task_repository(db: DatabaseService = Depends(get_db_service)) -> TaskRepository:
    return TaskRepository(db)


def require_wire_date(value: str, field: str) -> str:
    """Reject dates that are not valid in the configured wire format"""
    if not is_valid_wire_date(value, settings.API_DATE_FORMAT):
        raise ValidationError(f"Invalid {field} format. Expected {settings.API_DATE_FORMAT}")
    return value
