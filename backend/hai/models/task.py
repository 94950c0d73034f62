"""
Hai Backend - Task Model

Purpose: Work item assigned to a staff member for a reservation
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class TaskCreate(BaseModel):
    """Fields accepted when creating a task"""

    model_config = PAYLOAD_CONFIG

    staff_id: str = Field(..., min_length=1)
    reservation_info_id: str = Field(..., min_length=1, description="Reservation id")
    task_name: str = Field(..., min_length=1)
    task_description: Optional[str] = None
    task_resolution_description: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial task update"""

    model_config = PAYLOAD_CONFIG

    staff_id: Optional[str] = Field(None, min_length=1)
    reservation_info_id: Optional[str] = Field(None, min_length=1)
    task_name: Optional[str] = Field(None, min_length=1)
    task_description: Optional[str] = None
    task_resolution_description: Optional[str] = None


class Task(TableItem, TaskCreate):
    """Stored task"""

    model_config = ENTITY_CONFIG
