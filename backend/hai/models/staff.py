"""
Hai Backend - Staff Model
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class StaffCreate(BaseModel):
    """Fields accepted when creating a staff member"""

    model_config = PAYLOAD_CONFIG

    name: str = Field(..., min_length=1)
    surname: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="cleaning, maintenance, reception, ...")
    contact_details: Optional[str] = None

    # Scores
    efficiency_score: Optional[float] = None
    overall_quality: Optional[float] = None


class StaffUpdate(BaseModel):
    """Partial staff update"""

    model_config = PAYLOAD_CONFIG

    name: Optional[str] = Field(None, min_length=1)
    surname: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    contact_details: Optional[str] = None
    efficiency_score: Optional[float] = None
    overall_quality: Optional[float] = None


class Staff(TableItem, StaffCreate):
    """Stored staff member"""

    model_config = ENTITY_CONFIG
