"""
Hai Backend - Property Model

Purpose: Rentable unit (room/apartment) data model
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class PropertyCreate(BaseModel):
    """Fields accepted when creating a property"""

    model_config = PAYLOAD_CONFIG

    room_number: str = Field(..., min_length=1, description="Door number, e.g. 101")
    room_name: str = Field(..., min_length=1)
    floor: int
    room_count: int = Field(..., ge=0)

    sea_view: Optional[bool] = None
    num_of_single_beds: Optional[int] = Field(None, ge=0)
    num_of_double_beds: Optional[int] = Field(None, ge=0)
    num_of_splitable_double_beds: Optional[int] = Field(None, ge=0)


class PropertyUpdate(BaseModel):
    """Partial property update"""

    model_config = PAYLOAD_CONFIG

    room_number: Optional[str] = Field(None, min_length=1)
    room_name: Optional[str] = Field(None, min_length=1)
    floor: Optional[int] = None
    room_count: Optional[int] = Field(None, ge=0)
    sea_view: Optional[bool] = None
    num_of_single_beds: Optional[int] = Field(None, ge=0)
    num_of_double_beds: Optional[int] = Field(None, ge=0)
    num_of_splitable_double_beds: Optional[int] = Field(None, ge=0)


class Property(TableItem, PropertyCreate):
    """Stored property"""

    model_config = ENTITY_CONFIG
