"""
Hai Backend - Guest Model
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class GuestCreate(BaseModel):
    """Fields accepted when creating a guest"""

    model_config = PAYLOAD_CONFIG

    name: str = Field(..., min_length=1)
    surname: str = Field(..., min_length=1)

    # Contact & origin
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    nationality: Optional[str] = None
    language: Optional[str] = None

    date_birth: Optional[str] = Field(None, description="Free-form, as supplied by the channel")


class GuestUpdate(BaseModel):
    """Partial guest update"""

    model_config = PAYLOAD_CONFIG

    name: Optional[str] = Field(None, min_length=1)
    surname: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    nationality: Optional[str] = None
    language: Optional[str] = None
    date_birth: Optional[str] = None


class Guest(TableItem, GuestCreate):
    """Stored guest"""

    model_config = ENTITY_CONFIG
