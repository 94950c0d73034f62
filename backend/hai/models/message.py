"""
Hai Backend - Message Model

Purpose: Guest communication attached to a reservation
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class MessageCreate(BaseModel):
    """Fields accepted when creating a message"""

    model_config = PAYLOAD_CONFIG

    guest_id: str = Field(..., min_length=1)
    reservation_id: str = Field(..., min_length=1)
    communication_channel: str = Field(..., min_length=1, description="email, whatsapp, sms, airbnb, booking, phone ...")
    message: str
    date: str = Field(..., description="8-digit wire date")


class MessageUpdate(BaseModel):
    """Partial message update"""

    model_config = PAYLOAD_CONFIG

    guest_id: Optional[str] = Field(None, min_length=1)
    reservation_id: Optional[str] = Field(None, min_length=1)
    communication_channel: Optional[str] = Field(None, min_length=1)
    message: Optional[str] = None
    date: Optional[str] = None


class Message(TableItem, MessageCreate):
    """Stored message"""

    model_config = ENTITY_CONFIG
