"""
Hai Backend - Reservation Model

Purpose: A guest's stay in one property.

checkin_date/checkout_date keep the wire format they arrived in
(settings.API_DATE_FORMAT); the derived GSI1SK and GSI3SK use YYYYMMDD.
"""

from typing import Optional

from pydantic import BaseModel, Field

from hai.models.base import ENTITY_CONFIG, PAYLOAD_CONFIG, TableItem


class ReservationCreate(BaseModel):
    """Fields accepted when creating a reservation"""

    model_config = PAYLOAD_CONFIG

    # Relations (not validated against stored entities)
    room_id: str = Field(..., min_length=1, description="Property id")
    guest_id: str = Field(..., min_length=1)

    # Stay
    checkin_date: str = Field(..., description="8-digit wire date")
    checkout_date: str = Field(..., description="8-digit wire date")
    number_of_guests: Optional[int] = Field(None, ge=0)

    # Booking channel
    origin: Optional[str] = None
    origin_confirmation_id: Optional[str] = None

    # Requirements
    required_crib: Optional[bool] = None
    required_high_chair: Optional[bool] = None
    required_parking: Optional[bool] = None
    required_taxi: Optional[bool] = None
    diatery_requests: Optional[str] = None
    special_requests: Optional[str] = None

    # Travel
    arrival_ET: Optional[str] = None
    departure_ET: Optional[str] = None
    flight_number: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Partial reservation update"""

    model_config = PAYLOAD_CONFIG

    room_id: Optional[str] = Field(None, min_length=1)
    guest_id: Optional[str] = Field(None, min_length=1)
    checkin_date: Optional[str] = None
    checkout_date: Optional[str] = None
    number_of_guests: Optional[int] = Field(None, ge=0)
    origin: Optional[str] = None
    origin_confirmation_id: Optional[str] = None
    required_crib: Optional[bool] = None
    required_high_chair: Optional[bool] = None
    required_parking: Optional[bool] = None
    required_taxi: Optional[bool] = None
    diatery_requests: Optional[str] = None
    special_requests: Optional[str] = None
    arrival_ET: Optional[str] = None
    departure_ET: Optional[str] = None
    flight_number: Optional[str] = None


class Reservation(TableItem, ReservationCreate):
    """Stored reservation"""

    model_config = ENTITY_CONFIG
