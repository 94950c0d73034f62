"""
Hai Backend - Guests Endpoints

API Endpoints:
    POST /guests - Create guest
    GET /guests - List guests (?reservationId= for the guest of a reservation)
    GET /guests/{guest_id} - Get guest
    PUT /guests/{guest_id} - Update guest
    DELETE /guests/{guest_id} - Delete guest
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hai.dependencies import get_guest_repository
from hai.models.guest import Guest, GuestCreate, GuestUpdate
from hai.repositories.guest import GuestRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/guests",
    response_model=Guest,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_guest(
    request: GuestCreate,
    repo: GuestRepository = Depends(get_guest_repository),
) -> Guest:
    """Create a new guest"""
    return await repo.create(request)


@router.get("/guests", response_model=List[Guest], response_model_exclude_none=True)
async def list_guests(
    reservation_id: Optional[str] = Query(None, alias="reservationId"),
    repo: GuestRepository = Depends(get_guest_repository),
) -> List[Guest]:
    """List guests"""
    if reservation_id:
        return await repo.list_by_reservation(reservation_id)
    return await repo.list()


@router.get("/guests/{guest_id}", response_model=Guest, response_model_exclude_none=True)
async def get_guest(
    guest_id: str,
    repo: GuestRepository = Depends(get_guest_repository),
) -> Guest:
    """Get guest by ID"""
    guest = await repo.get_by_id(guest_id)

    if not guest:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found"
        )

    return guest


@router.put("/guests/{guest_id}", response_model=Guest, response_model_exclude_none=True)
async def update_guest(
    guest_id: str,
    request: GuestUpdate,
    repo: GuestRepository = Depends(get_guest_repository),
) -> Guest:
    """Update guest"""
    return await repo.update(guest_id, request)


@router.delete("/guests/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: str,
    repo: GuestRepository = Depends(get_guest_repository),
) -> Response:
    """Delete guest"""
    await repo.delete(guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
