"""
Hai Backend - Reservations Endpoints

API Endpoints:
    POST /reservations - Create reservation
    GET /reservations - List reservations (chronological by check-in)
        ?property_id=&check_in=&check_out=  exact stay lookup
        ?guestId=                           reservations of a guest
        ?arrivals_from=&arrivals_to=        check-ins in a range
        ?departures=                        check-outs on a day
        ?in_house=                          guests staying that night
    GET /reservations/{reservation_id} - Get reservation
    PUT /reservations/{reservation_id} - Update reservation
    DELETE /reservations/{reservation_id} - Delete reservation

All dates use settings.API_DATE_FORMAT.

Testing:
    curl -X POST http://localhost:8080/reservations \\
      -H "Content-Type: application/json" \\
      -d '{"room_id": "p1", "guest_id": "g1", "checkin_date": "15112025", "checkout_date": "20112025"}'
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hai.dependencies import get_reservation_repository, require_wire_date
from hai.errors import ValidationError
from hai.models.reservation import Reservation, ReservationCreate, ReservationUpdate
from hai.repositories.reservation import ReservationRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/reservations",
    response_model=Reservation,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    request: ReservationCreate,
    repo: ReservationRepository = Depends(get_reservation_repository),
) -> Reservation:
    """Create a new reservation"""
    require_wire_date(request.checkin_date, "checkin_date")
    require_wire_date(request.checkout_date, "checkout_date")

    logger.info(f"Creating reservation for room {request.room_id}")
    return await repo.create(request)


@router.get("/reservations", response_model=List[Reservation], response_model_exclude_none=True)
async def list_reservations(
    property_id: Optional[str] = Query(None),
    check_in: Optional[str] = Query(None),
    check_out: Optional[str] = Query(None),
    guest_id: Optional[str] = Query(None, alias="guestId"),
    arrivals_from: Optional[str] = Query(None),
    arrivals_to: Optional[str] = Query(None),
    departures: Optional[str] = Query(None, description="Check-out day"),
    in_house: Optional[str] = Query(None, description="Night to report"),
    repo: ReservationRepository = Depends(get_reservation_repository),
) -> List[Reservation]:
    """List reservations, optionally filtered"""
    if property_id and check_in and check_out:
        require_wire_date(check_in, "check_in")
        require_wire_date(check_out, "check_out")

        reservation = await repo.get_by_property_and_dates(property_id, check_in, check_out)
        if not reservation:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Reservation not found"
            )
        return [reservation]

    if property_id:
        return await repo.list_by_property(property_id)

    if guest_id:
        return await repo.list_by_guest(guest_id)

    if arrivals_from or arrivals_to:
        if not (arrivals_from and arrivals_to):
            raise ValidationError("Both arrivals_from and arrivals_to are required")
        require_wire_date(arrivals_from, "arrivals_from")
        require_wire_date(arrivals_to, "arrivals_to")
        return await repo.list_arrivals(arrivals_from, arrivals_to)

    if departures:
        require_wire_date(departures, "departures")
        return await repo.list_departures(departures)

    if in_house:
        require_wire_date(in_house, "in_house")
        return await repo.list_in_house(in_house)

    return await repo.list()


@router.get("/reservations/{reservation_id}", response_model=Reservation, response_model_exclude_none=True)
async def get_reservation(
    reservation_id: str,
    repo: ReservationRepository = Depends(get_reservation_repository),
) -> Reservation:
    """Get reservation by ID"""
    reservation = await repo.get_by_id(reservation_id)

    if not reservation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reservation not found"
        )

    return reservation


@router.put("/reservations/{reservation_id}", response_model=Reservation, response_model_exclude_none=True)
async def update_reservation(
    reservation_id: str,
    request: ReservationUpdate,
    repo: ReservationRepository = Depends(get_reservation_repository),
) -> Reservation:
    """Update reservation; stay keys are rebuilt from the merged dates"""
    if request.checkin_date is not None:
        require_wire_date(request.checkin_date, "checkin_date")
    if request.checkout_date is not None:
        require_wire_date(request.checkout_date, "checkout_date")

    logger.info(f"Updating reservation: {reservation_id}")
    return await repo.update(reservation_id, request)


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(
    reservation_id: str,
    repo: ReservationRepository = Depends(get_reservation_repository),
) -> Response:
    """Delete reservation"""
    await repo.delete(reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
