"""
Hai Backend - Reservation Repository

Purpose: Reservation persistence and the stay-date lookups used by the
calendar and the arrivals/departures dashboard.

Index layout:
    GSI1  RESERVATION / {checkin YYYYMMDD}             chronological listing
    GSI2  GUEST#{guest_id} / RESERVATION#{id}          reservations of a guest
    GSI3  PROPERTY#{room_id} / {checkin}#{checkout}    room + stay lookup

Testing:
    repo = ReservationRepository(DatabaseService())
    res = await repo.create({"room_id": "p1", "guest_id": "g1",
                             "checkin_date": "15112025", "checkout_date": "20112025"})
    res.gsi3sk  # "20251115#20251120"
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from boto3.dynamodb.conditions import Attr

from hai.config import settings
from hai.models.reservation import Reservation, ReservationCreate, ReservationUpdate
from hai.repositories.base import (
    DerivedKey, EntityDescriptor, Repository, child_of, listed_by_date,
)
from hai.services.expressions import SortCondition
from hai.services.keys import GSI1, GSI3, GUEST, KEY_SEPARATOR, PROPERTY, RESERVATION, composite_key, entity_key
from hai.utils.dates import shift_sortable_date, to_sortable_date

logger = logging.getLogger(__name__)


def property_partition(entity_id: str, fields: Mapping[str, Any], date_format) -> str:
    return entity_key(PROPERTY, fields["room_id"])


def stay_sort_key(entity_id: str, fields: Mapping[str, Any], date_format) -> str:
    return composite_key(
        to_sortable_date(fields["checkin_date"], date_format),
        to_sortable_date(fields["checkout_date"], date_format),
    )


def stay_dates(item: Mapping[str, Any]) -> Tuple[str, str]:
    """(checkin, checkout) as YYYYMMDD, read from the GSI3 sort key"""
    checkin, _, checkout = item["GSI3SK"].partition(KEY_SEPARATOR)
    return checkin, checkout


RESERVATION_DESCRIPTOR = EntityDescriptor(
    entity_type=RESERVATION,
    model=Reservation,
    create_model=ReservationCreate,
    update_model=ReservationUpdate,
    derived_keys=(
        *listed_by_date(RESERVATION, "checkin_date"),
        *child_of(GUEST, RESERVATION, "guest_id"),
        DerivedKey("GSI3PK", property_partition, sources=("room_id",)),
        DerivedKey("GSI3SK", stay_sort_key, sources=("checkin_date", "checkout_date")),
    ),
)


class ReservationRepository(Repository[Reservation]):
    """
    Reservations; ids are random tokens or, with the natural strategy,
    {room_id}-{checkin_date}-{checkout_date}
    """

    descriptor = RESERVATION_DESCRIPTOR

    def __init__(
        self,
        db,
        id_strategy: Optional[str] = None,
        max_stay_nights: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(db, **kwargs)
        self.id_strategy = id_strategy or settings.RESERVATION_ID_STRATEGY
        self.max_stay_nights = max_stay_nights or settings.MAX_STAY_NIGHTS

    def new_id(self, data: ReservationCreate) -> str:
        if self.id_strategy == "natural":
            return f"{data.room_id}-{data.checkin_date}-{data.checkout_date}"
        return super().new_id(data)

    def create_condition(self):
        # Natural ids double as a double-booking guard for identical stays
        if self.id_strategy == "natural":
            return Attr('PK').not_exists()
        return None

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    async def get_by_property_and_dates(
        self,
        property_id: str,
        checkin_date: str,
        checkout_date: str,
    ) -> Optional[Reservation]:
        """Reservation for a room with exactly these stay dates (wire format)"""
        stay = stay_sort_key("", {"checkin_date": checkin_date, "checkout_date": checkout_date}, self.date_format)

        items = await self.db.query(
            GSI3,
            entity_key(PROPERTY, property_id),
            SortCondition.equals(stay),
            limit=1,
        )
        if not items:
            return None
        return self.to_entity(items[0])

    async def list_by_guest(self, guest_id: str) -> List[Reservation]:
        return await self.list_by_parent(GUEST, guest_id)

    async def list_by_property(self, property_id: str) -> List[Reservation]:
        """All reservations of a room, ordered by check-in date"""
        items = await self.db.query(GSI3, entity_key(PROPERTY, property_id))
        return [self.to_entity(item) for item in items]

    async def list_overlapping(self, property_id: str, from_date: str, to_date: str) -> List[Reservation]:
        """
        Reservations of a room whose stay overlaps [from_date, to_date)

        A stay overlaps when it checks in before to_date and checks out after
        from_date. Dates are in wire format.
        """
        start = to_sortable_date(from_date, self.date_format)
        end = to_sortable_date(to_date, self.date_format)

        # "{checkin}#{checkout}" < "{end}" exactly when checkin < end
        items = await self.db.query(
            GSI3,
            entity_key(PROPERTY, property_id),
            SortCondition.less_than(end),
        )
        return [self.to_entity(item) for item in items if stay_dates(item)[1] > start]

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    async def list_arrivals(self, from_date: str, to_date: str) -> List[Reservation]:
        """Reservations checking in between the two dates, inclusive"""
        items = await self.db.query(
            GSI1,
            RESERVATION,
            SortCondition.between(
                to_sortable_date(from_date, self.date_format),
                to_sortable_date(to_date, self.date_format),
            ),
        )
        return [self.to_entity(item) for item in items]

    async def list_departures(self, date: str) -> List[Reservation]:
        """Reservations checking out on the given date"""
        day = to_sortable_date(date, self.date_format)
        items = await self._checked_in_within_max_stay(day)
        return [self.to_entity(item) for item in items if stay_dates(item)[1] == day]

    async def list_in_house(self, date: str) -> List[Reservation]:
        """Reservations staying the night of the given date"""
        day = to_sortable_date(date, self.date_format)
        items = await self._checked_in_within_max_stay(day)
        return [self.to_entity(item) for item in items if stay_dates(item)[1] > day]

    async def _checked_in_within_max_stay(self, day: str) -> List[Dict[str, Any]]:
        """
        Items checking in on `day` or up to max_stay_nights before it

        Stays longer than max_stay_nights are not reported.
        """
        earliest = shift_sortable_date(day, -self.max_stay_nights)
        return await self.db.query(GSI1, RESERVATION, SortCondition.between(earliest, day))
