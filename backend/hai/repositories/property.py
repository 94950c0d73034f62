"""
Hai Backend - Property Repository
"""

import logging
from typing import List, Optional

from hai.errors import ValidationError
from hai.models.property import Property, PropertyCreate, PropertyUpdate
from hai.repositories.base import EntityDescriptor, Repository, listed_by_id
from hai.repositories.reservation import ReservationRepository
from hai.services.keys import PROPERTY
from hai.utils.dates import to_sortable_date

logger = logging.getLogger(__name__)


PROPERTY_DESCRIPTOR = EntityDescriptor(
    entity_type=PROPERTY,
    model=Property,
    create_model=PropertyCreate,
    update_model=PropertyUpdate,
    derived_keys=listed_by_id(PROPERTY),
)


class PropertyRepository(Repository[Property]):
    """Properties plus availability search"""

    descriptor = PROPERTY_DESCRIPTOR

    def __init__(self, db, reservations: Optional[ReservationRepository] = None, **kwargs):
        super().__init__(db, **kwargs)
        self.reservations = reservations or ReservationRepository(db, date_format=self.date_format)

    async def search_available(self, from_date: str, to_date: str) -> List[Property]:
        """
        Properties with no reservation overlapping [from_date, to_date)

        Args:
            from_date: First night, wire format
            to_date: Departure day, wire format
        """
        if to_sortable_date(to_date, self.date_format) <= to_sortable_date(from_date, self.date_format):
            raise ValidationError("'to' must be after 'from'")

        available = []
        for prop in await self.list():
            booked = await self.reservations.list_overlapping(prop.id, from_date, to_date)
            if not booked:
                available.append(prop)

        logger.info(f"Availability {from_date}-{to_date}: {len(available)} properties free")
        return available
