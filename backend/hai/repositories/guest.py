"""
Hai Backend - Guest Repository
"""

from typing import List

from hai.models.guest import Guest, GuestCreate, GuestUpdate
from hai.repositories.base import EntityDescriptor, Repository, listed_by_id
from hai.services.keys import GUEST, METADATA_SK, RESERVATION, entity_key


GUEST_DESCRIPTOR = EntityDescriptor(
    entity_type=GUEST,
    model=Guest,
    create_model=GuestCreate,
    update_model=GuestUpdate,
    derived_keys=listed_by_id(GUEST),
)


class GuestRepository(Repository[Guest]):
    descriptor = GUEST_DESCRIPTOR

    async def list_by_reservation(self, reservation_id: str) -> List[Guest]:
        """Guest booked on a reservation (empty when either is missing)"""
        # Guests have no GSI2 entry; the reservation holds the link
        reservation = await self.db.get_item(entity_key(RESERVATION, reservation_id), METADATA_SK)
        if not reservation or not reservation.get('guest_id'):
            return []

        guest = await self.get_by_id(reservation['guest_id'])
        return [guest] if guest else []
