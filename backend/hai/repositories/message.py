"""
Hai Backend - Message Repository

Index layout:
    GSI1  MESSAGE / {date YYYYMMDD}                    messages by day
    GSI2  RESERVATION#{reservation_id} / MESSAGE#{id}  thread of a reservation
"""

from typing import List

from hai.models.message import Message, MessageCreate, MessageUpdate
from hai.repositories.base import EntityDescriptor, Repository, child_of, listed_by_date
from hai.services.expressions import SortCondition
from hai.services.keys import GSI1, MESSAGE, RESERVATION
from hai.utils.dates import to_sortable_date


MESSAGE_DESCRIPTOR = EntityDescriptor(
    entity_type=MESSAGE,
    model=Message,
    create_model=MessageCreate,
    update_model=MessageUpdate,
    derived_keys=(
        *listed_by_date(MESSAGE, "date"),
        *child_of(RESERVATION, MESSAGE, "reservation_id"),
    ),
)


class MessageRepository(Repository[Message]):
    descriptor = MESSAGE_DESCRIPTOR

    async def list_by_reservation(self, reservation_id: str) -> List[Message]:
        return await self.list_by_parent(RESERVATION, reservation_id)

    async def list_by_date(self, date: str) -> List[Message]:
        """Messages sent on one day (wire format date)"""
        items = await self.db.query(
            GSI1,
            MESSAGE,
            SortCondition.equals(to_sortable_date(date, self.date_format)),
        )
        return [self.to_entity(item) for item in items]
