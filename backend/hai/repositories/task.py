"""
Hai Backend - Task Repository

Index layout:
    GSI1  TASK / {id}
    GSI2  RESERVATION#{reservation_info_id} / TASK#{id}
"""

from typing import List

from hai.models.task import Task, TaskCreate, TaskUpdate
from hai.repositories.base import EntityDescriptor, Repository, child_of, listed_by_id
from hai.services.keys import RESERVATION, TASK


TASK_DESCRIPTOR = EntityDescriptor(
    entity_type=TASK,
    model=Task,
    create_model=TaskCreate,
    update_model=TaskUpdate,
    derived_keys=(
        *listed_by_id(TASK),
        *child_of(RESERVATION, TASK, "reservation_info_id"),
    ),
)


class TaskRepository(Repository[Task]):
    descriptor = TASK_DESCRIPTOR

    async def list_by_reservation(self, reservation_id: str) -> List[Task]:
        return await self.list_by_parent(RESERVATION, reservation_id)
