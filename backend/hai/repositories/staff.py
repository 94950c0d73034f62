"""
Hai Backend - Staff Repository
"""

from hai.models.staff import Staff, StaffCreate, StaffUpdate
from hai.repositories.base import EntityDescriptor, Repository, listed_by_id
from hai.services.keys import STAFF


STAFF_DESCRIPTOR = EntityDescriptor(
    entity_type=STAFF,
    model=Staff,
    create_model=StaffCreate,
    update_model=StaffUpdate,
    derived_keys=listed_by_id(STAFF),
)


class StaffRepository(Repository[Staff]):
    descriptor = STAFF_DESCRIPTOR
