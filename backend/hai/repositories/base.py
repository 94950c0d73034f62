"""
Hai Backend - Generic Entity Repository

Purpose: One repository implementation for every entity type, driven by an
EntityDescriptor that names the entity type, its models and how each index
key is derived from the entity's own fields.

Index keys derived from a single field are recomputed whenever that field
changes. An entity with a key composed from several fields (Reservation's
GSI3SK = checkin#checkout) is updated read-modify-write: the current item is
read, merged with the change, and the write is conditioned on the version
counter that was read and increments it. A concurrent writer makes the
condition fail and the update is retried against the fresh item.

Testing:
    repo = GuestRepository(DatabaseService())
    guest = await repo.create({"name": "Ada", "surname": "Lovelace"})
    await repo.update(guest.id, {"city": "London"})
"""

import logging
from dataclasses import dataclass
from typing import (
    Any, Callable, Dict, FrozenSet, Generic, List, Mapping, Optional, Tuple, Type, TypeVar,
)
from datetime import datetime

import shortuuid
from boto3.dynamodb.conditions import Attr
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hai.config import settings
from hai.errors import ConditionFailed, ConflictError, NotFoundError, ValidationError
from hai.models.base import TableItem, to_dynamodb_value
from hai.services.db import DatabaseService
from hai.services.expressions import FieldAssignment, SortCondition
from hai.services.keys import GSI1, GSI2, METADATA_SK, entity_key
from hai.utils.dates import DateFormat, format_timestamp, to_sortable_date, utc_now

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=TableItem)

# (entity id, entity fields, wire date format) -> key value
KeyDeriver = Callable[[str, Mapping[str, Any], DateFormat], str]

# Counter bumped by every read-modify-write update
VERSION_ATTRIBUTE = "version"


@dataclass(frozen=True)
class DerivedKey:
    """An index key attribute computed from the entity's own fields"""
    attribute: str
    derive: KeyDeriver
    # Entity fields the value depends on; empty when it depends on the id only
    sources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityDescriptor:
    """Everything the generic repository needs to know about one entity type"""
    entity_type: str
    model: Type[TableItem]
    create_model: Type[BaseModel]
    update_model: Type[BaseModel]
    derived_keys: Tuple[DerivedKey, ...]

    @property
    def required_fields(self) -> FrozenSet[str]:
        return frozenset(
            name for name, field in self.create_model.model_fields.items() if field.is_required()
        )

    @property
    def needs_current_item(self) -> bool:
        """True when a key can only be rebuilt from the merged stored item"""
        return any(len(key.sources) > 1 for key in self.derived_keys)


# =============================================================================
# KEY DERIVATION BUILDING BLOCKS
# =============================================================================

def listed_by_id(entity_type: str) -> Tuple[DerivedKey, ...]:
    """GSI1 entry sorted by id"""

    def sort_key(entity_id, fields, date_format):
        return entity_id

    return (
        DerivedKey("GSI1PK", lambda entity_id, fields, date_format: entity_type),
        DerivedKey("GSI1SK", sort_key),
    )


def listed_by_date(entity_type: str, date_field: str) -> Tuple[DerivedKey, ...]:
    """GSI1 entry sorted by a wire date field, stored as YYYYMMDD"""

    def sort_key(entity_id, fields, date_format):
        return to_sortable_date(fields[date_field], date_format)

    return (
        DerivedKey("GSI1PK", lambda entity_id, fields, date_format: entity_type),
        DerivedKey("GSI1SK", sort_key, sources=(date_field,)),
    )


def child_of(parent_type: str, entity_type: str, parent_field: str) -> Tuple[DerivedKey, ...]:
    """GSI2 entry listing this entity under its parent"""

    def partition_key(entity_id, fields, date_format):
        return entity_key(parent_type, fields[parent_field])

    def sort_key(entity_id, fields, date_format):
        return entity_key(entity_type, entity_id)

    return (
        DerivedKey("GSI2PK", partition_key, sources=(parent_field,)),
        DerivedKey("GSI2SK", sort_key),
    )


# =============================================================================
# REPOSITORY
# =============================================================================

class Repository(Generic[EntityT]):
    """
    CRUD and index queries for one entity type
    """

    descriptor: EntityDescriptor

    def __init__(
        self,
        db: DatabaseService,
        date_format: Optional[DateFormat] = None,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: Optional[int] = None,
    ):
        self.db = db
        self.date_format = date_format or settings.API_DATE_FORMAT
        self.clock = clock
        self.max_attempts = max_attempts or settings.OPTIMISTIC_LOCK_RETRIES

    @property
    def entity_type(self) -> str:
        return self.descriptor.entity_type

    @property
    def label(self) -> str:
        return self.entity_type.capitalize()

    def key(self, entity_id: str) -> Tuple[str, str]:
        """Primary key (PK, SK) of an entity"""
        return entity_key(self.entity_type, entity_id), METADATA_SK

    def new_id(self, data: BaseModel) -> str:
        return shortuuid.uuid()

    def create_condition(self):
        """Condition for the create put; None means unconditional overwrite"""
        return None

    def to_entity(self, item: Dict[str, Any]) -> EntityT:
        return self.descriptor.model.from_dynamodb_item(item)

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create(self, fields: Any) -> EntityT:
        """
        Create an entity

        Args:
            fields: Create model instance or mapping of its fields

        Returns:
            The stored entity including derived index keys
        """
        data = self._validate(self.descriptor.create_model, fields)
        values = data.model_dump(mode="json", exclude_none=True)

        entity_id = self.new_id(data)
        pk, sk = self.key(entity_id)
        now = self.clock()

        attributes = {
            'PK': pk,
            'SK': sk,
            **self._derive_keys(entity_id, values),
            'id': entity_id,
            **values,
            'createdAt': now,
            'updatedAt': now,
        }
        if self.descriptor.needs_current_item:
            attributes[VERSION_ATTRIBUTE] = 0
        item = self.descriptor.model.model_validate(attributes).to_dynamodb_item()

        try:
            await self.db.put_item(item, condition=self.create_condition())
        except ConditionFailed as e:
            raise ConflictError(f"{self.label} {entity_id} already exists") from e

        logger.info(f"Created {self.entity_type.lower()}: {entity_id}")
        return self.to_entity(item)

    async def get_by_id(self, entity_id: str) -> Optional[EntityT]:
        """Get entity by id; None when absent"""
        item = await self.db.get_item(*self.key(entity_id))
        if item is None:
            return None
        return self.to_entity(item)

    async def update(self, entity_id: str, fields: Any = None) -> EntityT:
        """
        Apply a partial update

        Only the fields present in `fields` are written, together with the
        index keys derived from them and a fresh updatedAt.

        Raises:
            NotFoundError: No entity with this id
            ConflictError: Concurrent writers kept winning (read-modify-write only)
        """
        changes = self._changes(fields)

        if self.descriptor.needs_current_item:
            return await self._update_from_current(entity_id, changes)

        pk, sk = self.key(entity_id)
        assignments = self._assignments(entity_id, changes, current=None)

        try:
            item = await self.db.update_item(pk, sk, assignments, condition=Attr('PK').exists())
        except ConditionFailed as e:
            raise NotFoundError(f"{self.label} {entity_id} not found") from e

        logger.info(f"Updated {self.entity_type.lower()}: {entity_id}")
        return self.to_entity(item)

    async def delete(self, entity_id: str) -> None:
        """Delete entity; missing ids are ignored"""
        await self.db.delete_item(*self.key(entity_id))
        logger.info(f"Deleted {self.entity_type.lower()}: {entity_id}")

    # =========================================================================
    # LISTING
    # =========================================================================

    async def list(self) -> List[EntityT]:
        """All entities of this type in GSI1SK order"""
        items = await self.db.query(GSI1, self.entity_type)
        return [self.to_entity(item) for item in items]

    async def list_by_parent(self, parent_type: str, parent_id: str) -> List[EntityT]:
        """Entities of this type linked to the given parent through GSI2"""
        items = await self.db.query(
            GSI2,
            entity_key(parent_type, parent_id),
            SortCondition.begins_with(entity_key(self.entity_type, "")),
        )
        return [self.to_entity(item) for item in items]

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _validate(self, model: Type[BaseModel], fields: Any) -> BaseModel:
        if isinstance(fields, model):
            return fields
        try:
            return model.model_validate(fields or {})
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

    def _changes(self, fields: Any) -> Dict[str, Any]:
        data = self._validate(self.descriptor.update_model, fields)
        changes = data.model_dump(mode="json", exclude_unset=True)

        required = self.descriptor.required_fields
        for name, value in changes.items():
            if value is None and name in required:
                raise ValidationError(f"{name} is required and can not be removed")

        return changes

    def _derive_keys(
        self,
        entity_id: str,
        fields: Mapping[str, Any],
        changed: Optional[FrozenSet[str]] = None,
    ) -> Dict[str, str]:
        """
        Compute index key attributes

        With `changed`, only keys that depend on one of those fields are
        returned (id-only keys never change).
        """
        keys = {}
        for derived in self.descriptor.derived_keys:
            if changed is not None and not changed.intersection(derived.sources):
                continue
            keys[derived.attribute] = derived.derive(entity_id, fields, self.date_format)
        return keys

    def _assignments(
        self,
        entity_id: str,
        changes: Dict[str, Any],
        current: Optional[Mapping[str, Any]],
    ) -> List[FieldAssignment]:
        assignments = [
            FieldAssignment(name, to_dynamodb_value(value)) for name, value in changes.items()
        ]

        if current is None:
            keys = self._derive_keys(entity_id, changes, changed=frozenset(changes))
        else:
            # Composite keys are rebuilt from stored values overlaid with the change
            merged = {**current, **changes}
            keys = self._derive_keys(entity_id, merged, changed=frozenset(
                source for derived in self.descriptor.derived_keys for source in derived.sources
            ))

        assignments.extend(FieldAssignment(name, value) for name, value in keys.items())
        assignments.append(FieldAssignment('updatedAt', format_timestamp(self.clock())))
        return assignments

    async def _update_from_current(self, entity_id: str, changes: Dict[str, Any]) -> EntityT:
        pk, sk = self.key(entity_id)

        for attempt in range(1, self.max_attempts + 1):
            current = await self.db.get_item(pk, sk)
            if current is None:
                raise NotFoundError(f"{self.label} {entity_id} not found")

            assignments = self._assignments(entity_id, changes, current)

            # Items written before versioning carry no counter
            version = current.get(VERSION_ATTRIBUTE)
            if version is None:
                condition = Attr('PK').exists() & Attr(VERSION_ATTRIBUTE).not_exists()
                version = 0
            else:
                condition = Attr(VERSION_ATTRIBUTE).eq(version)
            assignments.append(FieldAssignment(VERSION_ATTRIBUTE, version + 1))

            try:
                item = await self.db.update_item(pk, sk, assignments, condition=condition)
            except ConditionFailed:
                logger.warning(
                    f"Concurrent update on {self.entity_type.lower()} {entity_id} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            logger.info(f"Updated {self.entity_type.lower()}: {entity_id}")
            return self.to_entity(item)

        raise ConflictError(
            f"{self.label} {entity_id} was modified concurrently; "
            f"gave up after {self.max_attempts} attempts"
        )
