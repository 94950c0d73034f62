"""
Hai Backend - Base Table Item

Purpose: Key attributes and timestamps shared by every entity stored in the
single table, plus DynamoDB (de)serialization.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from hai.services.keys import METADATA_SK
from hai.utils.dates import format_timestamp


def to_dynamodb_value(value: Any) -> Any:
    """Convert floats (recursively) to Decimal; DynamoDB rejects float"""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamodb_value(v) for v in value]
    return value


# Stored items may carry attributes this service does not model
ENTITY_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")

# Request payloads are closed: every writable field is declared
PAYLOAD_CONFIG = ConfigDict(extra="forbid")


class TableItem(BaseModel):
    """Key layout and timestamps common to all entities"""

    model_config = ENTITY_CONFIG

    # Primary key
    pk: str = Field(..., alias="PK", description="{ENTITY_TYPE}#{id}")
    sk: str = Field(default=METADATA_SK, alias="SK")

    # GSI1: list by entity type
    gsi1pk: str = Field(..., alias="GSI1PK")
    gsi1sk: str = Field(..., alias="GSI1SK")

    # GSI2: children of a parent entity
    gsi2pk: Optional[str] = Field(default=None, alias="GSI2PK")
    gsi2sk: Optional[str] = Field(default=None, alias="GSI2SK")

    # GSI3: reservation by room and stay dates
    gsi3pk: Optional[str] = Field(default=None, alias="GSI3PK")
    gsi3sk: Optional[str] = Field(default=None, alias="GSI3SK")

    id: str = Field(..., description="Entity identifier")

    # Timestamps
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    # Optimistic lock counter; only on entities updated read-modify-write
    version: Optional[int] = None

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """Convert to DynamoDB item"""
        item = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return to_dynamodb_value(item)

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """Create from DynamoDB item"""
        return cls.model_validate(item)
