"""
Hai Backend - Single-Table Key Layout

Purpose: Key formats and index attribute names for the single DynamoDB table.

    PK      = {ENTITY_TYPE}#{id}
    SK      = METADATA
    GSI1PK  = {ENTITY_TYPE}                list all of a type
    GSI2PK  = {PARENT_TYPE}#{parent_id}    list children of a parent
    GSI3PK  = PROPERTY#{room_id}           reservation by room and stay dates

These formats are shared with data already written by other services and
must not change.
"""

from typing import Dict, Optional, Tuple

METADATA_SK = "METADATA"
KEY_SEPARATOR = "#"

# Entity type literals (GSI1PK values and key prefixes)
PROPERTY = "PROPERTY"
GUEST = "GUEST"
RESERVATION = "RESERVATION"
MESSAGE = "MESSAGE"
STAFF = "STAFF"
TASK = "TASK"

PRIMARY_INDEX: Optional[str] = None
GSI1 = "GSI1"
GSI2 = "GSI2"
GSI3 = "GSI3"

# Index name -> (partition key attribute, sort key attribute)
INDEX_KEY_ATTRIBUTES: Dict[Optional[str], Tuple[str, str]] = {
    PRIMARY_INDEX: ("PK", "SK"),
    GSI1: ("GSI1PK", "GSI1SK"),
    GSI2: ("GSI2PK", "GSI2SK"),
    GSI3: ("GSI3PK", "GSI3SK"),
}


def entity_key(entity_type: str, entity_id: str) -> str:
    """Partition key value for an entity, e.g. PROPERTY#abc"""
    return f"{entity_type}{KEY_SEPARATOR}{entity_id}"


def composite_key(*parts: str) -> str:
    """Join logical values into one sortable key, e.g. 20251115#20251120"""
    return KEY_SEPARATOR.join(parts)
