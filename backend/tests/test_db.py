"""
Test the DynamoDB adapter and store error mapping
"""

import asyncio
import pytest
from unittest.mock import MagicMock

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError, EndpointConnectionError

from hai.errors import (
    ConditionFailed, StoreRejected, StoreUnavailable, translate_store_error,
)
from hai.services.db import DatabaseService
from hai.services.expressions import FieldAssignment, SortCondition


def client_error(code, status=400, operation="PutItem"):
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} happened"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def item(pk, sk="METADATA", **attrs):
    return {"PK": pk, "SK": sk, **attrs}


def test_get_missing_item_returns_none(db):
    assert asyncio.run(db.get_item("GUEST#nope", "METADATA")) is None


def test_put_overwrites_whole_item(db):
    asyncio.run(db.put_item(item("GUEST#1", name="Ada", city="London")))
    asyncio.run(db.put_item(item("GUEST#1", name="Ada")))

    stored = asyncio.run(db.get_item("GUEST#1", "METADATA"))
    assert stored == {"PK": "GUEST#1", "SK": "METADATA", "name": "Ada"}


def test_conditional_put_raises_condition_failed(db):
    asyncio.run(db.put_item(item("RESERVATION#a")))

    with pytest.raises(ConditionFailed):
        asyncio.run(db.put_item(item("RESERVATION#a"), condition=Attr("PK").not_exists()))


def test_update_touches_only_named_attributes(db):
    asyncio.run(db.put_item(item("PROPERTY#1", room_name="Ocean", floor=2, type="suite")))

    # "name", "floor" and "type" are reserved words
    updated = asyncio.run(db.update_item(
        "PROPERTY#1", "METADATA",
        [FieldAssignment("name", "x"), FieldAssignment("type", None)],
    ))

    assert updated["name"] == "x"
    assert updated["room_name"] == "Ocean"
    assert updated["floor"] == 2
    assert "type" not in updated


def test_update_with_condition_on_missing_item(db):
    with pytest.raises(ConditionFailed):
        asyncio.run(db.update_item(
            "GUEST#missing", "METADATA",
            [FieldAssignment("name", "x")],
            condition=Attr("PK").exists(),
        ))


def test_delete_is_idempotent(db):
    asyncio.run(db.put_item(item("TASK#1")))

    asyncio.run(db.delete_item("TASK#1", "METADATA"))
    asyncio.run(db.delete_item("TASK#1", "METADATA"))

    assert asyncio.run(db.get_item("TASK#1", "METADATA")) is None


def test_query_gsi_with_sort_condition_and_order(db):
    for day in ["20251103", "20251101", "20251102"]:
        asyncio.run(db.put_item(item(f"MESSAGE#{day}", GSI1PK="MESSAGE", GSI1SK=day)))

    items = asyncio.run(db.query("GSI1", "MESSAGE"))
    assert [i["GSI1SK"] for i in items] == ["20251101", "20251102", "20251103"]

    items = asyncio.run(db.query("GSI1", "MESSAGE", scan_forward=False, limit=2))
    assert [i["GSI1SK"] for i in items] == ["20251103", "20251102"]

    items = asyncio.run(db.query("GSI1", "MESSAGE", SortCondition.between("20251102", "20251103")))
    assert len(items) == 2

    assert asyncio.run(db.query("GSI1", "GUEST")) == []


def test_query_primary_index(db):
    asyncio.run(db.put_item(item("STAFF#1")))

    items = asyncio.run(db.query(None, "STAFF#1", SortCondition.equals("METADATA")))
    assert len(items) == 1


def test_query_follows_pages(table):
    db = DatabaseService(table=table, page_size=2)
    for n in range(5):
        asyncio.run(db.put_item(item(f"GUEST#{n}", GSI1PK="GUEST", GSI1SK=str(n))))

    items = asyncio.run(db.query("GSI1", "GUEST"))
    assert [i["GSI1SK"] for i in items] == ["0", "1", "2", "3", "4"]

    items = asyncio.run(db.query("GSI1", "GUEST", limit=3))
    assert len(items) == 3


def test_query_unknown_index_rejected(db):
    with pytest.raises(StoreRejected):
        asyncio.run(db.query("GSI9", "GUEST"))


def test_query_non_positive_limit_returns_nothing():
    table = MagicMock()
    db = DatabaseService(table=table)

    assert asyncio.run(db.query("GSI1", "GUEST", limit=0)) == []
    table.query.assert_not_called()


# =============================================================================
# ERROR MAPPING
# =============================================================================

@pytest.mark.parametrize("code", ["ProvisionedThroughputExceededException", "ThrottlingException"])
def test_throttling_is_retryable(code):
    error = translate_store_error(client_error(code))
    assert isinstance(error, StoreUnavailable)
    assert error.retryable
    assert error.code == code


def test_server_side_failure_is_retryable():
    error = translate_store_error(client_error("SomethingBroke", status=503))
    assert isinstance(error, StoreUnavailable)


def test_validation_exception_is_rejected():
    error = translate_store_error(client_error("ValidationException"))
    assert isinstance(error, StoreRejected)
    assert not error.retryable


def test_condition_failure_maps_to_condition_failed():
    error = translate_store_error(client_error("ConditionalCheckFailedException"))
    assert isinstance(error, ConditionFailed)


def test_transport_failure_surfaces_as_unavailable():
    table = MagicMock()
    table.get_item.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")
    db = DatabaseService(table=table)

    with pytest.raises(StoreUnavailable) as exc_info:
        asyncio.run(db.get_item("GUEST#1", "METADATA"))

    assert isinstance(exc_info.value.__cause__, EndpointConnectionError)


def test_client_error_from_put_is_translated():
    table = MagicMock()
    table.put_item.side_effect = client_error("ValidationException")
    db = DatabaseService(table=table)

    with pytest.raises(StoreRejected):
        asyncio.run(db.put_item(item("GUEST#1")))


def test_verify_table_missing():
    table = MagicMock()
    table.name = "missing"
    table.load.side_effect = client_error("ResourceNotFoundException", operation="DescribeTable")
    db = DatabaseService(table=table)

    with pytest.raises(StoreRejected):
        asyncio.run(db.verify_table())
