"""
Hai Backend - DynamoDB Database Service

Purpose: Thin adapter over the single DynamoDB table (AWS or Local).
Five primitives: get, put, update, delete and index query.

Testing:
    # DynamoDB Local
    db = DatabaseService()
    await db.put_item({"PK": "GUEST#1", "SK": "METADATA", ...})
    item = await db.get_item("GUEST#1", "METADATA")

AWS Deployment Notes:
    - Table created by the infrastructure stack (see scripts/create_tables_local.py
      for the key schema and the three GSIs)
    - Uses on-demand billing (PAY_PER_REQUEST)
    - IAM role needs dynamodb:PutItem, GetItem, Query, UpdateItem, DeleteItem,
      DescribeTable on the table and its indexes
    - The adapter never retries; retryable failures surface as StoreUnavailable
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from hai.config import settings
from hai.errors import StoreRejected, translate_store_error
from hai.services.expressions import FieldAssignment, SortCondition, build_update_expression
from hai.services.keys import INDEX_KEY_ATTRIBUTES

logger = logging.getLogger(__name__)


def create_table_resource():
    """Build the boto3 Table resource for the configured table"""
    if settings.USE_DYNAMODB_LOCAL:
        dynamodb = boto3.resource(
            'dynamodb',
            endpoint_url=settings.DYNAMODB_LOCAL_ENDPOINT,
            region_name=settings.AWS_REGION,
            aws_access_key_id='local',
            aws_secret_access_key='local'
        )
        logger.info(f"Database: Using DynamoDB Local at {settings.DYNAMODB_LOCAL_ENDPOINT}")
    else:
        dynamodb = boto3.resource(
            'dynamodb',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
        logger.info("Database: Using DynamoDB AWS")

    return dynamodb.Table(settings.DYNAMODB_TABLE_NAME)


class DatabaseService:
    """
    Key-value store adapter for the single table
    """

    def __init__(self, table=None, page_size: Optional[int] = None):
        self.table = table if table is not None else create_table_resource()
        self.page_size = page_size or settings.QUERY_PAGE_SIZE

    # =========================================================================
    # TABLE VERIFICATION
    # =========================================================================

    async def verify_table(self):
        """Verify that the table exists"""
        try:
            self.table.load()
            logger.info(f"Table verified: {self.table.name}")
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceNotFoundException':
                logger.error(f"Table not found: {self.table.name}")
            raise translate_store_error(e) from e

    # =========================================================================
    # POINT OPERATIONS
    # =========================================================================

    async def get_item(self, pk: str, sk: str) -> Optional[Dict[str, Any]]:
        """Get item by primary key; None when absent"""
        try:
            response = self.table.get_item(Key={'PK': pk, 'SK': sk})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get item {pk}|{sk}: {e}")
            raise translate_store_error(e) from e

        return response.get('Item')

    async def put_item(self, item: Dict[str, Any], condition=None) -> None:
        """Write a complete item, replacing whatever is stored under its key"""
        kwargs: Dict[str, Any] = {'Item': item}
        if condition is not None:
            kwargs['ConditionExpression'] = condition

        try:
            self.table.put_item(**kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to put item {item.get('PK')}|{item.get('SK')}: {e}")
            raise translate_store_error(e) from e

        logger.debug(f"Put item: {item.get('PK')}")

    async def update_item(
        self,
        pk: str,
        sk: str,
        assignments: Sequence[FieldAssignment],
        condition=None,
    ) -> Dict[str, Any]:
        """
        Apply attribute assignments to one item

        Attributes not named in assignments are left untouched.

        Returns:
            The full item after the update
        """
        update = build_update_expression(assignments)

        kwargs: Dict[str, Any] = {
            'Key': {'PK': pk, 'SK': sk},
            'UpdateExpression': update.expression,
            'ExpressionAttributeNames': update.names,
            'ReturnValues': 'ALL_NEW',
        }
        if update.values:
            kwargs['ExpressionAttributeValues'] = update.values
        if condition is not None:
            kwargs['ConditionExpression'] = condition

        try:
            response = self.table.update_item(**kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to update item {pk}|{sk}: {e}")
            raise translate_store_error(e) from e

        return response.get('Attributes', {})

    async def delete_item(self, pk: str, sk: str) -> None:
        """Delete item; deleting a missing item is not an error"""
        try:
            self.table.delete_item(Key={'PK': pk, 'SK': sk})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete item {pk}|{sk}: {e}")
            raise translate_store_error(e) from e

        logger.debug(f"Deleted item: {pk}")

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def query(
        self,
        index: Optional[str],
        partition_value: str,
        sort_condition: Optional[SortCondition] = None,
        limit: Optional[int] = None,
        scan_forward: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Query the primary index (index=None) or a GSI

        Args:
            index: None, "GSI1", "GSI2" or "GSI3"
            partition_value: Exact value of the index partition key
            sort_condition: Optional predicate on the index sort key
            limit: Stop after this many items
            scan_forward: Ascending sort key order when True

        Returns:
            Matching items in index order (empty list when nothing matches)
        """
        if index not in INDEX_KEY_ATTRIBUTES:
            raise StoreRejected(f"Unknown index: {index}")
        if limit is not None and limit <= 0:
            return []

        pk_attr, sk_attr = INDEX_KEY_ATTRIBUTES[index]
        key_condition = Key(pk_attr).eq(partition_value)
        if sort_condition is not None:
            key_condition = key_condition & sort_condition.to_key_condition(sk_attr)

        kwargs: Dict[str, Any] = {
            'KeyConditionExpression': key_condition,
            'ScanIndexForward': scan_forward,
        }
        if index is not None:
            kwargs['IndexName'] = index

        items: List[Dict[str, Any]] = []

        try:
            while True:
                remaining = None if limit is None else limit - len(items)
                kwargs['Limit'] = self.page_size if remaining is None else min(self.page_size, remaining)

                response = self.table.query(**kwargs)
                items.extend(response.get('Items', []))

                last_key = response.get('LastEvaluatedKey')
                if not last_key or (limit is not None and len(items) >= limit):
                    break
                kwargs['ExclusiveStartKey'] = last_key

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to query {index or 'primary index'} for {partition_value}: {e}")
            raise translate_store_error(e) from e

        return items
