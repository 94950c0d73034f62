"""
Create the single DynamoDB table for local development

Usage:
    python -m hai.scripts.create_tables_local
"""

import boto3
from botocore.exceptions import ClientError
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from hai.config import settings
from hai.services.keys import INDEX_KEY_ATTRIBUTES, PRIMARY_INDEX


def key_schema(pk_attr, sk_attr):
    return [
        {'AttributeName': pk_attr, 'KeyType': 'HASH'},
        {'AttributeName': sk_attr, 'KeyType': 'RANGE'},
    ]


def table_definition(table_name=None):
    """create_table arguments: PK/SK plus GSI1-GSI3, all projecting ALL attributes"""
    pk_attr, sk_attr = INDEX_KEY_ATTRIBUTES[PRIMARY_INDEX]

    attributes = []
    for attrs in INDEX_KEY_ATTRIBUTES.values():
        attributes.extend({'AttributeName': name, 'AttributeType': 'S'} for name in attrs)

    provisioned = settings.DYNAMODB_BILLING_MODE == 'PROVISIONED'
    throughput = {
        'ReadCapacityUnits': settings.DYNAMODB_READ_CAPACITY,
        'WriteCapacityUnits': settings.DYNAMODB_WRITE_CAPACITY,
    }

    indexes = []
    for index, attrs in INDEX_KEY_ATTRIBUTES.items():
        if index is PRIMARY_INDEX:
            continue
        gsi = {
            'IndexName': index,
            'KeySchema': key_schema(*attrs),
            'Projection': {'ProjectionType': 'ALL'},
        }
        if provisioned:
            gsi['ProvisionedThroughput'] = throughput
        indexes.append(gsi)

    definition = {
        'TableName': table_name or settings.DYNAMODB_TABLE_NAME,
        'KeySchema': key_schema(pk_attr, sk_attr),
        'AttributeDefinitions': attributes,
        'GlobalSecondaryIndexes': indexes,
        'BillingMode': settings.DYNAMODB_BILLING_MODE,
    }
    if provisioned:
        definition['ProvisionedThroughput'] = throughput

    return definition


def create_tables():
    """Create the table if it does not exist"""

    print("Creating DynamoDB table...")
    print(f"Endpoint: {settings.dynamodb_endpoint}")
    print(f"Region: {settings.AWS_REGION}")

    dynamodb = boto3.client(
        'dynamodb',
        endpoint_url=settings.dynamodb_endpoint,
        region_name=settings.AWS_REGION,
        aws_access_key_id='local',
        aws_secret_access_key='local'
    )

    definition = table_definition()

    try:
        print(f"\nCreating table: {definition['TableName']}")
        dynamodb.create_table(**definition)
        print(f"✓ Table created: {definition['TableName']}")

    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceInUseException':
            print(f"⚠ Table already exists: {definition['TableName']}")
        else:
            print(f"✗ Error creating table {definition['TableName']}: {e}")
            raise

    print("\n✓ Table ready!")


if __name__ == "__main__":
    create_tables()
