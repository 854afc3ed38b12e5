#!/usr/bin/env python3
"""Create DynamoDB KV tables for local development.

This script creates one table per resource type (trips, mileage, expenses), configured
against DynamoDB Local. Each table is keyed by the full KV key and has TTL enabled on
the `ttl` attribute.

Usage:
    python scripts/create_local_tables.py
"""

import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import RESOURCE_TYPES, get_config


def create_kv_table(dynamodb, table_name: str) -> None:
    """Create a KV table with a string partition key and TTL."""
    try:
        dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "pk", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "pk", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        print(f"✓ Created {table_name} table")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"✓ {table_name} table already exists")
        else:
            raise

    try:
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": "ttl"},
        )
    except ClientError as e:
        # Re-enabling TTL on a table that already has it is rejected.
        if e.response["Error"]["Code"] != "ValidationException":
            raise


def main():
    """Create all configured KV tables."""
    config = get_config()

    endpoint_url = config.dynamodb_endpoint or "http://localhost:8000"

    print(f"Creating DynamoDB tables at {endpoint_url}...")
    print()

    # For DynamoDB Local, use dummy credentials
    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )

    for resource_type in RESOURCE_TYPES:
        table_name = config.table_for(resource_type)
        if table_name is None:
            print(f"- {resource_type}: no table configured, skipping")
            continue
        create_kv_table(dynamodb, table_name)

    print()
    print("✅ All DynamoDB tables ready")


if __name__ == "__main__":
    main()
