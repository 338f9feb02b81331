"""Create the pricing table and seed the GLOBAL fee schedule.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
    python scripts/seed_dynamodb.py --firm-id firm-42 --schedule firm42.json
"""

from __future__ import annotations

import argparse
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import boto3

from bulkfiling.models.pricing import PricingSchedule
from bulkfiling.persistence.dynamodb_backend import PRICING_TABLE, SCHEDULE_SK, schedule_pk, to_dynamodb


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create the pricing table. Skips if it already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    table_name = f"{PRICING_TABLE}{suffix}"
    if table_name in existing:
        print(f"  Table {table_name} already exists, skipping")
        return
    client.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    print(f"  Created table {table_name}")


def seed_pricing(
    ddb: Any, suffix: str = "", schedule: dict[str, Any] | None = None, firm_id: str | None = None
) -> dict[str, Any]:
    """Write ``schedule`` (default: the standard fee schedule) for ``firm_id`` or GLOBAL."""
    if schedule is None:
        schedule = PricingSchedule().model_dump()
    item = {"PK": schedule_pk(firm_id), "SK": SCHEDULE_SK, **to_dynamodb(schedule)}
    ddb.Table(f"{PRICING_TABLE}{suffix}").put_item(Item=item)
    print(f"  Seeded pricing schedule {item['PK']}")
    return item


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB pricing configuration")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--firm-id", default=None, help="Seed a firm-specific schedule instead of GLOBAL")
    parser.add_argument("--schedule", type=Path, default=None, help="JSON file with the schedule to write")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    print("Seeding data...")
    schedule = json.loads(args.schedule.read_text(), parse_float=Decimal) if args.schedule else None
    seed_pricing(ddb, suffix=args.table_suffix, schedule=schedule, firm_id=args.firm_id)

    print("Done!")


if __name__ == "__main__":
    main()
