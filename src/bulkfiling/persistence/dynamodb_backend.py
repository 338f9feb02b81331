"""DynamoDB backend implementing IPricingStore.

One table, one item per schedule: ``PK = PRICING#FIRM#<id>`` for a firm
override, ``PK = PRICING#GLOBAL`` for the house schedule, ``SK = SCHEDULE``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from bulkfiling.core.exceptions import PricingScheduleNotFoundError
from bulkfiling.core.logging import get_logger

logger = get_logger(__name__)

PRICING_TABLE = "bulkfiling-pricing-config"
GLOBAL_SCOPE = "GLOBAL"
SCHEDULE_SK = "SCHEDULE"


def to_dynamodb(obj: Any) -> Any:
    """DynamoDB rejects floats: convert them (recursively) to Decimal."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dynamodb(i) for i in obj]
    return obj


def schedule_pk(firm_id: str | None) -> str:
    return f"PRICING#FIRM#{firm_id}" if firm_id else f"PRICING#{GLOBAL_SCOPE}"


def schedule_from_item(item: dict[str, Any]) -> dict[str, Any]:
    """Drop the key attributes; fee values stay Decimal."""
    return {k: v for k, v in item.items() if k not in ("PK", "SK")}


class DynamoDBPricingStore:
    """Production IPricingStore: firm-specific schedule with GLOBAL fallback."""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_suffix = table_suffix
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)

    @property
    def table_name(self) -> str:
        return f"{PRICING_TABLE}{self._table_suffix}"

    def _table(self):
        return self._ddb.Table(self.table_name)

    def _load(self, firm_id: str | None) -> dict[str, Any] | None:
        resp = self._table().get_item(Key={"PK": schedule_pk(firm_id), "SK": SCHEDULE_SK})
        item = resp.get("Item")
        return schedule_from_item(item) if item else None

    def get_schedule(self, firm_id: str | None = None) -> dict[str, Any]:
        schedule = self._load(firm_id) if firm_id else None
        if schedule is None:
            schedule = self._load(None)
        if schedule is None:
            raise PricingScheduleNotFoundError(
                f"No pricing schedule for firm_id={firm_id!r} in {self.table_name}"
            )
        return schedule

    def put_schedule(self, schedule: dict[str, Any], firm_id: str | None = None) -> None:
        item = {**to_dynamodb(schedule), "PK": schedule_pk(firm_id), "SK": SCHEDULE_SK}
        try:
            self._table().put_item(Item=item)
        except ClientError as exc:
            logger.error("pricing_schedule_write_failed", firm_id=firm_id, error=str(exc))
            raise
        logger.info("pricing_schedule_written", firm_id=firm_id or GLOBAL_SCOPE)
