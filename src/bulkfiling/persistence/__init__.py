"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from bulkfiling.core.config import AppSettings
from bulkfiling.core.protocols import IFileStore, IPricingStore
from bulkfiling.persistence.dynamodb_backend import DynamoDBPricingStore
from bulkfiling.persistence.memory_backend import MemoryFileStore, MemoryPricingStore
from bulkfiling.persistence.s3_backend import S3FileStore


def create_persistence(settings: AppSettings | None = None) -> tuple[IPricingStore | None, IFileStore]:
    """Create wired-up persistence backends from application settings.

    The pricing store is only built when pricing is sourced from DynamoDB;
    in ``dev`` uploads are kept in memory.

    Returns:
        Tuple of (pricing_store, file_store).
    """
    if settings is None:
        settings = AppSettings()

    pricing_store: IPricingStore | None = None
    if settings.pricing.source == "dynamodb":
        pricing_store = DynamoDBPricingStore(
            table_suffix=settings.dynamodb.table_suffix,
            region=settings.dynamodb.region,
            endpoint_url=settings.dynamodb.endpoint_url,
        )

    if settings.environment == "dev" and not settings.s3.endpoint_url:
        file_store: IFileStore = MemoryFileStore()
    else:
        file_store = S3FileStore(
            bucket=settings.s3.bucket,
            region=settings.s3.region,
            endpoint_url=settings.s3.endpoint_url,
        )

    return pricing_store, file_store


__all__ = [
    "DynamoDBPricingStore",
    "MemoryFileStore",
    "MemoryPricingStore",
    "S3FileStore",
    "create_persistence",
]
