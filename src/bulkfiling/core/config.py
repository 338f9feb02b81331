"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings


class PricingConfig(BaseSettings):
    """Default fee schedule, used when no stored schedule is available."""

    model_config = {"env_prefix": "BULKFILING_PRICING_"}

    source: Literal["static", "dynamodb"] = "static"
    monitoring_fee: Decimal = Decimal("249")
    filing_fee: Decimal = Decimal("398")


class ParserConfig(BaseSettings):
    """Upload parsing limits."""

    model_config = {"env_prefix": "BULKFILING_PARSER_"}

    chunk_size: int = 50  # entities produced between progress yields
    max_upload_bytes: int = 20 * 1024 * 1024


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration."""

    model_config = {"env_prefix": "BULKFILING_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class S3Config(BaseSettings):
    """S3 upload storage configuration."""

    model_config = {"env_prefix": "BULKFILING_S3_"}

    bucket: str = "bulkfiling-uploads"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class CRMConfig(BaseSettings):
    """HighLevel contact-management integration."""

    model_config = {"env_prefix": "BULKFILING_CRM_"}

    base_url: str = "https://services.leadconnectorhq.com"
    api_key: str = ""
    location_id: str = ""
    api_version: str = "2021-07-28"
    timeout: float = 10.0


class ProfileServiceConfig(BaseSettings):
    """Firm profile service (read-only lookups of registered users)."""

    model_config = {"env_prefix": "BULKFILING_PROFILE_"}

    base_url: str = "http://profile-service.internal"
    timeout: float = 5.0


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "BULKFILING_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    pricing: PricingConfig = PricingConfig()
    parser: ParserConfig = ParserConfig()
    dynamodb: DynamoDBConfig = DynamoDBConfig()
    s3: S3Config = S3Config()
    crm: CRMConfig = CRMConfig()
    profile: ProfileServiceConfig = ProfileServiceConfig()
