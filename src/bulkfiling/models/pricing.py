"""Pricing schedule and quote models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from bulkfiling.models.entity import ServiceType


class VolumeTier(BaseModel):
    """Discount applied when the filing count falls within [min_count, max_count]."""

    min_count: int
    max_count: Optional[int] = None  # None = unbounded
    discount_pct: Decimal = Decimal("0")

    def contains(self, count: int) -> bool:
        if count < self.min_count:
            return False
        return self.max_count is None or count <= self.max_count


def _default_tiers() -> list[VolumeTier]:
    return [
        VolumeTier(min_count=1, max_count=25, discount_pct=Decimal("0")),
        VolumeTier(min_count=26, max_count=75, discount_pct=Decimal("5")),
        VolumeTier(min_count=76, max_count=150, discount_pct=Decimal("10")),
    ]


class PricingSchedule(BaseModel):
    """Per-entity fees by service type, with filing volume tiers."""

    monitoring_fee: Decimal = Decimal("249")
    filing_fee: Decimal = Decimal("398")
    tiers: list[VolumeTier] = Field(default_factory=_default_tiers)

    @field_validator("tiers")
    @classmethod
    def _sorted_tiers(cls, tiers: list[VolumeTier]) -> list[VolumeTier]:
        return sorted(tiers, key=lambda t: t.min_count)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> PricingSchedule:
        """Build from a stored schedule item (DynamoDB or memory)."""
        data: dict[str, Any] = {}
        for key in ("monitoring_fee", "filing_fee"):
            if key in item:
                data[key] = Decimal(str(item[key]))
        if "tiers" in item:
            data["tiers"] = [
                VolumeTier(
                    min_count=int(t["min_count"]),
                    max_count=int(t["max_count"]) if t.get("max_count") is not None else None,
                    discount_pct=Decimal(str(t.get("discount_pct", 0))),
                )
                for t in item["tiers"]
            ]
        return cls(**data)


class EntityCharge(BaseModel):
    """Fee charged for one selected entity."""

    entity_id: str
    service_type: ServiceType
    fee: Decimal


class PricingSummary(BaseModel):
    """Result of one pricing call over a selected subset."""

    selected_ids: list[str] = Field(default_factory=list)
    per_entity: list[EntityCharge] = Field(default_factory=list)
    monitoring_count: int = 0
    monitoring_subtotal: Decimal = Decimal("0.00")
    filing_count: int = 0
    filing_base_fee: Decimal = Decimal("0.00")
    filing_unit_price: Decimal = Decimal("0.00")
    filing_discount_pct: Decimal = Decimal("0")
    filing_subtotal: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

    @property
    def filing_savings(self) -> Decimal:
        """Discount amount across all filing entities relative to the undiscounted fee."""
        return (self.filing_base_fee - self.filing_unit_price) * self.filing_count
