"""PricingEngine -- tiered, service-differentiated quote for a selected subset.

Monitoring is a flat per-entity fee. Filing uses one unit price for the whole
selection, chosen from the volume tier that contains the filing count. A count
above every tier gets no discount (the 151+ reversion is intentional and
logged).
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from decimal import ROUND_HALF_UP, Decimal

from bulkfiling.core.config import PricingConfig
from bulkfiling.core.exceptions import PricingScheduleNotFoundError
from bulkfiling.core.logging import get_logger
from bulkfiling.core.protocols import IPricingStore
from bulkfiling.models.entity import EntityRecord, ServiceType
from bulkfiling.models.pricing import EntityCharge, PricingSchedule, PricingSummary, VolumeTier

logger = get_logger(__name__)

CENTS = Decimal("0.01")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class PricingEngine:
    """Computes quotes against one pricing schedule. Never mutates entities."""

    def __init__(self, schedule: PricingSchedule | None = None) -> None:
        self.schedule = schedule or PricingSchedule()

    def tier_for(self, filing_count: int) -> VolumeTier | None:
        for tier in self.schedule.tiers:
            if tier.contains(filing_count):
                return tier
        return None

    def filing_discount_pct(self, filing_count: int) -> Decimal:
        if filing_count <= 0:
            return _ZERO
        tier = self.tier_for(filing_count)
        if tier is None:
            logger.warning(
                "filing_volume_above_tiers",
                filing_count=filing_count,
                unit_price=str(to_cents(self.schedule.filing_fee)),
            )
            return _ZERO
        return tier.discount_pct

    def quote(
        self,
        entities: Iterable[EntityRecord],
        selected_ids: Collection[str] | None = None,
    ) -> PricingSummary:
        """Price the selected entities (all of them when ``selected_ids`` is None).

        Ids that match no entity are ignored; selection order follows the
        entity list.
        """
        entities = list(entities)
        if selected_ids is None:
            selected = entities
        else:
            wanted = set(selected_ids)
            selected = [e for e in entities if e.id in wanted]

        monitoring = [e for e in selected if e.service_type is ServiceType.MONITORING]
        filing = [e for e in selected if e.service_type is ServiceType.FILING]

        monitoring_fee = to_cents(self.schedule.monitoring_fee)
        discount_pct = self.filing_discount_pct(len(filing))
        unit_price = to_cents(self.schedule.filing_fee * (_HUNDRED - discount_pct) / _HUNDRED)

        charges = [
            EntityCharge(
                entity_id=e.id,
                service_type=e.service_type,
                fee=monitoring_fee if e.service_type is ServiceType.MONITORING else unit_price,
            )
            for e in selected
        ]
        monitoring_subtotal = to_cents(monitoring_fee * len(monitoring))
        filing_subtotal = to_cents(unit_price * len(filing))

        summary = PricingSummary(
            selected_ids=[e.id for e in selected],
            per_entity=charges,
            monitoring_count=len(monitoring),
            monitoring_subtotal=monitoring_subtotal,
            filing_count=len(filing),
            filing_base_fee=to_cents(self.schedule.filing_fee),
            filing_unit_price=unit_price if filing else to_cents(_ZERO),
            filing_discount_pct=discount_pct,
            filing_subtotal=filing_subtotal,
            total=to_cents(monitoring_subtotal + filing_subtotal),
        )
        logger.info(
            "quote_computed",
            selected=len(selected),
            monitoring=summary.monitoring_count,
            filing=summary.filing_count,
            discount_pct=str(discount_pct),
            total=str(summary.total),
        )
        return summary


def load_schedule(
    store: IPricingStore | None,
    config: PricingConfig,
    firm_id: str | None = None,
) -> PricingSchedule:
    """Stored schedule for ``firm_id`` (GLOBAL fallback inside the store), else config defaults."""
    defaults = PricingSchedule(monitoring_fee=config.monitoring_fee, filing_fee=config.filing_fee)
    if store is None or config.source == "static":
        return defaults
    try:
        item = store.get_schedule(firm_id)
    except PricingScheduleNotFoundError:
        logger.warning("pricing_schedule_missing", firm_id=firm_id, fallback="config")
        return defaults
    return PricingSchedule.from_item(item)
