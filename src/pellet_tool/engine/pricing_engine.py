"""
Pricing Engine - Product quantity, cost, packaging and delivery math.

The module-level functions are the pure building blocks; PricingEngine
composes them into a traced Quote:
- Area → acres (unit conversion)
- Acres → required product (application rate)
- Product weight → tier → product cost
- Product weight → tote bag count
- One-way distance → round-trip hours → delivery cost
"""
import math
from typing import Iterable, Optional, Union

from ..config.settings import get_settings, Settings
from .models import DeliveryQuote, PricingTier, Quote, QuoteRequest
from .tier_matcher import TierMatcher
from .units import to_acres, UNIT_LABELS


APPLICATION_RATE = 1500.0  # lb/acre
BAG_CAPACITY = 1000.0  # lb per tote bag
AVERAGE_SPEED_KMH = 80.0
HOURLY_RATE = 150.0  # $/hour of truck time, round trip


Pricing = Union[float, TierMatcher, Iterable[PricingTier]]


def _require_finite(value: float, name: str):
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")


def required_product(acres: float) -> float:
    """Pounds of product needed to treat ``acres``."""
    return acres * APPLICATION_RATE


def _price_per_lb(lbs: float, pricing: Pricing) -> float:
    if isinstance(pricing, (int, float)):
        return float(pricing)
    if not isinstance(pricing, TierMatcher):
        pricing = TierMatcher(pricing)
    return pricing.price_for(lbs)


def cost(lbs: float, pricing: Pricing) -> float:
    """
    Product cost in dollars.

    ``pricing`` is either a price per pound or a tier table; with a table the
    rate is picked by ``lbs``.
    """
    return lbs * _price_per_lb(lbs, pricing)


def packaging_count(lbs: float) -> int:
    """Tote bags needed; a partial bag still takes a whole bag."""
    _require_finite(lbs, "lbs")
    return math.ceil(lbs / BAG_CAPACITY)


def delivery_hours(one_way_km: float) -> int:
    """Round-trip truck hours, rounded half-up to a whole billable hour."""
    _require_finite(one_way_km, "one_way_km")
    hours = (2 * one_way_km) / AVERAGE_SPEED_KMH
    return int(math.floor(hours + 0.5))


def delivery_cost(one_way_km: float) -> float:
    return delivery_hours(one_way_km) * HOURLY_RATE


def delivery_quote(one_way_km: float) -> DeliveryQuote:
    return DeliveryQuote(
        one_way_km=one_way_km,
        round_trip_hours=delivery_hours(one_way_km),
        cost=delivery_cost(one_way_km),
    )


def format_number(num: float) -> str:
    """Two decimals with thousands separators, e.g. ``26,250.00``."""
    return f"{num:,.2f}"


class PricingEngine:
    """
    Core quote engine.

    Resolution order:
    1. Convert the requested area to acres
    2. Compute required product weight from the application rate
    3. Select the price tier from the product weight
    4. Compute product cost and tote bag count
    5. If a one-way distance is known, add the delivery charge
    """

    def __init__(self, settings: Optional[Settings] = None, tiers: Optional[TierMatcher] = None):
        """Initialize engine with the active tier table."""
        self.settings = settings or get_settings()
        self.tier_matcher = tiers or TierMatcher.from_csv(self.settings.pricing_tiers)

    def reload_data(self):
        """Reload the tier table from disk."""
        self.tier_matcher = TierMatcher.from_csv(self.settings.pricing_tiers)

    def calculate(self, request: QuoteRequest) -> Quote:
        """
        Calculate a quote with full traceability.

        Args:
            request: QuoteRequest with area, unit and optional distance

        Returns:
            Quote with product, delivery, totals and trace

        Raises:
            UnknownUnitError: if the request unit is not supported
        """
        acres = to_acres(request.area, request.unit)
        lbs = required_product(acres)
        tier = self.tier_matcher.select(lbs)
        product_cost = cost(lbs, tier.price_per_lb)

        quote = Quote(
            area=request.area,
            unit=request.unit,
            acres=acres,
            product_lbs=lbs,
            tier=tier.label,
            price_per_lb=tier.price_per_lb,
            product_cost=product_cost,
            bags=packaging_count(lbs),
            destination=request.destination,
        )

        label = UNIT_LABELS.get(request.unit, request.unit)
        quote.add_trace("Area", f"{request.area:g} {label} converted to acres", f"{acres:.4f}")
        quote.add_trace("Product", f"{acres:.4f} ac × {APPLICATION_RATE:g} lb/ac", f"{format_number(lbs)} lbs")
        quote.add_trace("Tier", f"{tier.label} applies from {format_number(tier.threshold_lbs)} lbs", f"${tier.price_per_lb:.2f}/lb")
        quote.add_trace("Product Cost", f"{format_number(lbs)} lbs × ${tier.price_per_lb:.2f}", f"${format_number(product_cost)}")
        quote.add_trace("Packaging", f"{BAG_CAPACITY:g} lb tote bags", str(quote.bags))

        if lbs <= 0:
            quote.add_warning("Area is zero; nothing to quote")

        quote.total = product_cost
        if request.one_way_km is not None:
            delivery = delivery_quote(request.one_way_km)
            quote.delivery = delivery
            quote.total += delivery.cost
            quote.add_trace(
                "Delivery",
                f"{request.one_way_km:.1f} km one way, {delivery.round_trip_hours} h round trip × ${HOURLY_RATE:.2f}/h",
                f"${format_number(delivery.cost)}",
            )
        else:
            quote.add_trace("Delivery", "No destination given, delivery not included")

        quote.add_trace("Total", "Product plus delivery", f"${format_number(quote.total)}")
        return quote
