"""Engine subpackage - unit conversion, product pricing and delivery math."""
from .pricing_engine import (
    PricingEngine,
    required_product,
    cost,
    packaging_count,
    delivery_hours,
    delivery_cost,
    format_number,
)
from .units import to_acres, from_acres
from .models import (
    LandDescription,
    GeoCoordinate,
    AreaQuantity,
    PricingTier,
    DeliveryQuote,
    QuoteRequest,
    Quote,
)
from .tier_matcher import TierMatcher
from .errors import ConversionError, InvalidInputError, OutOfBoundsError, UnknownUnitError

__all__ = [
    'PricingEngine', 'required_product', 'cost', 'packaging_count',
    'delivery_hours', 'delivery_cost', 'format_number',
    'to_acres', 'from_acres',
    'LandDescription', 'GeoCoordinate', 'AreaQuantity', 'PricingTier',
    'DeliveryQuote', 'QuoteRequest', 'Quote',
    'TierMatcher',
    'ConversionError', 'InvalidInputError', 'OutOfBoundsError', 'UnknownUnitError',
]
