"""
Area unit conversion.

All areas are normalised to acres before any product math is done.
"""
from .errors import UnknownUnitError

SQFT_PER_ACRE = 43_560.0
SQM_PER_ACRE = 4_046.8564224
SQM_PER_HECTARE = 10_000.0

# Multipliers taking one unit of area to acres. Hectares are derived from
# square metres so the same physical area agrees across units.
ACRES_PER_UNIT = {
    "acre": 1.0,
    "sqft": 1.0 / SQFT_PER_ACRE,
    "sqm": 1.0 / SQM_PER_ACRE,
    "ha": SQM_PER_HECTARE / SQM_PER_ACRE,
}

UNIT_LABELS = {
    "sqft": "sq ft",
    "sqm": "m²",
    "acre": "acres",
    "ha": "ha",
}


def _factor(unit: str) -> float:
    try:
        return ACRES_PER_UNIT[unit]
    except (KeyError, TypeError):
        raise UnknownUnitError(unit) from None


def to_acres(value: float, unit: str) -> float:
    """Convert an area in ``unit`` to acres. ``acre`` is the identity."""
    if unit == "acre":
        return value
    return value * _factor(unit)


def from_acres(acres: float, unit: str) -> float:
    """Inverse of :func:`to_acres`."""
    if unit == "acre":
        return acres
    return acres / _factor(unit)
