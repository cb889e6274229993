"""
Data models for the quote engine and the ATS geocoder.

Uses dataclasses for structured, type-safe data representation. Inputs are
frozen: a quote is recomputed from a fresh request on every change.
"""
import re
from dataclasses import dataclass, field
from typing import Optional

from .units import to_acres


@dataclass
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class LandDescription:
    """A legal subdivision under the Alberta Township System."""
    lsd: str
    section: str
    township: str
    range: str
    meridian: str

    # e.g. "4-12-34-5 W5", "4-12-34-5-W5", "04-12-034-05W5"
    _PATTERN = re.compile(
        r"^\s*(\w+)\s*-\s*(\w+)\s*-\s*(\w+)\s*-\s*(\w+?)\s*[-\s]?\s*(W\d)\s*$",
        re.IGNORECASE,
    )

    @classmethod
    def parse(cls, text: str) -> 'LandDescription':
        """Parse the conventional written form ``LSD-SEC-TWP-RGE W5``.

        Only the shape is checked here; values are validated on conversion.
        """
        match = cls._PATTERN.match(text or "")
        if not match:
            raise ValueError(f"Not a land description: {text!r}")
        lsd, section, township, rng, meridian = match.groups()
        return cls(
            lsd=lsd.lstrip("0") or "0",
            section=section.lstrip("0") or "0",
            township=township.lstrip("0") or "0",
            range=rng.lstrip("0") or "0",
            meridian=meridian.upper(),
        )

    def format(self) -> str:
        return f"{self.lsd}-{self.section}-{self.township}-{self.range} {self.meridian}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class GeoCoordinate:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def as_query(self) -> str:
        """Format for a distance provider destination parameter."""
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class AreaQuantity:
    """An area in one of the supported units."""
    value: float
    unit: str

    def to_acres(self) -> float:
        return to_acres(self.value, self.unit)


@dataclass(frozen=True)
class PricingTier:
    """Price per pound that applies once product weight reaches a threshold."""
    label: str
    threshold_lbs: float
    price_per_lb: float


@dataclass(frozen=True)
class DeliveryQuote:
    """Delivery charge derived from a one-way driving distance."""
    one_way_km: float
    round_trip_hours: int
    cost: float


@dataclass(frozen=True)
class QuoteRequest:
    """Everything a quote is derived from."""
    area: float
    unit: str = "acre"
    one_way_km: Optional[float] = None
    destination: Optional[str] = None


@dataclass
class Quote:
    """Complete result of a quote calculation."""
    area: float
    unit: str
    acres: float
    product_lbs: float
    tier: str
    price_per_lb: float
    product_cost: float
    bags: int
    delivery: Optional[DeliveryQuote] = None
    destination: Optional[str] = None
    total: float = 0.0
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a quote-level warning."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
