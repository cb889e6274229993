"""
Tier Matcher - Selects the per-pound price tier for a product weight.

Tiers are loaded from pricing_tiers.csv and matched against the computed
required-product weight (never the raw area).
"""
import bisect
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .models import PricingTier


DEFAULT_TIERS = (
    PricingTier(label="STANDARD", threshold_lbs=0.0, price_per_lb=1.75),
    PricingTier(label="BULK", threshold_lbs=50_000.0, price_per_lb=1.60),
)

CSV_COLUMNS = ['label', 'threshold_lbs', 'price_per_lb']


class TierMatcher:
    """
    Matches a product weight against an ordered tier table.

    The tier with the highest threshold at or below the weight applies, so
    a weight exactly on a threshold gets that threshold's rate.
    """

    def __init__(self, tiers: Optional[Iterable[PricingTier]] = None):
        tiers = list(tiers) if tiers is not None else list(DEFAULT_TIERS)
        self.tiers = self._validate(tiers)
        self._thresholds = [t.threshold_lbs for t in self.tiers]

    @classmethod
    def from_csv(cls, path: Optional[Path]) -> 'TierMatcher':
        """Load tiers from CSV, falling back to the built-in table."""
        if path is None or not path.exists():
            return cls()

        df = pd.read_csv(path, dtype={'label': str})
        df.columns = [c.strip() for c in df.columns]
        missing = [c for c in CSV_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")

        df['label'] = df['label'].astype(str).str.strip()
        tiers = [
            PricingTier(
                label=row.label,
                threshold_lbs=float(row.threshold_lbs),
                price_per_lb=float(row.price_per_lb),
            )
            for row in df[CSV_COLUMNS].itertuples(index=False)
        ]
        return cls(tiers)

    @staticmethod
    def _validate(tiers: list[PricingTier]) -> list[PricingTier]:
        if not tiers:
            raise ValueError("At least one pricing tier is required")

        tiers = sorted(tiers, key=lambda t: t.threshold_lbs)
        seen = set()
        for tier in tiers:
            if tier.threshold_lbs in seen:
                raise ValueError(f"Duplicate tier threshold: {tier.threshold_lbs}")
            seen.add(tier.threshold_lbs)
            if tier.price_per_lb <= 0:
                raise ValueError(f"Tier {tier.label} must have a positive price")
            if tier.threshold_lbs < 0:
                raise ValueError(f"Tier {tier.label} has a negative threshold")

        if tiers[0].threshold_lbs != 0:
            raise ValueError("The lowest tier must start at 0 lbs")
        return tiers

    def select(self, lbs: float) -> PricingTier:
        """Return the tier that applies to ``lbs`` of product."""
        index = bisect.bisect_right(self._thresholds, lbs) - 1
        return self.tiers[max(index, 0)]

    def price_for(self, lbs: float) -> float:
        return self.select(lbs).price_per_lb

    def describe(self) -> list[dict]:
        """Tier table as plain dicts for API responses."""
        return [
            {
                "label": t.label,
                "threshold_lbs": t.threshold_lbs,
                "price_per_lb": t.price_per_lb,
            }
            for t in self.tiers
        ]
