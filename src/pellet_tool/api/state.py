"""
Shared service instances for the API, created on first use.

Routes receive these through FastAPI dependencies so tests can override them.
"""
from typing import Optional

from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.distance_service import DistanceService
from ..services.email_service import EmailService

_engine: Optional[PricingEngine] = None
_distance: Optional[DistanceService] = None
_email: Optional[EmailService] = None


def get_engine() -> PricingEngine:
    global _engine
    if _engine is None:
        _engine = PricingEngine(get_settings())
    return _engine


def get_distance_service() -> DistanceService:
    global _distance
    if _distance is None:
        _distance = DistanceService(get_settings())
    return _distance


def get_email_service() -> EmailService:
    global _email
    if _email is None:
        _email = EmailService(get_settings())
    return _email
