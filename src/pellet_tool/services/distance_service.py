"""
Distance Service - Driving distance from the depot via Google Distance Matrix.

Returns one-way kilometres for a free-text destination (e.g. a town name)
or a geocoded land description. Any failure raises DistanceLookupError;
a failed lookup never turns into a zero-distance delivery.
"""
import logging
from typing import Optional, Union

import requests
from pydantic import BaseModel, ValidationError

from ..config.settings import get_settings, Settings
from ..engine.models import GeoCoordinate
from .errors import DistanceLookupError

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
USER_AGENT = "pellet-tool/1.0"


class _Measure(BaseModel):
    text: str
    value: float


class _Element(BaseModel):
    status: str
    distance: Optional[_Measure] = None
    duration: Optional[_Measure] = None


class _Row(BaseModel):
    elements: list[_Element]


class DistanceMatrixResponse(BaseModel):
    """The parts of a Distance Matrix payload this service reads."""
    status: str
    rows: list[_Row] = []
    error_message: Optional[str] = None


class DistanceService:
    """Looks up driving distance from the configured depot."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @property
    def configured(self) -> bool:
        return self.settings.distance_configured

    def one_way_km(self, destination: Union[str, GeoCoordinate]) -> float:
        """
        Driving distance in kilometres from the depot to ``destination``.

        Raises:
            DistanceLookupError: no API key, HTTP failure, or no route
        """
        if not self.configured:
            raise DistanceLookupError("Distance lookup is not configured (GOOGLE_MAPS_API_KEY)")

        if isinstance(destination, GeoCoordinate):
            target = destination.as_query()
        else:
            target = (destination or "").strip()
        if not target:
            raise DistanceLookupError("A destination is required")

        params = {
            "origins": self.settings.depot_location,
            "destinations": target,
            "units": "metric",
            "key": self.settings.google_maps_api_key,
        }

        try:
            response = self.session.get(
                DISTANCE_MATRIX_URL,
                params=params,
                timeout=self.settings.http_timeout,
            )
            response.raise_for_status()
            payload = DistanceMatrixResponse.model_validate(response.json())
        except requests.RequestException as e:
            logger.error("Distance lookup to %s failed: %s", target, e)
            raise DistanceLookupError(f"Failed to fetch distance: {e}") from e
        except (ValueError, ValidationError) as e:
            logger.error("Unexpected distance payload for %s: %s", target, e)
            raise DistanceLookupError("Malformed distance response") from e

        if payload.status != "OK":
            detail = payload.error_message or payload.status
            raise DistanceLookupError(f"Distance provider error: {detail}")

        if not payload.rows or not payload.rows[0].elements:
            raise DistanceLookupError("Distance provider returned no routes")

        element = payload.rows[0].elements[0]
        if element.status != "OK" or element.distance is None:
            raise DistanceLookupError(f"Could not calculate distance to {target} ({element.status})")

        km = element.distance.value / 1000
        logger.info("Distance %s → %s: %.1f km", self.settings.depot_location, target, km)
        return km
