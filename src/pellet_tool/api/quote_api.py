"""
Quote API - FastAPI router for quotes, land descriptions and distances.
"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from ..engine import PricingEngine, QuoteRequest, LandDescription, ConversionError, to_acres
from ..engine.pricing_engine import delivery_quote
from ..geo import convert, convert_with_trace, validate
from ..services.distance_service import DistanceService
from ..services.errors import ServiceError
from .state import get_engine, get_distance_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quote"])

# Request limits, in the request's own unit / kilometres
MAX_AREA = 1e9
MAX_ONE_WAY_KM = 5000.0


# Pydantic models for API
class LandDescriptionIn(BaseModel):
    """A land description as submitted from the LSD selector."""
    lsd: Union[str, int]
    section: Union[str, int]
    township: Union[str, int]
    range: Union[str, int]
    meridian: str

    def to_land(self) -> LandDescription:
        return LandDescription(
            lsd=str(self.lsd),
            section=str(self.section),
            township=str(self.township),
            range=str(self.range),
            meridian=self.meridian,
        )


class ConvertRequest(LandDescriptionIn):
    """Request model for converting a land description."""
    trace: bool = False


class DistanceRequest(BaseModel):
    """Request model for a delivery distance lookup."""
    destination: Optional[str] = None
    land: Optional[LandDescriptionIn] = None


class QuoteIn(BaseModel):
    """Request model for a full quote."""
    area: float = Field(ge=0, le=MAX_AREA, allow_inf_nan=False)
    unit: str = "acre"
    destination: Optional[str] = None
    land: Optional[LandDescriptionIn] = None
    one_way_km: Optional[float] = Field(default=None, ge=0, le=MAX_ONE_WAY_KM, allow_inf_nan=False)


def _conversion_failed(e: ConversionError) -> HTTPException:
    return HTTPException(status_code=422, detail=e.to_dict())


def _upstream_failed(e: ServiceError) -> HTTPException:
    return HTTPException(status_code=502, detail={"error": "upstream_error", "message": str(e)})


def _lookup_distance(
    distance: DistanceService,
    destination: Optional[str],
    land: Optional[LandDescriptionIn],
) -> tuple[Optional[float], Optional[str]]:
    """Resolve (one_way_km, destination label); land takes precedence over a town."""
    if land is not None:
        description = land.to_land()
        coordinate = convert(description)
        return distance.one_way_km(coordinate), description.format()
    if destination:
        return distance.one_way_km(destination), destination
    return None, None


# Endpoints

@router.post("/lsd/convert")
async def convert_land(req: ConvertRequest):
    """Convert an ATS land description to latitude/longitude."""
    land = req.to_land()
    try:
        coordinate, trace = convert_with_trace(land)
    except ConversionError as e:
        raise _conversion_failed(e)

    body = {
        "land": land.format(),
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
    }
    if req.trace:
        body["trace"] = [
            {"step": step, "description": desc, "value": val}
            for step, desc, val in trace
        ]
    return body


@router.post("/distance")
async def get_distance(req: DistanceRequest, distance: DistanceService = Depends(get_distance_service)):
    """Driving distance from the depot plus the delivery charge."""
    if req.land is None and not req.destination:
        raise HTTPException(status_code=422, detail={"error": "invalid_input", "fields": ["destination", "land"]})
    try:
        km, label = _lookup_distance(distance, req.destination, req.land)
    except ConversionError as e:
        raise _conversion_failed(e)
    except ServiceError as e:
        raise _upstream_failed(e)

    return {
        "destination": label,
        "one_way_km": km,
        "delivery": jsonable_encoder(delivery_quote(km)),
    }


@router.post("/quote")
async def create_quote(
    req: QuoteIn,
    engine: PricingEngine = Depends(get_engine),
    distance: DistanceService = Depends(get_distance_service),
):
    """Product, packaging and (when a destination is known) delivery quote."""
    try:
        # Reject a bad unit before any billable distance lookup
        to_acres(req.area, req.unit)

        km, label = req.one_way_km, req.destination
        if km is None:
            km, label = _lookup_distance(distance, req.destination, req.land)
        elif req.land is not None:
            description = req.land.to_land()
            validate(description)
            label = description.format()

        quote = engine.calculate(QuoteRequest(
            area=req.area,
            unit=req.unit,
            one_way_km=km,
            destination=label,
        ))
    except ConversionError as e:
        raise _conversion_failed(e)
    except ServiceError as e:
        raise _upstream_failed(e)

    return jsonable_encoder(quote)
