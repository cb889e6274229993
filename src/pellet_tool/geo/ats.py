"""
ATS Geocoder - Alberta Township System land description → latitude/longitude.

Uses a fixed geometric model of the survey grid rather than survey data:
- Townships step north from the 49th parallel by a fixed height
- Sections form a 6×6 grid and LSDs a 4×4 grid, both numbered row-major
  with higher rows lying further south
- Ranges step away from each meridian in a meridian-dependent direction,
  scaled by cos(latitude)

The result is approximate (good enough to ask a driving-distance provider
for a route), pure and deterministic. No rounding is applied here.
"""
import math
import re
from dataclasses import dataclass, field
from typing import Union

from ..engine.errors import InvalidInputError, OutOfBoundsError
from ..engine.models import GeoCoordinate, LandDescription


FIELD_LIMITS = {
    'lsd': (1, 16),
    'section': (1, 36),
    'township': (1, 126),
    'range': (1, 34),
}

SECTIONS_PER_ROW = 6
LSDS_PER_ROW = 4

# W5 ranges 1-17 count east from the meridian, 18+ count west from it
W5_WESTWARD_FROM = 18

_INTEGER = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class AtsCalibration:
    """Named constant set for the grid model."""
    name: str = "ats-v1"
    base_latitude: float = 49.0
    # ~6 statute miles of latitude
    township_height: float = 0.0869
    # Degrees longitude per range before the cos(latitude) correction
    range_width: float = 0.1428571
    meridian_longitudes: dict = field(default_factory=lambda: {
        'W4': -110.0,
        'W5': -114.0,
        'W6': -118.0,
    })
    # Plausibility envelope; township 1 rows dip slightly below 49°
    lat_bounds: tuple = (48.9, 60.1)
    lng_bounds: tuple = (-120.0, -109.0)


DEFAULT_CALIBRATION = AtsCalibration()


def _parse_int(value: Union[str, int]) -> int:
    if isinstance(value, bool):
        raise ValueError("not an integer")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INTEGER.fullmatch(text):
        raise ValueError("not an integer")
    return int(text)


def validate(land: LandDescription, calibration: AtsCalibration = DEFAULT_CALIBRATION) -> dict:
    """
    Parse and range-check every field.

    Returns a dict of parsed integer fields plus the normalised meridian.
    Raises InvalidInputError naming every field that failed.
    """
    errors = {}
    parsed = {}

    for name, (low, high) in FIELD_LIMITS.items():
        raw = getattr(land, name)
        try:
            value = _parse_int(raw)
        except ValueError:
            errors[name] = f"{raw!r} is not an integer"
            continue
        if not low <= value <= high:
            errors[name] = f"{value} is outside {low}-{high}"
            continue
        parsed[name] = value

    meridian = str(land.meridian).strip().upper()
    if meridian not in calibration.meridian_longitudes:
        known = ", ".join(calibration.meridian_longitudes)
        errors['meridian'] = f"{land.meridian!r} is not one of {known}"
    else:
        parsed['meridian'] = meridian

    if errors:
        raise InvalidInputError(errors)
    return parsed


def _range_direction(meridian: str, rng: int) -> tuple[int, int]:
    """
    Return (direction, ranges_from_meridian) for a range.

    direction is -1 for westward (more negative longitude), +1 for eastward.
    """
    if meridian == 'W4':
        return -1, rng - 1
    if meridian == 'W6':
        return 1, rng - 1
    # W5
    if rng < W5_WESTWARD_FROM:
        return 1, rng - 1
    return -1, rng - W5_WESTWARD_FROM


def convert_with_trace(
    land: LandDescription,
    calibration: AtsCalibration = DEFAULT_CALIBRATION,
) -> tuple[GeoCoordinate, list]:
    """
    Convert a land description with a trace of calculation steps.

    Returns (coordinate, trace_steps) where each step is
    (step, description, value).
    """
    fields = validate(land, calibration)
    trace = [("Input", "Land description", land.format())]

    lsd = fields['lsd']
    section = fields['section']
    township = fields['township']
    rng = fields['range']
    meridian = fields['meridian']
    height = calibration.township_height

    # Latitude
    township_lat = calibration.base_latitude + (township - 1) * height
    section_row = (section - 1) // SECTIONS_PER_ROW
    lsd_row = (lsd - 1) // LSDS_PER_ROW
    section_lat_offset = section_row * (height / SECTIONS_PER_ROW)
    lsd_lat_offset = lsd_row * (height / (SECTIONS_PER_ROW * LSDS_PER_ROW))
    latitude = township_lat - section_lat_offset - lsd_lat_offset

    trace.append(("Township", f"Township {township} from {calibration.base_latitude}°", f"{township_lat:.6f}"))
    trace.append(("Section Row", f"Row {section_row} south of township edge", f"-{section_lat_offset:.6f}"))
    trace.append(("LSD Row", f"Row {lsd_row} south of section edge", f"-{lsd_lat_offset:.6f}"))

    # Longitude
    lat_correction = math.cos(math.radians(latitude))
    width = calibration.range_width * lat_correction
    direction, ranges_out = _range_direction(meridian, rng)

    section_col = (section - 1) % SECTIONS_PER_ROW
    lsd_col = (lsd - 1) % LSDS_PER_ROW
    range_offset = ranges_out * width
    section_lng_offset = section_col * (width / SECTIONS_PER_ROW)
    lsd_lng_offset = lsd_col * (width / (SECTIONS_PER_ROW * LSDS_PER_ROW))

    base_lng = calibration.meridian_longitudes[meridian]
    longitude = base_lng + direction * (range_offset + section_lng_offset + lsd_lng_offset)

    heading = "west" if direction < 0 else "east"
    trace.append(("Latitude Correction", "cos(latitude) applied to range width", f"{lat_correction:.6f}"))
    trace.append(("Range", f"{ranges_out} ranges {heading} of {meridian} ({base_lng}°)", f"{range_offset:.6f}"))
    trace.append(("Section Column", f"Column {section_col}", f"{section_lng_offset:.6f}"))
    trace.append(("LSD Column", f"Column {lsd_col}", f"{lsd_lng_offset:.6f}"))

    lat_min, lat_max = calibration.lat_bounds
    lng_min, lng_max = calibration.lng_bounds
    if not (lat_min <= latitude <= lat_max and lng_min <= longitude <= lng_max):
        raise OutOfBoundsError(latitude, longitude, land=land.format())

    coordinate = GeoCoordinate(latitude=latitude, longitude=longitude)
    trace.append(("Result", "Latitude, longitude", coordinate.as_query()))
    return coordinate, trace


def convert(land: LandDescription, calibration: AtsCalibration = DEFAULT_CALIBRATION) -> GeoCoordinate:
    """
    Convert a land description to an approximate coordinate.

    Raises:
        InvalidInputError: a field is not an integer in range, or the
            meridian is unknown
        OutOfBoundsError: the computed point falls outside the envelope
    """
    coordinate, _ = convert_with_trace(land, calibration)
    return coordinate
