"""Geo subpackage - Alberta Township System geocoding."""
from .ats import AtsCalibration, DEFAULT_CALIBRATION, convert, convert_with_trace, validate

__all__ = ['AtsCalibration', 'DEFAULT_CALIBRATION', 'convert', 'convert_with_trace', 'validate']
