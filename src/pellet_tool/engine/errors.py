"""
Typed failures raised by the quote core.

Every conversion failure names what caused it so callers can report
field-level feedback instead of mistaking missing data for zero.
"""
from typing import Optional


class ConversionError(ValueError):
    """Base class for conversion failures in the quote core."""

    kind = "conversion_error"

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": str(self)}


class InvalidInputError(ConversionError):
    """One or more land description fields failed validation."""

    kind = "invalid_input"

    def __init__(self, fields: dict[str, str]):
        # field name -> reason
        self.fields = dict(fields)
        detail = "; ".join(f"{name}: {reason}" for name, reason in self.fields.items())
        super().__init__(f"Invalid land description ({detail})")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = list(self.fields)
        data["reasons"] = self.fields
        return data


class OutOfBoundsError(ConversionError):
    """A valid land description produced an implausible coordinate."""

    kind = "out_of_bounds"

    def __init__(self, latitude: float, longitude: float, land: Optional[str] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.land = land
        where = f" for {land}" if land else ""
        super().__init__(
            f"Computed coordinate ({latitude:.5f}, {longitude:.5f}){where} "
            "is outside the surveyed region"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["latitude"] = self.latitude
        data["longitude"] = self.longitude
        return data


class UnknownUnitError(ConversionError):
    """An area quantity carries a unit the converter does not know."""

    kind = "unknown_unit"

    def __init__(self, unit: str):
        self.unit = unit
        super().__init__(f"Unknown area unit: {unit!r}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = ["unit"]
        return data
