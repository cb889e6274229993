"""
Failures raised by outbound integrations (distance lookup, email).
"""


class ServiceError(RuntimeError):
    """An upstream provider could not complete a request."""


class DistanceLookupError(ServiceError):
    """The distance provider returned no usable driving distance."""


class EmailDeliveryError(ServiceError):
    """A notification email could not be sent."""
