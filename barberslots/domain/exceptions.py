"""
Domain-specific exception hierarchy for the availability engine.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidFormatError(AvailabilityError, ValueError):
    """Raised when a time or date string is malformed."""


class InvalidConfigurationError(AvailabilityError, ValueError):
    """Raised when business hours, breaks or closures are inconsistent."""


class BookingRejectedError(AvailabilityError):
    """Raised when a booking cannot be committed at the requested time."""


class ShopClosedError(BookingRejectedError):
    """Raised when the shop is closed at the requested time."""


class SlotUnavailableError(BookingRejectedError):
    """Raised when the requested slot collides with an existing appointment."""


class AppointmentSourceError(AvailabilityError):
    """Raised when appointment data cannot be loaded or parsed."""
