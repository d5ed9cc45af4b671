"""
Conflict checks between a candidate booking and existing appointments.

The checks are stateless: callers pass the current appointments for one
staff member on one date.
"""

from typing import Iterable, List, Sequence

from .exceptions import InvalidConfigurationError
from .models import Appointment, MinuteRange


def _candidate_range(candidate_start: int, service_duration_minutes: int) -> MinuteRange:
    if service_duration_minutes <= 0:
        raise InvalidConfigurationError(
            f"Service duration must be greater than zero, got {service_duration_minutes}"
        )
    return MinuteRange(candidate_start, candidate_start + service_duration_minutes)


def find_conflicts(
    candidate_start: int,
    service_duration_minutes: int,
    appointments: Iterable[Appointment],
) -> List[Appointment]:
    """
    Return the active appointments whose interval overlaps the candidate.

    Cancelled and no-show appointments never conflict.
    """
    candidate = _candidate_range(candidate_start, service_duration_minutes)

    return [
        appointment for appointment in appointments
        if appointment.is_active and candidate.overlaps(appointment.interval)
    ]


def is_available(
    candidate_start: int,
    service_duration_minutes: int,
    appointments: Iterable[Appointment],
) -> bool:
    """
    Check if [candidate_start, candidate_start + duration) is free.

    Args:
        candidate_start: Proposed start in minutes since midnight
        service_duration_minutes: Length of the requested service
        appointments: Existing appointments for the staff member on that date

    Returns:
        True if no active appointment overlaps the candidate interval
    """
    return not find_conflicts(candidate_start, service_duration_minutes, appointments)


def available_slots(
    slots: Sequence[int],
    service_duration_minutes: int,
    appointments: Iterable[Appointment],
) -> List[int]:
    """
    Keep only the slots at which the service fits between existing bookings.

    The ascending order of ``slots`` is preserved.
    """
    active = [appointment for appointment in appointments if appointment.is_active]

    return [
        slot for slot in slots
        if is_available(slot, service_duration_minutes, active)
    ]
