"""
Core business logic for enumerating bookable slot start times.

This is pure domain logic without any external dependencies (no API calls,
no database, no I/O).
"""

from datetime import date
from typing import Iterable, List, Optional

from .exceptions import InvalidConfigurationError
from .models import (
    Appointment,
    BusinessHours,
    ClosureResult,
    FullDayClosure,
    PartialClosure,
    SlotStatus,
    StaffSchedule,
    UnavailableReason,
)
from .overlap_checker import is_available


class SlotGenerator:
    """
    Enumerates slot start times for one day of business hours.

    Algorithm:
    1. Return nothing on a full-day closure or a configured day off
    2. Step from opening time (inclusive) to closing time (exclusive) by the slot duration
    3. Drop any start that falls inside a break applying on that weekday
    4. Drop any start that falls inside the partial closure window

    Slots near closing time are not checked against the service length.
    """

    def __init__(self, business_hours: BusinessHours):
        self.business_hours = business_hours

    def generate(self, closure: ClosureResult, day: date) -> List[int]:
        """
        Generate the ordered list of valid slot starts for a date.

        Args:
            closure: Resolved closure for the date
            day: Target calendar date

        Returns:
            Ascending list of minutes since midnight

        Raises:
            InvalidConfigurationError: If the slot duration is not positive
        """
        return [
            status.start for status in self.describe(closure, day)
            if status.available
        ]

    def describe(
        self,
        closure: ClosureResult,
        day: date,
        appointments: Iterable[Appointment] = (),
        service_duration_minutes: Optional[int] = None,
        staff_schedule: Optional[StaffSchedule] = None,
    ) -> List[SlotStatus]:
        """
        Annotate every candidate start of the day with its availability.

        Booked slots are only reported when appointments are supplied; the
        booking check uses ``service_duration_minutes`` and falls back to the
        slot duration. With a ``staff_schedule`` a start is only available when
        the whole service fits inside one of the staff member's segments.
        """
        hours = self.business_hours
        step = hours.slot_duration_minutes

        if step <= 0:
            raise InvalidConfigurationError(
                f"Slot duration must be greater than zero, got {step}"
            )

        duration = service_duration_minutes if service_duration_minutes is not None else step
        if duration <= 0:
            raise InvalidConfigurationError(
                f"Service duration must be greater than zero, got {duration}"
            )

        if isinstance(closure, FullDayClosure) or not hours.is_working_day(day):
            return []

        breaks = [b.window for b in hours.breaks_for_day(day)]
        closed_window = closure.window if isinstance(closure, PartialClosure) else None
        booked = [appointment for appointment in appointments if appointment.is_active]

        statuses: List[SlotStatus] = []

        for start in range(hours.opening_time, hours.closing_time, step):
            reason: Optional[UnavailableReason] = None

            if any(window.contains(start) for window in breaks):
                reason = UnavailableReason.BREAK
            elif closed_window is not None and closed_window.contains(start):
                reason = UnavailableReason.SHOP_CLOSED
            elif staff_schedule is not None and not staff_schedule.covers(day, start, duration):
                reason = UnavailableReason.OUTSIDE_WORKING_HOURS
            elif booked and not is_available(start, duration, booked):
                reason = UnavailableReason.BOOKED

            statuses.append(
                SlotStatus(
                    start=start,
                    duration_minutes=duration,
                    available=reason is None,
                    unavailable_reason=reason,
                )
            )

        return statuses


def generate_slots(hours: BusinessHours, closure: ClosureResult, day: date) -> List[int]:
    """Generate the ordered slot starts for ``day`` under ``hours`` and ``closure``."""
    return SlotGenerator(hours).generate(closure, day)
