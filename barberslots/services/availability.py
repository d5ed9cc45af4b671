"""
Application services for answering availability questions.

The service coordinates fetching shop configuration, closures and
appointments via a data source adapter and delegates the actual
availability calculation to the domain functions. Every call fetches fresh
data, so edited hours or newly added closures take effect immediately and
no state is kept between calls.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence

from ..domain.closure_resolver import is_closed_at, resolve_closure
from ..domain.exceptions import InvalidConfigurationError, ShopClosedError, SlotUnavailableError
from ..domain.models import (
    Appointment,
    BusinessHours,
    FullDayClosure,
    MinuteRange,
    PartialClosure,
    ShopClosure,
    SlotStatus,
    StaffSchedule,
)
from ..domain.overlap_checker import available_slots, find_conflicts
from ..domain.slot_generator import SlotGenerator
from ..domain.time_arithmetic import format_time

logger = logging.getLogger(__name__)


class ShopDataSource(Protocol):
    """Protocol describing the data access needed by the service."""

    async def get_business_hours(self) -> BusinessHours:
        """Return the current shop business hours."""

    async def get_closures(self) -> Sequence[ShopClosure]:
        """Return all known shop closures."""

    async def get_staff_schedule(self, staff_id: str) -> Optional[StaffSchedule]:
        """Return the working hours of a staff member, or None if unrestricted."""

    async def get_appointments(self, staff_id: str, day: date) -> Sequence[Appointment]:
        """Return the appointments of one staff member on one date."""


class AvailabilityService:
    """
    Orchestrates data retrieval and the availability calculation.

    Dependency inversion toward a protocol makes it easy to plug in a
    database-backed source, the JSON file adapter or a stub in tests.
    """

    def __init__(self, data_source: ShopDataSource) -> None:
        self._data_source = data_source

    async def bookable_slots(
        self,
        *,
        staff_id: str,
        day: date,
        service_duration_minutes: int,
    ) -> List[int]:
        """
        Compute the slots at which ``staff_id`` can take a new booking.

        Returns:
            Ascending list of slot starts in minutes since midnight
        """
        hours = await self._data_source.get_business_hours()
        closure = resolve_closure(day, await self._data_source.get_closures())
        logger.debug("Resolved closure for %s: %s", day, closure)

        slots = SlotGenerator(hours).generate(closure, day)
        if not slots:
            return []

        appointments = await self._fetch_appointments(staff_id, day)
        free = available_slots(slots, service_duration_minutes, appointments)

        schedule = await self._data_source.get_staff_schedule(staff_id)
        if schedule is not None:
            free = [s for s in free if schedule.covers(day, s, service_duration_minutes)]

        logger.debug(
            "%d of %d slots free for staff %s on %s",
            len(free), len(slots), staff_id, day,
        )
        return free

    async def slot_grid(
        self,
        *,
        staff_id: str,
        day: date,
        service_duration_minutes: int,
    ) -> List[SlotStatus]:
        """Annotate every candidate slot of the day with its availability."""
        hours = await self._data_source.get_business_hours()
        closure = resolve_closure(day, await self._data_source.get_closures())
        appointments = await self._fetch_appointments(staff_id, day)
        schedule = await self._data_source.get_staff_schedule(staff_id)

        return SlotGenerator(hours).describe(
            closure,
            day,
            appointments=appointments,
            service_duration_minutes=service_duration_minutes,
            staff_schedule=schedule,
        )

    async def is_closed_at(self, *, day: date, minute: int) -> bool:
        """Check whether the shop is closed at a specific date and time."""
        hours = await self._data_source.get_business_hours()
        if not hours.is_working_day(day):
            return True

        return is_closed_at(day, minute, await self._data_source.get_closures())

    async def validate_booking(
        self,
        *,
        staff_id: str,
        day: date,
        start_time: int,
        service_duration_minutes: int,
    ) -> None:
        """
        Re-check a booking against fresh data right before it is committed.

        The whole service interval [start, start + duration) is checked
        against breaks, partial closures and the staff member's working
        hours; only the start has to lie within opening hours.

        Raises:
            InvalidConfigurationError: If the service duration is not positive
            ShopClosedError: If the shop is closed, on a break or off during the booking
            SlotUnavailableError: If the staff member is not working or already booked
        """
        if service_duration_minutes <= 0:
            raise InvalidConfigurationError(
                f"Service duration must be greater than zero, got {service_duration_minutes}"
            )

        hours = await self._data_source.get_business_hours()
        if not hours.opening_time <= start_time < hours.closing_time:
            raise ShopClosedError(
                f"{format_time(start_time)} is outside business hours "
                f"{format_time(hours.opening_time)} - {format_time(hours.closing_time)}"
            )

        if not hours.is_working_day(day):
            raise ShopClosedError(f"{day} is a day off")

        closure = resolve_closure(day, await self._data_source.get_closures())
        if isinstance(closure, FullDayClosure):
            raise ShopClosedError(f"Shop is closed on {day}: {closure.reason}")

        requested = MinuteRange(start_time, start_time + service_duration_minutes)

        if isinstance(closure, PartialClosure) and closure.window.overlaps(requested):
            raise ShopClosedError(
                f"Booking {requested} on {day} overlaps closure {closure.window} ({closure.reason})"
            )

        for break_period in hours.breaks_for_day(day):
            if break_period.window.overlaps(requested):
                raise ShopClosedError(
                    f"Booking {requested} on {day} overlaps break "
                    f"'{break_period.name}' ({break_period.window})"
                )

        schedule = await self._data_source.get_staff_schedule(staff_id)
        if schedule is not None and not schedule.covers(day, start_time, service_duration_minutes):
            raise SlotUnavailableError(
                f"Staff {staff_id} is not working on {day} during {requested}"
            )

        appointments = await self._fetch_appointments(staff_id, day)
        conflicts = find_conflicts(start_time, service_duration_minutes, appointments)

        if conflicts:
            ids = ", ".join(appointment.id for appointment in conflicts)
            logger.info(
                "Rejected booking for staff %s on %s at %s: overlaps %s",
                staff_id, day, format_time(start_time), ids,
            )
            raise SlotUnavailableError(
                f"Staff {staff_id} is already booked on {day} at "
                f"{format_time(start_time)} (conflicts: {ids})"
            )

    async def _fetch_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        """
        Fetch appointments and keep only those of the staff member on the date.

        Some sources return wider result sets; we normalise that here for
        deterministic downstream behaviour.
        """
        appointments = await self._data_source.get_appointments(staff_id, day)
        return [
            appointment for appointment in appointments
            if appointment.staff_id == staff_id and appointment.date == day
        ]
