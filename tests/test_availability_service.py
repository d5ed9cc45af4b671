"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
from datetime import date
from typing import Dict, List, Optional, Sequence

import pendulum
import pytest

from barberslots.domain.exceptions import InvalidConfigurationError, ShopClosedError, SlotUnavailableError
from barberslots.domain.models import (
    Appointment,
    AppointmentStatus,
    BreakPeriod,
    BusinessHours,
    ShopClosure,
    StaffSchedule,
    UnavailableReason,
    WorkingSegment,
)
from barberslots.domain.time_arithmetic import format_time, parse_time
from barberslots.services.availability import AvailabilityService

WEDNESDAY = pendulum.date(2024, 7, 10)
SUNDAY = pendulum.date(2024, 7, 14)


class StubShopData:
    """Minimal stub matching ShopDataSource."""

    def __init__(
        self,
        hours: BusinessHours,
        closures: Sequence[ShopClosure] = (),
        appointments: Sequence[Appointment] = (),
        schedule: Optional[StaffSchedule] = None,
    ):
        self.hours = hours
        self.closures = list(closures)
        self.appointments = list(appointments)
        self.schedule = schedule
        self.calls: List[Dict[str, str]] = []

    async def get_business_hours(self) -> BusinessHours:
        return self.hours

    async def get_closures(self) -> List[ShopClosure]:
        return self.closures

    async def get_staff_schedule(self, staff_id: str) -> Optional[StaffSchedule]:
        return self.schedule

    async def get_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        self.calls.append({"staff_id": staff_id, "day": day.isoformat()})
        # Unfiltered; the service narrows by staff and date
        return self.appointments


def _hours() -> BusinessHours:
    return BusinessHours(
        opening_time=parse_time("09:00"),
        closing_time=parse_time("17:00"),
        slot_duration_minutes=30,
        breaks=(BreakPeriod("Lunch", parse_time("12:00"), parse_time("13:00")),),
        days_off=(6,),
    )


def _appointment(staff_id: str, start: str, duration: int = 30, day=WEDNESDAY, status="confirmed"):
    return Appointment(
        id=f"{staff_id}-{start}",
        staff_id=staff_id,
        date=day,
        start_time=parse_time(start),
        duration_minutes=duration,
        status=status,
    )


def test_bookable_slots_excludes_breaks_and_bookings():
    """End-to-end call should remove lunch and the staff member's bookings."""
    data = StubShopData(_hours(), appointments=[_appointment("alex", "10:00")])
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )
    labels = [format_time(s) for s in slots]

    assert len(slots) == 13
    assert "10:00" not in labels
    assert "12:00" not in labels
    assert labels[0] == "09:00"
    assert labels[-1] == "16:30"
    assert data.calls == [{"staff_id": "alex", "day": "2024-07-10"}]


def test_bookable_slots_ignores_other_staff_and_dates():
    """Appointments of other staff or on other dates must not block."""
    data = StubShopData(
        _hours(),
        appointments=[
            _appointment("sam", "10:00"),
            _appointment("alex", "11:00", day=pendulum.date(2024, 7, 11)),
        ],
    )
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert len(slots) == 14


def test_bookable_slots_cancelled_appointment_frees_slot():
    """Cancelled appointments should not remove the slot."""
    data = StubShopData(
        _hours(),
        appointments=[_appointment("alex", "10:00", status=AppointmentStatus.CANCELLED)],
    )
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert parse_time("10:00") in slots


def test_bookable_slots_full_day_closure_skips_appointment_fetch():
    """A closed date should return nothing without loading appointments."""
    closure = ShopClosure(id="c1", date=WEDNESDAY, reason="Training")
    data = StubShopData(_hours(), closures=[closure])
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert slots == []
    assert data.calls == []


def test_bookable_slots_sees_fresh_closures():
    """Closures added between calls take effect on the next call."""
    data = StubShopData(_hours())
    service = AvailabilityService(data)

    before = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )
    data.closures.append(
        ShopClosure(
            id="c1",
            date=WEDNESDAY,
            reason="Renovation",
            is_full_day=False,
            start_time=parse_time("14:00"),
            end_time=parse_time("20:00"),
        )
    )
    after = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert len(before) == 14
    assert all(s < parse_time("14:00") for s in after)


def test_slot_grid_marks_reasons():
    """The grid should show every candidate slot with its status."""
    data = StubShopData(_hours(), appointments=[_appointment("alex", "09:00")])
    service = AvailabilityService(data)

    grid = asyncio.run(
        service.slot_grid(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert len(grid) == 16
    assert grid[0].unavailable_reason is UnavailableReason.BOOKED
    assert grid[1].available


def test_is_closed_at_day_off_and_partial_closure():
    """Days off are closed all day; partial closures only in their window."""
    closure = ShopClosure(
        id="c1",
        date=WEDNESDAY,
        reason="Renovation",
        is_full_day=False,
        start_time=parse_time("14:00"),
        end_time=parse_time("20:00"),
    )
    service = AvailabilityService(StubShopData(_hours(), closures=[closure]))

    assert asyncio.run(service.is_closed_at(day=SUNDAY, minute=parse_time("10:00")))
    assert asyncio.run(service.is_closed_at(day=WEDNESDAY, minute=parse_time("14:00")))
    assert not asyncio.run(service.is_closed_at(day=WEDNESDAY, minute=parse_time("13:59")))


def test_validate_booking_accepts_free_slot():
    """A free slot passes validation without raising."""
    service = AvailabilityService(StubShopData(_hours(), appointments=[_appointment("alex", "10:00")]))

    asyncio.run(
        service.validate_booking(
            staff_id="alex",
            day=WEDNESDAY,
            start_time=parse_time("10:30"),
            service_duration_minutes=30,
        )
    )


def test_validate_booking_rejects_conflict():
    """A booking overlapping an active appointment is rejected."""
    service = AvailabilityService(StubShopData(_hours(), appointments=[_appointment("alex", "10:00")]))

    with pytest.raises(SlotUnavailableError, match="alex-10:00"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("09:45"),
                service_duration_minutes=30,
            )
        )


def test_validate_booking_rejects_closed_shop():
    """A booking on a full-day closure is rejected."""
    closure = ShopClosure(id="c1", date=WEDNESDAY, reason="Holiday")
    service = AvailabilityService(StubShopData(_hours(), closures=[closure]))

    with pytest.raises(ShopClosedError):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("10:00"),
                service_duration_minutes=30,
            )
        )


def test_validate_booking_rejects_start_outside_hours():
    """A booking before opening time is rejected."""
    service = AvailabilityService(StubShopData(_hours()))

    with pytest.raises(ShopClosedError, match="outside business hours"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("08:30"),
                service_duration_minutes=30,
            )
        )


def _partial_closure(start: str, end: str) -> ShopClosure:
    return ShopClosure(
        id="c1",
        date=WEDNESDAY,
        reason="Renovation",
        is_full_day=False,
        start_time=parse_time(start),
        end_time=parse_time(end),
    )


def _schedule(*segments) -> StaffSchedule:
    return StaffSchedule(
        staff_id="alex",
        segments=tuple(
            WorkingSegment(WEDNESDAY.weekday(), parse_time(start), parse_time(end))
            for start, end in segments
        ),
    )


def test_validate_booking_rejects_overlap_with_break():
    """A booking starting before lunch ends is rejected even though 12:15 is not a slot start."""
    service = AvailabilityService(StubShopData(_hours()))

    with pytest.raises(ShopClosedError, match="Lunch"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("12:15"),
                service_duration_minutes=30,
            )
        )


def test_validate_booking_rejects_service_running_into_break():
    """A service that starts before lunch but runs into it is rejected."""
    service = AvailabilityService(StubShopData(_hours()))

    with pytest.raises(ShopClosedError, match="Lunch"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("11:30"),
                service_duration_minutes=45,
            )
        )


def test_validate_booking_accepts_booking_touching_break():
    """A booking ending exactly when lunch starts or starting when it ends is fine."""
    service = AvailabilityService(StubShopData(_hours()))

    for start in ("11:30", "13:00"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time(start),
                service_duration_minutes=30,
            )
        )


def test_validate_booking_rejects_service_running_into_partial_closure():
    """The whole service interval is checked against a partial closure."""
    service = AvailabilityService(StubShopData(_hours(), closures=[_partial_closure("14:00", "20:00")]))

    with pytest.raises(ShopClosedError, match="Renovation"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("13:30"),
                service_duration_minutes=90,
            )
        )

    asyncio.run(
        service.validate_booking(
            staff_id="alex",
            day=WEDNESDAY,
            start_time=parse_time("13:30"),
            service_duration_minutes=30,
        )
    )


def test_validate_booking_rejects_day_off():
    """A booking on a configured day off is rejected."""
    service = AvailabilityService(StubShopData(_hours()))

    with pytest.raises(ShopClosedError, match="day off"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=SUNDAY,
                start_time=parse_time("10:00"),
                service_duration_minutes=30,
            )
        )


def test_validate_booking_rejects_non_positive_duration():
    """A zero-length service cannot be booked."""
    service = AvailabilityService(StubShopData(_hours()))

    with pytest.raises(InvalidConfigurationError):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("10:00"),
                service_duration_minutes=0,
            )
        )


def test_validate_booking_rejects_outside_staff_working_hours():
    """A staff member cannot be booked outside their working segments."""
    service = AvailabilityService(
        StubShopData(_hours(), schedule=_schedule(("09:00", "12:00"), ("14:00", "17:00")))
    )

    with pytest.raises(SlotUnavailableError, match="not working"):
        asyncio.run(
            service.validate_booking(
                staff_id="alex",
                day=WEDNESDAY,
                start_time=parse_time("13:00"),
                service_duration_minutes=30,
            )
        )

    asyncio.run(
        service.validate_booking(
            staff_id="alex",
            day=WEDNESDAY,
            start_time=parse_time("14:00"),
            service_duration_minutes=30,
        )
    )


def test_bookable_slots_respects_staff_working_hours():
    """Only starts whose whole service fits in a working segment are offered."""
    data = StubShopData(_hours(), schedule=_schedule(("09:00", "11:00"), ("15:00", "17:00")))
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=60)
    )

    assert [format_time(s) for s in slots] == ["09:00", "09:30", "10:00", "15:00", "15:30", "16:00"]


def test_bookable_slots_staff_not_working_on_weekday():
    """A staff member without segments on the weekday has no slots."""
    data = StubShopData(
        _hours(),
        schedule=StaffSchedule(staff_id="alex", segments=(WorkingSegment(0, parse_time("09:00"), parse_time("17:00")),)),
    )
    service = AvailabilityService(data)

    slots = asyncio.run(
        service.bookable_slots(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert slots == []


def test_slot_grid_marks_outside_working_hours():
    """The grid greys out starts outside the staff member's segments."""
    data = StubShopData(_hours(), schedule=_schedule(("10:00", "17:00")))
    service = AvailabilityService(data)

    grid = asyncio.run(
        service.slot_grid(staff_id="alex", day=WEDNESDAY, service_duration_minutes=30)
    )

    assert grid[0].unavailable_reason is UnavailableReason.OUTSIDE_WORKING_HOURS
    assert grid[2].available
