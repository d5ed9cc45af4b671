"""
Domain models for shop hours, closures, appointments and slots.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union

from .exceptions import InvalidConfigurationError, InvalidFormatError
from .time_arithmetic import format_time, format_time_12h, overlaps, validate_time_of_day


@dataclass(frozen=True)
class MinuteRange:
    """
    Represents an immutable half-open range [start, end) of minutes since midnight.

    Invariant: start must be before end.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidConfigurationError(
                f"Start minute {self.start} must be before end minute {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "MinuteRange") -> bool:
        """Check if this range shares at least one minute with another."""
        return overlaps(self.start, self.end, other.start, other.end)

    def contains(self, minute: int) -> bool:
        """Check if a single minute falls within [start, end)."""
        return self.start <= minute < self.end

    def __str__(self) -> str:
        return f"{format_time(self.start)} - {format_time(self.end % 1440)}"


@dataclass(frozen=True)
class BreakPeriod:
    """
    A recurring daily break such as lunch.

    When ``day_of_week`` is set (0=Monday, 6=Sunday) the break only applies
    on that weekday, otherwise on every operating day.
    """
    name: str
    start: int
    end: int
    day_of_week: Optional[int] = None

    def __post_init__(self):
        validate_time_of_day(self.start)
        validate_time_of_day(self.end)
        if self.start >= self.end:
            raise InvalidConfigurationError(
                f"Break '{self.name}' must start before it ends "
                f"({format_time(self.start)} - {format_time(self.end)})"
            )
        if self.day_of_week is not None and self.day_of_week not in range(7):
            raise InvalidConfigurationError(
                f"Break '{self.name}' day_of_week must be between 0 and 6, got {self.day_of_week}"
            )

    @property
    def window(self) -> MinuteRange:
        return MinuteRange(self.start, self.end)

    def applies_on(self, day: date) -> bool:
        """Check if the break recurs on the given date."""
        return self.day_of_week is None or self.day_of_week == day.weekday()


@dataclass(frozen=True)
class BusinessHours:
    """
    Shop-level opening hours configuration.

    Invariant: opening_time <= closing_time and every break lies within
    the opening hours. Equal opening and closing times describe a day
    without any slots.
    """
    opening_time: int
    closing_time: int
    slot_duration_minutes: int
    breaks: Tuple[BreakPeriod, ...] = ()
    days_off: Tuple[int, ...] = ()  # 0=Monday, 6=Sunday

    def __post_init__(self):
        validate_time_of_day(self.opening_time)
        validate_time_of_day(self.closing_time)
        object.__setattr__(self, "breaks", tuple(self.breaks))
        object.__setattr__(self, "days_off", tuple(self.days_off))

        if self.opening_time > self.closing_time:
            raise InvalidConfigurationError(
                f"Opening time {format_time(self.opening_time)} must not be after "
                f"closing time {format_time(self.closing_time)}"
            )

        for break_period in self.breaks:
            if break_period.start < self.opening_time or break_period.end > self.closing_time:
                raise InvalidConfigurationError(
                    f"Break '{break_period.name}' ({break_period.window}) lies outside "
                    f"business hours {format_time(self.opening_time)} - {format_time(self.closing_time)}"
                )

        invalid_days = [day for day in self.days_off if day not in range(7)]
        if invalid_days:
            raise InvalidConfigurationError(f"days_off must be between 0 and 6, got {invalid_days}")

    def is_working_day(self, day: date) -> bool:
        """Check if a given date falls on an operating day."""
        return day.weekday() not in self.days_off

    def breaks_for_day(self, day: date) -> Tuple[BreakPeriod, ...]:
        """Return the breaks that apply on the given date."""
        return tuple(b for b in self.breaks if b.applies_on(day))


@dataclass(frozen=True)
class WorkingSegment:
    """A stretch of one weekday (0=Monday, 6=Sunday) during which a staff member works."""
    day_of_week: int
    start: int
    end: int

    def __post_init__(self):
        validate_time_of_day(self.start)
        validate_time_of_day(self.end)
        if self.start >= self.end:
            raise InvalidConfigurationError(
                f"Working segment must start before it ends "
                f"({format_time(self.start)} - {format_time(self.end)})"
            )
        if self.day_of_week not in range(7):
            raise InvalidConfigurationError(
                f"Working segment day_of_week must be between 0 and 6, got {self.day_of_week}"
            )

    @property
    def window(self) -> MinuteRange:
        return MinuteRange(self.start, self.end)


@dataclass(frozen=True)
class StaffSchedule:
    """
    Weekly working hours of one staff member.

    A weekday without segments is a day the staff member does not work.
    A service must fit entirely inside a single segment.
    """
    staff_id: str
    segments: Tuple[WorkingSegment, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "segments", tuple(self.segments))

    def segments_for_day(self, day: date) -> Tuple[WorkingSegment, ...]:
        """Return the working segments on the weekday of ``day``, earliest first."""
        weekday = day.weekday()
        return tuple(sorted(
            (s for s in self.segments if s.day_of_week == weekday),
            key=lambda s: s.start,
        ))

    def covers(self, day: date, start: int, duration_minutes: int) -> bool:
        """Check if [start, start + duration) lies within one working segment."""
        end = start + duration_minutes
        return any(s.start <= start and end <= s.end for s in self.segments_for_day(day))


@dataclass(frozen=True)
class ShopClosure:
    """
    An ad-hoc closure of the shop on a single date.

    Partial closures carry a [start_time, end_time) window; full-day
    closures carry none.
    """
    id: str
    date: date
    reason: str
    is_full_day: bool = True
    start_time: Optional[int] = None
    end_time: Optional[int] = None

    def __post_init__(self):
        if self.is_full_day:
            return

        if self.start_time is None or self.end_time is None:
            raise InvalidConfigurationError(
                f"Partial closure '{self.id}' requires both a start and an end time"
            )
        validate_time_of_day(self.start_time)
        validate_time_of_day(self.end_time)
        if self.start_time >= self.end_time:
            raise InvalidConfigurationError(
                f"Partial closure '{self.id}' must start before it ends "
                f"({format_time(self.start_time)} - {format_time(self.end_time)})"
            )

    @property
    def window(self) -> Optional[MinuteRange]:
        if self.is_full_day:
            return None
        return MinuteRange(self.start_time, self.end_time)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"

    @property
    def blocks_slot(self) -> bool:
        """Cancelled and no-show appointments free their slot."""
        return self not in (AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW)


@dataclass(frozen=True)
class Appointment:
    """
    An existing booking for a staff member, read-only to the engine.
    """
    id: str
    staff_id: str
    date: date
    start_time: int
    duration_minutes: int
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    def __post_init__(self):
        validate_time_of_day(self.start_time)
        if self.duration_minutes <= 0:
            raise InvalidConfigurationError(
                f"Appointment '{self.id}' duration must be positive, got {self.duration_minutes}"
            )
        if not isinstance(self.status, AppointmentStatus):
            try:
                object.__setattr__(self, "status", AppointmentStatus(self.status))
            except ValueError as exc:
                raise InvalidFormatError(
                    f"Unknown appointment status {self.status!r} for '{self.id}'"
                ) from exc

    @property
    def interval(self) -> MinuteRange:
        return MinuteRange(self.start_time, self.start_time + self.duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status.blocks_slot


@dataclass(frozen=True)
class NoClosure:
    """The shop is open as usual on the date."""


@dataclass(frozen=True)
class FullDayClosure:
    """The shop is closed for the entire date."""
    reason: str


@dataclass(frozen=True)
class PartialClosure:
    """The shop is closed during [start, end) of an otherwise open date."""
    start: int
    end: int
    reason: str

    @property
    def window(self) -> MinuteRange:
        return MinuteRange(self.start, self.end)


ClosureResult = Union[NoClosure, FullDayClosure, PartialClosure]


class UnavailableReason(str, Enum):
    BREAK = "break"
    SHOP_CLOSED = "shop closed"
    OUTSIDE_WORKING_HOURS = "outside working hours"
    BOOKED = "booked"


@dataclass(frozen=True)
class SlotStatus:
    """
    A candidate slot annotated with whether it can be booked.
    """
    start: int
    duration_minutes: int
    available: bool
    unavailable_reason: Optional[UnavailableReason] = field(default=None)

    @property
    def end(self) -> int:
        return self.start + self.duration_minutes

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: 9:00 AM – 9:30 AM (booked)
        """
        end = self.end % 1440
        text = f"{format_time_12h(self.start)} – {format_time_12h(end)}"
        if not self.available and self.unavailable_reason is not None:
            text += f" ({self.unavailable_reason.value})"
        return text
