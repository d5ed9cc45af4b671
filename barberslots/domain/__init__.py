"""
Domain layer - Pure business logic without external dependencies.
"""

from .closure_resolver import is_closed_at, resolve_closure
from .models import (
    Appointment,
    AppointmentStatus,
    BreakPeriod,
    BusinessHours,
    ClosureResult,
    FullDayClosure,
    MinuteRange,
    NoClosure,
    PartialClosure,
    ShopClosure,
    SlotStatus,
    UnavailableReason,
)
from .overlap_checker import available_slots, find_conflicts, is_available
from .slot_generator import SlotGenerator, generate_slots
from .time_arithmetic import format_time, format_time_12h, overlaps, parse_date, parse_time

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "BreakPeriod",
    "BusinessHours",
    "ClosureResult",
    "FullDayClosure",
    "MinuteRange",
    "NoClosure",
    "PartialClosure",
    "ShopClosure",
    "SlotStatus",
    "UnavailableReason",
    "SlotGenerator",
    "available_slots",
    "find_conflicts",
    "format_time",
    "format_time_12h",
    "generate_slots",
    "is_available",
    "is_closed_at",
    "overlaps",
    "parse_date",
    "parse_time",
    "resolve_closure",
]
