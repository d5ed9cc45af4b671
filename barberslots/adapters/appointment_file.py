"""
File-backed shop data source.

Business hours and closures come from the loaded ``AppConfig``; appointments
are read from a JSON file on every request so edits made by other tools are
picked up without restarting.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import AppConfig
from ..domain.exceptions import AppointmentSourceError
from ..domain.models import Appointment, BusinessHours, ShopClosure, StaffSchedule
from ..domain.time_arithmetic import parse_date, parse_time

logger = logging.getLogger(__name__)


def parse_appointment(record: Dict[str, Any]) -> Appointment:
    """
    Convert one JSON appointment record into an Appointment.

    Expected keys: id, staff_id, date (YYYY-MM-DD), start_time (HH:MM),
    duration_minutes and optionally status (defaults to "confirmed").
    """
    if not isinstance(record, dict):
        raise AppointmentSourceError(f"Appointment record must be an object, got {record!r}")

    try:
        return Appointment(
            id=str(record["id"]),
            staff_id=str(record["staff_id"]),
            date=parse_date(record["date"]),
            start_time=parse_time(record["start_time"]),
            duration_minutes=int(record["duration_minutes"]),
            status=record.get("status", "confirmed"),
        )
    except KeyError as exc:
        raise AppointmentSourceError(f"Appointment record is missing field {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise AppointmentSourceError(
            f"Invalid appointment record {record.get('id')!r}: {exc}"
        ) from exc


class FileShopDataSource:
    """
    Shop data source backed by the YAML config and a JSON appointments file.

    A missing appointments file means no bookings exist yet.
    """

    def __init__(self, config: AppConfig, appointments_file: Optional[Path] = None):
        """
        Initialize the data source.

        Args:
            config: Loaded application configuration
            appointments_file: Optional override for config.appointments_file
        """
        self.config = config
        self.appointments_file = appointments_file or config.appointments_file

    async def get_business_hours(self) -> BusinessHours:
        return self.config.to_business_hours()

    async def get_closures(self) -> List[ShopClosure]:
        return self.config.to_closures()

    async def get_staff_schedule(self, staff_id: str) -> Optional[StaffSchedule]:
        return self.config.to_staff_schedule(staff_id)

    async def get_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        """Load the appointments of a staff member on a date."""
        return [
            appointment for appointment in self._load_appointments()
            if appointment.staff_id == staff_id and appointment.date == day
        ]

    def _load_appointments(self) -> List[Appointment]:
        if self.appointments_file is None or not self.appointments_file.exists():
            logger.debug("No appointments file found at %s", self.appointments_file)
            return []

        try:
            with open(self.appointments_file, "r", encoding="utf-8") as f:
                records = json.load(f)
        except json.JSONDecodeError as exc:
            raise AppointmentSourceError(
                f"Invalid JSON in {self.appointments_file}: {exc}"
            ) from exc

        if not isinstance(records, list):
            raise AppointmentSourceError(
                f"{self.appointments_file} must contain a list of appointments"
            )

        appointments = [parse_appointment(record) for record in records]
        logger.debug("Loaded %d appointments from %s", len(appointments), self.appointments_file)
        return appointments
