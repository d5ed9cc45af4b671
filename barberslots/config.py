"""
Configuration management using Pydantic models loaded from YAML.
"""

import datetime as dt
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import BreakPeriod, BusinessHours, ShopClosure, StaffSchedule, WorkingSegment
from .domain.time_arithmetic import parse_date, parse_time


class BreakConfig(BaseModel):
    """Recurring break configuration."""
    name: str
    start: str
    end: str
    day_of_week: Optional[int] = None  # 0=Monday, 6=Sunday; None = every day

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        parse_time(value)
        return value

    def to_domain(self) -> BreakPeriod:
        return BreakPeriod(
            name=self.name,
            start=parse_time(self.start),
            end=parse_time(self.end),
            day_of_week=self.day_of_week,
        )


class BusinessHoursConfig(BaseModel):
    """Opening hours and slot settings."""
    opening_time: str = "09:00"
    closing_time: str = "17:00"
    slot_duration_minutes: int = 30
    breaks: List[BreakConfig] = Field(default_factory=list)
    days_off: List[int] = Field(default_factory=lambda: [6])  # Sunday

    @field_validator("opening_time", "closing_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        parse_time(value)
        return value

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration_minutes must be greater than zero")
        return value

    @field_validator("days_off")
    @classmethod
    def validate_days_off(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"days_off must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @model_validator(mode="after")
    def validate_consistency(self) -> "BusinessHoursConfig":
        """Ensure hours and breaks form a valid business day."""
        self.to_domain()
        return self

    def to_domain(self) -> BusinessHours:
        return BusinessHours(
            opening_time=parse_time(self.opening_time),
            closing_time=parse_time(self.closing_time),
            slot_duration_minutes=self.slot_duration_minutes,
            breaks=tuple(b.to_domain() for b in self.breaks),
            days_off=tuple(self.days_off),
        )


class ClosureConfig(BaseModel):
    """Ad-hoc shop closure configuration."""
    id: str
    date: dt.date
    reason: str = ""
    is_full_day: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value):
        """Accept YYYY-MM-DD strings as well as dates parsed by YAML."""
        if isinstance(value, str):
            return parse_date(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        """Validate HH:MM format."""
        if value is not None:
            parse_time(value)
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "ClosureConfig":
        """Ensure partial closures carry a valid window."""
        self.to_domain()
        return self

    def to_domain(self) -> ShopClosure:
        return ShopClosure(
            id=self.id,
            date=self.date,
            reason=self.reason,
            is_full_day=self.is_full_day,
            start_time=parse_time(self.start_time) if self.start_time else None,
            end_time=parse_time(self.end_time) if self.end_time else None,
        )


class WorkingSegmentConfig(BaseModel):
    """One working segment of a staff member on a weekday."""
    day_of_week: int  # 0=Monday, 6=Sunday
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        parse_time(value)
        return value

    @model_validator(mode="after")
    def validate_segment(self) -> "WorkingSegmentConfig":
        """Ensure the segment has a valid weekday and window."""
        self.to_domain()
        return self

    def to_domain(self) -> WorkingSegment:
        return WorkingSegment(
            day_of_week=self.day_of_week,
            start=parse_time(self.start),
            end=parse_time(self.end),
        )


class StaffMember(BaseModel):
    """
    Staff member (bookable resource) configuration.

    Without ``working_hours`` the staff member is available whenever the
    shop is open.
    """
    id: str
    name: str
    working_hours: List[WorkingSegmentConfig] = Field(default_factory=list)

    def to_schedule(self) -> Optional[StaffSchedule]:
        if not self.working_hours:
            return None
        return StaffSchedule(
            staff_id=self.id,
            segments=tuple(segment.to_domain() for segment in self.working_hours),
        )


class AppConfig(BaseModel):
    """Application configuration."""
    shop_name: str = "Barbershop"
    timezone: str = "Europe/Berlin"
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    closures: List[ClosureConfig] = Field(default_factory=list)
    staff: List[StaffMember] = Field(default_factory=list)
    appointments_file: Optional[Path] = None

    @field_validator("staff")
    @classmethod
    def validate_staff(cls, value: List[StaffMember]) -> List[StaffMember]:
        """Ensure staff ids are unique."""
        seen_ids: set[str] = set()
        for member in value:
            key = member.id.lower()
            if key in seen_ids:
                raise ValueError(f"Duplicate staff id detected: {member.id}")
            seen_ids.add(key)
        return value

    def to_business_hours(self) -> BusinessHours:
        return self.business_hours.to_domain()

    def to_closures(self) -> List[ShopClosure]:
        return [closure.to_domain() for closure in self.closures]

    def to_staff_schedule(self, staff_id: str) -> Optional[StaffSchedule]:
        """Return the working hours of a staff member, or None if unrestricted."""
        for member in self.staff:
            if member.id == staff_id:
                return member.to_schedule()
        return None

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``appointments_file`` is resolved against the directory
        of the config file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        if config.appointments_file is not None and not config.appointments_file.is_absolute():
            config.appointments_file = config_path.parent / config.appointments_file

        return config

    def find_staff(self, identifier: str) -> StaffMember | None:
        """Find a staff member by id or (case-insensitive) name."""
        for member in self.staff:
            if member.id == identifier:
                return member
        for member in self.staff:
            if member.name.lower() == identifier.lower():
                return member
        return None

    def resolve_staff_id(self, identifier: str) -> str:
        """
        Resolve a staff identifier (id or name) to a staff id.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        member = self.find_staff(identifier)
        if member:
            return member.id

        raise ValueError(
            f"Unknown staff identifier: '{identifier}'. "
            f"Use a configured staff id or name."
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of barberslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
