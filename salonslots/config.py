"""
Configuration management using Pydantic models loaded from YAML.

The configuration doubles as the salon's schedule data: opening hours,
stylists with their weekly schedules, services, closed dates and already
booked appointments.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    DayAvailability,
    TimeInterval,
    build_intervals,
    parse_clock_time,
)

DEFAULT_CONFIG_FILENAME = "salon.yaml"
DEFAULT_SLOT_STEP_MINUTES = 15


def _check_unique_days(days: Sequence["DayConfig"]) -> None:
    seen: set[int] = set()
    for day in days:
        if day.day_of_week in seen:
            raise ValueError(f"Duplicate entry for day_of_week {day.day_of_week}")
        seen.add(day.day_of_week)


class IntervalConfig(BaseModel):
    """One opening block, e.g. ``{open: "09:00", close: "12:00"}``."""
    open: str
    close: str

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate the HH:mm format."""
        parse_clock_time(value)
        return value


class DayConfig(BaseModel):
    """Hours for one day of the week (0=Sunday, 6=Saturday)."""
    day_of_week: int
    is_closed: bool = False
    slots: List[IntervalConfig] = Field(default_factory=list)

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: int) -> int:
        """Validate day is between 0 (Sunday) and 6 (Saturday)."""
        if not 0 <= value <= 6:
            raise ValueError(f"day_of_week must be between 0 and 6, got {value}")
        return value

    def to_domain(self) -> DayAvailability:
        """Convert to a domain DayAvailability; empty or inverted blocks are dropped."""
        return DayAvailability(
            day_of_week=self.day_of_week,
            is_closed=self.is_closed,
            intervals=build_intervals((slot.open, slot.close) for slot in self.slots),
        )


class SalonConfig(BaseModel):
    """Salon-wide settings and opening hours."""
    name: str = "Salon"
    timezone: str = "Europe/Zurich"
    slot_step_minutes: int = DEFAULT_SLOT_STEP_MINUTES
    opening_hours: List[DayConfig] = Field(default_factory=list)

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the slot step is positive."""
        if value <= 0:
            raise ValueError("slot_step_minutes must be greater than zero")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("opening_hours")
    @classmethod
    def validate_opening_hours(cls, value: List[DayConfig]) -> List[DayConfig]:
        """Ensure at most one entry per weekday."""
        _check_unique_days(value)
        return value

    def hours_for(self, day_of_week: int) -> DayAvailability:
        """
        Get the opening hours for a day of the week.
        Days without an entry are treated as closed.
        """
        for day in self.opening_hours:
            if day.day_of_week == day_of_week:
                return day.to_domain()
        return DayAvailability.closed(day_of_week)


class StylistConfig(BaseModel):
    """Stylist configuration with an optional weekly schedule."""
    id: str
    name: str
    is_active: bool = True
    schedule: List[DayConfig] = Field(default_factory=list)

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, value: List[DayConfig]) -> List[DayConfig]:
        """Ensure at most one entry per weekday."""
        _check_unique_days(value)
        return value

    def to_domain_schedule(self) -> Tuple[DayAvailability, ...]:
        return tuple(day.to_domain() for day in self.schedule)


class ServiceConfig(BaseModel):
    """A bookable service."""
    id: str
    name: str
    duration_minutes: int

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure service duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value


class ClosedDateConfig(BaseModel):
    """
    A closure on a specific date, salon-wide or for one stylist.

    Without ``start``/``end`` the whole day is closed; with either one, only
    that window is (missing bounds default to 00:00 and 23:59).
    """
    date: str
    stylist_id: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        """Validate the YYYY-MM-DD format."""
        try:
            pendulum.from_format(value, "YYYY-MM-DD")
        except ValueError as exc:
            raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc
        return value

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_clock_time(value)
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "ClosedDateConfig":
        """Ensure a partial closure opens before it ends."""
        if not self.is_full_day:
            self.window()
        return self

    @property
    def is_full_day(self) -> bool:
        return self.start is None and self.end is None

    def window(self) -> TimeInterval | None:
        """Get the closed window, or None for a full-day closure."""
        if self.is_full_day:
            return None
        return TimeInterval.from_strings(self.start or "00:00", self.end or "23:59")


class AppointmentConfig(BaseModel):
    """An existing appointment; cancelled ones never block a slot."""
    stylist_id: str
    start: str  # Local "YYYY-MM-DD HH:mm"
    duration_minutes: int
    status: str = "confirmed"

    @property
    def is_cancelled(self) -> bool:
        return self.status.lower() == "cancelled"


class AppConfig(BaseModel):
    """Application configuration."""
    salon: SalonConfig = Field(default_factory=SalonConfig)
    stylists: List[StylistConfig] = Field(default_factory=list)
    services: List[ServiceConfig] = Field(default_factory=list)
    closed_dates: List[ClosedDateConfig] = Field(default_factory=list)
    appointments: List[AppointmentConfig] = Field(default_factory=list)

    @field_validator("stylists")
    @classmethod
    def validate_stylists(cls, value: List[StylistConfig]) -> List[StylistConfig]:
        """Ensure stylist ids are unique."""
        seen_ids: set[str] = set()
        for stylist in value:
            if stylist.id in seen_ids:
                raise ValueError(f"Duplicate stylist id detected: {stylist.id}")
            seen_ids.add(stylist.id)
        return value

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service ids are unique."""
        seen_ids: set[str] = set()
        for service in value:
            if service.id in seen_ids:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen_ids.add(service.id)
        return value

    @model_validator(mode="after")
    def validate_closure_stylists(self) -> "AppConfig":
        """Ensure per-stylist closures reference configured stylists."""
        known = {stylist.id for stylist in self.stylists}
        unknown = sorted(
            {cd.stylist_id for cd in self.closed_dates if cd.stylist_id and cd.stylist_id not in known}
        )
        if unknown:
            raise ValueError(f"closed_dates reference unknown stylist(s): {', '.join(unknown)}")
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

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
                f"Please create a {DEFAULT_CONFIG_FILENAME} file. See salon.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_stylist(self, stylist_id: str) -> StylistConfig | None:
        """Find a stylist by id, or by name ignoring case."""
        for stylist in self.stylists:
            if stylist.id == stylist_id:
                return stylist
        for stylist in self.stylists:
            if stylist.name.lower() == stylist_id.lower():
                return stylist
        return None

    def find_service(self, service_id: str) -> ServiceConfig | None:
        """Find a service by id."""
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    def active_stylists(self) -> List[StylistConfig]:
        return [stylist for stylist in self.stylists if stylist.is_active]

    def build_schedule(self, stylist_ids: Sequence[str]) -> Dict[str, Tuple[DayAvailability, ...]]:
        """Build the domain schedule for the given stylist ids."""
        schedule: Dict[str, Tuple[DayAvailability, ...]] = {}
        for stylist_id in stylist_ids:
            stylist = self.find_stylist(stylist_id)
            if stylist is not None:
                schedule[stylist.id] = stylist.to_domain_schedule()
        return schedule


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for salon.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / DEFAULT_CONFIG_FILENAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / DEFAULT_CONFIG_FILENAME

    return config_path
