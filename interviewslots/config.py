"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import WallClockTime

DEFAULT_DURATION_OPTIONS = [15, 30, 45, 60, 90]


def _validate_clock(value: str) -> str:
    try:
        WallClockTime.parse(value)
    except ValueError as exc:
        raise ValueError(f"Invalid time {value!r}: {exc}") from exc
    return value


class DayHoursConfig(BaseModel):
    """Opening hours override for a single weekday."""
    opens_at: str
    closes_at: str

    @field_validator("opens_at", "closes_at")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _validate_clock(v)

    @model_validator(mode="after")
    def validate_order(self) -> "DayHoursConfig":
        """Ensure the window opens before it closes."""
        if WallClockTime.parse(self.closes_at) <= WallClockTime.parse(self.opens_at):
            raise ValueError("closes_at must be later than opens_at")
        return self


class OfficeHoursConfig(BaseModel):
    """Bookable office hours and interview durations."""
    opens_at: str = "08:00"
    closes_at: str = "18:00"
    granularity_minutes: int = 30
    duration_options: List[int] = Field(default_factory=lambda: list(DEFAULT_DURATION_OPTIONS))
    default_duration_minutes: int = 30
    closed_weekdays: List[int] = Field(default_factory=list)  # 1=Monday, 7=Sunday
    weekday_overrides: Dict[int, DayHoursConfig] = Field(default_factory=dict)
    closed_dates: List[date] = Field(default_factory=list)

    @field_validator("opens_at", "closes_at")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _validate_clock(v)

    @field_validator("granularity_minutes", "default_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure minute values are positive."""
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @field_validator("duration_options")
    @classmethod
    def validate_duration_options(cls, value: List[int]) -> List[int]:
        """Ensure durations are positive, sorted and unique."""
        if not value:
            raise ValueError("duration_options must not be empty")
        invalid = [v for v in value if v <= 0]
        if invalid:
            raise ValueError(f"duration_options must be positive, got {invalid}")
        return sorted(set(value))

    @field_validator("closed_weekdays")
    @classmethod
    def validate_closed_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure ISO weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"closed_weekdays must be between 1 and 7, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("weekday_overrides")
    @classmethod
    def validate_override_keys(cls, value: Dict[int, DayHoursConfig]) -> Dict[int, DayHoursConfig]:
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"weekday_overrides keys must be between 1 and 7, got {invalid_days}")
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "OfficeHoursConfig":
        """Ensure the window opens before it closes and splits into clean slots."""
        opens = WallClockTime.parse(self.opens_at)
        closes = WallClockTime.parse(self.closes_at)
        if closes <= opens:
            raise ValueError("closes_at must be later than opens_at")

        windows = [(opens, closes)] + [
            (WallClockTime.parse(o.opens_at), WallClockTime.parse(o.closes_at))
            for o in self.weekday_overrides.values()
        ]
        for start, end in windows:
            if (end.minutes - start.minutes) % self.granularity_minutes != 0:
                raise ValueError(
                    f"granularity_minutes={self.granularity_minutes} does not divide "
                    f"the window {start} - {end}"
                )

        if self.default_duration_minutes not in self.duration_options:
            raise ValueError(
                f"default_duration_minutes={self.default_duration_minutes} "
                f"is not one of {self.duration_options}"
            )
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    office_hours: OfficeHoursConfig = Field(default_factory=OfficeHoursConfig)
    timezone: str = "local"  # only used to decide what "today" is
    block_on_unparseable_times: bool = False
    drafts_path: Optional[Path] = None

    @field_validator("drafts_path")
    @classmethod
    def expand_drafts_path(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    def resolve_drafts_path(self) -> Path:
        """Drafts file, defaulting to one in the user's home directory."""
        return self.drafts_path or Path.home() / ".interviewslots_drafts.json"

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
            ConfigurationError: If config is invalid
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
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc

    @classmethod
    def load_or_default(cls, config_path: Optional[Path]) -> "AppConfig":
        """Load the given file, or fall back to built-in defaults when absent."""
        path = config_path or get_default_config_path()
        if config_path is None and not path.exists():
            return cls()
        return cls.load_from_yaml(path)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
