import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

SchedulingMode = Literal["ZONE", "COUNTY", "REGIONAL"]

SCHEDULING_MODES: tuple[str, ...] = ("ZONE", "COUNTY", "REGIONAL")
RSVP_STATUSES: tuple[str, ...] = ("PENDING", "CONFIRMED", "DECLINED", "NO_SHOW")
FEATURE_NAMES: tuple[str, ...] = ("trainings", "sightings", "maps")

# Environment variable per feature flag default
FEATURE_ENV_VARS: dict[str, str] = {
    "trainings": "FEATURE_TRAININGS",
    "sightings": "FEATURE_SIGHTINGS",
    "maps": "FEATURE_MAPS",
}


@dataclass
class Config:

    ### FEATURE FLAGS ###

    # Lowest-precedence value for each flag, fixed at process start
    FEATURE_DEFAULTS: dict[str, bool] = field(
        default_factory=lambda: {name: False for name in FEATURE_NAMES}
    )

    ### SCHEDULE ###

    # Organisation time zone used for calendar invites
    TIMEZONE: str = "America/New_York"

    # ZONE: cell = dispatcher + zone leads
    # COUNTY / REGIONAL: cell = zone leads only (dispatcher shown separately)
    DISPATCHER_SCHEDULING_MODE: SchedulingMode = "ZONE"

    # Only these RSVPs count towards coverage
    COUNTED_RSVP_STATUSES: tuple[str, ...] = ("CONFIRMED", "PENDING")

    # Valid hour range for slots (end exclusive, so 24 is a valid end)
    MIN_HOUR: int = 0
    MAX_HOUR: int = 24

    def __post_init__(self) -> None:
        self.ensure_feature_defaults()

    def validate(self):
        """
        Validate the Config object has sensible values before use.
        """
        if not (0 <= self.MIN_HOUR < self.MAX_HOUR <= 24):
            raise ValueError("Require 0 <= MIN_HOUR < MAX_HOUR <= 24.")
        if self.DISPATCHER_SCHEDULING_MODE not in SCHEDULING_MODES:
            raise ValueError(
                f"DISPATCHER_SCHEDULING_MODE must be one of {SCHEDULING_MODES}."
            )
        unknown = set(self.COUNTED_RSVP_STATUSES) - set(RSVP_STATUSES)
        if unknown:
            raise ValueError(f"Unknown RSVP statuses: {sorted(unknown)}.")
        unknown = set(self.FEATURE_DEFAULTS) - set(FEATURE_NAMES)
        if unknown:
            raise ValueError(f"Unknown feature flags: {sorted(unknown)}.")
        for name, val in self.FEATURE_DEFAULTS.items():
            if not isinstance(val, bool):
                raise ValueError(f"FEATURE_DEFAULTS[{name!r}] must be a bool.")
        if not self.TIMEZONE:
            raise ValueError("TIMEZONE must be set.")
        try:
            ZoneInfo(self.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE {self.TIMEZONE!r}.") from None

    def ensure_feature_defaults(self) -> None:
        """
        Make sure every known feature flag has an environment default.
        """
        for name in FEATURE_NAMES:
            self.FEATURE_DEFAULTS.setdefault(name, False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a Config from environment variables.

        FEATURE_<NAME> is only true for the literal string "true".
        SHIFTGRID_TIMEZONE and SHIFTGRID_DISPATCHER_MODE override the defaults.
        The result is validated, so a bad environment fails at startup.
        """
        env = os.environ if environ is None else environ
        defaults = {
            name: env.get(var, "").strip().lower() == "true"
            for name, var in FEATURE_ENV_VARS.items()
        }
        kwargs: dict = {"FEATURE_DEFAULTS": defaults}
        tz = env.get("SHIFTGRID_TIMEZONE")
        if tz:
            kwargs["TIMEZONE"] = tz
        mode = env.get("SHIFTGRID_DISPATCHER_MODE")
        if mode:
            kwargs["DISPATCHER_SCHEDULING_MODE"] = mode.strip().upper()
        config = cls(**kwargs)
        config.validate()
        return config


cfg = Config.from_env()
