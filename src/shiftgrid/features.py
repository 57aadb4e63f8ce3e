"""
Feature flag resolution.

A flag resolves through three tiers: the organisation override, then the
global (platform-wide) override, then the environment default. Overrides are
passed in as immutable snapshots so resolution never touches storage.

Rules for who may change a flag:
  - global ON: org admins may switch the feature off (or back on) for their org
  - global OFF: only developers may enable it for a single org
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

from shiftgrid.config import Config, cfg

FeatureSource = Literal["org", "global", "env"]


def _check_override(name: str, value: Any, nullable: bool = True) -> None:
    if value is None and nullable:
        return
    if not isinstance(value, bool):
        kind = "a bool or None" if nullable else "a bool"
        raise TypeError(f"{name} must be {kind}; got {value!r}")


class FeatureKey(str, Enum):
    TRAININGS = "trainings"
    SIGHTINGS = "sightings"
    MAPS = "maps"

    @classmethod
    def coerce(cls, key: "FeatureKey | str") -> "FeatureKey":
        if isinstance(key, cls):
            return key
        try:
            return cls(str(key).strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(
                f"Unknown feature flag {key!r}; expected one of: {valid}"
            ) from None


@dataclass(frozen=True)
class ResolvedFeature:
    """A flag's effective value plus the metadata the admin screens need."""

    key: FeatureKey
    value: bool
    source: FeatureSource
    admin_configurable: bool
    dev_enabled: bool
    org_value: Optional[bool] = None
    global_value: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "source": self.source,
            "adminConfigurable": self.admin_configurable,
            "devEnabled": self.dev_enabled,
            "globalValue": self.global_value,
            "orgValue": self.org_value,
        }


@dataclass(frozen=True)
class FeatureSettings:
    """
    Snapshot of nullable per-flag overrides at one tier (org or global).

    None means "no override at this tier".
    """

    values: Mapping[FeatureKey, Optional[bool]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {FeatureKey.coerce(k): v for k, v in dict(self.values).items()}
        for key, value in normalized.items():
            _check_override(f"override for {key.value!r}", value)
        object.__setattr__(self, "values", MappingProxyType(normalized))

    def get(self, key: FeatureKey | str) -> Optional[bool]:
        return self.values.get(FeatureKey.coerce(key))

    def with_value(self, key: FeatureKey | str, value: Optional[bool]) -> FeatureSettings:
        """Return a new snapshot with one override changed (None clears it)."""
        updated = dict(self.values)
        updated[FeatureKey.coerce(key)] = value
        return FeatureSettings(updated)


@dataclass(frozen=True)
class FeatureAdminView:
    visible: bool
    can_toggle: bool
    badge: str


def resolve_feature(
    key: FeatureKey | str,
    org_value: Optional[bool],
    global_value: Optional[bool],
    env_default: bool,
) -> ResolvedFeature:
    """
    Resolve one flag: org override, then global override, then env default.

    admin_configurable is true only when the global-or-env value is on.
    dev_enabled is true only when global-or-env is off but the org override
    is explicitly on.
    """
    _check_override("org_value", org_value)
    _check_override("global_value", global_value)
    _check_override("env_default", env_default, nullable=False)
    platform_value = global_value if global_value is not None else env_default

    if org_value is not None:
        value, source = org_value, "org"
    elif global_value is not None:
        value, source = global_value, "global"
    else:
        value, source = env_default, "env"

    return ResolvedFeature(
        key=FeatureKey.coerce(key),
        value=value,
        source=source,  # type: ignore[arg-type]
        admin_configurable=platform_value is True,
        dev_enabled=platform_value is False and org_value is True,
        org_value=org_value,
        global_value=global_value,
    )


def _as_settings(
    settings: FeatureSettings | Mapping[Any, Optional[bool]] | None,
) -> FeatureSettings:
    if settings is None:
        return FeatureSettings()
    if isinstance(settings, FeatureSettings):
        return settings
    return FeatureSettings(dict(settings))


def resolve_features(
    org: FeatureSettings | Mapping[Any, Optional[bool]] | None,
    global_: FeatureSettings | Mapping[Any, Optional[bool]] | None,
    env_defaults: Mapping[str, bool] | None = None,
    config: Config | None = None,
) -> dict[FeatureKey, ResolvedFeature]:
    """Resolve every known flag from org/global snapshots and env defaults."""
    org_settings = _as_settings(org)
    global_settings = _as_settings(global_)
    defaults = (
        env_defaults
        if env_defaults is not None
        else (config or cfg).FEATURE_DEFAULTS
    )

    return {
        key: resolve_feature(
            key,
            org_settings.get(key),
            global_settings.get(key),
            defaults.get(key.value, False),
        )
        for key in FeatureKey
    }


def resolved_values(features: Mapping[FeatureKey, ResolvedFeature]) -> dict[str, bool]:
    return {key.value: feat.value for key, feat in features.items()}


def admin_view(feature: ResolvedFeature, is_developer: bool = False) -> FeatureAdminView:
    """
    Describe how a flag appears on the org feature settings screen.

    Developers always see and may toggle every flag. Org admins only see flags
    that are globally on, or that a developer enabled for their org (read-only).
    """
    visible = feature.admin_configurable or feature.dev_enabled or is_developer
    can_toggle = feature.admin_configurable or is_developer

    if feature.dev_enabled and not is_developer:
        badge = "Enabled by developer"
    elif feature.source == "org":
        badge = "Enabled for this org" if feature.value else "Disabled for this org"
    elif feature.source == "global":
        badge = "Using global default"
    else:
        badge = "Using environment default"

    return FeatureAdminView(visible=visible, can_toggle=can_toggle, badge=badge)
