from __future__ import annotations

from typing import Sequence, Tuple, Type

from shiftgrid.rules.base import CoverageRule, RuleSpec
from shiftgrid.rules.county import CountyCoverageRule
from shiftgrid.rules.zone import ZoneCoverageRule

RuleTemplate = Tuple[Type[CoverageRule], dict[str, object]]

ZONE_RULE_TEMPLATE: RuleTemplate = (ZoneCoverageRule, {})
COUNTY_RULE_TEMPLATE: RuleTemplate = (CountyCoverageRule, {})

_DEFAULT_RULE_TEMPLATES: list[RuleTemplate] = [
    ZONE_RULE_TEMPLATE,
    COUNTY_RULE_TEMPLATE,
]


def default_rule_specs() -> list[RuleSpec]:
    """Return fresh copies of the default rule specifications."""
    return [
        RuleSpec(cls=cls, modes=tuple(cls.modes), settings=dict(settings))
        for cls, settings in _DEFAULT_RULE_TEMPLATES
    ]


def normalize_rule_specs(
    rules: Sequence[RuleSpec | Type[CoverageRule]] | None,
) -> list[RuleSpec]:
    """Turn user-provided rules into RuleSpec objects."""
    if rules is None:
        return default_rule_specs()

    normalized: list[RuleSpec] = []
    for item in rules:
        if isinstance(item, RuleSpec):
            normalized.append(item)
        elif isinstance(item, type) and issubclass(item, CoverageRule):
            normalized.append(RuleSpec(cls=item, modes=tuple(item.modes)))
        else:
            raise TypeError(
                "Rules must be RuleSpec instances or CoverageRule subclasses; "
                f"got {type(item)!r}"
            )
    return normalized


def rule_for_mode(
    mode: str,
    rules: Sequence[RuleSpec | Type[CoverageRule]] | None = None,
) -> CoverageRule:
    """Instantiate the rule responsible for a dispatcher scheduling mode."""
    key = str(mode).strip().upper()
    for spec in normalize_rule_specs(rules):
        modes = spec.modes or tuple(spec.cls.modes)
        if key in modes:
            return spec.cls(**spec.settings)
    raise ValueError(f"No coverage rule registered for scheduling mode {mode!r}")
