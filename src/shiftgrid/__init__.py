from .config import Config, cfg
from .coverage import (
    build_coverage_grid,
    build_dispatcher_rows,
    classify_block,
    classify_slot,
)
from .features import FeatureKey, resolve_feature, resolve_features
from .result_types import CoverageStatus
from .slots import ContiguousBlock, SlotValidationError, TimeSlot, group_contiguous_slots

__all__ = [
    "Config",
    "cfg",
    "FeatureKey",
    "resolve_feature",
    "resolve_features",
    "CoverageStatus",
    "classify_block",
    "classify_slot",
    "build_coverage_grid",
    "build_dispatcher_rows",
    "ContiguousBlock",
    "TimeSlot",
    "SlotValidationError",
    "group_contiguous_slots",
]
