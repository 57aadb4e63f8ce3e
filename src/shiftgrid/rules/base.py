# src/shiftgrid/rules/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Type

from shiftgrid.result_types import CoverageBlock, CoverageStatus


@dataclass
class RuleSpec:
    cls: Type["CoverageRule"]
    modes: tuple[str, ...] = ()
    settings: dict[str, Any] = field(default_factory=dict)


class CoverageRule(ABC):
    """
    Derives a cell's coverage status from its shifts.

    Status is never stored; rules recompute it on every read. A block without
    shifts has no status (None) and is skipped by callers.
    """

    name: str = "CoverageRule"
    modes: tuple[str, ...] = ()

    def __init__(self, **settings: Any) -> None:
        self._settings: dict[str, Any] = settings

    @abstractmethod
    def classify(self, block: CoverageBlock) -> Optional[CoverageStatus]: ...

    def needs_dispatcher(self, block: CoverageBlock) -> bool:
        """Whether the cell should be reported as missing a dispatcher."""
        return bool(block.shifts) and not block.has_dispatcher

    # Helper for subclasses to read optional settings
    def setting(self, key: str, default: Any) -> Any:
        return self._settings.get(key, default)
