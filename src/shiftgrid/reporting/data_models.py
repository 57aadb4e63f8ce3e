from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CoverageSummary:
    """Counts of grid cells by status plus the open gaps across the grid."""

    total_cells: int
    green: int
    yellow: int
    gray: int
    cells_needing_dispatcher: int
    zones_needing_leads: int  # zone-cells without a lead, summed over cells

    @property
    def full_fraction(self) -> float:
        return self.green / self.total_cells if self.total_cells else 0.0
