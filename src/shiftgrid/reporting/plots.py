from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from shiftgrid.result_types import CoverageCell, CoverageStatus

from .metrics import coverage_matrix

STATUS_COLORS = {
    CoverageStatus.GREEN: "#34D399",
    CoverageStatus.YELLOW: "#FBBF24",
    CoverageStatus.GRAY: "#CBD5E1",
}
_EMPTY_COLOR = "#FFFFFF"
_STATUS_CODES = {status.value: i + 1 for i, status in enumerate(STATUS_COLORS)}


def _save_and_show(fig: plt.Figure, filename: str) -> None:
    """Persist the plot under outputs/ and show it."""
    out_dir = Path("outputs")
    out_dir.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_dir / filename, dpi=fig.dpi, bbox_inches="tight")
    plt.show()


def show_coverage_grid(
    cells: Sequence[CoverageCell],
    enable_plot: bool = True,
    filename: str = "coverage_grid.png",
) -> plt.Figure | None:
    """Render the week's coverage grid as a coloured table (rows: county/block)."""
    if not enable_plot:
        return None

    matrix = coverage_matrix(cells)
    if matrix.empty:
        return None

    codes = matrix.apply(lambda col: col.map(_STATUS_CODES)).fillna(0).astype(int)
    cmap = ListedColormap([_EMPTY_COLOR] + list(STATUS_COLORS.values()))

    n_rows, n_cols = codes.shape
    fig, ax = plt.subplots(
        figsize=(2 + n_cols * 1.1, 1.5 + n_rows * 0.35), dpi=150
    )
    ax.imshow(codes.to_numpy(), cmap=cmap, vmin=0, vmax=len(STATUS_COLORS), aspect="auto")

    ax.set_xticks(range(n_cols), [str(c) for c in codes.columns], rotation=45, ha="right")
    ax.set_yticks(range(n_rows), [f"{county} {block}" for county, block in codes.index])
    ax.set_xticks([x - 0.5 for x in range(1, n_cols)], minor=True)
    ax.set_yticks([y - 0.5 for y in range(1, n_rows)], minor=True)
    ax.grid(which="minor", color="white", linewidth=1.5)
    ax.tick_params(which="minor", length=0)
    for spine in ax.spines.values():
        spine.set_visible(False)

    ax.set_title("Coverage by county and time block", pad=30)
    ax.legend(
        handles=[
            Patch(facecolor=color, label=status.value.title())
            for status, color in STATUS_COLORS.items()
        ],
        loc="upper center",
        bbox_to_anchor=(0.5, 1.12),
        ncol=len(STATUS_COLORS),
        frameon=False,
    )
    fig.tight_layout()
    _save_and_show(fig, filename)
    return fig
