"""Raster-to-vector export of automaton images as SVG markup."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .grid import FILLED, Grid
from .settings import validate_export_options

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
FILL_COLOR = "#000"

Cell = Tuple[int, int]
GridLike = Union[Grid, np.ndarray, Sequence[Sequence[Optional[bool]]]]


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel units."""

    x: int
    y: int
    width: int
    height: int
    radius: int = 0

    def to_svg(self) -> str:
        """Render as an SVG ``<rect>`` element; ``rx``/``ry`` only when rounded."""
        corners = f' rx="{self.radius}" ry="{self.radius}"' if self.radius > 0 else ""
        return (
            f'<rect x="{self.x}" y="{self.y}" width="{self.width}" '
            f'height="{self.height}"{corners} fill="{FILL_COLOR}"/>'
        )


@dataclass
class VectorDocument:
    """Ordered rectangles on a fixed-size canvas."""

    width: int
    height: int
    rects: List[Rect] = field(default_factory=list)

    def to_svg(self) -> str:
        """Serialize to SVG markup. Identical documents give identical strings."""
        body = "".join(rect.to_svg() for rect in self.rects)
        return f'<svg width="{self.width}" height="{self.height}" xmlns="{SVG_NAMESPACE}">{body}</svg>'

    def save(self, path: Union[str, Path]) -> Path:
        """Write the SVG markup to ``path``.

        Returns:
            Path that was written
        """
        path = Path(path)
        path.write_text(self.to_svg(), encoding="utf-8")
        logger.debug("Wrote %d rects to %s", len(self.rects), path)
        return path

    def __len__(self) -> int:
        return len(self.rects)

    def __str__(self) -> str:
        return self.to_svg()


def default_filename(rule: int) -> str:
    """Suggested file name for an exported image of ``rule``."""
    return f"cellular-automata-rule{rule}.svg"


def filled_mask(grid: GridLike) -> np.ndarray:
    """Boolean array of filled cells.

    Accepts a Grid, a raw cell array (``FILLED`` marks a filled cell),
    a boolean array, or nested lists of True/False/None or raw cell
    values. Unset cells are always treated as empty.
    """
    if isinstance(grid, Grid):
        return grid.filled_mask()
    if isinstance(grid, np.ndarray):
        if grid.dtype == bool:
            return grid.copy()
        return grid == FILLED
    rows = [[value is not None and value == FILLED for value in row] for row in grid]
    if not rows:
        return np.zeros((0, 0), dtype=bool)
    return np.array(rows, dtype=bool)


def find_components(mask: np.ndarray) -> List[List[Cell]]:
    """Partition filled cells into 4-connected components.

    Components are listed in the row-major order of their first cell.
    Each flood fill uses an explicit stack, so deep components never hit
    the recursion limit.

    Args:
        mask: Boolean array of filled cells, indexed ``[row, col]``

    Returns:
        List of components, each a list of (row, col) cells
    """
    rows, cols = mask.shape
    visited = np.zeros((rows, cols), dtype=bool)
    components: List[List[Cell]] = []

    for row in range(rows):
        for col in range(cols):
            if not mask[row, col] or visited[row, col]:
                continue

            component: List[Cell] = []
            stack = [(row, col)]
            while stack:
                r, c = stack.pop()
                if not (0 <= r < rows and 0 <= c < cols):
                    continue
                if visited[r, c] or not mask[r, c]:
                    continue

                visited[r, c] = True
                component.append((r, c))
                stack.extend([(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)])

            components.append(component)

    return components


def bounding_box(component: Sequence[Cell]) -> Tuple[int, int, int, int]:
    """Get (min_row, max_row, min_col, max_col) of a component."""
    row_indices = [r for r, _ in component]
    col_indices = [c for _, c in component]
    return (min(row_indices), max(row_indices), min(col_indices), max(col_indices))


def to_vector_document(grid: GridLike, cell_size: int, corner_radius: int = 0) -> VectorDocument:
    """Convert an image to vector rectangles.

    With ``corner_radius == 0`` every filled cell becomes its own square,
    in row-major order. With a positive radius each 4-connected component
    becomes one rounded rectangle covering the component's whole bounding
    box; concave components are over-filled to that box.

    Args:
        grid: Image to export
        cell_size: Side of one cell in pixels, in [8, 32]
        corner_radius: Corner radius in pixels, in [0, 10]

    Returns:
        VectorDocument sized ``cols * cell_size`` by ``rows * cell_size``

    Raises:
        InvalidExportOption: If ``cell_size`` or ``corner_radius`` is out of range
    """
    validate_export_options(cell_size, corner_radius)
    mask = filled_mask(grid)
    rows, cols = mask.shape
    document = VectorDocument(width=cols * cell_size, height=rows * cell_size)

    if corner_radius == 0:
        for row, col in zip(*np.nonzero(mask)):
            document.rects.append(
                Rect(int(col) * cell_size, int(row) * cell_size, cell_size, cell_size)
            )
    else:
        for component in find_components(mask):
            min_row, max_row, min_col, max_col = bounding_box(component)
            document.rects.append(
                Rect(
                    x=min_col * cell_size,
                    y=min_row * cell_size,
                    width=(max_col - min_col + 1) * cell_size,
                    height=(max_row - min_row + 1) * cell_size,
                    radius=corner_radius,
                )
            )

    logger.debug(
        "Exported %dx%d grid as %d rects (radius %d)", rows, cols, len(document.rects), corner_radius
    )
    return document


def to_svg(grid: GridLike, cell_size: int, corner_radius: int = 0) -> str:
    """Shortcut for ``to_vector_document(...).to_svg()``."""
    return to_vector_document(grid, cell_size, corner_radius).to_svg()
