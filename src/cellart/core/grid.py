"""Grid data structure for elementary cellular automaton images."""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch
from .settings import validate_dimension

logger = logging.getLogger(__name__)

UNSET = -1
EMPTY = 0
FILLED = 1


class Grid:
    """A ``rows`` x ``cols`` image grown downward from a seed row.

    Row 0 is the seed and is always fully defined. Every other row starts
    unset and is filled in by the automaton, one row at a time. Cells are
    stored in a numpy ``int8`` array indexed ``[row, col]`` holding
    ``FILLED``, ``EMPTY`` or ``UNSET``.
    """

    def __init__(self, rows: int, cols: int) -> None:
        """Initialize a new grid with an empty seed row.

        Args:
            rows: Number of rows, in [5, 50]
            cols: Number of columns, in [5, 50]

        Raises:
            InvalidDimension: If either dimension is out of range
        """
        self.rows = validate_dimension("rows", rows)
        self.cols = validate_dimension("cols", cols)
        self._cells = np.full((rows, cols), UNSET, dtype=np.int8)
        self._cells[0] = EMPTY

    @property
    def cells(self) -> np.ndarray:
        """Get the raw cell array."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, cols)."""
        return (self.rows, self.cols)

    @property
    def seed(self) -> np.ndarray:
        """Copy of the seed row as booleans."""
        return self._cells[0] == FILLED

    @property
    def generated_rows(self) -> int:
        """Number of defined rows, counting the seed."""
        for row in range(1, self.rows):
            if self._cells[row, 0] == UNSET:
                return row
        return self.rows

    @property
    def is_complete(self) -> bool:
        """Whether every row has been generated."""
        return self.generated_rows == self.rows

    @property
    def population(self) -> int:
        """Get the number of filled cells."""
        return int(np.sum(self._cells == FILLED))

    def _check_seed_column(self, col: int) -> None:
        if not 0 <= col < self.cols:
            raise IndexError(f"Column {col} out of bounds")

    def get_cell(self, row: int, col: int) -> Optional[bool]:
        """Get the state of a cell.

        Returns:
            True if filled, False if empty, None if the row is not generated yet

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
        value = self._cells[row, col]
        if value == UNSET:
            return None
        return bool(value == FILLED)

    def set_cell(self, col: int, filled: bool) -> None:
        """Draw or erase one seed cell.

        Only the seed row is editable. Changing it invalidates every
        generated row.
        """
        self._check_seed_column(col)
        self._cells[0, col] = FILLED if filled else EMPTY
        self.reset_generated()

    def toggle_cell(self, col: int) -> bool:
        """Toggle one seed cell.

        Returns:
            New state of the cell
        """
        new_state = not self.get_cell(0, col)
        self.set_cell(col, new_state)
        return new_state

    def set_seed(self, seed: Sequence[bool]) -> None:
        """Replace the seed row.

        Raises:
            DimensionMismatch: If the seed length differs from ``cols``
        """
        row = np.asarray(seed, dtype=bool).reshape(-1)
        if row.shape[0] != self.cols:
            raise DimensionMismatch(self.cols, row.shape[0])
        self._cells[0] = np.where(row, FILLED, EMPTY)
        self.reset_generated()

    def randomize_seed(self, probability: float = 0.5, seed: Optional[int] = None) -> None:
        """Fill the seed row at random and discard generated rows.

        Args:
            probability: Chance each seed cell is filled (0.0 to 1.0)
            seed: Optional seed for reproducible rows
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"Probability must be between 0.0 and 1.0, got {probability}")
        rng = np.random.default_rng(seed)
        self.set_seed(rng.random(self.cols) > 1.0 - probability)

    def set_row(self, row: int, values: Sequence[bool]) -> None:
        """Store a generated row.

        Rows must be written in order: row ``r`` requires row ``r - 1``.

        Raises:
            IndexError: If ``row`` is the seed row or out of bounds
            ValueError: If the previous row is not defined yet
            DimensionMismatch: If ``values`` has the wrong length
        """
        if not 1 <= row < self.rows:
            raise IndexError(f"Row {row} is not a generated row")
        if self._cells[row - 1, 0] == UNSET:
            raise ValueError(f"Row {row - 1} must be generated before row {row}")
        values = np.asarray(values, dtype=bool).reshape(-1)
        if values.shape[0] != self.cols:
            raise DimensionMismatch(self.cols, values.shape[0])
        self._cells[row] = np.where(values, FILLED, EMPTY)

    def get_row(self, row: int) -> Optional[np.ndarray]:
        """Get a row as booleans, or None if it is not generated yet."""
        if not 0 <= row < self.rows:
            raise IndexError(f"Row {row} out of bounds")
        if self._cells[row, 0] == UNSET:
            return None
        return self._cells[row] == FILLED

    def iter_rows(self) -> Iterator[np.ndarray]:
        """Yield each defined row as booleans, starting with the seed."""
        for row in range(self.generated_rows):
            yield self._cells[row] == FILLED

    def reset_generated(self) -> None:
        """Discard every generated row, keeping the seed."""
        self._cells[1:] = UNSET

    def clear(self) -> None:
        """Empty the seed row and discard every generated row."""
        self._cells[0] = EMPTY
        self.reset_generated()

    def resized(self, rows: int, cols: int) -> "Grid":
        """Return a fresh grid with new dimensions.

        Resizing never carries cells over: the seed row starts empty.
        """
        logger.debug("Resizing grid %dx%d -> %dx%d", self.rows, self.cols, rows, cols)
        return Grid(rows, cols)

    def filled_mask(self) -> np.ndarray:
        """Boolean array of filled cells; unset cells count as empty."""
        return self._cells == FILLED

    def to_list(self) -> List[List[Optional[bool]]]:
        """Convert grid to nested list for serialization.

        Returns:
            2D list with True, False or None (unset) per cell
        """
        return [
            [None if value == UNSET else bool(value == FILLED) for value in row]
            for row in self._cells.tolist()
        ]

    def from_list(self, data: List[List[Optional[bool]]]) -> None:
        """Load grid from nested list.

        Raises:
            ValueError: If data dimensions don't match grid or the seed row has unset cells
        """
        if len(data) != self.rows or any(len(row) != self.cols for row in data):
            raise ValueError(f"Data shape doesn't match grid {self.shape}")
        if any(value is None for value in data[0]):
            raise ValueError("Seed row must be fully defined")
        defined = []
        for row in data:
            unset = [value is None for value in row]
            if any(unset) and not all(unset):
                raise ValueError("Rows must be either fully generated or fully unset")
            defined.append(not unset[0])
        if defined != sorted(defined, reverse=True):
            raise ValueError("Generated rows must form a contiguous block after the seed")

        cells = np.array(
            [[UNSET if value is None else (FILLED if value else EMPTY) for value in row] for row in data],
            dtype=np.int8,
        )
        self._cells[:] = cells

    @classmethod
    def from_seed(cls, seed: Sequence[bool], rows: int) -> "Grid":
        """Create a grid whose column count matches ``seed``."""
        grid = cls(rows, len(seed))
        grid.set_seed(seed)
        return grid

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """String representation: '*' filled, '.' empty, ' ' not generated."""
        symbols = {FILLED: "*", EMPTY: ".", UNSET: " "}
        return "\n".join("".join(symbols[int(value)] for value in row) for row in self._cells)
