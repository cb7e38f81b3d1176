"""Row-by-row evolution of elementary cellular automata."""

import logging
from typing import Any, Dict, Iterator, Optional, Sequence, Union

import numpy as np

from .grid import Grid
from .rule import RuleTable, compile_rule, step_row

logger = logging.getLogger(__name__)


def iter_rows(seed_row: Sequence[bool], table: RuleTable, row_count: int) -> Iterator[np.ndarray]:
    """Lazily yield ``row_count`` rows, starting with the seed.

    Each row depends only on the one before it, so a consumer may stop at
    any point and the rows already produced stay valid.

    Args:
        seed_row: Row 0
        table: Compiled rule table
        row_count: Total number of rows to yield, seed included

    Yields:
        Boolean arrays, one per row
    """
    if row_count < 0:
        raise ValueError(f"Row count must be non-negative, got {row_count}")
    return _evolve(np.asarray(seed_row, dtype=bool).reshape(-1).copy(), table, row_count)


def _evolve(row: np.ndarray, table: RuleTable, row_count: int) -> Iterator[np.ndarray]:
    for index in range(row_count):
        if index > 0:
            row = step_row(row, table)
        yield row.copy()


def generate(seed_row: Sequence[bool], table: RuleTable, row_count: int) -> np.ndarray:
    """Evolve ``seed_row`` into a full image.

    Returns:
        Boolean array of shape (row_count, len(seed_row))
    """
    cols = len(seed_row)
    rows = list(iter_rows(seed_row, table, row_count))
    logger.debug("Generated %d rows of %d cells under rule %d", row_count, cols, table.rule)
    if not rows:
        return np.zeros((0, cols), dtype=bool)
    return np.stack(rows)


class Automaton:
    """Grows a Grid downward from its seed row under one rule.

    The automaton keeps no state beyond the grid itself: the next row is
    always derived from the last generated one, so stepping at any cadence
    gives the same image as ``run()``.
    """

    def __init__(self, grid: Grid, rule: Union[int, RuleTable]) -> None:
        """Initialize the automaton.

        Args:
            grid: Grid to grow; its seed row is used as row 0
            rule: Rule index or compiled table

        Raises:
            InvalidRuleIndex: If ``rule`` is an index outside [0, 255]
        """
        self.grid = grid
        self.table = rule if isinstance(rule, RuleTable) else compile_rule(rule)

    @property
    def rule(self) -> int:
        """Rule index being applied."""
        return self.table.rule

    @property
    def generation(self) -> int:
        """Number of rows generated after the seed."""
        return self.grid.generated_rows - 1

    @property
    def is_complete(self) -> bool:
        """Whether the grid has been fully generated."""
        return self.grid.is_complete

    def set_rule(self, rule: Union[int, RuleTable]) -> None:
        """Switch rules; generated rows are discarded."""
        self.table = rule if isinstance(rule, RuleTable) else compile_rule(rule)
        self.grid.reset_generated()

    def step(self) -> Optional[np.ndarray]:
        """Generate the next row.

        Returns:
            The new row, or None if the grid is already complete
        """
        next_index = self.grid.generated_rows
        if next_index >= self.grid.rows:
            return None

        row = step_row(self.grid.get_row(next_index - 1), self.table)
        self.grid.set_row(next_index, row)
        return row

    def rows(self) -> Iterator[np.ndarray]:
        """Yield each remaining row as it is generated.

        Abandoning the iterator leaves the rows already produced in place.
        """
        while True:
            row = self.step()
            if row is None:
                return
            yield row

    def run(self) -> Grid:
        """Generate every remaining row and return the grid."""
        for _ in self.rows():
            pass
        logger.debug("Rule %d filled %d cells", self.rule, self.grid.population)
        return self.grid

    def reset(self, clear_seed: bool = False) -> None:
        """Discard generated rows.

        Args:
            clear_seed: Whether to empty the seed row as well
        """
        if clear_seed:
            self.grid.clear()
        else:
            self.grid.reset_generated()

    def save_state(self) -> Dict[str, Any]:
        """Save automaton state for serialization."""
        return {
            "rule": self.rule,
            "rows": self.grid.rows,
            "cols": self.grid.cols,
            "grid_data": self.grid.to_list(),
        }

    def load_state(self, state: Dict[str, Any]) -> None:
        """Load automaton state saved by ``save_state``.

        Raises:
            ValueError: If state is incompatible with current grid
        """
        if state["rows"] != self.grid.rows or state["cols"] != self.grid.cols:
            raise ValueError(
                f"Grid size mismatch: saved {state['rows']}x{state['cols']} "
                f"vs current {self.grid.rows}x{self.grid.cols}"
            )
        self.table = compile_rule(state["rule"])
        self.grid.from_list(state["grid_data"])

    def get_statistics(self) -> Dict[str, Any]:
        """Summarize the current image.

        Returns:
            Dictionary with rule, progress and density figures
        """
        generated = self.grid.generated_rows
        defined_cells = generated * self.grid.cols
        population = self.grid.population
        return {
            "rule": self.rule,
            "rule_bits": self.table.to_bits(),
            "grid_size": self.grid.shape,
            "generated_rows": generated,
            "complete": self.is_complete,
            "seed_population": int(np.sum(self.grid.seed)),
            "population": population,
            "population_density": population / defined_cells if defined_cells else 0.0,
        }
