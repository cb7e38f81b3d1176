"""Tests for row generation and the Automaton driver."""

import itertools

import numpy as np
import pytest

from cellart.core.engine import Automaton, generate, iter_rows
from cellart.core.errors import InvalidRuleIndex
from cellart.core.grid import Grid
from cellart.core.rule import compile_rule


def rows_from_text(text):
    return [[char == "*" for char in line] for line in text.strip().split("\n")]


RULE_90_REFERENCE = """
.......*.......
......*.*......
.....*...*.....
....*.*.*.*....
...*.......*...
..*.*.....*.*..
.*...*...*...*.
*.*.*.*.*.*.*.*
"""


class TestGenerate:
    """Test cases for generate and iter_rows."""

    def test_rule_30_triangle(self):
        """Test rule 30 from a single cell reproduces the canonical triangle."""
        seed = [False] * 14
        seed[6] = True
        image = generate(seed, compile_rule(30), 14)

        assert image.shape == (14, 14)
        assert list(np.nonzero(image[0])[0]) == [6]
        assert list(np.nonzero(image[1])[0]) == [5, 6, 7]
        assert list(np.nonzero(image[2])[0]) == [4, 5, 8]
        assert list(np.nonzero(image[3])[0]) == [3, 4, 6, 7, 8, 9]

        # The pattern never spreads faster than one cell per row
        for row in range(7):
            filled = np.nonzero(image[row])[0]
            assert filled.min() >= 6 - row
            assert filled.max() <= 6 + row

    def test_rule_90_sierpinski(self):
        """Test rule 90 from a centered cell draws the Sierpinski pattern."""
        seed = [False] * 15
        seed[7] = True
        image = generate(seed, compile_rule(90), 8)
        assert image.tolist() == rows_from_text(RULE_90_REFERENCE)

    def test_seed_is_row_zero(self):
        """Test the first row is the seed unchanged."""
        seed = [True, False, False, True, True]
        image = generate(seed, compile_rule(110), 5)
        assert image[0].tolist() == seed

    def test_zero_rows(self):
        """Test asking for no rows gives an empty image."""
        image = generate([True] * 6, compile_rule(30), 0)
        assert image.shape == (0, 6)

    def test_negative_rows(self):
        """Test a negative row count is rejected."""
        with pytest.raises(ValueError):
            generate([True] * 6, compile_rule(30), -1)

    def test_incremental_matches_batch(self):
        """Test pulling rows one at a time matches generating them all."""
        rng = np.random.default_rng(3)
        seed = rng.random(20) > 0.5
        table = compile_rule(110)

        full = generate(seed, table, 12)
        lazy = iter_rows(seed, table, 12)
        for index, row in enumerate(lazy):
            assert np.array_equal(row, full[index])

    def test_negative_rows_rejected_on_call(self):
        """Test iter_rows validates the row count before any row is requested."""
        with pytest.raises(ValueError):
            iter_rows([True] * 6, compile_rule(30), -1)

    def test_yielded_rows_are_independent(self):
        """Test mutating a yielded row does not change later rows."""
        seed = [False] * 9
        seed[4] = True
        table = compile_rule(30)
        rows = iter_rows(seed, table, 5)
        first = next(rows)
        first[:] = True
        remaining = np.stack(list(rows))
        assert np.array_equal(remaining, generate(seed, table, 5)[1:])

    def test_abandoned_iteration(self):
        """Test stopping early leaves a valid prefix."""
        seed = [False] * 9
        seed[4] = True
        table = compile_rule(30)
        prefix = list(itertools.islice(iter_rows(seed, table, 9), 4))
        assert len(prefix) == 4
        assert np.array_equal(np.stack(prefix), generate(seed, table, 4))


class TestAutomaton:
    """Test cases for the Automaton class."""

    def make_grid(self, cols=14, rows=14):
        grid = Grid(rows, cols)
        grid.set_cell(cols // 2 - 1, True)
        return grid

    def test_initialization(self):
        """Test automaton initialization."""
        grid = self.make_grid()
        automaton = Automaton(grid, 30)

        assert automaton.grid is grid
        assert automaton.rule == 30
        assert automaton.generation == 0
        assert not automaton.is_complete

    def test_accepts_compiled_table(self):
        """Test a RuleTable can be passed instead of an index."""
        automaton = Automaton(self.make_grid(), compile_rule(90))
        assert automaton.rule == 90

    def test_invalid_rule(self):
        """Test invalid rules are rejected before any row is generated."""
        grid = self.make_grid()
        with pytest.raises(InvalidRuleIndex):
            Automaton(grid, 256)
        assert grid.generated_rows == 1

    def test_step(self):
        """Test stepping fills one row at a time."""
        grid = self.make_grid()
        automaton = Automaton(grid, 30)

        row = automaton.step()
        assert list(np.nonzero(row)[0]) == [5, 6, 7]
        assert automaton.generation == 1
        assert grid.get_cell(1, 6) is True
        assert grid.get_cell(2, 6) is None

    def test_step_when_complete(self):
        """Test stepping a complete grid returns None."""
        automaton = Automaton(self.make_grid(rows=5), 30)
        automaton.run()
        assert automaton.step() is None
        assert automaton.generation == 4

    def test_run_matches_generate(self):
        """Test run() produces the same image as generate()."""
        grid = self.make_grid()
        Automaton(grid, 30).run()
        expected = generate(grid.seed, compile_rule(30), 14)
        assert np.array_equal(grid.filled_mask(), expected)
        assert grid.is_complete

    def test_paced_rows_match_run(self):
        """Test consuming rows() gradually gives the same image as run()."""
        paced = self.make_grid()
        automaton = Automaton(paced, 110)
        rows = automaton.rows()
        next(rows)
        next(rows)
        assert paced.generated_rows == 3
        for _ in rows:
            pass

        batch = self.make_grid()
        Automaton(batch, 110).run()
        assert paced == batch

    def test_set_rule_discards_rows(self):
        """Test switching rules invalidates generated rows."""
        grid = self.make_grid()
        automaton = Automaton(grid, 30)
        automaton.run()
        automaton.set_rule(90)
        assert automaton.rule == 90
        assert grid.generated_rows == 1

    def test_reset(self):
        """Test reset keeps or clears the seed."""
        grid = self.make_grid()
        automaton = Automaton(grid, 30)
        automaton.run()

        automaton.reset()
        assert grid.generated_rows == 1
        assert grid.population == 1

        automaton.reset(clear_seed=True)
        assert grid.population == 0

    def test_save_and_load_state(self):
        """Test state round trip through a dictionary."""
        grid = self.make_grid()
        automaton = Automaton(grid, 30)
        automaton.step()
        automaton.step()
        state = automaton.save_state()

        other = Automaton(Grid(14, 14), 0)
        other.load_state(state)
        assert other.rule == 30
        assert other.grid == grid
        assert other.generation == 2

    def test_load_state_size_mismatch(self):
        """Test loading state from a differently sized grid fails."""
        state = Automaton(self.make_grid(), 30).save_state()
        with pytest.raises(ValueError):
            Automaton(Grid(10, 10), 30).load_state(state)

    def test_statistics(self):
        """Test statistics of a finished image."""
        grid = self.make_grid(cols=10, rows=5)
        automaton = Automaton(grid, 204)
        automaton.run()
        stats = automaton.get_statistics()

        assert stats["rule"] == 204
        assert stats["rule_bits"] == "11001100"
        assert stats["grid_size"] == (5, 10)
        assert stats["complete"] is True
        assert stats["seed_population"] == 1
        assert stats["population"] == 5
        assert stats["population_density"] == pytest.approx(0.1)
