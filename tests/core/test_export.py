"""Tests for vector export."""

import numpy as np
import pytest

from cellart.core.engine import Automaton
from cellart.core.errors import InvalidExportOption
from cellart.core.export import (
    Rect,
    VectorDocument,
    bounding_box,
    default_filename,
    filled_mask,
    find_components,
    to_svg,
    to_vector_document,
)
from cellart.core.grid import Grid

SVG_OPEN = '<svg width="{w}" height="{h}" xmlns="http://www.w3.org/2000/svg">'


def mask_from_text(text):
    return np.array([[char == "*" for char in line] for line in text.strip().split("\n")])


def rule_30_grid():
    grid = Grid(14, 14)
    grid.set_cell(6, True)
    return Automaton(grid, 30).run()


class TestFindComponents:
    """Test cases for connected component discovery."""

    def test_empty(self):
        """Test an empty mask has no components."""
        assert find_components(np.zeros((5, 5), dtype=bool)) == []

    def test_diagonals_are_separate(self):
        """Test diagonal neighbors are not connected."""
        mask = mask_from_text(
            """
*....
.*...
..*..
"""
        )
        components = find_components(mask)
        assert [sorted(c) for c in components] == [[(0, 0)], [(1, 1)], [(2, 2)]]

    def test_l_shape_single_component(self):
        """Test an L-shape is one component."""
        mask = mask_from_text(
            """
*....
*....
***..
"""
        )
        components = find_components(mask)
        assert len(components) == 1
        assert sorted(components[0]) == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
        assert bounding_box(components[0]) == (0, 2, 0, 2)

    def test_discovery_order(self):
        """Test components are ordered by their first cell in row-major scan."""
        mask = mask_from_text(
            """
...**
*....
*..*.
"""
        )
        components = find_components(mask)
        assert [min(c) for c in components] == [(0, 3), (1, 0), (2, 3)]

    def test_partition(self):
        """Test components partition the filled cells exactly."""
        rng = np.random.default_rng(11)
        for _ in range(20):
            mask = rng.random((15, 20)) > 0.55
            components = find_components(mask)
            cells = [cell for component in components for cell in component]
            assert len(cells) == len(set(cells))
            assert set(cells) == {(int(r), int(c)) for r, c in zip(*np.nonzero(mask))}

    def test_large_component_no_recursion(self):
        """Test a fully filled large grid is handled iteratively."""
        mask = np.ones((200, 200), dtype=bool)
        components = find_components(mask)
        assert len(components) == 1
        assert len(components[0]) == 40000


class TestToVectorDocument:
    """Test cases for to_vector_document."""

    def test_square_per_cell(self):
        """Test zero radius emits one square per filled cell in row-major order."""
        mask = mask_from_text(
            """
.*...
**...
.....
.....
....*
"""
        )
        document = to_vector_document(mask, cell_size=10, corner_radius=0)
        assert document.width == 50
        assert document.height == 50
        assert document.rects == [
            Rect(10, 0, 10, 10),
            Rect(0, 10, 10, 10),
            Rect(10, 10, 10, 10),
            Rect(40, 40, 10, 10),
        ]

    def test_block_merge(self):
        """Test a 2x2 block at the origin becomes one rounded rectangle."""
        mask = mask_from_text(
            """
**...
**...
.....
.....
.....
"""
        )
        document = to_vector_document(mask, cell_size=10, corner_radius=3)
        assert document.rects == [Rect(0, 0, 20, 20, radius=3)]
        assert '<rect x="0" y="0" width="20" height="20" rx="3" ry="3" fill="#000"/>' in document.to_svg()

    def test_concave_component_uses_bounding_box(self):
        """Test an L-shape exports as its full bounding box."""
        mask = mask_from_text(
            """
*....
*....
***..
.....
....*
"""
        )
        document = to_vector_document(mask, cell_size=8, corner_radius=2)
        assert document.rects == [Rect(0, 0, 24, 24, radius=2), Rect(32, 32, 8, 8, radius=2)]

    def test_rounded_order_follows_discovery(self):
        """Test rounded rectangles follow component discovery order."""
        mask = mask_from_text(
            """
....*
*...*
*....
..**.
.....
"""
        )
        document = to_vector_document(mask, cell_size=10, corner_radius=5)
        assert [(rect.x, rect.y) for rect in document.rects] == [(40, 0), (0, 10), (20, 30)]

    def test_unset_rows_are_empty(self):
        """Test ungenerated rows never produce shapes."""
        grid = Grid(6, 5)
        grid.set_seed([True] * 5)
        document = to_vector_document(grid, cell_size=10, corner_radius=0)
        assert len(document) == 5
        assert document.height == 60

        rounded = to_vector_document(grid, cell_size=10, corner_radius=4)
        assert rounded.rects == [Rect(0, 0, 50, 10, radius=4)]

    def test_raw_cell_lists_skip_unset(self):
        """Test raw int lists from Grid.cells treat unset cells as empty."""
        grid = Grid(5, 5)
        grid.set_cell(2, True)
        document = to_vector_document(grid.cells.tolist(), cell_size=10)
        assert document.rects == [Rect(20, 0, 10, 10)]

        rounded = to_vector_document(Grid(5, 5).cells.tolist(), cell_size=10, corner_radius=3)
        assert len(rounded) == 0

    def test_nested_list_input(self):
        """Test nested lists with None are accepted."""
        data = [[True, None, False], [None, None, None]]
        document = to_vector_document(data, cell_size=10)
        assert document.rects == [Rect(0, 0, 10, 10)]
        assert (document.width, document.height) == (30, 20)

    def test_raw_cell_array(self):
        """Test a raw grid cell array marks only FILLED cells."""
        grid = Grid(5, 5)
        grid.set_cell(4, True)
        assert filled_mask(grid.cells).sum() == 1

    def test_idempotent(self):
        """Test exporting twice gives byte-identical markup."""
        grid = rule_30_grid()
        for radius in (0, 3):
            first = to_svg(grid, 20, radius)
            second = to_svg(grid, 20, radius)
            assert first == second

    def test_svg_envelope(self):
        """Test the markup wraps rects in a sized svg element."""
        grid = rule_30_grid()
        svg = to_svg(grid, 20, 0)
        assert svg.startswith(SVG_OPEN.format(w=280, h=280))
        assert svg.endswith("</svg>")
        assert svg.count("<rect ") == grid.population
        assert "rx=" not in svg

    def test_rounded_markup(self):
        """Test rx and ry appear only with a positive radius."""
        grid = rule_30_grid()
        svg = to_svg(grid, 16, 4)
        assert svg.count("<rect ") == svg.count('rx="4" ry="4"')

    def test_empty_document(self):
        """Test an empty grid yields an empty canvas."""
        svg = to_svg(Grid(5, 7), 10, 0)
        assert svg == SVG_OPEN.format(w=70, h=50) + "</svg>"

    @pytest.mark.parametrize("cell_size,radius", [(7, 0), (33, 0), (10, -1), (10, 11), (10.5, 0), (10, 2.0)])
    def test_invalid_options(self, cell_size, radius):
        """Test pixel options outside their ranges are rejected."""
        with pytest.raises(InvalidExportOption):
            to_vector_document(Grid(5, 5), cell_size, radius)


class TestVectorDocument:
    """Test cases for the VectorDocument class."""

    def test_rect_markup(self):
        """Test rect serialization with and without rounding."""
        assert Rect(1, 2, 3, 4).to_svg() == '<rect x="1" y="2" width="3" height="4" fill="#000"/>'
        assert (
            Rect(1, 2, 3, 4, radius=2).to_svg()
            == '<rect x="1" y="2" width="3" height="4" rx="2" ry="2" fill="#000"/>'
        )

    def test_save(self, tmp_path):
        """Test saving writes the markup."""
        document = VectorDocument(20, 10, [Rect(0, 0, 10, 10)])
        path = document.save(tmp_path / "out.svg")
        assert path.read_text(encoding="utf-8") == document.to_svg()
        assert str(document) == document.to_svg()

    def test_default_filename(self):
        """Test the suggested export file name."""
        assert default_filename(30) == "cellular-automata-rule30.svg"
