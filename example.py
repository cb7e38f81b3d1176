#!/usr/bin/env python3
"""
Example usage of the cellart package.
"""

from cellart import Automaton, Grid, RuleCatalog, to_vector_document
from cellart.core.export import default_filename


def main():
    """Grow a rule 30 image row by row and export it as SVG."""
    catalog = RuleCatalog()
    rule = 30
    print(f"Rule {rule}: {catalog.describe(rule)}")

    grid = Grid(14, 14)
    grid.set_cell(6, True)
    automaton = Automaton(grid, rule)

    # Rows can be pulled one at a time, e.g. to animate the reveal
    for row in automaton.rows():
        print("".join("*" if cell else "." for cell in row))

    print()
    print(grid)
    print(automaton.get_statistics())

    document = to_vector_document(grid, cell_size=20, corner_radius=4)
    path = document.save(default_filename(rule))
    print(f"Saved {len(document)} shapes to {path}")


if __name__ == "__main__":
    main()
