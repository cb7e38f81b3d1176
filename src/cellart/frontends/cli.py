"""Command-line interface for elementary cellular automaton images."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Tuple

from ..core.catalog import RuleCatalog, centered_seed
from ..core.engine import Automaton
from ..core.errors import CellArtError
from ..core.export import VectorDocument, default_filename, to_vector_document
from ..core.grid import Grid
from ..core.rule import compile_rule
from ..core.settings import (
    EditorSettings,
    validate_dimension,
    validate_export_options,
    validate_rule_index,
)


def parse_seed_pattern(text: str) -> List[bool]:
    """Parse a seed row written as '0'/'1' or '.'/'*' characters.

    Raises:
        ValueError: If the text contains any other character
    """
    seed = []
    for char in text.strip():
        if char in "1*":
            seed.append(True)
        elif char in "0.":
            seed.append(False)
        else:
            raise ValueError(f"Invalid seed character {char!r}; use 0/1 or ./*")
    return seed


class CLICellArt:
    """Command-line interface for growing and exporting automaton images."""

    def __init__(self, catalog_file: Optional[str] = None):
        """Initialize CLI interface.

        Args:
            catalog_file: Optional JSON file with extra catalog entries
        """
        self.catalog = RuleCatalog()
        if catalog_file:
            self.catalog.load(catalog_file)

    def run(
        self,
        settings: EditorSettings,
        seed_pattern: Optional[Sequence[bool]] = None,
        random_seed: bool = False,
        probability: float = 0.5,
        rng_seed: Optional[int] = None,
        verbose: bool = False,
        show_grid: bool = False,
        out: Optional[TextIO] = None,
    ) -> Tuple[Grid, Dict[str, Any]]:
        """Grow an image from a seed row.

        Args:
            settings: Grid size and rule
            seed_pattern: Explicit seed row (must have ``settings.cols`` cells)
            random_seed: Fill the seed row at random instead
            probability: Chance each random seed cell is filled
            rng_seed: Seed for reproducible random rows
            verbose: Print progress updates
            show_grid: Print the finished grid
            out: Stream for progress and grid output (default: stdout)

        Returns:
            Tuple of (grid, statistics)
        """
        out = out or sys.stdout
        settings.validate()
        grid = Grid(settings.rows, settings.cols)

        if seed_pattern is not None:
            grid.set_seed(seed_pattern)
        elif random_seed:
            if verbose:
                print(f"Generating random seed (rate: {probability:.2%})", file=out)
            grid.randomize_seed(probability, seed=rng_seed)
        else:
            grid.set_seed(centered_seed(settings.cols))

        if verbose:
            print(f"Growing {settings.rows}x{settings.cols} grid with rule {settings.rule}", file=out)

        automaton = Automaton(grid, settings.rule)
        automaton.run()

        if show_grid:
            print(self._format_grid(grid), file=out)

        return grid, automaton.get_statistics()

    def export(self, grid: Grid, settings: EditorSettings) -> VectorDocument:
        """Convert a grown grid to a vector document."""
        return to_vector_document(grid, settings.cell_size, settings.corner_radius)

    def _format_grid(self, grid: Grid) -> str:
        """Format grid for display inside a border."""
        border = "+" + "-" * grid.cols + "+"
        lines = [border]
        lines.extend(f"|{line}|" for line in str(grid).split("\n"))
        lines.append(border)
        return "\n".join(lines)

    def list_rules(self) -> None:
        """List catalog rules by category."""
        print("Available rules:")
        for category, numbers in self.catalog.get_rules_by_category().items():
            print(f"\n{category}:")
            for number in numbers:
                entry = self.catalog.get_rule(number)
                print(f"  {number:3d} {entry.name} [{entry.table.to_bits()}]")
                if entry.description:
                    print(f"    {entry.description}")

    def rule_info(self, number: int) -> None:
        """Print a rule's table, description and example preview."""
        table = compile_rule(number)

        print(f"Rule {number} ({table.to_bits()})")
        print(self.catalog.describe(number))
        print()
        print("  ".join(table.bindings().keys()))
        print("  ".join(f" {int(value)} " for value in table.bindings().values()))
        print()
        print(self._format_grid(self.catalog.example_pattern(number)))


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    defaults = EditorSettings.defaults()
    parser = argparse.ArgumentParser(
        description="Grow elementary cellular automaton images and export them as SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rule 30 from a single centered cell, printed to the terminal
  cellart-cli --rule 30 --show-grid

  # Rule 90 on a 31x16 grid, saved with rounded components
  cellart-cli -r 90 -C 31 -R 16 --corner-radius 4 --output sierpinski.svg

  # Random seed, reproducible, SVG written to stdout
  cellart-cli --random-seed --rng-seed 7 --svg-stdout

  # Explicit seed row
  cellart-cli --seed-pattern 00000010000000 --rule 110 --show-grid

  # Describe a rule
  cellart-cli --rule-info 184
        """,
    )

    parser.add_argument(
        "-r", "--rule", type=int, default=defaults.rule, help=f"Rule index 0-255 (default: {defaults.rule})"
    )
    parser.add_argument(
        "-C", "--cols", type=int, help=f"Columns 5-50 (default: seed length or {defaults.cols})"
    )
    parser.add_argument(
        "-R", "--rows", type=int, default=defaults.rows, help=f"Rows 5-50 (default: {defaults.rows})"
    )

    seed_group = parser.add_mutually_exclusive_group()
    seed_group.add_argument(
        "-s",
        "--seed-pattern",
        type=str,
        help="Seed row as 0/1 characters (default: single centered cell)",
    )
    seed_group.add_argument(
        "--random-seed",
        action="store_true",
        help="Fill the seed row at random",
    )

    parser.add_argument(
        "-p",
        "--probability",
        type=float,
        default=0.5,
        help="Fill rate of a random seed 0.0-1.0 (default: 0.5)",
    )
    parser.add_argument("--rng-seed", type=int, help="Random seed for reproducible seed rows")

    parser.add_argument(
        "--cell-size",
        type=int,
        default=defaults.cell_size,
        help=f"Cell size in pixels 8-32 (default: {defaults.cell_size})",
    )
    parser.add_argument(
        "--corner-radius",
        type=int,
        default=defaults.corner_radius,
        help=f"Corner radius in pixels 0-10; >0 merges connected cells (default: {defaults.corner_radius})",
    )

    parser.add_argument(
        "-o",
        "--output",
        nargs="?",
        const="",
        help="Write SVG to this file (no value: cellular-automata-rule<N>.svg)",
    )
    parser.add_argument("--svg-stdout", action="store_true", help="Print the SVG markup")

    parser.add_argument("-g", "--show-grid", action="store_true", help="Display the grown grid")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print detailed progress information")

    parser.add_argument("--list-rules", action="store_true", help="List notable rules and exit")
    parser.add_argument("--rule-info", type=int, metavar="N", help="Describe rule N and exit")
    parser.add_argument("--catalog", type=str, help="JSON file with extra catalog rules")

    return parser


def settings_from_args(args: argparse.Namespace, seed: Optional[Sequence[bool]] = None) -> EditorSettings:
    """Build editor settings from parsed arguments."""
    cols = args.cols
    if cols is None:
        cols = len(seed) if seed is not None else EditorSettings.defaults().cols
    return EditorSettings(
        cols=cols,
        rows=args.rows,
        rule=args.rule,
        cell_size=args.cell_size,
        corner_radius=args.corner_radius,
    )


def validate_args(args: argparse.Namespace, seed: Optional[Sequence[bool]] = None) -> bool:
    """Validate command-line arguments, printing every problem found.

    Args:
        args: Parsed arguments
        seed: Parsed seed row, if one was given

    Returns:
        True if arguments are valid
    """
    errors = []
    settings = settings_from_args(args, seed)

    checks = [
        lambda: validate_rule_index(settings.rule),
        lambda: validate_dimension("cols", settings.cols),
        lambda: validate_dimension("rows", settings.rows),
        lambda: validate_export_options(settings.cell_size, settings.corner_radius),
    ]
    for check in checks:
        try:
            check()
        except CellArtError as e:
            errors.append(str(e))

    if not 0.0 <= args.probability <= 1.0:
        errors.append("Probability must be between 0.0 and 1.0")

    if seed is not None and len(seed) != settings.cols:
        errors.append(f"Seed row has {len(seed)} cells, expected {settings.cols}")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def print_results(stats: Dict[str, Any], verbose: bool) -> None:
    """Print a summary of the grown image."""
    rows, cols = stats["grid_size"]
    print(f"Rule {stats['rule']} ({stats['rule_bits']}): {rows}x{cols} grid")
    print(f"Filled cells: {stats['population']} ({stats['population_density']:.2%})")
    if verbose:
        print(f"  Seed cells: {stats['seed_population']}")
        print(f"  Generated rows: {stats['generated_rows']}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        cli = CLICellArt(args.catalog)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error: Failed to load catalog: {e}")
        return 1

    if args.list_rules:
        cli.list_rules()
        return 0

    if args.rule_info is not None:
        try:
            validate_rule_index(args.rule_info)
        except CellArtError as e:
            print(f"Error: {e}")
            return 1
        cli.rule_info(args.rule_info)
        return 0

    seed = None
    if args.seed_pattern is not None:
        try:
            seed = parse_seed_pattern(args.seed_pattern)
        except ValueError as e:
            print(f"Error: {e}")
            return 1

    if not validate_args(args, seed):
        return 1

    settings = settings_from_args(args, seed)

    try:
        grid, stats = cli.run(
            settings,
            seed_pattern=seed,
            random_seed=args.random_seed,
            probability=args.probability,
            rng_seed=args.rng_seed,
            verbose=args.verbose,
            show_grid=args.show_grid,
            # Keep stdout pure markup when it carries the SVG
            out=sys.stderr if args.svg_stdout else sys.stdout,
        )
        document = cli.export(grid, settings)

        if args.svg_stdout:
            print(document.to_svg())
        else:
            print_results(stats, args.verbose)

        if args.output is not None:
            path = Path(args.output or default_filename(settings.rule))
            document.save(path)
            if not args.svg_stdout:
                print(f"Saved {len(document)} shapes to {path}")

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except (CellArtError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
