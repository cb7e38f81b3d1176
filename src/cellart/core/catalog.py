"""Notable elementary rules and rule descriptions."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .batch import BatchAutomaton
from .engine import Automaton
from .grid import Grid
from .rule import RuleTable, compile_rule
from .settings import validate_rule_index

logger = logging.getLogger(__name__)

EXAMPLE_SIZE = 14


class NotableRule:
    """A rule index with a human-readable name and description."""

    def __init__(
        self,
        number: int,
        name: str = "",
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a catalog entry.

        Args:
            number: Rule index in [0, 255]
            name: Display name (defaults to "Rule <number>")
            description: Optional description
            metadata: Optional metadata dictionary

        Raises:
            InvalidRuleIndex: If ``number`` is out of range
        """
        self.number = validate_rule_index(number)
        self.name = name or f"Rule {number}"
        self.description = description
        self.metadata = metadata or {}

    @property
    def table(self) -> RuleTable:
        """Compiled lookup table for this rule."""
        return compile_rule(self.number)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary for serialization."""
        return {
            "number": self.number,
            "name": self.name,
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotableRule":
        """Create entry from dictionary."""
        return cls(
            number=data["number"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )


def centered_seed(cols: int) -> np.ndarray:
    """Seed row with a single filled cell at index ``cols // 2``."""
    seed = np.zeros(cols, dtype=bool)
    if cols:
        seed[cols // 2] = True
    return seed


class RuleCatalog:
    """Manages the collection of notable rules."""

    BUILTIN = [
        (30, "Chaotic pattern generator, used in Mathematica's random number generator"),
        (90, "Sierpinski triangle generator, creates fractal patterns"),
        (110, "Turing complete, capable of universal computation"),
        (184, "Traffic flow model, simulates highway traffic patterns"),
        (150, "Additive cellular automaton, creates nested patterns"),
        (54, "Creates complex triangular structures"),
        (126, "Produces dense, chaotic patterns"),
        (18, "Simple fractal generator with clear structure"),
        (22, "Periodic patterns with interesting symmetries"),
        (73, "Complex boundary behavior with localized structures"),
    ]

    def __init__(self) -> None:
        self._rules: Dict[int, NotableRule] = {}
        self._load_builtin_rules()

    def _load_builtin_rules(self) -> None:
        for number, description in self.BUILTIN:
            self.add_rule(NotableRule(number, description=description, metadata={"builtin": True}))

    def add_rule(self, rule: NotableRule) -> None:
        """Add or replace a catalog entry."""
        self._rules[rule.number] = rule

    def get_rule(self, number: int) -> Optional[NotableRule]:
        """Get an entry by rule index, or None if the rule is not in the catalog."""
        return self._rules.get(number)

    def list_rules(self) -> List[int]:
        """Rule indices in catalog order."""
        return list(self._rules.keys())

    def get_rules_by_category(self) -> Dict[str, List[int]]:
        """Entries split into built-in and custom rules, empty categories dropped."""
        categories: Dict[str, List[int]] = {"Notable": [], "Custom": []}
        for number, rule in self._rules.items():
            key = "Notable" if rule.metadata.get("builtin") else "Custom"
            categories[key].append(number)
        return {category: numbers for category, numbers in categories.items() if numbers}

    def describe(self, number: int) -> str:
        """Describe a rule.

        Catalog entries return their own description; any other rule is
        described by the neighborhood patterns that fill a cell.
        """
        entry = self.get_rule(number)
        if entry is not None and entry.description:
            return entry.description

        active = compile_rule(number).active_patterns()
        return f"This rule activates cells when the neighborhood pattern is: {', '.join(active)}"

    def example_pattern(self, number: int, size: int = EXAMPLE_SIZE) -> Grid:
        """Preview of a rule: a single centered seed grown into a square grid."""
        grid = Grid.from_seed(centered_seed(size), size)
        return Automaton(grid, number).run()

    def example_patterns(
        self, numbers: Optional[Sequence[int]] = None, size: int = EXAMPLE_SIZE, device: str = "cpu"
    ) -> Dict[int, np.ndarray]:
        """Previews for several rules at once, evolved as one batch.

        Args:
            numbers: Rule indices (defaults to every catalog entry)
            size: Side of each square preview
            device: Torch device for the batch

        Returns:
            Mapping of rule index to boolean image of shape (size, size)
        """
        numbers = list(self.list_rules() if numbers is None else numbers)
        seeds = np.tile(centered_seed(size), (len(numbers), 1))
        batch = BatchAutomaton(seeds, numbers, device=device)
        return dict(zip(numbers, batch.generate_numpy(size)))

    def save(self, path: Union[str, Path], include_builtin: bool = False) -> Path:
        """Save catalog entries to a JSON file.

        Args:
            path: Destination file
            include_builtin: Whether to include the built-in entries

        Returns:
            Path that was written
        """
        entries = [
            rule.to_dict()
            for rule in self._rules.values()
            if include_builtin or not rule.metadata.get("builtin")
        ]
        path = Path(path)
        with open(path, "w") as f:
            json.dump(entries, f, indent=2)
        return path

    def load(self, path: Union[str, Path]) -> List[NotableRule]:
        """Load entries from a JSON file written by ``save``.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of rules in {path}")

        if not all(isinstance(entry, dict) for entry in data):
            raise ValueError(f"Expected rule objects in {path}")

        loaded = [NotableRule.from_dict(entry) for entry in data]
        for rule in loaded:
            self.add_rule(rule)
        logger.debug("Loaded %d rules from %s", len(loaded), path)
        return loaded
