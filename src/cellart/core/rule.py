"""Elementary cellular automaton rule tables and row stepping."""

import logging
from typing import Dict, Iterator, List, Sequence, Union

import numpy as np

from .settings import validate_rule_index

logger = logging.getLogger(__name__)

# Neighborhood patterns in rule-bit order, most significant bit first.
PATTERNS = ("111", "110", "101", "100", "011", "010", "001", "000")


def pattern_code(left: bool, center: bool, right: bool) -> int:
    """Encode a left-center-right neighborhood as an integer in 0..7."""
    return (int(bool(left)) << 2) | (int(bool(center)) << 1) | int(bool(right))


class RuleTable:
    """Lookup table mapping each 3-cell neighborhood to the next cell state.

    Outputs are stored in an 8-element boolean array indexed by the
    neighborhood code ``left << 2 | center << 1 | right``, so pattern
    ``"111"`` is entry 7 and ``"000"`` is entry 0.
    """

    def __init__(self, rule: int, outputs: np.ndarray) -> None:
        """Initialize a rule table.

        Args:
            rule: Rule index the table was compiled from
            outputs: Boolean array of shape (8,) indexed by neighborhood code
        """
        self.rule = rule
        self._outputs = np.asarray(outputs, dtype=bool).copy()
        if self._outputs.shape != (8,):
            raise ValueError(f"Rule table needs 8 outputs, got shape {self._outputs.shape}")
        self._outputs.setflags(write=False)

    @property
    def outputs(self) -> np.ndarray:
        """Read-only output array indexed by neighborhood code."""
        return self._outputs

    def lookup(self, pattern: Union[str, int]) -> bool:
        """Look up the output for a pattern string such as ``"101"`` or a code 0..7."""
        if isinstance(pattern, str):
            if len(pattern) != 3 or set(pattern) - {"0", "1"}:
                raise KeyError(pattern)
            pattern = int(pattern, 2)
        if not 0 <= pattern <= 7:
            raise KeyError(pattern)
        return bool(self._outputs[pattern])

    def __getitem__(self, pattern: Union[str, int]) -> bool:
        return self.lookup(pattern)

    def __len__(self) -> int:
        return len(PATTERNS)

    def __iter__(self) -> Iterator[str]:
        return iter(PATTERNS)

    def bindings(self) -> Dict[str, bool]:
        """Pattern to output mapping in rule-bit order (``111`` first)."""
        return {pattern: self.lookup(pattern) for pattern in PATTERNS}

    def active_patterns(self) -> List[str]:
        """Patterns that produce a filled cell, in rule-bit order."""
        return [pattern for pattern in PATTERNS if self.lookup(pattern)]

    def to_bits(self) -> str:
        """The rule's 8-bit binary expansion, most significant bit first."""
        return "".join("1" if self.lookup(pattern) else "0" for pattern in PATTERNS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleTable):
            return False
        return self.rule == other.rule and np.array_equal(self._outputs, other._outputs)

    def __hash__(self) -> int:
        return hash((self.rule, self._outputs.tobytes()))

    def __repr__(self) -> str:
        return f"RuleTable(rule={self.rule}, bits={self.to_bits()})"


def compile_rule(rule: int) -> RuleTable:
    """Compile a rule index into its lookup table.

    Bit ``i`` of the zero-padded binary expansion (counted from the most
    significant bit) is bound to ``PATTERNS[i]``.

    Args:
        rule: Rule index in [0, 255]

    Returns:
        RuleTable for the rule

    Raises:
        InvalidRuleIndex: If the index is out of range
    """
    validate_rule_index(rule)
    bits = f"{rule:08b}"
    outputs = np.zeros(8, dtype=bool)
    for bit, pattern in zip(bits, PATTERNS):
        outputs[int(pattern, 2)] = bit == "1"
    logger.debug("Compiled rule %d (%s)", rule, bits)
    return RuleTable(rule, outputs)


def step_row(previous_row: Sequence[bool], table: RuleTable) -> np.ndarray:
    """Derive the next row from the previous one.

    Neighbors beyond either edge are read as empty; the row never wraps.

    Args:
        previous_row: Cell states of the previous row
        table: Compiled rule table

    Returns:
        Boolean array with the same length as ``previous_row``
    """
    cells = np.asarray(previous_row, dtype=bool).reshape(-1)
    padded = np.pad(cells, 1, mode="constant", constant_values=False).astype(np.uint8)
    codes = (padded[:-2] << 2) | (padded[1:-1] << 1) | padded[2:]
    return table.outputs[codes]
