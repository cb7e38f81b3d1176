"""Validation errors raised at the boundary of the core."""

from typing import Any


class CellArtError(ValueError):
    """Base class for invalid input to the automaton or exporter."""


class InvalidRuleIndex(CellArtError):
    """Rule index outside [0, 255]."""

    def __init__(self, rule: Any) -> None:
        super().__init__(f"Rule index must be an integer in [0, 255], got {rule!r}")
        self.rule = rule


class InvalidDimension(CellArtError):
    """Row or column count outside the allowed range."""

    def __init__(self, name: str, value: Any, low: int, high: int) -> None:
        super().__init__(f"{name} must be an integer in [{low}, {high}], got {value!r}")
        self.name = name
        self.value = value


class DimensionMismatch(CellArtError):
    """Seed row length differs from the declared column count."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Seed row has {actual} cells, expected {expected}")
        self.expected = expected
        self.actual = actual


class InvalidExportOption(CellArtError):
    """Cell size or corner radius outside its input range."""

    def __init__(self, name: str, value: Any, low: int, high: int) -> None:
        super().__init__(f"{name} must be an integer in [{low}, {high}], got {value!r}")
        self.name = name
        self.value = value
