"""Editor defaults and input limits."""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from .errors import InvalidDimension, InvalidExportOption, InvalidRuleIndex

MIN_DIMENSION = 5
MAX_DIMENSION = 50
MIN_RULE = 0
MAX_RULE = 255
MIN_CELL_SIZE = 8
MAX_CELL_SIZE = 32
MIN_CORNER_RADIUS = 0
MAX_CORNER_RADIUS = 10


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_rule_index(rule: Any) -> int:
    """Return ``rule`` unchanged if it is a valid rule index.

    Raises:
        InvalidRuleIndex: If ``rule`` is not an integer in [0, 255]
    """
    if not _is_int(rule) or not MIN_RULE <= rule <= MAX_RULE:
        raise InvalidRuleIndex(rule)
    return rule


def validate_dimension(name: str, value: Any) -> int:
    """Return ``value`` unchanged if it is a valid row/column count.

    Raises:
        InvalidDimension: If ``value`` is not an integer in [5, 50]
    """
    if not _is_int(value) or not MIN_DIMENSION <= value <= MAX_DIMENSION:
        raise InvalidDimension(name, value, MIN_DIMENSION, MAX_DIMENSION)
    return value


def validate_export_options(cell_size: Any, corner_radius: Any) -> None:
    """Check pixel size and corner radius against their input ranges.

    Raises:
        InvalidExportOption: If either value is out of range
    """
    if not _is_int(cell_size) or not MIN_CELL_SIZE <= cell_size <= MAX_CELL_SIZE:
        raise InvalidExportOption("cell_size", cell_size, MIN_CELL_SIZE, MAX_CELL_SIZE)
    if not _is_int(corner_radius) or not MIN_CORNER_RADIUS <= corner_radius <= MAX_CORNER_RADIUS:
        raise InvalidExportOption(
            "corner_radius", corner_radius, MIN_CORNER_RADIUS, MAX_CORNER_RADIUS
        )


@dataclass
class EditorSettings:
    """Parameters an editor session hands to the core."""

    cols: int = 14
    rows: int = 14
    rule: int = 30
    cell_size: int = 20
    corner_radius: int = 0

    @classmethod
    def defaults(cls) -> "EditorSettings":
        """Settings restored by "reset to defaults"."""
        return cls()

    def validate(self) -> "EditorSettings":
        """Validate every field, raising the matching error on the first bad one.

        Returns:
            self, for chaining
        """
        validate_dimension("cols", self.cols)
        validate_dimension("rows", self.rows)
        validate_rule_index(self.rule)
        validate_export_options(self.cell_size, self.corner_radius)
        return self

    def is_default(self) -> bool:
        """Whether every field still holds its default value."""
        return self == EditorSettings.defaults()

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """Create settings from a dictionary, falling back to defaults for missing keys."""
        defaults = cls.defaults()
        return cls(
            cols=data.get("cols", defaults.cols),
            rows=data.get("rows", defaults.rows),
            rule=data.get("rule", defaults.rule),
            cell_size=data.get("cell_size", defaults.cell_size),
            corner_radius=data.get("corner_radius", defaults.corner_radius),
        )
