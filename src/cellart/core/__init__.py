"""Core automaton and export logic."""

from .errors import CellArtError, DimensionMismatch, InvalidDimension, InvalidExportOption, InvalidRuleIndex
from .settings import EditorSettings
from .rule import PATTERNS, RuleTable, compile_rule, step_row
from .grid import Grid
from .engine import Automaton, generate, iter_rows
from .export import Rect, VectorDocument, default_filename, find_components, to_svg, to_vector_document
from .catalog import NotableRule, RuleCatalog
from .batch import BatchAutomaton

__all__ = [
    "CellArtError",
    "DimensionMismatch",
    "InvalidDimension",
    "InvalidExportOption",
    "InvalidRuleIndex",
    "EditorSettings",
    "PATTERNS",
    "RuleTable",
    "compile_rule",
    "step_row",
    "Grid",
    "Automaton",
    "generate",
    "iter_rows",
    "Rect",
    "VectorDocument",
    "default_filename",
    "find_components",
    "to_svg",
    "to_vector_document",
    "NotableRule",
    "RuleCatalog",
    "BatchAutomaton",
]
