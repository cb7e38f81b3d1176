"""Elementary cellular automaton images with SVG export."""

__version__ = "0.1.0"

from .core.grid import Grid
from .core.rule import RuleTable, compile_rule, step_row
from .core.engine import Automaton, generate, iter_rows
from .core.export import VectorDocument, to_vector_document
from .core.catalog import RuleCatalog

__all__ = [
    "Grid",
    "RuleTable",
    "compile_rule",
    "step_row",
    "Automaton",
    "generate",
    "iter_rows",
    "VectorDocument",
    "to_vector_document",
    "RuleCatalog",
]
