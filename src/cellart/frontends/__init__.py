"""Frontend interfaces for cellular automaton images."""

from .cli import CLICellArt

__all__ = ["CLICellArt"]
