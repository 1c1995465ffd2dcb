"""
cardmoves Library Package

Dependency-tracked registry of reusable move definitions:
- Overloading by argument-kind signature
- Cascading removal of dependents
- Topological and alphabetical listings

Author: xwest
"""

from .move_library import MoveLibrary, direct_uses

__all__ = [
    "MoveLibrary",
    "direct_uses",
]
