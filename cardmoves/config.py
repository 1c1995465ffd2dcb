"""
Configuration for the cardmoves core.

A single dataclass holds the knobs shared by the notation helpers, the
parser and the evaluator. Nothing reads the environment; callers build a
configuration and pass it explicitly.

Author: xwest
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MovesConfiguration:
    """Configuration parameters for parsing and evaluating moves"""

    # Evaluation
    temporary_pile_prefix: str = "temp"   # Generated names: "<prefix> <name> <n>"

    # Pile notation
    cards_per_line: int = 13

    # Debugging
    check_library_invariants: bool = False  # Verify library after every insert/remove
    debug_mode: bool = False                # Log every evaluated move

    def __post_init__(self):
        if self.cards_per_line < 1:
            raise ValueError("cards_per_line must be at least 1")
        if not self.temporary_pile_prefix:
            raise ValueError("temporary_pile_prefix must not be empty")


DEFAULT_CONFIGURATION = MovesConfiguration()
