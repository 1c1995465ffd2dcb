"""
cardmoves

A small language for describing card moves (cuts, turnovers and the
sleights built from them) together with its parser, evaluator and a
dependency-tracked library of reusable definitions.

Architecture:
    cardmoves/
    ├── cards/           # Cards, piles, images and the pile notation
    ├── lexer/           # Tokenization
    ├── parser/          # AST, scopes and the recursive-descent parser
    ├── library/         # Move library with dependency tracking
    ├── evaluator/       # Evaluator, backtraces and built-in moves
    ├── runner.py        # Parse, register and run in one call
    └── cli.py           # Command line front end

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .config import MovesConfiguration, DEFAULT_CONFIGURATION
from .cards import Card, Pile, Image, PileFormatError
from .parser import parse_moves, ParseResult, MoveDefinition, Identifier
from .library import MoveLibrary
from .evaluator import Evaluator, evaluate, EvalResult, EvalError
from .runner import run_source, RunResult

__all__ = [
    # Model
    "Card",
    "Pile",
    "Image",
    "PileFormatError",

    # Language
    "parse_moves",
    "ParseResult",
    "MoveDefinition",
    "Identifier",
    "MoveLibrary",
    "Evaluator",
    "evaluate",
    "EvalResult",
    "EvalError",
    "run_source",
    "RunResult",

    # Configuration
    "MovesConfiguration",
    "DEFAULT_CONFIGURATION",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
