"""
cardmoves Evaluator Package

Runs parsed moves against images.

Key Features:
- Sequential evaluation that stops at the first failure
- Generated, run-unique names for temporary piles
- Structured errors with repeat/invoke backtraces
- The built-in cut and turnover moves

Author: xwest
"""

from .errors import (
    NotEnoughCards, NoSuchPile, TemporaryPileNotEmpty, Bug, EvalProblem,
    RepeatStep, InvokeStep, Frame, EvalError, EvalResult,
    EVALUATOR_ERROR_CODES, error_code,
)
from .evaluator import Evaluator, Scope, evaluate
from .primitives import CUT, TURNOVER, PRIMITIVES, cut, turnover

__all__ = [
    # Problems and backtraces
    "NotEnoughCards", "NoSuchPile", "TemporaryPileNotEmpty", "Bug", "EvalProblem",
    "RepeatStep", "InvokeStep", "Frame", "EvalError", "EvalResult",
    "EVALUATOR_ERROR_CODES", "error_code",

    # Evaluation
    "Evaluator", "Scope", "evaluate",

    # Built-in moves
    "CUT", "TURNOVER", "PRIMITIVES", "cut", "turnover",
]
