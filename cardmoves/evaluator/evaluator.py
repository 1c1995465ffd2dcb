"""
Tree-walking evaluator for parsed moves.

Moves run in order against an image; the first failure stops the
sequence and is returned together with the image reached so far.
References were resolved to (index, levels_up) pairs by the parser, so
the evaluator only indexes into its scope stack.

Author: xwest
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..cards.image import Image
from ..config import MovesConfiguration, DEFAULT_CONFIGURATION
from ..parser.ast_nodes import (
    ArgumentRef, Do, Expr, Literal, Move, MoveDefinition, Primitive, Repeat,
    TemporaryPileRef, UserDefined, Value, kind_of_value
)
from .errors import (
    Bug, EvalError, EvalResult, Frame, InvokeStep, RepeatStep, TemporaryPileNotEmpty
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    """Runtime frame of one user-defined call."""
    actual_values: Tuple[Value, ...]
    temporary_pile_names: Tuple[str, ...]


Scopes = Tuple[Scope, ...]


class Evaluator:
    """
    Runs moves against images.

    One evaluator owns the temporary pile counter, so temporary names are
    unique across every call it makes, recursive ones included. Use a new
    evaluator per run to get reproducible names.
    """

    def __init__(self, config: Optional[MovesConfiguration] = None):
        self.config = config or DEFAULT_CONFIGURATION
        self.temporary_counter = 0

    def run(self, image: Image, moves: Sequence[Move]) -> EvalResult:
        """Evaluate a top-level move sequence."""
        return self._eval_moves(image, moves, ())

    # Moves

    def _eval_moves(self, image: Image, moves: Sequence[Move], scopes: Scopes) -> EvalResult:
        for move in moves:
            result = self._eval_move(image, move, scopes)
            if result.error is not None:
                return result
            image = result.image
        return EvalResult(image)

    def _eval_move(self, image: Image, move: Move, scopes: Scopes) -> EvalResult:
        if isinstance(move, Repeat):
            return self._eval_repeat(image, move, scopes)
        if isinstance(move, Do):
            return self._eval_do(image, move, scopes)
        return self._bug(image, f"unknown move {move!r}")

    def _eval_repeat(self, image: Image, move: Repeat, scopes: Scopes) -> EvalResult:
        count = self._resolve(move.count, scopes)
        if isinstance(count, Bug):
            return self._bug(image, count.message)
        if not isinstance(count, int) or isinstance(count, bool):
            return self._bug(image, f"repeat count {count!r} is not an integer")

        for iteration in range(count):
            result = self._eval_moves(image, move.body, scopes)
            if result.error is not None:
                frame = Frame(move.location, RepeatStep(iteration + 1, count))
                return EvalResult(result.image, result.error.with_frame(frame))
            image = result.image
        return EvalResult(image)

    def _eval_do(self, image: Image, move: Do, scopes: Scopes) -> EvalResult:
        definition = move.definition
        values: List[Value] = []
        for actual in move.actuals:
            value = self._resolve(actual, scopes)
            if isinstance(value, Bug):
                return self._bug(image, value.message)
            values.append(value)

        kinds = tuple(kind_of_value(value) for value in values)
        if kinds != definition.kinds:
            return self._bug(
                image,
                f"'{definition.signature}' called with ({' '.join(k.label for k in kinds)})"
            )

        if self.config.debug_mode:
            logger.debug("%s: %s %s", move.location, definition.name,
                         " ".join(str(value) for value in values))

        frame = Frame(move.location, InvokeStep(definition, tuple(values)))
        body = definition.body
        if isinstance(body, Primitive):
            new_image, problem = body.implementation(image, values)
            if problem is not None:
                return EvalResult(new_image, EvalError(problem, (frame,)))
            return EvalResult(new_image)

        if isinstance(body, UserDefined):
            return self._call_user_defined(image, definition, body, tuple(values), scopes, frame)

        return self._bug(image, f"'{definition.signature}' has no body")

    def _call_user_defined(self, image: Image, definition: MoveDefinition, body: UserDefined,
                           values: Tuple[Value, ...], scopes: Scopes, frame: Frame) -> EvalResult:
        depth = len(definition.path)
        if depth > len(scopes):
            return self._bug(image, f"'{definition.signature}' called outside its enclosing moves")

        generated = tuple(self._temporary_name(name) for name in body.temporary_piles)
        for name in generated:
            image = image.put(name, ())

        callee_scopes = scopes[:depth] + (Scope(values, generated),)
        result = self._eval_moves(image, body.moves, callee_scopes)
        if result.error is not None:
            return EvalResult(result.image, result.error.with_frame(frame))

        image = result.image
        leftovers = tuple(
            declared for declared, name in zip(body.temporary_piles, generated)
            if image.get(name)
        )
        if leftovers:
            error = EvalError(TemporaryPileNotEmpty(definition, leftovers), (frame,))
            return EvalResult(image, error)

        for name in generated:
            _, image = image.take(name)
        return EvalResult(image)

    # Expressions

    def _resolve(self, expr: Expr, scopes: Scopes) -> Union[Value, Bug]:
        if isinstance(expr, Literal):
            return expr.value

        position = len(scopes) - 1 - expr.levels_up
        if not 0 <= position < len(scopes):
            return Bug(f"'{expr.name}' refers {expr.levels_up} level(s) up from depth {len(scopes)}")
        scope = scopes[position]

        if isinstance(expr, TemporaryPileRef):
            names = scope.temporary_pile_names
        elif isinstance(expr, ArgumentRef):
            names = scope.actual_values
        else:
            return Bug(f"unknown expression {expr!r}")

        if not 0 <= expr.index < len(names):
            return Bug(f"'{expr.name}' has index {expr.index}, scope holds {len(names)}")
        return names[expr.index]

    def _temporary_name(self, declared: str) -> str:
        name = f"{self.config.temporary_pile_prefix} {declared} {self.temporary_counter}"
        self.temporary_counter += 1
        return name

    def _bug(self, image: Image, message: str) -> EvalResult:
        logger.error("Evaluator bug: %s", message)
        return EvalResult(image, EvalError(Bug(message)))


def evaluate(image: Image, moves: Sequence[Move],
             config: Optional[MovesConfiguration] = None) -> EvalResult:
    """
    Evaluate moves against an image with a fresh evaluator.

    Returns:
        EvalResult with the image reached and the error, if any
    """
    return Evaluator(config).run(image, moves)
