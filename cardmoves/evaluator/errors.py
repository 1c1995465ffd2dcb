"""
Evaluation problems and backtraces.

Evaluation never raises for bad moves or images. A failing move produces
an ``EvalError`` value; each enclosing repeat or invocation adds one
``Frame`` to its backtrace on the way out, so the finished backtrace reads
from the failing primitive up to the top-level move.

Author: xwest
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from ..cards.image import Image
from ..parser.ast_nodes import Location, MoveDefinition, Value


# ============================================================================
# Problems
# ============================================================================

@dataclass(frozen=True)
class NotEnoughCards:
    """A cut asked for more cards than the pile holds."""
    expected: int
    got: int
    pile: str

    def describe(self) -> str:
        return f"Pile '{self.pile}' has {self.got} card(s), {self.expected} needed"


@dataclass(frozen=True)
class NoSuchPile:
    name: str

    def describe(self) -> str:
        return f"No pile named '{self.name}'"


@dataclass(frozen=True)
class TemporaryPileNotEmpty:
    """A call returned with cards left in some of its temporary piles."""
    definition: MoveDefinition
    pile_names: Tuple[str, ...]

    def describe(self) -> str:
        names = ", ".join(self.pile_names)
        return f"'{self.definition.signature}' left cards in temporary pile(s): {names}"


@dataclass(frozen=True)
class Bug:
    """A state the parser should have ruled out."""
    message: str

    def describe(self) -> str:
        return f"Internal error: {self.message}"


EvalProblem = Union[NotEnoughCards, NoSuchPile, TemporaryPileNotEmpty, Bug]


# Evaluator error codes for categorization
EVALUATOR_ERROR_CODES = {
    "E001": "Not enough cards",
    "E002": "No such pile",
    "E003": "Temporary pile not empty",
    "E004": "Internal error",
}

_CODES = {
    NotEnoughCards: "E001",
    NoSuchPile: "E002",
    TemporaryPileNotEmpty: "E003",
    Bug: "E004",
}


def error_code(problem: EvalProblem) -> str:
    return _CODES[type(problem)]


# ============================================================================
# Backtraces
# ============================================================================

@dataclass(frozen=True)
class RepeatStep:
    """Failure happened in iteration ``n`` (1-based) of ``of``."""
    n: int
    of: int

    def describe(self) -> str:
        return f"repeat iteration {self.n} of {self.of}"


@dataclass(frozen=True)
class InvokeStep:
    """Failure happened inside a call of ``definition``."""
    definition: MoveDefinition
    actual_values: Tuple[Value, ...]

    def describe(self) -> str:
        actuals = " ".join(str(value) for value in self.actual_values)
        return f"in {self.definition.name} {actuals}".rstrip()


Step = Union[RepeatStep, InvokeStep]


@dataclass(frozen=True)
class Frame:
    location: Location
    step: Step

    def __str__(self) -> str:
        return f"  at {self.location}: {self.step.describe()}"


@dataclass(frozen=True)
class EvalError:
    """A problem plus the frames it unwound through, innermost first."""
    problem: EvalProblem
    backtrace: Tuple[Frame, ...] = ()

    @property
    def code(self) -> str:
        return error_code(self.problem)

    def with_frame(self, frame: Frame) -> "EvalError":
        return replace(self, backtrace=self.backtrace + (frame,))

    def __str__(self) -> str:
        lines = [f"ERROR[{self.code}]: {self.problem.describe()}"]
        lines.extend(str(frame) for frame in self.backtrace)
        return "\n".join(lines)


@dataclass(frozen=True)
class EvalResult:
    """The image reached, and the error that stopped evaluation if any."""
    image: Image
    error: Optional[EvalError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
