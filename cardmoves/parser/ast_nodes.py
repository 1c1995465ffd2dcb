"""
Abstract syntax tree for the move language.

Two statement forms (repeat and invocation) and three expression forms
(argument reference, temporary pile reference, literal). Definitions are
plain values: a call site holds a snapshot of the definition it resolved
to at parse time, and the library is the owner of record for top-level
definitions. Nothing in the tree points back up, so there are no cycles.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple, Union


class ArgKind(Enum):
    """The two kinds of value a move argument can hold."""
    INT = "int"
    PILE = "pile"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class Location:
    """1-based row and column of the first token of a move."""
    row: int
    column: int

    def __str__(self) -> str:
        return f"{self.row}:{self.column}"


@dataclass(frozen=True)
class ArgSpec:
    """A declared argument: name and kind."""
    name: str
    kind: ArgKind

    def __str__(self) -> str:
        return f"#{self.name}" if self.kind == ArgKind.INT else self.name


@dataclass(frozen=True)
class Identifier:
    """
    Library key of a definition: its name plus the ordered argument kinds.

    Overloads share a name but never an identifier.
    """
    name: str
    kinds: Tuple[ArgKind, ...] = ()

    @classmethod
    def of(cls, name: str, args) -> "Identifier":
        return cls(name, tuple(arg.kind for arg in args))

    def __str__(self) -> str:
        return f"{self.name}({' '.join(kind.label for kind in self.kinds)})"

    def __lt__(self, other: "Identifier") -> bool:
        return (self.name, [k.value for k in self.kinds]) < (other.name, [k.value for k in other.kinds])


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class ArgumentRef:
    """Reference to an argument of an enclosing definition."""
    name: str
    kind: ArgKind
    index: int
    levels_up: int

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TemporaryPileRef:
    """Reference to a temporary pile of an enclosing definition."""
    name: str
    index: int
    levels_up: int

    @property
    def kind(self) -> ArgKind:
        return ArgKind.PILE

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Literal:
    """An integer or a concrete pile name."""
    value: Union[int, str]

    @property
    def kind(self) -> ArgKind:
        return ArgKind.INT if isinstance(self.value, int) else ArgKind.PILE

    def __str__(self) -> str:
        return str(self.value)


Expr = Union[ArgumentRef, TemporaryPileRef, Literal]

# Runtime values: integers and pile names
Value = Union[int, str]


def kind_of_value(value: Value) -> ArgKind:
    return ArgKind.INT if isinstance(value, int) and not isinstance(value, bool) else ArgKind.PILE


# ============================================================================
# Moves
# ============================================================================

@dataclass(frozen=True)
class Repeat:
    """Run ``body`` ``count`` times."""
    location: Location
    count: Expr
    body: Tuple["Move", ...] = ()


@dataclass(frozen=True)
class Do:
    """Invoke a definition with actual argument expressions."""
    location: Location
    definition: "MoveDefinition"
    actuals: Tuple[Expr, ...] = ()


Move = Union[Repeat, Do]


def iter_invocations(moves) -> Iterator[Do]:
    """Yield every invocation in ``moves``, descending into repeat bodies."""
    for move in moves:
        if isinstance(move, Do):
            yield move
        elif isinstance(move, Repeat):
            yield from iter_invocations(move.body)


# ============================================================================
# Definitions
# ============================================================================

@dataclass(frozen=True)
class Primitive:
    """A built-in move implemented in Python."""
    implementation: Callable


@dataclass(frozen=True)
class UserDefined:
    """A move composed from nested definitions and moves."""
    nested_definitions: Tuple["MoveDefinition", ...] = ()
    moves: Tuple[Move, ...] = ()
    temporary_piles: Tuple[str, ...] = ()


Body = Union[Primitive, UserDefined]


@dataclass(frozen=True)
class MoveDefinition:
    """
    A named, kind-typed move.

    ``path`` lists the enclosing definition names at the point of
    declaration; it is empty for library-level definitions.
    """
    name: str
    args: Tuple[ArgSpec, ...]
    identifier: Identifier
    body: Body
    doc: Optional[str] = None
    path: Tuple[str, ...] = field(default=())

    @classmethod
    def create(cls, name: str, args, body: Body, doc: Optional[str] = None, path=()) -> "MoveDefinition":
        """Build a definition, deriving its identifier from name and argument kinds."""
        args = tuple(args)
        return cls(
            name=name,
            args=args,
            identifier=Identifier.of(name, args),
            body=body,
            doc=doc,
            path=tuple(path),
        )

    @property
    def kinds(self) -> Tuple[ArgKind, ...]:
        return self.identifier.kinds

    @property
    def is_primitive(self) -> bool:
        return isinstance(self.body, Primitive)

    @property
    def is_global(self) -> bool:
        return not self.path

    @property
    def signature(self) -> str:
        """Human-readable signature, e.g. ``cut #n from to``."""
        return " ".join([self.name] + [str(arg) for arg in self.args])

    def __str__(self) -> str:
        return self.signature
