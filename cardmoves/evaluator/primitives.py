"""
Built-in moves.

Every other move is composed from these two. A primitive receives the
image and the resolved argument values and returns the new image and a
problem (None on success). A failing primitive always returns the image
it was given.

Author: xwest
"""

from typing import Optional, Sequence, Tuple

from ..cards.image import Image
from ..cards.pile import Pile
from ..parser.ast_nodes import ArgKind, ArgSpec, MoveDefinition, Primitive, Value
from .errors import EvalProblem, NoSuchPile, NotEnoughCards

PrimitiveResult = Tuple[Image, Optional[EvalProblem]]


def cut(image: Image, n: int, source: str, target: str) -> PrimitiveResult:
    """
    Move the top ``n`` cards of ``source`` onto ``target``, keeping their order.

    The source is emptied first, the cut cards go onto the target and the
    rest goes back onto the source, so ``cut n a a`` brings the top ``n``
    cards to the bottom. The source keeps its position in the image.
    """
    if n == 0:
        return image, None

    pile = image.get(source)
    if pile is None:
        return image, NoSuchPile(source)
    if len(pile) < n:
        return image, NotEnoughCards(n, len(pile), source)

    top, rest = pile.split(n)
    emptied = image.set(source, Pile())
    return emptied.put(target, top).put(source, rest), None


def turnover(image: Image, name: str) -> PrimitiveResult:
    """Flip the whole pile: reverse the order and turn every card over."""
    pile = image.get(name)
    if pile is None:
        return image, NoSuchPile(name)
    return image.set(name, pile.turnover()), None


def _cut(image: Image, values: Sequence[Value]) -> PrimitiveResult:
    n, source, target = values
    return cut(image, n, source, target)


def _turnover(image: Image, values: Sequence[Value]) -> PrimitiveResult:
    (name,) = values
    return turnover(image, name)


CUT = MoveDefinition.create(
    "cut",
    [ArgSpec("n", ArgKind.INT), ArgSpec("from", ArgKind.PILE), ArgSpec("to", ArgKind.PILE)],
    Primitive(_cut),
    doc="Move the top n cards of 'from' onto 'to', keeping their order.",
)

TURNOVER = MoveDefinition.create(
    "turnover",
    [ArgSpec("pile", ArgKind.PILE)],
    Primitive(_turnover),
    doc="Turn the whole pile over.",
)

PRIMITIVES = (CUT, TURNOVER)
