"""
Parse-and-run pipeline.

Glues the parser, the library and the evaluator together the way every
front end uses them: parse source against a library, register the new
definitions, then run the top-level moves.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .cards.image import Image
from .config import MovesConfiguration, DEFAULT_CONFIGURATION
from .evaluator.errors import EvalResult
from .evaluator.evaluator import evaluate
from .library.move_library import MoveLibrary
from .parser.ast_nodes import MoveDefinition
from .parser.errors import LocatedProblem
from .parser.parser import parse_moves

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """
    Outcome of ``run_source``.

    When parsing fails ``problems`` is non-empty, ``evaluation`` is None
    and ``library`` is the library that was passed in.
    """
    library: MoveLibrary
    definitions: List[MoveDefinition] = field(default_factory=list)
    problems: List[LocatedProblem] = field(default_factory=list)
    evaluation: Optional[EvalResult] = None

    @property
    def ok(self) -> bool:
        return not self.problems and self.evaluation is not None and self.evaluation.ok


def run_source(library: MoveLibrary, image: Image, source: str,
               filename: str = "<moves>",
               config: Optional[MovesConfiguration] = None) -> RunResult:
    """
    Parse ``source``, insert its definitions and evaluate its moves.

    Args:
        library: Library the source is parsed against
        image: Image the top-level moves run on
        source: Move source text
        filename: Name used in diagnostics
        config: Configuration for parsing and evaluation

    Returns:
        RunResult with the parse problems or the evaluation result
    """
    config = config or DEFAULT_CONFIGURATION
    parsed = parse_moves(library, source, filename=filename, config=config)
    if parsed.has_errors():
        for problem in parsed.problems:
            logger.debug("%s:%s", filename, problem)
        return RunResult(library=library, problems=parsed.problems)

    result = evaluate(image, parsed.moves, config)
    if result.error is not None:
        logger.debug("Evaluation of %s failed: %s", filename, result.error.problem.describe())
    return RunResult(
        library=parsed.library,
        definitions=parsed.definitions,
        evaluation=result,
    )
