"""
Move language parser

Recursive descent over the token list from the lexer. Produces the new
top-level definitions and the top-level move sequence of one source
text, resolving every name at parse time:

- argument and temporary references become (index, levels_up) pairs
- invocations are resolved to one overload by the kinds of the actuals
- bare names outside any definition are concrete pile names

Alternatives are tried with ``_one_of``, which rewinds the token position
after each failed attempt. When all attempts fail, the ones that got
furthest are reported.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, TypeVar

from ..config import MovesConfiguration, DEFAULT_CONFIGURATION
from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    ArgKind, ArgSpec, ArgumentRef, Do, Expr, Identifier, Literal, Location,
    Move, MoveDefinition, Repeat, TemporaryPileRef, UserDefined
)
from .errors import (
    Expectation, InvalidCharacter, LocatedProblem, ParseError,
    create_duplicate_definition_error, create_expected_error,
    create_invalid_invocation_error, create_no_such_argument_error,
    create_unknown_move_error, dedupe_problems
)
from .scope import Scope

if TYPE_CHECKING:
    from ..library.move_library import MoveLibrary

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Environment:
    """
    Parsing context threaded through every rule.

    ``eof_terminates`` is true only at the outermost level, where the end
    of the input may stand in for the final newline.
    """
    scope: Scope
    eof_terminates: bool = True

    @property
    def depth(self) -> int:
        return self.scope.depth

    def enter_definition(self, scope: Scope) -> "Environment":
        return Environment(scope, eof_terminates=False)

    def enter_block(self) -> "Environment":
        return Environment(self.scope, eof_terminates=False)


@dataclass
class ParseResult:
    """Results of parsing one source text."""
    definitions: List[MoveDefinition] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)
    library: Optional["MoveLibrary"] = None
    problems: List[LocatedProblem] = field(default_factory=list)

    def has_errors(self) -> bool:
        """Check if parsing found any problems."""
        return len(self.problems) > 0


class Parser:
    """
    Move language parser.

    ``library`` is the library the source is parsed against; each new
    top-level definition is inserted into ``self.library`` as soon as it
    has been parsed, so later code in the same source can call it.
    """

    def __init__(self, tokens: List[Token], library: "MoveLibrary"):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer, ending with EOF
            library: Definitions available to invocations
        """
        self.tokens = tokens
        self.library = library
        self.current = 0

    def parse(self) -> ParseResult:
        """
        Parse the whole token stream.

        Raises:
            ParseError: With the problems of the first failure
        """
        env = Environment(Scope.top_level(), eof_terminates=True)
        definitions: List[MoveDefinition] = []
        moves: List[Move] = []

        self._skip_blank_lines()
        while self._check(TokenType.DEF):
            definition = self._parse_definition(env)
            self.library = self.library.insert(definition)
            definitions.append(definition)
            self._skip_blank_lines()

        while True:
            self._skip_blank_lines()
            if self._check(TokenType.EOF):
                break
            move = self._one_of([
                lambda: self._parse_move(env),
                self._parse_end_of_input,
            ])
            if move is not None:
                moves.append(move)

        return ParseResult(definitions=definitions, moves=moves, library=self.library)

    # Definitions

    def _parse_definition(self, env: Environment) -> MoveDefinition:
        """Parse ``def name args`` through the matching ``end``."""
        self._consume_keyword(TokenType.DEF, "def")
        name_token = self._consume(TokenType.IDENTIFIER, Expectation.MOVE_NAME)

        args: List[ArgSpec] = []
        while not self._peek().is_terminator:
            if self._match(TokenType.HASH):
                arg_token = self._consume(TokenType.IDENTIFIER, Expectation.ARGUMENT_NUMBER_NAME)
                args.append(ArgSpec(arg_token.lexeme, ArgKind.INT))
            else:
                arg_token = self._consume(TokenType.IDENTIFIER, Expectation.ARGUMENT_NAME)
                args.append(ArgSpec(arg_token.lexeme, ArgKind.PILE))
        self._consume(TokenType.NEWLINE, Expectation.END_OF_LINE)

        identifier = Identifier.of(name_token.lexeme, args)
        if env.depth == 0:
            previous = self.library.get(identifier)
        else:
            previous = env.scope.lookup_definition_local(identifier)
        if previous is not None:
            raise create_duplicate_definition_error(name_token, previous, self.current)

        self._skip_blank_lines()
        doc_lines: List[str] = []
        while self._match(TokenType.DOC):
            doc_lines.append(self._consume(TokenType.DOC_TEXT, Expectation.END_OF_LINE).value)
            self._consume(TokenType.NEWLINE, Expectation.END_OF_LINE)
            self._skip_blank_lines()

        temporaries: List[str] = []
        while self._match(TokenType.TEMP):
            temporaries.append(self._consume(TokenType.IDENTIFIER, Expectation.PILE_NAME).lexeme)
            while self._check(TokenType.IDENTIFIER):
                temporaries.append(self._advance().lexeme)
            self._consume(TokenType.NEWLINE, Expectation.END_OF_LINE)
            self._skip_blank_lines()

        scope = env.scope.enter(name_token.lexeme)
        for index, arg in enumerate(args):
            scope.define_argument(arg.name, arg.kind, index)
        for index, temporary in enumerate(temporaries):
            scope.define_temporary(temporary, index)
        inner = env.enter_definition(scope)

        nested: List[MoveDefinition] = []
        while self._check(TokenType.DEF):
            definition = self._parse_definition(inner)
            scope.define_definition(definition)
            nested.append(definition)
            self._skip_blank_lines()

        moves = self._parse_block(inner)
        self._consume_terminator(env)

        return MoveDefinition.create(
            name_token.lexeme,
            args,
            UserDefined(tuple(nested), tuple(moves), tuple(temporaries)),
            doc="\n".join(doc_lines) if doc_lines else None,
            path=env.scope.path,
        )

    def _parse_block(self, env: Environment) -> List[Move]:
        """Parse moves up to and including the closing ``end``."""
        moves: List[Move] = []
        while True:
            self._skip_blank_lines()
            move = self._one_of([
                lambda: self._consume_keyword(TokenType.END, "end"),
                lambda: self._parse_move(env),
            ])
            if isinstance(move, Token):
                return moves
            if move is not None:
                moves.append(move)

    # Moves

    def _parse_move(self, env: Environment) -> Optional[Move]:
        """Parse one move; an ``ignore``d move is checked, then dropped."""
        ignored = self._match(TokenType.IGNORE)
        move = self._one_of([
            lambda: self._parse_repeat(env),
            lambda: self._parse_invocation(env),
        ])
        return None if ignored else move

    def _parse_repeat(self, env: Environment) -> Repeat:
        start_token = self._consume_keyword(TokenType.REPEAT, "repeat")
        count = self._parse_count(env)
        self._consume(TokenType.NEWLINE, Expectation.END_OF_LINE)
        body = self._parse_block(env.enter_block())
        self._consume_terminator(env)
        return Repeat(self._location(start_token), count, tuple(body))

    def _parse_count(self, env: Environment) -> Expr:
        """A repeat count: integer literal or integer argument."""
        token = self._peek()
        if token.type == TokenType.INTEGER:
            self._advance()
            return Literal(token.value)
        if token.type == TokenType.IDENTIFIER:
            self._advance()
            entry = env.scope.lookup_symbol(token.lexeme)
            if entry is None or entry.kind != ArgKind.INT:
                raise create_no_such_argument_error(token, ArgKind.INT, self.current)
            return ArgumentRef(token.lexeme, ArgKind.INT, entry.index, env.depth - entry.depth)
        raise create_expected_error(Expectation.INTEGER, token, self.current)

    def _parse_invocation(self, env: Environment) -> Do:
        name_token = self._consume(TokenType.IDENTIFIER, Expectation.MOVE_NAME)
        candidates = self._candidates(env, name_token.lexeme)
        if not candidates:
            raise create_unknown_move_error(name_token, self.current, self._known_move_names(env))

        actuals: List[Expr] = []
        while not self._peek().is_terminator:
            actuals.append(self._parse_expression(env))

        kinds = tuple(actual.kind for actual in actuals)
        matches = [candidate for candidate in candidates if candidate.kinds == kinds]
        if not matches:
            raise create_invalid_invocation_error(name_token, actuals, candidates, self.current)

        self._consume_terminator(env)
        return Do(self._location(name_token), matches[0], tuple(actuals))

    def _candidates(self, env: Environment, name: str) -> List[MoveDefinition]:
        """Overloads visible under ``name``: nested ones first, then the library."""
        seen = set()
        candidates = []
        for definition in env.scope.lookup_definitions(name) + self.library.get_by_name(name):
            if definition.identifier not in seen:
                seen.add(definition.identifier)
                candidates.append(definition)
        return candidates

    def _known_move_names(self, env: Environment) -> List[str]:
        names = list(self.library.names())
        scope = env.scope
        while scope is not None:
            names.extend(d.name for d in scope.definitions)
            scope = scope.parent
        return names

    # Expressions

    def _parse_expression(self, env: Environment) -> Expr:
        return self._one_of([
            self._parse_integer_literal,
            lambda: self._parse_scoped_name(env),
            lambda: self._parse_pile_name_literal(env),
        ])

    def _parse_integer_literal(self) -> Literal:
        token = self._consume(TokenType.INTEGER, Expectation.INTEGER)
        return Literal(token.value)

    def _parse_scoped_name(self, env: Environment) -> Expr:
        token = self._consume(TokenType.IDENTIFIER, Expectation.ARGUMENT_NAME)
        entry = env.scope.lookup_symbol(token.lexeme)
        if entry is None:
            raise create_no_such_argument_error(token, ArgKind.PILE, self.current)
        levels_up = env.depth - entry.depth
        if entry.is_temporary:
            return TemporaryPileRef(token.lexeme, entry.index, levels_up)
        return ArgumentRef(token.lexeme, entry.kind, entry.index, levels_up)

    def _parse_pile_name_literal(self, env: Environment) -> Literal:
        """Concrete pile names are only allowed outside definitions."""
        if env.depth > 0:
            raise create_expected_error(Expectation.PILE_NAME, self._peek(), self.current)
        token = self._consume(TokenType.IDENTIFIER, Expectation.PILE_NAME)
        return Literal(token.lexeme)

    # Terminators

    def _parse_end_of_input(self) -> None:
        if not self._check(TokenType.EOF):
            raise create_expected_error(Expectation.END_OF_INPUT, self._peek(), self.current)
        return None

    def _consume_terminator(self, env: Environment):
        """Consume the newline ending a statement (or EOF at the outermost level)."""
        if self._match(TokenType.NEWLINE):
            return
        if env.eof_terminates and self._check(TokenType.EOF):
            return
        raise create_expected_error(Expectation.END_OF_LINE, self._peek(), self.current)

    def _skip_blank_lines(self):
        while self._match(TokenType.NEWLINE):
            pass

    # Utility methods

    def _one_of(self, alternatives: List[Callable[[], T]]) -> T:
        """Return the first alternative that parses, rewinding after each failure."""
        start = self.current
        errors: List[ParseError] = []
        for alternative in alternatives:
            try:
                return alternative()
            except ParseError as e:
                errors.append(e)
                self.current = start
        raise ParseError.merge(errors)

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self.current >= len(self.tokens) or self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        # Past the end behaves like EOF
        last = self.tokens[-1].location if self.tokens else SourceLocation("<moves>", 1, 1, 0)
        return Token(TokenType.EOF, "", None, last)

    def _previous(self) -> Token:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0] if self.tokens else self._peek()

    def _consume(self, token_type: TokenType, expectation: Expectation) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_expected_error(expectation, self._peek(), self.current)

    def _consume_keyword(self, token_type: TokenType, keyword: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise create_expected_error(Expectation.KEYWORD, self._peek(), self.current, keyword=keyword)

    @staticmethod
    def _location(token: Token) -> Location:
        return Location(token.location.line, token.location.column)


def parse_moves(
    library: "MoveLibrary",
    source: str,
    filename: str = "<moves>",
    config: Optional[MovesConfiguration] = None
) -> ParseResult:
    """
    Parse move source text against a library.

    Never raises for bad input: problems are returned in the result. On
    success ``result.library`` is ``library`` with the new top-level
    definitions inserted.

    Args:
        library: Definitions available to the source
        source: Move source text
        filename: Name used in diagnostics
        config: Parsing configuration

    Returns:
        ParseResult with definitions, moves, library and problems
    """
    config = config or DEFAULT_CONFIGURATION
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    if lexer.errors:
        problems = [
            LocatedProblem(e.location.line, e.location.column, InvalidCharacter(e.character))
            for e in lexer.errors
        ]
        logger.debug("Lexing %s failed with %d problem(s)", filename, len(problems))
        return ParseResult(library=library, problems=dedupe_problems(problems))

    parser = Parser(tokens, library)
    try:
        result = parser.parse()
    except ParseError as e:
        logger.debug("Parsing %s failed: %s", filename, e.problems)
        return ParseResult(library=library, problems=dedupe_problems(e.problems))

    if config.debug_mode:
        logger.debug(
            "Parsed %s: %d definition(s), %d move(s)",
            filename, len(result.definitions), len(result.moves)
        )
    return result


def parse_file(library: "MoveLibrary", filepath: str,
               config: Optional[MovesConfiguration] = None) -> ParseResult:
    """
    Convenience function to parse a source file.

    Raises:
        IOError: If the file cannot be read
    """
    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()
    return parse_moves(library, source, filename=filepath, config=config)
