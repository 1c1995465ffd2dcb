"""
Move language lexer - turns source text into tokens.

The language is small: keywords, names, integers, the '#' marker and
newlines. The only context-sensitive bit is 'doc', whose whole remaining
line becomes a single DOC_TEXT token so documentation can contain any
characters.
"""

import re
from typing import List, Optional

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, COMMENT_START
from .errors import LexerError, create_invalid_character_error


class Lexer:
    """
    Move language lexical analyzer.

    Converts source text into a list of tokens terminated by EOF. Invalid
    characters are recorded in ``errors`` and skipped so the rest of the
    input still gets tokenized.
    """

    def __init__(self, source: str, filename: str = "<moves>"):
        """
        Initialize the lexer with source text.

        Args:
            source: Source text
            filename: Name used in source locations
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.identifier_pattern = re.compile(r'[A-Za-z_](?:[A-Za-z0-9_]|-(?!-))*')
        self.integer_pattern = re.compile(r'[0-9]+')
        self.whitespace_pattern = re.compile(r'[ \t\r]+')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens including the final EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens.clear()
        self.errors.clear()

        while self.pos < len(self.source):
            try:
                self._skip_whitespace_and_comments()

                if self.pos >= len(self.source):
                    break

                token = self._next_token()
                if token:
                    self.tokens.append(token)

            except LexerError as e:
                self.errors.append(e)
                # Skip the problematic character and carry on
                self._advance()

        self.tokens.append(Token(TokenType.EOF, "", None, self._location()))
        return self.tokens

    def _next_token(self) -> Optional[Token]:
        """Get the next token from the source."""
        location = self._location()
        current_char = self.source[self.pos]

        if current_char == '\n':
            self._advance()
            return Token(TokenType.NEWLINE, '\n', None, location)

        if current_char == '#':
            self._advance()
            return Token(TokenType.HASH, '#', None, location)

        match = self.integer_pattern.match(self.source, self.pos)
        if match:
            lexeme = match.group()
            self._advance_by(len(lexeme))
            return Token(TokenType.INTEGER, lexeme, int(lexeme), location)

        match = self.identifier_pattern.match(self.source, self.pos)
        if match:
            lexeme = match.group()
            self._advance_by(len(lexeme))
            token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
            token = Token(token_type, lexeme, lexeme, location)
            if token_type == TokenType.DOC:
                # The doc keyword is emitted now, its text on the next call
                self.tokens.append(token)
                return self._tokenize_doc_text()
            return token

        raise create_invalid_character_error(current_char, location)

    def _tokenize_doc_text(self) -> Token:
        """Consume the rest of the current line as documentation text."""
        match = self.whitespace_pattern.match(self.source, self.pos)
        if match:
            self._advance_by(len(match.group()))

        location = self._location()
        end = self.source.find('\n', self.pos)
        if end == -1:
            end = len(self.source)
        lexeme = self.source[self.pos:end]
        self._advance_by(len(lexeme))
        return Token(TokenType.DOC_TEXT, lexeme, lexeme.strip(), location)

    def _skip_whitespace_and_comments(self):
        """Skip spaces, tabs, carriage returns and '--' comments."""
        while self.pos < len(self.source):
            match = self.whitespace_pattern.match(self.source, self.pos)
            if match:
                self._advance_by(len(match.group()))
                continue

            if self.source.startswith(COMMENT_START, self.pos):
                end = self.source.find('\n', self.pos)
                if end == -1:
                    end = len(self.source)
                self._advance_by(end - self.pos)
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self) -> str:
        """Consume one character, keeping line and column current."""
        char = self.source[self.pos]
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _advance_by(self, count: int):
        for _ in range(count):
            self._advance()


def tokenize_string(source: str, filename: str = "<moves>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: The first invalid character, if any
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    if lexer.errors:
        raise lexer.errors[0]
    return tokens
