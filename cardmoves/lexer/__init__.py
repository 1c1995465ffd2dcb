"""
cardmoves Lexer Package

Tokenizer for the move language.

Key Features:
- Line-oriented tokens (newlines are significant)
- Reserved keywords: def, doc, temp, repeat, end, ignore
- Whole-line documentation text after 'doc'
- '--' line comments
- Source locations on every token

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer, tokenize_string
from .errors import LexerError, Diagnostic, ErrorRecovery

__all__ = [
    "Lexer",
    "tokenize_string",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "LexerError",
    "Diagnostic",
    "ErrorRecovery",
]
