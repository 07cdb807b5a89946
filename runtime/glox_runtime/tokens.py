"""
GLOX Tokens

Token type constants and the German keyword table shared by the scanner,
the parser, and every later stage that reports source locations.
"""

from dataclasses import dataclass
from typing import Any, Dict


# ============================================================================
# Token Types
# ============================================================================

class TokenType:
    """Token type constants"""
    # Single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # One or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    # Special
    EOF = "EOF"


KEYWORDS: Dict[str, str] = {
    'und': TokenType.AND,
    'klasse': TokenType.CLASS,
    'sonst': TokenType.ELSE,
    'falsch': TokenType.FALSE,
    'für': TokenType.FOR,
    'funktion': TokenType.FUN,
    'wenn': TokenType.IF,
    'nichts': TokenType.NIL,
    'oder': TokenType.OR,
    'drucke': TokenType.PRINT,
    'zurückgeben': TokenType.RETURN,
    'super': TokenType.SUPER,
    'dies': TokenType.THIS,
    'wahr': TokenType.TRUE,
    'var': TokenType.VAR,
    'während': TokenType.WHILE,
}

# Names the resolver and interpreter bind implicitly
THIS_NAME = 'dies'
SUPER_NAME = 'super'
INIT_NAME = 'init'


@dataclass(frozen=True)
class Token:
    """Token from GLOX source"""
    type: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.type} {self.lexeme} {self.literal}"


__all__ = [
    'TokenType',
    'Token',
    'KEYWORDS',
    'THIS_NAME',
    'SUPER_NAME',
    'INIT_NAME',
]
