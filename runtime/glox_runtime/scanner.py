"""
GLOX Scanner

Turns UTF-8 source text into a flat list of tokens. Lexical errors are
reported and scanning continues, so one run surfaces every bad character.
"""

from typing import Any, List, Optional

from .errors import ErrorReporter
from .tokens import KEYWORDS, Token, TokenType


# Letters outside ASCII that may appear in identifiers (and keywords)
GERMAN_LETTERS = set('äöüÄÖÜß')

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# char -> (type when followed by '=', type otherwise)
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenType.BANG_EQUAL, TokenType.BANG),
    '=': (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': (TokenType.LESS_EQUAL, TokenType.LESS),
    '>': (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_' or ch in GERMAN_LETTERS


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha_numeric(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


class GloxScanner:
    """Tokenize GLOX source code"""

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter or ErrorReporter()
        self.tokens: List[Token] = []
        self.start = 0
        self.pos = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        """Tokenize entire source"""
        while not self._is_at_end():
            self.start = self.pos
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def _scan_token(self):
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[ch])
        elif ch in EQUAL_SUFFIX_TOKENS:
            with_equal, plain = EQUAL_SUFFIX_TOKENS[ch]
            self._add_token(with_equal if self._match('=') else plain)
        elif ch == '/':
            if self._match('/'):
                # Comment runs to end of line
                while self._peek() != '\n' and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif ch in ' \r\t':
            pass
        elif ch == '\n':
            self.line += 1
        elif ch == '"':
            self._read_string()
        elif is_digit(ch):
            self._read_number()
        elif is_alpha(ch):
            self._read_identifier()
        else:
            self.reporter.error(self.line, "Unerwartetes Zeichen.")

    def _read_string(self):
        """Read string literal; strings may span lines and have no escapes"""
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self._advance()

        if self._is_at_end():
            self.reporter.error(self.line, "Unbeendete Zeichenkette.")
            return

        self._advance()  # closing quote
        self._add_token(TokenType.STRING, self.source[self.start + 1:self.pos - 1])

    def _read_number(self):
        """Read numeric literal; every number is a float"""
        while is_digit(self._peek()):
            self._advance()

        if self._peek() == '.' and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _read_identifier(self):
        """Read identifier or keyword"""
        while is_alpha_numeric(self._peek()):
            self._advance()

        text = self.source[self.start:self.pos]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    # Scanner utilities
    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return '\0'
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return '\0'
        return self.source[self.pos + 1]

    def _add_token(self, type: str, literal: Any = None):
        text = self.source[self.start:self.pos]
        self.tokens.append(Token(type, text, literal, self.line))


__all__ = ['GloxScanner']
