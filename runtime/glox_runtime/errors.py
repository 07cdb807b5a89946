"""
GLOX Errors and Diagnostics

Static problems (scan, parse, resolve) are collected as Diagnostics and
reported without stopping the pass that found them. Runtime problems are
raised as GloxRuntimeError and abort the current run.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .tokens import Token, TokenType


# ============================================================================
# Error Definitions
# ============================================================================

E_UNDEFINED_VARIABLE = "E_UNDEFINED_VARIABLE"
E_UNDEFINED_PROPERTY = "E_UNDEFINED_PROPERTY"
E_TYPE_MISMATCH = "E_TYPE_MISMATCH"
E_NOT_CALLABLE = "E_NOT_CALLABLE"
E_NOT_AN_INSTANCE = "E_NOT_AN_INSTANCE"
E_ONLY_INSTANCES_HAVE_FIELDS = "E_ONLY_INSTANCES_HAVE_FIELDS"
E_ARITY_MISMATCH = "E_ARITY_MISMATCH"
E_SUPERCLASS_MUST_BE_A_CLASS = "E_SUPERCLASS_MUST_BE_A_CLASS"
E_STACK_OVERFLOW = "E_STACK_OVERFLOW"


class GloxError(Exception):
    """Base exception for GLOX errors"""
    pass


class GloxRuntimeError(GloxError):
    """Error raised while evaluating a program; aborts the run"""

    def __init__(self, code: str, token: Token, message: str):
        self.code = code
        self.token = token
        self.message = message
        super().__init__(f"[{code}] {message}")


@dataclass(frozen=True)
class Diagnostic:
    """A static (scan, parse or resolve) problem at a source location"""
    line: int
    message: str
    token: Optional[Token] = None

    @classmethod
    def at(cls, token: Token, message: str) -> "Diagnostic":
        return cls(line=token.line, message=message, token=token)

    def format(self) -> str:
        if self.token is None:
            where = ""
        elif self.token.type == TokenType.EOF:
            where = " am Ende"
        else:
            where = f" bei '{self.token.lexeme}'"
        return f"[Zeile {self.line}] Fehler{where}: {self.message}"


class GloxResolveError(GloxError):
    """Raised by resolve() when the static pass reported diagnostics"""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__("\n".join(d.format() for d in self.diagnostics))


class ParseError(GloxError):
    """Unwinds the parser to the next statement boundary"""
    pass


# ============================================================================
# Reporter
# ============================================================================

class ErrorReporter:
    """Collects diagnostics and writes them to an error stream"""

    def __init__(self, err: Optional[TextIO] = None):
        self.err = err
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False
        self.had_runtime_error = False

    def _stream(self) -> TextIO:
        # Looked up late so pytest's capsys sees the output
        return self.err if self.err is not None else sys.stderr

    def error(self, line: int, message: str):
        """Report a problem that has no token, such as a lexical error"""
        self.report(Diagnostic(line=line, message=message))

    def token_error(self, token: Token, message: str):
        self.report(Diagnostic.at(token, message))

    def report(self, diagnostic: Diagnostic):
        self.diagnostics.append(diagnostic)
        self.had_error = True
        print(diagnostic.format(), file=self._stream())

    def runtime_error(self, error: GloxRuntimeError):
        print(f"{error.message}\n[Zeile {error.token.line}]", file=self._stream())
        self.had_runtime_error = True

    def reset(self):
        """Forget static errors (the REPL does this after every line)"""
        self.diagnostics.clear()
        self.had_error = False


__all__ = [
    'E_UNDEFINED_VARIABLE',
    'E_UNDEFINED_PROPERTY',
    'E_TYPE_MISMATCH',
    'E_NOT_CALLABLE',
    'E_NOT_AN_INSTANCE',
    'E_ONLY_INSTANCES_HAVE_FIELDS',
    'E_ARITY_MISMATCH',
    'E_SUPERCLASS_MUST_BE_A_CLASS',
    'E_STACK_OVERFLOW',
    'GloxError',
    'GloxRuntimeError',
    'GloxResolveError',
    'ParseError',
    'Diagnostic',
    'ErrorReporter',
]
