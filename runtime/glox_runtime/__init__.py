"""
GLOX Runtime - Lox with German keywords

This package provides a complete tree-walking interpreter:

**Front end:**
- Scanner: UTF-8 source to tokens (German keywords: klasse, funktion, wenn, ...)
- Parser: tokens to statements, with error recovery

**Core:**
- Resolver: static scope pass producing the distance table
- Environment: chained scopes shared by closures
- Object model: functions, classes, instances, bound methods
- Interpreter: evaluator with completion-based 'zurückgeben'

**Driver:**
- GloxRuntime: scan, parse, resolve, interpret; file and prompt modes
- cli.main: the `glox` command

Version: 1.0.0
"""

__version__ = '1.0.0'

from .tokens import Token, TokenType, KEYWORDS
from .errors import (
    GloxError, GloxRuntimeError, GloxResolveError, ParseError,
    Diagnostic, ErrorReporter,
    E_UNDEFINED_VARIABLE, E_UNDEFINED_PROPERTY, E_TYPE_MISMATCH,
    E_NOT_CALLABLE, E_NOT_AN_INSTANCE, E_ONLY_INSTANCES_HAVE_FIELDS,
    E_ARITY_MISMATCH, E_SUPERCLASS_MUST_BE_A_CLASS, E_STACK_OVERFLOW,
)
from .scanner import GloxScanner
from .parser import GloxParser
from .environment import Environment
from .callables import GloxCallable, GloxFunction, GloxNative, GloxClass, GloxInstance
from .resolver import Resolver, resolve
from .interpreter import Interpreter, Returned, interpret, stringify
from .runtime import GloxRuntime, execute_glox


__all__ = [
    '__version__',
    # Tokens
    'Token', 'TokenType', 'KEYWORDS',
    # Errors
    'GloxError', 'GloxRuntimeError', 'GloxResolveError', 'ParseError',
    'Diagnostic', 'ErrorReporter',
    'E_UNDEFINED_VARIABLE', 'E_UNDEFINED_PROPERTY', 'E_TYPE_MISMATCH',
    'E_NOT_CALLABLE', 'E_NOT_AN_INSTANCE', 'E_ONLY_INSTANCES_HAVE_FIELDS',
    'E_ARITY_MISMATCH', 'E_SUPERCLASS_MUST_BE_A_CLASS', 'E_STACK_OVERFLOW',
    # Front end
    'GloxScanner', 'GloxParser',
    # Core
    'Environment',
    'GloxCallable', 'GloxFunction', 'GloxNative', 'GloxClass', 'GloxInstance',
    'Resolver', 'resolve',
    'Interpreter', 'Returned', 'interpret', 'stringify',
    # Driver
    'GloxRuntime', 'execute_glox',
]
