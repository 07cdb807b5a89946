"""
GLOX Resolver

Static pass run between parsing and interpretation. For every variable-like
expression (Variable, Assign, This, Super) it records how many scopes out
its binding lives; references found in no local scope are left out and
treated as globals at runtime.

It also reports scope errors that are visible without running anything:
    - reading a local variable in its own initializer
    - declaring the same name twice in one local scope
    - 'zurückgeben' at top level, or with a value inside 'init'
    - 'dies' / 'super' outside a class, 'super' without a superclass
    - a class inheriting from itself

Errors are collected as Diagnostics and the walk carries on.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from .ast import (
    Assign, Binary, Block, Call, Class, Expr, Expression, Function, Get,
    Grouping, If, Literal, Logical, Print, Return, Set, Stmt, Super, This,
    Unary, Var, Variable, While,
)
from .errors import Diagnostic, ErrorReporter, GloxResolveError
from .tokens import INIT_NAME, SUPER_NAME, THIS_NAME, Token


ResolutionTable = Dict[int, int]


class FunctionType(Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassType(Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


class Resolver:
    """Compute scope distances for one program"""

    def __init__(self, reporter: Optional[ErrorReporter] = None):
        self.reporter = reporter
        self.diagnostics: List[Diagnostic] = []
        self.locals: ResolutionTable = {}
        # name -> defined? (False while the initializer is being resolved)
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: List[Stmt]) -> ResolutionTable:
        """
        Resolve a whole program.

        Args:
            statements: Parsed top-level statements

        Returns:
            Mapping of expression id to scope distance. Check
            `self.diagnostics` before interpreting.
        """
        self._resolve_statements(statements)
        return self.locals

    def _resolve_statements(self, statements: List[Stmt]):
        for stmt in statements:
            self._resolve_stmt(stmt)

    # Statements
    def _resolve_stmt(self, stmt: Stmt):
        if isinstance(stmt, Block):
            self._begin_scope()
            try:
                self._resolve_statements(stmt.statements)
            finally:
                self._end_scope()

        elif isinstance(stmt, Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)

        elif isinstance(stmt, Function):
            # Defined before the body so the function can call itself
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt, FunctionType.FUNCTION)

        elif isinstance(stmt, Class):
            self._resolve_class(stmt)

        elif isinstance(stmt, Expression):
            self._resolve_expr(stmt.expression)

        elif isinstance(stmt, Print):
            self._resolve_expr(stmt.expression)

        elif isinstance(stmt, If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)

        elif isinstance(stmt, While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)

        elif isinstance(stmt, Return):
            if self.current_function == FunctionType.NONE:
                self._error(stmt.keyword, "Kann nicht von Code auf oberster Ebene zurückgeben.")
            if stmt.value is not None:
                if self.current_function == FunctionType.INITIALIZER:
                    self._error(stmt.keyword, "Kann keinen Wert von einem Initialisierer zurückgeben.")
                self._resolve_expr(stmt.value)

        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def _resolve_function(self, function: Function, type: FunctionType):
        enclosing_function = self.current_function
        self.current_function = type
        self._begin_scope()
        try:
            for param in function.params:
                self._declare(param)
                self._define(param)
            self._resolve_statements(function.body)
        finally:
            self._end_scope()
            self.current_function = enclosing_function

    def _resolve_class(self, stmt: Class):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS
        opened = 0
        try:
            self._declare(stmt.name)
            self._define(stmt.name)

            if stmt.superclass is not None:
                if stmt.superclass.name.lexeme == stmt.name.lexeme:
                    self._error(stmt.superclass.name, "Eine Klasse kann nicht von sich selbst erben.")
                self.current_class = ClassType.SUBCLASS
                self._resolve_expr(stmt.superclass)

                self._begin_scope()
                opened += 1
                self.scopes[-1][SUPER_NAME] = True

            self._begin_scope()
            opened += 1
            self.scopes[-1][THIS_NAME] = True

            for method in stmt.methods:
                declaration = FunctionType.METHOD
                if method.name.lexeme == INIT_NAME:
                    declaration = FunctionType.INITIALIZER
                self._resolve_function(method, declaration)
        finally:
            for _ in range(opened):
                self._end_scope()
            self.current_class = enclosing_class

    # Expressions
    def _resolve_expr(self, expr: Expr):
        if isinstance(expr, Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self._error(expr.name, "Kann lokale Variable in ihrer eigenen Initialisierung nicht lesen.")
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, Assign):
            self._resolve_expr(expr.value)
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, This):
            if self.current_class == ClassType.NONE:
                self._error(expr.keyword, "Kann 'dies' nicht außerhalb einer Klasse verwenden.")
                return
            self._resolve_local(expr, expr.keyword)

        elif isinstance(expr, Super):
            if self.current_class == ClassType.NONE:
                self._error(expr.keyword, "Kann 'super' nicht außerhalb einer Klasse verwenden.")
            elif self.current_class != ClassType.SUBCLASS:
                self._error(expr.keyword, "Kann 'super' nicht in einer Klasse ohne Oberklasse verwenden.")
            self._resolve_local(expr, expr.keyword)

        elif isinstance(expr, (Binary, Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)

        elif isinstance(expr, Unary):
            self._resolve_expr(expr.right)

        elif isinstance(expr, Grouping):
            self._resolve_expr(expr.expression)

        elif isinstance(expr, Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)

        elif isinstance(expr, Get):
            self._resolve_expr(expr.object)

        elif isinstance(expr, Set):
            self._resolve_expr(expr.value)
            self._resolve_expr(expr.object)

        elif isinstance(expr, Literal):
            pass

        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _resolve_local(self, expr: Union[Variable, Assign, This, Super], name: Token):
        """Record the distance to the innermost scope holding name, if any"""
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.locals[expr.id] = len(self.scopes) - 1 - i
                return

    # Scope utilities
    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        self.scopes.pop()

    def _declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Bereits eine Variable mit diesem Namen in diesem Gültigkeitsbereich.")
        scope[name.lexeme] = False

    def _define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _error(self, token: Token, message: str):
        diagnostic = Diagnostic.at(token, message)
        self.diagnostics.append(diagnostic)
        if self.reporter is not None:
            self.reporter.report(diagnostic)


# ============================================================================
# Convenience Function
# ============================================================================

def resolve(program: List[Stmt]) -> ResolutionTable:
    """
    Resolve a program without a reporter.

    Raises:
        GloxResolveError: If any scope rule was violated
    """
    resolver = Resolver()
    table = resolver.resolve(program)
    if resolver.diagnostics:
        raise GloxResolveError(resolver.diagnostics)
    return table


__all__ = [
    'Resolver',
    'ResolutionTable',
    'FunctionType',
    'ClassType',
    'resolve',
]
