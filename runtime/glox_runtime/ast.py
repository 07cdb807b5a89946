"""
GLOX AST Nodes

Expressions and statements as plain dataclasses. Every expression gets a
unique integer id at construction; the resolver keys its distance table by
that id, so two textually identical references never share an entry.
"""

import itertools
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .tokens import Token


_node_ids = itertools.count(1)


def _next_id() -> int:
    return next(_node_ids)


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class Expr:
    """Base expression node"""
    id: int = field(default_factory=_next_id, init=False, compare=False)


@dataclass
class Literal(Expr):
    """Literal value: None, bool, float or str"""
    value: Any


@dataclass
class Grouping(Expr):
    """Parenthesized expression"""
    expression: Expr


@dataclass
class Unary(Expr):
    """Unary operation ('!' or '-')"""
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    """Arithmetic, comparison or equality operation"""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    """Short-circuit 'und' / 'oder'"""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    """Variable reference"""
    name: Token


@dataclass
class Assign(Expr):
    """Assignment to a variable"""
    name: Token
    value: Expr


@dataclass
class Call(Expr):
    """Call; paren is kept for error locations"""
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass
class Get(Expr):
    """Property read"""
    object: Expr
    name: Token


@dataclass
class Set(Expr):
    """Property write"""
    object: Expr
    name: Token
    value: Expr


@dataclass
class This(Expr):
    keyword: Token


@dataclass
class Super(Expr):
    keyword: Token
    method: Token


# ============================================================================
# Statements
# ============================================================================

@dataclass
class Stmt:
    """Base statement node"""
    pass


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    """Variable declaration"""
    name: Token
    initializer: Optional[Expr] = None


@dataclass
class Block(Stmt):
    """Block of statements with its own scope"""
    statements: List[Stmt]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Function(Stmt):
    """Function or method declaration"""
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass
class Class(Stmt):
    """Class declaration with optional superclass"""
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]


__all__ = [
    'Expr',
    'Literal',
    'Grouping',
    'Unary',
    'Binary',
    'Logical',
    'Variable',
    'Assign',
    'Call',
    'Get',
    'Set',
    'This',
    'Super',
    'Stmt',
    'Expression',
    'Print',
    'Var',
    'Block',
    'If',
    'While',
    'Function',
    'Return',
    'Class',
]
