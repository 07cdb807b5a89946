"""
GLOX Interpreter

Tree-walking evaluator. Statements return a completion: None when they ran
to the end, or Returned(value) when a 'zurückgeben' is unwinding towards the
enclosing function call. Blocks and loops stop at the first Returned and
pass it up; GloxFunction.call turns it back into a plain value. Runtime
errors are GloxRuntimeError exceptions and abort the whole run.

Values:
    nichts          -> None
    wahr / falsch   -> bool
    numbers         -> float
    strings         -> str
    functions       -> GloxFunction / GloxNative
    classes         -> GloxClass
    instances       -> GloxInstance
"""

import math
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Assign, Binary, Block, Call, Class, Expr, Expression, Function, Get,
    Grouping, If, Literal, Logical, Print, Return, Set, Stmt, Super, This,
    Unary, Var, Variable, While,
)
from .callables import GloxCallable, GloxClass, GloxFunction, GloxInstance, GloxNative
from .environment import Environment
from .errors import (
    E_ARITY_MISMATCH, E_NOT_AN_INSTANCE, E_NOT_CALLABLE,
    E_ONLY_INSTANCES_HAVE_FIELDS, E_STACK_OVERFLOW, E_SUPERCLASS_MUST_BE_A_CLASS,
    E_TYPE_MISMATCH, E_UNDEFINED_PROPERTY, GloxRuntimeError,
)
from .tokens import INIT_NAME, SUPER_NAME, THIS_NAME, Token, TokenType


@dataclass
class Returned:
    """Completion of a statement that executed 'zurückgeben'"""
    value: Any


Completion = Optional[Returned]

# Each GLOX call costs several Python frames
RECURSION_LIMIT = 10000


# ============================================================================
# Value Helpers
# ============================================================================

def is_truthy(value: Any) -> bool:
    """Only nichts and falsch are falsy; 0 and "" are truthy"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # Python would call 1.0 == wahr equal; GLOX never equates across types
    if type(a) is not type(b):
        return False
    return a == b


def stringify(value: Any) -> str:
    if value is None:
        return "nichts"
    if isinstance(value, bool):
        return "wahr" if value else "falsch"
    if isinstance(value, float):
        # 3.0 -> "3", -0.0 -> "-0", 1e20 -> "1e+20"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def divide(left: float, right: float) -> float:
    """IEEE-754 division; Python raises on a zero divisor, GLOX does not"""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _is_number(value: Any) -> bool:
    return isinstance(value, float)


# ============================================================================
# Evaluator
# ============================================================================

class Interpreter:
    """Evaluate resolved GLOX statements"""

    def __init__(self, out: Optional[TextIO] = None):
        """
        Initialize interpreter

        Args:
            out: Stream for 'drucke' output (default: sys.stdout at print time)
        """
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        self.locals: Dict[int, int] = {}
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self._setup_builtins()

    def _setup_builtins(self):
        """Setup native functions"""
        self.globals.define('uhr', GloxNative('uhr', 0, time.time))

    def interpret(self, statements: List[Stmt], locals: Optional[Dict[int, int]] = None):
        """
        Execute a program.

        Args:
            statements: Top-level statements
            locals: Resolution table for these statements; merged into the
                tables of earlier runs so REPL lines can see each other

        Raises:
            GloxRuntimeError: On the first runtime error
        """
        if locals:
            self.locals.update(locals)
        for stmt in statements:
            self.execute(stmt)

    # Statements
    def execute(self, stmt: Stmt) -> Completion:
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)
            return None

        elif isinstance(stmt, Print):
            value = self.evaluate(stmt.expression)
            print(stringify(value), file=self.out if self.out is not None else sys.stdout)
            return None

        elif isinstance(stmt, Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return None

        elif isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None

        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                completion = self.execute(stmt.body)
                if completion is not None:
                    return completion
            return None

        elif isinstance(stmt, Function):
            function = GloxFunction(stmt, self.environment, False)
            self.environment.define(stmt.name.lexeme, function)
            return None

        elif isinstance(stmt, Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return Returned(value)

        elif isinstance(stmt, Class):
            self._execute_class(stmt)
            return None

        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Completion:
        """Run statements in environment, restoring the current one afterwards"""
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                completion = self.execute(stmt)
                if completion is not None:
                    return completion
            return None
        finally:
            self.environment = previous

    def _execute_class(self, stmt: Class):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, GloxClass):
                raise GloxRuntimeError(E_SUPERCLASS_MUST_BE_A_CLASS, stmt.superclass.name,
                                       "Oberklasse muss eine Klasse sein.")

        # Methods close over an extra scope holding 'super'; the class name
        # itself goes into the enclosing scope, outside it.
        enclosing = self.environment
        method_closure = enclosing
        if superclass is not None:
            method_closure = Environment(enclosing)
            method_closure.define(SUPER_NAME, superclass)

        methods: Dict[str, GloxFunction] = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = GloxFunction(
                method, method_closure, method.name.lexeme == INIT_NAME)

        klass = GloxClass(stmt.name.lexeme, superclass, methods)
        enclosing.define(stmt.name.lexeme, klass)

    # Expressions
    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.type == TokenType.BANG:
                return not is_truthy(right)
            if expr.operator.type == TokenType.MINUS:
                self._check_number_operand(expr.operator, right)
                return -right
            raise TypeError(f"Unknown unary operator: {expr.operator.lexeme}")

        elif isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary_op(expr.operator, left, right)

        elif isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, Variable):
            return self._look_up_variable(expr.name, expr)

        elif isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr.id)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, Call):
            return self._eval_call(expr)

        elif isinstance(expr, Get):
            obj = self.evaluate(expr.object)
            if isinstance(obj, GloxInstance):
                return obj.get(expr.name)
            raise GloxRuntimeError(E_NOT_AN_INSTANCE, expr.name,
                                   "Nur Instanzen haben Eigenschaften.")

        elif isinstance(expr, Set):
            obj = self.evaluate(expr.object)
            if not isinstance(obj, GloxInstance):
                raise GloxRuntimeError(E_ONLY_INSTANCES_HAVE_FIELDS, expr.name,
                                       "Nur Instanzen haben Felder.")
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        elif isinstance(expr, This):
            return self._look_up_variable(expr.keyword, expr)

        elif isinstance(expr, Super):
            return self._eval_super(expr)

        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _look_up_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr.id)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _eval_call(self, expr: Call) -> Any:
        callee = self.evaluate(expr.callee)
        if not isinstance(callee, GloxCallable):
            raise GloxRuntimeError(E_NOT_CALLABLE, expr.paren,
                                   "Nur Funktionen und Klassen können aufgerufen werden.")

        arguments = [self.evaluate(argument) for argument in expr.arguments]
        if len(arguments) != callee.arity():
            raise GloxRuntimeError(E_ARITY_MISMATCH, expr.paren,
                                   f"Erwartete {callee.arity()} Argumente, "
                                   f"aber erhielt {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise GloxRuntimeError(E_STACK_OVERFLOW, expr.paren, "Stapelüberlauf.") from None

    def _eval_super(self, expr: Super) -> Any:
        distance = self.locals[expr.id]
        superclass = self.environment.get_at(distance, SUPER_NAME)
        # 'dies' is always bound one scope inside 'super'
        instance = self.environment.get_at(distance - 1, THIS_NAME)

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise GloxRuntimeError(E_UNDEFINED_PROPERTY, expr.method,
                                   f"Undefinierte Eigenschaft '{expr.method.lexeme}'.")
        return method.bind(instance)

    def _eval_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        """Evaluate binary operation"""
        op = operator.type

        if op == TokenType.PLUS:
            if _is_number(left) and _is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise GloxRuntimeError(E_TYPE_MISMATCH, operator,
                                   "Operanden müssen zwei Zahlen oder zwei Zeichenketten sein.")
        elif op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        elif op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        self._check_number_operands(operator, left, right)
        if op == TokenType.MINUS:
            return left - right
        elif op == TokenType.STAR:
            return left * right
        elif op == TokenType.SLASH:
            return divide(left, right)
        elif op == TokenType.LESS:
            return left < right
        elif op == TokenType.LESS_EQUAL:
            return left <= right
        elif op == TokenType.GREATER:
            return left > right
        elif op == TokenType.GREATER_EQUAL:
            return left >= right
        else:
            raise TypeError(f"Unknown binary operator: {operator.lexeme}")

    def _check_number_operand(self, operator: Token, operand: Any):
        if not _is_number(operand):
            raise GloxRuntimeError(E_TYPE_MISMATCH, operator,
                                   f"Operand von '{operator.lexeme}' muss eine Zahl sein.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if not (_is_number(left) and _is_number(right)):
            raise GloxRuntimeError(E_TYPE_MISMATCH, operator,
                                   f"Operanden von '{operator.lexeme}' müssen Zahlen sein.")


# ============================================================================
# Convenience Function
# ============================================================================

def interpret(program: List[Stmt], table: Dict[int, int], out: Optional[TextIO] = None):
    """
    Execute a resolved program in a fresh interpreter.

    Raises:
        GloxRuntimeError: On the first runtime error
    """
    Interpreter(out=out).interpret(program, table)


__all__ = [
    'Interpreter',
    'Returned',
    'Completion',
    'is_truthy',
    'is_equal',
    'stringify',
    'divide',
    'interpret',
]
