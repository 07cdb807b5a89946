"""
GLOX Environment

Chained variable scopes:

    globals
      └── block / function scope (enclosing = globals)
            └── nested block (enclosing = function scope)

Closures keep a reference to the scope they were declared in, so any number
of functions may share (and mutate) one Environment.
"""

from typing import Any, Dict, Optional

from .errors import E_UNDEFINED_VARIABLE, GloxRuntimeError
from .tokens import Token


class Environment:
    """One scope of variable bindings plus a link to its enclosing scope"""

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        """Bind name in this scope; redefinition silently overwrites"""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """Look name up here, then in each enclosing scope"""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise GloxRuntimeError(E_UNDEFINED_VARIABLE, name,
                               f"Undefinierte Variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        """Overwrite the nearest existing binding; never declares"""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise GloxRuntimeError(E_UNDEFINED_VARIABLE, name,
                               f"Undefinierte Variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> "Environment":
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        """Read from the scope exactly `distance` hops out"""
        return self.ancestor(distance).values.get(name)

    def assign_at(self, distance: int, name: Token, value: Any):
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        return f"Environment({sorted(self.values)!r}, enclosing={self.enclosing is not None})"


__all__ = ['Environment']
