"""
GLOX Object Model

Runtime values that can be called (functions, natives, classes) and class
instances. Methods are looked up on the class chain and bound to their
receiver on access, so `dies` inside a method always refers to the instance
the method was read from.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from . import ast
from .environment import Environment
from .errors import E_UNDEFINED_PROPERTY, GloxRuntimeError
from .tokens import INIT_NAME, THIS_NAME, Token

if TYPE_CHECKING:
    from .interpreter import Interpreter


class GloxCallable(ABC):
    """Anything a call expression can invoke"""

    @abstractmethod
    def arity(self) -> int:
        """Number of arguments the callable expects"""

    @abstractmethod
    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        """Invoke with arguments already checked against arity()"""


class GloxFunction(GloxCallable):
    """User-defined function or method together with its closure"""

    def __init__(self, declaration: ast.Function, closure: Environment,
                 is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: "GloxInstance") -> "GloxFunction":
        """Return a copy whose closure has `dies` bound to instance"""
        environment = Environment(self.closure)
        environment.define(THIS_NAME, instance)
        return GloxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)

        # An initializer always yields its instance, even on a bare return
        if self.is_initializer:
            return self.closure.get_at(0, THIS_NAME)
        if completion is not None:
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<funktion {self.declaration.name.lexeme}>"


class GloxNative(GloxCallable):
    """Callable implemented in Python, e.g. the global `uhr`"""

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self.fn(*arguments)

    def __str__(self) -> str:
        return "<native funktion>"


class GloxClass(GloxCallable):
    """A class; calling it constructs an instance"""

    def __init__(self, name: str, superclass: Optional["GloxClass"],
                 methods: Dict[str, GloxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[GloxFunction]:
        """Own methods first, then the superclass chain"""
        if name in self.methods:
            return self.methods[name]
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def arity(self) -> int:
        initializer = self.find_method(INIT_NAME)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        instance = GloxInstance(self)
        initializer = self.find_method(INIT_NAME)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


class GloxInstance:
    """Instance of a GloxClass with its own field table"""

    def __init__(self, klass: GloxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """Fields shadow methods; methods come back bound to this instance"""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise GloxRuntimeError(E_UNDEFINED_PROPERTY, name,
                               f"Undefinierte Eigenschaft '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} Instanz"


__all__ = [
    'GloxCallable',
    'GloxFunction',
    'GloxNative',
    'GloxClass',
    'GloxInstance',
]
