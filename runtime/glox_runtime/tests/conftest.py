"""
Pytest configuration and fixtures for glox_runtime tests.
"""

import io
import os
import sys

import pytest

# Add grandparent directory to path for imports (to find glox_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from glox_runtime.errors import ErrorReporter  # noqa: E402
from glox_runtime.interpreter import Interpreter  # noqa: E402
from glox_runtime.parser import GloxParser  # noqa: E402
from glox_runtime.resolver import Resolver  # noqa: E402
from glox_runtime.runtime import GloxRuntime  # noqa: E402
from glox_runtime.scanner import GloxScanner  # noqa: E402


class RunResult:
    """Captured outcome of running one program"""

    def __init__(self, runtime: GloxRuntime, out: str, err: str):
        self.runtime = runtime
        self.out = out
        self.err = err

    @property
    def lines(self):
        return self.out.splitlines()


@pytest.fixture
def run():
    """Run GLOX source through the full pipeline and capture both streams."""
    def _run(source: str) -> RunResult:
        out, err = io.StringIO(), io.StringIO()
        runtime = GloxRuntime(out=out, err=err)
        runtime.run(source)
        return RunResult(runtime, out.getvalue(), err.getvalue())
    return _run


@pytest.fixture
def parse():
    """Scan and parse source, failing the test on any syntax error."""
    def _parse(source: str):
        reporter = ErrorReporter(io.StringIO())
        tokens = GloxScanner(source, reporter).scan_tokens()
        statements = GloxParser(tokens, reporter).parse()
        assert not reporter.diagnostics, [d.format() for d in reporter.diagnostics]
        return statements
    return _parse


@pytest.fixture
def evaluate(parse):
    """
    Resolve and interpret source in a fresh interpreter.

    Runtime errors propagate so tests can inspect them with pytest.raises.
    Returns the interpreter so globals can be read back.
    """
    def _evaluate(source: str, out=None) -> Interpreter:
        statements = parse(source)
        resolver = Resolver()
        table = resolver.resolve(statements)
        assert not resolver.diagnostics, [d.format() for d in resolver.diagnostics]
        interpreter = Interpreter(out=out if out is not None else io.StringIO())
        interpreter.interpret(statements, table)
        return interpreter
    return _evaluate
