"""
GLOX Runtime - Scan, Parse, Resolve, Interpret

Ties the stages together the way the command line uses them:

    source -> GloxScanner -> GloxParser -> Resolver -> Interpreter

Static errors from any of the first three stages stop the run before
anything executes. A runtime error stops the run where it happens. One
GloxRuntime keeps its global environment between runs, which is what the
interactive prompt relies on.
"""

import io
import sys
from typing import Optional, TextIO

from .errors import ErrorReporter, GloxRuntimeError
from .interpreter import Interpreter
from .parser import GloxParser
from .resolver import Resolver
from .scanner import GloxScanner


# Exit codes (sysexits.h)
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

PROMPT = "> "


class GloxRuntime:
    """Main GLOX runtime interface"""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        """
        Initialize runtime

        Args:
            out: Stream for program output (default: sys.stdout)
            err: Stream for diagnostics (default: sys.stderr)
        """
        self.reporter = ErrorReporter(err)
        self.interpreter = Interpreter(out=out)

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def run(self, source: str):
        """Run source text; problems are reported, never raised"""
        tokens = GloxScanner(source, self.reporter).scan_tokens()
        statements = GloxParser(tokens, self.reporter).parse()
        if self.reporter.had_error:
            return

        resolver = Resolver(self.reporter)
        table = resolver.resolve(statements)
        if self.reporter.had_error:
            return

        try:
            self.interpreter.interpret(statements, table)
        except GloxRuntimeError as e:
            self.reporter.runtime_error(e)

    def run_file(self, path: str) -> int:
        """Run a UTF-8 source file and return the process exit code"""
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        self.run(source)

        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK

    def run_prompt(self, stdin: Optional[TextIO] = None, prompt_out: Optional[TextIO] = None) -> int:
        """
        Read-eval-print loop, one line per iteration until end of input.

        Errors on one line do not affect the next; definitions persist.
        """
        stdin = stdin if stdin is not None else sys.stdin
        prompt_out = prompt_out if prompt_out is not None else sys.stdout

        while True:
            print(PROMPT, end="", file=prompt_out, flush=True)
            line = stdin.readline()
            if not line:
                break
            self.run(line)
            self.reporter.reset()

        return EX_OK


# ============================================================================
# Convenience Function
# ============================================================================

def execute_glox(source: str) -> str:
    """
    Run GLOX source and return everything it printed.

    Diagnostics still go to stderr.

    Example:
        >>> execute_glox('drucke 1 + 2;')
        '3\\n'
    """
    out = io.StringIO()
    GloxRuntime(out=out).run(source)
    return out.getvalue()


__all__ = [
    'GloxRuntime',
    'execute_glox',
    'EX_OK',
    'EX_USAGE',
    'EX_DATAERR',
    'EX_SOFTWARE',
]
