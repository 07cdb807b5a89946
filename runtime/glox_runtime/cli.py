"""
GLOX command line

Usage:
    glox            interactive prompt
    glox <script>   run a UTF-8 source file

Exit codes: 64 usage error, 65 scan/parse/resolve error, 70 runtime error.
"""

import argparse
import os
import sys
from typing import List, Optional

from .runtime import EX_USAGE, GloxRuntime

USAGE = "Benutzung: glox [script]"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="glox", description="Interpreter für GLOX, Lox mit deutschen Schlüsselwörtern.")
    parser.add_argument("script", nargs="*", help="Pfad zu einer Quelldatei (ohne Angabe: interaktiv)")
    args = parser.parse_args(argv)

    if len(args.script) > 1:
        print(USAGE)
        return EX_USAGE

    runtime = GloxRuntime()
    if not args.script:
        return runtime.run_prompt()

    path = args.script[0]
    if not os.path.isfile(path):
        print(f"Fehler: Datei '{path}' nicht gefunden.", file=sys.stderr)
        return 1

    return runtime.run_file(path)


if __name__ == "__main__":
    sys.exit(main())
