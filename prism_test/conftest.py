from io import StringIO
from typing import List, Tuple

import pytest

from prism.lexing.scanner import Scanner
from prism.lexing.token import Token
from prism.parsing.parser import Parser
from prism.parsing.stmt import Stmt
from prism.prism import Prism
from prism.runtime.interpreter import Interpreter
from prism.utilities.error import ErrorHandler


def scan(source: str) -> Tuple[List[Token], ErrorHandler]:
    handler = ErrorHandler(quiet=True)
    return Scanner(source, handler).scan_tokens(), handler


def parse(source: str) -> Tuple[List[Stmt], ErrorHandler]:
    tokens, handler = scan(source)
    return Parser(tokens, handler).parse(), handler


class Session:
    """An interpreter that keeps its globals between `execute()` calls, like the REPL does."""

    def __init__(self) -> None:
        self.handler = ErrorHandler(quiet=True)
        self.output = StringIO()
        self.interpreter = Interpreter(self.handler, output=self.output)

    def execute(self, source: str) -> List[str]:
        """Run `source` and return the lines printed by this call."""
        self.handler.reset()
        stmts, parse_handler = parse(source)
        assert not parse_handler.errors, [str(error) for error in parse_handler.errors]
        start = self.output.tell()
        self.interpreter.interpret(stmts)
        return self.output.getvalue()[start:].splitlines()


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def run(capsys):
    """Run a whole program through the driver. Returns the exit code, stdout and stderr."""
    def _run(source: str, prism: Prism = None) -> Tuple[int, str, str]:
        code = (prism or Prism()).run_source(source)
        captured = capsys.readouterr()
        return code, captured.out, captured.err
    return _run
