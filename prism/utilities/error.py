from __future__ import annotations

from typing import List

from prism.lexing.token import Tk, Token
from prism.utilities import eprint

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA_ERROR = 65
EXIT_SOFTWARE_ERROR = 70
EXIT_IO_ERROR = 74

NOT_REACHED = AssertionError("Unreachable code reached")


class PrismExit(Exception):
    """Raised to stop the current run with the given process exit code."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


class PrismError(Exception):
    """Base class for all diagnostics.

    `where` is the location context printed after "Error": empty for errors
    that are not tied to a token, " at end" at end of input, or " at '<lexeme>'"."""
    compile_time = True

    def __init__(self, line: int, message: str, *, where: str = "") -> None:
        super().__init__(message)
        self.line = line
        self.message = message
        self.where = where

    @classmethod
    def at_token(cls, token: Token, message: str) -> PrismError:
        where = " at end" if token.token_type is Tk.EOF else f" at '{token.lexeme}'"
        return cls(token.line, message, where=where)

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class PrismLexicalError(PrismError):
    pass


class PrismSyntaxError(PrismError):
    pass


class PrismRuntimeError(PrismError):
    compile_time = False

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(token.line, message)
        self.token = token

    @classmethod
    def at_token(cls, token: Token, message: str) -> PrismRuntimeError:
        return cls(token, message)

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.line}]"


class ErrorHandler:
    """Diagnostics context for one compilation unit (a file, a `-c` string or a REPL line).

    It is handed to the scanner, the parser and the interpreter, which report through `err()`.
    The driver consults it to decide whether to keep going and what exit code to report."""

    def __init__(self, *, quiet: bool = False) -> None:
        self.errors: List[PrismError] = list()
        self._quiet = quiet

    def err(self, error: PrismError) -> None:
        self.errors.append(error)
        if not self._quiet:
            eprint(error)

    def reset(self) -> None:
        self.errors.clear()

    @property
    def had_error(self) -> bool:
        return any(error.compile_time for error in self.errors)

    @property
    def had_runtime_error(self) -> bool:
        return any(not error.compile_time for error in self.errors)

    @property
    def exit_code(self) -> int:
        if self.had_error:
            return EXIT_DATA_ERROR
        if self.had_runtime_error:
            return EXIT_SOFTWARE_ERROR
        return EXIT_OK

    def checkpoint(self) -> None:
        """Stop the run if a lexical or syntax error has been reported so far."""
        if self.had_error:
            raise PrismExit(EXIT_DATA_ERROR)
