import sys
from pathlib import Path
from typing import Optional

from prism.lexing.scanner import Scanner
from prism.parsing.parser import Parser
from prism.runtime.interpreter import Interpreter
from prism.utilities import dump_internal, eprint
from prism.utilities.ast_graph import write_graph
from prism.utilities.configuration import Debug
from prism.utilities.error import EXIT_IO_ERROR, EXIT_OK, ErrorHandler, PrismExit
from prism.utilities.token_view import visualize_tokens


class Prism:
    PROMPT_CHARACTER = "> "

    def __init__(self, debug_flags: Debug = Debug(0), *, graph_path: Optional[Path] = None) -> None:
        self.error_handler = ErrorHandler()
        self.debug_flags = debug_flags
        self.graph_path = graph_path
        self.interpreter = Interpreter(self.error_handler)

    def run_file(self, path: str) -> int:
        """Run a script once and return the process exit code."""
        try:
            with open(path, "r", encoding="utf-8") as fil:
                source = fil.read()
        except (OSError, UnicodeDecodeError) as error:
            reason = error.strerror if isinstance(error, OSError) and error.strerror else str(error)
            eprint(f"Could not open file '{path}': {reason}.")
            return EXIT_IO_ERROR
        return self.run_source(source)

    def run_source(self, source: str) -> int:
        """Run a complete program and return the process exit code."""
        try:
            self.run(source)
        except PrismExit as exit_:
            return exit_.code
        return self.error_handler.exit_code

    def run_interactive(self) -> int:
        """Read-eval-print loop. Globals persist between lines; errors do not."""
        while True:
            self.error_handler.reset()
            try:
                line = input(self.PROMPT_CHARACTER)
            except (KeyboardInterrupt, EOFError):  # Exit gracefully on ctrl-c or ctrl-d.
                print()
                return EXIT_OK
            try:
                self.run(line)
            except PrismExit:
                continue

    def run(self, source: str) -> None:
        source = source.replace("\r\n", "\n")

        tokens = Scanner(source, self.error_handler).scan_tokens()
        if self.debug_flags & Debug.DUMP_TOKENS:
            dump_internal("Token", *tokens)
        if self.debug_flags & Debug.VISUALIZE_TOKENS:
            print(visualize_tokens(source, tokens, colour=sys.stdout.isatty()))

        if self.debug_flags & Debug.NO_PARSE:
            self.error_handler.checkpoint()
            raise PrismExit(EXIT_OK)
        statements = Parser(
            tokens,
            self.error_handler,
            dump=bool(self.debug_flags & Debug.DUMP_AST)
        ).parse()

        self.error_handler.checkpoint()
        if self.graph_path is not None:
            if (image := write_graph(self.graph_path, statements)) is not None:
                print(f"AST visualisation created: {image}")
        if self.debug_flags & Debug.NO_INTERPRET:
            raise PrismExit(EXIT_OK)
        self.interpreter.interpret(statements)
