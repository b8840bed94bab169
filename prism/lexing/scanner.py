from typing import List, Optional, Tuple, Union

from prism.language.prism_types import PrismLiteral, prism_is_valid_identifier_name, prism_is_valid_identifier_start
from prism.lexing.token import COMPOUND_TOKENS, SINGLE_CHAR_TOKENS, Tk, Token
from prism.utilities import is_arabic_numeral
from prism.utilities.error import ErrorHandler, PrismLexicalError
from prism.utilities.streamview import StreamView


class Scanner:
    def __init__(self, source: str, error_handler: ErrorHandler) -> None:
        """Produce a list of Tokens from a source string.

        :param source: source string
        :type source: str
        :param error_handler: error reporting manager
        :type error_handler: ErrorHandler
        """
        self._tokens: List[Token] = list()
        self._sv: StreamView[str] = StreamView(source)
        self._error_handler = error_handler
        self._line = 1
        self._done = False

    def scan_tokens(self) -> List[Token]:
        """Scan all tokens in the source stream. Errors are reported, never raised,
        and the list always ends with a single EOF token."""
        while self._sv.has_next() and not self._done:
            # At the beginning of a lexeme.
            self._sv.set_marker()
            self._scan_token()
        self._tokens.append(Token(Tk.EOF, "", None, self._line))
        return self._tokens

    def _advance(self) -> str:
        char = self._sv.advance()
        if char == "\n":
            self._line += 1
        return char

    def _scan_token(self) -> None:
        """Scan the source stream for the next token and add it to the list"""
        char = self._advance()
        next_token: Union[Tk, Tuple[Tk, PrismLiteral], None] = None

        # Match compound tokens before similar single-character versions.
        if (doublet := char + str(self._sv.peek())) in COMPOUND_TOKENS:  # pylint: disable=superfluous-parens
            next_token = Tk(doublet)
            self._advance()
        elif char == "/":
            next_token = self._slash()
        elif char in SINGLE_CHAR_TOKENS:
            next_token = Tk(char)
        elif char == '"':
            next_token = self._string()
        elif char in " \r\t\n":  # Whitespaces are dropped.
            pass
        elif is_arabic_numeral(char):
            next_token = self._number()
        elif prism_is_valid_identifier_start(char):
            next_token = self._identifier()
        else:  # What remains is an error.
            self._error_handler.err(PrismLexicalError(self._line, "Unexpected character."))

        if next_token:  # Handle no-ops.
            if isinstance(next_token, tuple):  # Handle types that have literals.
                self._add_token(*next_token)
            else:
                self._add_token(next_token)

    def _add_token(self, token_type: Tk, literal: Optional[PrismLiteral] = None) -> None:
        """Add a new Token to the list using the passed type and optional literal value"""
        self._tokens.append(Token(token_type, self._sv.get_slice_from_marker(), literal, self._line))

    # ~~~ Helpers for specific token types ~~~

    def _slash(self) -> Optional[Tk]:
        """Decide if the matched slash is division or a comment.
        Return a SLASH token or consume the comment."""
        if self._sv.advance_if_match("/"):  # A comment must be followed by another slash.
            while self._sv.peek() != "\n" and self._sv.has_next():  # A comment takes up the entire line.
                self._advance()
            return None  # No token to be produced this pass.
        return Tk.SLASH

    def _string(self) -> Optional[Tuple[Tk, str]]:
        """Consume an entire string."""
        while self._sv.peek() != '"' and self._sv.has_next():
            self._advance()  # Note that multi-line strings are allowed.
        if not self._sv.has_next():  # Error on unterminated string, and give up on the rest.
            self._error_handler.err(PrismLexicalError(self._line, "Unterminated string."))
            self._done = True
            return None
        # Consume the closing double quotation mark.
        self._advance()
        # Return the type and the the enclosed text, stripping the quotation marks.
        assert self._sv.marker_index is not None
        return Tk.STRING, self._sv[self._sv.marker_index + 1:self._sv.current_index - 1]

    def _number(self) -> Tuple[Tk, float]:
        """Consume an entire number."""
        while is_arabic_numeral(self._sv.peek()):
            self._advance()
        # Consume a decimal point, if there is one. Note that there must be another
        # digit after the decimal: as in, "1234." is a number followed by a dot.
        if self._sv.peek() == "." and is_arabic_numeral(self._sv.peek(1)):
            self._advance()
            while is_arabic_numeral(self._sv.peek()):  # Consume any digits after the decimal point.
                self._advance()
        # Parse the value of the number directly with Python.
        return Tk.NUMBER, float(self._sv.get_slice_from_marker())

    def _identifier(self) -> Tk:
        """Consume an entire identifier and decide if it is a keyword."""
        while prism_is_valid_identifier_name(self._sv.peek()):
            self._advance()
        return Tk.keyword(self._sv.get_slice_from_marker()) or Tk.IDENTIFIER
