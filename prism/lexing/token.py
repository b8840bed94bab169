from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional

from prism.language.prism_types import PrismLiteral


class Tk(Enum):
    # single-char
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    COMMA = ","
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    SEMICOLON = ";"
    STAR = "*"
    # compoundable
    BANG = "!"
    EQUAL = "="
    GREATER = ">"
    LESS = "<"
    BANG_EQUAL = "!="
    EQUAL_EQUAL = "=="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    SLASH = "/"
    # keywords
    AND = "@AND"
    CLASS = "@CLASS"
    ELSE = "@ELSE"
    FALSE = "@FALSE"
    FOR = "@FOR"
    FUN = "@FUN"
    IF = "@IF"
    NIL = "@NIL"
    OR = "@OR"
    PRINT = "@PRINT"
    RETURN = "@RETURN"
    SUPER = "@SUPER"
    THIS = "@THIS"
    TRUE = "@TRUE"
    VAR = "@VAR"
    WHILE = "@WHILE"
    # literals
    IDENTIFIER = "#IDENTIFIER"
    STRING = "#STRING"
    NUMBER = "#NUMBER"
    EOF = "#EOF"

    @classmethod
    def iter_values(cls) -> Iterator[Any]:
        """Iterate over the values of the enum."""
        for variant in cls:
            yield variant.value

    @classmethod
    def keyword(cls, name: str) -> Optional[Tk]:
        """Look up the keyword spelled `name`. Keywords are case-sensitive and lowercase."""
        if not name.islower():
            return None
        try:
            return cls(f"@{name.upper()}")  # Keywords have enum values in the form "@KEYWORD".
        except ValueError:
            return None


# Keywords start with "@" and the remaining non-punctuation kinds with "#". What is left are
# the punctuation tokens, grouped by length. Compound tokens must be matched first.
SINGLE_CHAR_TOKENS = tuple(
    val for val in Tk.iter_values()
    if isinstance(val, str) and len(val) == 1
)
COMPOUND_TOKENS = tuple(
    val for val in Tk.iter_values()
    if isinstance(val, str) and len(val) == 2 and not val.startswith("@")
)

KEYWORDS = frozenset(variant for variant in Tk if str(variant.value).startswith("@"))
STATEMENT_STARTERS = frozenset({
    Tk.CLASS, Tk.FUN, Tk.VAR, Tk.FOR, Tk.IF, Tk.WHILE, Tk.PRINT, Tk.RETURN,
})


@dataclass(frozen=True)
class Token:
    """A representation of a token. `literal` is only set for NUMBER and STRING tokens."""
    token_type: Tk
    lexeme: str
    literal: Optional[PrismLiteral]
    line: int

    def __eq__(self, other: Any) -> bool:
        """Compare a `Tk` to a `Token`'s own type.

        i.e., a `Token` of type `FOO` is equal to `Tk.FOO`. This provides better
        ergonomics when used in a `StreamView`."""
        if isinstance(other, Tk):
            return self.token_type is other
        if isinstance(other, Token):
            return (
                (self.token_type, self.lexeme, self.literal, self.line)
                == (other.token_type, other.lexeme, other.literal, other.line)
            )
        return NotImplemented

    def __str__(self) -> str:
        attributes = ", ".join(
            f"{name}={getattr(self, name)!r}"
            for name in ("lexeme", "literal", "line")
        )
        return f"{self.token_type.name}: {attributes}"
