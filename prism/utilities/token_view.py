"""Colour-coded terminal views of a token stream.

Tokens are grouped in five categories (keyword, identifier, literal, operator and delimiter),
each with its own colour. Nothing here has any effect on scanning or interpretation."""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from termcolor import colored

from prism.lexing.token import KEYWORDS, Tk, Token

LITERALS = frozenset({Tk.STRING, Tk.NUMBER, Tk.TRUE, Tk.FALSE, Tk.NIL})
OPERATORS = frozenset({
    Tk.MINUS, Tk.PLUS, Tk.SLASH, Tk.STAR,
    Tk.BANG, Tk.BANG_EQUAL, Tk.EQUAL, Tk.EQUAL_EQUAL,
    Tk.GREATER, Tk.GREATER_EQUAL, Tk.LESS, Tk.LESS_EQUAL,
})
DELIMITERS = frozenset({
    Tk.LEFT_PAREN, Tk.RIGHT_PAREN, Tk.LEFT_BRACE, Tk.RIGHT_BRACE,
    Tk.COMMA, Tk.DOT, Tk.SEMICOLON,
})

CATEGORY_COLOURS = {
    "literal": "yellow",
    "keyword": "blue",
    "identifier": "green",
    "operator": "magenta",
    "delimiter": "red",
}
LINE_NUMBER_COLOUR = "cyan"
TABLE_WIDTH = 65


def token_category(token_type: Tk) -> Optional[str]:
    # `true`, `false` and `nil` are keywords, but they are shown as literals.
    if token_type in LITERALS:
        return "literal"
    if token_type in KEYWORDS:
        return "keyword"
    if token_type is Tk.IDENTIFIER:
        return "identifier"
    if token_type in OPERATORS:
        return "operator"
    if token_type in DELIMITERS:
        return "delimiter"
    return None


def colour_token_text(token_type: Tk, text: str, *, colour: bool = True) -> str:
    category = token_category(token_type)
    if not colour or category is None:
        return text
    return colored(text, CATEGORY_COLOURS[category])


def _gutter(line: int, colour: bool) -> str:
    text = f"{line:>4} |"
    return f"{colored(text, LINE_NUMBER_COLOUR) if colour else text} "


def _find_lexeme(source: str, lexeme: str, start: int) -> int:
    """Find `lexeme` at or after `start`, looking past any `//` comment in the way.

    Between two tokens there is only whitespace, comments and unexpected characters,
    so a `//` found there always opens a comment."""
    while True:
        found = source.find(lexeme, start)
        comment = source.find("//", start)
        if found == -1 or comment == -1 or found < comment:
            return found
        if (start := source.find("\n", comment)) == -1:
            return -1


def locate_tokens(source: str, tokens: Iterable[Token]) -> Iterator[Tuple[int, Token]]:
    """Yield the offset in `source` of every token that has text."""
    position = 0
    for token in tokens:
        if token.token_type is Tk.EOF or not token.lexeme:
            continue
        if (found := _find_lexeme(source, token.lexeme, position)) == -1:
            continue
        yield found, token
        position = found + len(token.lexeme)


def render_source(source: str, tokens: Sequence[Token], *, colour: bool = True) -> str:
    """Reproduce `source` with each token highlighted and every line numbered.

    Text between tokens (whitespace, comments) is copied through."""
    pieces: List[str] = [_gutter(1, colour)]
    line = 1
    position = 0

    def copy_through(text: str) -> None:
        nonlocal line
        for char in text:
            pieces.append(char)
            if char == "\n":
                line += 1
                pieces.append(_gutter(line, colour))

    for found, token in locate_tokens(source, tokens):
        copy_through(source[position:found])
        # Multi-line strings keep the gutter going.
        for index, segment in enumerate(token.lexeme.split("\n")):
            if index:
                copy_through("\n")
            pieces.append(colour_token_text(token.token_type, segment, colour=colour))
        position = found + len(token.lexeme)
    copy_through(source[position:])
    return "".join(pieces)


def render_token_table(tokens: Iterable[Token], *, colour: bool = True) -> str:
    """List the tokens grouped by source line, one row per token."""
    by_line: Dict[int, List[Token]] = dict()
    for token in tokens:
        by_line.setdefault(token.line, list()).append(token)

    rows = [f"{'IDX':<5}{'TYPE':<20}{'LEXEME':<30}LINE", "-" * TABLE_WIDTH]
    for number, (line, line_tokens) in enumerate(sorted(by_line.items())):
        if number:
            rows.append("-" * TABLE_WIDTH)
        for index, token in enumerate(line_tokens):
            cells = f"{token.token_type.name:<20}{token.lexeme:<30}"
            rows.append(f"{index:<5}{colour_token_text(token.token_type, cells, colour=colour)}{line}")
    return "\n".join(rows)


def visualize_tokens(source: str, tokens: Sequence[Token], *, colour: bool = True) -> str:
    heading = "=== SOURCE CODE WITH HIGHLIGHTING ==="
    table_heading = "=== TOKEN LIST ==="
    if colour:
        heading = colored(heading, attrs=["bold"])
        table_heading = colored(table_heading, attrs=["bold"])
    return "\n".join((
        heading,
        "",
        render_source(source, tokens, colour=colour),
        "",
        table_heading,
        "",
        render_token_table(tokens, colour=colour),
    ))
