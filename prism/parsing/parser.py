from __future__ import annotations

from enum import IntEnum, auto
from typing import List, Optional

from prism.lexing.token import STATEMENT_STARTERS, Tk, Token
from prism.parsing.expr import *
from prism.parsing.stmt import *
from prism.utilities import dump_internal
from prism.utilities.error import ErrorHandler, PrismSyntaxError
from prism.utilities.streamview import StreamView

RIGHT_ASSOCIATIVE_OPERATORS = {
    Tk.EQUAL,
}


class Prec(IntEnum):
    NONE = auto()
    ASSIGNMENT = auto()
    OR = auto()
    AND = auto()
    EQUALITY = auto()
    COMPARISON = auto()
    TERM = auto()
    FACTOR = auto()
    UNARY = auto()
    PRIMARY = auto()

    def adjust_for_operator_associativity(self, op: Tk) -> Prec:
        if op in RIGHT_ASSOCIATIVE_OPERATORS:
            return self.__class__(self.value - 1)
        return self


OPERATOR_PRECEDENCE = {
    Tk.STAR: Prec.FACTOR,
    Tk.SLASH: Prec.FACTOR,
    Tk.PLUS: Prec.TERM,
    Tk.MINUS: Prec.TERM,
    Tk.GREATER: Prec.COMPARISON,
    Tk.GREATER_EQUAL: Prec.COMPARISON,
    Tk.LESS: Prec.COMPARISON,
    Tk.LESS_EQUAL: Prec.COMPARISON,
    Tk.EQUAL_EQUAL: Prec.EQUALITY,
    Tk.BANG_EQUAL: Prec.EQUALITY,
    Tk.AND: Prec.AND,
    Tk.OR: Prec.OR,
    Tk.EQUAL: Prec.ASSIGNMENT,
}

LITERAL_KEYWORDS = {
    Tk.FALSE: False,
    Tk.TRUE: True,
    Tk.NIL: None,
}


class Parser:
    """A recursive descent parser for statements, with precedence climbing for expressions.

    The expression parser is motivated by Aleksey Kladov's article on the subject:
    https://matklad.github.io/2020/04/13/simple-but-powerful-pratt-parsing.html.

    Syntax errors are reported to the error handler as they are found. A statement that fails
    to parse is dropped and the parser skips ahead to the next statement boundary, so the
    returned list is only usable if no error was reported.
    """

    def __init__(
            self,
            tokens: List[Token],
            error_handler: ErrorHandler,
            *,
            dump: bool = False
    ) -> None:
        self._tv = StreamView(tokens)
        self._error_handler = error_handler
        self._dump = dump
        self._statements: List[Stmt] = list()

    def parse(self) -> List[Stmt]:
        while self._has_next():
            if (declaration := self._declaration()) is not None:
                self._statements.append(declaration)
        if self._dump and not self._error_handler.had_error:
            dump_internal("AST", *self._statements)
        return self._statements

    # ~~~ Helper functions ~~~

    def _has_next(self) -> bool:
        if self._tv.has_next():
            if self._tv.peek_unwrap().token_type is not Tk.EOF:
                return True
        return False

    def _expect_next(self, expected: Tk, message: str) -> Token:
        if self._tv.match(expected):
            return self._tv.advance()
        raise PrismSyntaxError.at_token(self._tv.peek_unwrap(), message)

    def _expect_punct(self, symbol: Tk, message: str) -> None:
        self._expect_next(symbol, f"Expect '{symbol.value}' {message}.")

    def _synchronize(self) -> None:
        """Discard tokens until a likely statement boundary: just past a semicolon,
        or just before a keyword that starts a statement."""
        if not self._has_next():
            return
        self._tv.advance()
        while self._has_next():
            if self._tv.previous().token_type is Tk.SEMICOLON:
                return
            if self._tv.peek_unwrap().token_type in STATEMENT_STARTERS:
                return
            self._tv.advance()

    # ~~~ Parsers ~~~

    def _declaration(self) -> Optional[Stmt]:
        decl: Optional[Stmt]
        try:
            if self._tv.advance_if_match(Tk.VAR):
                decl = self._variable_declaration_parselet()
            else:
                decl = self._statement()
        except PrismSyntaxError as error:
            self._error_handler.err(error)
            self._synchronize()
            decl = None
        except RecursionError:
            self._error_handler.err(
                PrismSyntaxError.at_token(self._tv.peek_unwrap(), "Expression nesting is too deep.")
            )
            self._synchronize()
            decl = None

        return decl

    def _variable_declaration_parselet(self) -> VarStmt:
        name = self._expect_next(Tk.IDENTIFIER, "Expect variable name.")
        expr = self._expression() if self._tv.advance_if_match(Tk.EQUAL) else None
        self._expect_punct(Tk.SEMICOLON, "after variable declaration")
        return VarStmt(name, expr)

    def _statement(self) -> Stmt:
        stmt: Stmt
        if self._tv.advance_if_match(Tk.IF):
            stmt = self._if_statement_parselet()
        elif self._tv.advance_if_match(Tk.LEFT_BRACE):
            stmt = self._block_statement_parselet()
        elif self._tv.advance_if_match(Tk.PRINT):
            stmt = PrintStmt(self._expression())
            self._expect_punct(Tk.SEMICOLON, "after value")
        elif self._tv.advance_if_match(Tk.WHILE):
            stmt = self._while_statement_parselet()
        else:
            stmt = self._expression_statement_parselet()
        return stmt

    def _block_statement_parselet(self) -> BlockStmt:
        stmts: List[Stmt] = list()
        while not self._tv.match(Tk.RIGHT_BRACE) and self._has_next():
            if (declaration := self._declaration()) is not None:
                stmts.append(declaration)
        self._expect_punct(Tk.RIGHT_BRACE, "after block")
        return BlockStmt(tuple(stmts))

    def _expression_statement_parselet(self) -> ExpressionStmt:
        stmt = ExpressionStmt(self._expression())
        self._expect_punct(Tk.SEMICOLON, "after expression")
        return stmt

    def _if_statement_parselet(self) -> IfStmt:
        self._expect_punct(Tk.LEFT_PAREN, "after 'if'")
        condition = self._expression()
        self._expect_punct(Tk.RIGHT_PAREN, "after if condition")
        then_branch = self._statement()
        else_branch = self._statement() if self._tv.advance_if_match(Tk.ELSE) else None
        return IfStmt(condition, then_branch, else_branch)

    def _while_statement_parselet(self) -> WhileStmt:
        self._expect_punct(Tk.LEFT_PAREN, "after 'while'")
        condition = self._expression()
        self._expect_punct(Tk.RIGHT_PAREN, "after condition")
        return WhileStmt(condition, body=self._statement())

    def _expression(self, min_precedence: Prec = Prec.NONE) -> Expr:
        """Precedence climbing.

            Ex. parsing "a = b or c + d * -e"
            > Parsed (a).
            > Next operator is =, stronger than NONE. = is right associative, so the RHS is
              parsed until one less than ASSIGNMENT, which is NONE again.
              > Parsed (b).
              > Next operator is or, stronger than NONE -> grab (b), parse the RHS until OR.
                > Parsed (c).
                > Next operator is +, stronger than OR -> grab (c), parse the RHS until TERM.
                  > Parsed (d).
                  > Next operator is *, stronger than TERM -> grab (d), parse the RHS until FACTOR.
                    > Parsed (-) -> parse its operand until UNARY.
                      > Parsed (e). No more operators -> unwind.
                    > Parsed (- e) as LHS. No more operators -> unwind.
                  > Parsed (* d (- e)) as LHS -> unwind.
                > Parsed (+ c (* d (- e))) as LHS -> unwind.
              > Parsed (or b (+ c (* d (- e)))) as LHS -> unwind.
            > Parsed (= a (or b (+ c (* d (- e))))).
            > Complete.

        An operator only grabs the LHS if it binds tighter than `min_precedence`, so a run of
        operators of the same precedence is folded from the left.
        """
        # Parse prefix operators and literals into the LHS.
        token = self._tv.peek_unwrap()
        token_type = token.token_type
        left: Expr
        if token_type is Tk.LEFT_PAREN:
            self._tv.advance()
            enclosed = self._expression()
            self._expect_punct(Tk.RIGHT_PAREN, "after expression")
            left = GroupingExpr(enclosed)
        elif token_type in {Tk.BANG, Tk.MINUS}:
            self._tv.advance()
            left = UnaryExpr(token, self._expression(Prec.UNARY))
        elif token_type in LITERAL_KEYWORDS:
            self._tv.advance()
            left = LiteralExpr(LITERAL_KEYWORDS[token_type])
        elif token_type in {Tk.NUMBER, Tk.STRING}:
            self._tv.advance()
            left = LiteralExpr(token.literal)
        elif token_type is Tk.IDENTIFIER:
            self._tv.advance()
            left = VariableExpr(token)
        else:
            raise PrismSyntaxError.at_token(token, "Expect expression.")

        # Parse the operator and the RHS, if possible.
        while self._has_next():
            op = self._tv.peek_unwrap()
            op_type = op.token_type

            # If it's not an operator, or it doesn't bind tightly enough for the parsed LHS to be
            # bound to itself, we're done. The LHS then becomes the RHS of a previously half-parsed,
            # higher-precedence operation.
            prec = OPERATOR_PRECEDENCE.get(op_type)
            if prec is None or prec <= min_precedence:
                break

            # Consume the operator, then parse the RHS up to its precedence,
            # taking right associativity into account, if necessary.
            self._tv.advance()
            right = self._expression(prec.adjust_for_operator_associativity(op_type))

            # Build the new LHS.
            if op_type is Tk.EQUAL:
                left = self._assignment_expression_parselet(op, left, right)
            elif op_type in {Tk.AND, Tk.OR}:
                left = LogicalExpr(op, left, right)
            else:
                left = BinaryExpr(op, left, right)

        return left

    def _assignment_expression_parselet(self, op: Token, left: Expr, right: Expr) -> Expr:
        if isinstance(left, VariableExpr):
            return AssignmentExpr(left.name, right)
        # Report, but don't unwind: the statement is still well-formed otherwise.
        self._error_handler.err(PrismSyntaxError.at_token(op, "Invalid assignment target."))
        return left


__all__ = ("Parser",)
