from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from prism.lexing.token import Token
from prism.parsing.expr import Expr
from prism.utilities import ast_node_pretty_printer, indent


class StmtNode:
    """Base class for Prism statements."""

    def __str__(self) -> str:
        name, values = ast_node_pretty_printer(self, "Stmt")
        return f"<{name}: {', '.join(values)}>"


@dataclass(frozen=True)
class BlockStmt(StmtNode):
    """A block statement that is evaluated in its own scope."""
    statements: Tuple[Stmt, ...]

    def __str__(self) -> str:
        inner_text = "".join(indent(str(stmt)) for stmt in self.statements)
        return f"<block:\n{inner_text}>"


@dataclass(frozen=True)
class ExpressionStmt(StmtNode):
    expression: Expr


@dataclass(frozen=True)
class IfStmt(StmtNode):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def __str__(self) -> str:
        inner_text = "".join(indent(str(attr)) for attr in vars(self).values() if attr is not None)
        return f"<if:\n{inner_text}>"


@dataclass(frozen=True)
class PrintStmt(StmtNode):
    expression: Expr


@dataclass(frozen=True)
class VarStmt(StmtNode):
    name: Token
    initializer: Optional[Expr]

    def __str__(self) -> str:
        if self.initializer is None:
            return f"<var: {self.name.lexeme}>"
        return f"<var: {self.name.lexeme}, {self.initializer}>"


@dataclass(frozen=True)
class WhileStmt(StmtNode):
    condition: Expr
    body: Stmt

    def __str__(self) -> str:
        return f"<while:\n{indent(str(self.condition), str(self.body))}>"


# The closed set of statement nodes.
Stmt = Union[BlockStmt, ExpressionStmt, IfStmt, PrintStmt, VarStmt, WhileStmt]
