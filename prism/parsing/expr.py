from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from prism.language.prism_types import PrismObject, prism_object_to_repr
from prism.lexing.token import Token
from prism.utilities import ast_node_pretty_printer


class ExprNode:
    """Base class for expressions which have differing attributes."""

    def __str__(self) -> str:
        name, values = ast_node_pretty_printer(self, "Expr")
        return f"({name} {' '.join(values)})"


@dataclass(frozen=True)
class AssignmentExpr(ExprNode):
    name: Token
    value: Expr

    def __str__(self) -> str:
        return f"(= {self.name.lexeme} {self.value})"


@dataclass(frozen=True)
class BinaryExpr(ExprNode):
    operator: Token
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.operator.lexeme} {self.left} {self.right})"


@dataclass(frozen=True)
class GroupingExpr(ExprNode):
    expression: Expr


@dataclass(frozen=True)
class LiteralExpr(ExprNode):
    value: PrismObject

    def __str__(self) -> str:
        return prism_object_to_repr(self.value)


@dataclass(frozen=True)
class LogicalExpr(ExprNode):
    operator: Token
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.operator.lexeme} {self.left} {self.right})"


@dataclass(frozen=True)
class UnaryExpr(ExprNode):
    operator: Token
    right: Expr

    def __str__(self) -> str:
        return f"({self.operator.lexeme} {self.right})"


@dataclass(frozen=True)
class VariableExpr(ExprNode):
    name: Token

    def __str__(self) -> str:
        return self.name.lexeme


# The closed set of expression nodes.
Expr = Union[AssignmentExpr, BinaryExpr, GroupingExpr, LiteralExpr, LogicalExpr, UnaryExpr, VariableExpr]
