"""Render an AST as a GraphViz digraph.

`AstGraph` only reads the tree. `write_graph()` stores the DOT text and, when GraphViz's `dot`
executable can be found, renders it to a PNG next to it."""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from prism.language.prism_types import prism_object_to_repr
from prism.parsing.expr import *
from prism.parsing.stmt import *
from prism.utilities import eprint
from prism.utilities.error import NOT_REACHED

CONTROL_COLOUR = "#c8e6fe"
VARIABLE_COLOUR = "#a7fe9c"
CONSTANT_COLOUR = "#fefdc9"


def escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class AstGraph:
    def __init__(self) -> None:
        self._lines: List[str] = list()
        self._node_counter = 0

    def render(self, program: Union[Sequence[Stmt], Stmt, Expr]) -> str:
        """Produce the DOT text for a whole program, a single statement or a single expression."""
        self._lines = ["digraph AST {", '  node [shape=box, fontname="Arial", fontsize=10];']
        self._node_counter = 0
        if isinstance(program, (list, tuple)):
            root = self._node("Program", CONTROL_COLOUR)
            for stmt in program:
                self._edge(root, self._stmt(stmt))
        elif isinstance(program, StmtNode):
            self._stmt(program)  # type: ignore
        else:
            self._expr(program)  # type: ignore
        self._lines.append("}")
        return "\n".join(self._lines) + "\n"

    def _node(self, label: str, colour: str = "white") -> str:
        node_id = f"node{self._node_counter}"
        self._node_counter += 1
        self._lines.append(f'  {node_id} [label="{escape_label(label)}", style="filled", fillcolor="{colour}"];')
        return node_id

    def _edge(self, source: str, target: str, label: Optional[str] = None) -> None:
        attributes = f' [label="{escape_label(label)}"]' if label else ""
        self._lines.append(f"  {source} -> {target}{attributes};")

    def _stmt(self, stmt: Stmt) -> str:
        match stmt:
            case BlockStmt():
                node = self._node("Block", CONTROL_COLOUR)
                for inner in stmt.statements:
                    self._edge(node, self._stmt(inner))
            case ExpressionStmt():
                node = self._node("Expression", CONTROL_COLOUR)
                self._edge(node, self._expr(stmt.expression))
            case IfStmt():
                node = self._node("If", CONTROL_COLOUR)
                self._edge(node, self._expr(stmt.condition), "condition")
                self._edge(node, self._stmt(stmt.then_branch), "then")
                if stmt.else_branch is not None:
                    self._edge(node, self._stmt(stmt.else_branch), "else")
            case PrintStmt():
                node = self._node("Print", CONTROL_COLOUR)
                self._edge(node, self._expr(stmt.expression))
            case VarStmt():
                node = self._node(f"Var\n{stmt.name.lexeme}", VARIABLE_COLOUR)
                if stmt.initializer is not None:
                    self._edge(node, self._expr(stmt.initializer), "init")
            case WhileStmt():
                node = self._node("While", CONTROL_COLOUR)
                self._edge(node, self._expr(stmt.condition), "condition")
                self._edge(node, self._stmt(stmt.body), "body")
            case _:
                raise NOT_REACHED
        return node

    def _expr(self, expr: Expr) -> str:
        match expr:
            case AssignmentExpr():
                node = self._node(f"Assign\n{expr.name.lexeme}", VARIABLE_COLOUR)
                self._edge(node, self._expr(expr.value))
            case BinaryExpr() | LogicalExpr():
                node = self._node(expr.operator.lexeme, CONTROL_COLOUR)
                self._edge(node, self._expr(expr.left))
                self._edge(node, self._expr(expr.right))
            case GroupingExpr():
                node = self._node("( )", CONTROL_COLOUR)
                self._edge(node, self._expr(expr.expression))
            case LiteralExpr():
                node = self._node(prism_object_to_repr(expr.value), CONSTANT_COLOUR)
            case UnaryExpr():
                node = self._node(expr.operator.lexeme, CONTROL_COLOUR)
                self._edge(node, self._expr(expr.right))
            case VariableExpr():
                node = self._node(expr.name.lexeme, VARIABLE_COLOUR)
            case _:
                raise NOT_REACHED
        return node


def write_graph(path: Path, program: Sequence[Stmt], *, render: bool = True) -> Optional[Path]:
    """Write the DOT file to `path`. Return the rendered image's path, or None if nothing was rendered."""
    path.write_text(AstGraph().render(program), encoding="utf-8")
    if not render:
        return None
    if (dot := shutil.which("dot")) is None:
        eprint("Failed to generate visualisation. Make sure GraphViz is installed.")
        return None
    image = path.with_suffix(".png")
    result = subprocess.run([dot, "-Tpng", str(path), "-o", str(image)], capture_output=True, text=True)
    if result.returncode != 0:
        eprint(f"Failed to generate visualisation: {result.stderr.strip()}")
        return None
    return image
