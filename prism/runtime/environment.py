from __future__ import annotations

from typing import Dict, Optional

from prism.language.prism_types import PrismObject
from prism.lexing.token import Token
from prism.utilities.error import PrismRuntimeError


class Environment:
    """One scope of variables, linked to the scope that encloses it.

    The global scope is the only one without an enclosing scope."""

    def __init__(self, enclosing: Optional[Environment] = None) -> None:
        self._values: Dict[str, PrismObject] = dict()
        self.enclosing = enclosing

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def define(self, name: str, value: PrismObject) -> None:
        """Bind `name` in this scope, shadowing or replacing any previous binding."""
        self._values[name] = value

    def assign(self, name: Token, value: PrismObject) -> None:
        environment: Optional[Environment] = self
        while environment is not None:
            if name.lexeme in environment._values:
                environment._values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise PrismRuntimeError.at_token(name, f"Undefined variable '{name.lexeme}'.")

    def get(self, name: Token) -> PrismObject:
        environment: Optional[Environment] = self
        while environment is not None:
            try:
                return environment._values[name.lexeme]
            except KeyError:
                environment = environment.enclosing
        raise PrismRuntimeError.at_token(name, f"Undefined variable '{name.lexeme}'.")
