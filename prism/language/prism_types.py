from typing import Optional, Union

PrismLiteral = Union[str, float]
PrismObject = Union[float, str, bool, None]


def prism_is_valid_identifier_start(char: Optional[str]) -> bool:
    if char is None:
        return False
    return char.isascii() and (char.isalpha() or char == "_")


def prism_is_valid_identifier_name(char: Optional[str]) -> bool:
    if char is None:
        return False
    return prism_is_valid_identifier_start(char) or (char.isascii() and char.isdigit())


def prism_object_to_str(obj: PrismObject) -> str:
    """Represent a Prism value the way `print` shows it."""
    if obj is None:
        return "nil"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    string = str(obj)
    if isinstance(obj, float) and string.endswith(".0"):
        string = string[:-2]  # Output 100.0 as 100, etc.
    return string


def prism_object_to_repr(obj: PrismObject) -> str:
    """Like `prism_object_to_str()`, but strings are quoted. Used by AST dumps."""
    if isinstance(obj, str):
        return f'"{obj}"'
    return prism_object_to_str(obj)


def prism_truth(obj: PrismObject) -> bool:
    """Evaluate the truthiness of a Prism value.

    `false` and `nil` are the only falsy values."""
    if obj is None:
        return False
    if isinstance(obj, bool):
        return obj
    return True


def prism_equality(left: PrismObject, right: PrismObject) -> bool:
    """Values of different types are never equal; `nil` only equals `nil`."""
    if type(left) is type(right):
        return left == right
    return False
