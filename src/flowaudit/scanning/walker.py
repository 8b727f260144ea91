"""Parameter walker.

Node parameters are plain nested JSON data. They are converted once into a
small tagged-variant tree and then walked, yielding every string leaf with
its dotted/bracketed path and whether it is a dynamic expression.

Paths look like ``headerParameters.parameters[0].value``; array indices at
the root render as ``[0]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Union

from flowaudit.errors.exceptions import ParameterDepthError

DEFAULT_MAX_DEPTH = 64

# Expressions are strings evaluated at run time, marked by a leading "="
EXPRESSION_MARKER = "="


def is_expression(value: str) -> bool:
    """Whether a parameter string is a dynamic expression rather than a literal."""
    return value.startswith(EXPRESSION_MARKER)


# ---------------------------------------------------------------------------
# Tagged-variant parameter tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StringVal:
    value: str


@dataclass(frozen=True, slots=True)
class NumberVal:
    value: int | float


@dataclass(frozen=True, slots=True)
class BoolVal:
    value: bool


@dataclass(frozen=True, slots=True)
class NullVal:
    pass


@dataclass(frozen=True, slots=True)
class ArrayVal:
    items: tuple[ParamValue, ...]


@dataclass(frozen=True, slots=True)
class ObjectVal:
    entries: tuple[tuple[str, ParamValue], ...]


ParamValue = Union[StringVal, NumberVal, BoolVal, NullVal, ArrayVal, ObjectVal]


def build_tree(
    raw: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _path: str = "",
    _depth: int = 0,
) -> ParamValue:
    """Convert raw JSON-like parameters into a tagged tree.

    Unrecognised leaf types (anything that is not JSON data) become
    ``NullVal`` and are never visited.

    Raises:
        ParameterDepthError: nesting exceeds ``max_depth``.
    """
    if _depth > max_depth:
        raise ParameterDepthError(_path, max_depth)

    # bool first: bool is a subclass of int
    if raw is None:
        return NullVal()
    if isinstance(raw, str):
        return StringVal(raw)
    if isinstance(raw, bool):
        return BoolVal(raw)
    if isinstance(raw, (int, float)):
        return NumberVal(raw)
    if isinstance(raw, (list, tuple)):
        return ArrayVal(tuple(
            build_tree(item, max_depth, _child_path(_path, i), _depth + 1)
            for i, item in enumerate(raw)
        ))
    if isinstance(raw, dict):
        return ObjectVal(tuple(
            (str(key), build_tree(value, max_depth, _child_path(_path, str(key)), _depth + 1))
            for key, value in raw.items()
        ))
    return NullVal()


def _child_path(path: str, key: int | str) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParameterString:
    """A string leaf found while walking a parameter tree."""

    value: str
    path: str
    is_expression: bool

    @property
    def top_level_key(self) -> str:
        """First segment of the path (the top-level parameter name)."""
        return self.path.split(".", 1)[0].split("[", 1)[0]

    @property
    def field_name(self) -> str:
        """Last named segment of the path, without array indices."""
        return self.path.rsplit(".", 1)[-1].split("[", 1)[0]


def iter_tree_strings(tree: ParamValue, path: str = "") -> Iterator[ParameterString]:
    """Yield every string leaf of an already-built tree in document order."""
    if isinstance(tree, StringVal):
        yield ParameterString(tree.value, path, is_expression(tree.value))
    elif isinstance(tree, ArrayVal):
        for i, item in enumerate(tree.items):
            yield from iter_tree_strings(item, _child_path(path, i))
    elif isinstance(tree, ObjectVal):
        for key, value in tree.entries:
            yield from iter_tree_strings(value, _child_path(path, key))


def iter_parameter_strings(
    parameters: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[ParameterString]:
    """Yield every string leaf of raw parameters.

    The whole tree is built before the first value is yielded, so a depth
    violation surfaces before any findings are produced for the node.
    """
    tree = build_tree(parameters, max_depth)
    yield from iter_tree_strings(tree)


def walk(
    parameters: Any,
    visit: Callable[[str, str, bool], None],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Call ``visit(value, path, is_expression)`` for every string leaf."""
    for item in iter_parameter_strings(parameters, max_depth):
        visit(item.value, item.path, item.is_expression)
