"""
Field-type classifier.

Maps the declared Go type of a struct field to the Python parameter that
documents it: a parameter name, a type annotation and a default literal.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass

from ...errors import UnsupportedShapeError
from ...utils import to_snake_case
from ..type_ast import FieldDescriptor, TypeDescriptor, TypeKind

# Field names with a fixed parameter name. "spec_anotations" is the name
# published in the existing API docs and is kept as-is.
ARG_NAME_OVERRIDES = {
    "Labels": "spec_labels",
    "Annotations": "spec_anotations",
}


@dataclass(frozen=True)
class ParamSpec:
    """A rendered function parameter."""

    name: str
    annotation: str
    default: str | None = None  # None means no default


def arg_name(field: FieldDescriptor) -> str:
    """Parameter name for a field. Python keywords get a trailing underscore ("From" -> "from_")."""
    if field.name in ARG_NAME_OVERRIDES:
        return ARG_NAME_OVERRIDES[field.name]
    name = to_snake_case(field.name)
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def is_time_member(field: FieldDescriptor, time_types: list[str] | set[str]) -> bool:
    """Whether the field holds a timestamp (possibly behind a pointer)."""
    t = field.type
    if t is not None and t.kind == TypeKind.POINTER:
        t = t.elem
    return t is not None and t.qualified_name in time_types


def _is_builtin(t: TypeDescriptor | None, name: str) -> bool:
    return t is not None and t.kind == TypeKind.BUILTIN and t.name == name


def _is_struct(t: TypeDescriptor | None) -> bool:
    return t is not None and t.kind == TypeKind.STRUCT


def _annotation(t: TypeDescriptor) -> tuple[str, str] | None:
    """(annotation, default) for a recognized type, None otherwise."""
    kind = t.kind

    if kind == TypeKind.BUILTIN:
        if t.name == "string":
            return "str", '""'
        if t.name == "bool":
            return "bool", "False"
        if t.name == "int32":
            return "int", "0"
        return None

    if kind == TypeKind.ALIAS:
        if _is_builtin(t.underlying, "string"):
            return "str", '""'
        return None

    if kind == TypeKind.POINTER:
        if _is_builtin(t.elem, "string"):
            return "Optional[str]", "None"
        if _is_struct(t.elem):
            return f"Optional[{t.elem.name}]", "None"
        return None

    if kind == TypeKind.MAP:
        # None rather than {}: an unset map is not the same as an empty one
        if _is_builtin(t.key, "string") and _is_builtin(t.elem, "string"):
            return "Dict[str, str]", "None"
        return None

    if kind == TypeKind.SLICE:
        if _is_builtin(t.elem, "string"):
            return "List[str]", "None"
        if _is_struct(t.elem):
            return f"List[{t.elem.name}]", "None"
        return None

    if kind == TypeKind.STRUCT:
        return t.name, "None"

    return None


def classify(field: FieldDescriptor) -> ParamSpec:
    """
    Map a field to its stub parameter.

    Args:
        field: The struct field

    Returns:
        ParamSpec with name, annotation and default literal

    Raises:
        UnsupportedShapeError: If the field's type has no stub mapping
    """
    result = _annotation(field.type) if field.type is not None else None
    if result is None:
        type_name = str(field.type) if field.type is not None else "<unknown>"
        raise UnsupportedShapeError(field.name, type_name)

    annotation, default = result
    return ParamSpec(name=arg_name(field), annotation=annotation, default=default)
