"""
Node definitions for loaded Go types.

These nodes describe the type universe of one Go package as seen by the
loader: named types declared in the package, builtin types, and the
anonymous pointer/slice/map shapes that fields are declared with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(Enum):
    """Kind of a loaded type."""

    BUILTIN = "builtin"  # string, bool, int32, ...
    STRUCT = "struct"  # named struct type
    POINTER = "pointer"  # *T
    ALIAS = "alias"  # named type over a non-struct type (type Phase string)
    SLICE = "slice"  # []T
    MAP = "map"  # map[K]V
    ARRAY = "array"  # [N]T
    INTERFACE = "interface"  # interface{...}
    EXTERNAL = "external"  # declared in a standard library package, not loaded
    UNSUPPORTED = "unsupported"  # chan, func, generics, ...


BUILTIN_TYPES = {
    "bool",
    "byte",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
    "any",
}


@dataclass(eq=False)
class TypeDescriptor:
    """A type in the loaded universe.

    Named types are unique per (package, name); the loader hands out the
    same instance for every reference, so identity is a valid dedup key.
    """

    kind: TypeKind = TypeKind.UNSUPPORTED
    name: str = ""  # "FooSpec", "string", or the source text of an anonymous shape
    package: str = ""  # import path, "" for builtins and anonymous shapes

    # Struct fields in declaration order
    members: list[FieldDescriptor] = field(default_factory=list)

    # Raw doc comment lines, markers stripped, tag lines included
    comment_lines: list[str] = field(default_factory=list)

    # Pointer/slice/array element, map value
    elem: TypeDescriptor | None = None

    # Map key
    key: TypeDescriptor | None = None

    # Fully resolved type behind an ALIAS
    underlying: TypeDescriptor | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    def __str__(self) -> str:
        return self.qualified_name


@dataclass
class FieldDescriptor:
    """A field of a struct type."""

    name: str = ""
    type: TypeDescriptor | None = None
    comment_lines: list[str] = field(default_factory=list)


@dataclass
class GoPackage:
    """The loaded package: its import path and its named types in source order."""

    path: str = ""
    name: str = ""
    types: list[TypeDescriptor] = field(default_factory=list)
