"""
Type AST - the loaded Go type universe.
"""

from .nodes import BUILTIN_TYPES, FieldDescriptor, GoPackage, TypeDescriptor, TypeKind
from .modules import GoModule, find_module
from .parser import GoPackageParser

__all__ = [
    "BUILTIN_TYPES",
    "FieldDescriptor",
    "GoModule",
    "GoPackage",
    "GoPackageParser",
    "TypeDescriptor",
    "TypeKind",
    "find_module",
]
