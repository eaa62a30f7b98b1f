"""
Errors raised by the stub generator.

Every error is fatal to the whole generation run: nothing is written to
the destination once one of these has been raised.
"""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for all generation failures."""

    pass


class DiscoveryError(CodegenError):
    """Raised when the Go package cannot be loaded.

    This can happen when:
    - The source directory does not exist or holds no Go files
    - A Go file has syntax errors
    - The same type name is declared twice in the package
    """

    pass


class TagParseError(CodegenError):
    """Raised when a generation tag on a type is not a boolean."""

    pass


class MissingSpecError(CodegenError):
    """Raised when a generation target has no ``Spec`` field."""

    def __init__(self, type_name: str):
        super().__init__(f"type has no spec: {type_name}")
        self.type_name = type_name


class UnsupportedShapeError(CodegenError):
    """Raised when a field's type cannot be mapped to a stub parameter."""

    def __init__(self, field_name: str, type_name: str, owner: str | None = None):
        message = f"Unrecognized type of member {field_name}: {type_name}"
        if owner:
            message = f"generating type {owner}: {message}"
        super().__init__(message)
        self.field_name = field_name
        self.type_name = type_name
        self.owner = owner

    def with_owner(self, owner: str) -> UnsupportedShapeError:
        """Return a copy of this error attributed to the enclosing type."""
        return UnsupportedShapeError(self.field_name, self.type_name, owner)


class OutputError(CodegenError):
    """Raised when the generated stubs cannot be written.

    The destination is left untouched: content goes to a temporary file
    first and only replaces the destination once fully written.
    """

    pass
