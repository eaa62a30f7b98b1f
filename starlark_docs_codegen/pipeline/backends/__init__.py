"""
Stub generation backends.
"""

from .base import ArgDoc, StubBackend, escape_docstring
from .starlark_backend import StarlarkBackend

__all__ = ["ArgDoc", "StarlarkBackend", "StubBackend", "escape_docstring"]
