"""Starlark Docs Codegen

A Python package for generating Starlark API documentation stubs from
annotated Go API types. Each tagged type becomes a constructor function
stub; every struct reachable from its Spec becomes a class stub plus a
constructor function.
"""

__version__ = "1.0.0"

from .errors import (
    CodegenError,
    DiscoveryError,
    MissingSpecError,
    OutputError,
    TagParseError,
    UnsupportedShapeError,
)
from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    OutputConfig,
    PipelineGenerator,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "AtomicWriter",
    "CodegenError",
    "DiscoveryError",
    "MissingSpecError",
    "OutputError",
    "TagParseError",
    "UnsupportedShapeError",
]
