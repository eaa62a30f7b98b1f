"""
Pipeline - Go API types to Starlark documentation stubs.

1. Phase 1 (Type AST): Parse the Go package into typed descriptors
2. Phase 2 (Analyzer): Select tagged targets, classify fields, collect member types
3. Phase 3 (Backend): Render class and function stubs from Jinja2 templates
4. Phase 4 (Writer): Write the stub module atomically, or print it
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, OutputConfig
from .generator import PipelineGenerator
from .writer import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "AtomicWriter",
]
